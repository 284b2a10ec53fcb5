import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from wordbomb.errors import InvalidRequest, RoomNotFound
from wordbomb.models import Phase, Player, Room, RoomSettings

from .combinations import CombinationGenerator
from .countdown import CountdownService
from .lexicon import Lexicon
from .registry import RoomRegistry
from .roster import RosterManager
from .turns import TurnStateMachine
from .validator import WordValidator


class GameCoordinator:
    """Serialized entry point for every room mutation.

    Each operation resolves the room through the registry, then runs to
    completion under that room's lock, so inbound requests and countdown
    ticks for one room never interleave. Different rooms never share a lock.
    """

    def __init__(
        self,
        gateway,
        lexicon: Optional[Lexicon] = None,
        combinations: Optional[CombinationGenerator] = None,
        settings: Optional[RoomSettings] = None,
        tick_interval: float = 1.0,
        start_task=None,
        sleep=None,
        autostart_countdown: bool = True,
        rng=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.gateway = gateway
        self.settings = settings or RoomSettings()
        self.logger = logger or logging.getLogger(__name__)
        self.countdown = CountdownService(
            self.tick,
            interval=tick_interval,
            start_task=start_task,
            sleep=sleep,
            autostart=autostart_countdown,
            logger=self.logger,
        )
        self.registry = RoomRegistry(self.countdown, self.settings, rng=rng, logger=self.logger)
        self.roster = RosterManager(self.registry, logger=self.logger)
        self.validator = WordValidator(lexicon or Lexicon.default(), min_length=self.settings.min_word_length)
        self.turns = TurnStateMachine(
            self.countdown,
            combinations or CombinationGenerator(),
            self.validator,
            gateway,
            logger=self.logger,
        )

    @contextmanager
    def _locked(self, code) -> Iterator[Room]:
        room = self.registry.get_room(_clean_pin(code))
        with room.lock:
            if room.closed:
                raise RoomNotFound()
            yield room

    def create_room(self, connection_id: str) -> Room:
        # One connection is bound to one room at a time
        self.disconnect(connection_id)
        room = self.registry.create_room(connection_id)
        self.gateway.subscribe(connection_id, room.code)
        return room

    def join_room(self, connection_id: str, pin, name) -> Tuple[Room, Player]:
        if not isinstance(name, str) or not name.strip():
            raise InvalidRequest('playerName is required')
        code = _clean_pin(pin)
        current = self.registry.room_code_for(connection_id)
        if current is not None and current != code:
            # The old room is only released once the new one would accept the join
            with self._locked(code) as room:
                self.roster.check_join(room, connection_id, name)
            self.disconnect(connection_id)

        with self._locked(code) as room:
            player = self.roster.join(room, connection_id, name)
            self.gateway.subscribe(connection_id, room.code)
            players = room.players_payload()
            self.gateway.to_room(room.code, 'players-updated', players)
            self.gateway.to_room(room.code, 'player-joined', {
                'player': player.to_dict(),
                'message': f'{name} joined the game',
            })
            return room, player

    def start_game(self, connection_id: str, pin) -> Room:
        with self._locked(pin) as room:
            self.turns.start(room, connection_id)
            return room

    def submit_word(self, connection_id: str, pin, word) -> bool:
        if not isinstance(word, str):
            raise InvalidRequest('word is required')
        with self._locked(pin) as room:
            return self.turns.submit_word(room, connection_id, word.strip())

    def reset_game(self, connection_id: str, pin) -> Room:
        with self._locked(pin) as room:
            self.turns.reset(room, connection_id)
            return room

    def disconnect(self, connection_id: str) -> bool:
        """Release everything tied to the connection. Returns False if it was in no room."""
        code = self.registry.room_code_for(connection_id)
        if code is None:
            return False
        room = self.registry.find_room(code)
        if room is None:
            self.registry.unbind_connection(connection_id)
            return False

        with room.lock:
            if room.closed:
                self.registry.unbind_connection(connection_id)
                return False
            current = room.current_player()
            held_turn = current is not None and current.connection_id == connection_id
            result = self.roster.leave(room, connection_id)
            self.gateway.unsubscribe(connection_id, code)
            if result.room_deleted:
                return True

            self.gateway.to_room(code, 'players-updated', room.players_payload())
            self.gateway.to_room(code, 'player-left', {
                'connectionId': connection_id,
                'message': f'{result.player.name} left the game' if result.player else 'A player left the game',
            })
            if result.player is not None:
                self.turns.handle_departure(room, result.index, held_turn)
            if result.new_host:
                self.gateway.to_connection(result.new_host, 'host-changed', {'isHost': True})
            return True

    def tick(self, code: str, token: str) -> bool:
        """Countdown callback. Returns False when the countdown should stop."""
        room = self.registry.find_room(code)
        if room is None:
            self.countdown.cancel(code, token)
            return False
        with room.lock:
            if not self.countdown.is_current(code, token):
                return False
            if room.closed or room.phase is not Phase.PLAYING:
                self.countdown.cancel(code, token)
                return False
            return self.turns.tick(room)

    def snapshot(self, pin) -> dict:
        with self._locked(pin) as room:
            return room.to_dict()


def _clean_pin(pin) -> str:
    if isinstance(pin, int) and not isinstance(pin, bool):
        pin = str(pin)
    if not isinstance(pin, str) or not pin.strip():
        raise InvalidRequest('pin is required')
    return pin.strip()
