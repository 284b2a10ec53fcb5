import logging
from typing import Optional

from wordbomb.errors import InvalidPhase, NotEnoughPlayers, NotHost, NotPlaying, NotYourTurn
from wordbomb.models import Phase, Player, Room

from .combinations import CombinationGenerator
from .countdown import CountdownService
from .validator import WordValidator


class TurnStateMachine:
    """Setup -> Playing -> Finished, with an explicit reset back to Setup.

    Every method expects the caller to hold `room.lock`.
    """

    def __init__(
        self,
        countdown: CountdownService,
        combinations: CombinationGenerator,
        validator: WordValidator,
        gateway,
        logger: Optional[logging.Logger] = None,
    ):
        self.countdown = countdown
        self.combinations = combinations
        self.validator = validator
        self.gateway = gateway
        self.logger = logger or logging.getLogger(__name__)

    def start(self, room: Room, connection_id: str) -> None:
        if not room.is_host(connection_id):
            raise NotHost()
        if room.phase is not Phase.SETUP:
            raise InvalidPhase('Game has already started or is finished')
        if len(room.players) < room.settings.min_players:
            raise NotEnoughPlayers(f'Need at least {room.settings.min_players} players')

        room.phase = Phase.PLAYING
        room.turn_index = 0
        room.used_words.clear()
        room.active_combination = self.combinations.generate()
        room.time_remaining = room.settings.initial_timer_seconds
        self.countdown.start(room.code)

        current = room.current_player()
        self.logger.info(
            f"[game-start] room={room.code} players={len(room.players)} first={current.name} combo={room.active_combination}"
        )
        self.gateway.to_room(room.code, 'game-started', {
            'phase': room.phase.value,
            'currentPlayer': current.to_dict(),
            'activeCombination': room.active_combination,
            'timeRemaining': room.time_remaining,
            'players': room.players_payload(),
        })

    def advance_turn(self, room: Room) -> None:
        order = room.turn_order
        # Callers finish the game first when fewer than two players are
        # active, so at least one non-eliminated slot exists here.
        next_index = (room.turn_index + 1) % len(order)
        while order[next_index].eliminated:
            next_index = (next_index + 1) % len(order)

        room.turn_index = next_index
        room.active_combination = self.combinations.generate()
        room.time_remaining = room.settings.turn_duration(len(room.used_words))

        current = order[next_index]
        self.logger.info(
            f"[turn] room={room.code} player={current.name} combo={room.active_combination} time={room.time_remaining}s"
        )
        self.gateway.to_room(room.code, 'turn-changed', {
            'currentPlayer': current.to_dict(),
            'activeCombination': room.active_combination,
            'timeRemaining': room.time_remaining,
            'players': room.players_payload(),
        })

    def apply_elimination(self, room: Room, player: Player) -> None:
        """Cost of a wrong word or a timeout: one life, then finish or pass the turn."""
        if player.lose_life():
            self.logger.info(f"[eliminated] room={room.code} player={player.name}")
            self.gateway.to_room(room.code, 'player-eliminated', {'player': player.to_dict()})

        if len(room.active_players()) <= 1:
            self.finish(room)
        else:
            self.advance_turn(room)

    def finish(self, room: Room) -> None:
        room.phase = Phase.FINISHED
        room.active_combination = ''
        room.time_remaining = 0
        self.countdown.cancel(room.code)

        active = room.active_players()
        winner = active[0] if active else None
        self.logger.info(f"[game-end] room={room.code} winner={winner.name if winner else None}")
        self.gateway.to_room(room.code, 'game-ended', {
            'winner': winner.to_dict() if winner else None,
            'players': room.players_payload(),
            'phase': room.phase.value,
        })

    def submit_word(self, room: Room, connection_id: str, word: str) -> bool:
        if room.phase is not Phase.PLAYING:
            raise NotPlaying()
        current = room.current_player()
        if current is None or current.connection_id != connection_id:
            raise NotYourTurn()

        verdict = self.validator.validate(word, room.active_combination, room.used_words)
        if verdict.accepted:
            room.used_words.add(word)
            self.logger.info(f"[word-accept] room={room.code} player={current.name} word={word}")
            self.gateway.to_room(room.code, 'word-accepted', {
                'word': word,
                'player': current.to_dict(),
                'usedWords': sorted(room.used_words),
            })
            self.advance_turn(room)
            return True

        self.logger.info(f"[word-reject] room={room.code} player={current.name} word={word} reason={verdict.reason}")
        self.gateway.to_room(room.code, 'word-rejected', {
            'word': word,
            'player': current.to_dict(),
            'reason': verdict.reason,
            'message': verdict.message,
        })
        self.apply_elimination(room, current)
        return False

    def tick(self, room: Room) -> bool:
        """One countdown second. Returns False once the game is no longer running."""
        room.time_remaining -= 1
        if room.time_remaining <= 0:
            current = room.current_player()
            self.logger.info(f"[timer-expire] room={room.code} player={current.name if current else None}")
            if current is not None:
                self.apply_elimination(room, current)
            return room.phase is Phase.PLAYING

        self.gateway.to_room(room.code, 'timer-update', {'timeRemaining': room.time_remaining})
        return True

    def handle_departure(self, room: Room, departed_index: int, held_turn: bool) -> None:
        """Keep the turn consistent after a player left a running game."""
        if room.phase is not Phase.PLAYING or departed_index < 0:
            return
        if departed_index < room.turn_index:
            room.turn_index -= 1

        if len(room.active_players()) <= 1:
            self.finish(room)
            return
        if held_turn:
            # advance_turn steps forward from here, landing on the slot
            # the departed player vacated.
            room.turn_index = (departed_index - 1) % len(room.players)
            self.advance_turn(room)

    def reset(self, room: Room, connection_id: str) -> None:
        if not room.is_host(connection_id):
            raise NotHost()
        if room.phase is not Phase.FINISHED:
            raise InvalidPhase('Only a finished game can be reset')

        room.phase = Phase.SETUP
        room.turn_index = 0
        room.used_words.clear()
        room.active_combination = ''
        room.time_remaining = room.settings.initial_timer_seconds
        for player in room.players.values():
            player.restore(room.settings.initial_lives)

        self.logger.info(f"[game-reset] room={room.code}")
        self.gateway.to_room(room.code, 'game-reset', {
            'phase': room.phase.value,
            'players': room.players_payload(),
        })
