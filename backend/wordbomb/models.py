import random
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Phase(str, Enum):
    SETUP = 'setup'
    PLAYING = 'playing'
    FINISHED = 'finished'


@dataclass(frozen=True)
class RoomSettings:
    max_players: int = 8
    min_players: int = 2
    initial_lives: int = 3
    initial_timer_seconds: int = 10
    min_timer_seconds: int = 5
    timer_step_words: int = 5
    min_word_length: int = 0

    @classmethod
    def from_config(cls, config) -> 'RoomSettings':
        return cls(
            max_players=int(config.get('MAX_PLAYERS', 8)),
            min_players=int(config.get('MIN_PLAYERS', 2)),
            initial_lives=int(config.get('INITIAL_LIVES', 3)),
            initial_timer_seconds=int(config.get('INITIAL_TIMER_SEC', 10)),
            min_timer_seconds=int(config.get('MIN_TIMER_SEC', 5)),
            timer_step_words=int(config.get('TIMER_STEP_WORDS', 5)),
            min_word_length=int(config.get('MIN_WORD_LENGTH', 0)),
        )

    def turn_duration(self, used_word_count: int) -> int:
        """Seconds for the next turn; one second less per `timer_step_words` accepted words."""
        step = max(1, self.timer_step_words)
        return max(self.min_timer_seconds, self.initial_timer_seconds - used_word_count // step)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'maxPlayers': self.max_players,
            'initialLives': self.initial_lives,
            'initialTimer': self.initial_timer_seconds,
        }


@dataclass
class Player:
    connection_id: str
    name: str
    lives: int
    eliminated: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    joined_at: datetime = field(default_factory=_utcnow)

    def lose_life(self) -> bool:
        """Take one life. Returns True when this eliminated the player."""
        self.lives = max(0, self.lives - 1)
        if self.lives == 0 and not self.eliminated:
            self.eliminated = True
            return True
        return False

    def restore(self, lives: int) -> None:
        self.lives = lives
        self.eliminated = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'lives': self.lives,
            'isEliminated': self.eliminated,
            'connectionId': self.connection_id,
            'joinedAt': self.joined_at.isoformat(),
        }


def generate_room_code(taken, rng=None) -> str:
    """Generate a 6-digit room code not present in `taken`."""
    rng = rng or random
    while True:
        code = str(rng.randint(100000, 999999))
        if code not in taken:
            return code


class Room:
    """One game session. Callers hold `lock` for every read-modify-write."""

    def __init__(self, code: str, host_connection_id: str, settings: Optional[RoomSettings] = None):
        self.code = code
        self.host_connection_id = host_connection_id
        self.settings = settings or RoomSettings()
        # connection id -> Player, kept in join order
        self.players: Dict[str, Player] = {}
        self.phase = Phase.SETUP
        self.turn_index = 0
        self.active_combination = ''
        self.time_remaining = self.settings.initial_timer_seconds
        self.used_words = set()
        self.created_at = _utcnow()
        self.lock = threading.RLock()
        self.closed = False

    @property
    def turn_order(self) -> List[Player]:
        return list(self.players.values())

    def current_player(self) -> Optional[Player]:
        if self.phase is not Phase.PLAYING:
            return None
        order = self.turn_order
        if 0 <= self.turn_index < len(order):
            return order[self.turn_index]
        return None

    def active_players(self) -> List[Player]:
        return [p for p in self.players.values() if not p.eliminated]

    def earliest_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return min(self.players.values(), key=lambda p: p.joined_at)

    def index_of(self, connection_id: str) -> int:
        for idx, conn in enumerate(self.players):
            if conn == connection_id:
                return idx
        return -1

    def is_host(self, connection_id: str) -> bool:
        return self.host_connection_id == connection_id

    def players_payload(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.players.values()]

    def to_dict(self) -> Dict[str, Any]:
        current = self.current_player()
        return {
            'pin': self.code,
            'phase': self.phase.value,
            'players': self.players_payload(),
            'currentPlayer': current.to_dict() if current else None,
            'activeCombination': self.active_combination,
            'timeRemaining': self.time_remaining,
            'usedWords': sorted(self.used_words),
            'settings': self.settings.to_dict(),
            'createdAt': self.created_at.isoformat(),
        }
