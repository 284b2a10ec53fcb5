import logging
import threading
from typing import Dict, Optional

from wordbomb.errors import RoomNotFound
from wordbomb.models import Room, RoomSettings, generate_room_code

from .countdown import CountdownService


class RoomRegistry:
    """Owns the live rooms keyed by code and the connection -> room lookup.

    The registry lock only guards these two tables. It is never held while
    a room lock is being acquired.
    """

    def __init__(
        self,
        countdown: CountdownService,
        settings: Optional[RoomSettings] = None,
        rng=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.countdown = countdown
        self.settings = settings or RoomSettings()
        self._rng = rng
        self.logger = logger or logging.getLogger(__name__)
        self._rooms: Dict[str, Room] = {}
        self._connections: Dict[str, str] = {}
        self._lock = threading.Lock()

    def create_room(self, initiator_connection_id: str) -> Room:
        with self._lock:
            code = generate_room_code(self._rooms, self._rng)
            room = Room(code, initiator_connection_id, self.settings)
            self._rooms[code] = room
            self._connections[initiator_connection_id] = code
        self.logger.info(f"[room-create] room={code} host={initiator_connection_id}")
        return room

    def get_room(self, code: str) -> Room:
        room = self.find_room(code)
        if room is None:
            raise RoomNotFound()
        return room

    def find_room(self, code: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(code)

    def delete_room(self, code: str) -> bool:
        """Remove the room, drop its lookups and stop its countdown. Frees the code."""
        with self._lock:
            room = self._rooms.pop(code, None)
            if room is None:
                return False
            room.closed = True
            for conn in [c for c, rc in self._connections.items() if rc == code]:
                del self._connections[conn]
        self.countdown.cancel(code)
        self.logger.info(f"[room-delete] room={code}")
        return True

    def bind_connection(self, connection_id: str, code: str) -> None:
        with self._lock:
            self._connections[connection_id] = code

    def unbind_connection(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._connections.pop(connection_id, None)

    def room_code_for(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._connections.get(connection_id)

    def __contains__(self, code) -> bool:
        with self._lock:
            return code in self._rooms

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
