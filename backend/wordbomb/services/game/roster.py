import logging
from dataclasses import dataclass
from typing import Optional

from wordbomb.errors import AlreadyJoined, NameTaken, RoomFull
from wordbomb.models import Player, Room

from .registry import RoomRegistry


@dataclass
class LeaveResult:
    room: Room
    player: Optional[Player] = None
    index: int = -1
    room_deleted: bool = False
    new_host: Optional[str] = None


class RosterManager:
    """Adds and removes players. Callers hold the room lock."""

    def __init__(self, registry: RoomRegistry, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)

    def check_join(self, room: Room, connection_id: str, name: str) -> None:
        """Raise the rejection a join would hit, without changing the room."""
        if connection_id in room.players:
            raise AlreadyJoined()
        if len(room.players) >= room.settings.max_players:
            raise RoomFull()
        if any(p.name == name for p in room.players.values()):
            raise NameTaken()

    def join(self, room: Room, connection_id: str, name: str) -> Player:
        self.check_join(room, connection_id, name)
        player = Player(connection_id=connection_id, name=name, lives=room.settings.initial_lives)
        room.players[connection_id] = player
        self.registry.bind_connection(connection_id, room.code)
        self.logger.info(f"[join] room={room.code} player={name} conn={connection_id} size={len(room.players)}")
        return player

    def leave(self, room: Room, connection_id: str) -> LeaveResult:
        """Remove the connection from the room.

        Deletes the room once nobody is left. When the host leaves, the
        earliest-joined remaining player is promoted. The turn is not
        touched here.
        """
        index = room.index_of(connection_id)
        player = room.players.pop(connection_id, None)
        self.registry.unbind_connection(connection_id)
        result = LeaveResult(room=room, player=player, index=index)

        if not room.players:
            self.registry.delete_room(room.code)
            result.room_deleted = True
            return result

        if room.is_host(connection_id):
            successor = room.earliest_player()
            room.host_connection_id = successor.connection_id
            result.new_host = successor.connection_id
            self.logger.info(f"[host-change] room={room.code} new_host={successor.name}")

        if player is not None:
            self.logger.info(f"[leave] room={room.code} player={player.name} size={len(room.players)}")
        return result
