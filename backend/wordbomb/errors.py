"""Rejections raised by the game services.

A rejection means the request broke a precondition. It is reported to the
requesting connection only and is always raised before any state changes.
"""
from typing import Any, Dict, Optional


class GameRejection(Exception):
    code = 'Rejected'
    message = 'Request rejected'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {'success': False, 'error': self.code, 'message': str(self)}


class InvalidRequest(GameRejection):
    code = 'InvalidRequest'
    message = 'Malformed request'


class RoomNotFound(GameRejection):
    code = 'RoomNotFound'
    message = 'Room not found'


class RoomFull(GameRejection):
    code = 'RoomFull'
    message = 'Room is full'


class NameTaken(GameRejection):
    code = 'NameTaken'
    message = 'Player name already exists'


class AlreadyJoined(GameRejection):
    code = 'AlreadyJoined'
    message = 'You are already in this room'


class NotHost(GameRejection):
    code = 'NotHost'
    message = 'Only the host can do that'


class NotEnoughPlayers(GameRejection):
    code = 'NotEnoughPlayers'
    message = 'Need at least 2 players'


class InvalidPhase(GameRejection):
    code = 'InvalidPhase'
    message = 'Not allowed in the current game phase'


class NotPlaying(GameRejection):
    code = 'NotPlaying'
    message = 'Game not in playing state'


class NotYourTurn(GameRejection):
    code = 'NotYourTurn'
    message = 'Not your turn'
