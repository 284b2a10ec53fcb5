from typing import Any, Dict


class BroadcastGateway:
    """Notification sink for room and per-connection events.

    Holds no game state. Rooms on the transport side are named after the
    room code, so subscribing a connection to a code is enough for
    `to_room` to reach it.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def subscribe(self, connection_id: str, code: str) -> None:
        self.socketio.server.enter_room(connection_id, code, namespace=self.namespace)

    def unsubscribe(self, connection_id: str, code: str) -> None:
        self.socketio.server.leave_room(connection_id, code, namespace=self.namespace)

    def to_room(self, code: str, event: str, payload: Dict[str, Any]) -> None:
        self.socketio.emit(event, payload, to=code, namespace=self.namespace)

    def to_connection(self, connection_id: str, event: str, payload: Dict[str, Any]) -> None:
        self.socketio.emit(event, payload, to=connection_id, namespace=self.namespace)
