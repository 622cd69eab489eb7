import logging
import uuid
from typing import Dict, Union

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Fan-out registry for relay connections.

    Messages are forwarded as received to every other open connection. There
    is no filtering, ordering key or history: a client that connects later
    never sees what was sent before it arrived.
    """

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    @property
    def active_count(self) -> int:
        return len(self.active_connections)

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self.active_connections[connection_id] = websocket
        logger.info("Relay client %s connected (%d open)", connection_id, self.active_count)
        return connection_id

    def disconnect(self, connection_id: str):
        if self.active_connections.pop(connection_id, None) is not None:
            logger.info("Relay client %s disconnected (%d open)", connection_id, self.active_count)

    async def broadcast(self, sender_id: str, payload: Union[str, bytes]) -> int:
        """Send ``payload`` unchanged to every connection except the sender.

        Text goes out as a text frame, bytes as a binary frame.

        Returns the number of peers the message reached. A peer whose send
        fails is dropped from the registry; the rest still get the message.
        """
        delivered = 0
        # Snapshot: disconnects during the awaits below mutate the dict
        for connection_id, connection in list(self.active_connections.items()):
            if connection_id == sender_id:
                continue
            try:
                if isinstance(payload, bytes):
                    await connection.send_bytes(payload)
                else:
                    await connection.send_text(payload)
            except Exception as e:
                logger.warning("Dropping relay client %s after failed send: %s", connection_id, e)
                self.disconnect(connection_id)
                continue
            delivered += 1
        return delivered
