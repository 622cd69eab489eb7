import asyncio
import logging
from typing import Callable, Optional

import websockets
from websockets.exceptions import WebSocketException

from .events import InventoryEvent, dump_event, parse_event

logger = logging.getLogger(__name__)

MAX_RECONNECT_ATTEMPTS = 5
BASE_RECONNECT_DELAY = 1.0   # seconds
MAX_RECONNECT_DELAY = 10.0   # seconds


def reconnect_delay(attempt: int) -> float:
    """Delay before reconnect number ``attempt`` (0-based): 1, 2, 4, 8, 10..."""
    return min(BASE_RECONNECT_DELAY * 2 ** attempt, MAX_RECONNECT_DELAY)


class RelayClient:
    """Reconnecting connection to the broadcast relay.

    Inbound events go to ``on_event``. After ``max_attempts`` failed
    reconnects in a row the client gives up for good; a new client is needed
    to resume cross-device sync.
    """

    def __init__(
        self,
        url: str,
        on_event: Callable[[InventoryEvent], None],
        max_attempts: int = MAX_RECONNECT_ATTEMPTS,
        connect=None,
    ):
        self.url = url
        self.on_event = on_event
        self.max_attempts = max_attempts
        self._connect = connect or websockets.connect
        self._ws = None
        self._task: Optional[asyncio.Task] = None
        self._closing = False
        self.attempts = 0
        self.abandoned = False

    @property
    def connected(self) -> bool:
        return self._ws is not None

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def run(self):
        while not self._closing:
            try:
                async with self._connect(self.url) as ws:
                    self._ws = ws
                    self.attempts = 0
                    logger.info("WebSocket connected to %s", self.url)
                    async for message in ws:
                        self._handle_message(message)
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.warning("WebSocket error: %s", e)
            finally:
                self._ws = None

            if self._closing:
                break
            logger.info("WebSocket disconnected")
            if self.attempts >= self.max_attempts:
                self.abandoned = True
                logger.error("Relay unreachable after %d attempts, giving up", self.attempts)
                return
            delay = reconnect_delay(self.attempts)
            self.attempts += 1
            await asyncio.sleep(delay)

    def _handle_message(self, message):
        try:
            event = parse_event(message)
        except ValueError as e:
            logger.error("WebSocket message parse error: %s", e)
            return
        logger.debug("WebSocket message received: %s", event.type)
        try:
            self.on_event(event)
        except Exception:
            logger.exception("Handling relay event %s failed", event.type)

    async def send(self, event: InventoryEvent) -> bool:
        ws = self._ws
        if ws is None:
            logger.warning("WebSocket not connected, cannot send %s", event.type)
            return False
        try:
            await ws.send(dump_event(event))
        except WebSocketException as e:
            logger.warning("WebSocket send of %s failed: %s", event.type, e)
            return False
        logger.debug("WebSocket message sent: %s", event.type)
        return True

    async def close(self):
        self._closing = True
        if self._ws is not None:
            await self._ws.close()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
