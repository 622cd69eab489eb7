import logging
from typing import Callable, Dict, List

from .events import InventoryEvent, dump_event, parse_event

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_NAME = "easymart-inventory"

Listener = Callable[[InventoryEvent], None]


class ChannelClosedError(RuntimeError):
    pass


class BroadcastChannel:
    """Named same-origin channel between windows of one process.

    Every channel opened under the same name receives what the others post,
    never its own messages. Each receiver gets an independent copy of the
    event, decoded from the serialised form.
    """

    _registry: Dict[str, List["BroadcastChannel"]] = {}

    def __init__(self, name: str = DEFAULT_CHANNEL_NAME):
        self.name = name
        self.closed = False
        self._listeners: List[Listener] = []
        self._registry.setdefault(name, []).append(self)

    def add_listener(self, listener: Listener):
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def post_message(self, event: InventoryEvent) -> int:
        """Deliver to every other open channel with this name.

        Returns the number of channels reached.
        """
        if self.closed:
            raise ChannelClosedError(f"Channel {self.name!r} is closed")
        payload = dump_event(event)
        delivered = 0
        for channel in list(self._registry.get(self.name, [])):
            if channel is self or channel.closed:
                continue
            channel._deliver(parse_event(payload))
            delivered += 1
        return delivered

    def _deliver(self, event: InventoryEvent):
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # a failing listener is logged; delivery continues
                logger.exception("Listener on channel %s failed for %s", self.name, event.type)

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._listeners.clear()
        peers = self._registry.get(self.name, [])
        if self in peers:
            peers.remove(self)
        if not peers:
            self._registry.pop(self.name, None)
