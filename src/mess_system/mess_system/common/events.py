"""In-process event bus used to notify read-side consumers about billing changes."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]


class EventBus:
    """Synchronous publish/subscribe channel.

    Handlers run inline in the publishing request. A failing handler is logged
    and skipped so it never undoes work the publisher already committed.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: Handler) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Registered handler for event type: %s", event_type)

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: str, payload: Optional[Dict[str, Any]] = None) -> None:
        handlers = list(self._handlers.get(event_type, []))
        if not handlers:
            logger.debug("No handlers for event type: %s", event_type)
            return

        data = dict(payload or {})
        for handler in handlers:
            try:
                handler(data)
            except Exception:
                logger.exception("Handler for %s failed", event_type)
