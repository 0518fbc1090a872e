"""Change events published by the settings store.

The store publishes a ``SettingChanged`` for every write to a side-channel
field. Subscribers are called synchronously, in subscription order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

SettingHandler = Callable[["SettingChanged"], None]


@dataclass(frozen=True)
class SettingChanged:
    """A committed change to a side-channel field."""

    key: str
    value: Any


class SettingsEventBus:
    """Synchronous publish/subscribe hub for ``SettingChanged`` events."""

    def __init__(self) -> None:
        self._handlers: list[SettingHandler] = []

    def subscribe(self, handler: SettingHandler) -> Callable[[], None]:
        """Register *handler*; return a callable that unregisters it."""
        self._handlers.append(handler)
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: SettingHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, event: SettingChanged) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Handler for setting '%s' failed", event.key)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
