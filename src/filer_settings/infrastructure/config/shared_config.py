"""Shared-config side channel — mirrors store events into the library config.

``SharedConfigAdapter`` subscribes to the store's event bus and translates
each ``SettingChanged`` into the shared object's field name, writing the value
before emitting the change notification.
"""

from __future__ import annotations

import logging
from typing import Any

from filer_settings.domain.events import SettingChanged, SettingsEventBus
from filer_settings.domain.ports.shared_config_port import SharedConfigPort

logger = logging.getLogger(__name__)

# Store key -> field name in the file management library's config.
SHARED_FIELD_NAMES: dict[str, str] = {
    "terminal": "terminal",
    "archiver": "archiver",
    "single_click": "single_click",
    "quick_exec": "quick_exec",
    "no_usb_trash": "no_usb_trash",
    "backup_as_hidden": "backup_as_hidden",
    "max_thumbnail_file_size": "thumbnail_max",
    "thumbnail_local_files_only": "thumbnail_local",
    "only_user_templates": "only_user_templates",
    "template_type_once": "template_type_once",
    "template_run_app": "template_run_app",
}


class SharedConfigAdapter:
    """Forward side-channel setting changes to a :class:`SharedConfigPort`."""

    def __init__(self, events: SettingsEventBus, shared: SharedConfigPort) -> None:
        self._shared = shared
        self._unsubscribe = events.subscribe(self._on_changed)

    def close(self) -> None:
        """Stop forwarding changes."""
        self._unsubscribe()

    def _on_changed(self, event: SettingChanged) -> None:
        name = SHARED_FIELD_NAMES.get(event.key)
        if name is None:
            return
        self._shared.set_field(name, event.value)
        self._shared.notify(name)


class InMemorySharedConfig(SharedConfigPort):
    """Shared config kept in a dict; records every notification."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}
        self.notifications: list[str] = []

    def set_field(self, name: str, value: Any) -> None:
        self.values[name] = value

    def notify(self, change_key: str) -> None:
        logger.debug("changed::%s", change_key)
        self.notifications.append(change_key)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)
