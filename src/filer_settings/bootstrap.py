"""Composition Root — Dependency Injection Container.

This module is the ONLY place where concrete infrastructure classes are
imported and wired together. Consumers receive the container's store instead
of looking one up globally.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional

from filer_settings.domain.events import SettingsEventBus
from filer_settings.domain.models.settings import DesktopFont, FilerSettings
from filer_settings.domain.ports.settings_port import SettingsPort
from filer_settings.domain.ports.shared_config_port import SharedConfigPort
from filer_settings.infrastructure.config.settings_store import SettingsStore
from filer_settings.infrastructure.config.shared_config import (
    InMemorySharedConfig,
    SharedConfigAdapter,
)


class Container:
    """Owns the process-wide settings store and its side channel.

    Usage::

        container = Container()
        container.store.load("default")
        container.store.terminal = "xterm"
        container.store.save()
    """

    def __init__(
        self,
        shared_config: Optional[SharedConfigPort] = None,
        *,
        default_font: Optional[Callable[[], DesktopFont]] = None,
        trash_probe: Optional[Callable[[], bool]] = None,
        icon_theme_probe: Optional[Callable[[], str]] = None,
        environ: Optional[Mapping[str, str]] = None,
        system_dirs: Optional[Iterable[Path]] = None,
    ) -> None:
        self._events = SettingsEventBus()
        self._shared_config = shared_config or InMemorySharedConfig()
        # Subscribe before the store exists so the first load is mirrored.
        self._adapter = SharedConfigAdapter(self._events, self._shared_config)
        self._store = SettingsStore(
            self._events,
            default_font=default_font,
            trash_probe=trash_probe,
            icon_theme_probe=icon_theme_probe,
            environ=environ,
            system_dirs=system_dirs,
        )

    # -- Port accessors ------------------------------------------------------

    @property
    def store(self) -> SettingsStore:
        return self._store

    @property
    def settings_port(self) -> SettingsPort:
        return self._store

    @property
    def settings(self) -> FilerSettings:
        return self._store.settings

    @property
    def events(self) -> SettingsEventBus:
        return self._events

    @property
    def shared_config(self) -> SharedConfigPort:
        return self._shared_config

    def close(self) -> None:
        """Detach the shared-config adapter from the store."""
        self._adapter.close()
