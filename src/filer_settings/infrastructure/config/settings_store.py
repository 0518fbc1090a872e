"""Settings store — loads/saves ``FilerSettings`` for a named profile.

Implements ``SettingsPort``. One store exists per process; the composition
root creates it and passes it to whatever needs settings. The store does no
locking: callers on several threads must serialize access themselves.
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

from filer_settings.domain.errors import ProfileNameError
from filer_settings.domain.events import SettingChanged, SettingsEventBus
from filer_settings.domain.models.settings import (
    DesktopFont,
    FilerSettings,
    shared_field_writes,
)
from filer_settings.domain.ports.settings_port import SettingsPort
from filer_settings.infrastructure.config.ini_file import (
    decode_settings,
    encode_settings,
    read_sections,
    write_sections,
)
from filer_settings.infrastructure.config.paths import (
    DEFAULT_PROFILE,
    resolve_profile_dir,
    settings_path,
    validate_profile_name,
)

logger = logging.getLogger(__name__)

_PLAIN_ICON_THEMES = ("", "hicolor")


class _SharedField:
    """Store attribute whose writes are published as ``SettingChanged``."""

    def __init__(self, section: str) -> None:
        self.section = section
        self.key = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.key = name

    def __get__(self, store: Optional[SettingsStore], owner: type) -> Any:
        if store is None:
            return self
        return getattr(getattr(store.settings, self.section), self.key)

    def __set__(self, store: SettingsStore, value: Any) -> None:
        store._commit(self.section, self.key, value)


class SettingsStore(SettingsPort):
    """Concrete implementation of :class:`SettingsPort`.

    Parameters
    ----------
    events : SettingsEventBus | None
        Bus that receives a ``SettingChanged`` for every side-channel write.
    default_font : Callable[[], DesktopFont] | None
        Desktop default font, used when the file has no ``Font`` key.
    trash_probe : Callable[[], bool] | None
        Reports whether the desktop supports a trash can.
    icon_theme_probe : Callable[[], str] | None
        Returns the name of the active icon theme.
    environ, system_dirs
        Overrides for path resolution (useful for testing).
    """

    # Side-channel fields, mirrored into the shared library configuration.
    terminal = _SharedField("system")
    archiver = _SharedField("system")
    only_user_templates = _SharedField("system")
    template_type_once = _SharedField("system")
    template_run_app = _SharedField("system")
    single_click = _SharedField("behavior")
    quick_exec = _SharedField("behavior")
    no_usb_trash = _SharedField("behavior")
    backup_as_hidden = _SharedField("folder_view")
    max_thumbnail_file_size = _SharedField("thumbnail")
    thumbnail_local_files_only = _SharedField("thumbnail")

    def __init__(
        self,
        events: Optional[SettingsEventBus] = None,
        *,
        default_font: Optional[Callable[[], DesktopFont]] = None,
        trash_probe: Optional[Callable[[], bool]] = None,
        icon_theme_probe: Optional[Callable[[], str]] = None,
        environ: Optional[Mapping[str, str]] = None,
        system_dirs: Optional[Iterable[Path]] = None,
    ) -> None:
        self._events = events if events is not None else SettingsEventBus()
        self._default_font = default_font or DesktopFont
        self._environ = environ
        self._system_dirs = list(system_dirs) if system_dirs is not None else None

        self._support_trash = trash_probe() if trash_probe else False
        theme = icon_theme_probe() if icon_theme_probe else ""
        self._use_fallback_icon_theme = theme in _PLAIN_ICON_THEMES

        self._profile_name = ""
        self._settings = self._defaults()

    # -- Public API ----------------------------------------------------------

    @property
    def settings(self) -> FilerSettings:
        return self._settings

    @property
    def events(self) -> SettingsEventBus:
        return self._events

    @property
    def profile_name(self) -> str:
        """Profile passed to the most recent :meth:`load`."""
        return self._profile_name

    @property
    def support_trash(self) -> bool:
        return self._support_trash

    @property
    def use_fallback_icon_theme(self) -> bool:
        """True when the desktop provides no usable icon theme."""
        return self._use_fallback_icon_theme

    def profile_dir(self, profile: str, use_fallback: bool = False) -> Path:
        return resolve_profile_dir(
            profile,
            use_fallback,
            environ=self._environ,
            system_dirs=self._system_dirs,
        )

    def load(self, profile: str) -> bool:
        """Load *profile*, searching the system config dirs if needed.

        An invalid profile name leaves the settings untouched and returns False.
        """
        try:
            validate_profile_name(profile)
        except ProfileNameError as exc:
            logger.warning("Not loading settings: %s", exc)
            return False
        self._profile_name = profile
        path = settings_path(
            profile, True, environ=self._environ, system_dirs=self._system_dirs
        )
        return self.load_file(path)

    def save(self, profile: str = "") -> bool:
        """Save to *profile*'s user directory (never a system directory)."""
        target = profile or self._profile_name or DEFAULT_PROFILE
        try:
            path = settings_path(
                target, environ=self._environ, system_dirs=self._system_dirs
            )
        except ProfileNameError as exc:
            logger.warning("Not saving settings: %s", exc)
            return False
        return self.save_file(path)

    def load_file(self, path: Path) -> bool:
        """Load settings from *path*.

        A missing file loads the defaults and counts as success. A file that
        cannot be parsed also loads the defaults, but returns False.
        """
        ok = True
        try:
            raw = read_sections(Path(path))
        except (configparser.Error, OSError) as exc:
            logger.warning("Could not read settings from %s: %s", path, exc)
            raw = {}
            ok = False

        self._apply(decode_settings(raw, self._default_font()))
        logger.debug("Loaded settings from %s", path)
        return ok

    def save_file(self, path: Path) -> bool:
        """Write every field to *path*; False if the file cannot be written."""
        try:
            write_sections(Path(path), encode_settings(self._settings))
        except (OSError, UnicodeError) as exc:
            logger.warning("Could not save settings to %s: %s", path, exc)
            return False
        return True

    def reset_to_defaults(self) -> FilerSettings:
        self._apply(self._defaults())
        return self._settings

    @classmethod
    def side_channel_keys(cls) -> tuple[str, ...]:
        return tuple(cls._shared_fields())

    @classmethod
    def _shared_fields(cls) -> dict[str, _SharedField]:
        fields: dict[str, _SharedField] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, _SharedField):
                    fields[name] = attr
        return fields

    # -- Internals -----------------------------------------------------------

    def _defaults(self) -> FilerSettings:
        settings = FilerSettings()
        settings.desktop.font = self._default_font()
        return settings

    def _commit(self, section: str, key: str, value: Any) -> None:
        model = getattr(self._settings, section)
        with shared_field_writes():
            setattr(model, key, value)
        self._events.publish(SettingChanged(key, getattr(model, key)))

    def _apply(self, loaded: FilerSettings) -> None:
        """Copy *loaded* into the live record, then republish side-channel fields.

        The live section objects are updated in place so references held by
        consumers stay current.
        """
        for section_name in FilerSettings.model_fields:
            target = getattr(self._settings, section_name)
            source = getattr(loaded, section_name)
            with shared_field_writes():
                for field_name in type(source).model_fields:
                    setattr(target, field_name, getattr(source, field_name))

        for key, descriptor in self._shared_fields().items():
            model = getattr(self._settings, descriptor.section)
            self._events.publish(SettingChanged(key, getattr(model, key)))
