"""Settings model for the filer.

This module defines the ``FilerSettings`` Pydantic model: one sub-model per
``settings.conf`` section, each field carrying the default used when its key
is missing from the file. Assignment is validated, so sizes are clamped and
colors normalized whether a value comes from disk or from the application.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Annotated, Callable, ClassVar, Iterator

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from filer_settings.domain.errors import ReadOnlySettingError
from filer_settings.domain.models.enums import (
    BookmarkOpenTarget,
    SidePaneMode,
    SortColumn,
    SortOrder,
    ViewMode,
    WallpaperMode,
)

DEFAULT_ICON_THEME = "elementary"

ICON_SIZE_RANGE = (8, 512)
WINDOW_SIZE_RANGE = (1, 16384)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Basic SVG color keywords accepted on input; stored as hex.
_NAMED_COLORS = {
    "black": "#000000",
    "silver": "#c0c0c0",
    "gray": "#808080",
    "grey": "#808080",
    "white": "#ffffff",
    "maroon": "#800000",
    "red": "#ff0000",
    "purple": "#800080",
    "fuchsia": "#ff00ff",
    "green": "#008000",
    "lime": "#00ff00",
    "olive": "#808000",
    "yellow": "#ffff00",
    "navy": "#000080",
    "blue": "#0000ff",
    "teal": "#008080",
    "aqua": "#00ffff",
}


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


def normalize_color(value: object) -> str:
    """Return *value* as lowercase ``#rrggbb``.

    Raises
    ------
    ValueError
        If *value* is neither a hex color nor a known color name.
    """
    text = str(value).strip()
    named = _NAMED_COLORS.get(text.lower())
    if named:
        return named
    if not _HEX_COLOR.match(text):
        raise ValueError(f"Invalid color: {value!r}")
    digits = text[1:].lower()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return "#" + digits


def _clamped(low: int, high: int | None = None) -> Callable[[object], int]:
    def clamp(value: object) -> int:
        number = int(value)  # type: ignore[call-overload]
        if number < low:
            return low
        if high is not None and number > high:
            return high
        return number

    return clamp


Color = Annotated[str, BeforeValidator(normalize_color)]
IconSize = Annotated[int, BeforeValidator(_clamped(*ICON_SIZE_RANGE))]
WindowSize = Annotated[int, BeforeValidator(_clamped(*WINDOW_SIZE_RANGE))]
NonNegativeInt = Annotated[int, BeforeValidator(_clamped(0))]


class DesktopFont(BaseModel):
    """Desktop icon label font, stored as a Qt font description string."""

    model_config = ConfigDict(frozen=True)

    family: str = "Sans Serif"
    point_size: float = 10.0
    pixel_size: int = -1
    style_hint: int = 5
    weight: int = 50
    italic: bool = False
    underline: bool = False
    strike_out: bool = False
    fixed_pitch: bool = False

    @field_validator("family")
    @classmethod
    def _family_has_no_comma(cls, value: str) -> str:
        # The comma separates fields in the description string.
        if not value or "," in value:
            raise ValueError(f"Invalid font family: {value!r}")
        return value

    def to_string(self) -> str:
        """Encode as ``family,pointSize,pixelSize,styleHint,weight,...``."""
        size = f"{self.point_size:g}"
        flags = (self.italic, self.underline, self.strike_out, self.fixed_pitch)
        parts = [self.family, size, str(self.pixel_size), str(self.style_hint), str(self.weight)]
        parts.extend("1" if flag else "0" for flag in flags)
        parts.append("0")  # raw mode
        return ",".join(parts)

    @classmethod
    def from_string(cls, text: str) -> DesktopFont:
        """Parse a Qt font description string.

        Only the family and point size are required; later fields keep their
        defaults when absent. Fields past the raw-mode flag are ignored.

        Raises
        ------
        ValueError
            If the family is empty or a numeric field cannot be parsed.
        """
        parts = [part.strip() for part in text.split(",")]
        if len(parts) < 2 or not parts[0]:
            raise ValueError(f"Invalid font description: {text!r}")

        values: dict[str, object] = {"family": parts[0], "point_size": float(parts[1])}
        int_fields = ("pixel_size", "style_hint", "weight")
        for name, raw in zip(int_fields, parts[2:5]):
            values[name] = int(raw)
        flag_fields = ("italic", "underline", "strike_out", "fixed_pitch")
        for name, raw in zip(flag_fields, parts[5:9]):
            values[name] = int(raw) != 0
        return cls.model_validate(values)


# ---------------------------------------------------------------------------
# Sub-models by file section
# ---------------------------------------------------------------------------


_shared_writes: ContextVar[bool] = ContextVar("shared_writes", default=False)


@contextmanager
def shared_field_writes() -> Iterator[None]:
    """Allow assignment to store-published fields for the duration of the block.

    Used by the settings store, which publishes a change event for each write.
    """
    token = _shared_writes.set(True)
    try:
        yield
    finally:
        _shared_writes.reset(token)


class _Section(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    # Fields mirrored into the shared library config; only the store sets them.
    shared_fields: ClassVar[frozenset[str]] = frozenset()

    def __setattr__(self, name: str, value: object) -> None:
        if name in self.shared_fields and not _shared_writes.get():
            raise ReadOnlySettingError(
                f"'{name}' is read-only here; assign it on the settings store"
            )
        super().__setattr__(name, value)


class SystemSettings(_Section):
    """External programs and template handling."""

    shared_fields: ClassVar[frozenset[str]] = frozenset(
        {"terminal", "archiver", "only_user_templates", "template_type_once", "template_run_app"}
    )

    fallback_icon_theme_name: str = Field(
        default=DEFAULT_ICON_THEME,
        description="Icon theme used when the desktop provides none.",
    )
    su_command: str = Field(
        default="gksu %s",
        description="Command used to run a program as root; %s is the command line.",
    )
    terminal: str = Field(default="xterm", description="Terminal emulator command.")
    archiver: str = Field(default="file-roller", description="Archive manager command.")
    si_unit: bool = Field(default=False, description="Show file sizes in SI units.")
    only_user_templates: bool = False
    template_type_once: bool = False
    template_run_app: bool = False

    @field_validator("fallback_icon_theme_name")
    @classmethod
    def _theme_not_empty(cls, value: str) -> str:
        return value or DEFAULT_ICON_THEME


class BehaviorSettings(_Section):
    """File-manager interaction preferences."""

    shared_fields: ClassVar[frozenset[str]] = frozenset(
        {"single_click", "no_usb_trash", "quick_exec"}
    )

    bookmark_open_method: BookmarkOpenTarget = BookmarkOpenTarget.CURRENT_TAB
    spatial_mode: bool = False
    dir_info_write: bool = True
    single_click: bool = False
    auto_selection_delay: NonNegativeInt = Field(
        default=600,
        description="Hover delay in milliseconds before single-click mode selects an item.",
    )
    confirm_delete: bool = True
    no_usb_trash: bool = Field(
        default=False,
        description="Delete files on removable media instead of trashing them.",
    )
    confirm_trash: bool = False
    quick_exec: bool = Field(
        default=True,
        description="Run executable files without asking what to do with them.",
    )


class DesktopSettings(_Section):
    """Desktop window appearance."""

    wallpaper_mode: WallpaperMode = WallpaperMode.NONE
    wallpaper: str = ""
    bg_color: Color = "#4e7fb4"
    fg_color: Color = "#ffffff"
    shadow_color: Color = "#000000"
    font: DesktopFont = Field(default_factory=DesktopFont)
    show_hidden: bool = False
    sort_order: SortOrder = SortOrder.ASCENDING
    sort_column: SortColumn = SortColumn.NAME


class VolumeSettings(_Section):
    """Removable media handling."""

    mount_on_startup: bool = True
    mount_removable: bool = True
    auto_run: bool = True
    close_on_unmount: bool = Field(
        default=True,
        description="Close windows showing a device when it is unmounted.",
    )


class ThumbnailSettings(_Section):
    shared_fields: ClassVar[frozenset[str]] = frozenset(
        {"max_thumbnail_file_size", "thumbnail_local_files_only"}
    )

    show_thumbnails: bool = True
    max_thumbnail_file_size: NonNegativeInt = Field(
        default=4096,
        description="Largest file, in KiB, for which thumbnails are generated.",
    )
    thumbnail_local_files_only: bool = True


class FolderViewSettings(_Section):
    """Folder view layout, sorting and icon sizes."""

    shared_fields: ClassVar[frozenset[str]] = frozenset({"backup_as_hidden"})

    view_mode: ViewMode = ViewMode.ICON
    show_hidden: bool = False
    sort_order: SortOrder = SortOrder.ASCENDING
    sort_column: SortColumn = SortColumn.NAME
    sort_folder_first: bool = True
    show_filter: bool = False
    backup_as_hidden: bool = Field(
        default=False,
        description="Treat backup files (name ending in ~) as hidden.",
    )
    show_full_names: bool = False
    shadow_hidden: bool = False
    big_icon_size: IconSize = 36
    small_icon_size: IconSize = 16
    side_pane_icon_size: IconSize = 12
    thumbnail_icon_size: IconSize = 128


class WindowSettings(_Section):
    """Main window geometry and chrome."""

    fixed_width: WindowSize = 640
    fixed_height: WindowSize = 480
    last_window_width: WindowSize = 640
    last_window_height: WindowSize = 480
    last_window_maximized: bool = False
    remember_window_size: bool = True
    always_show_tabs: bool = False
    show_tab_close: bool = True
    splitter_pos: NonNegativeInt = 150
    side_pane_mode: SidePaneMode = SidePaneMode.PLACES


# ---------------------------------------------------------------------------
# Root settings model
# ---------------------------------------------------------------------------


class FilerSettings(BaseModel):
    """Root settings record — persisted to ``settings.conf``."""

    system: SystemSettings = Field(default_factory=SystemSettings)
    behavior: BehaviorSettings = Field(default_factory=BehaviorSettings)
    desktop: DesktopSettings = Field(default_factory=DesktopSettings)
    volume: VolumeSettings = Field(default_factory=VolumeSettings)
    thumbnail: ThumbnailSettings = Field(default_factory=ThumbnailSettings)
    folder_view: FolderViewSettings = Field(default_factory=FolderViewSettings)
    window: WindowSettings = Field(default_factory=WindowSettings)
