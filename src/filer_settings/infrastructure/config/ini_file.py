"""Grouped ``settings.conf`` reading and writing.

``LAYOUT`` is the single table mapping every ``FilerSettings`` field to its
section and key in the file. Key names match the files written by earlier
releases, which used Qt's ``QSettings`` INI backend.
"""

from __future__ import annotations

import configparser
import logging
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

from filer_settings.domain.models.enums import (
    BookmarkOpenTarget,
    SidePaneMode,
    SortColumn,
    SortOrder,
    ViewMode,
    WallpaperMode,
)
from filer_settings.domain.models.settings import DesktopFont, FilerSettings
from filer_settings.infrastructure.config import codec

logger = logging.getLogger(__name__)

# Scalar kinds; enum-valued entries use the enum class itself.
STR, BOOL, INT, COLOR, FONT = "str", "bool", "int", "color", "font"

Kind = Union[str, type[Enum]]


@dataclass(frozen=True)
class Entry:
    """One key in the file."""

    key: str
    field: str
    kind: Kind
    legacy_keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class SectionLayout:
    name: str
    attribute: str
    entries: tuple[Entry, ...]


LAYOUT: tuple[SectionLayout, ...] = (
    SectionLayout("System", "system", (
        Entry("FallbackIconThemeName", "fallback_icon_theme_name", STR),
        Entry("SuCommand", "su_command", STR),
        Entry("Terminal", "terminal", STR),
        Entry("Archiver", "archiver", STR),
        Entry("SIUnit", "si_unit", BOOL),
        Entry("OnlyUserTemplates", "only_user_templates", BOOL),
        Entry("TemplateTypeOnce", "template_type_once", BOOL, ("OemplateTypeOnce",)),
        Entry("TemplateRunApp", "template_run_app", BOOL),
    )),
    SectionLayout("Behavior", "behavior", (
        Entry("BookmarkOpenMethod", "bookmark_open_method", BookmarkOpenTarget),
        Entry("SingleClick", "single_click", BOOL),
        Entry("SpatialMode", "spatial_mode", BOOL),
        Entry("DirInfoWrite", "dir_info_write", BOOL),
        Entry("AutoSelectionDelay", "auto_selection_delay", INT),
        Entry("ConfirmDelete", "confirm_delete", BOOL),
        Entry("NoUsbTrash", "no_usb_trash", BOOL),
        Entry("ConfirmTrash", "confirm_trash", BOOL),
        Entry("QuickExec", "quick_exec", BOOL),
    )),
    SectionLayout("Desktop", "desktop", (
        Entry("WallpaperMode", "wallpaper_mode", WallpaperMode),
        Entry("Wallpaper", "wallpaper", STR),
        Entry("BgColor", "bg_color", COLOR),
        Entry("FgColor", "fg_color", COLOR),
        Entry("ShadowColor", "shadow_color", COLOR),
        Entry("Font", "font", FONT),
        Entry("ShowHidden", "show_hidden", BOOL),
        Entry("SortOrder", "sort_order", SortOrder),
        Entry("SortColumn", "sort_column", SortColumn),
    )),
    SectionLayout("Volume", "volume", (
        Entry("MountOnStartup", "mount_on_startup", BOOL),
        Entry("MountRemovable", "mount_removable", BOOL),
        Entry("AutoRun", "auto_run", BOOL),
        Entry("CloseOnUnmount", "close_on_unmount", BOOL),
    )),
    SectionLayout("Thumbnail", "thumbnail", (
        Entry("ShowThumbnails", "show_thumbnails", BOOL),
        Entry("MaxThumbnailFileSize", "max_thumbnail_file_size", INT),
        Entry("ThumbnailLocalFilesOnly", "thumbnail_local_files_only", BOOL),
    )),
    SectionLayout("FolderView", "folder_view", (
        Entry("Mode", "view_mode", ViewMode),
        Entry("ShowHidden", "show_hidden", BOOL),
        Entry("SortOrder", "sort_order", SortOrder),
        Entry("SortColumn", "sort_column", SortColumn),
        Entry("SortFolderFirst", "sort_folder_first", BOOL),
        Entry("ShowFilter", "show_filter", BOOL),
        Entry("BackupAsHidden", "backup_as_hidden", BOOL),
        Entry("ShowFullNames", "show_full_names", BOOL),
        Entry("ShadowHidden", "shadow_hidden", BOOL),
        Entry("BigIconSize", "big_icon_size", INT),
        Entry("SmallIconSize", "small_icon_size", INT),
        Entry("SidePaneIconSize", "side_pane_icon_size", INT),
        Entry("ThumbnailIconSize", "thumbnail_icon_size", INT),
    )),
    SectionLayout("Window", "window", (
        Entry("FixedWidth", "fixed_width", INT),
        Entry("FixedHeight", "fixed_height", INT),
        Entry("LastWindowWidth", "last_window_width", INT),
        Entry("LastWindowHeight", "last_window_height", INT),
        Entry("LastWindowMaximized", "last_window_maximized", BOOL),
        Entry("RememberWindowSize", "remember_window_size", BOOL),
        Entry("AlwaysShowTabs", "always_show_tabs", BOOL),
        Entry("ShowTabClose", "show_tab_close", BOOL),
        Entry("SplitterPos", "splitter_pos", INT),
        Entry("SidePaneMode", "side_pane_mode", SidePaneMode),
    )),
)


# ---------------------------------------------------------------------------
# Value conversion
# ---------------------------------------------------------------------------


def encode_value(kind: Kind, value: Any) -> str:
    if isinstance(kind, type):
        return codec.codec_for(kind).encode(value)
    if kind == BOOL:
        return codec.encode_bool(value)
    if kind == INT:
        return codec.encode_int(value)
    if kind == FONT:
        return codec.encode_font(value)
    return str(value)


def decode_value(kind: Kind, raw: str | None, default: Any) -> Any:
    if isinstance(kind, type):
        return codec.codec_for(kind).decode(raw)
    if kind == BOOL:
        return codec.decode_bool(raw, default)
    if kind == INT:
        return codec.decode_int(raw, default)
    if kind == COLOR:
        return codec.decode_color(raw, default)
    if kind == FONT:
        return codec.decode_font(raw, default)
    return default if raw is None else raw


def _quote(text: str) -> str:
    if "," in text or '"' in text or text != text.strip():
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return text


# ---------------------------------------------------------------------------
# Settings <-> sections
# ---------------------------------------------------------------------------


def decode_settings(
    raw: dict[str, dict[str, str]],
    default_font: DesktopFont | None = None,
) -> FilerSettings:
    """Build a ``FilerSettings`` from raw section/key strings.

    Missing sections and keys take the model defaults; the ``Font`` key takes
    *default_font* when given.
    """
    defaults = FilerSettings()
    if default_font is not None:
        defaults.desktop.font = default_font

    values: dict[str, dict[str, Any]] = {}
    for section in LAYOUT:
        items = raw.get(section.name, {})
        section_defaults = getattr(defaults, section.attribute)
        fields: dict[str, Any] = {}
        for entry in section.entries:
            text = _lookup(items, entry)
            fields[entry.field] = decode_value(
                entry.kind, text, getattr(section_defaults, entry.field)
            )
        values[section.attribute] = fields
    return FilerSettings.model_validate(values)


def encode_settings(settings: FilerSettings) -> dict[str, dict[str, str]]:
    """Return every field of *settings* as section/key strings."""
    out: dict[str, dict[str, str]] = {}
    for section in LAYOUT:
        model = getattr(settings, section.attribute)
        out[section.name] = {
            entry.key: encode_value(entry.kind, getattr(model, entry.field))
            for entry in section.entries
        }
    return out


def _lookup(items: dict[str, str], entry: Entry) -> str | None:
    for key in (entry.key, *entry.legacy_keys):
        if key in items:
            return items[key]
    return None


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    return parser


def read_sections(path: Path) -> dict[str, dict[str, str]]:
    """Read *path* into ``{section: {key: value}}``; empty if it does not exist.

    Raises
    ------
    configparser.Error
        If the file is not valid INI.

    Bytes that are not UTF-8 come back as surrogate escapes, so paths written
    by :func:`write_sections` survive unchanged.
    """
    parser = _new_parser()
    try:
        with open(path, encoding="utf-8", errors="surrogateescape") as fh:
            parser.read_file(fh, source=str(path))
    except FileNotFoundError:
        return {}
    return {
        name: {key: _unquote(value) for key, value in parser.items(name)}
        for name in parser.sections()
    }


def write_sections(path: Path, sections: dict[str, dict[str, str]]) -> None:
    """Write *sections* to *path* atomically (write to temp, then rename).

    Raises
    ------
    OSError
        If the directory cannot be created or the file cannot be written.
    UnicodeEncodeError
        If a value holds a surrogate that is not a surrogate escape.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    parser = _new_parser()
    for name, items in sections.items():
        parser[name] = {key: _quote(value) for key, value in items.items()}

    tmp_fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with open(tmp_fd, "w", encoding="utf-8", errors="surrogateescape") as fh:
            parser.write(fh, space_around_delimiters=False)
        Path(tmp_path).replace(path)
    except Exception:
        Path(tmp_path).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d sections to %s", len(sections), path)
