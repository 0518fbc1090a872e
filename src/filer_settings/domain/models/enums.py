"""Enumerations for settings encoded as string tokens on disk.

Each member's value is its token in ``settings.conf``.
"""

from enum import Enum


class BookmarkOpenTarget(str, Enum):
    """Where a bookmarked folder opens."""

    CURRENT_TAB = "current_tab"
    NEW_TAB = "new_tab"
    NEW_WINDOW = "new_window"
    LAST_WINDOW = "last_window"  # Last active window


class WallpaperMode(str, Enum):
    """How the desktop wallpaper is drawn."""

    NONE = "none"
    TRANSPARENT = "transparent"
    STRETCH = "stretch"
    FIT = "fit"
    CENTER = "center"
    TILE = "tile"


class ViewMode(str, Enum):
    """Folder view layouts."""

    ICON = "icon"
    COMPACT = "compact"
    DETAILED = "detailed"  # Detailed list
    THUMBNAIL = "thumbnail"


class SidePaneMode(str, Enum):
    """Side pane contents."""

    PLACES = "places"
    DIR_TREE = "dirtree"
    NONE = "none"


class SortOrder(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class SortColumn(str, Enum):
    """Folder model column used as the sort key."""

    NAME = "name"
    TYPE = "type"
    SIZE = "size"
    MTIME = "mtime"
    OWNER = "owner"
