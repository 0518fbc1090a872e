"""Domain models — public API.

Provides convenient imports for the settings record and its enum types.
"""

from filer_settings.domain.models.enums import (
    BookmarkOpenTarget,
    SidePaneMode,
    SortColumn,
    SortOrder,
    ViewMode,
    WallpaperMode,
)
from filer_settings.domain.models.settings import (
    BehaviorSettings,
    DesktopFont,
    DesktopSettings,
    FilerSettings,
    FolderViewSettings,
    SystemSettings,
    ThumbnailSettings,
    VolumeSettings,
    WindowSettings,
)

__all__ = [
    # Enums
    "BookmarkOpenTarget",
    "SidePaneMode",
    "SortColumn",
    "SortOrder",
    "ViewMode",
    "WallpaperMode",
    # Settings
    "BehaviorSettings",
    "DesktopFont",
    "DesktopSettings",
    "FilerSettings",
    "FolderViewSettings",
    "SystemSettings",
    "ThumbnailSettings",
    "VolumeSettings",
    "WindowSettings",
]
