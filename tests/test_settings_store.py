"""Tests for the settings store: load / save / defaults.

Covers:
- Missing file and missing key defaulting
- Save/load of every field through settings.conf
- System config dir fallback on load, user dir on save
- Unreadable and unwritable files
"""

from __future__ import annotations

from pathlib import Path

import pytest

from filer_settings.domain.models.enums import (
    BookmarkOpenTarget,
    SidePaneMode,
    SortColumn,
    SortOrder,
    ViewMode,
    WallpaperMode,
)
from filer_settings.domain.models.settings import DesktopFont, FilerSettings
from filer_settings.infrastructure.config.settings_store import SettingsStore


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture()
def config_home(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture()
def system_dir(tmp_path: Path) -> Path:
    d = tmp_path / "etc-xdg"
    d.mkdir()
    return d


@pytest.fixture()
def store(config_home: Path, system_dir: Path) -> SettingsStore:
    return SettingsStore(
        environ={"XDG_CONFIG_HOME": str(config_home)},
        system_dirs=[system_dir],
    )


def _write_profile(base: Path, text: str, profile: str = "default") -> Path:
    path = base / "filer" / profile / "settings.conf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _customize(store: SettingsStore) -> None:
    """Move every field away from its default."""
    s = store.settings
    store.terminal = "qterminal -e"
    store.archiver = "xarchiver"
    store.only_user_templates = True
    store.template_type_once = True
    store.template_run_app = True
    s.system.fallback_icon_theme_name = "Papirus"
    s.system.su_command = "pkexec %s"
    s.system.si_unit = True

    s.behavior.bookmark_open_method = BookmarkOpenTarget.LAST_WINDOW
    s.behavior.spatial_mode = True
    s.behavior.dir_info_write = False
    store.single_click = True
    s.behavior.auto_selection_delay = 250
    s.behavior.confirm_delete = False
    store.no_usb_trash = True
    s.behavior.confirm_trash = True
    store.quick_exec = False

    s.desktop.wallpaper_mode = WallpaperMode.TILE
    s.desktop.wallpaper = "/usr/share/backgrounds/a, b.png"
    s.desktop.bg_color = "#102030"
    s.desktop.fg_color = "#eeeeee"
    s.desktop.shadow_color = "#333333"
    s.desktop.font = DesktopFont(family="Cantarell", point_size=11.5, weight=75, italic=True)
    s.desktop.show_hidden = True
    s.desktop.sort_order = SortOrder.DESCENDING
    s.desktop.sort_column = SortColumn.MTIME

    s.volume.mount_on_startup = False
    s.volume.mount_removable = False
    s.volume.auto_run = False
    s.volume.close_on_unmount = False

    s.thumbnail.show_thumbnails = False
    store.max_thumbnail_file_size = 8192
    store.thumbnail_local_files_only = False

    s.folder_view.view_mode = ViewMode.DETAILED
    s.folder_view.show_hidden = True
    s.folder_view.sort_order = SortOrder.DESCENDING
    s.folder_view.sort_column = SortColumn.OWNER
    s.folder_view.sort_folder_first = False
    s.folder_view.show_filter = True
    store.backup_as_hidden = True
    s.folder_view.show_full_names = True
    s.folder_view.shadow_hidden = True
    s.folder_view.big_icon_size = 48
    s.folder_view.small_icon_size = 24
    s.folder_view.side_pane_icon_size = 16
    s.folder_view.thumbnail_icon_size = 256

    s.window.fixed_width = 800
    s.window.fixed_height = 600
    s.window.last_window_width = 1024
    s.window.last_window_height = 768
    s.window.last_window_maximized = True
    s.window.remember_window_size = False
    s.window.always_show_tabs = True
    s.window.show_tab_close = False
    s.window.splitter_pos = 200
    s.window.side_pane_mode = SidePaneMode.DIR_TREE


# ── Loading ───────────────────────────────────────────────────────────────


class TestLoadDefaults:
    def test_missing_file_is_success(self, store: SettingsStore) -> None:
        assert store.load("default") is True
        assert store.settings == FilerSettings()

    def test_records_profile_name(self, store: SettingsStore) -> None:
        store.load("work")
        assert store.profile_name == "work"

    def test_empty_behavior_section(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(config_home, "[Behavior]\n")
        store.load("default")
        assert store.settings.behavior.single_click is False
        assert store.settings.behavior.auto_selection_delay == 600
        assert store.settings.behavior.confirm_delete is True

    def test_folder_view_mode_only(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(config_home, "[FolderView]\nMode=thumbnail\n")
        store.load("default")
        fv = store.settings.folder_view
        assert fv.view_mode is ViewMode.THUMBNAIL
        assert fv.sort_column is SortColumn.NAME
        assert fv.sort_order is SortOrder.ASCENDING

    def test_unknown_enum_token(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(config_home, "[Window]\nSidePaneMode=tabs\n[Desktop]\nWallpaperMode=Tile\n")
        store.load("default")
        assert store.settings.window.side_pane_mode is SidePaneMode.PLACES
        assert store.settings.desktop.wallpaper_mode is WallpaperMode.NONE

    def test_malformed_scalars(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(
            config_home,
            "[Behavior]\nAutoSelectionDelay=soon\nConfirmDelete=perhaps\n"
            "[Desktop]\nBgColor=nope\nFont=garbage\n",
        )
        store.load("default")
        assert store.settings.behavior.auto_selection_delay == 600
        assert store.settings.behavior.confirm_delete is True
        assert store.settings.desktop.bg_color == "#4e7fb4"
        assert store.settings.desktop.font == DesktopFont()

    def test_out_of_range_sizes_are_clamped(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(
            config_home,
            "[FolderView]\nBigIconSize=-4\nThumbnailIconSize=99999\n"
            "[Window]\nFixedWidth=0\nSplitterPos=-1\n",
        )
        store.load("default")
        assert store.settings.folder_view.big_icon_size == 8
        assert store.settings.folder_view.thumbnail_icon_size == 512
        assert store.settings.window.fixed_width == 1
        assert store.settings.window.splitter_pos == 0

    def test_empty_icon_theme_uses_fallback(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(config_home, "[System]\nFallbackIconThemeName=\n")
        store.load("default")
        assert store.settings.system.fallback_icon_theme_name == "elementary"

    def test_legacy_template_key(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(config_home, "[System]\nOemplateTypeOnce=true\n")
        store.load("default")
        assert store.template_type_once is True

    def test_qsettings_style_quoted_font(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(config_home, '[Desktop]\nFont="DejaVu Sans,9,-1,5,50,0,0,0,0,0"\n')
        store.load("default")
        assert store.settings.desktop.font.family == "DejaVu Sans"
        assert store.settings.desktop.font.point_size == 9

    def test_injected_default_font(self, config_home: Path) -> None:
        font = DesktopFont(family="Noto Sans", point_size=10)
        s = SettingsStore(
            default_font=lambda: font,
            environ={"XDG_CONFIG_HOME": str(config_home)},
            system_dirs=[],
        )
        assert s.settings.desktop.font == font
        s.load("default")
        assert s.settings.desktop.font == font

    def test_load_overwrites_previous_values(self, store: SettingsStore, config_home: Path) -> None:
        store.settings.window.fixed_width = 1200
        _write_profile(config_home, "[Window]\nFixedHeight=700\n")
        store.load("default")
        assert store.settings.window.fixed_width == 640
        assert store.settings.window.fixed_height == 700

    def test_section_objects_updated_in_place(self, store: SettingsStore, config_home: Path) -> None:
        window = store.settings.window
        _write_profile(config_home, "[Window]\nFixedHeight=700\n")
        store.load("default")
        assert window.fixed_height == 700


class TestUnreadableFile:
    def test_missing_section_header(self, store: SettingsStore, config_home: Path) -> None:
        _write_profile(config_home, "Mode=thumbnail\n")
        assert store.load("default") is False
        assert store.settings == FilerSettings()

    def test_not_utf8_kept_as_escapes(self, store: SettingsStore, config_home: Path) -> None:
        path = _write_profile(config_home, "")
        path.write_bytes(b"[System]\nTerminal=\xff\xfe\n")
        assert store.load("default") is True
        assert store.terminal == "\udcff\udcfe"

    def test_directory_in_place_of_file(self, store: SettingsStore, config_home: Path) -> None:
        (config_home / "filer" / "default" / "settings.conf").mkdir(parents=True)
        assert store.load("default") is False
        assert store.settings == FilerSettings()


# ── Fallback ──────────────────────────────────────────────────────────────


class TestSystemFallback:
    def test_load_from_system_dir(self, store: SettingsStore, system_dir: Path) -> None:
        _write_profile(system_dir, "[Behavior]\nSingleClick=true\n")
        assert store.load("default") is True
        assert store.single_click is True

    def test_user_profile_preferred(
        self, store: SettingsStore, system_dir: Path, config_home: Path
    ) -> None:
        _write_profile(system_dir, "[Behavior]\nSingleClick=true\n")
        _write_profile(config_home, "[Behavior]\nSingleClick=false\n")
        store.load("default")
        assert store.single_click is False

    def test_save_targets_user_dir(
        self, store: SettingsStore, system_dir: Path, config_home: Path
    ) -> None:
        system_file = _write_profile(system_dir, "[Behavior]\nSingleClick=true\n")
        store.load("default")
        assert store.save() is True
        assert (config_home / "filer" / "default" / "settings.conf").exists()
        assert system_file.read_text(encoding="utf-8") == "[Behavior]\nSingleClick=true\n"

    def test_profile_dir(self, store: SettingsStore, system_dir: Path, config_home: Path) -> None:
        _write_profile(system_dir, "")
        assert store.profile_dir("default", use_fallback=True) == system_dir / "filer" / "default"
        assert store.profile_dir("default") == config_home / "filer" / "default"


# ── Saving ────────────────────────────────────────────────────────────────


class TestSave:
    def test_every_field_survives_save_and_load(
        self, store: SettingsStore, config_home: Path, system_dir: Path
    ) -> None:
        _customize(store)
        assert store.save("default") is True

        fresh = SettingsStore(
            environ={"XDG_CONFIG_HOME": str(config_home)},
            system_dirs=[system_dir],
        )
        assert fresh.load("default") is True
        assert fresh.settings == store.settings
        assert fresh.settings != FilerSettings()

    def test_save_defaults_to_loaded_profile(self, store: SettingsStore, config_home: Path) -> None:
        store.load("work")
        store.save()
        assert (config_home / "filer" / "work" / "settings.conf").exists()

    def test_save_to_other_profile(self, store: SettingsStore, config_home: Path) -> None:
        store.load("work")
        store.save("backup")
        assert (config_home / "filer" / "backup" / "settings.conf").exists()
        assert not (config_home / "filer" / "work" / "settings.conf").exists()

    def test_save_without_load_uses_default_profile(
        self, store: SettingsStore, config_home: Path
    ) -> None:
        assert store.save() is True
        assert (config_home / "filer" / "default" / "settings.conf").exists()

    def test_file_layout(self, store: SettingsStore, config_home: Path) -> None:
        store.save("default")
        text = (config_home / "filer" / "default" / "settings.conf").read_text(encoding="utf-8")
        for section in ("System", "Behavior", "Desktop", "Volume", "Thumbnail", "FolderView", "Window"):
            assert f"[{section}]" in text
        assert "SuCommand=gksu %s\n" in text
        assert "SingleClick=false\n" in text
        assert "AutoSelectionDelay=600\n" in text
        assert "Mode=icon\n" in text
        assert "BgColor=#4e7fb4\n" in text
        assert 'Font="Sans Serif,10,-1,5,50,0,0,0,0,0"\n' in text
        assert "TemplateTypeOnce=false\n" in text
        assert "OemplateTypeOnce" not in text

    def test_no_temp_files_left(self, store: SettingsStore, config_home: Path) -> None:
        store.save("default")
        names = [p.name for p in (config_home / "filer" / "default").iterdir()]
        assert names == ["settings.conf"]

    def test_unwritable_target_reports_failure(self, store: SettingsStore, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        assert store.save_file(blocker / "filer" / "settings.conf") is False

    def test_explicit_file_paths(self, store: SettingsStore, tmp_path: Path) -> None:
        path = tmp_path / "elsewhere.conf"
        store.settings.window.splitter_pos = 321
        assert store.save_file(path) is True

        other = SettingsStore(system_dirs=[])
        assert other.load_file(path) is True
        assert other.settings.window.splitter_pos == 321


class TestSurrogatePaths:
    def test_escaped_wallpaper_survives_save_and_load(
        self, store: SettingsStore, config_home: Path, system_dir: Path
    ) -> None:
        store.settings.desktop.wallpaper = "/pics/\udcff.png"
        assert store.save("default") is True
        raw = (config_home / "filer" / "default" / "settings.conf").read_bytes()
        assert b"Wallpaper=/pics/\xff.png\n" in raw

        fresh = SettingsStore(
            environ={"XDG_CONFIG_HOME": str(config_home)},
            system_dirs=[system_dir],
        )
        assert fresh.load("default") is True
        assert fresh.settings.desktop.wallpaper == "/pics/\udcff.png"

    def test_unencodable_value_reports_failure(
        self, store: SettingsStore, config_home: Path
    ) -> None:
        store.settings.desktop.wallpaper = "/pics/\ud800.png"
        assert store.save("default") is False
        assert list((config_home / "filer" / "default").iterdir()) == []


class TestInvalidProfileName:
    @pytest.mark.parametrize("name", ["", "../evil", "a/b", "..", "."])
    def test_load_reports_failure(self, store: SettingsStore, name: str) -> None:
        store.load("work")
        store.settings.window.splitter_pos = 222
        assert store.load(name) is False
        assert store.profile_name == "work"
        assert store.settings.window.splitter_pos == 222

    @pytest.mark.parametrize("name", ["../evil", "a/b", ".."])
    def test_save_reports_failure(
        self, store: SettingsStore, config_home: Path, tmp_path: Path, name: str
    ) -> None:
        assert store.save(name) is False
        assert not (config_home / "evil").exists()
        assert not (tmp_path / "evil").exists()


class TestReset:
    def test_reset_to_defaults(self, store: SettingsStore) -> None:
        _customize(store)
        result = store.reset_to_defaults()
        assert result is store.settings
        assert store.settings == FilerSettings()


class TestProbes:
    def test_defaults_without_probes(self, store: SettingsStore) -> None:
        assert store.support_trash is False
        assert store.use_fallback_icon_theme is True

    @pytest.mark.parametrize(
        ("theme", "expected"), [("", True), ("hicolor", True), ("Adwaita", False)]
    )
    def test_icon_theme_probe(self, theme: str, expected: bool) -> None:
        s = SettingsStore(icon_theme_probe=lambda: theme, system_dirs=[])
        assert s.use_fallback_icon_theme is expected

    def test_trash_probe(self) -> None:
        s = SettingsStore(trash_probe=lambda: True, system_dirs=[])
        assert s.support_trash is True
