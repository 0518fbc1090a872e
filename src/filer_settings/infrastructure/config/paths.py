"""Profile path resolution.

A profile lives in ``<config root>/filer/<profile>/settings.conf`` where the
config root is ``$XDG_CONFIG_HOME`` or ``~/.config``. When loading, a profile
missing from the user directory is looked up in the system config
directories (``$XDG_CONFIG_DIRS``, via ``platformdirs``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Mapping, Optional

import platformdirs

from filer_settings.domain.errors import ProfileNameError

APP_NAMESPACE = "filer"
SETTINGS_FILENAME = "settings.conf"
CONFIG_HOME_ENV = "XDG_CONFIG_HOME"
DEFAULT_PROFILE = "default"


def system_config_dirs() -> list[Path]:
    """System-wide config directories in lookup order."""
    joined = platformdirs.site_config_dir(multipath=True)
    return [Path(entry) for entry in joined.split(os.pathsep) if entry]


def user_config_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_HOME_ENV, "")
    if override:
        return Path(override)
    return Path.home() / ".config"


def validate_profile_name(profile: str) -> str:
    """Return *profile* if it names a single directory, else raise."""
    if not profile or profile in (".", "..") or "/" in profile or "\\" in profile:
        raise ProfileNameError(f"Invalid profile name: {profile!r}")
    return profile


def resolve_profile_dir(
    profile: str,
    use_fallback: bool = False,
    *,
    environ: Optional[Mapping[str, str]] = None,
    system_dirs: Optional[Iterable[Path]] = None,
) -> Path:
    """Return the directory holding *profile*'s settings.

    Parameters
    ----------
    profile : str
        Profile name, a single path component.
    use_fallback : bool
        If the user directory does not exist, return the first existing
        ``<system dir>/filer/<profile>`` instead.
    environ : Mapping | None
        Environment to read ``XDG_CONFIG_HOME`` from (default: ``os.environ``).
    system_dirs : Iterable[Path] | None
        System config directories to search (default: :func:`system_config_dirs`).
    """
    relative = Path(APP_NAMESPACE) / validate_profile_name(profile)
    user_dir = user_config_root(environ) / relative
    if user_dir.is_dir() or not use_fallback:
        return user_dir

    candidates = system_config_dirs() if system_dirs is None else system_dirs
    for base in candidates:
        fallback = Path(base) / relative
        if fallback.is_dir():
            return fallback
    return user_dir


def settings_path(profile: str, use_fallback: bool = False, **kwargs) -> Path:
    """Path of *profile*'s ``settings.conf``; see :func:`resolve_profile_dir`."""
    return resolve_profile_dir(profile, use_fallback, **kwargs) / SETTINGS_FILENAME
