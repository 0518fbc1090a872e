"""Codec between typed setting values and their ``settings.conf`` strings.

Decoding never fails: unknown enum tokens and malformed scalars decode to the
field's default. Encoding an enum value that is not a declared variant is a
programming error and raises ``SettingsCodecError``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Generic, Optional, TypeVar

from filer_settings.domain.errors import SettingsCodecError
from filer_settings.domain.models.enums import (
    BookmarkOpenTarget,
    SidePaneMode,
    SortColumn,
    SortOrder,
    ViewMode,
    WallpaperMode,
)
from filer_settings.domain.models.settings import DesktopFont, normalize_color

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

_TRUE_TOKENS = frozenset({"true", "1", "yes", "on"})
_FALSE_TOKENS = frozenset({"false", "0", "no", "off"})


class EnumCodec(Generic[E]):
    """Bidirectional token table for one enum type.

    Parameters
    ----------
    enum_cls : type[Enum]
        Enum whose member values are the on-disk tokens.
    default : Enum
        Variant returned for any token not in the table.
    """

    def __init__(self, enum_cls: type[E], default: E) -> None:
        if not isinstance(default, enum_cls):
            raise SettingsCodecError(f"{default!r} is not a {enum_cls.__name__}")
        self._enum_cls = enum_cls
        self._default = default
        self._by_token: dict[str, E] = {member.value: member for member in enum_cls}

    @property
    def default(self) -> E:
        return self._default

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self._by_token)

    def encode(self, value: E) -> str:
        """Return the token for *value*."""
        if not isinstance(value, self._enum_cls):
            raise SettingsCodecError(
                f"Cannot encode {value!r} as {self._enum_cls.__name__}"
            )
        return value.value

    def decode(self, token: Optional[str]) -> E:
        """Return the variant for *token*, or the default on a miss."""
        if token is None:
            return self._default
        # Plain dict lookup: str-enum members must not match by equality here.
        member = self._by_token.get(str(token))
        if member is None:
            logger.debug(
                "Unknown %s token %r, using %r",
                self._enum_cls.__name__,
                token,
                self._default.value,
            )
            return self._default
        return member


_CODECS: dict[type[Enum], EnumCodec] = {
    BookmarkOpenTarget: EnumCodec(BookmarkOpenTarget, BookmarkOpenTarget.CURRENT_TAB),
    WallpaperMode: EnumCodec(WallpaperMode, WallpaperMode.NONE),
    ViewMode: EnumCodec(ViewMode, ViewMode.ICON),
    SidePaneMode: EnumCodec(SidePaneMode, SidePaneMode.PLACES),
    SortOrder: EnumCodec(SortOrder, SortOrder.ASCENDING),
    SortColumn: EnumCodec(SortColumn, SortColumn.NAME),
}


def codec_for(enum_cls: type[E]) -> EnumCodec[E]:
    """Return the registered codec for *enum_cls*."""
    try:
        return _CODECS[enum_cls]
    except KeyError:
        raise SettingsCodecError(f"No codec registered for {enum_cls.__name__}") from None


def registered_enums() -> tuple[type[Enum], ...]:
    return tuple(_CODECS)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


def decode_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    token = raw.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    logger.debug("Malformed boolean %r, using %r", raw, default)
    return default


def encode_int(value: int) -> str:
    return str(int(value))


def decode_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.debug("Malformed integer %r, using %r", raw, default)
        return default


def decode_color(raw: Optional[str], default: str) -> str:
    if raw is None:
        return default
    try:
        return normalize_color(raw)
    except ValueError:
        logger.debug("Malformed color %r, using %r", raw, default)
        return default


def encode_font(font: DesktopFont) -> str:
    return font.to_string()


def decode_font(raw: Optional[str], default: DesktopFont) -> DesktopFont:
    if raw is None:
        return default
    try:
        return DesktopFont.from_string(raw)
    except ValueError:
        logger.debug("Malformed font %r, using the desktop default", raw)
        return default
