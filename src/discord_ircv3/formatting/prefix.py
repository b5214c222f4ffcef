"""Sender prefix shown in front of Discord messages relayed to IRC."""

from __future__ import annotations

from discord_ircv3.formatting.styles import COLOR, COLOR_HEX, RESET, ZERO_WIDTH_SPACE

# mIRC palette entries readable on both light and dark backgrounds
NICK_COLORS = (2, 3, 4, 6, 7, 8, 9, 10, 11, 12, 13)

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193


def fnv1_32(data: bytes) -> int:
    """32-bit FNV-1 hash."""
    h = _FNV_OFFSET
    for byte in data:
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
        h ^= byte
    return h


def nick_color(username: str, color: int = 0) -> str:
    """Colour code for a sender.

    A non-zero Discord colour (role or accent, ``0xRRGGBB``) is sent as a hex
    colour; otherwise a stable palette colour is derived from the username.
    """
    if color:
        return f"{COLOR_HEX}{color:06X}"
    index = fnv1_32(username.encode("utf-8")) % len(NICK_COLORS)
    return f"{COLOR}{NICK_COLORS[index]:02d}"


def unhighlight(nick: str) -> str:
    """Insert a zero-width space after the first character so IRC clients don't ping *nick*."""
    if len(nick) > 1:
        return nick[0] + ZERO_WIDTH_SPACE + nick[1:]
    return nick


def sender_prefix(nick: str, username: str, color: int = 0) -> str:
    """``<NICK> `` with the nick coloured and un-highlighted."""
    return f"<{nick_color(username, color)}{unhighlight(nick or username)}{RESET}> "
