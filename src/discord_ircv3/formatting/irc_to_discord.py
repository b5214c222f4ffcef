"""Convert IRC control-code formatting to Discord markdown."""

from __future__ import annotations

import re
from enum import Enum

from discord_ircv3.formatting.styles import (
    BOLD,
    COLOR,
    COLOR_HEX,
    ITALICS,
    MONOSPACE,
    RESET,
    REVERSE,
    STRIKETHROUGH,
    UNDERLINE,
    ZERO_WIDTH_SPACE,
    StyleState,
)

URL_PATTERN = re.compile(r"https?://[^\s<]+[^<.,:;\"')\]\s]")

_STYLE_CODES = frozenset({BOLD, ITALICS, UNDERLINE, STRIKETHROUGH, RESET})
_DISCARDED_CODES = frozenset({MONOSPACE, REVERSE})
_MARKDOWN_META = frozenset("\\*_~")
_HEX_COLOR_LENGTH = 6


class Mode(Enum):
    NORMAL = "normal"
    RAW = "raw"  # inside a backtick span: copied verbatim
    URL = "url"  # inside a link: no escaping so it stays clickable


def _is_digit(text: str, index: int) -> bool:
    return index < len(text) and "0" <= text[index] <= "9"


def _skip_color(text: str, index: int) -> int:
    """Return the index of the last character of the colour code starting at *index*.

    Accepts ``\\x03F``, ``\\x03FF``, ``\\x03F,B`` and ``\\x03FF,BB``; a bare
    ``\\x03`` (colour reset) is one character long.
    """
    if not _is_digit(text, index + 1):
        return index
    index += 1
    if _is_digit(text, index + 1):
        index += 1
    if index + 1 < len(text) and text[index + 1] == "," and _is_digit(text, index + 2):
        index += 2
        if _is_digit(text, index + 1):
            index += 1
    return index


class ControlCodeParser:
    """Single-pass converter from IRC control codes to Discord markdown.

    Style codes only update the pending style; markers are written lazily at
    the next character that produces output, so runs of identically styled
    text share a single pair of markers.
    """

    def __init__(self, text: str):
        # The trailing reset closes whatever is still open at the end.
        self._text = text + RESET
        self._mode = Mode.NORMAL
        self._url_end = 0
        self._prev = StyleState()
        self._next = StyleState()
        self._out: list[str] = []

    @property
    def mode(self) -> Mode:
        return self._mode

    def convert(self) -> str:
        text = self._text
        end = len(text)
        i = 0
        while i < end:
            c = text[i]
            if self._mode is Mode.RAW and c != "`":
                self._out.append(c)
                i += 1
                continue
            self._track_url(i)

            if c in _STYLE_CODES:
                self._next = self._next.with_code(c)
                write = ""
            elif c in _DISCARDED_CODES:
                i += 1
                continue
            elif c == COLOR:
                i = _skip_color(text, i) + 1
                continue
            elif c == COLOR_HEX:
                # never swallow the trailing reset
                i = min(i + 1 + _HEX_COLOR_LENGTH, end - 1)
                continue
            elif c == "`":
                write = self._backtick(i)
            elif c in _MARKDOWN_META:
                write = c if self._mode is Mode.URL else "\\" + c
            else:
                write = c

            i += 1
            if not write and i < end:
                continue
            self._emit(write)
        return "".join(self._out)

    def _track_url(self, index: int) -> None:
        if index >= self._url_end:
            match = URL_PATTERN.match(self._text, index)
            if match:
                self._url_end = match.end()
        if self._mode is not Mode.RAW:
            self._mode = Mode.URL if index < self._url_end else Mode.NORMAL

    def _backtick(self, index: int) -> str:
        if self._mode is Mode.RAW:
            self._mode = Mode.NORMAL
            return "`"
        # An empty pair or a backtick without a partner is literal text.
        if self._text.find("`", index + 1) > index + 1:
            self._mode = Mode.RAW
            return "`"
        return "`" if self._mode is Mode.URL else "\\`"

    def _emit(self, write: str) -> None:
        if self._prev == self._next:
            self._out.append(write)
            return
        closing = self._prev.closing_markers()
        self._out.append(closing)
        self._prev = StyleState()
        if not write:
            return
        if closing:
            self._out.append(ZERO_WIDTH_SPACE)
        self._out.append(self._next.opening_markers())
        self._out.append(write)
        self._prev = self._next


def irc_to_discord(text: str) -> str:
    """Convert an IRC message body to Discord markdown.

    Colours, monospace and reverse video are dropped; Discord markdown
    characters are escaped except inside links and backtick spans.
    """
    return ControlCodeParser(text).convert()
