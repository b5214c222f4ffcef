"""IRC formatting control codes and the emphasis state tracked while converting them."""

from __future__ import annotations

from dataclasses import dataclass

BOLD = "\x02"
ITALICS = "\x1d"
UNDERLINE = "\x1f"
STRIKETHROUGH = "\x1e"
MONOSPACE = "\x11"
COLOR = "\x03"
COLOR_HEX = "\x04"
REVERSE = "\x16"
RESET = "\x0f"

ZERO_WIDTH_SPACE = "\u200b"

# Discord markers, listed in the order they are closed
_CLOSE_ORDER = (
    ("italics", "*"),
    ("bold", "**"),
    ("underline", "__"),
    ("strikethrough", "~~"),
)


@dataclass(frozen=True, slots=True)
class StyleState:
    bold: bool = False
    italics: bool = False
    underline: bool = False
    strikethrough: bool = False

    def with_code(self, code: str) -> StyleState:
        """State after applying a single style control code."""
        match code:
            case "\x02":
                return StyleState(True, self.italics, self.underline, self.strikethrough)
            case "\x1d":
                return StyleState(self.bold, True, self.underline, self.strikethrough)
            case "\x1f":
                return StyleState(self.bold, self.italics, True, self.strikethrough)
            case "\x1e":
                return StyleState(self.bold, self.italics, self.underline, True)
            case "\x0f":
                return StyleState()
            case _:
                return self

    @property
    def plain(self) -> bool:
        return self == StyleState()

    def closing_markers(self) -> str:
        """Markdown that closes every active attribute (italics, bold, underline, strike)."""
        return "".join(marker for attr, marker in _CLOSE_ORDER if getattr(self, attr))

    def opening_markers(self) -> str:
        """Markdown that opens every active attribute, mirroring :meth:`closing_markers`."""
        return "".join(marker for attr, marker in reversed(_CLOSE_ORDER) if getattr(self, attr))
