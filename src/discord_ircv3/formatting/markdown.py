"""Discord markdown document tree and a rule-based parser producing it.

The rules follow the ones Discord's client applies: code blocks and inline
code are opaque, block quotes only start at the beginning of a line, and the
emphasis markers nest freely. Anything that does not match a rule is text.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(slots=True)
class Text:
    content: str


@dataclass(slots=True)
class Code:
    content: str
    language: str = ""


@dataclass(slots=True)
class URL:
    url: str


@dataclass(slots=True)
class Emoji:
    name: str
    id: str = ""


@dataclass(slots=True)
class ChannelMention:
    id: str


@dataclass(slots=True)
class RoleMention:
    id: str


@dataclass(slots=True)
class UserMention:
    id: str


@dataclass(slots=True)
class SpecialMention:
    text: str  # "everyone" or "here"


@dataclass(slots=True)
class Timestamp:
    stamp: str
    format: str = "f"


@dataclass(slots=True)
class Document:
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Bold:
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Italic:
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Underline:
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Strikethrough:
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Spoiler:
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class BlockQuote:
    children: list[Node] = field(default_factory=list)


Container = Document | Bold | Italic | Underline | Strikethrough | Spoiler | BlockQuote
Leaf = (
    Text | Code | URL | Emoji | ChannelMention | RoleMention | UserMention | SpecialMention | Timestamp
)
Node = Container | Leaf

CONTAINER_TYPES = (Document, Bold, Italic, Underline, Strikethrough, Spoiler, BlockQuote)


def walk(node: Node, visit: Callable[[Node, bool], None]) -> None:
    """Pre-order traversal.

    Containers are visited twice (``entering`` True then False) around their
    children; leaves are visited once with ``entering=True``.
    """
    if isinstance(node, CONTAINER_TYPES):
        visit(node, True)
        for child in node.children:
            walk(child, visit)
        visit(node, False)
    else:
        visit(node, True)


# --- parser -----------------------------------------------------------------

_ESCAPE = re.compile(r"\\([^0-9A-Za-z\s])")
_CODE_BLOCK = re.compile(r"```(?:([a-z0-9_+\-.#]+?)\n)?\n*([^\n][\s\S]*?)\n*```", re.IGNORECASE)
_BLOCK_QUOTE_ALL = re.compile(r" *>>> ([\s\S]*)")
_BLOCK_QUOTE = re.compile(r" *> [^\n]*(?:\n *> [^\n]*)*\n?")
_QUOTE_PREFIX = re.compile(r"^ *> ?", re.MULTILINE)
_INLINE_CODE = re.compile(r"(`+)([\s\S]*?[^`])\1(?!`)")
_SPOILER = re.compile(r"\|\|([\s\S]+?)\|\|")
_BOLD = re.compile(r"\*\*((?:\\[\s\S]|[^\\])+?)\*\*(?!\*)")
_UNDERLINE = re.compile(r"__((?:\\[\s\S]|[^\\])+?)__(?!_)")
_ITALIC = re.compile(
    r"\b_((?:__|\\[\s\S]|[^\\_])+?)_\b"
    r"|\*(?=\S)((?:\*\*|\\[\s\S]|\s+(?:\\[\s\S]|[^\s*\\]|\*\*)|[^\s*\\])+?)\*(?!\*)"
)
_STRIKETHROUGH = re.compile(r"~~([\s\S]+?)~~")
_EMOJI = re.compile(r"<a?:(\w+):(\d+)>")
_TIMESTAMP = re.compile(r"<t:([^:>\s]+)(?::(\w))?>")
_USER_MENTION = re.compile(r"<@!?(\d+)>")
_ROLE_MENTION = re.compile(r"<@&(\d+)>")
_CHANNEL_MENTION = re.compile(r"<#(\d+)>")
_SPECIAL_MENTION = re.compile(r"@(everyone|here)")
_AUTOLINK = re.compile(r"<(https?://[^ >]+)>")
_URL = re.compile(r"https?://[^\s<]+[^<.,:;\"')\]\s]")
_TEXT = re.compile(r"[\s\S]+?(?=[^0-9A-Za-z\s\u00c0-\uffff]|\n|\w+:\S|$)")


class MarkdownParser:
    """Parses Discord message content into a :class:`Document`."""

    def parse(self, content: str) -> Document:
        return Document(self._parse_inline(content, in_quote=False))

    def _parse_inline(self, text: str, in_quote: bool) -> list[Node]:
        nodes: list[Node] = []
        pos = 0
        while pos < len(text):
            node, pos = self._next_node(text, pos, in_quote)
            if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
                nodes[-1].content += node.content
            else:
                nodes.append(node)
        return nodes

    def _next_node(self, text: str, pos: int, in_quote: bool) -> tuple[Node, int]:
        if m := _ESCAPE.match(text, pos):
            return Text(m.group(1)), m.end()
        if m := _CODE_BLOCK.match(text, pos):
            return Code(content=m.group(2), language=m.group(1) or ""), m.end()
        if not in_quote and (pos == 0 or text[pos - 1] == "\n"):
            if m := _BLOCK_QUOTE_ALL.match(text, pos):
                return BlockQuote(self._parse_inline(m.group(1), in_quote=True)), m.end()
            if m := _BLOCK_QUOTE.match(text, pos):
                inner = _QUOTE_PREFIX.sub("", m.group(0))
                return BlockQuote(self._parse_inline(inner, in_quote=True)), m.end()
        if m := _INLINE_CODE.match(text, pos):
            return Code(content=m.group(2)), m.end()
        if m := _SPOILER.match(text, pos):
            return Spoiler(self._parse_inline(m.group(1), in_quote)), m.end()
        if m := _BOLD.match(text, pos):
            return Bold(self._parse_inline(m.group(1), in_quote)), m.end()
        if m := _UNDERLINE.match(text, pos):
            return Underline(self._parse_inline(m.group(1), in_quote)), m.end()
        if m := _ITALIC.match(text, pos):
            inner = m.group(1) if m.group(1) is not None else m.group(2)
            return Italic(self._parse_inline(inner, in_quote)), m.end()
        if m := _STRIKETHROUGH.match(text, pos):
            return Strikethrough(self._parse_inline(m.group(1), in_quote)), m.end()
        if m := _EMOJI.match(text, pos):
            return Emoji(name=m.group(1), id=m.group(2)), m.end()
        if m := _TIMESTAMP.match(text, pos):
            return Timestamp(stamp=m.group(1), format=m.group(2) or "f"), m.end()
        if m := _ROLE_MENTION.match(text, pos):
            return RoleMention(m.group(1)), m.end()
        if m := _USER_MENTION.match(text, pos):
            return UserMention(m.group(1)), m.end()
        if m := _CHANNEL_MENTION.match(text, pos):
            return ChannelMention(m.group(1)), m.end()
        if m := _SPECIAL_MENTION.match(text, pos):
            return SpecialMention(m.group(1)), m.end()
        if m := _AUTOLINK.match(text, pos):
            return URL(m.group(1)), m.end()
        if m := _URL.match(text, pos):
            return URL(m.group(0)), m.end()
        if m := _TEXT.match(text, pos):
            return Text(m.group(0)), m.end()
        return Text(text[pos]), pos + 1


_parser = MarkdownParser()


def parse(content: str) -> Document:
    """Parse Discord message content with the shared parser."""
    return _parser.parse(content)
