"""Render a Discord markdown tree as IRC control-code text."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from discord_ircv3.formatting import markdown as md
from discord_ircv3.formatting.styles import (
    BOLD,
    ITALICS,
    MONOSPACE,
    REVERSE,
    STRIKETHROUGH,
    UNDERLINE,
)
from discord_ircv3.messenger.models import GuildRoster

INVALID_CHANNEL = "#invalid-channel"
INVALID_ROLE = "@invalid-role"
INVALID_USER = "@invalid-user"
INVALID_TIMESTAMP = "<invalid-timestamp>"

OPEN_QUOTE = "“"
CLOSE_QUOTE = "”"

TIMESTAMP_FORMATS = {
    "t": "%H:%M %Z",
    "T": "%H:%M:%S %Z",
    "d": "%Y/%m/%d %Z",
    "D": "%B %d, %Y %Z",
    "f": "%B %d, %Y at %H:%M %Z",
    "F": "%A, %B %d, %Y at %H:%M %Z",
}


def format_duration(seconds: int) -> str:
    """Compact duration such as ``3h2m5s``; hours are not folded into days."""
    hours, rest = divmod(abs(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def format_timestamp(
    stamp: str,
    fmt: str,
    tz: tzinfo | None = None,
    now: datetime | None = None,
) -> str:
    """Render a Discord ``<t:stamp:fmt>`` timestamp, or the placeholder if invalid."""
    try:
        moment = datetime.fromtimestamp(int(stamp), tz=timezone.utc).astimezone(tz)
    except (ValueError, OverflowError, OSError):
        return INVALID_TIMESTAMP

    if fmt == "R":
        current = now or datetime.now(timezone.utc)
        delta = int((current - moment).total_seconds())
        if delta > 0:
            return f"{format_duration(delta)} ago"
        return f"in {format_duration(delta)}"

    layout = TIMESTAMP_FORMATS.get(fmt)
    if layout is None:
        return INVALID_TIMESTAMP
    return moment.strftime(layout)


class IrcRenderer:
    """Walks a :class:`~discord_ircv3.formatting.markdown.Document` and builds IRC text.

    Mentions are resolved against *roster*; anything that cannot be resolved
    becomes a fixed placeholder instead of failing the message.
    """

    def __init__(
        self,
        roster: GuildRoster | None = None,
        tz: tzinfo | None = None,
        now: datetime | None = None,
    ):
        self._roster = roster
        self._tz = tz
        self._now = now
        self._out: list[str] = []

    def render(self, document: md.Node) -> str:
        self._out = []
        md.walk(document, self._visit)
        return "".join(self._out)

    def _visit(self, node: md.Node, entering: bool) -> None:
        out = self._out
        match node:
            case md.Bold():
                out.append(BOLD)
            case md.Italic():
                out.append(ITALICS)
            case md.Underline():
                out.append(UNDERLINE)
            case md.Strikethrough():
                out.append(STRIKETHROUGH)
            case md.BlockQuote():
                out.append(OPEN_QUOTE if entering else CLOSE_QUOTE)
            case md.Spoiler():
                out.append(REVERSE + "||" if entering else "||" + REVERSE)
            case md.Document():
                pass
            case md.Text(content=content):
                out.append(content)
            case md.Code(content=content, language=language):
                prefix = f"{language} " if language else ""
                out.append(f"{MONOSPACE}`{prefix}{content}`{MONOSPACE}")
            case md.URL(url=url):
                out.append(url)
            case md.Emoji(name=name):
                out.append(f":{name}:")
            case md.ChannelMention(id=channel_id):
                out.append(self._channel(channel_id))
            case md.RoleMention(id=role_id):
                out.append(self._role(role_id))
            case md.UserMention(id=user_id):
                out.append(self._user(user_id))
            case md.SpecialMention(text=text):
                out.append("@" + text)
            case md.Timestamp(stamp=stamp, format=fmt):
                out.append(format_timestamp(stamp, fmt, self._tz, self._now))
            case _:
                raise TypeError(f"unknown markdown node: {type(node).__name__}")

    def _channel(self, channel_id: str) -> str:
        name = self._roster.channel_name(channel_id) if self._roster else None
        return f"#{name}" if name else INVALID_CHANNEL

    def _role(self, role_id: str) -> str:
        role = self._roster.role(role_id) if self._roster else None
        return f"@{role.name}" if role else INVALID_ROLE

    def _user(self, user_id: str) -> str:
        member = self._roster.member(user_id) if self._roster else None
        return f"@{member.display_nick}" if member else INVALID_USER


def discord_to_irc(
    content: str,
    roster: GuildRoster | None = None,
    tz: tzinfo | None = None,
    now: datetime | None = None,
) -> str:
    """Parse Discord message content and render it with IRC control codes."""
    return IrcRenderer(roster, tz, now).render(md.parse(content))
