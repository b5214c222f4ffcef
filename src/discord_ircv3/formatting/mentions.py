"""Turn ``@name`` and ``:emoji:`` written on IRC into Discord mentions."""

from __future__ import annotations

import re

from discord_ircv3.formatting.irc_to_discord import URL_PATTERN
from discord_ircv3.messenger.models import GuildRoster

# Runs on markdown produced by the control-code parser, so names may carry
# backslash escapes (``@foo\_bar``). Dots only join name parts, so a
# trailing full stop is punctuation.
_NAME_PART = r"(?:\\[\\*_~]|[^\s\u200b#*_~`\\@,.:;!?<>()\[\]'\"])+"
_MENTION = re.compile(rf"(?<![\w\\])@({_NAME_PART}(?:\.{_NAME_PART})*)(?:#(\d+))?")
_EMOJI = re.compile(r"(?<![<\w]):((?:\\_|\w)+):")
# escapes are skipped over; code spans and links are left untouched
_PROTECTED = re.compile(r"\\.|`[^`]*`|" + URL_PATTERN.pattern)
_UNESCAPE = re.compile(r"\\([\\*_~`])")


def _unescape(text: str) -> str:
    return _UNESCAPE.sub(r"\1", text)


def resolve_user_mention(roster: GuildRoster, name: str, discriminator: str | None) -> str | None:
    """Discord mention for ``@name`` / ``@name#1234``, or None if nobody matches.

    With a discriminator only an exact username match counts. Without one,
    nicknames win over usernames, which win over mentionable role names.
    """
    wanted = name.lower()
    if discriminator:
        for member in roster.members:
            if member.username.lower() == wanted and member.discriminator == discriminator:
                return member.mention
        return None
    for member in roster.members:
        if member.nick and member.nick.lower() == wanted:
            return member.mention
    for member in roster.members:
        if member.username.lower() == wanted:
            return member.mention
    for role in roster.roles:
        if role.mentionable and role.name.lower() == wanted:
            return role.mention
    return None


def resolve_emoji(roster: GuildRoster, name: str) -> str | None:
    wanted = name.lower()
    for emoji in roster.emojis:
        if emoji.available and emoji.name.lower() == wanted:
            return emoji.message_format
    return None


def _resolve_segment(text: str, roster: GuildRoster) -> str:
    def _mention(match: re.Match) -> str:
        resolved = resolve_user_mention(roster, _unescape(match.group(1)), match.group(2))
        return resolved or match.group(0)

    def _emoji(match: re.Match) -> str:
        return resolve_emoji(roster, _unescape(match.group(1))) or match.group(0)

    text = _MENTION.sub(_mention, text)
    return _EMOJI.sub(_emoji, text)


def resolve_mentions(text: str, roster: GuildRoster | None) -> str:
    """Resolve mentions and custom emoji everywhere except inside code spans and links.

    Unknown names are left exactly as written.
    """
    if roster is None or not text:
        return text
    parts: list[str] = []
    last = 0
    for match in _PROTECTED.finditer(text):
        if match.group(0).startswith("\\"):
            continue
        parts.append(_resolve_segment(text[last : match.start()], roster))
        parts.append(match.group(0))
        last = match.end()
    parts.append(_resolve_segment(text[last:], roster))
    return "".join(parts)
