"""Text templates for IRC membership events shown on Discord."""

from __future__ import annotations

from discord_ircv3.formatting.styles import ITALICS, RESET


def _who(nick: str) -> str:
    return f"{ITALICS}{nick}{RESET}"


def _with_reason(text: str, reason: str | None) -> str:
    return f"{text}: {reason}" if reason else text


def join_notice(nick: str) -> str:
    return f"{_who(nick)} has joined the channel"


def part_notice(nick: str, reason: str | None = None) -> str:
    return _with_reason(f"{_who(nick)} has left the channel", reason)


def kick_notice(target: str, by: str, reason: str | None = None) -> str:
    return _with_reason(f"{_who(target)} was kicked off the channel by {by}", reason)


def quit_notice(nick: str, reason: str | None = None) -> str:
    return _with_reason(f"{_who(nick)} has quit", reason)


def nick_notice(old: str, new: str) -> str:
    return f"{_who(old)} is now known as {new}"
