"""Tests for Discord markdown -> IRC control codes."""

from datetime import datetime, timezone

import pytest

from discord_ircv3.formatting.discord_to_irc import (
    INVALID_TIMESTAMP,
    discord_to_irc,
    format_duration,
    format_timestamp,
)

UTC = timezone.utc


def test_plain_text():
    assert discord_to_irc("just text") == "just text"


def test_bold_uses_toggle_byte_on_both_sides():
    assert discord_to_irc("**hi**") == "\x02hi\x02"
    assert discord_to_irc("hello **world**") == "hello \x02world\x02"


def test_other_emphasis():
    assert discord_to_irc("*a* __b__ ~~c~~") == "\x1da\x1d \x1fb\x1f \x1ec\x1e"


def test_block_quote_becomes_quotation_marks():
    assert discord_to_irc("> wise words") == "“wise words”"


def test_spoiler_uses_reverse_video():
    assert discord_to_irc("||secret||") == "\x16||secret||\x16"


def test_code():
    assert discord_to_irc("`x = 1`") == "\x11`x = 1`\x11"
    assert discord_to_irc("```py\nprint(1)\n```") == "\x11`py print(1)`\x11"


def test_mentions_resolved_from_roster(roster):
    assert discord_to_irc("<@11>", roster) == "@Ali"
    assert discord_to_irc("<@!12>", roster) == "@bob_smith"
    assert discord_to_irc("<@&21>", roster) == "@Mods"
    assert discord_to_irc("<#100>", roster) == "#general"


def test_unresolvable_mentions_become_placeholders(roster):
    assert discord_to_irc("<@404>", roster) == "@invalid-user"
    assert discord_to_irc("<@&404>", roster) == "@invalid-role"
    assert discord_to_irc("<#404>", roster) == "#invalid-channel"
    assert discord_to_irc("<@11>") == "@invalid-user"


def test_emoji_and_special_mentions():
    assert discord_to_irc("<:blob:31> <a:party:32>") == ":blob: :party:"
    assert discord_to_irc("@everyone look") == "@everyone look"


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        ("t", "00:00 UTC"),
        ("T", "00:00:00 UTC"),
        ("d", "1970/01/01 UTC"),
        ("D", "January 01, 1970 UTC"),
        ("f", "January 01, 1970 at 00:00 UTC"),
        ("F", "Thursday, January 01, 1970 at 00:00 UTC"),
    ],
)
def test_timestamp_formats(fmt, expected):
    assert format_timestamp("0", fmt, UTC) == expected


def test_timestamp_default_format_in_message():
    assert discord_to_irc("at <t:0>", tz=UTC) == "at January 01, 1970 at 00:00 UTC"


def test_relative_timestamps():
    now = datetime(1970, 1, 1, 3, 2, 5, tzinfo=UTC)
    assert format_timestamp("0", "R", UTC, now) == "3h2m5s ago"
    assert format_timestamp("11000", "R", UTC, now) == "in 1m15s"


def test_invalid_timestamps():
    assert discord_to_irc("<t:abc>") == INVALID_TIMESTAMP
    assert format_timestamp("0", "x", UTC) == INVALID_TIMESTAMP


def test_format_duration():
    assert format_duration(59) == "59s"
    assert format_duration(61) == "1m1s"
    assert format_duration(3600) == "1h0m0s"
    assert format_duration(90000) == "25h0m0s"
