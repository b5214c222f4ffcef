"""Tests for the coloured sender prefix."""

from discord_ircv3.formatting.prefix import NICK_COLORS, fnv1_32, nick_color, sender_prefix, unhighlight


def test_fnv1_known_values():
    assert fnv1_32(b"") == 0x811C9DC5
    assert fnv1_32(b"a") == 0x050C5D7E


def test_palette_color_is_stable():
    color = nick_color("alice")
    assert color == nick_color("alice")
    assert color.startswith("\x03")
    assert int(color[1:]) in NICK_COLORS


def test_discord_color_wins():
    assert nick_color("alice", 0xFF8000) == "\x04FF8000"


def test_unhighlight():
    assert unhighlight("alice") == "a\u200blice"
    assert unhighlight("x") == "x"


def test_sender_prefix_prefers_nick():
    assert sender_prefix("Ali", "alice", 0x00FF00) == "<\x0400FF00A\u200bli\x0f> "
    assert sender_prefix("", "bob", 0x0000FF) == "<\x040000FFb\u200bob\x0f> "
