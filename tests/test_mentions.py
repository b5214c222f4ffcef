"""Tests for @name / :emoji: resolution on IRC -> Discord text."""

from discord_ircv3.formatting.irc_to_discord import irc_to_discord
from discord_ircv3.formatting.mentions import (
    resolve_emoji,
    resolve_mentions,
    resolve_user_mention,
)
from discord_ircv3.messenger.models import Member


def test_nickname_beats_username(roster):
    assert resolve_user_mention(roster, "ali", None) == "<@11>"
    assert resolve_user_mention(roster, "alice", None) == "<@11>"


def test_discriminator_requires_exact_username(roster):
    assert resolve_user_mention(roster, "carol", "1234") == "<@13>"
    assert resolve_user_mention(roster, "carol", "9999") is None


def test_only_mentionable_roles(roster):
    assert resolve_user_mention(roster, "mods", None) == "<@&21>"
    assert resolve_user_mention(roster, "secret", None) is None


def test_emoji_lookup_skips_unavailable(roster):
    assert resolve_emoji(roster, "blob") == "<:blob:31>"
    assert resolve_emoji(roster, "party") == "<a:party:32>"
    assert resolve_emoji(roster, "gone") is None


def test_mentions_anywhere_in_text(roster):
    assert resolve_mentions("hey @alice and @Mods :blob:", roster) == "hey <@11> and <@&21> <:blob:31>"


def test_escaped_names_from_control_code_conversion(roster):
    text = irc_to_discord("@bob_smith hi")
    assert text == "@bob\\_smith hi"
    assert resolve_mentions(text, roster) == "<@12> hi"


def test_unknown_names_left_as_written(roster):
    assert resolve_mentions("ping @nobody :nope:", roster) == "ping @nobody :nope:"


def test_email_addresses_are_not_mentions(roster):
    assert resolve_mentions("mail alice@alice.example", roster) == "mail alice@alice.example"


def test_code_spans_untouched(roster):
    assert resolve_mentions("`@alice` @alice", roster) == "`@alice` <@11>"


def test_without_roster_text_is_unchanged():
    assert resolve_mentions("@alice", None) == "@alice"


def test_links_are_left_intact(roster):
    text = irc_to_discord("see https://mastodon.social/@alice")
    assert resolve_mentions(text, roster) == "see https://mastodon.social/@alice"

    text = irc_to_discord("https://example.com/:blob:/x and :blob:")
    assert resolve_mentions(text, roster) == "https://example.com/:blob:/x and <:blob:31>"


def test_sentence_punctuation_ends_a_name(roster):
    assert resolve_mentions("thanks @alice.", roster) == "thanks <@11>."
    assert resolve_mentions("(@alice) '@Ali'", roster) == "(<@11>) '<@11>'"


def test_dotted_names(roster):
    roster.members.append(Member(id="14", username="john.doe"))
    assert resolve_mentions("hi @john.doe.", roster) == "hi <@14>."
