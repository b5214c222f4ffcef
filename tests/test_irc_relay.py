"""Tests for the IRC -> Discord relay."""

import pytest

from discord_ircv3.core.types import ConnectionState
from discord_ircv3.messenger.models import IrcLine
from discord_ircv3.relay.actions import ActionExecutor
from discord_ircv3.relay.irc_events import IrcRelay

from conftest import FakeDiscord

ZWSP = "\u200b"


def _privmsg(text, channel="#general", source="alice!a@host", **tags):
    return IrcLine("PRIVMSG", [channel, text], tags, source)


@pytest.fixture
def relay(context, executor, discord):
    return IrcRelay(context, executor, discord)


@pytest.mark.asyncio
async def test_readiness_handshake(relay, context, discord, irc_conn):
    await relay.connection_started()
    assert context.irc.state is ConnectionState.HANDSHAKING

    await relay.handle(irc_conn, IrcLine("001", ["bridge", "Welcome"], source="irc.example.net"))
    assert irc_conn.lines == [IrcLine("JOIN", ["#general"]), IrcLine("JOIN", ["#random"])]
    assert not context.irc.ready

    # traffic before the PONG is not relayed
    await relay.handle(irc_conn, _privmsg("too early", msgid="m0"))
    assert discord.sent == []

    isupport = ["bridge", "BOT=B", "CHANTYPES=#", "are supported by this server"]
    await relay.handle(irc_conn, IrcLine("005", isupport, source="irc.example.net"))
    assert irc_conn.lines[2:] == [IrcLine("MODE", ["bridge", "+B"]), IrcLine("PING", ["ready"])]

    await relay.handle(irc_conn, IrcLine("PONG", ["irc.example.net", "ready"], source="irc.example.net"))
    assert context.irc.ready

    await relay.handle(irc_conn, _privmsg("now", msgid="m1"))
    assert discord.sent == [("100", "**<alice>**" + ZWSP + " now", None)]


@pytest.mark.asyncio
async def test_connection_lost_resets_readiness(relay, ready_context):
    await relay.connection_lost()
    assert ready_context.irc.state is ConnectionState.DISCONNECTED


@pytest.mark.asyncio
async def test_privmsg_correlated(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, _privmsg("hello *world*", msgid="m1"))

    assert discord.sent == [("100", "**<alice>**" + ZWSP + " hello \\*world\\*", None)]
    assert ready_context.correlations.lookup_by_source("m1") == ["d-1"]


@pytest.mark.asyncio
async def test_own_echo_records_correlation(relay, ready_context, discord, irc_conn):
    line = _privmsg("<bob> hi", source="bridge!b@host", **{"msgid": "irc1", "+discord": "d1"})
    await relay.handle(irc_conn, line)

    assert discord.sent == []
    assert ready_context.correlations.lookup_by_source("irc1") == ["d1"]
    assert ready_context.correlations.first_source("d1") == "irc1"


@pytest.mark.asyncio
async def test_reply_threads_and_strips_nick(relay, ready_context, discord, irc_conn):
    ready_context.correlations.record_pair("m0", "d0")
    line = _privmsg("bridge: thanks", **{"msgid": "m2", "+draft/reply": "m0"})
    await relay.handle(irc_conn, line)

    assert discord.sent == [("100", "**<alice>**" + ZWSP + " thanks", "d0")]


@pytest.mark.asyncio
async def test_media_link_sent_alone(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, _privmsg("https://example.com/cat.PNG", msgid="m1"))

    assert discord.sent == [
        ("100", "**<alice>**", None),
        ("100", "https://example.com/cat.PNG", None),
    ]
    # only the link itself is tied to the IRC message
    assert ready_context.correlations.lookup_by_source("m1") == ["d-2"]


@pytest.mark.asyncio
async def test_action_rendered_in_italics(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, _privmsg("\x01ACTION waves\x01"))
    assert discord.sent == [("100", "**<alice>**" + ZWSP + " *waves*", None)]


@pytest.mark.asyncio
async def test_other_ctcp_dropped(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, _privmsg("\x01VERSION\x01"))
    assert discord.sent == []


@pytest.mark.asyncio
async def test_mentions_resolved(ready_context, roster, irc_conn):
    discord = FakeDiscord(roster)
    relay = IrcRelay(ready_context, ActionExecutor(ready_context, discord), discord)

    await relay.handle(irc_conn, _privmsg("hi @bob_smith :blob:"))

    assert discord.sent == [("100", "**<alice>**" + ZWSP + " hi <@12> <:blob:31>", None)]


@pytest.mark.asyncio
async def test_redact_deletes_every_correlated_message(relay, ready_context, discord, irc_conn):
    ready_context.correlations.record_pair("m1", "d1")
    ready_context.correlations.record_pair("m1", "d2")

    await relay.handle(irc_conn, IrcLine("REDACT", ["#general", "m1"], source="alice!a@host"))

    assert discord.deleted == [("100", "d1"), ("100", "d2")]


@pytest.mark.asyncio
async def test_membership_notices(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, IrcLine("JOIN", ["#general"], source="carol!c@host"))
    await relay.handle(irc_conn, IrcLine("PART", ["#general", "later"], source="carol!c@host"))
    await relay.handle(irc_conn, IrcLine("KICK", ["#general", "dave", "spam"], source="op!o@host"))

    assert [content for _, content, _ in discord.sent] == [
        "*carol*" + ZWSP + " has joined the channel",
        "*carol*" + ZWSP + " has left the channel: later",
        "*dave*" + ZWSP + " was kicked off the channel by op: spam",
    ]


@pytest.mark.asyncio
async def test_quit_and_nick_reach_every_channel(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, IrcLine("NICK", ["alice2"], source="alice!a@host"))
    await relay.handle(irc_conn, IrcLine("QUIT", ["bye"], source="alice2!a@host"))

    assert discord.sent == [
        ("100", "*alice*" + ZWSP + " is now known as alice2", None),
        ("200", "*alice*" + ZWSP + " is now known as alice2", None),
        ("100", "*alice2*" + ZWSP + " has quit: bye", None),
        ("200", "*alice2*" + ZWSP + " has quit: bye", None),
    ]


@pytest.mark.asyncio
async def test_own_membership_events_ignored(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, IrcLine("JOIN", ["#general"], source="bridge!b@host"))
    assert discord.sent == []


@pytest.mark.asyncio
async def test_typing_forwarded(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, IrcLine("TAGMSG", ["#random"], {"+typing": "active"}, "alice!a@host"))
    await relay.handle(irc_conn, IrcLine("TAGMSG", ["#random"], {"+typing": "done"}, "alice!a@host"))
    assert discord.typing == ["200"]


@pytest.mark.asyncio
async def test_unmapped_channel_and_notice_ignored(relay, ready_context, discord, irc_conn):
    await relay.handle(irc_conn, _privmsg("hi", channel="#elsewhere"))
    await relay.handle(irc_conn, IrcLine("NOTICE", ["#general", "hi"], source="alice!a@host"))
    assert discord.sent == []
