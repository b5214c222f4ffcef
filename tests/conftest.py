"""Shared fixtures for the discord-ircv3 test suite."""

from __future__ import annotations

import pytest
import pytest_asyncio

from discord_ircv3.core.channels import ChannelMap
from discord_ircv3.core.context import REDACTION_CAP, BridgeContext
from discord_ircv3.core.correlation import CorrelationStore
from discord_ircv3.core.types import ConnectionState
from discord_ircv3.messenger.base import DiscordMessenger, IrcConnection
from discord_ircv3.messenger.models import CustomEmoji, GuildRoster, IrcLine, Member, Role
from discord_ircv3.relay.actions import ActionExecutor


class FakeIrcConnection(IrcConnection):
    """Records every line written instead of sending it."""

    def __init__(self, nickname: str = "bridge", caps: set[str] | None = None):
        self._nickname = nickname
        self.caps = caps if caps is not None else {REDACTION_CAP}
        self.lines: list[IrcLine] = []

    @property
    def nickname(self) -> str:
        return self._nickname

    async def write(self, line: IrcLine) -> None:
        self.lines.append(line)

    def cap_enabled(self, capability: str) -> bool:
        return capability in self.caps


class FakeDiscord(DiscordMessenger):
    """In-memory Discord side handing out sequential message ids."""

    def __init__(self, roster: GuildRoster | None = None, self_id: str | None = "999"):
        self._roster = roster
        self._self_id = self_id
        self.sent: list[tuple[str, str, str | None]] = []
        self.deleted: list[tuple[str, str]] = []
        self.typing: list[str] = []
        self.fail_sends = False
        self._next_id = 0

    @property
    def platform_name(self) -> str:
        return "discord"

    @property
    def self_id(self) -> str | None:
        return self._self_id

    async def run(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def send_message(self, channel_id, content, reply_to=None):
        if self.fail_sends:
            return []
        self.sent.append((channel_id, content, reply_to))
        self._next_id += 1
        return [f"d-{self._next_id}"]

    async def delete_message(self, channel_id, message_id):
        self.deleted.append((channel_id, message_id))

    async def send_typing_indicator(self, channel_id):
        self.typing.append(channel_id)

    def roster(self, channel_id):
        return self._roster


@pytest.fixture
def roster():
    return GuildRoster(
        guild_id="1",
        members=[
            Member(id="11", username="alice", nick="Ali"),
            Member(id="12", username="bob_smith"),
            Member(id="13", username="carol", discriminator="1234"),
        ],
        roles=[
            Role(id="21", name="Mods"),
            Role(id="22", name="Secret", mentionable=False),
        ],
        emojis=[
            CustomEmoji(id="31", name="blob"),
            CustomEmoji(id="32", name="party", animated=True),
            CustomEmoji(id="33", name="gone", available=False),
        ],
        channels={"100": "general", "200": "random"},
    )


@pytest.fixture
def context():
    return BridgeContext(
        channels=ChannelMap({"100": "#general", "200": "#random"}),
        correlations=CorrelationStore(),
    )


@pytest.fixture
def discord():
    return FakeDiscord()


@pytest.fixture
def executor(context, discord):
    return ActionExecutor(context, discord)


@pytest.fixture
def irc_conn():
    return FakeIrcConnection()


@pytest_asyncio.fixture
async def ready_context(context, irc_conn):
    """Context whose IRC connection has finished the readiness handshake."""
    await context.irc.attach(irc_conn)
    context.irc.state = ConnectionState.READY
    return context
