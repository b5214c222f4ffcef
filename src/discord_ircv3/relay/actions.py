"""Outbound actions produced by translating an inbound event, and their execution."""

from __future__ import annotations

from dataclasses import dataclass

from discord_ircv3.core.context import BridgeContext
from discord_ircv3.log import get_logger
from discord_ircv3.messenger.base import DiscordMessenger
from discord_ircv3.messenger.models import IrcLine

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class IrcSend:
    """A line for the live IRC connection."""

    line: IrcLine


@dataclass(frozen=True, slots=True)
class RecordCorrelation:
    """Link an IRC message id with a Discord message id."""

    irc_msgid: str
    discord_id: str


@dataclass(frozen=True, slots=True)
class DiscordSend:
    channel_id: str
    content: str
    reply_to: str | None = None
    irc_msgid: str | None = None  # correlate the created messages with this IRC id


@dataclass(frozen=True, slots=True)
class DiscordDelete:
    channel_id: str
    message_id: str


@dataclass(frozen=True, slots=True)
class DiscordTyping:
    channel_id: str


Action = IrcSend | RecordCorrelation | DiscordSend | DiscordDelete | DiscordTyping


@dataclass
class ActionExecutor:
    """Carries out actions and records correlations for successful Discord sends."""

    context: BridgeContext
    discord: DiscordMessenger

    async def execute(self, actions: list[Action]) -> None:
        for action in actions:
            await self._execute_one(action)

    async def _execute_one(self, action: Action) -> None:
        match action:
            case IrcSend(line=line):
                await self.context.irc.write(line)
            case RecordCorrelation(irc_msgid=irc_msgid, discord_id=discord_id):
                self.context.correlations.record_pair(irc_msgid, discord_id)
            case DiscordSend():
                await self._send_discord(action)
            case DiscordDelete(channel_id=channel_id, message_id=message_id):
                await self.discord.delete_message(channel_id, message_id)
            case DiscordTyping(channel_id=channel_id):
                await self.discord.send_typing_indicator(channel_id)

    async def _send_discord(self, action: DiscordSend) -> None:
        ids = await self.discord.send_message(action.channel_id, action.content, action.reply_to)
        if not ids:
            logger.warning("discord_send_failed", channel_id=action.channel_id)
            return
        if action.irc_msgid:
            for discord_id in ids:
                self.context.correlations.record_pair(action.irc_msgid, discord_id)
