"""IRC -> Discord relay: readiness handshake, echo correlation and event translation."""

from __future__ import annotations

import re
from collections.abc import Callable

from discord_ircv3.core.context import BridgeContext
from discord_ircv3.core.types import ConnectionState
from discord_ircv3.formatting.irc_to_discord import irc_to_discord
from discord_ircv3.formatting.mentions import resolve_mentions
from discord_ircv3.formatting.styles import BOLD, ITALICS, RESET
from discord_ircv3.log import get_logger
from discord_ircv3.messenger.base import DiscordMessenger, IrcConnection
from discord_ircv3.messenger.models import IrcLine
from discord_ircv3.relay import notices
from discord_ircv3.relay.actions import (
    Action,
    ActionExecutor,
    DiscordDelete,
    DiscordSend,
    DiscordTyping,
    RecordCorrelation,
)

logger = get_logger(__name__)

READY_TOKEN = "ready"
MEDIA_LINK_PATTERN = re.compile(
    r"https?://[^\s\x01-\x16]+\.(?:jpg|jpeg|png|gif|mp4|webm)", re.IGNORECASE
)


class IrcRelay:
    """Handles every line received on the IRC connection."""

    def __init__(self, context: BridgeContext, executor: ActionExecutor, discord: DiscordMessenger):
        self._context = context
        self._executor = executor
        self._discord = discord

    async def connection_started(self) -> None:
        """Called by the transport once the socket is up and registration begins."""
        self._context.irc.state = ConnectionState.HANDSHAKING

    async def connection_lost(self) -> None:
        await self._context.irc.detach()

    async def handle(self, conn: IrcConnection, line: IrcLine) -> None:
        nick = conn.nickname
        if line.name == nick and line.command != "PRIVMSG":
            return
        if await self._handshake(conn, line):
            return
        if not self._context.irc.ready:
            return
        actions = self.translate(line, nick)
        if actions:
            await self._executor.execute(actions)

    async def _handshake(self, conn: IrcConnection, line: IrcLine) -> bool:
        """Drive the readiness handshake; returns True if *line* belonged to it."""
        live = self._context.irc
        match line.command:
            case "001":
                for channel in self._context.channels.irc_channels():
                    await conn.write(IrcLine("JOIN", [channel]))
                await live.attach(conn)
                logger.info("irc_registered", nick=conn.nickname)
            case "005":
                # RPL_ISUPPORT: <nick> <token>... :are supported by this server
                for token in line.params[1:-1]:
                    key, _, value = token.partition("=")
                    if key == "BOT" and value:
                        await conn.write(IrcLine("MODE", [conn.nickname, "+" + value]))
                await conn.write(IrcLine("PING", [READY_TOKEN]))
            case "PONG":
                if line.params and line.params[-1] == READY_TOKEN and not live.ready:
                    live.state = ConnectionState.READY
                    logger.info("irc_ready", channels=len(self._context.channels))
            case _:
                return False
        return True

    def translate(self, line: IrcLine, nick: str) -> list[Action]:
        """Map one IRC line to the Discord-side actions it causes."""
        correlations = self._context.correlations
        channels = self._context.channels
        msgid = line.tag("msgid") or None
        reply_tag = line.tag("+draft/reply")
        reply_to = correlations.latest_target(reply_tag) if reply_tag else None

        def send(channel_id: str, irc_text: str, correlate: bool = True) -> DiscordSend:
            return DiscordSend(
                channel_id=channel_id,
                content=self._to_discord(channel_id, irc_text),
                reply_to=reply_to,
                irc_msgid=msgid if correlate else None,
            )

        match line.command:
            case "NICK":
                text = notices.nick_notice(line.name, line.param(0))
                return [send(dc, text) for dc in channels.discord_channels()]
            case "QUIT":
                text = notices.quit_notice(line.name, line.param(0) or None)
                return [send(dc, text) for dc in channels.discord_channels()]

        dc = channels.discord_channel(line.param(0))
        if dc is None:
            return []

        match line.command:
            case "JOIN":
                return [send(dc, notices.join_notice(line.name))]
            case "PART":
                return [send(dc, notices.part_notice(line.name, line.param(1) or None))]
            case "KICK":
                text = notices.kick_notice(line.param(1), line.name, line.param(2) or None)
                return [send(dc, text)]
            case "REDACT":
                return [DiscordDelete(dc, target) for target in correlations.lookup_by_source(line.param(1))]
            case "TAGMSG":
                if line.tag("+typing") == "active":
                    return [DiscordTyping(dc)]
                return []
            case "PRIVMSG":
                return self._privmsg(line, nick, dc, msgid, reply_to, send)
            case _:
                # NOTICE and everything else stays on IRC
                return []

    def _privmsg(
        self,
        line: IrcLine,
        nick: str,
        dc: str,
        msgid: str | None,
        reply_to: str | None,
        send: Callable[..., DiscordSend],
    ) -> list[Action]:
        if line.name == nick:
            # echo-message: our own relayed line, now carrying the server msgid
            discord_id = line.tag("+discord")
            if msgid and discord_id:
                return [RecordCorrelation(msgid, discord_id)]
            return []

        body = line.param(1)
        if reply_to:
            body = body.removeprefix(f"{nick}: ")
        if body.startswith("\x01"):
            verb, _, data = body[1:].strip("\x01").partition(" ")
            if verb != "ACTION":
                return []
            body = ITALICS + data
        if not body:
            return []

        if " " not in body and MEDIA_LINK_PATTERN.fullmatch(body):
            # alone in its message so Discord embeds it
            return [
                send(dc, f"{BOLD}<{line.name}>", correlate=False),
                send(dc, body),
            ]
        return [send(dc, f"{BOLD}<{line.name}>{RESET} {body}")]

    def _to_discord(self, channel_id: str, irc_text: str) -> str:
        return resolve_mentions(irc_to_discord(irc_text), self._discord.roster(channel_id))
