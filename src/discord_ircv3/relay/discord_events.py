"""Discord -> IRC relay."""

from __future__ import annotations

import re
from datetime import tzinfo

from discord_ircv3.core.context import BridgeContext
from discord_ircv3.formatting.discord_to_irc import discord_to_irc
from discord_ircv3.formatting.prefix import sender_prefix
from discord_ircv3.log import get_logger
from discord_ircv3.messenger.base import DiscordMessenger
from discord_ircv3.messenger.models import (
    DiscordDeleteEvent,
    DiscordMessageEvent,
    DiscordReactionEvent,
    DiscordTypingEvent,
    IrcLine,
)
from discord_ircv3.relay.actions import Action, ActionExecutor, IrcSend

logger = get_logger(__name__)

_NEWLINES = re.compile(r"\r\n|\n|\r")


class DiscordRelay:
    """Translates Discord gateway events into IRC lines.

    Lines go out through the live IRC connection; the correlation for a
    relayed message is learned later from its echo (see ``IrcRelay``).
    """

    def __init__(
        self,
        context: BridgeContext,
        executor: ActionExecutor,
        discord: DiscordMessenger,
        tz: tzinfo | None = None,
    ):
        self._context = context
        self._executor = executor
        self._discord = discord
        self._tz = tz

    def _is_self(self, user_id: str | None) -> bool:
        return user_id is not None and user_id == self._discord.self_id

    async def handle_message(self, event: DiscordMessageEvent) -> None:
        await self._executor.execute(self.translate_message(event))

    async def handle_delete(self, event: DiscordDeleteEvent) -> None:
        await self._executor.execute(self.translate_delete(event))

    async def handle_reaction(self, event: DiscordReactionEvent) -> None:
        await self._executor.execute(self.translate_reaction(event))

    async def handle_typing(self, event: DiscordTypingEvent) -> None:
        await self._executor.execute(self.translate_typing(event))

    def translate_message(self, event: DiscordMessageEvent) -> list[Action]:
        if self._is_self(event.author_id):
            return []
        channel = self._context.channels.irc_channel(event.channel_id)
        if channel is None:
            return []

        tags = {"+discord": event.message_id}
        if event.reference_id:
            reply_to = self._context.correlations.first_source(event.reference_id)
            if reply_to:
                tags["+draft/reply"] = reply_to

        prefix = sender_prefix(event.nick, event.username, event.color)
        actions: list[Action] = []
        if event.content:
            body = discord_to_irc(event.content, self._discord.roster(event.channel_id), self._tz)
            body = _NEWLINES.sub(" ", body)
            actions.append(IrcSend(IrcLine("PRIVMSG", [channel, prefix + body], dict(tags))))
        for url in event.attachment_urls:
            actions.append(IrcSend(IrcLine("PRIVMSG", [channel, prefix + url], dict(tags))))
        return actions

    def translate_delete(self, event: DiscordDeleteEvent) -> list[Action]:
        if self._is_self(event.author_id):
            return []
        channel = self._context.channels.irc_channel(event.channel_id)
        if channel is None:
            return []
        return [
            IrcSend(IrcLine("REDACT", [channel, irc_id]))
            for irc_id in self._context.correlations.lookup_by_target(event.message_id)
        ]

    def translate_reaction(self, event: DiscordReactionEvent) -> list[Action]:
        if self._is_self(event.user_id):
            return []
        channel = self._context.channels.irc_channel(event.channel_id)
        if channel is None or not event.emoji_name:
            return []
        reply_to = self._context.correlations.first_source(event.message_id)
        if reply_to is None:
            logger.debug("reaction_uncorrelated", message_id=event.message_id)
            return []
        tags = {"+draft/react": event.emoji_name, "+draft/reply": reply_to}
        return [IrcSend(IrcLine("TAGMSG", [channel], tags))]

    def translate_typing(self, event: DiscordTypingEvent) -> list[Action]:
        if self._is_self(event.user_id):
            return []
        channel = self._context.channels.irc_channel(event.channel_id)
        if channel is None:
            return []
        return [IrcSend(IrcLine("TAGMSG", [channel], {"+typing": "active"}))]
