"""Discord connection using discord.py v2+."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

import discord

from discord_ircv3.core.types import Platform
from discord_ircv3.log import get_logger
from discord_ircv3.messenger.base import DiscordMessenger
from discord_ircv3.messenger.models import (
    CustomEmoji,
    DiscordDeleteEvent,
    DiscordMessageEvent,
    DiscordReactionEvent,
    DiscordTypingEvent,
    GuildRoster,
    Member,
    Role,
)

if TYPE_CHECKING:
    from discord_ircv3.relay.discord_events import DiscordRelay

logger = get_logger(__name__)

MESSAGE_LIMIT = 2000

_E = TypeVar("_E")


def split_message(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split *text* into chunks Discord accepts.

    Cuts at the last whitespace before the limit so no word, escape or mention
    is broken; text without whitespace is cut hard.
    """
    chunks: list[str] = []
    while len(text) > limit:
        cut = max(text.rfind(" ", 0, limit + 1), text.rfind("\n", 0, limit + 1))
        if cut <= 0:
            chunks.append(text[:limit])
            text = text[limit:]
        else:
            chunks.append(text[:cut])
            text = text[cut + 1 :]
    if text or not chunks:
        chunks.append(text)
    return chunks


def _message_event(message: discord.Message) -> DiscordMessageEvent:
    author = message.author
    color = author.color.value if isinstance(author, discord.Member) else 0
    if not color and author.accent_color is not None:
        color = author.accent_color.value
    reference_id = None
    if message.reference is not None and message.reference.message_id is not None:
        reference_id = str(message.reference.message_id)
    return DiscordMessageEvent(
        message_id=str(message.id),
        channel_id=str(message.channel.id),
        guild_id=str(message.guild.id) if message.guild else None,
        author_id=str(author.id),
        username=author.name,
        content=message.content or "",
        nick=getattr(author, "nick", None) or "",
        color=color,
        reference_id=reference_id,
        attachment_urls=[att.url for att in message.attachments],
    )


def _guild_roster(guild: discord.Guild) -> GuildRoster:
    channels = {str(c.id): c.name for c in guild.channels}
    channels.update({str(t.id): t.name for t in guild.threads})
    return GuildRoster(
        guild_id=str(guild.id),
        members=[
            Member(id=str(m.id), username=m.name, nick=m.nick or "", discriminator=m.discriminator)
            for m in guild.members
        ],
        roles=[Role(id=str(r.id), name=r.name, mentionable=r.mentionable) for r in guild.roles],
        emojis=[
            CustomEmoji(id=str(e.id), name=e.name, animated=e.animated, available=e.available)
            for e in guild.emojis
        ],
        channels=channels,
    )


class DiscordAdapter(DiscordMessenger):
    """Discord bot connection; converts gateway events for the relay."""

    def __init__(self, token: str, reconnect_delay: float = 15.0):
        self._token = token
        self._reconnect_delay = reconnect_delay
        self._handler: DiscordRelay | None = None
        self._stopping = False

        intents = discord.Intents.default()
        intents.members = True
        intents.message_content = True
        self._client = discord.Client(intents=intents)

        # Register event handlers
        @self._client.event
        async def on_ready() -> None:
            logger.info("discord_ready", user=str(self._client.user), guilds=len(self._client.guilds))
            # member lists feed mention resolution; relaying does not wait for them
            for guild in self._client.guilds:
                if guild.chunked:
                    continue
                try:
                    await guild.chunk()
                except discord.HTTPException as e:
                    logger.warning("discord_chunk_failed", guild_id=str(guild.id), error=str(e))

        @self._client.event
        async def on_message(message: discord.Message) -> None:
            if self._handler:
                await self._dispatch(self._handler.handle_message, _message_event(message))

        @self._client.event
        async def on_raw_message_delete(payload: discord.RawMessageDeleteEvent) -> None:
            if not self._handler:
                return
            author_id = None
            if payload.cached_message is not None:
                author_id = str(payload.cached_message.author.id)
            event = DiscordDeleteEvent(
                message_id=str(payload.message_id),
                channel_id=str(payload.channel_id),
                author_id=author_id,
            )
            await self._dispatch(self._handler.handle_delete, event)

        @self._client.event
        async def on_raw_reaction_add(payload: discord.RawReactionActionEvent) -> None:
            if not self._handler:
                return
            event = DiscordReactionEvent(
                message_id=str(payload.message_id),
                channel_id=str(payload.channel_id),
                user_id=str(payload.user_id),
                emoji_name=payload.emoji.name or "",
            )
            await self._dispatch(self._handler.handle_reaction, event)

        @self._client.event
        async def on_typing(channel: Any, user: Any, when: Any) -> None:
            if self._handler:
                event = DiscordTypingEvent(channel_id=str(channel.id), user_id=str(user.id))
                await self._dispatch(self._handler.handle_typing, event)

    @property
    def platform_name(self) -> str:
        return Platform.DISCORD

    @property
    def self_id(self) -> str | None:
        user = self._client.user
        return str(user.id) if user else None

    def set_handler(self, handler: DiscordRelay) -> None:
        """Register the relay receiving every converted gateway event."""
        self._handler = handler

    async def run(self) -> None:
        while not self._stopping:
            try:
                await self._client.start(self._token)
                error = "connection closed"
            except Exception as e:
                error = str(e) or type(e).__name__
            if self._stopping:
                break
            logger.error("discord_error", error=error, retry_in=self._reconnect_delay)
            await asyncio.sleep(self._reconnect_delay)
            self._client.clear()

    async def stop(self) -> None:
        self._stopping = True
        await self._client.close()
        logger.info("discord_adapter_stopped")

    async def send_message(
        self, channel_id: str, content: str, reply_to: str | None = None
    ) -> list[str]:
        channel = self._client.get_partial_messageable(int(channel_id))
        reference = None
        if reply_to:
            reference = discord.MessageReference(
                message_id=int(reply_to), channel_id=int(channel_id), fail_if_not_exists=False
            )
        mentions = discord.AllowedMentions(everyone=False, users=True, roles=True, replied_user=True)

        ids: list[str] = []
        for chunk in split_message(content):
            try:
                sent = await channel.send(chunk, reference=reference, allowed_mentions=mentions)
            except discord.HTTPException as e:
                logger.error("discord_send_error", channel_id=channel_id, error=str(e))
                break
            ids.append(str(sent.id))
            reference = None  # only the first chunk is a reply
        return ids

    async def delete_message(self, channel_id: str, message_id: str) -> None:
        channel = self._client.get_partial_messageable(int(channel_id))
        try:
            await channel.get_partial_message(int(message_id)).delete()
        except discord.HTTPException as e:
            logger.warning("discord_delete_error", channel_id=channel_id, message_id=message_id, error=str(e))

    async def send_typing_indicator(self, channel_id: str) -> None:
        channel = self._client.get_partial_messageable(int(channel_id))
        try:
            await channel.typing()
        except discord.HTTPException as e:
            logger.debug("discord_typing_error", channel_id=channel_id, error=str(e))

    def roster(self, channel_id: str) -> GuildRoster | None:
        channel = self._client.get_channel(int(channel_id))
        guild = getattr(channel, "guild", None)
        if guild is None:
            return None
        return _guild_roster(guild)

    async def _dispatch(self, callback: Callable[[_E], Awaitable[None]], event: _E) -> None:
        try:
            await callback(event)
        except Exception as e:
            logger.error("discord_handler_error", event_type=type(event).__name__, error=str(e))
