"""Platform-neutral event, line and roster models shared by adapters and relays."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class IrcLine:
    """A single IRC protocol line with its IRCv3 message tags."""

    command: str
    params: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)
    source: str = ""  # nick!user@host, or a server name

    @property
    def name(self) -> str:
        """Nickname (or server name) part of the source."""
        return self.source.split("!", 1)[0]

    def tag(self, key: str) -> str:
        return self.tags.get(key, "")

    def param(self, index: int, default: str = "") -> str:
        try:
            return self.params[index]
        except IndexError:
            return default


@dataclass(frozen=True, slots=True)
class DiscordMessageEvent:
    message_id: str
    channel_id: str
    guild_id: str | None
    author_id: str
    username: str
    content: str
    nick: str = ""
    color: int = 0  # 0xRRGGBB, 0 when the author has no colour
    reference_id: str | None = None
    attachment_urls: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DiscordDeleteEvent:
    message_id: str
    channel_id: str
    author_id: str | None = None  # Discord omits the author on most deletions


@dataclass(frozen=True, slots=True)
class DiscordReactionEvent:
    message_id: str
    channel_id: str
    user_id: str
    emoji_name: str


@dataclass(frozen=True, slots=True)
class DiscordTypingEvent:
    channel_id: str
    user_id: str


@dataclass(frozen=True, slots=True)
class Member:
    id: str
    username: str
    nick: str = ""
    discriminator: str = "0"

    @property
    def display_nick(self) -> str:
        return self.nick or self.username

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"


@dataclass(frozen=True, slots=True)
class Role:
    id: str
    name: str
    mentionable: bool = True

    @property
    def mention(self) -> str:
        return f"<@&{self.id}>"


@dataclass(frozen=True, slots=True)
class CustomEmoji:
    id: str
    name: str
    animated: bool = False
    available: bool = True

    @property
    def message_format(self) -> str:
        prefix = "a" if self.animated else ""
        return f"<{prefix}:{self.name}:{self.id}>"


@dataclass(frozen=True, slots=True)
class GuildRoster:
    """Read-only snapshot of a guild's members, roles, emoji and channel names."""

    guild_id: str
    members: list[Member] = field(default_factory=list)
    roles: list[Role] = field(default_factory=list)
    emojis: list[CustomEmoji] = field(default_factory=list)
    channels: dict[str, str] = field(default_factory=dict)  # channel id -> name

    def member(self, member_id: str) -> Member | None:
        for m in self.members:
            if m.id == member_id:
                return m
        return None

    def role(self, role_id: str) -> Role | None:
        for r in self.roles:
            if r.id == role_id:
                return r
        return None

    def channel_name(self, channel_id: str) -> str | None:
        return self.channels.get(channel_id)
