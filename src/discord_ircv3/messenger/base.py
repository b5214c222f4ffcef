"""Abstract transport interfaces used by the relays."""

from __future__ import annotations

from abc import ABC, abstractmethod

from discord_ircv3.messenger.models import GuildRoster, IrcLine


class MessengerAdapter(ABC):
    """Base class for the two long-lived platform connections."""

    @abstractmethod
    async def run(self) -> None:
        """Connect and keep reconnecting until cancelled."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Gracefully disconnect."""
        ...

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return platform identifier string."""
        ...


class IrcConnection(ABC):
    """One established IRC connection, as seen by the relay."""

    @property
    @abstractmethod
    def nickname(self) -> str:
        """Our current nickname on this connection."""
        ...

    @abstractmethod
    async def write(self, line: IrcLine) -> None:
        """Send a line (tags included) on this connection."""
        ...

    @abstractmethod
    def cap_enabled(self, capability: str) -> bool:
        """Whether *capability* was acknowledged during negotiation."""
        ...


class DiscordMessenger(MessengerAdapter):
    """Operations the IRC side needs from the Discord connection."""

    @property
    @abstractmethod
    def self_id(self) -> str | None:
        """The bridge's own Discord user id, once logged in."""
        ...

    @abstractmethod
    async def send_message(
        self, channel_id: str, content: str, reply_to: str | None = None
    ) -> list[str]:
        """Send *content*, returning the ids of the created messages.

        Returns an empty list when nothing could be sent.
        """
        ...

    @abstractmethod
    async def delete_message(self, channel_id: str, message_id: str) -> None:
        ...

    @abstractmethod
    async def send_typing_indicator(self, channel_id: str) -> None:
        ...

    @abstractmethod
    def roster(self, channel_id: str) -> GuildRoster | None:
        """Snapshot of the guild owning *channel_id*, or None if unknown."""
        ...
