"""Static Discord channel <-> IRC channel mapping."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType


class ChannelMap:
    """Immutable 1:1 mapping built once from configuration."""

    def __init__(self, discord_to_irc: Mapping[str, str]):
        by_irc: dict[str, str] = {}
        for discord_id, irc_name in discord_to_irc.items():
            # IRC channel names are case-insensitive
            key = irc_name.lower()
            if key in by_irc:
                raise ValueError(
                    f"IRC channel {irc_name!r} is mapped to both "
                    f"{by_irc[key]} and {discord_id}"
                )
            by_irc[key] = discord_id
        self._by_discord = MappingProxyType(dict(discord_to_irc))
        self._by_irc = MappingProxyType(by_irc)

    def irc_channel(self, discord_id: str) -> str | None:
        return self._by_discord.get(discord_id)

    def discord_channel(self, irc_name: str) -> str | None:
        return self._by_irc.get(irc_name.lower())

    def irc_channels(self) -> list[str]:
        return list(self._by_discord.values())

    def discord_channels(self) -> list[str]:
        return list(self._by_discord)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        """Yield ``(discord_id, irc_name)`` pairs."""
        return iter(self._by_discord.items())

    def __len__(self) -> int:
        return len(self._by_discord)
