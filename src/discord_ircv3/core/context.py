"""Shared bridge state handed to both relays."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from discord_ircv3.core.channels import ChannelMap
from discord_ircv3.core.correlation import CorrelationStore
from discord_ircv3.core.types import ConnectionState
from discord_ircv3.log import get_logger
from discord_ircv3.messenger.base import IrcConnection
from discord_ircv3.messenger.models import IrcLine

logger = get_logger(__name__)

REDACTION_CAP = "draft/message-redaction"


class LiveConnection:
    """The current IRC connection, or none while disconnected.

    Writes are serialized behind one lock. While no connection is attached,
    writes are dropped rather than queued.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._conn: IrcConnection | None = None
        self.state = ConnectionState.DISCONNECTED

    @property
    def ready(self) -> bool:
        return self.state is ConnectionState.READY

    async def attach(self, conn: IrcConnection) -> None:
        async with self._lock:
            self._conn = conn

    async def detach(self) -> None:
        async with self._lock:
            self._conn = None
            self.state = ConnectionState.DISCONNECTED

    async def write(self, line: IrcLine) -> bool:
        """Send *line* on the live connection; returns False if it was dropped."""
        async with self._lock:
            if self._conn is None:
                logger.debug("irc_write_dropped", command=line.command, reason="disconnected")
                return False
            if line.command == "REDACT" and not self._conn.cap_enabled(REDACTION_CAP):
                logger.debug("irc_write_dropped", command=line.command, reason="no_redaction_cap")
                return False
            await self._conn.write(line)
            return True


@dataclass
class BridgeContext:
    """State shared by the IRC and Discord relays for the process lifetime."""

    channels: ChannelMap
    correlations: CorrelationStore = field(default_factory=CorrelationStore)
    irc: LiveConnection = field(default_factory=LiveConnection)
