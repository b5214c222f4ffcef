"""IRC connection using pydle, with IRCv3 message tags, echo-message and redaction."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pydle

from discord_ircv3.config import IrcConfig
from discord_ircv3.core.types import Platform
from discord_ircv3.log import get_logger
from discord_ircv3.messenger.base import IrcConnection, MessengerAdapter
from discord_ircv3.messenger.models import IrcLine

if TYPE_CHECKING:
    from discord_ircv3.relay.irc_events import IrcRelay

logger = get_logger(__name__)


def to_irc_line(message: Any) -> IrcLine:
    """Convert a parsed pydle message into an :class:`IrcLine`."""
    command = message.command
    if isinstance(command, int):
        command = f"{command:03d}"
    tags = {
        key: "" if value is True or value is None else str(value)
        for key, value in (getattr(message, "tags", None) or {}).items()
    }
    return IrcLine(
        command=str(command).upper(),
        params=[str(p) for p in message.params],
        tags=tags,
        source=message.source or "",
    )


class _BridgeClient(pydle.Client):
    """pydle client forwarding every raw line to the adapter."""

    # the adapter owns reconnection
    RECONNECT_ON_ERROR = False

    def __init__(self, adapter: IrcAdapter, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._adapter = adapter
        self.closed = asyncio.Event()

    async def on_capability_echo_message_available(self, value: Any) -> bool:
        return True

    async def on_capability_draft_message_redaction_available(self, value: Any) -> bool:
        return True

    async def on_raw(self, message: Any) -> None:
        await super().on_raw(message)
        await self._adapter.dispatch(self, message)

    async def on_disconnect(self, expected: bool) -> None:
        await super().on_disconnect(expected)
        self.closed.set()


class PydleConnection(IrcConnection):
    """Exposes a connected pydle client to the relay."""

    def __init__(self, client: _BridgeClient, debug: bool = False):
        self._client = client
        self._debug = debug

    @property
    def nickname(self) -> str:
        return self._client.nickname

    async def write(self, line: IrcLine) -> None:
        if self._debug:
            logger.debug("irc_send", command=line.command, params=line.params, tags=line.tags)
        if line.tags:
            await self._client.rawmsg(line.command, *line.params, tags=line.tags)
        else:
            await self._client.rawmsg(line.command, *line.params)

    def cap_enabled(self, capability: str) -> bool:
        # pydle records acknowledged capabilities here during negotiation
        return bool(self._client._capabilities.get(capability))


class IrcAdapter(MessengerAdapter):
    """Keeps one IRC connection alive, reconnecting after a fixed delay."""

    def __init__(
        self,
        config: IrcConfig,
        relay: IrcRelay,
        reconnect_delay: float = 15.0,
        debug: bool = False,
    ):
        self._config = config
        self._relay = relay
        self._reconnect_delay = reconnect_delay
        self._debug = debug
        self._client: _BridgeClient | None = None
        self._conn: PydleConnection | None = None
        self._stopping = False

    @property
    def platform_name(self) -> str:
        return Platform.IRC

    async def run(self) -> None:
        while not self._stopping:
            client = _BridgeClient(
                self,
                self._config.nickname,
                username=self._config.username,
                realname=self._config.realname,
            )
            self._client = client
            self._conn = PydleConnection(client, debug=self._debug)
            try:
                await self._relay.connection_started()
                await client.connect(
                    hostname=self._config.host,
                    port=self._config.port,
                    tls=self._config.tls,
                    tls_verify=self._config.tls_verify,
                )
                logger.info("irc_connected", server=self._config.server)
                await client.closed.wait()
                error = "connection closed"
            except Exception as e:
                error = str(e) or type(e).__name__
            await self._relay.connection_lost()
            if self._stopping:
                break
            logger.error("irc_error", error=error, retry_in=self._reconnect_delay)
            await asyncio.sleep(self._reconnect_delay)

    async def stop(self) -> None:
        self._stopping = True
        if self._client is not None and self._client.connected:
            await self._client.disconnect(expected=True)
        await self._relay.connection_lost()
        logger.info("irc_adapter_stopped")

    async def dispatch(self, client: _BridgeClient, message: Any) -> None:
        if client is not self._client or self._conn is None:
            return
        line = to_irc_line(message)
        if self._debug:
            logger.debug("irc_recv", source=line.source, command=line.command, params=line.params, tags=line.tags)
        try:
            await self._relay.handle(self._conn, line)
        except Exception as e:
            logger.error("irc_handler_error", command=line.command, error=str(e))
