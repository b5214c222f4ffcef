"""Application orchestrator - wires all components and manages lifecycle."""

from __future__ import annotations

import asyncio

from discord_ircv3.config import BridgeConfig
from discord_ircv3.core.channels import ChannelMap
from discord_ircv3.core.context import BridgeContext
from discord_ircv3.core.correlation import CorrelationStore
from discord_ircv3.log import get_logger
from discord_ircv3.messenger.base import MessengerAdapter
from discord_ircv3.messenger.discord_adapter import DiscordAdapter
from discord_ircv3.messenger.irc_adapter import IrcAdapter
from discord_ircv3.relay.actions import ActionExecutor
from discord_ircv3.relay.discord_events import DiscordRelay
from discord_ircv3.relay.irc_events import IrcRelay

logger = get_logger(__name__)


class BridgeApp:
    """Top-level application orchestrator."""

    def __init__(self, config: BridgeConfig):
        self.config = config
        self.context = BridgeContext(
            channels=ChannelMap(config.channels),
            correlations=CorrelationStore(limit=config.correlation_limit),
        )
        self.discord = DiscordAdapter(config.discord.token, reconnect_delay=config.reconnect_delay)
        self.executor = ActionExecutor(self.context, self.discord)
        self.irc_relay = IrcRelay(self.context, self.executor, self.discord)
        self.discord_relay = DiscordRelay(
            self.context, self.executor, self.discord, tz=config.tzinfo()
        )
        self.discord.set_handler(self.discord_relay)
        self.irc = IrcAdapter(
            config.irc,
            self.irc_relay,
            reconnect_delay=config.reconnect_delay,
            debug=config.debug,
        )
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def adapters(self) -> list[MessengerAdapter]:
        return [self.irc, self.discord]

    async def start(self) -> None:
        """Start both connection loops in the background."""
        for adapter in self.adapters:
            task = asyncio.create_task(adapter.run(), name=f"{adapter.platform_name}-loop")
            self._tasks.append(task)
        logger.info(
            "bridge_started",
            channels=len(self.context.channels),
            server=self.config.irc.server,
        )

    async def wait(self) -> None:
        """Block until a connection loop exits (they normally never do)."""
        if not self._tasks:
            return
        done, _ = await asyncio.wait(self._tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.error(
                    "bridge_loop_failed", task=task.get_name(), error=str(task.exception())
                )

    async def stop(self) -> None:
        """Gracefully shut down both connections."""
        for adapter in self.adapters:
            try:
                await adapter.stop()
            except Exception as e:
                logger.error("adapter_stop_error", platform=adapter.platform_name, error=str(e))
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("bridge_stopped")
