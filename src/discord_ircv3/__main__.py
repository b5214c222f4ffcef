"""CLI entry point for discord-ircv3."""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

from discord_ircv3.app import BridgeApp
from discord_ircv3.config import BridgeConfig, load_config
from discord_ircv3.log import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="discord-ircv3",
        description="Relay between Discord channels and an IRCv3 server",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # start command
    start_parser = subparsers.add_parser("start", help="Start the bridge")
    start_parser.add_argument(
        "-c", "--config", default="config.yaml", help="Path to config file"
    )
    start_parser.add_argument(
        "-e", "--env", default=".env", help="Path to .env file"
    )
    start_parser.add_argument(
        "--debug", action="store_true", help="Log every IRC line sent and received"
    )

    # config-check command
    check_parser = subparsers.add_parser("config-check", help="Validate configuration")
    check_parser.add_argument(
        "-c", "--config", default="config.yaml", help="Path to config file"
    )
    check_parser.add_argument(
        "-e", "--env", default=".env", help="Path to .env file"
    )

    args = parser.parse_args()

    if args.command is None:
        # Default to start
        args.command = "start"
        args.config = "config.yaml"
        args.env = ".env"
        args.debug = False

    if args.command == "config-check":
        _check_config(args.config, args.env)
    elif args.command == "start":
        _run(args.config, args.env, args.debug)


def _check_config(config_path: str, env_path: str) -> None:
    """Validate configuration and print summary."""
    try:
        config = load_config(config_path, env_path)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Configuration valid: {config_path}")
    print(f"  IRC server: {config.irc.host}:{config.irc.port} (tls={config.irc.tls})")
    print(f"  IRC nickname: {config.irc.nickname}")
    print(f"  Timezone: {config.timezone or 'local'}")
    print(f"  Channels mapped: {len(config.channels)}")
    for discord_id, irc_name in config.channels.items():
        print(f"    - {discord_id} <-> {irc_name}")


def _load(config_path: str, env_path: str) -> BridgeConfig:
    try:
        return load_config(config_path, env_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Run 'python install.py' first or copy config.example.yaml to config.yaml")
        sys.exit(1)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def _run(config_path: str, env_path: str, debug: bool = False) -> None:
    """Load config and start the bridge."""
    config = _load(config_path, env_path)
    if debug:
        config = config.model_copy(update={"debug": True})

    setup_logging(config.log_level, debug=config.debug)

    async def _async_main() -> None:
        loop = asyncio.get_running_loop()
        stop_event = asyncio.Event()

        def _signal_handler() -> None:
            stop_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, _signal_handler)
            except NotImplementedError:
                # Windows doesn't support add_signal_handler
                signal.signal(sig, lambda s, f: _signal_handler())

        app = BridgeApp(config)
        await app.start()

        # Wait for shutdown signal or a connection loop dying
        loops_task = asyncio.create_task(app.wait())
        stop_task = asyncio.create_task(stop_event.wait())
        _, pending = await asyncio.wait(
            {loops_task, stop_task},
            return_when=asyncio.FIRST_COMPLETED,
        )
        for t in pending:
            t.cancel()

        await app.stop()

    asyncio.run(_async_main())


if __name__ == "__main__":
    main()
