"""Configuration loader with YAML parsing, env-var interpolation, and Pydantic validation."""

from __future__ import annotations

import os
import re
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_IRC_PORT = 6697


def _split_server(server: str) -> tuple[str, int]:
    host, sep, port = server.rpartition(":")
    if sep and port.isdigit():
        return host, int(port)
    return server, DEFAULT_IRC_PORT


class DiscordConfig(BaseModel):
    token: str = Field(min_length=1)


class IrcConfig(BaseModel):
    server: str = Field(min_length=1)  # "host" or "host:port"
    nickname: str = Field(min_length=1)
    username: str = "discordircv3"
    realname: str = "discord-ircv3 bridge"
    tls: bool = True
    tls_verify: bool = True

    @property
    def host(self) -> str:
        return _split_server(self.server)[0]

    @property
    def port(self) -> int:
        return _split_server(self.server)[1]


class BridgeConfig(BaseModel):
    log_level: str = "INFO"
    debug: bool = False
    reconnect_delay: float = 15.0
    correlation_limit: int = Field(default=50000, ge=0)  # 0 = never evict
    timezone: str | None = None  # IANA zone for rendered timestamps; None = local time
    discord: DiscordConfig
    irc: IrcConfig
    channels: dict[str, str] = Field(default_factory=dict)  # Discord channel ID -> IRC channel

    @field_validator("channels", mode="before")
    @classmethod
    def _stringify_ids(cls, value: object) -> object:
        # YAML reads unquoted snowflakes as integers
        if isinstance(value, dict):
            return {str(k): v for k, v in value.items()}
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @model_validator(mode="after")
    def _check_channels(self) -> BridgeConfig:
        seen: set[str] = set()
        for discord_id, irc_name in self.channels.items():
            if not irc_name:
                raise ValueError(f"Empty IRC channel for Discord channel {discord_id}")
            if irc_name.lower() in seen:
                raise ValueError(f"IRC channel {irc_name} is mapped more than once")
            seen.add(irc_name.lower())
        return self

    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)\}")


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""

    def _replace(match: re.Match) -> str:
        value = os.environ.get(match.group(1))
        if value is None:
            return match.group(0)
        return value

    return _ENV_VAR_PATTERN.sub(_replace, text)


def load_config(config_path: str | Path = "config.yaml", env_path: str | Path = ".env") -> BridgeConfig:
    """Load and validate configuration from YAML file with env-var interpolation."""
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_file)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    raw_text = config_file.read_text(encoding="utf-8")
    data = yaml.safe_load(_interpolate_env_vars(raw_text)) or {}

    return BridgeConfig(**data)
