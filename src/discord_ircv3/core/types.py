"""Shared types and enumerations."""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    IRC = "irc"
    DISCORD = "discord"


class ConnectionState(StrEnum):
    """Lifecycle of the IRC connection as seen by the relay."""

    DISCONNECTED = "disconnected"
    HANDSHAKING = "handshaking"
    READY = "ready"
