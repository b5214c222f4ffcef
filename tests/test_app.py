"""Tests for wiring the bridge together."""

from discord_ircv3.app import BridgeApp
from discord_ircv3.config import BridgeConfig


def _config(**overrides):
    data = {
        "correlation_limit": 10,
        "discord": {"token": "abc"},
        "irc": {"server": "irc.example.net:6697", "nickname": "bridge"},
        "channels": {"100": "#general", "200": "#random"},
    }
    data.update(overrides)
    return BridgeConfig(**data)


def test_components_share_one_context():
    app = BridgeApp(_config())

    assert app.context.channels.discord_channel("#random") == "200"
    assert app.executor.context is app.context
    assert app.executor.discord is app.discord
    assert app.discord._handler is app.discord_relay
    assert app.irc._relay is app.irc_relay
    assert [a.platform_name for a in app.adapters] == ["irc", "discord"]


def test_correlation_limit_applied():
    app = BridgeApp(_config(correlation_limit=1))
    app.context.correlations.record_pair("a", "1")
    app.context.correlations.record_pair("b", "2")
    assert len(app.context.correlations) == 1
