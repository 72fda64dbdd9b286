"""Configuration for watchsync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from watchsync._constants import MAX_RECENT_URLS
from watchsync.exceptions import WatchSyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise WatchSyncConfigError(f"{env_key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class MqttSettings:
    """Broker details for the MQTT companion transport.

    The companion device and the phone share a topic prefix; the phone
    publishes its context to ``<prefix>/context`` and listens on
    ``<prefix>/commands`` and ``<prefix>/activation``.
    """

    host: str = "localhost"
    port: int = 8883
    topic_prefix: str = "watchsync"
    client_id: str = ""
    username: str | None = None
    password: str | None = None
    tls: bool = True
    keepalive: int = 120

    def topic(self, suffix: str) -> str:
        return f"{self.topic_prefix.rstrip('/')}/{suffix}"


@dataclasses.dataclass(frozen=True)
class WatchSyncConfig:
    """Sync configuration.

    Parameters
    ----------
    max_recent_urls : int
        Number of most recent conferences included in each snapshot.
    companion_enabled : bool
        Whether the companion capability is present on this host.  When
        ``False`` no coordinator is constructed at all.
    mqtt : MqttSettings
        Broker settings for :class:`~watchsync._mqtt.CompanionMqttTransport`.
    """

    max_recent_urls: int = MAX_RECENT_URLS
    companion_enabled: bool = True
    mqtt: MqttSettings = dataclasses.field(default_factory=MqttSettings)

    def __post_init__(self) -> None:
        if self.max_recent_urls < 0:
            raise WatchSyncConfigError(f"max_recent_urls must be >= 0, got {self.max_recent_urls}")

    @classmethod
    def from_env(cls, **overrides: Any) -> WatchSyncConfig:
        """Create configuration from ``WATCHSYNC_*`` environment variables.

        Explicit keyword arguments override environment values.  ``mqtt``
        may be given as a :class:`MqttSettings` or as a dict of field
        overrides.
        """
        env = os.environ

        mqtt_kwargs: dict[str, Any] = {}
        _ENV_MQTT_MAP = {
            "WATCHSYNC_MQTT_HOST": "host",
            "WATCHSYNC_MQTT_TOPIC_PREFIX": "topic_prefix",
            "WATCHSYNC_MQTT_CLIENT_ID": "client_id",
            "WATCHSYNC_MQTT_USERNAME": "username",
            "WATCHSYNC_MQTT_PASSWORD": "password",
        }
        for env_key, field_name in _ENV_MQTT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                mqtt_kwargs[field_name] = val

        for env_key, field_name in (("WATCHSYNC_MQTT_PORT", "port"), ("WATCHSYNC_MQTT_KEEPALIVE", "keepalive")):
            val = env.get(env_key)
            if val is not None:
                mqtt_kwargs[field_name] = _env_int(env_key, val)

        tls_env = env.get("WATCHSYNC_MQTT_TLS")
        if tls_env is not None:
            mqtt_kwargs["tls"] = _env_bool(tls_env, True)

        mqtt_overrides = overrides.pop("mqtt", None)
        if isinstance(mqtt_overrides, dict):
            mqtt_kwargs.update(mqtt_overrides)
        elif isinstance(mqtt_overrides, MqttSettings):
            mqtt_kwargs = dataclasses.asdict(mqtt_overrides)

        config_kwargs: dict[str, Any] = {"mqtt": MqttSettings(**mqtt_kwargs)}

        recent_env = env.get("WATCHSYNC_MAX_RECENT_URLS")
        if recent_env is not None and "max_recent_urls" not in overrides:
            config_kwargs["max_recent_urls"] = _env_int("WATCHSYNC_MAX_RECENT_URLS", recent_env)

        if "companion_enabled" not in overrides:
            config_kwargs["companion_enabled"] = _env_bool(env.get("WATCHSYNC_COMPANION_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
