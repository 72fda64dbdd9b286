"""MQTT companion transport built on paho-mqtt."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from watchsync._constants import TOPIC_ACTIVATION, TOPIC_COMMANDS, TOPIC_CONTEXT
from watchsync._redact import redact_for_log
from watchsync.config import MqttSettings
from watchsync.exceptions import CompanionTransportError, MalformedMessageError
from watchsync.transport import CallbackRegistry


@dataclass(frozen=True)
class CompanionTopics:
    """Topics used by one phone/companion pair."""

    context: str
    commands: str
    activation: str

    @classmethod
    def from_settings(cls, settings: MqttSettings) -> CompanionTopics:
        return cls(
            context=settings.topic(TOPIC_CONTEXT),
            commands=settings.topic(TOPIC_COMMANDS),
            activation=settings.topic(TOPIC_ACTIVATION),
        )


def decode_command_payload(payload: bytes) -> dict[str, Any]:
    """Parse a command payload into a JSON object."""
    try:
        parsed = json.loads(payload.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise MalformedMessageError(f"Command payload is not JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise MalformedMessageError("Command payload decoded to non-object JSON")
    return parsed


def decode_activation_payload(payload: bytes) -> str:
    """Parse an activation payload: plain text or ``{"state": "..."}``."""
    try:
        text = payload.decode("utf-8").strip()
    except UnicodeDecodeError as exc:
        raise MalformedMessageError("Activation payload is not valid UTF-8") from exc
    if text.startswith("{"):
        try:
            parsed = json.loads(text)
        except (ValueError, RecursionError) as exc:
            raise MalformedMessageError(f"Activation payload is not JSON: {exc}") from exc
        state = parsed.get("state") if isinstance(parsed, dict) else None
        if not isinstance(state, str):
            raise MalformedMessageError("Activation payload missing state")
        text = state.strip()
    if not text:
        raise MalformedMessageError("Activation payload is empty")
    return text


class CompanionMqttTransport(CallbackRegistry):
    """Threaded paho-mqtt transport that hands inbound traffic to an asyncio loop.

    paho delivers messages on its network thread; callbacks are scheduled
    with ``call_soon_threadsafe`` so the sync core only ever runs on the
    loop's thread.
    """

    def __init__(
        self,
        settings: MqttSettings,
        *,
        loop: asyncio.AbstractEventLoop,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._topics = CompanionTopics.from_settings(settings)
        self._loop = loop
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._connected = False

    @property
    def is_running(self) -> bool:
        """Whether the MQTT network loop is running."""
        return self._running

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def topics(self) -> CompanionTopics:
        return self._topics

    def start(self) -> None:
        """Connect and subscribe to the companion topics."""
        self.stop()
        settings = self._settings
        self._logger.debug(
            "MQTT transport start requested host=%s port=%s prefix=%s client_id=%s",
            settings.host,
            settings.port,
            settings.topic_prefix,
            settings.client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=settings.client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        if settings.username is not None:
            client.username_pw_set(settings.username, settings.password)
        if settings.tls:
            client.tls_set()

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._connected = True
            self._logger.debug("MQTT connected reason=%s", reason_code)
            c.subscribe([(self._topics.commands, 1), (self._topics.activation, 1)])

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self.handle_incoming(msg.topic, msg.payload)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            self._connected = False
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        client.connect(settings.host, settings.port, keepalive=settings.keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect the MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._connected = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def handle_incoming(self, topic: str, payload: bytes) -> None:
        """Decode a message received on *topic* and schedule its callbacks on the loop."""
        try:
            if topic == self._topics.commands:
                message = decode_command_payload(payload)
                self._logger.debug("Companion command topic=%s parsed=%s", topic, redact_for_log(message))
                self._loop.call_soon_threadsafe(self.emit_message, message)
            elif topic == self._topics.activation:
                state = decode_activation_payload(payload)
                self._logger.debug("Companion activation topic=%s state=%s", topic, state)
                self._loop.call_soon_threadsafe(self.emit_activation_state, state)
            else:
                self._logger.debug("Ignoring message on unexpected topic=%s", topic)
        except MalformedMessageError:
            self._logger.warning("Dropping undecodable companion payload topic=%s", topic, exc_info=True)
        except RuntimeError:
            # call_soon_threadsafe raises once the loop is closed.
            self._logger.debug("Companion payload dropped: event loop closed topic=%s", topic, exc_info=True)

    def publish_context(self, context: dict[str, Any]) -> None:
        client = self._client
        topic = self._topics.context
        if client is None or not self._connected:
            raise CompanionTransportError("MQTT transport is not connected", topic=topic)
        try:
            payload = json.dumps(context, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise CompanionTransportError(f"Context is not JSON serializable: {exc}", topic=topic) from exc

        info = client.publish(topic, payload, qos=1, retain=True)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise CompanionTransportError(
                f"MQTT publish failed: {mqtt.error_string(info.rc)}",
                topic=topic,
            )
        self._logger.debug("Context published topic=%s mid=%s", topic, info.mid)
