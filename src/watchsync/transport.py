"""Companion transport contract.

A transport moves the outbound context to the companion device and
reports inbound messages and activation changes back.  It owns its own
connection management; the sync core never retries through it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from watchsync.exceptions import CompanionTransportError

_logger = logging.getLogger(__name__)

MessageCallback = Callable[[Any], None]
ActivationCallback = Callable[[str], None]


class CompanionTransport(Protocol):
    def publish_context(self, context: dict[str, Any]) -> None:
        """Replace the companion's application context.

        Raises :class:`~watchsync.exceptions.CompanionTransportError` on failure.
        """

    def on_message(self, callback: MessageCallback) -> Callable[[], None]:
        """Register *callback* for inbound messages; returns an unsubscribe callable."""

    def on_activation_state_change(self, callback: ActivationCallback) -> Callable[[], None]:
        """Register *callback* for activation state strings; returns an unsubscribe callable."""


def _remover(callbacks: list[Any], callback: Any) -> Callable[[], None]:
    def unsubscribe() -> None:
        if callback in callbacks:
            callbacks.remove(callback)

    return unsubscribe


class CallbackRegistry:
    """Callback bookkeeping shared by transport implementations."""

    def __init__(self) -> None:
        self._message_callbacks: list[MessageCallback] = []
        self._activation_callbacks: list[ActivationCallback] = []

    def on_message(self, callback: MessageCallback) -> Callable[[], None]:
        self._message_callbacks.append(callback)
        return _remover(self._message_callbacks, callback)

    def on_activation_state_change(self, callback: ActivationCallback) -> Callable[[], None]:
        self._activation_callbacks.append(callback)
        return _remover(self._activation_callbacks, callback)

    def emit_message(self, message: Any) -> None:
        for callback in list(self._message_callbacks):
            callback(message)

    def emit_activation_state(self, state: str) -> None:
        for callback in list(self._activation_callbacks):
            callback(state)


class LoopbackTransport(CallbackRegistry):
    """In-process transport.

    Published contexts are recorded in :attr:`contexts`; the other end
    injects traffic with :meth:`deliver` and :meth:`set_activation_state`.
    Setting :attr:`fail_with` makes the next publishes raise it.
    """

    def __init__(self) -> None:
        super().__init__()
        self.contexts: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None

    @property
    def last_context(self) -> dict[str, Any] | None:
        return self.contexts[-1] if self.contexts else None

    def publish_context(self, context: dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if not isinstance(context, dict):
            raise CompanionTransportError(f"context must be a dict, got {type(context).__name__}")
        self.contexts.append(context)
        _logger.debug("Loopback context stored count=%d", len(self.contexts))

    def deliver(self, message: Any) -> None:
        self.emit_message(message)

    def set_activation_state(self, state: str) -> None:
        self.emit_activation_state(state)
