"""Wiring of the sync components onto a host store and a companion transport.

Owns:
- the sync bookkeeping (:class:`~watchsync.models.state.WatchState`)
- registration order of store listeners (session rotation before publish)
- translation of host lifecycle events
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from watchsync._clock import now_ms
from watchsync.actions import HostActions
from watchsync.config import WatchSyncConfig
from watchsync.dispatcher import CommandDispatcher
from watchsync.models.state import WatchState
from watchsync.publisher import SnapshotPublisher
from watchsync.session import SessionManager
from watchsync.state.store import HostStore
from watchsync.transport import CompanionTransport

_logger = logging.getLogger(__name__)


class HostEvent(StrEnum):
    APP_WILL_MOUNT = "APP_WILL_MOUNT"
    CONFERENCE_JOINED = "CONFERENCE_JOINED"


class WatchSyncCoordinator:
    """Keeps a companion device in sync with a host store.

    Usage::

        with WatchSyncCoordinator(store, transport, actions) as sync:
            sync.handle_host_event(HostEvent.CONFERENCE_JOINED)
    """

    def __init__(
        self,
        store: HostStore,
        transport: CompanionTransport,
        actions: HostActions,
        *,
        config: WatchSyncConfig | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._config = config or WatchSyncConfig()
        self._store = store
        self._transport = transport
        self.watch_state = WatchState()
        self.session = SessionManager(self.watch_state, clock=clock)
        self.publisher = SnapshotPublisher(
            transport,
            self.watch_state,
            max_recent_urls=self._config.max_recent_urls,
            clock=clock,
        )
        self.dispatcher = CommandDispatcher(store, actions, lambda: self.watch_state.session_id)
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def is_started(self) -> bool:
        return bool(self._unsubscribers)

    def start(self) -> None:
        """Register store listeners and transport callbacks.  Idempotent."""
        if self.is_started:
            return
        # The session listener must run before the publisher's listeners so
        # the snapshot published for a new conference carries the new id.
        self._unsubscribers.append(self.session.attach(self._store))
        self._unsubscribers.extend(self.publisher.attach(self._store))
        self._unsubscribers.append(self._transport.on_message(self.dispatcher.handle_message))
        self._unsubscribers.append(
            self._transport.on_activation_state_change(self.publisher.on_activation_state_changed)
        )
        _logger.debug("Watch sync started session_id=%s", self.watch_state.session_id)

    def stop(self) -> None:
        unsubscribers = self._unsubscribers
        self._unsubscribers = []
        for unsubscribe in reversed(unsubscribers):
            unsubscribe()
        if unsubscribers:
            _logger.debug("Watch sync stopped")

    def handle_host_event(self, event: HostEvent | str) -> None:
        """Intercept host lifecycle events relevant to the companion."""
        if event == HostEvent.APP_WILL_MOUNT:
            self.start()
        elif event == HostEvent.CONFERENCE_JOINED:
            self.publisher.on_conference_joined()

    def __enter__(self) -> WatchSyncCoordinator:
        self.start()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.stop()


def create_coordinator(
    store: HostStore,
    transport: CompanionTransport,
    actions: HostActions,
    *,
    companion_available: bool,
    config: WatchSyncConfig | None = None,
) -> WatchSyncCoordinator | None:
    """Build a coordinator only when the host supports a companion device."""
    config = config or WatchSyncConfig()
    if not companion_available or not config.companion_enabled:
        _logger.debug("Companion capability unavailable; watch sync not created")
        return None
    return WatchSyncCoordinator(store, transport, actions, config=config)
