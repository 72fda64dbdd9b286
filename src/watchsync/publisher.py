"""Snapshot publishing towards the companion device.

The companion keeps no state of its own beyond the last context it
received, so every publish sends the whole snapshot.  Publishing is
fire-and-forget: failures leave the companion stale until the next
successful publish.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from watchsync._clock import now_ms
from watchsync._constants import ACTIVATION_STATE_ACTIVATED, MAX_RECENT_URLS
from watchsync._redact import redact_for_log
from watchsync.models.snapshot import Snapshot
from watchsync.models.state import HostState, ResourceEntry, WatchState
from watchsync.state.selectors import current_conference_url, is_audio_muted, recent_list
from watchsync.state.store import HostStore
from watchsync.transport import CompanionTransport

_logger = logging.getLogger(__name__)


def project_recent(entries: Sequence[ResourceEntry], limit: int) -> tuple[ResourceEntry, ...]:
    """Newest *limit* entries, newest first.

    Truncation happens before reversal so only the newest entries survive.
    """
    if limit <= 0:
        return ()
    return tuple(reversed(entries[-limit:]))


class SnapshotPublisher:
    def __init__(
        self,
        transport: CompanionTransport,
        watch_state: WatchState,
        *,
        max_recent_urls: int = MAX_RECENT_URLS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._transport = transport
        self._watch_state = watch_state
        self._max_recent_urls = max_recent_urls
        self._clock = clock
        self._store: HostStore | None = None

    def attach(self, store: HostStore) -> list[Callable[[], None]]:
        """Publish whenever the recent list, mute flag or active conference changes."""
        self._store = store
        return [
            store.subscribe(recent_list, self._on_slice_changed),
            store.subscribe(is_audio_muted, self._on_slice_changed),
            store.subscribe(current_conference_url, self._on_slice_changed),
        ]

    def _on_slice_changed(self, _value: object, store: HostStore) -> None:
        self.publish(store.state)

    def build_snapshot(self, state: HostState) -> Snapshot:
        return Snapshot(
            conference_url=current_conference_url(state),
            mic_muted=is_audio_muted(state),
            recent_urls=project_recent(recent_list(state), self._max_recent_urls),
            session_id=self._watch_state.session_id,
            conference_timestamp=self._watch_state.conference_timestamp,
        )

    def publish(self, state: HostState | None = None) -> bool:
        """Push the current snapshot; returns whether the transport accepted it."""
        if state is None:
            if self._store is None:
                _logger.debug("Publish skipped: no host store attached")
                return False
            state = self._store.state

        try:
            context = self.build_snapshot(state).to_context()
            self._transport.publish_context(context)
        except Exception:
            _logger.error("Failed to encode or send the companion context", exc_info=True)
            return False

        _logger.debug("Companion context published %s", redact_for_log(context))
        return True

    def on_activation_state_changed(self, activation_state: str) -> None:
        """Re-send the context when the companion (re)activates; it starts with none."""
        if str(activation_state).strip().lower() != ACTIVATION_STATE_ACTIVATED:
            _logger.debug("Companion activation state=%s", activation_state)
            return
        self.publish()

    def on_conference_joined(self) -> None:
        self._watch_state.conference_timestamp = self._clock()
        self.publish()
