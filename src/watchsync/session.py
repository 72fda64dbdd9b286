"""Sync session identity.

A new session starts whenever the active conference changes (leaving
included).  Commands from the companion device are only honoured when
they carry the current session id, which filters out commands that
arrive late after the companion lost connectivity.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from watchsync._clock import now_ms
from watchsync.models.state import WatchState
from watchsync.state.selectors import current_conference_url
from watchsync.state.store import HostStore

_logger = logging.getLogger(__name__)


class SessionManager:
    """Owns ``WatchState.session_id``.

    Session ids are epoch milliseconds at rotation time, bumped when
    needed so that every rotation yields a strictly greater id.
    """

    def __init__(self, watch_state: WatchState, *, clock: Callable[[], int] = now_ms) -> None:
        self._watch_state = watch_state
        self._clock = clock
        self._last_url: str | None = None
        self._rotate()

    @property
    def session_id(self) -> int:
        return self._watch_state.session_id

    def attach(self, store: HostStore) -> Callable[[], None]:
        """Start tracking the active conference of *store*.

        The conference may have changed while detached; that counts as a
        new activation like any other.
        """
        self.on_active_resource_changed(store.select(current_conference_url))
        return store.subscribe(current_conference_url, self._on_url_selected)

    def _on_url_selected(self, url: str | None, _store: HostStore) -> None:
        self.on_active_resource_changed(url)

    def on_active_resource_changed(self, url: str | None) -> bool:
        """Rotate the session if *url* differs from the last one seen.

        Returns whether a rotation happened.
        """
        if url == self._last_url:
            return False
        self._last_url = url
        self._rotate()
        return True

    def _rotate(self) -> None:
        previous = self._watch_state.session_id
        self._watch_state.session_id = max(self._clock(), previous + 1)
        _logger.debug("Sync session rotated %s -> %s", previous, self._watch_state.session_id)
