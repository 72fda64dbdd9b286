"""Host actions the sync core invokes.

The core treats navigation and muting as opaque host operations; it
never reaches into how the host joins or leaves a conference.
"""

from __future__ import annotations

import logging
from typing import Protocol

from watchsync.state.store import HostStore

_logger = logging.getLogger(__name__)


class HostActions(Protocol):
    def navigate_to(self, url: str | None) -> None:
        """Join *url*, or leave the current conference when ``None``."""

    def set_muted(self, muted: bool, ensure_track: bool) -> None:
        """Set the local audio mute state, creating the track if *ensure_track*."""


class StoreActions:
    """:class:`HostActions` that apply their effect directly to a :class:`HostStore`.

    Useful for hosts without a separate conference layer and for tests:
    navigating immediately makes the URL invite-ready, leaving clears it.
    """

    def __init__(self, store: HostStore) -> None:
        self._store = store

    def navigate_to(self, url: str | None) -> None:
        _logger.debug("Navigating to %s", "<none>" if url is None else url)
        self._store.update(invite_url=url, invite_url_ready=url is not None)

    def set_muted(self, muted: bool, ensure_track: bool) -> None:
        _logger.debug("Setting audio muted=%s ensure_track=%s", muted, ensure_track)
        self._store.update(audio_muted=muted)
