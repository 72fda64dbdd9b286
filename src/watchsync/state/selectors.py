"""Selectors for the host state slices the sync core watches."""

from __future__ import annotations

from watchsync.models.state import HostState, ResourceEntry


def is_invite_url_ready(state: HostState) -> bool:
    return state.invite_url_ready and bool(state.invite_url)


def current_conference_url(state: HostState) -> str | None:
    """Canonical URL of the active conference, or ``None``.

    A URL that is not invite-ready yet, or that still ends with ``/`` (a
    room-less placeholder seen while navigating), counts as no conference.
    """
    if not is_invite_url_ready(state):
        return None
    url = state.invite_url
    if not url or url.endswith("/"):
        return None
    return url


def is_audio_muted(state: HostState) -> bool:
    return state.audio_muted


def recent_list(state: HostState) -> tuple[ResourceEntry, ...]:
    return state.recent_list
