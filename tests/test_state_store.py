from __future__ import annotations

from conftest import ROOM_URL, entries, in_conference

from watchsync.models.state import HostState
from watchsync.state.selectors import current_conference_url, is_audio_muted, recent_list
from watchsync.state.store import HostStore


def test_listener_fires_only_when_selected_value_changes() -> None:
    store = HostStore()
    seen: list[bool] = []
    store.subscribe(is_audio_muted, lambda value, _store: seen.append(value))

    store.update(audio_muted=False)
    store.update(recent_list=entries("a"))
    store.update(audio_muted=True)
    store.update(audio_muted=True)

    assert seen == [True]


def test_listeners_notified_in_registration_order() -> None:
    store = HostStore()
    order: list[str] = []
    store.subscribe(current_conference_url, lambda _v, _s: order.append("first"))
    store.subscribe(current_conference_url, lambda _v, _s: order.append("second"))

    store.update(invite_url=ROOM_URL, invite_url_ready=True)

    assert order == ["first", "second"]


def test_update_from_listener_is_committed_after_current_round() -> None:
    store = HostStore()
    observed: list[tuple[str, bool]] = []

    def mute_on_join(url: str | None, s: HostStore) -> None:
        observed.append(("url", s.state.audio_muted))
        if url is not None:
            s.update(audio_muted=True)

    store.subscribe(current_conference_url, mute_on_join)
    store.subscribe(is_audio_muted, lambda value, _s: observed.append(("muted", value)))

    store.update(invite_url=ROOM_URL, invite_url_ready=True)

    assert observed == [("url", False), ("muted", True)]
    assert store.state.audio_muted is True


def test_unsubscribe_stops_notifications() -> None:
    store = HostStore()
    seen: list[object] = []
    unsubscribe = store.subscribe(recent_list, lambda value, _s: seen.append(value))

    store.update(recent_list=entries("a"))
    unsubscribe()
    store.update(recent_list=entries("a", "b"))

    assert len(seen) == 1


def test_recent_list_equality_survives_revalidation() -> None:
    store = HostStore(HostState(recent_list=entries("a", "b")))
    seen: list[object] = []
    store.subscribe(recent_list, lambda value, _s: seen.append(value))

    # Committing other keys re-validates the whole state; equal entries must not fire.
    store.update(audio_muted=True)

    assert seen == []


def test_select_reads_current_state() -> None:
    store = HostStore(in_conference())
    assert store.select(current_conference_url) == ROOM_URL
