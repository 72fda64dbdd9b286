from __future__ import annotations

import logging

import pytest
from conftest import ROOM_URL, FakeClock, entries, in_conference

from watchsync.exceptions import CompanionTransportError
from watchsync.models.state import HostState, WatchState
from watchsync.publisher import SnapshotPublisher, project_recent
from watchsync.state.store import HostStore
from watchsync.transport import LoopbackTransport


def _publisher(transport: LoopbackTransport, clock: FakeClock, **kwargs: object) -> SnapshotPublisher:
    return SnapshotPublisher(transport, WatchState(session_id=42), clock=clock, **kwargs)  # type: ignore[arg-type]


def test_recent_projection_keeps_newest_first() -> None:
    projected = project_recent(entries("a", "b", "c", "d", "e"), 3)
    assert [entry.conference.rsplit("/", 1)[1] for entry in projected] == ["e", "d", "c"]


def test_recent_projection_shorter_than_limit_and_zero_limit() -> None:
    assert len(project_recent(entries("a", "b"), 5)) == 2
    assert project_recent(entries("a", "b"), 0) == ()


def test_snapshot_context_shape(transport: LoopbackTransport, clock: FakeClock) -> None:
    publisher = _publisher(transport, clock, max_recent_urls=3)
    state = in_conference(audio_muted=True, recent_list=entries("a", "b", "c", "d", "e"))

    assert publisher.publish(state) is True

    context = transport.last_context
    assert context is not None
    assert context["conferenceURL"] == ROOM_URL
    assert context["micMuted"] is True
    assert context["sessionID"] == 42
    assert "conferenceTimestamp" not in context
    assert [e["conference"] for e in context["recentURLs"]] == [
        "https://meet.example.org/e",
        "https://meet.example.org/d",
        "https://meet.example.org/c",
    ]


@pytest.mark.parametrize(
    ("invite_url", "expected"),
    [("https://x/room/", None), ("https://x/room", "https://x/room")],
)
def test_trailing_slash_url_published_as_absent(
    transport: LoopbackTransport, clock: FakeClock, invite_url: str, expected: str | None
) -> None:
    _publisher(transport, clock).publish(in_conference(invite_url))

    assert transport.last_context is not None
    assert transport.last_context.get("conferenceURL") == expected


def test_each_watched_slice_triggers_full_publish(transport: LoopbackTransport, clock: FakeClock) -> None:
    store = HostStore()
    _publisher(transport, clock).attach(store)

    store.update(recent_list=entries("a"))
    store.update(audio_muted=True)
    store.update(invite_url=ROOM_URL, invite_url_ready=True)
    assert len(transport.contexts) == 3

    last = transport.contexts[-1]
    assert last["conferenceURL"] == ROOM_URL
    assert last["micMuted"] is True
    assert len(last["recentURLs"]) == 1


def test_unwatched_change_does_not_publish(transport: LoopbackTransport, clock: FakeClock) -> None:
    store = HostStore(HostState(invite_url=ROOM_URL, invite_url_ready=False))
    _publisher(transport, clock).attach(store)

    # URL changes are invisible until the invite URL is ready.
    store.update(invite_url="https://meet.example.org/Other")
    assert transport.contexts == []


def test_activation_publishes_without_state_change(transport: LoopbackTransport, clock: FakeClock) -> None:
    store = HostStore(in_conference())
    publisher = _publisher(transport, clock)
    publisher.attach(store)

    publisher.on_activation_state_changed("Activated")
    publisher.on_activation_state_changed("inactive")

    assert len(transport.contexts) == 1
    assert transport.contexts[0]["conferenceURL"] == ROOM_URL


def test_conference_joined_stamps_timestamp(transport: LoopbackTransport, clock: FakeClock) -> None:
    store = HostStore(in_conference())
    publisher = _publisher(transport, clock)
    publisher.attach(store)

    publisher.on_conference_joined()

    assert transport.last_context is not None
    assert transport.last_context["conferenceTimestamp"] == clock.now


def test_transport_failure_is_logged_and_swallowed(
    transport: LoopbackTransport, clock: FakeClock, caplog: pytest.LogCaptureFixture
) -> None:
    transport.fail_with = CompanionTransportError("companion unreachable")
    publisher = _publisher(transport, clock)

    with caplog.at_level(logging.ERROR, logger="watchsync.publisher"):
        assert publisher.publish(HostState()) is False

    assert "Failed to encode or send the companion context" in caplog.text
    assert "companion unreachable" in caplog.text


def test_unexpected_transport_exception_does_not_reach_host(transport: LoopbackTransport, clock: FakeClock) -> None:
    transport.fail_with = RuntimeError("boom")
    store = HostStore()
    _publisher(transport, clock).attach(store)

    store.update(audio_muted=True)

    assert store.state.audio_muted is True
    assert transport.contexts == []


def test_publish_without_store_is_skipped(transport: LoopbackTransport, clock: FakeClock) -> None:
    assert _publisher(transport, clock).publish() is False
    assert transport.contexts == []
