from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from watchsync.models.state import HostState, ResourceEntry
from watchsync.state.store import HostStore
from watchsync.transport import LoopbackTransport

ROOM_URL = "https://meet.example.org/SprintReview"


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@dataclass
class RecordingActions:
    navigations: list[str | None] = field(default_factory=list)
    mutes: list[tuple[bool, bool]] = field(default_factory=list)

    def navigate_to(self, url: str | None) -> None:
        self.navigations.append(url)

    def set_muted(self, muted: bool, ensure_track: bool) -> None:
        self.mutes.append((muted, ensure_track))


def entries(*names: str) -> tuple[ResourceEntry, ...]:
    return tuple(
        ResourceEntry(conference=f"https://meet.example.org/{name}", date=1_000 * i, duration=60_000)
        for i, name in enumerate(names)
    )


def in_conference(url: str = ROOM_URL, **changes: object) -> HostState:
    return HostState(invite_url=url, invite_url_ready=True, **changes)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> HostStore:
    return HostStore()


@pytest.fixture
def transport() -> LoopbackTransport:
    return LoopbackTransport()


@pytest.fixture
def actions() -> RecordingActions:
    return RecordingActions()
