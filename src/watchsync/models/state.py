"""Host-side state models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from watchsync.models._base import WatchSyncModel


class ResourceEntry(WatchSyncModel):
    """One entry of the host's recent-conference history."""

    conference: str
    date: int | None = None
    """Epoch milliseconds when the conference was entered."""
    duration: int | None = None
    """Milliseconds spent in the conference."""

    @field_validator("conference")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("conference must be non-empty")
        return value


class HostState(WatchSyncModel):
    """The slices of host application state the sync core reads.

    ``recent_list`` is chronological (oldest first) and grows without
    bound at the source.
    """

    model_config = ConfigDict(extra="forbid")

    invite_url: str | None = None
    invite_url_ready: bool = False
    audio_muted: bool = False
    recent_list: tuple[ResourceEntry, ...] = Field(default_factory=tuple)


class WatchState(BaseModel):
    """Sync bookkeeping owned by the coordinator.

    ``session_id`` is written only by the session manager and
    ``conference_timestamp`` only by the snapshot publisher.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    session_id: int = 0
    conference_timestamp: int | None = None
