"""Outbound application context pushed to the companion device."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from watchsync.models._base import WatchSyncModel
from watchsync.models.state import ResourceEntry


class Snapshot(WatchSyncModel):
    """Whole-state view of the sync session.

    The companion side has no merge logic: every publish replaces its
    previous context entirely.
    """

    conference_url: str | None = Field(default=None, alias="conferenceURL")
    mic_muted: bool = Field(default=False, alias="micMuted")
    recent_urls: tuple[ResourceEntry, ...] = Field(default_factory=tuple, alias="recentURLs")
    session_id: int = Field(..., alias="sessionID")
    conference_timestamp: int | None = Field(default=None, alias="conferenceTimestamp")

    def to_context(self) -> dict[str, Any]:
        """Serialize to the companion wire shape, omitting absent optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
