"""Base model shared by watchsync's pydantic models.

Wire payloads use the companion app's spelling (``sessionID``,
``conferenceURL``); models declare explicit aliases for those and accept
either spelling on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WatchSyncModel(BaseModel):
    """Immutable model that ignores unknown keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
