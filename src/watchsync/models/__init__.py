"""Pydantic models for host state, outbound snapshots and inbound commands."""

from watchsync.models.commands import CommandKind, InboundCommand, coerce_session_id, decode_inbound_command
from watchsync.models.snapshot import Snapshot
from watchsync.models.state import HostState, ResourceEntry, WatchState

__all__ = [
    "CommandKind",
    "HostState",
    "InboundCommand",
    "ResourceEntry",
    "Snapshot",
    "WatchState",
    "coerce_session_id",
    "decode_inbound_command",
]
