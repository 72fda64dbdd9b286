"""Inbound command parsing.

Everything arriving from the companion device is untrusted.  This module
only turns raw messages into :class:`InboundCommand`; session checks and
dispatch live in :mod:`watchsync.dispatcher`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator

from watchsync._constants import CMD_HANG_UP, CMD_JOIN_CONFERENCE, CMD_SET_MUTED
from watchsync.exceptions import MalformedMessageError
from watchsync.models._base import WatchSyncModel


class CommandKind(StrEnum):
    HANG_UP = CMD_HANG_UP
    JOIN_CONFERENCE = CMD_JOIN_CONFERENCE
    SET_MUTED = CMD_SET_MUTED


def coerce_session_id(value: Any) -> int | None:
    """Normalize a wire session id (number or numeric string) to ``int``.

    Returns ``None`` for anything that can never match a live session:
    missing, zero, booleans, non-integral numbers and non-numeric text.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value else None
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
        return parsed or None
    return None


class InboundCommand(WatchSyncModel):
    """A single command received from the companion device."""

    command: str
    session_id: int | None = Field(default=None, alias="sessionID")
    data: str | None = None
    muted: bool = False
    raw_session_id: Any = Field(default=None, exclude=True)
    """``sessionID`` exactly as the companion sent it, for logs."""

    @model_validator(mode="before")
    @classmethod
    def _keep_raw_session_id(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "raw_session_id" in values:
            return values
        return {**values, "raw_session_id": values.get("sessionID", values.get("session_id"))}

    @field_validator("command", mode="before")
    @classmethod
    def _normalize_command(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("command must be a non-empty string")
        return value.strip()

    @field_validator("session_id", mode="before")
    @classmethod
    def _normalize_session_id(cls, value: Any) -> int | None:
        return coerce_session_id(value)

    @field_validator("data", mode="before")
    @classmethod
    def _normalize_data(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        text = value.strip()
        return text or None

    @field_validator("muted", mode="before")
    @classmethod
    def _parse_muted(cls, value: Any) -> bool:
        # Companion sends the flag as the literal text "true"/"false";
        # anything else, booleans included, reads as unmuted.
        return value == "true"

    @property
    def kind(self) -> CommandKind | None:
        """The known command kind, or ``None`` for commands this host predates."""
        try:
            return CommandKind(self.command)
        except ValueError:
            return None


def decode_inbound_command(raw: Any) -> InboundCommand:
    """Decode a mapping, JSON text or JSON bytes into an :class:`InboundCommand`.

    Raises
    ------
    MalformedMessageError
        If the payload is not a JSON object or lacks a usable ``command``.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedMessageError("Companion message is not valid UTF-8") from exc

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            raise MalformedMessageError(f"Companion message is not valid JSON: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise MalformedMessageError(f"Companion message must be an object, got {type(raw).__name__}")

    try:
        return InboundCommand.model_validate(dict(raw))
    except ValidationError as exc:
        raise MalformedMessageError(f"Companion message rejected: {exc.errors()[0]['msg']}") from exc
    except RecursionError as exc:
        raise MalformedMessageError("Companion message is nested too deeply") from exc
