"""Custom exception hierarchy for watchsync."""

from __future__ import annotations


class WatchSyncError(Exception):
    """Base exception for all watchsync errors."""


class WatchSyncConfigError(WatchSyncError):
    """Invalid or missing configuration."""


class CompanionTransportError(WatchSyncError):
    """Publishing to (or subscribing on) the companion transport failed."""

    def __init__(self, message: str, *, topic: str = "") -> None:
        self.topic = topic
        super().__init__(message)


class MalformedMessageError(WatchSyncError):
    """Inbound companion message could not be decoded into a command."""


class StaleCommandError(WatchSyncError):
    """Inbound command does not belong to the current sync session.

    Raised when the message carries no session id, or one that differs
    from the session that is current when the message is handled.  Once a
    session rotates every command issued under it stays unacceptable.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str,
        session_id: int | None,
        current_session_id: int,
    ) -> None:
        self.command = command
        self.session_id = session_id
        self.current_session_id = current_session_id
        super().__init__(message)
