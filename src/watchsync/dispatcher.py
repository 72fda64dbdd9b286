"""Inbound command handling.

This is the only place where companion traffic may change host state.
Each message is decoded, checked against the current sync session and
only then translated into host actions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from watchsync._redact import redact_for_log
from watchsync.actions import HostActions
from watchsync.exceptions import MalformedMessageError, StaleCommandError
from watchsync.models.commands import CommandKind, InboundCommand, decode_inbound_command
from watchsync.state.selectors import current_conference_url
from watchsync.state.store import HostStore

_logger = logging.getLogger(__name__)


def ensure_current_session(command: InboundCommand, current_session_id: int) -> None:
    """Raise :class:`StaleCommandError` unless *command* belongs to the current session."""
    if command.session_id is None or command.session_id != current_session_id:
        raise StaleCommandError(
            f"Ignoring outdated watch command: {command.command}"
            f" sessionID: {redact_for_log(command.raw_session_id, max_string=64)}"
            f" current session ID: {current_session_id}",
            command=command.command,
            session_id=command.session_id,
            current_session_id=current_session_id,
        )


class CommandDispatcher:
    """Validate companion commands and turn accepted ones into host actions.

    Handling is stateless across messages apart from the session id read
    through *current_session_id*.
    """

    def __init__(
        self,
        store: HostStore,
        actions: HostActions,
        current_session_id: Callable[[], int],
    ) -> None:
        self._store = store
        self._actions = actions
        self._current_session_id = current_session_id

    def handle_message(self, message: Any) -> bool:
        """Process one raw companion message to completion.

        Returns ``True`` if the message was accepted for the current
        session (whether or not it led to an action).
        """
        try:
            command = decode_inbound_command(message)
        except MalformedMessageError as exc:
            _logger.error("Dropping malformed watch message: %s payload=%s", exc, redact_for_log(message))
            return False

        try:
            ensure_current_session(command, self._current_session_id())
        except StaleCommandError as exc:
            _logger.warning("%s", exc)
            return False

        self._dispatch(command)
        return True

    def _dispatch(self, command: InboundCommand) -> None:
        kind = command.kind
        if kind is CommandKind.HANG_UP:
            self._hang_up()
        elif kind is CommandKind.JOIN_CONFERENCE:
            self._join_conference(command)
        elif kind is CommandKind.SET_MUTED:
            self._actions.set_muted(command.muted, ensure_track=True)
        else:
            # Newer companion apps may send commands this host does not know.
            _logger.debug("Ignoring unknown watch command: %s", command.command)

    def _hang_up(self) -> None:
        if self._store.select(current_conference_url) is None:
            _logger.debug("Hang up ignored: no active conference")
            return
        self._actions.navigate_to(None)

    def _join_conference(self, command: InboundCommand) -> None:
        new_url = command.data
        if new_url is None:
            _logger.warning("Dropping watch command %s without a conference URL", command.command)
            return
        if new_url == self._store.select(current_conference_url):
            _logger.debug("Join ignored: already in %s", redact_for_log(new_url))
            return
        self._actions.navigate_to(new_url)
