"""Observable in-memory host store.

Listeners are bound to a selector and only fire when the selected value
changes, compared against the value seen on the previous notification.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from watchsync.models.state import HostState

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Selector = Callable[[HostState], T]
Listener = Callable[[T, "HostStore"], None]


@dataclass(slots=True)
class _Subscription(Generic[T]):
    selector: Selector[T]
    listener: Listener[T]
    last_value: T
    active: bool = True


class HostStore:
    """Deterministic store: the same sequence of updates yields the same notifications.

    Notifications are delivered synchronously, in commit order, and to
    listeners in registration order.  An ``update`` issued from inside a
    listener is queued and committed once the current round completes.
    """

    def __init__(self, initial: HostState | None = None) -> None:
        self._state = initial if initial is not None else HostState()
        self._subscriptions: list[_Subscription[Any]] = []
        self._pending: deque[dict[str, Any]] = deque()
        self._notifying = False

    @property
    def state(self) -> HostState:
        return self._state

    def select(self, selector: Selector[T]) -> T:
        return selector(self._state)

    def subscribe(self, selector: Selector[T], listener: Listener[T]) -> Callable[[], None]:
        """Call *listener* whenever *selector*'s result changes.

        Returns a callable that removes the subscription.
        """
        subscription: _Subscription[T] = _Subscription(
            selector=selector,
            listener=listener,
            last_value=selector(self._state),
        )
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            subscription.active = False
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def update(self, **changes: Any) -> None:
        """Commit a new state with *changes* applied and notify listeners."""
        self._pending.append(changes)
        if self._notifying:
            return

        self._notifying = True
        try:
            while self._pending:
                self._commit(self._pending.popleft())
        finally:
            self._notifying = False
            self._pending.clear()

    def _commit(self, changes: dict[str, Any]) -> None:
        merged = {**self._state.model_dump(), **changes}
        self._state = HostState.model_validate(merged)
        _logger.debug("Host state committed keys=%s", sorted(changes))

        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            value = subscription.selector(self._state)
            if value == subscription.last_value:
                continue
            subscription.last_value = value
            subscription.listener(value, self)
