"""watchsync - Session-scoped state sync between a calling app and a companion device."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pywatchsync")
except PackageNotFoundError:
    __version__ = "0+local"
from watchsync._mqtt import CompanionMqttTransport
from watchsync.actions import HostActions, StoreActions
from watchsync.config import MqttSettings, WatchSyncConfig
from watchsync.coordinator import HostEvent, WatchSyncCoordinator, create_coordinator
from watchsync.dispatcher import CommandDispatcher
from watchsync.exceptions import (
    CompanionTransportError,
    MalformedMessageError,
    StaleCommandError,
    WatchSyncConfigError,
    WatchSyncError,
)
from watchsync.models import (
    CommandKind,
    HostState,
    InboundCommand,
    ResourceEntry,
    Snapshot,
    WatchState,
)
from watchsync.publisher import SnapshotPublisher
from watchsync.session import SessionManager
from watchsync.state.store import HostStore
from watchsync.transport import CompanionTransport, LoopbackTransport

__all__ = [
    "__version__",
    "CommandDispatcher",
    "CommandKind",
    "CompanionMqttTransport",
    "CompanionTransport",
    "CompanionTransportError",
    "HostActions",
    "HostEvent",
    "HostState",
    "HostStore",
    "InboundCommand",
    "LoopbackTransport",
    "MalformedMessageError",
    "MqttSettings",
    "ResourceEntry",
    "SessionManager",
    "Snapshot",
    "SnapshotPublisher",
    "StaleCommandError",
    "StoreActions",
    "WatchState",
    "WatchSyncConfig",
    "WatchSyncConfigError",
    "WatchSyncCoordinator",
    "WatchSyncError",
    "create_coordinator",
]
