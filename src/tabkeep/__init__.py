"""tabkeep - Capture, reconcile and restore browser tab sessions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tabkeep")
except PackageNotFoundError:
    __version__ = "0+local"
from tabkeep.client import TabSessionClient
from tabkeep.config import TabkeepConfig
from tabkeep.engine.restore import RestoreEngine, RestoreSummary
from tabkeep.exceptions import (
    BrowserApiError,
    ExternalServiceError,
    NotFoundError,
    SnapshotStoreError,
    TabkeepConfigError,
    TabkeepError,
    WindowResolutionError,
)
from tabkeep.models import (
    CapturedSnapshot,
    ClosedGroup,
    LiveGroup,
    LiveGroupStatus,
    LiveTab,
    LiveTabStatus,
    OperationResult,
    SavedGroup,
    SavedState,
    SavedTab,
    SyncStatus,
    SyncView,
    TabGroupColor,
)
from tabkeep.panel import PanelViewModel
from tabkeep.store import JsonFileSnapshotStore, MemorySnapshotStore, create_store

__all__ = [
    "__version__",
    "BrowserApiError",
    "CapturedSnapshot",
    "ClosedGroup",
    "ExternalServiceError",
    "JsonFileSnapshotStore",
    "LiveGroup",
    "LiveGroupStatus",
    "LiveTab",
    "LiveTabStatus",
    "MemorySnapshotStore",
    "NotFoundError",
    "OperationResult",
    "PanelViewModel",
    "RestoreEngine",
    "RestoreSummary",
    "SavedGroup",
    "SavedState",
    "SavedTab",
    "SnapshotStoreError",
    "SyncStatus",
    "SyncView",
    "TabGroupColor",
    "TabSessionClient",
    "TabkeepConfig",
    "TabkeepConfigError",
    "TabkeepError",
    "WindowResolutionError",
    "create_store",
]
