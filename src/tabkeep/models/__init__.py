"""Data models for snapshots, live browser state and sync views."""

from tabkeep.models._base import TabGroupColor, TabkeepBaseModel
from tabkeep.models.live import LiveGroup, LiveTab
from tabkeep.models.result import OperationResult
from tabkeep.models.saved import CapturedSnapshot, SavedGroup, SavedState, SavedTab
from tabkeep.models.view import ClosedGroup, LiveGroupStatus, LiveTabStatus, SyncStatus, SyncView

__all__ = [
    "CapturedSnapshot",
    "ClosedGroup",
    "LiveGroup",
    "LiveGroupStatus",
    "LiveTab",
    "LiveTabStatus",
    "OperationResult",
    "SavedGroup",
    "SavedState",
    "SavedTab",
    "SyncStatus",
    "SyncView",
    "TabGroupColor",
    "TabkeepBaseModel",
]
