"""Read-only joined view of live and saved state, used for display."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from tabkeep.models.live import LiveGroup, LiveTab
from tabkeep.models.saved import SavedTab


class SyncStatus(StrEnum):
    SAVED = "saved"
    OUT_OF_SYNC = "out-of-sync"
    UNSAVED = "unsaved"


class LiveGroupStatus(BaseModel):
    """An open group joined to its saved counterpart by title."""

    model_config = ConfigDict(frozen=True)

    group: LiveGroup
    tabs: list[LiveTab] = Field(default_factory=list)
    sync_status: SyncStatus
    saved_tabs: list[SavedTab] | None = None

    @property
    def title(self) -> str:
        return self.group.title


class LiveTabStatus(BaseModel):
    """An open ungrouped tab and whether its url is saved."""

    model_config = ConfigDict(frozen=True)

    tab: LiveTab
    sync_status: SyncStatus


class ClosedGroup(BaseModel):
    """A saved group with no open counterpart."""

    model_config = ConfigDict(frozen=True)

    title: str
    tab_count: int


class SyncView(BaseModel):
    """Everything a panel needs to render one frame."""

    model_config = ConfigDict(frozen=True)

    live_groups: list[LiveGroupStatus] = Field(default_factory=list)
    live_ungrouped_tabs: list[LiveTabStatus] = Field(default_factory=list)
    closed_groups: list[ClosedGroup] = Field(default_factory=list)
    closed_tabs: list[SavedTab] = Field(default_factory=list)

    @property
    def out_of_sync_titles(self) -> list[str]:
        return [entry.title for entry in self.live_groups if entry.sync_status == SyncStatus.OUT_OF_SYNC]

    @property
    def closed_count(self) -> int:
        return len(self.closed_groups) + len(self.closed_tabs)
