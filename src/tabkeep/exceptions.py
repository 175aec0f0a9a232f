"""Custom exception hierarchy for tabkeep."""

from __future__ import annotations


class TabkeepError(Exception):
    """Base exception for all tabkeep errors."""


class TabkeepConfigError(TabkeepError):
    """Invalid or missing configuration."""


class NotFoundError(TabkeepError):
    """A requested group title or tab url is absent.

    Raised by the restore operations and by single-group re-save.  The
    remove operations never raise it: a missing target there is a no-op.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: str = "",
        key: str = "",
    ) -> None:
        self.kind = kind
        self.key = key
        super().__init__(message)


class WindowResolutionError(TabkeepError):
    """The current browser window could not be determined."""


class ExternalServiceError(TabkeepError):
    """A collaborator call (store or browser primitive) failed."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
    ) -> None:
        self.operation = operation
        super().__init__(message)


class SnapshotStoreError(ExternalServiceError):
    """Loading, saving or clearing the snapshot document failed.

    Also raised when the stored document cannot be parsed into a
    :class:`~tabkeep.models.SavedState`.
    """


class BrowserApiError(ExternalServiceError):
    """A tab, group or window primitive failed."""
