"""Client configuration for tabkeep."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from tabkeep._constants import STORAGE_KEY
from tabkeep.exceptions import TabkeepConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class TabkeepConfig:
    """Client configuration.

    Parameters
    ----------
    storage_key : str
        Key the snapshot document is stored under.
    state_path : Path or None
        JSON file backing the snapshot store.  When ``None`` the
        snapshot only lives in memory for the lifetime of the process.
    call_trace_enabled : bool
        Trace every collaborator call at DEBUG level.
    redact_urls : bool
        Mask url query strings and fragments in log output.
    """

    storage_key: str = STORAGE_KEY
    state_path: Path | None = None
    call_trace_enabled: bool = False
    redact_urls: bool = True

    def __post_init__(self) -> None:
        if not self.storage_key or not self.storage_key.strip():
            raise TabkeepConfigError("storage_key must be non-empty")
        if self.state_path is not None and not isinstance(self.state_path, Path):
            object.__setattr__(self, "state_path", Path(self.state_path))

    @classmethod
    def from_env(cls, **overrides: Any) -> TabkeepConfig:
        """Create configuration from environment variables.

        Reads ``TABKEEP_STORAGE_KEY``, ``TABKEEP_STATE_PATH``,
        ``TABKEEP_CALL_TRACE_ENABLED`` and ``TABKEEP_REDACT_URLS``.
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        TabkeepConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        key_env = env.get("TABKEEP_STORAGE_KEY")
        if key_env is not None:
            config_kwargs["storage_key"] = key_env

        path_env = env.get("TABKEEP_STATE_PATH")
        if path_env:
            config_kwargs["state_path"] = Path(path_env).expanduser()

        if "call_trace_enabled" not in overrides:
            config_kwargs["call_trace_enabled"] = _env_bool(env.get("TABKEEP_CALL_TRACE_ENABLED"), False)

        if "redact_urls" not in overrides:
            config_kwargs["redact_urls"] = _env_bool(env.get("TABKEEP_REDACT_URLS"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
