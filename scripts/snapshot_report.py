#!/usr/bin/env python3
"""Print the tab-session snapshot stored in a JSON state file.

Usage
-----
::

    export TABKEEP_STATE_PATH=~/.tabkeep/state.json
    python scripts/snapshot_report.py

Options::

    --path FILE     Read this state file instead of $TABKEEP_STATE_PATH
    --key KEY       Storage key inside the file (default: savedState)
    --json          Output the stored document as JSON
    --show-urls     Print full urls instead of redacted ones
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from tabkeep import JsonFileSnapshotStore, SavedState, TabkeepConfig  # noqa: E402
from tabkeep._redact import redact_url  # noqa: E402


def _format_saved_at(saved_at: int) -> str:
    return datetime.fromtimestamp(saved_at / 1000, tz=UTC).isoformat()


def _render(state: SavedState, *, show_urls: bool) -> str:
    def _url(url: str) -> str:
        return url if show_urls else redact_url(url)

    lines = [f"Saved at: {_format_saved_at(state.saved_at)}", ""]
    lines.append(f"Ungrouped tabs ({len(state.ungrouped_tabs)})")
    for tab in state.ungrouped_tabs:
        pin = " [pinned]" if tab.pinned else ""
        lines.append(f"  - {tab.title or '(untitled)'}{pin}  {_url(tab.url)}")
    lines.append("")
    lines.append(f"Groups ({len(state.groups)})")
    for group in state.groups:
        flag = " (collapsed)" if group.collapsed else ""
        lines.append(f"  ● {group.title or '(Untitled Group)'} [{group.color.value}]{flag} · {len(group.tabs)} tabs")
        for tab in group.tabs:
            lines.append(f"      - {tab.title or '(untitled)'}  {_url(tab.url)}")
    return "\n".join(lines)


async def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--path", type=Path, default=None)
    parser.add_argument("--key", default=None)
    parser.add_argument("--json", dest="json_mode", action="store_true")
    parser.add_argument("--show-urls", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    overrides: dict[str, object] = {}
    if args.path is not None:
        overrides["state_path"] = args.path
    if args.key is not None:
        overrides["storage_key"] = args.key
    config = TabkeepConfig.from_env(**overrides)
    if config.state_path is None:
        print("No state file: pass --path or set TABKEEP_STATE_PATH", file=sys.stderr)
        return 2

    store = JsonFileSnapshotStore(config.state_path, key=config.storage_key)
    document = await store.load()
    if document is None:
        print(f"No snapshot stored under {config.storage_key!r} in {config.state_path}")
        return 0

    state = SavedState.from_document(document)
    if args.json_mode:
        print(json.dumps(state.to_document(), indent=2, ensure_ascii=False))
    else:
        print(_render(state, show_urls=args.show_urls))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
