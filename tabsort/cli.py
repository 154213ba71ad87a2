#!/usr/bin/env python3
"""Sort a window snapshot and print the resulting tab order.

Pipeline:
- Load a window snapshot (JSON, as the browser reports tabs and groups)
- Close duplicates, sort and regroup against an in-memory tab service
- Print the final order, or the full result and issued calls with --json

--dry-run prints the planned order without issuing any operation.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tabsort.config import collation_options, resolve_cfg
from tabsort.engine import dedupe
from tabsort.engine.memory import MemoryBrowser
from tabsort.engine.models import STATUS_ERROR, TabRecord
from tabsort.engine.ordering import plan_order
from tabsort.engine.reconcile import reconcile
from tabsort.tab_policy.hostnames import EffectiveHosts

USAGE = "usage: cli.py [--verbose] [--json] [--dry-run] [--config PATH] <window.json>"


def parse_args(argv: List[str]) -> Tuple[dict, List[str]]:
    opts = {"verbose": False, "json": False, "dry_run": False, "config": None}
    rest = []
    args = list(argv[1:])
    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in ("-v", "--verbose"):
            opts["verbose"] = True
        elif arg == "--json":
            opts["json"] = True
        elif arg == "--dry-run":
            opts["dry_run"] = True
        elif arg == "--config":
            if idx + 1 >= len(args):
                raise SystemExit("--config requires a path")
            idx += 1
            opts["config"] = Path(args[idx]).expanduser()
        elif arg.startswith("--config="):
            opts["config"] = Path(arg.split("=", 1)[1]).expanduser()
        elif arg in ("-h", "--help"):
            print(USAGE, file=sys.stderr)
            raise SystemExit(0)
        elif arg.startswith("-"):
            raise SystemExit(f"unknown args: {arg}")
        else:
            rest.append(arg)
        idx += 1
    return opts, rest


def _format_tabs(tabs: List[TabRecord], hosts: EffectiveHosts) -> str:
    lines = []
    for index, tab in enumerate(tabs):
        marker = "*" if tab.pinned else ""
        lines.append(f"{index}\t{tab.id}{marker}\t{hosts(tab.url)}\t{tab.title}")
    return "\n".join(lines)


def _load_snapshot(path: Path) -> Optional[dict]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        print(f"Cannot read window snapshot {path}: {exc}", file=sys.stderr)
        return None
    if not isinstance(data, dict) or not isinstance(data.get("tabs"), list):
        print(f"Window snapshot {path} has no tabs list.", file=sys.stderr)
        return None
    return data


def main(argv: List[str]) -> int:
    opts, rest = parse_args(argv)
    if len(rest) != 1:
        print(USAGE, file=sys.stderr)
        return 2

    src = Path(rest[0]).expanduser().resolve()
    snapshot = _load_snapshot(src)
    if snapshot is None:
        return 3
    try:
        cfg = resolve_cfg(opts["config"], {"verbose": True} if opts["verbose"] else None)
    except (OSError, ValueError) as exc:
        print(f"Cannot load config: {exc}", file=sys.stderr)
        return 3

    try:
        browser = MemoryBrowser.from_snapshot(snapshot)
    except (KeyError, TypeError, ValueError) as exc:
        print(f"Invalid window snapshot {src}: {exc}", file=sys.stderr)
        return 3
    window_id = snapshot.get("windowId", 1)
    hosts = EffectiveHosts.from_cfg(cfg)

    if opts["dry_run"]:
        view = browser.snapshot(window_id)
        if cfg.get("dedupe", True):
            view = view.without(dedupe.plan(view.tabs))
        order = plan_order(view, hosts=hosts, use_groups=bool(cfg.get("groups", True)), **collation_options(cfg))
        print(_format_tabs(order.target_order(), hosts))
        return 0

    result = asyncio.run(reconcile(window_id, browser.tabs, browser.tab_groups, cfg=cfg))
    final = browser.snapshot(window_id)
    if opts["json"]:
        payload = {
            "result": result.to_dict(),
            "tabs": [tab.to_dict() for tab in final.tabs],
            "groups": [group.to_dict() for group in final.groups],
            "calls": [list(call) for call in browser.calls],
        }
        print(json.dumps(payload, indent=2))
    else:
        print(_format_tabs(list(final.tabs), hosts))
        print(f"status: {result.status}", file=sys.stderr)
    return 4 if result.status == STATUS_ERROR else 0


def _entrypoint() -> int:
    return main(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
