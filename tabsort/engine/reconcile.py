"""Drive a window toward its target order through the tab services.

Flow:
- Snapshot the window (the only step whose failure aborts the run)
- Close duplicate tabs, then re-snapshot
- Plan the target order; stop early if the window already matches it
- Move every unpinned tab, one at a time, to its target index
- Re-apply group membership and restore group title/color/collapsed state

Moving a grouped tab can drop it out of its group, which is why membership is
re-applied after all moves instead of moving tabs group by group.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, TextIO, Tuple

from tabsort.config import collation_options, merge_cfg
from tabsort.tab_policy.hostnames import EffectiveHosts

from . import dedupe
from .diagnostics import Diagnostics
from .models import (
    FAILURE_OPERATION,
    FAILURE_STRUCTURAL,
    FAILURE_TOP_LEVEL,
    STATUS_ALREADY_SORTED,
    STATUS_ERROR,
    STATUS_SORTED,
    GroupRecord,
    SortResult,
    WindowView,
)
from .ordering import GroupPlan, is_in_order, plan_order
from .service import TabGroupService, TabService


async def snapshot_window(
    window_id: int,
    tabs: TabService,
    groups: Optional[TabGroupService] = None,
) -> WindowView:
    tab_list = await tabs.query(window_id)
    group_list = await groups.query(window_id) if groups is not None else []
    return WindowView.of(window_id, tab_list, group_list)


async def _close_duplicates(
    view: WindowView,
    tabs: TabService,
    groups: Optional[TabGroupService],
    diag: Diagnostics,
) -> Tuple[WindowView, List[int]]:
    to_close = dedupe.plan(view.tabs)
    if not to_close:
        return view, []

    closed = [tab.id for tab in view.tabs if tab.id in to_close]
    diag.info(f"Closing {len(closed)} duplicate tabs.")
    try:
        await tabs.remove(closed)
    except Exception as exc:
        # Usually a tab that was closed concurrently.
        diag.record(FAILURE_OPERATION, "remove", None, exc)

    try:
        return await snapshot_window(view.window_id, tabs, groups), closed
    except Exception as exc:
        diag.record(FAILURE_OPERATION, "query", view.window_id, exc)
        return view.without(closed), closed


async def _regroup(
    view: WindowView,
    group_plans: List[GroupPlan],
    tabs: TabService,
    groups: TabGroupService,
    diag: Diagnostics,
    restore_metadata: bool = True,
) -> None:
    restored: List[Tuple[int, GroupRecord]] = []

    for group_plan in group_plans:
        group = group_plan.group
        known = view.group(group.id) is not None
        ids = group_plan.tab_ids
        try:
            await tabs.group(ids, group_id=group.id)
            restored.append((group.id, group))
            continue
        except Exception as exc:
            diag.record(FAILURE_STRUCTURAL, "group", group.id, exc)

        try:
            new_id = await tabs.group(ids)
        except Exception as exc:
            diag.record(FAILURE_OPERATION, "group", None, exc)
            try:
                await tabs.ungroup(ids)
            except Exception as ungroup_exc:
                diag.record(FAILURE_OPERATION, "ungroup", group.id, ungroup_exc)
            continue

        diag.info(f"Group {group.id} replaced by {new_id}.")
        if known:
            try:
                await groups.update(new_id, title=group.title)
            except Exception as exc:
                diag.record(FAILURE_OPERATION, "update", new_id, exc)
        restored.append((new_id, group))

    if not restore_metadata:
        return
    for group_id, group in restored:
        if view.group(group.id) is None:
            continue
        try:
            await groups.update(
                group_id,
                title=group.title,
                color=group.color,
                collapsed=group.collapsed,
            )
        except Exception as exc:
            diag.record(FAILURE_OPERATION, "update", group_id, exc)


async def reconcile(
    window_id: int,
    tabs: TabService,
    groups: Optional[TabGroupService] = None,
    *,
    cfg: Optional[Dict] = None,
    stderr: Optional[TextIO] = None,
) -> SortResult:
    """Dedupe, sort and regroup one window.

    Only a failed initial snapshot yields ``"error"``; every other failed call
    is recorded in ``SortResult.failures`` and the run carries on.
    """
    cfg = merge_cfg(cfg, None)
    diag = Diagnostics(stderr=stderr, verbose=bool(cfg.get("verbose")))
    hosts = EffectiveHosts.from_cfg(cfg)
    use_groups = groups is not None and bool(cfg.get("groups", True))
    group_service = groups if use_groups else None

    try:
        view = await snapshot_window(window_id, tabs, group_service)
    except Exception as exc:
        diag.record(FAILURE_TOP_LEVEL, "query", window_id, exc)
        return SortResult(status=STATUS_ERROR, error=str(exc), failures=diag.failures)

    closed: List[int] = []
    if cfg.get("dedupe", True):
        view, closed = await _close_duplicates(view, tabs, group_service, diag)

    order = plan_order(view, hosts=hosts, use_groups=use_groups, **collation_options(cfg))
    if is_in_order(view, order):
        diag.info("Tabs already sorted; no action taken.")
        return SortResult(status=STATUS_ALREADY_SORTED, closed=closed, failures=diag.failures)

    moved: List[int] = []
    for tab_id, index in order.moves():
        try:
            await tabs.move(tab_id, index)
        except Exception as exc:
            diag.record(FAILURE_OPERATION, "move", tab_id, exc)
            continue
        moved.append(tab_id)

    if group_service is not None and order.groups:
        await _regroup(
            view,
            order.groups,
            tabs,
            group_service,
            diag,
            restore_metadata=bool(cfg.get("restoreGroupMetadata", True)),
        )

    diag.info(f"Tabs sorted: moved={len(moved)} closed={len(closed)} failures={len(diag.failures)}.")
    return SortResult(
        status=STATUS_SORTED,
        closed=closed,
        moved=moved,
        failures=diag.failures,
    )


def reconcile_sync(window_id: int, tabs: TabService, groups: Optional[TabGroupService] = None, **kwargs) -> SortResult:
    """Blocking wrapper for callers without an event loop."""
    return asyncio.run(reconcile(window_id, tabs, groups, **kwargs))
