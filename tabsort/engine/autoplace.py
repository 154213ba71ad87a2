"""Place a newly created tab next to its same-domain siblings."""

from __future__ import annotations

from typing import Callable, Optional

from tabsort.tab_policy.hostnames import resolve

from .diagnostics import Diagnostics
from .models import FAILURE_OPERATION, TAB_GROUP_ID_NONE, TabRecord
from .service import TabService


async def place_new_tab(
    tab: TabRecord,
    tabs: TabService,
    *,
    hosts: Callable[[Optional[str]], str] = resolve,
    diag: Optional[Diagnostics] = None,
) -> Optional[int]:
    """Move ``tab`` in front of the earliest loose tab sharing its domain.

    Pinned tabs, grouped tabs and tabs without a URL are left where the
    browser put them, as is any tab with no same-domain sibling. Returns the
    index the tab was moved to, or ``None`` when nothing was moved.
    """
    diag = diag or Diagnostics()
    if tab.pinned or tab.grouped or not tab.url:
        return None

    host = hosts(tab.url)
    try:
        candidates = await tabs.query(tab.window_id, pinned=False, group_id=TAB_GROUP_ID_NONE)
    except Exception as exc:
        diag.record(FAILURE_OPERATION, "query", tab.window_id, exc)
        return None

    siblings = [
        other
        for other in candidates
        if other.id != tab.id and not other.pinned and not other.grouped and hosts(other.url) == host
    ]
    if not siblings:
        return None

    index = min(other.index for other in siblings)
    if tab.index < index:
        # The move index counts positions after the tab leaves its slot.
        index -= 1
        if tab.index == index:
            return None
    try:
        await tabs.move(tab.id, index)
    except Exception as exc:
        diag.record(FAILURE_OPERATION, "move", tab.id, exc)
        return None
    diag.info(f"Placed tab {tab.id} at {index} next to {host}.")
    return index
