"""In-memory tab and tab-group services.

Backs the CLI and the tests. Every call is appended to ``MemoryBrowser.calls``
(including calls that were made to fail), so callers can assert exactly which
operations an engine invocation issued.

Behavior follows the browser closely enough for reconciliation:

- ``move`` clamps unpinned tabs behind the pinned block, and a grouped tab
  that ends up with no neighbor from its own group leaves that group.
- ``group`` gathers the tabs next to each other, after the remaining members
  of an existing group or at the first tab's position for a new one.
- groups left without tabs are dropped after ``ungroup`` and ``remove``.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from .models import TAB_GROUP_ID_NONE, GroupRecord, TabRecord, WindowView
from .service import TabGroupService, TabService, TabServiceError


class MemoryBrowser:
    """Shared window state behind ``MemoryTabService``/``MemoryTabGroupService``."""

    def __init__(self):
        self._windows: Dict[int, List[TabRecord]] = {}
        self._groups: Dict[int, GroupRecord] = {}
        self._next_group_id = 1
        self._fail_rules: List[dict] = []
        self.calls: List[Tuple] = []
        self.tabs = MemoryTabService(self)
        self.tab_groups = MemoryTabGroupService(self)

    @classmethod
    def from_records(
        cls,
        window_id: int,
        tabs: Iterable[TabRecord],
        groups: Iterable[GroupRecord] = (),
    ) -> "MemoryBrowser":
        browser = cls()
        browser.add_window(window_id, tabs, groups)
        return browser

    @classmethod
    def from_snapshot(cls, snapshot: dict) -> "MemoryBrowser":
        """Build from a browser-style dict: ``{"windowId", "tabs", "groups"}``."""
        window_id = snapshot.get("windowId", 1)
        raw_tabs = list(snapshot.get("tabs") or [])
        tabs = []
        for pos, raw in enumerate(raw_tabs):
            if "index" not in raw:
                raw = dict(raw, index=pos)
            tabs.append(TabRecord.from_dict(raw, window_id=window_id))
        groups = [GroupRecord.from_dict(raw, window_id=window_id) for raw in snapshot.get("groups") or []]
        return cls.from_records(window_id, tabs, groups)

    def add_window(
        self,
        window_id: int,
        tabs: Iterable[TabRecord],
        groups: Iterable[GroupRecord] = (),
    ) -> None:
        ordered = sorted(tabs, key=lambda t: t.index)
        self._windows[window_id] = [replace(tab, window_id=window_id) for tab in ordered]
        for group in groups:
            self._groups[group.id] = replace(group, window_id=window_id)
            self._next_group_id = max(self._next_group_id, int(group.id) + 1)
        self._renumber(window_id)

    def add_tab(self, tab: TabRecord) -> TabRecord:
        """Append or insert a tab as the browser would on creation."""
        tabs = self._windows.setdefault(tab.window_id, [])
        index = max(0, min(tab.index, len(tabs)))
        tabs.insert(index, tab)
        self._renumber(tab.window_id)
        return self._find(tab.id)[1]

    def fail(self, operation: str, target: Optional[int] = None, *, after: int = 0) -> None:
        """Make matching calls raise ``TabServiceError``.

        Args:
            operation: Call name as recorded in ``calls`` (``query``, ``move``,
                ``group``, ``ungroup``, ``remove``, ``groups.query``,
                ``groups.update``)
            target: Only fail calls on this tab/group id (any id when omitted)
            after: Let this many matching calls succeed first
        """
        self._fail_rules.append({"operation": operation, "target": target, "after": after})

    def snapshot(self, window_id: int) -> WindowView:
        return WindowView.of(window_id, self._windows.get(window_id, []), self._window_groups(window_id))

    def order(self, window_id: int) -> List[int]:
        return [tab.id for tab in self._windows.get(window_id, [])]

    def calls_named(self, *names: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] in names]

    # -- internals ---------------------------------------------------------

    def _record(self, operation: str, target, *args) -> None:
        self.calls.append((operation, target) + args)
        for rule in self._fail_rules:
            if rule["operation"] != operation:
                continue
            if rule["target"] is not None and rule["target"] != target:
                continue
            if rule["after"] > 0:
                rule["after"] -= 1
                continue
            raise TabServiceError(f"{operation} rejected for {target}")

    def _find(self, tab_id: int) -> Tuple[int, TabRecord]:
        for window_id, tabs in self._windows.items():
            for tab in tabs:
                if tab.id == tab_id:
                    return window_id, tab
        raise TabServiceError(f"No tab with id: {tab_id}.")

    def _renumber(self, window_id: int) -> None:
        tabs = self._windows[window_id]
        self._windows[window_id] = [replace(tab, index=idx) for idx, tab in enumerate(tabs)]

    def _window_groups(self, window_id: int) -> List[GroupRecord]:
        return sorted(
            (group for group in self._groups.values() if group.window_id == window_id),
            key=lambda g: g.id,
        )

    def _prune_groups(self) -> None:
        live = {tab.group_id for tabs in self._windows.values() for tab in tabs}
        for group_id in list(self._groups):
            if group_id not in live:
                del self._groups[group_id]


class MemoryTabService(TabService):
    def __init__(self, browser: MemoryBrowser):
        self.browser = browser

    async def query(self, window_id, *, pinned=None, group_id=None):
        await asyncio.sleep(0)
        browser = self.browser
        browser._record("query", window_id)
        if window_id not in browser._windows:
            raise TabServiceError(f"No window with id: {window_id}.")
        out = []
        for tab in browser._windows[window_id]:
            if pinned is not None and tab.pinned != pinned:
                continue
            if group_id is not None and tab.group_id != group_id:
                continue
            out.append(tab)
        return out

    async def move(self, tab_id, index):
        await asyncio.sleep(0)
        browser = self.browser
        browser._record("move", tab_id, index)
        window_id, tab = browser._find(tab_id)
        tabs = browser._windows[window_id]
        tabs.remove(tab)
        pinned_count = sum(1 for t in tabs if t.pinned)
        if index < 0 or index > len(tabs):
            index = len(tabs)
        if tab.pinned:
            index = min(index, pinned_count)
        else:
            index = max(index, pinned_count)
        tabs.insert(index, tab)
        if tab.grouped:
            neighbors = tabs[max(0, index - 1):index] + tabs[index + 1:index + 2]
            if not any(n.group_id == tab.group_id for n in neighbors):
                tabs[index] = replace(tab, group_id=TAB_GROUP_ID_NONE)
        browser._renumber(window_id)
        return browser._find(tab_id)[1]

    async def group(self, tab_ids, group_id=None):
        await asyncio.sleep(0)
        browser = self.browser
        ids = list(tab_ids)
        browser._record("group", group_id, tuple(ids))
        if not ids:
            raise TabServiceError("No tabs to group.")
        window_id, _ = browser._find(ids[0])
        if group_id is None:
            group_id = browser._next_group_id
            browser._next_group_id += 1
            browser._groups[group_id] = GroupRecord(id=group_id, window_id=window_id)
        elif group_id not in browser._groups:
            raise TabServiceError(f"No group with id: {group_id}.")

        tabs = browser._windows[window_id]
        wanted = set(ids)
        members = [tab for tab in tabs if tab.id in wanted]
        if len(members) != len(wanted):
            raise TabServiceError(f"No tab with id in: {sorted(wanted - {t.id for t in members})}.")
        rest = [tab for tab in tabs if tab.id not in wanted]
        existing = [pos for pos, tab in enumerate(rest) if tab.group_id == group_id]
        if existing:
            anchor = existing[-1] + 1
        else:
            anchor = sum(1 for tab in tabs[: members[0].index] if tab.id not in wanted)
        joined = [replace(tab, group_id=group_id) for tab in members]
        browser._windows[window_id] = rest[:anchor] + joined + rest[anchor:]
        browser._renumber(window_id)
        return group_id

    async def ungroup(self, tab_ids):
        await asyncio.sleep(0)
        browser = self.browser
        ids = list(tab_ids)
        browser._record("ungroup", None, tuple(ids))
        for tab_id in ids:
            window_id, tab = browser._find(tab_id)
            tabs = browser._windows[window_id]
            tabs[tabs.index(tab)] = replace(tab, group_id=TAB_GROUP_ID_NONE)
        browser._prune_groups()

    async def remove(self, tab_ids):
        await asyncio.sleep(0)
        browser = self.browser
        ids = list(tab_ids)
        browser._record("remove", None, tuple(ids))
        missing = []
        for tab_id in ids:
            try:
                window_id, tab = browser._find(tab_id)
            except TabServiceError:
                missing.append(tab_id)
                continue
            browser._windows[window_id].remove(tab)
            browser._renumber(window_id)
        browser._prune_groups()
        if missing:
            raise TabServiceError(f"No tab with id: {missing[0]}.")


class MemoryTabGroupService(TabGroupService):
    def __init__(self, browser: MemoryBrowser):
        self.browser = browser

    async def query(self, window_id):
        await asyncio.sleep(0)
        self.browser._record("groups.query", window_id)
        return self.browser._window_groups(window_id)

    async def update(self, group_id, *, title=None, color=None, collapsed=None):
        await asyncio.sleep(0)
        browser = self.browser
        browser._record("groups.update", group_id, title, color, collapsed)
        group = browser._groups.get(group_id)
        if group is None:
            raise TabServiceError(f"No group with id: {group_id}.")
        changes = {}
        if title is not None:
            changes["title"] = title
        if color is not None:
            changes["color"] = color
        if collapsed is not None:
            changes["collapsed"] = collapsed
        browser._groups[group_id] = replace(group, **changes)
        return browser._groups[group_id]
