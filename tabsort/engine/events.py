"""Typed browser events and the handlers that react to them.

Each event triggers at most one engine invocation: the ``sort-tabs`` command
reconciles its window, a created tab is auto-placed, and group or membership
changes only refresh a snapshot of the affected window.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, Dict, List, Optional, TextIO, Union

from tabsort.config import merge_cfg
from tabsort.tab_policy.hostnames import EffectiveHosts

from .autoplace import place_new_tab
from .diagnostics import Diagnostics
from .models import FAILURE_OPERATION, GroupRecord, SortResult, TabRecord, WindowView
from .reconcile import reconcile, snapshot_window
from .service import TabGroupService, TabService

COMMAND_SORT_TABS = "sort-tabs"

GROUP_CHANGES = ("created", "updated", "removed")
MEMBERSHIP_CHANGES = ("attached", "detached")


@dataclass(frozen=True)
class CommandInvoked:
    name: str
    window_id: int


@dataclass(frozen=True)
class TabCreated:
    tab: TabRecord


@dataclass(frozen=True)
class GroupChanged:
    change: str
    group: GroupRecord


@dataclass(frozen=True)
class TabMembershipChanged:
    change: str
    tab_id: int
    window_id: int


Event = Union[CommandInvoked, TabCreated, GroupChanged, TabMembershipChanged]


class WindowEventRouter:
    """Routes window-management events to the engine."""

    def __init__(
        self,
        tabs: TabService,
        groups: Optional[TabGroupService] = None,
        *,
        cfg: Optional[Dict] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.tabs = tabs
        self.groups = groups
        self.cfg = merge_cfg(cfg, None)
        self.stderr = stderr
        self.hosts = EffectiveHosts.from_cfg(self.cfg)

    def _diag(self) -> Diagnostics:
        return Diagnostics(stderr=self.stderr, verbose=bool(self.cfg.get("verbose")))

    async def dispatch(self, event: Event):
        if isinstance(event, CommandInvoked):
            return await self.on_command(event)
        if isinstance(event, TabCreated):
            return await self.on_tab_created(event)
        if isinstance(event, GroupChanged):
            if event.change not in GROUP_CHANGES:
                raise ValueError(f"Unknown group change: {event.change!r}")
            return await self.on_structure_changed(event.group.window_id)
        if isinstance(event, TabMembershipChanged):
            if event.change not in MEMBERSHIP_CHANGES:
                raise ValueError(f"Unknown membership change: {event.change!r}")
            return await self.on_structure_changed(event.window_id)
        raise TypeError(f"Unsupported event: {event!r}")

    async def on_command(self, event: CommandInvoked) -> Optional[SortResult]:
        if event.name != COMMAND_SORT_TABS:
            return None
        result = await reconcile(
            event.window_id,
            self.tabs,
            self.groups,
            cfg=self.cfg,
            stderr=self.stderr,
        )
        self._diag().info(f"{COMMAND_SORT_TABS} result: {result.to_dict()}")
        return result

    async def on_tab_created(self, event: TabCreated) -> Optional[int]:
        if not self.cfg.get("autoPlace", True):
            return None
        return await place_new_tab(event.tab, self.tabs, hosts=self.hosts, diag=self._diag())

    async def on_structure_changed(self, window_id: int) -> Optional[WindowView]:
        """Return a fresh snapshot; never reorders anything."""
        try:
            return await snapshot_window(window_id, self.tabs, self.groups)
        except Exception as exc:
            self._diag().record(FAILURE_OPERATION, "query", window_id, exc)
            return None

    async def run(self, events: AsyncIterable[Event]) -> List:
        """Handle events one at a time, in arrival order."""
        results = []
        async for event in events:
            results.append(await self.dispatch(event))
        return results
