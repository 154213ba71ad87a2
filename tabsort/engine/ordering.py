"""Target ordering for a window: pinned, then groups, then loose tabs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from tabsort.tab_policy.collation import collation_key, sort_tabs
from tabsort.tab_policy.hostnames import resolve

from .models import GroupRecord, TabRecord, WindowView


@dataclass
class GroupPlan:
    group: GroupRecord
    tabs: List[TabRecord] = field(default_factory=list)

    @property
    def tab_ids(self) -> List[int]:
        return [tab.id for tab in self.tabs]


@dataclass
class OrderPlan:
    pinned: List[TabRecord] = field(default_factory=list)
    groups: List[GroupPlan] = field(default_factory=list)
    ungrouped: List[TabRecord] = field(default_factory=list)

    def target_order(self) -> List[TabRecord]:
        ordered = list(self.pinned)
        for group_plan in self.groups:
            ordered.extend(group_plan.tabs)
        ordered.extend(self.ungrouped)
        return ordered

    def target_ids(self) -> List[int]:
        return [tab.id for tab in self.target_order()]

    def moves(self) -> List[Tuple[int, int]]:
        """(tab id, target index) for every unpinned tab, ascending by index."""
        return [
            (tab.id, index)
            for index, tab in enumerate(self.target_order())
            if not tab.pinned
        ]


def plan_order(
    view: WindowView,
    *,
    hosts: Callable[[Optional[str]], str] = resolve,
    natural: bool = False,
    remove_punctuation: bool = False,
    use_groups: bool = True,
) -> OrderPlan:
    """Compute where every tab of ``view`` belongs.

    Pinned tabs keep their relative order. Each group's tabs and the loose
    tabs are sorted by (effective host, title); groups are sorted by title.
    All sorts are stable, so equal keys keep their current order.
    """
    opts = {"natural": natural, "remove_punctuation": remove_punctuation}
    pinned: List[TabRecord] = []
    buckets: Dict[int, List[TabRecord]] = {}
    ungrouped: List[TabRecord] = []

    for tab in view.tabs:
        if tab.pinned:
            pinned.append(tab)
        elif use_groups and tab.grouped:
            buckets.setdefault(tab.group_id, []).append(tab)
        else:
            ungrouped.append(tab)

    group_plans = []
    for group_id, members in buckets.items():
        group = view.group(group_id) or GroupRecord(id=group_id, window_id=view.window_id)
        group_plans.append(GroupPlan(group=group, tabs=sort_tabs(members, hosts=hosts, **opts)))
    group_plans.sort(key=lambda gp: collation_key(gp.group.title, **opts))

    return OrderPlan(
        pinned=pinned,
        groups=group_plans,
        ungrouped=sort_tabs(ungrouped, hosts=hosts, **opts),
    )


def is_in_order(view: WindowView, order: OrderPlan) -> bool:
    """Compare unpinned tabs only; pinned tabs are never moved."""
    current = [tab.id for tab in view.tabs if not tab.pinned]
    return current == [tab.id for tab in order.target_order() if not tab.pinned]
