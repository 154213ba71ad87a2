"""Data models for tab ordering."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Tuple

TAB_GROUP_ID_NONE = -1

STATUS_SORTED = "sorted"
STATUS_ALREADY_SORTED = "already_sorted"
STATUS_ERROR = "error"

FAILURE_OPERATION = "operation"
FAILURE_STRUCTURAL = "structural"
FAILURE_TOP_LEVEL = "top_level"


def _window_id(raw: dict, fallback: Optional[int]) -> int:
    value = raw.get("windowId", raw.get("window_id"))
    if value is None:
        return 0 if fallback is None else fallback
    return value


@dataclass(frozen=True)
class TabRecord:
    id: int
    url: str = ""
    title: str = ""
    pinned: bool = False
    active: bool = False
    index: int = 0
    group_id: int = TAB_GROUP_ID_NONE
    window_id: int = 0

    @property
    def grouped(self) -> bool:
        return self.group_id != TAB_GROUP_ID_NONE

    @classmethod
    def from_dict(cls, raw: dict, window_id: Optional[int] = None) -> "TabRecord":
        group_id = raw.get("groupId", raw.get("group_id", TAB_GROUP_ID_NONE))
        return cls(
            id=raw["id"],
            url=str(raw.get("url") or ""),
            title=str(raw.get("title") or ""),
            pinned=bool(raw.get("pinned", False)),
            active=bool(raw.get("active", False)),
            index=int(raw.get("index", 0)),
            group_id=TAB_GROUP_ID_NONE if group_id is None else group_id,
            window_id=_window_id(raw, window_id),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "pinned": self.pinned,
            "active": self.active,
            "index": self.index,
            "groupId": self.group_id,
            "windowId": self.window_id,
        }


@dataclass(frozen=True)
class GroupRecord:
    id: int
    title: str = ""
    color: str = "grey"
    collapsed: bool = False
    window_id: int = 0

    @classmethod
    def from_dict(cls, raw: dict, window_id: Optional[int] = None) -> "GroupRecord":
        return cls(
            id=raw["id"],
            title=str(raw.get("title") or ""),
            color=str(raw.get("color") or "grey"),
            collapsed=bool(raw.get("collapsed", False)),
            window_id=_window_id(raw, window_id),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "color": self.color,
            "collapsed": self.collapsed,
            "windowId": self.window_id,
        }


@dataclass(frozen=True)
class WindowView:
    """Read-only snapshot of one window, tabs ordered by index."""

    window_id: int
    tabs: Tuple[TabRecord, ...] = ()
    groups: Tuple[GroupRecord, ...] = ()

    @classmethod
    def of(cls, window_id: int, tabs: Iterable[TabRecord], groups: Iterable[GroupRecord] = ()) -> "WindowView":
        return cls(
            window_id=window_id,
            tabs=tuple(sorted(tabs, key=lambda t: t.index)),
            groups=tuple(groups),
        )

    def tab_ids(self) -> List[int]:
        return [tab.id for tab in self.tabs]

    def group(self, group_id: int) -> Optional[GroupRecord]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def without(self, tab_ids: Iterable[int]) -> "WindowView":
        """Drop tabs and renumber the rest, as the browser would after a close."""
        drop = set(tab_ids)
        kept = [tab for tab in self.tabs if tab.id not in drop]
        return replace(
            self,
            tabs=tuple(replace(tab, index=idx) for idx, tab in enumerate(kept)),
        )


@dataclass
class Failure:
    kind: str
    operation: str
    target: Optional[int] = None
    detail: str = ""

    def describe(self) -> str:
        target = "" if self.target is None else f" {self.target}"
        return f"{self.kind} failure: {self.operation}{target}: {self.detail}"


@dataclass
class SortResult:
    status: str
    error: Optional[str] = None
    closed: List[int] = field(default_factory=list)
    moved: List[int] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)

    def to_dict(self) -> Dict:
        out: Dict = {"status": self.status}
        if self.error is not None:
            out["error"] = self.error
        return out
