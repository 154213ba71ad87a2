"""Contracts for the browser's tab and tab-group services."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .models import TAB_GROUP_ID_NONE, GroupRecord, TabRecord

__all__ = ["TAB_GROUP_ID_NONE", "TabService", "TabGroupService", "TabServiceError"]


class TabServiceError(RuntimeError):
    """Raised by a service when a single call is rejected."""


class TabService(ABC):
    """Asynchronous tab operations for one browser profile."""

    @abstractmethod
    async def query(
        self,
        window_id: int,
        *,
        pinned: Optional[bool] = None,
        group_id: Optional[int] = None,
    ) -> List[TabRecord]:
        """List tabs in a window ordered by index.

        Args:
            window_id: Window to enumerate
            pinned: Only tabs with this pinned state, if given
            group_id: Only tabs in this group, if given (``TAB_GROUP_ID_NONE``
                selects ungrouped tabs)
        """

    @abstractmethod
    async def move(self, tab_id: int, index: int) -> TabRecord:
        """Move a tab to ``index`` within its window and return it."""

    @abstractmethod
    async def group(self, tab_ids: Iterable[int], group_id: Optional[int] = None) -> int:
        """Add tabs to ``group_id``, or to a new group when omitted.

        Returns:
            The id of the group the tabs now belong to
        """

    @abstractmethod
    async def ungroup(self, tab_ids: Iterable[int]) -> None:
        """Remove tabs from whatever group they are in."""

    @abstractmethod
    async def remove(self, tab_ids: Iterable[int]) -> None:
        """Close tabs."""


class TabGroupService(ABC):
    """Asynchronous tab-group metadata operations."""

    @abstractmethod
    async def query(self, window_id: int) -> List[GroupRecord]:
        """List the groups of a window."""

    @abstractmethod
    async def update(
        self,
        group_id: int,
        *,
        title: Optional[str] = None,
        color: Optional[str] = None,
        collapsed: Optional[bool] = None,
    ) -> GroupRecord:
        """Change group metadata; ``None`` leaves a field untouched."""
