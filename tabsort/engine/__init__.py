"""Tab ordering engine: dedupe, plan, reconcile and auto-place."""

from .autoplace import place_new_tab
from .dedupe import normalize_for_dedupe, plan as plan_dedupe
from .events import (
    COMMAND_SORT_TABS,
    CommandInvoked,
    GroupChanged,
    TabCreated,
    TabMembershipChanged,
    WindowEventRouter,
)
from .memory import MemoryBrowser
from .models import (
    TAB_GROUP_ID_NONE,
    Failure,
    GroupRecord,
    SortResult,
    TabRecord,
    WindowView,
)
from .ordering import OrderPlan, is_in_order, plan_order
from .reconcile import reconcile, reconcile_sync, snapshot_window
from .service import TabGroupService, TabService, TabServiceError

__all__ = [
    "place_new_tab",
    "normalize_for_dedupe",
    "plan_dedupe",
    "COMMAND_SORT_TABS",
    "CommandInvoked",
    "GroupChanged",
    "TabCreated",
    "TabMembershipChanged",
    "WindowEventRouter",
    "MemoryBrowser",
    "TAB_GROUP_ID_NONE",
    "Failure",
    "GroupRecord",
    "SortResult",
    "TabRecord",
    "WindowView",
    "OrderPlan",
    "is_in_order",
    "plan_order",
    "reconcile",
    "reconcile_sync",
    "snapshot_window",
    "TabGroupService",
    "TabService",
    "TabServiceError",
]
