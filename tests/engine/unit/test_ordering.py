from tabsort.engine.models import WindowView
from tabsort.engine.ordering import is_in_order, plan_order
from tests.builders import WINDOW_ID, group, tab, window


def _view(tabs, groups=()):
    return WindowView.of(WINDOW_ID, window(*tabs), groups)


def test_plan_order_pinned_then_groups_then_loose_tabs():
    view = _view(
        [
            tab(1, "https://z.com", "pinned z", pinned=True),
            tab(2, "https://a.com", "pinned a", pinned=True),
            tab(3, "https://c.com", "C"),
            tab(4, "https://y.com", "Y", group_id=20),
            tab(5, "https://b.com", "B"),
            tab(6, "https://x.com", "X", group_id=10),
            tab(7, "https://a.com", "A", group_id=20),
        ],
        [group(10, "Work"), group(20, "Reading")],
    )

    order = plan_order(view)

    assert order.target_ids() == [1, 2, 7, 4, 6, 5, 3]
    assert [gp.group.id for gp in order.groups] == [20, 10]
    assert order.moves() == [(7, 2), (4, 3), (6, 4), (5, 5), (3, 6)]


def test_plan_order_groups_with_equal_titles_keep_encounter_order():
    view = _view(
        [
            tab(1, "https://a.com", group_id=30),
            tab(2, "https://a.com", group_id=10),
        ],
        [group(10, "same"), group(30, "Same")],
    )

    assert [gp.group.id for gp in plan_order(view).groups] == [30, 10]


def test_plan_order_synthesizes_unknown_group_record():
    view = _view([tab(1, "https://a.com", group_id=99)])

    order = plan_order(view)

    assert order.groups[0].group.id == 99
    assert order.groups[0].group.title == ""


def test_plan_order_without_groups_treats_grouped_tabs_as_loose():
    view = _view(
        [tab(1, "https://b.com", group_id=10), tab(2, "https://a.com")],
        [group(10, "Work")],
    )

    order = plan_order(view, use_groups=False)

    assert order.groups == []
    assert order.target_ids() == [2, 1]


def test_is_in_order_detects_sorted_window():
    sorted_view = _view([tab(1, "https://a.com", "A"), tab(2, "https://b.com", "B")])
    unsorted_view = _view([tab(1, "https://b.com", "B"), tab(2, "https://a.com", "A")])

    assert is_in_order(sorted_view, plan_order(sorted_view))
    assert not is_in_order(unsorted_view, plan_order(unsorted_view))


def test_plan_order_natural_titles():
    view = _view([tab(1, "https://a.com", "Part 10"), tab(2, "https://a.com", "Part 9")])

    assert plan_order(view).target_ids() == [1, 2]
    assert plan_order(view, natural=True).target_ids() == [2, 1]


def test_is_in_order_ignores_pinned_tab_positions():
    view = WindowView(
        window_id=WINDOW_ID,
        tabs=(
            tab(2, "https://a.com", "A", index=0),
            tab(1, "https://z.com", "pinned", pinned=True, index=1),
            tab(3, "https://b.com", "B", index=2),
        ),
    )

    assert is_in_order(view, plan_order(view))
