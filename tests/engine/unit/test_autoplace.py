import pytest

from tabsort.engine.autoplace import place_new_tab
from tabsort.engine.diagnostics import Diagnostics
from tests.builders import WINDOW_ID, group, tab, window


@pytest.mark.asyncio
async def test_new_tab_moves_before_earliest_same_domain_tab(make_browser):
    browser = make_browser(
        window(
            tab(1, "https://x.com"),
            tab(2, "https://docs.example.com"),
            tab(3, "https://y.com"),
            tab(4, "https://example.com/page"),
            tab(5, "https://www.example.com/new"),
        )
    )
    new_tab = browser.snapshot(WINDOW_ID).tabs[-1]

    index = await place_new_tab(new_tab, browser.tabs)

    assert index == 1
    assert browser.order(WINDOW_ID) == [1, 5, 2, 3, 4]


@pytest.mark.asyncio
async def test_new_tab_without_sibling_stays_put(make_browser):
    browser = make_browser(window(tab(1, "https://x.com"), tab(2, "https://new.org")))
    new_tab = browser.snapshot(WINDOW_ID).tabs[-1]

    assert await place_new_tab(new_tab, browser.tabs) is None
    assert browser.calls_named("move") == []


@pytest.mark.asyncio
async def test_pinned_or_urlless_new_tab_is_ignored(make_browser):
    browser = make_browser(
        window(
            tab(1, "https://a.com"),
            tab(2, "https://a.com/pinned", pinned=True),
            tab(3, ""),
        )
    )
    view = browser.snapshot(WINDOW_ID)
    by_id = {t.id: t for t in view.tabs}

    assert await place_new_tab(by_id[2], browser.tabs) is None
    assert await place_new_tab(by_id[3], browser.tabs) is None
    assert browser.calls == []


@pytest.mark.asyncio
async def test_grouped_and_pinned_siblings_are_not_candidates(make_browser):
    browser = make_browser(
        window(
            tab(1, "https://a.com/pinned", pinned=True),
            tab(2, "https://a.com/grouped", group_id=8),
            tab(3, "https://b.com"),
            tab(4, "https://a.com/new"),
        ),
        [group(8, "G")],
    )
    new_tab = browser.snapshot(WINDOW_ID).tabs[-1]

    assert await place_new_tab(new_tab, browser.tabs) is None
    assert browser.calls_named("move") == []


@pytest.mark.asyncio
async def test_failed_move_is_recorded_not_raised(make_browser, stderr):
    browser = make_browser(window(tab(1, "https://a.com"), tab(2, "https://a.com/new")))
    browser.fail("move", target=2)
    diag = Diagnostics(stderr=stderr)

    assert await place_new_tab(browser.snapshot(WINDOW_ID).tabs[-1], browser.tabs, diag=diag) is None

    assert [f.operation for f in diag.failures] == ["move"]
    assert "move 2" in stderr.getvalue()


@pytest.mark.asyncio
async def test_new_tab_left_of_sibling_lands_directly_before_it(make_browser):
    browser = make_browser(
        window(
            tab(1, "https://x.com"),
            tab(2, "https://a.com/new"),
            tab(3, "https://y.com"),
            tab(4, "https://a.com/old"),
        )
    )
    new_tab = browser.snapshot(WINDOW_ID).tabs[1]

    index = await place_new_tab(new_tab, browser.tabs)

    assert index == 2
    assert browser.order(WINDOW_ID) == [1, 3, 2, 4]


@pytest.mark.asyncio
async def test_new_tab_already_before_sibling_is_not_moved(make_browser):
    browser = make_browser(window(tab(1, "https://x.com"), tab(2, "https://a.com/new"), tab(3, "https://a.com")))
    new_tab = browser.snapshot(WINDOW_ID).tabs[1]

    assert await place_new_tab(new_tab, browser.tabs) is None
    assert browser.calls_named("move") == []
