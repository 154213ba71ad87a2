from tabsort.tab_policy.collation import collation_key, compare_tabs, compare_titles, sort_tabs
from tests.builders import tab


def test_collation_key_ignores_case_and_accents():
    assert collation_key("Éclair") == collation_key("eclair")
    assert collation_key("STRASSE") == collation_key("strasse")
    assert collation_key(None) == ""


def test_collation_key_natural_orders_digit_runs_by_value():
    assert collation_key("Tab 10") < collation_key("Tab 2")
    assert collation_key("Tab 2", natural=True) < collation_key("Tab 10", natural=True)


def test_collation_key_can_drop_punctuation():
    assert collation_key("a-b.c", remove_punctuation=True) == "abc"


def test_compare_tabs_uses_host_then_title():
    a = tab(1, "https://www.alpha.com/z", "Zed")
    b = tab(2, "https://beta.com/a", "Apple")
    c = tab(3, "https://docs.alpha.com", "apple")

    assert compare_tabs(a, b) == -1
    assert compare_tabs(b, a) == 1
    assert compare_tabs(c, a) == -1
    assert compare_tabs(tab(4, "https://x.com", "Résumé"), tab(5, "https://x.com", "resume")) == 0


def test_compare_titles_is_case_insensitive():
    assert compare_titles("work", "Work") == 0
    assert compare_titles("Alpha", "beta") == -1
    assert compare_titles(None, "a") == -1


def test_sort_tabs_is_stable_for_equal_keys():
    tabs = [
        tab(1, "https://b.com", "Same"),
        tab(2, "https://a.com", "Same"),
        tab(3, "https://b.com", "same"),
        tab(4, "https://a.com", "SAME"),
    ]

    assert [t.id for t in sort_tabs(tabs)] == [2, 4, 1, 3]


def test_sort_tabs_treats_missing_title_as_empty():
    tabs = [tab(1, "https://a.com", "B"), tab(2, "https://a.com", "")]

    assert [t.id for t in sort_tabs(tabs)] == [2, 1]
