"""Case- and accent-insensitive collation for ordering tabs."""

from __future__ import annotations

import re
import string
import unicodedata
from typing import Callable, Iterable, List, Optional, Tuple

from .hostnames import resolve

_DIGITS_RE = re.compile(r"(\d+)")
_PUNCT_TABLE = str.maketrans("", "", string.punctuation)


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collation_key(
    text: Optional[str],
    *,
    natural: bool = False,
    remove_punctuation: bool = False,
):
    """Return a sort key comparing text at base-letter strength.

    With ``natural`` the key is a tuple in which digit runs compare by value,
    so "Tab 2" sorts before "Tab 10".
    """
    value = _strip_accents(str(text or "")).casefold()
    if remove_punctuation:
        value = value.translate(_PUNCT_TABLE)
    if not natural:
        return value
    parts = []
    for chunk in _DIGITS_RE.split(value):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk))
    return tuple(parts)


def tab_sort_key(
    tab,
    *,
    hosts: Callable[[Optional[str]], str] = resolve,
    natural: bool = False,
    remove_punctuation: bool = False,
) -> Tuple:
    opts = {"natural": natural, "remove_punctuation": remove_punctuation}
    return (
        collation_key(hosts(getattr(tab, "url", "") or ""), **opts),
        collation_key(getattr(tab, "title", "") or "", **opts),
    )


def compare_tabs(a, b, **kwargs) -> int:
    """Three-way compare by (effective host, title)."""
    key_a = tab_sort_key(a, **kwargs)
    key_b = tab_sort_key(b, **kwargs)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def compare_titles(a: Optional[str], b: Optional[str], **kwargs) -> int:
    key_a = collation_key(a, **kwargs)
    key_b = collation_key(b, **kwargs)
    return (key_a > key_b) - (key_a < key_b)


def sort_tabs(tabs: Iterable, **kwargs) -> List:
    """Stable sort; tabs with equal host and title keep their input order."""
    return sorted(tabs, key=lambda tab: tab_sort_key(tab, **kwargs))
