"""Duplicate tab detection."""

from __future__ import annotations

import urllib.parse
from typing import Dict, Iterable, List, Optional, Set

from .models import TabRecord


def normalize_for_dedupe(url: Optional[str]) -> Optional[str]:
    """Drop the fragment; ``None`` when the URL has nothing to compare."""
    url = str(url or "").strip()
    if not url:
        return None
    try:
        parsed = urllib.parse.urlsplit(url)
    except ValueError:
        return None
    if not parsed.scheme:
        return None
    return urllib.parse.urlunsplit(parsed._replace(fragment=""))


def _survivor(members: List[TabRecord]) -> TabRecord:
    for tab in members:
        if tab.active:
            return tab
    return min(members, key=lambda t: t.index)


def plan(tabs: Iterable[TabRecord]) -> Set[int]:
    """Return ids of tabs to close so each URL stays open once.

    Pinned tabs are never selected, even when they duplicate each other; a
    pinned copy makes every unpinned copy redundant. Otherwise the active tab
    survives, or failing that the leftmost one.
    """
    by_url: Dict[str, List[TabRecord]] = {}
    for tab in tabs:
        key = normalize_for_dedupe(tab.url)
        if key is None:
            continue
        by_url.setdefault(key, []).append(tab)

    to_close: Set[int] = set()
    for members in by_url.values():
        if len(members) < 2:
            continue
        if any(tab.pinned for tab in members):
            to_close.update(tab.id for tab in members if not tab.pinned)
            continue
        keep = _survivor(members)
        to_close.update(tab.id for tab in members if tab.id != keep.id)
    return to_close
