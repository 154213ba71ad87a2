"""Effective-domain resolution for tab URLs."""

from __future__ import annotations

import re
import urllib.parse
from typing import Dict, Iterable, Optional

from .taxonomy import LOCAL_HOSTS, MULTI_PART_SUFFIXES, WWW_PREFIX

_IPV4_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")


def is_ip_or_localhost(host: str) -> bool:
    host = (host or "").strip().lower()
    return bool(_IPV4_RE.match(host)) or host in LOCAL_HOSTS


def _hostname_of(url: str) -> Optional[str]:
    try:
        parsed = urllib.parse.urlsplit(url)
        host = parsed.hostname
    except ValueError:
        return None
    return host or None


def resolve(
    url: Optional[str],
    *,
    suffixes: Iterable[str] = MULTI_PART_SUFFIXES,
    strip_www: bool = True,
) -> str:
    """Map a URL to the domain key tabs are grouped and sorted by.

    ``https://mail.google.com`` and ``https://www.google.com`` both resolve to
    ``google.com``; hosts under a known two-label suffix keep three labels
    (``bbc.co.uk``). Values without a parseable host fall back to the
    lowercased raw string so degenerate tabs still get a stable key.
    """
    raw = str(url or "")
    host = _hostname_of(raw.strip())
    if host is None:
        return raw.lower()

    host = host.lower()
    if is_ip_or_localhost(host):
        return host
    if strip_www and host.startswith(WWW_PREFIX):
        host = host[len(WWW_PREFIX):]

    labels = host.split(".")
    for suffix in suffixes:
        suffix = str(suffix).strip().lower()
        if suffix and host.endswith("." + suffix):
            return ".".join(labels[-3:])
    if len(labels) < 2:
        return host
    return ".".join(labels[-2:])


class EffectiveHosts:
    """Memoized ``resolve`` for the lifetime of one engine invocation."""

    def __init__(
        self,
        suffixes: Iterable[str] = MULTI_PART_SUFFIXES,
        strip_www: bool = True,
    ):
        self.suffixes = tuple(suffixes)
        self.strip_www = strip_www
        self._cache: Dict[str, str] = {}

    def __call__(self, url: Optional[str]) -> str:
        key = str(url or "")
        host = self._cache.get(key)
        if host is None:
            host = resolve(key, suffixes=self.suffixes, strip_www=self.strip_www)
            self._cache[key] = host
        return host

    @classmethod
    def from_cfg(cls, cfg: dict) -> "EffectiveHosts":
        return cls(
            suffixes=cfg.get("multiPartSuffixes", MULTI_PART_SUFFIXES),
            strip_www=bool(cfg.get("stripWww", True)),
        )
