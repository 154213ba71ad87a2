"""Shared tab ordering semantics used by the engine and the CLI."""

from .collation import collation_key, compare_tabs, compare_titles, sort_tabs, tab_sort_key
from .hostnames import EffectiveHosts, is_ip_or_localhost, resolve
from .taxonomy import LOCAL_HOSTS, MULTI_PART_SUFFIXES, WWW_PREFIX

__all__ = [
    "collation_key",
    "compare_tabs",
    "compare_titles",
    "sort_tabs",
    "tab_sort_key",
    "EffectiveHosts",
    "is_ip_or_localhost",
    "resolve",
    "LOCAL_HOSTS",
    "MULTI_PART_SUFFIXES",
    "WWW_PREFIX",
]
