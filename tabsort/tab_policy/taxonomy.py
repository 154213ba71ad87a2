"""Static host tables used for effective-domain resolution."""

from __future__ import annotations

# Approximation of the public suffix list: only these two-label suffixes keep
# a third label in the effective domain.
MULTI_PART_SUFFIXES = (
    "co.uk",
    "org.uk",
    "gov.uk",
    "ac.uk",
    "com.au",
    "net.au",
    "org.au",
    "co.jp",
)

LOCAL_HOSTS = {"localhost"}

WWW_PREFIX = "www."
