"""Engine configuration and environment overrides."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from tabsort.tab_policy.taxonomy import MULTI_PART_SUFFIXES

APP_SUPPORT = Path("~/.config/tabsort").expanduser()
DEFAULT_CFG_PATH = Path(os.environ.get("TABSORT_CONFIG_PATH", str(APP_SUPPORT / "config.json"))).expanduser()

DEFAULT_CFG: Dict = {
    "multiPartSuffixes": list(MULTI_PART_SUFFIXES),
    "stripWww": True,
    "dedupe": True,
    "groups": True,
    "restoreGroupMetadata": True,
    "autoPlace": True,
    "collation": {
        "natural": False,
        "removePunctuation": False,
    },
    "verbose": False,
}

# Environment variable -> boolean config key.
ENV_FLAGS = {
    "TABSORT_DEDUPE": "dedupe",
    "TABSORT_GROUPS": "groups",
    "TABSORT_AUTOPLACE": "autoPlace",
    "TABSORT_VERBOSE": "verbose",
}

TRUTHY = {"1", "true", "yes", "on", "y"}


def _env_flag(name: str, default: bool = False, environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    value = env.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


def merge_cfg(payload_cfg: Dict | None, override_cfg: Dict | None) -> Dict:
    merged = dict(DEFAULT_CFG)
    merged["collation"] = dict(DEFAULT_CFG["collation"])
    for layer in (payload_cfg, override_cfg):
        if not layer:
            continue
        for key, value in layer.items():
            if key == "collation" and isinstance(value, dict):
                merged["collation"].update(value)
            else:
                merged[key] = value
    return merged


def load_cfg(p: Path) -> dict:
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object: {p}")
    return data


def apply_env(cfg: Dict, environ: Optional[Mapping[str, str]] = None) -> Dict:
    out = dict(cfg)
    for name, key in ENV_FLAGS.items():
        out[key] = _env_flag(name, default=bool(out.get(key)), environ=environ)
    return out


def resolve_cfg(
    path: Optional[Path] = None,
    override_cfg: Dict | None = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict:
    """Defaults, then the config file (if any), then env flags, then overrides."""
    file_cfg = None
    if path is not None:
        file_cfg = load_cfg(path)
    elif DEFAULT_CFG_PATH.exists():
        file_cfg = load_cfg(DEFAULT_CFG_PATH)
    merged = apply_env(merge_cfg(file_cfg, None), environ=environ)
    return merge_cfg(merged, override_cfg)


def collation_options(cfg: Dict) -> Dict:
    collation = cfg.get("collation") or {}
    return {
        "natural": bool(collation.get("natural", False)),
        "remove_punctuation": bool(collation.get("removePunctuation", False)),
    }
