"""Configuration helpers for the resolution engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

FALLBACK_ALWAYS = "always"
FALLBACK_NEVER = "never"
FALLBACK_POLICIES = (FALLBACK_ALWAYS, FALLBACK_NEVER)

MODE_MARKUP = "markup"
MODE_SEARCH = "search"


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def link_patterns(self) -> List[str]:
        return list(self.raw.get("link_patterns", []))

    def min_match_score(self) -> float:
        return float(self.raw.get("min_match_score", 0.0))

    def fallback_policy(self, mode: str) -> str:
        policies = self.raw.get("fallback_policy", {})
        return policies.get(mode, DEFAULTS["fallback_policy"].get(mode, FALLBACK_NEVER))


DEFAULTS: Dict[str, Any] = {
    # Hrefs matching any of these are accepted as page links even when they
    # point outside the root page's host.
    "link_patterns": [
        r"notion\.so/",
        r"notion\.site/",
    ],
    "min_match_score": 0.0,
    "fallback_policy": {
        MODE_MARKUP: FALLBACK_ALWAYS,
        MODE_SEARCH: FALLBACK_NEVER,
    },
}


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        if not isinstance(user, dict):
            raise ValueError(f"Engine config {path} must be a mapping")
        merge_into(data, user)

    policies = data["fallback_policy"]
    if not isinstance(policies, dict):
        raise ValueError("fallback_policy must map each mode to a policy")
    for mode, policy in policies.items():
        if policy not in FALLBACK_POLICIES:
            raise ValueError(f"Unknown fallback policy {policy!r} for {mode} mode")

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
