"""Merging of layered config dictionaries."""

from __future__ import annotations

from functools import reduce
from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated with ``override``; neither input is mutated.

    Sections (nested dicts) merge key by key. A ``None`` in ``override``
    leaves the base value alone. Anything else, lists included, replaces
    the base value outright, so a workspace ``ignore_patterns`` list
    supersedes the user's instead of extending it.
    """
    merged = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Fold config layers together, later layers winning."""
    return reduce(deep_merge, (c for c in configs if c), {})
