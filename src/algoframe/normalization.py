"""Numeric and community post-processing shared by the algorithm adapters."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
import math
import numbers
from typing import Any, Optional


def _finite(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value_f = float(value)
    if not math.isfinite(value_f):
        return None
    return value_f


def min_max_normalize(
    scores: Mapping[Hashable, Any],
    keys: Optional[Iterable[Hashable]] = None,
) -> dict[Hashable, float]:
    """Scale scores linearly to [0, 1].

    The range is taken over finite scores only. Keys listed in ``keys`` but
    missing from ``scores``, and non-finite scores, map to 0.0. When every
    finite score is equal the whole result is 0.0.
    """
    keys = list(scores.keys()) if keys is None else list(keys)
    finite = [v for v in (_finite(scores.get(k)) for k in keys) if v is not None]
    if not finite:
        return {k: 0.0 for k in keys}
    low = min(finite)
    span = max(finite) - low
    normalized: dict[Hashable, float] = {}
    for key in keys:
        value = _finite(scores.get(key))
        if value is None or span <= 0:
            normalized[key] = 0.0
        else:
            normalized[key] = (value - low) / span
    return normalized


def max_normalize(
    values: Mapping[Hashable, Any],
    keys: Optional[Iterable[Hashable]] = None,
) -> dict[Hashable, float]:
    """Divide by the largest finite value; used for counts and distances."""
    keys = list(values.keys()) if keys is None else list(keys)
    finite = [v for v in (_finite(values.get(k)) for k in keys) if v is not None]
    peak = max(finite, default=0.0)
    normalized: dict[Hashable, float] = {}
    for key in keys:
        value = _finite(values.get(key))
        if value is None or peak <= 0 or value < 0:
            normalized[key] = 0.0
        else:
            normalized[key] = value / peak
    return normalized


def _sort_key(value: Any) -> tuple[str, str]:
    # Mixed str/int ids must still sort deterministically.
    return (type(value).__name__, str(value))


def count_communities(community_map: Mapping[Hashable, Any]) -> int:
    return len(set(community_map.values()))


def communities_to_arrays(community_map: Mapping[Hashable, Any]) -> list[list[Hashable]]:
    """Group node ids by community id.

    Both the groups and their members are sorted, so the output does not
    depend on the iteration order of ``community_map``.
    """
    groups: dict[Any, list[Hashable]] = {}
    for node_id, community_id in community_map.items():
        groups.setdefault(community_id, []).append(node_id)
    ordered = [sorted(members, key=_sort_key) for members in groups.values()]
    ordered.sort(key=lambda members: (-len(members), [_sort_key(m) for m in members]))
    return ordered


def relabel_communities(
    groups: Iterable[Iterable[Hashable]],
    order: Sequence[Hashable],
) -> dict[Hashable, int]:
    """Assign dense community ids in order of first appearance in ``order``.

    Nodes from ``order`` that are in no group get their own singleton id.
    """
    membership: dict[Hashable, int] = {}
    for index, members in enumerate(groups):
        for member in members:
            membership[member] = index
    remap: dict[Any, int] = {}
    labels: dict[Hashable, int] = {}
    for node_id in order:
        group = membership.get(node_id, ("singleton", node_id))
        if group not in remap:
            remap[group] = len(remap)
        labels[node_id] = remap[group]
    return labels


__all__ = [
    "min_max_normalize",
    "max_normalize",
    "count_communities",
    "communities_to_arrays",
    "relabel_communities",
]
