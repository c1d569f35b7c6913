"""Result tree helpers.

Results hang off nodes, edges and the graph as nested dicts
``tree[namespace][type][key] = value``. Serialized entities expose the tree
under ``algorithmResults``, so a styling layer can address any value as
``algorithmResults.<namespace>.<type>.<key>``.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
import copy
from typing import Any, Optional

RESULTS_FIELD = "algorithmResults"
PATH_SEPARATOR = "."


def result_path(namespace: str, algorithm_type: str, key: str) -> str:
    return PATH_SEPARATOR.join((RESULTS_FIELD, namespace, algorithm_type, key))


def split_result_path(path: str) -> tuple[str, str, str]:
    """Split ``algorithmResults.<ns>.<type>.<key>``; the key may contain dots."""
    parts = path.split(PATH_SEPARATOR, 3)
    if len(parts) != 4 or parts[0] != RESULTS_FIELD or not all(parts[1:]):
        raise ValueError(
            f"Result path must look like '{RESULTS_FIELD}.<namespace>.<type>.<key>', got {path!r}."
        )
    return parts[1], parts[2], parts[3]


def set_result(
    tree: MutableMapping[str, Any],
    namespace: str,
    algorithm_type: str,
    key: str,
    value: Any,
) -> None:
    tree.setdefault(namespace, {}).setdefault(algorithm_type, {})[key] = value


def get_result(
    tree: Mapping[str, Any],
    namespace: str,
    algorithm_type: str,
    key: str,
    default: Any = None,
) -> Any:
    subtree = get_subtree(tree, namespace, algorithm_type)
    if subtree is None:
        return default
    return subtree.get(key, default)


def get_subtree(
    tree: Mapping[str, Any],
    namespace: str,
    algorithm_type: str,
) -> Optional[Mapping[str, Any]]:
    bucket = tree.get(namespace)
    if not isinstance(bucket, Mapping):
        return None
    subtree = bucket.get(algorithm_type)
    if not isinstance(subtree, Mapping):
        return None
    return subtree


def clear_results(
    tree: MutableMapping[str, Any],
    namespace: str,
    algorithm_type: str,
) -> bool:
    """Drop one algorithm's subtree; returns True when something was removed."""
    bucket = tree.get(namespace)
    if not isinstance(bucket, MutableMapping) or algorithm_type not in bucket:
        return False
    del bucket[algorithm_type]
    if not bucket:
        del tree[namespace]
    return True


def _entity_tree(entity: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(entity, Mapping):
        tree = entity.get(RESULTS_FIELD)
    else:
        tree = getattr(entity, "algorithm_results", None)
    return tree if isinstance(tree, Mapping) else None


def lookup_path(entity: Any, path: str, default: Any = None) -> Any:
    """Resolve a dotted result path on a node/edge record or its dict form."""
    namespace, algorithm_type, key = split_result_path(path)
    tree = _entity_tree(entity)
    if tree is None:
        return default
    return get_result(tree, namespace, algorithm_type, key, default)


def collect_results(
    graph: Any,
    *,
    namespace: Optional[str] = None,
    algorithm_type: Optional[str] = None,
) -> dict[str, Any]:
    """Assemble ``{"node": ..., "edge": ..., "graph": ...}`` from a host graph.

    Every node and edge currently in the graph appears, keyed by node id and
    edge key. With ``namespace`` and ``algorithm_type`` set, each tree is
    projected down to that algorithm's subtree.
    """
    data_manager = graph.data_manager

    def _project(tree: Mapping[str, Any]) -> Any:
        if namespace is None or algorithm_type is None:
            return copy.deepcopy(dict(tree))
        subtree = get_subtree(tree, namespace, algorithm_type)
        return copy.deepcopy(dict(subtree)) if subtree is not None else {}

    nodes = {node.id: _project(node.algorithm_results) for node in data_manager.nodes.values()}
    edges = {key: _project(edge.algorithm_results) for key, edge in data_manager.edges.items()}
    return {
        "node": nodes,
        "edge": edges,
        "graph": _project(data_manager.graph_results or {}),
    }


__all__ = [
    "RESULTS_FIELD",
    "PATH_SEPARATOR",
    "result_path",
    "split_result_path",
    "set_result",
    "get_result",
    "get_subtree",
    "clear_results",
    "lookup_path",
    "collect_results",
]
