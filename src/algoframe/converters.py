"""Reshape a host graph into the inputs the networkx algorithms expect.

Three shapes are produced:

* a networkx graph object (:func:`to_algorithm_graph`), directed or not,
  optionally with a synthesized reverse edge per original edge;
* a symmetric adjacency map ``{node: {neighbor: weight}}``
  (:func:`to_adjacency_map`);
* a capacity map of the same shape for flow and cut algorithms
  (:func:`to_capacity_map`), where the caller decides about reverse edges.

Edge weights are resolved by :func:`resolve_edge_weight`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import math
import numbers
from typing import Any, Optional, Union

import networkx as nx

DEFAULT_WEIGHT_ATTRIBUTE = "weight"
DEFAULT_CAPACITY_ATTRIBUTES = ("capacity", "value")
DEFAULT_WEIGHT = 1.0

WEIGHT = "weight"
HOST_KEY = "host_key"
SYNTHETIC = "synthetic"

AdjacencyMap = dict[Any, dict[Any, float]]
AttributeNames = Union[str, Sequence[str], None]


def _numeric(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value_f = float(value)
    if math.isnan(value_f):
        return None
    return value_f


def _attribute_names(attributes: AttributeNames, fallback: Sequence[str]) -> tuple[str, ...]:
    if attributes is None:
        return tuple(fallback)
    if isinstance(attributes, str):
        return (attributes,)
    return tuple(attributes)


def resolve_edge_weight(
    edge: Any,
    attributes: AttributeNames = None,
    *,
    default: float = DEFAULT_WEIGHT,
) -> float:
    """Return the numeric weight of ``edge``.

    For each attribute name in turn the edge's ``data`` payload is checked,
    then an attribute of the same name on the edge record itself. Without an
    explicit name the ``weight`` attribute is used. Falls back to ``default``.
    """
    data = getattr(edge, "data", None)
    for name in _attribute_names(attributes, (DEFAULT_WEIGHT_ATTRIBUTE,)):
        if isinstance(data, Mapping):
            value = _numeric(data.get(name))
            if value is not None:
                return value
        value = _numeric(getattr(edge, name, None))
        if value is not None:
            return value
    return default


def _node_ids(graph: Any) -> list[Any]:
    return [node.id for node in graph.data_manager.nodes.values()]


def _edges(graph: Any) -> list[tuple[str, Any]]:
    return list(graph.data_manager.edges.items())


def to_algorithm_graph(
    graph: Any,
    *,
    directed: bool = False,
    allow_parallel_edges: bool = True,
    add_reverse_edges: bool = True,
    weight_attribute: AttributeNames = None,
) -> nx.Graph:
    """Build a networkx graph from the host graph.

    The result is directed when ``directed or add_reverse_edges``. For a
    logically undirected graph stored as a directed one, each edge
    ``(a, b, w)`` is inserted as ``(a, b, w)`` and ``(b, a, w)``; self loops
    are inserted once. ``directed=False, add_reverse_edges=False`` yields a
    plain undirected graph with every edge inserted exactly once.

    Every networkx edge carries ``weight`` and the originating host edge key
    under ``host_key``. Without parallel edges the last host edge between a
    pair wins.
    """
    internal_directed = directed or add_reverse_edges
    if allow_parallel_edges:
        result = nx.MultiDiGraph() if internal_directed else nx.MultiGraph()
    else:
        result = nx.DiGraph() if internal_directed else nx.Graph()

    result.add_nodes_from(_node_ids(graph))
    synthesize_reverse = internal_directed and not directed
    for key, edge in _edges(graph):
        weight = resolve_edge_weight(edge, weight_attribute)
        attrs = {WEIGHT: weight, HOST_KEY: key, SYNTHETIC: False}
        if allow_parallel_edges:
            result.add_edge(edge.src_id, edge.dst_id, key=key, **attrs)
        else:
            result.add_edge(edge.src_id, edge.dst_id, **attrs)
        if synthesize_reverse and edge.src_id != edge.dst_id:
            reverse = dict(attrs, **{SYNTHETIC: True})
            if allow_parallel_edges:
                result.add_edge(edge.dst_id, edge.src_id, key=f"{key}~reverse", **reverse)
            else:
                result.add_edge(edge.dst_id, edge.src_id, **reverse)
    return result


def to_adjacency_map(
    graph: Any,
    *,
    weight_attribute: AttributeNames = None,
) -> AdjacencyMap:
    """Symmetric ``{node: {neighbor: weight}}``, isolated nodes included."""
    adjacency: AdjacencyMap = {node_id: {} for node_id in _node_ids(graph)}
    for _, edge in _edges(graph):
        weight = resolve_edge_weight(edge, weight_attribute)
        adjacency.setdefault(edge.src_id, {})[edge.dst_id] = weight
        adjacency.setdefault(edge.dst_id, {})[edge.src_id] = weight
    return adjacency


def to_capacity_map(
    graph: Any,
    *,
    capacity_attribute: AttributeNames = None,
    add_reverse: bool = False,
) -> AdjacencyMap:
    """Capacity map for flow/cut algorithms.

    Capacities come from ``capacity``, then ``value``, then 1. Parallel edges
    add up. With ``add_reverse`` each edge also contributes its capacity in
    the opposite direction.
    """
    capacities: AdjacencyMap = {node_id: {} for node_id in _node_ids(graph)}
    for _, edge in _edges(graph):
        names = _attribute_names(capacity_attribute, DEFAULT_CAPACITY_ATTRIBUTES)
        capacity = resolve_edge_weight(edge, names)
        forward = capacities.setdefault(edge.src_id, {})
        forward[edge.dst_id] = forward.get(edge.dst_id, 0.0) + capacity
        if add_reverse and edge.src_id != edge.dst_id:
            backward = capacities.setdefault(edge.dst_id, {})
            backward[edge.src_id] = backward.get(edge.src_id, 0.0) + capacity
    return capacities


def map_to_graph(
    adjacency: Mapping[Any, Mapping[Any, Any]],
    *,
    directed: bool = False,
    attribute: str = WEIGHT,
) -> nx.Graph:
    """Inverse of the map builders; values land in ``attribute`` on each edge."""
    result = nx.DiGraph() if directed else nx.Graph()
    result.add_nodes_from(adjacency.keys())
    for src, neighbors in adjacency.items():
        for dst, value in neighbors.items():
            result.add_edge(src, dst, **{attribute: value})
    return result


__all__ = [
    "DEFAULT_WEIGHT_ATTRIBUTE",
    "DEFAULT_CAPACITY_ATTRIBUTES",
    "DEFAULT_WEIGHT",
    "WEIGHT",
    "HOST_KEY",
    "SYNTHETIC",
    "AdjacencyMap",
    "resolve_edge_weight",
    "to_algorithm_graph",
    "to_adjacency_map",
    "to_capacity_map",
    "map_to_graph",
]
