"""In-memory host graph the algorithms read from and write results into.

Algorithms only rely on ``graph.data_manager`` exposing ``nodes``
(id -> record with ``id`` and ``algorithm_results``), ``edges``
(key -> record with ``src_id``, ``dst_id``, ``data`` and ``algorithm_results``)
and a mutable ``graph_results`` mapping. Any object with that shape can be
analyzed; :class:`Graph` is the implementation shipped with the package.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import copy
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from algoframe.errors import NodeNotFoundError, ValidationError
from algoframe.results import RESULTS_FIELD

NodeId = Union[str, int]

_RESERVED_NODE_FIELDS = ("id", RESULTS_FIELD)
_RESERVED_EDGE_FIELDS = ("source", "target", "key", RESULTS_FIELD)


def _check_node_id(node_id: Any) -> NodeId:
    if isinstance(node_id, bool) or not isinstance(node_id, (str, int)):
        raise ValidationError(
            f"Node id must be a string or integer, got {node_id!r}.",
            context={"node_id": repr(node_id)},
        )
    return node_id


def edge_key(src_id: NodeId, dst_id: NodeId) -> str:
    return f"{src_id}:{dst_id}"


@dataclass
class Node:
    id: NodeId
    data: dict[str, Any] = field(default_factory=dict)
    algorithm_results: dict[str, Any] = field(default_factory=dict)

    def to_dict(self, *, include_results: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {"id": self.id}
        payload.update(copy.deepcopy(self.data))
        if include_results and self.algorithm_results:
            payload[RESULTS_FIELD] = copy.deepcopy(self.algorithm_results)
        return payload


@dataclass
class Edge:
    src_id: NodeId
    dst_id: NodeId
    data: dict[str, Any] = field(default_factory=dict)
    algorithm_results: dict[str, Any] = field(default_factory=dict)
    key: str = ""

    def __post_init__(self) -> None:
        if not self.key:
            self.key = edge_key(self.src_id, self.dst_id)

    def to_dict(self, *, include_results: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {"source": self.src_id, "target": self.dst_id}
        payload.update(copy.deepcopy(self.data))
        if include_results and self.algorithm_results:
            payload[RESULTS_FIELD] = copy.deepcopy(self.algorithm_results)
        return payload


@dataclass
class DataManager:
    nodes: dict[NodeId, Node] = field(default_factory=dict)
    edges: dict[str, Edge] = field(default_factory=dict)
    graph_results: dict[str, Any] = field(default_factory=dict)


class Graph:
    """Node/edge container with per-entity result trees.

    ``directed`` records how the data should be read by default; algorithms
    still choose their own representation through the converters.
    """

    def __init__(self, *, directed: bool = False) -> None:
        self.directed = directed
        self._data_manager = DataManager()

    @property
    def data_manager(self) -> DataManager:
        return self._data_manager

    @property
    def nodes(self) -> Iterator[Node]:
        return iter(self._data_manager.nodes.values())

    @property
    def edges(self) -> Iterator[Edge]:
        return iter(self._data_manager.edges.values())

    @property
    def graph_results(self) -> dict[str, Any]:
        return self._data_manager.graph_results

    def __len__(self) -> int:
        return len(self._data_manager.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._data_manager.nodes

    def node_count(self) -> int:
        return len(self._data_manager.nodes)

    def edge_count(self) -> int:
        return len(self._data_manager.edges)

    def add_node(self, node_id: NodeId, data: Optional[Mapping[str, Any]] = None) -> Node:
        node_id = _check_node_id(node_id)
        nodes = self._data_manager.nodes
        node = nodes.get(node_id)
        if node is None:
            node = Node(node_id, dict(data or {}))
            nodes[node_id] = node
        elif data:
            node.data.update(data)
        return node

    def add_nodes(self, node_ids: Iterable[NodeId]) -> None:
        for node_id in node_ids:
            self.add_node(node_id)

    def get_node(self, node_id: NodeId) -> Node:
        try:
            return self._data_manager.nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(
                f"Node {node_id!r} is not in the graph.",
                context={"node_id": node_id},
            ) from None

    def remove_node(self, node_id: NodeId) -> None:
        self.get_node(node_id)
        del self._data_manager.nodes[node_id]
        edges = self._data_manager.edges
        for key in [k for k, e in edges.items() if node_id in (e.src_id, e.dst_id)]:
            del edges[key]

    def add_edge(
        self,
        src_id: NodeId,
        dst_id: NodeId,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Edge:
        """Add an edge, creating missing endpoints.

        Parallel edges are kept; the second ``A:B`` edge is stored as
        ``A:B#1`` and so on.
        """
        self.add_node(src_id)
        self.add_node(dst_id)
        edges = self._data_manager.edges
        key = edge_key(src_id, dst_id)
        suffix = 0
        while key in edges:
            suffix += 1
            key = f"{edge_key(src_id, dst_id)}#{suffix}"
        edge = Edge(src_id, dst_id, dict(data or {}), key=key)
        edges[key] = edge
        return edge

    def add_edges(self, pairs: Iterable[tuple[Any, ...]]) -> None:
        for pair in pairs:
            if len(pair) == 2:
                self.add_edge(pair[0], pair[1])
            elif len(pair) == 3:
                data = pair[2] if isinstance(pair[2], Mapping) else {"weight": pair[2]}
                self.add_edge(pair[0], pair[1], data)
            else:
                raise ValidationError(f"Edge tuple must have 2 or 3 items, got {pair!r}.")

    def get_edge(self, key: str) -> Edge:
        try:
            return self._data_manager.edges[key]
        except KeyError:
            raise ValidationError(f"Edge {key!r} is not in the graph.") from None

    def find_edges(self, src_id: NodeId, dst_id: NodeId) -> list[Edge]:
        return [e for e in self.edges if e.src_id == src_id and e.dst_id == dst_id]

    @classmethod
    def from_edges(
        cls,
        pairs: Iterable[tuple[Any, ...]],
        *,
        directed: bool = False,
        nodes: Optional[Iterable[NodeId]] = None,
    ) -> "Graph":
        graph = cls(directed=directed)
        if nodes is not None:
            graph.add_nodes(nodes)
        graph.add_edges(pairs)
        return graph

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Graph":
        """Load node-link data (``nodes`` plus ``links`` or ``edges``)."""
        if not isinstance(payload, Mapping):
            raise ValidationError("Graph payload must be a mapping.")
        graph = cls(directed=bool(payload.get("directed", False)))
        raw_nodes = payload.get("nodes") or []
        raw_edges = payload.get("links")
        if raw_edges is None:
            raw_edges = payload.get("edges") or []
        for entry in raw_nodes:
            if isinstance(entry, Mapping):
                if "id" not in entry:
                    raise ValidationError(f"Node entry is missing 'id': {dict(entry)!r}.")
                data = {k: v for k, v in entry.items() if k not in _RESERVED_NODE_FIELDS}
                node = graph.add_node(entry["id"], data)
                if isinstance(entry.get(RESULTS_FIELD), Mapping):
                    node.algorithm_results = copy.deepcopy(dict(entry[RESULTS_FIELD]))
            else:
                graph.add_node(entry)
        for entry in raw_edges:
            if not isinstance(entry, Mapping) or "source" not in entry or "target" not in entry:
                raise ValidationError(f"Edge entry needs 'source' and 'target': {entry!r}.")
            data = {k: v for k, v in entry.items() if k not in _RESERVED_EDGE_FIELDS}
            edge = graph.add_edge(entry["source"], entry["target"], data)
            if isinstance(entry.get(RESULTS_FIELD), Mapping):
                edge.algorithm_results = copy.deepcopy(dict(entry[RESULTS_FIELD]))
        if isinstance(payload.get("graphResults"), Mapping):
            graph.graph_results.update(copy.deepcopy(dict(payload["graphResults"])))
        return graph

    def to_dict(self, *, include_results: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "directed": self.directed,
            "nodes": [n.to_dict(include_results=include_results) for n in self.nodes],
            "links": [e.to_dict(include_results=include_results) for e in self.edges],
        }
        if include_results and self.graph_results:
            payload["graphResults"] = copy.deepcopy(self.graph_results)
        return payload


__all__ = ["NodeId", "Node", "Edge", "DataManager", "Graph", "edge_key"]
