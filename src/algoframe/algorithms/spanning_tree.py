"""Minimum spanning trees (forests on disconnected graphs)."""

from __future__ import annotations

import networkx as nx

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import path_styles
from algoframe.converters import HOST_KEY, WEIGHT
from algoframe.registry import register


class _SpanningTreeAlgorithm(Algorithm):
    method = "kruskal"

    def execute(self) -> None:
        # Undirected multigraph: parallel edges compete, no reverse copies.
        g = self.algorithm_graph(directed=False, add_reverse_edges=False)
        tree_edges = list(
            nx.minimum_spanning_edges(g, algorithm=self.method, weight=WEIGHT, keys=True, data=True)
        )
        in_tree = {data[HOST_KEY] for _, _, _, data in tree_edges}
        total = sum(data[WEIGHT] for _, _, _, data in tree_edges)

        for key, edge in self.edge_items():
            self.add_edge_result(edge, "inMST", key in in_tree)
        touched = {n for u, v, _, _ in tree_edges for n in (u, v)}
        for node_id in self.node_ids():
            self.add_node_result(node_id, "inMST", node_id in touched)

        self.add_graph_result("totalWeight", float(total))
        self.add_graph_result("edgeCount", len(tree_edges))
        self.add_graph_result("componentCount", nx.number_connected_components(g))


@register
class KruskalAlgorithm(_SpanningTreeAlgorithm):
    type = "kruskal"
    method = "kruskal"
    suggested_styles = path_styles(
        "kruskal",
        name="Kruskal MST",
        node_key="inMST",
        edge_key="inMST",
        description="Minimum spanning tree edges found by Kruskal's algorithm",
        category="hierarchy",
    )


@register
class PrimAlgorithm(_SpanningTreeAlgorithm):
    type = "prim"
    method = "prim"
    suggested_styles = path_styles(
        "prim",
        name="Prim MST",
        node_key="inMST",
        edge_key="inMST",
        description="Minimum spanning tree edges grown by Prim's algorithm",
        category="hierarchy",
    )


__all__ = ["KruskalAlgorithm", "PrimAlgorithm"]
