"""Maximum bipartite matching."""

from __future__ import annotations

import networkx as nx
from networkx.algorithms import bipartite

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import path_styles
from algoframe.registry import register


@register
class BipartiteMatchingAlgorithm(Algorithm):
    """Hopcroft-Karp maximum matching.

    A graph that is not bipartite is reported with ``isBipartite = False``
    and no node or edge results.
    """

    type = "bipartite-matching"
    suggested_styles = path_styles(
        "bipartite-matching",
        name="Matching",
        node_key="isMatched",
        edge_key="inMatching",
        description="Edges of a maximum matching between the two sides",
        category="grouping",
    )

    def execute(self) -> None:
        g = self.simple_graph(directed=False)
        if not nx.is_bipartite(g):
            self.logger.info("Graph is not bipartite; no matching computed.")
            self.add_graph_result("isBipartite", False)
            self.add_graph_result("matchingSize", 0)
            return

        color = bipartite.color(g)
        top = {n for n, side in color.items() if side == 0}
        matching = bipartite.hopcroft_karp_matching(g, top_nodes=top)

        matched_pairs: set[frozenset] = set()
        for _, edge in self.edge_items():
            pair = frozenset((edge.src_id, edge.dst_id))
            if matching.get(edge.src_id) == edge.dst_id and pair not in matched_pairs:
                matched_pairs.add(pair)
                self.add_edge_result(edge, "inMatching", True)
            else:
                self.add_edge_result(edge, "inMatching", False)

        for node_id in self.node_ids():
            self.add_node_result(node_id, "isMatched", node_id in matching)
            self.add_node_result(node_id, "partition", color.get(node_id, 0))

        self.add_graph_result("isBipartite", True)
        self.add_graph_result("matchingSize", len(matching) // 2)
        self.add_graph_result("leftSize", len(top))
        self.add_graph_result("rightSize", g.number_of_nodes() - len(top))


__all__ = ["BipartiteMatchingAlgorithm"]
