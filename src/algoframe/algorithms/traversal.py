"""Breadth-first and depth-first traversal.

Traversal ignores edge direction and works on the symmetric adjacency map.
Nodes the traversal never reaches get ``-1`` for their level, visit order,
discovery time or depth, and ``0`` for the matching percentage.
"""

from __future__ import annotations

import networkx as nx

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import node_metric_styles, node_option
from algoframe.converters import map_to_graph, to_adjacency_map
from algoframe.registry import register

UNREACHED = -1


class _TraversalAlgorithm(Algorithm):
    options_schema = {
        "source": node_option("Start Node", "Node to start from (defaults to the first node)"),
    }

    def traversal_graph(self) -> nx.Graph:
        return map_to_graph(to_adjacency_map(self.graph))


@register
class BFSAlgorithm(_TraversalAlgorithm):
    """Level of every node in a breadth-first search from ``source``."""

    type = "bfs"
    suggested_styles = node_metric_styles(
        "bfs",
        "levelPct",
        name="BFS Level",
        description="Distance in hops from the start node",
        palette="viridis",
        with_size=False,
    )

    def execute(self) -> None:
        source = self.resolve_node_option("source")
        g = self.traversal_graph()
        order = [source] + [v for _, v in nx.bfs_edges(g, source)]
        levels = nx.single_source_shortest_path_length(g, source)
        max_level = max(levels.values())
        visit_index = {node_id: index for index, node_id in enumerate(order)}

        for node_id in self.node_ids():
            level = levels.get(node_id, UNREACHED)
            if level == UNREACHED or max_level == 0:
                level_pct = 0.0
            else:
                level_pct = level / max_level
            self.add_node_result(node_id, "level", level)
            self.add_node_result(node_id, "levelPct", level_pct)
            self.add_node_result(node_id, "visitOrder", visit_index.get(node_id, UNREACHED))

        self.add_graph_result("source", source)
        self.add_graph_result("maxLevel", max_level)
        self.add_graph_result("visitedCount", len(order))


@register
class DFSAlgorithm(_TraversalAlgorithm):
    """Discovery time and tree depth in a depth-first search from ``source``."""

    type = "dfs"
    suggested_styles = node_metric_styles(
        "dfs",
        "discoveryTimePct",
        name="DFS Discovery",
        description="Order in which a depth-first search reaches each node",
        palette="plasma",
        with_size=False,
    )

    def execute(self) -> None:
        source = self.resolve_node_option("source")
        g = self.traversal_graph()
        order = list(nx.dfs_preorder_nodes(g, source))
        predecessors = nx.dfs_predecessors(g, source)
        depths = {source: 0}
        for node_id in order[1:]:
            depths[node_id] = depths[predecessors[node_id]] + 1
        discovery = {node_id: index for index, node_id in enumerate(order)}
        last = len(order) - 1
        max_depth = max(depths.values())

        for node_id in self.node_ids():
            time = discovery.get(node_id, UNREACHED)
            pct = time / last if time != UNREACHED and last > 0 else 0.0
            self.add_node_result(node_id, "discoveryTime", time)
            self.add_node_result(node_id, "discoveryTimePct", pct)
            self.add_node_result(node_id, "depth", depths.get(node_id, UNREACHED))

        self.add_graph_result("source", source)
        self.add_graph_result("maxDepth", max_depth)
        self.add_graph_result("visitedCount", len(order))


__all__ = ["UNREACHED", "BFSAlgorithm", "DFSAlgorithm"]
