"""Connected components.

Component ids are dense and follow the order nodes were added to the graph,
so the node added first is always in component 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

import networkx as nx

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import grouping_styles
from algoframe.normalization import relabel_communities
from algoframe.registry import register


class _ComponentAlgorithm(Algorithm):
    def components(self) -> Iterable[Set]:
        raise NotImplementedError

    def execute(self) -> None:
        groups = [set(group) for group in self.components()]
        labels = relabel_communities(groups, self.node_ids())
        sizes = {member: len(group) for group in groups for member in group}
        for node_id in self.node_ids():
            self.add_node_result(node_id, "componentId", labels[node_id])
            self.add_node_result(node_id, "componentSize", sizes.get(node_id, 1))
        self.add_graph_result("componentCount", len(set(labels.values())))
        self.add_graph_result("largestComponentSize", max(sizes.values(), default=1))


@register
class ConnectedComponentsAlgorithm(_ComponentAlgorithm):
    """Components of the graph with edge direction ignored."""

    type = "connected-components"
    suggested_styles = grouping_styles(
        "connected-components",
        name="Components",
        key="componentId",
        description="One color per connected component",
    )

    def components(self) -> Iterable[Set]:
        return nx.connected_components(self.simple_graph(directed=False))


@register
class StronglyConnectedComponentsAlgorithm(_ComponentAlgorithm):
    """Sets of nodes that can all reach each other along edge direction."""

    type = "strongly-connected-components"
    suggested_styles = grouping_styles(
        "strongly-connected-components",
        name="Strong Components",
        key="componentId",
        description="One color per strongly connected component",
    )

    def components(self) -> Iterable[Set]:
        return nx.strongly_connected_components(self.simple_graph(directed=True))


__all__ = ["ConnectedComponentsAlgorithm", "StronglyConnectedComponentsAlgorithm"]
