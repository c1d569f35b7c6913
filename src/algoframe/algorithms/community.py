"""Community detection.

All detectors run on the undirected graph with each host edge inserted once,
since synthesized reverse edges would double-count every link. Community ids
are dense and numbered by first appearance in node insertion order.
"""

from __future__ import annotations

from collections.abc import Sequence, Set
import math

import networkx as nx

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import (
    grouping_styles,
    max_iterations_option,
    random_seed_option,
    tolerance_option,
)
from algoframe.normalization import relabel_communities
from algoframe.registry import register


def modularity(g: nx.Graph, communities: Sequence[Set], resolution: float = 1.0) -> float:
    """Modularity of a partition; 0.0 for graphs without edges."""
    if g.number_of_edges() == 0 or g.size(weight="weight") == 0:
        return 0.0
    value = nx.community.modularity(g, communities, weight="weight", resolution=resolution)
    return float(value) if math.isfinite(value) else 0.0


class _CommunityAlgorithm(Algorithm):
    def community_graph(self) -> nx.Graph:
        return self.simple_graph(directed=False)

    def detect(self, g: nx.Graph) -> list[Set]:
        raise NotImplementedError

    def resolution(self) -> float:
        return 1.0

    def execute(self) -> None:
        g = self.community_graph()
        if g.number_of_edges() == 0:
            communities: list[Set] = [{n} for n in g.nodes]
        else:
            communities = [set(c) for c in self.detect(g)]
        self.write_communities(g, communities)

    def write_communities(self, g: nx.Graph, communities: Sequence[Set]) -> None:
        ids = self.node_ids()
        labels = relabel_communities(communities, ids)
        for node_id in ids:
            self.add_node_result(node_id, "communityId", labels[node_id])
        self.add_graph_result("communityCount", len(set(labels.values())))
        self.add_graph_result("modularity", modularity(g, communities, self.resolution()))


@register
class LouvainAlgorithm(_CommunityAlgorithm):
    """Louvain modularity optimization."""

    type = "louvain"
    options_schema = {
        "resolution": {
            "type": "number",
            "default": 1.0,
            "label": "Resolution",
            "description": "Higher values favour smaller communities",
            "min": 0.1,
            "max": 5.0,
            "step": 0.1,
        },
        "maxIterations": max_iterations_option(),
        "tolerance": tolerance_option(1e-7),
        "randomSeed": random_seed_option(),
    }
    suggested_styles = grouping_styles(
        "louvain",
        name="Louvain",
        description="Communities found by greedy modularity optimization",
    )

    def resolution(self) -> float:
        return self.option("resolution")

    def detect(self, g: nx.Graph) -> list[Set]:
        return nx.community.louvain_communities(
            g,
            weight="weight",
            resolution=self.option("resolution"),
            threshold=self.option("tolerance"),
            max_level=self.option("maxIterations"),
            seed=self.option("randomSeed"),
        )


@register
class LabelPropagationAlgorithm(_CommunityAlgorithm):
    """Asynchronous label propagation."""

    type = "label-propagation"
    options_schema = {
        "randomSeed": random_seed_option(),
    }
    suggested_styles = grouping_styles(
        "label-propagation",
        name="Label Propagation",
        description="Communities formed by spreading majority labels",
        palette="tolVibrant",
    )

    def detect(self, g: nx.Graph) -> list[Set]:
        return list(
            nx.community.asyn_lpa_communities(g, weight="weight", seed=self.option("randomSeed"))
        )


@register
class GreedyModularityAlgorithm(_CommunityAlgorithm):
    """Clauset-Newman-Moore greedy modularity maximization."""

    type = "greedy-modularity"
    options_schema = {
        "resolution": {
            "type": "number",
            "default": 1.0,
            "label": "Resolution",
            "description": "Higher values favour smaller communities",
            "min": 0.1,
            "max": 5.0,
            "step": 0.1,
        },
    }
    suggested_styles = grouping_styles(
        "greedy-modularity",
        name="Greedy Modularity",
        description="Communities merged greedily while modularity improves",
    )

    def resolution(self) -> float:
        return self.option("resolution")

    def detect(self, g: nx.Graph) -> list[Set]:
        return nx.community.greedy_modularity_communities(
            g, weight="weight", resolution=self.option("resolution")
        )


@register
class GirvanNewmanAlgorithm(_CommunityAlgorithm):
    """Girvan-Newman edge-betweenness splitting.

    Keeps the split with the best modularity among those with at most
    ``maxCommunities`` communities (0 means no limit) whose communities all
    have at least ``minCommunitySize`` members. The starting partition, the
    connected components, is always a candidate.
    """

    type = "girvan-newman"
    options_schema = {
        "maxCommunities": {
            "type": "integer",
            "default": 0,
            "label": "Max Communities",
            "description": "Stop splitting at this many communities (0 = no limit)",
            "min": 0,
            "max": 100,
        },
        "minCommunitySize": {
            "type": "integer",
            "default": 1,
            "label": "Min Community Size",
            "description": "Reject splits that produce smaller communities",
            "min": 1,
            "max": 1000,
        },
    }
    suggested_styles = grouping_styles(
        "girvan-newman",
        name="Girvan-Newman - Vibrant Colors",
        description="Visualizes communities detected via edge betweenness removal",
        palette="tolVibrant",
    )

    def detect(self, g: nx.Graph) -> list[Set]:
        limit = self.option("maxCommunities")
        min_size = self.option("minCommunitySize")
        best: list[Set] = [set(c) for c in nx.connected_components(g)]
        best_score = modularity(g, best)
        for level in nx.community.girvan_newman(g):
            if limit and len(level) > limit:
                break
            if min(len(c) for c in level) < min_size:
                continue
            score = modularity(g, level)
            if score > best_score:
                best, best_score = [set(c) for c in level], score
        return best


__all__ = [
    "modularity",
    "LouvainAlgorithm",
    "LabelPropagationAlgorithm",
    "GreedyModularityAlgorithm",
    "GirvanNewmanAlgorithm",
]
