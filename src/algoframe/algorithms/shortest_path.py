"""Weighted shortest paths."""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
import math
from typing import Any, Optional

import networkx as nx

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import node_metric_styles, node_option, path_styles
from algoframe.converters import resolve_edge_weight
from algoframe.normalization import min_max_normalize
from algoframe.registry import register
from algoframe.styles import SuggestedStylesConfig

UNREACHABLE = -1.0


def _merge_styles(*configs: SuggestedStylesConfig, description: str) -> SuggestedStylesConfig:
    layers = [item for config in configs for item in config.layers]
    return SuggestedStylesConfig(layers=layers, description=description, category="path")


class _SingleSourceAlgorithm(Algorithm):
    """Shared result writing for single-source shortest path adapters."""

    options_schema = {
        "source": node_option("Source Node", "Start of the paths (defaults to the first node)"),
        "target": node_option("Target Node", "Optional end node; highlights the path to it"),
    }

    def path_graph(self) -> nx.MultiDiGraph:
        return self.algorithm_graph(directed=self.is_directed())

    def resolve_target(self) -> Optional[Hashable]:
        if self.option("target") is None:
            return None
        return self.resolve_node_option("target")

    def _path_edge_keys(self, path: Sequence[Hashable]) -> set[str]:
        """Host edge keys along ``path``; the lightest of parallel edges wins."""
        best: dict[tuple[Hashable, Hashable], tuple[float, str]] = {}
        steps = set(zip(path, path[1:]))
        for key, edge in self.edge_items():
            step = (edge.src_id, edge.dst_id)
            if step not in steps and not self.is_directed():
                step = (edge.dst_id, edge.src_id)
            if step not in steps:
                continue
            weight = resolve_edge_weight(edge)
            current = best.get(step)
            if current is None or weight < current[0]:
                best[step] = (weight, key)
        return {key for _, key in best.values()}

    def write_distances(
        self,
        source: Hashable,
        distances: Mapping[Hashable, float],
        target: Optional[Hashable],
        path: Optional[Sequence[Hashable]],
    ) -> None:
        ids = self.node_ids()
        pct = min_max_normalize({n: distances[n] for n in ids if n in distances}, ids)
        on_path = set(path or ())
        for node_id in ids:
            reachable = node_id in distances
            self.add_node_result(
                node_id, "distance", float(distances[node_id]) if reachable else UNREACHABLE
            )
            self.add_node_result(node_id, "distancePct", pct[node_id] if reachable else 0.0)
            self.add_node_result(node_id, "isReachable", reachable)
            self.add_node_result(node_id, "isInPath", node_id in on_path)

        path_edges = self._path_edge_keys(path) if path else set()
        for key, edge in self.edge_items():
            self.add_edge_result(edge, "isInPath", key in path_edges)

        self.add_graph_result("source", source)
        self.add_graph_result("reachableCount", len(distances))
        finite = [d for d in distances.values() if math.isfinite(d)]
        self.add_graph_result("maxDistance", float(max(finite)) if finite else 0.0)
        if target is not None:
            found = path is not None
            self.add_graph_result("target", target)
            self.add_graph_result("pathFound", found)
            self.add_graph_result("path", list(path) if found else [])
            self.add_graph_result(
                "distance", float(distances[target]) if found else UNREACHABLE
            )


@register
class DijkstraAlgorithm(_SingleSourceAlgorithm):
    """Dijkstra shortest paths; negative edge weights are reported, not solved."""

    type = "dijkstra"
    suggested_styles = _merge_styles(
        path_styles("dijkstra", name="Dijkstra Path", description=""),
        node_metric_styles(
            "dijkstra", "distancePct", name="Distance", description="", with_size=False
        ),
        description="Shortest path and distance from the source",
    )

    def execute(self) -> None:
        source = self.resolve_node_option("source")
        target = self.resolve_target()
        negative = sum(1 for _, edge in self.edge_items() if resolve_edge_weight(edge) < 0)
        if negative:
            self.logger.info(
                "Skipping dijkstra: %d edge(s) have negative weights; use bellman-ford.",
                negative,
            )
            self.add_graph_result("source", source)
            self.add_graph_result("hasNegativeWeights", True)
            self.add_graph_result("negativeEdgeCount", negative)
            if target is not None:
                self.add_graph_result("target", target)
                self.add_graph_result("pathFound", False)
                self.add_graph_result("path", [])
                self.add_graph_result("distance", UNREACHABLE)
            return
        distances, paths = nx.single_source_dijkstra(
            self.path_graph(), source, weight="weight"
        )
        path = paths.get(target) if target is not None else None
        self.write_distances(source, distances, target, path)
        self.add_graph_result("hasNegativeWeights", False)


@register
class BellmanFordAlgorithm(_SingleSourceAlgorithm):
    """Bellman-Ford shortest paths; reports negative cycles instead of failing."""

    type = "bellman-ford"
    suggested_styles = _merge_styles(
        path_styles("bellman-ford", name="Bellman-Ford Path", description=""),
        node_metric_styles(
            "bellman-ford", "distancePct", name="Distance", description="", with_size=False
        ),
        description="Shortest path with support for negative edge weights",
    )

    def execute(self) -> None:
        source = self.resolve_node_option("source")
        target = self.resolve_target()
        g = self.path_graph()
        try:
            distances, paths = nx.single_source_bellman_ford(g, source, weight="weight")
        except nx.NetworkXUnbounded:
            cycle = self._find_negative_cycle(g, source)
            self.logger.info("Negative cycle reachable from %r: %s", source, cycle)
            self.add_graph_result("source", source)
            self.add_graph_result("hasNegativeCycle", True)
            self.add_graph_result("negativeCycleNodes", cycle)
            return
        path = paths.get(target) if target is not None else None
        self.write_distances(source, distances, target, path)
        self.add_graph_result("hasNegativeCycle", False)
        self.add_graph_result("negativeCycleNodes", [])

    @staticmethod
    def _find_negative_cycle(g: nx.MultiDiGraph, source: Hashable) -> list[Any]:
        try:
            cycle = nx.find_negative_cycle(g, source, weight="weight")
        except nx.NetworkXError:
            return []
        # networkx repeats the first node at the end.
        if len(cycle) > 1 and cycle[0] == cycle[-1]:
            cycle = cycle[:-1]
        return list(cycle)


@register
class FloydWarshallAlgorithm(Algorithm):
    """All-pairs shortest paths, summarized per node as eccentricity."""

    type = "floyd-warshall"
    suggested_styles = node_metric_styles(
        "floyd-warshall",
        "eccentricityPct",
        name="Eccentricity",
        description="Peripheral nodes are far from their farthest reachable node",
        palette="viridis",
    )

    def execute(self) -> None:
        g = self.algorithm_graph(directed=self.is_directed())
        distances = nx.floyd_warshall(g, weight="weight")
        ids = self.node_ids()

        if any(distances[n][n] < 0 for n in ids):
            self.add_graph_result("hasNegativeCycle", True)
            return

        eccentricity: dict[Hashable, float] = {}
        finite_pairs: list[float] = []
        for src in ids:
            reach = [d for dst, d in distances[src].items() if dst != src and math.isfinite(d)]
            finite_pairs.extend(reach)
            eccentricity[src] = float(max(reach)) if reach else 0.0

        self.write_node_scores("eccentricity", eccentricity, pct_key="eccentricityPct")
        self.add_graph_result("hasNegativeCycle", False)
        self.add_graph_result("diameter", max(eccentricity.values()))
        self.add_graph_result(
            "averageDistance",
            float(sum(finite_pairs) / len(finite_pairs)) if finite_pairs else 0.0,
        )


__all__ = ["UNREACHABLE", "DijkstraAlgorithm", "BellmanFordAlgorithm", "FloydWarshallAlgorithm"]
