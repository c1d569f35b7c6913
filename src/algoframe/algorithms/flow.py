"""Maximum flow and minimum cut.

Capacities are read from each edge's ``capacity`` attribute, then ``value``,
then default to 1. Parallel edges add their capacities together.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Hashable, Mapping, Set
from typing import Any

import networkx as nx

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import edge_metric_styles, node_option, path, path_styles
from algoframe.converters import (
    DEFAULT_CAPACITY_ATTRIBUTES,
    map_to_graph,
    resolve_edge_weight,
    to_capacity_map,
)
from algoframe.normalization import max_normalize
from algoframe.registry import register
from algoframe.styles import SuggestedStylesConfig, layer, style_rule

CAPACITY = "capacity"
SATURATION_THRESHOLD = 0.99
FLOW_EPSILON = 1e-9


def _edge_capacity(edge: Any) -> float:
    return resolve_edge_weight(edge, DEFAULT_CAPACITY_ATTRIBUTES)


def _ordered(nodes: Set, order: list[Any]) -> list[Any]:
    return [n for n in order if n in nodes]


def _residual_source_side(
    g: nx.DiGraph,
    source: Hashable,
    flows: Mapping[Hashable, Mapping[Hashable, float]],
) -> set:
    """Nodes reachable from ``source`` in the residual network of ``flows``."""
    seen = {source}
    queue = deque([source])
    while queue:
        u = queue.popleft()
        for v, data in g.succ[u].items():
            if v not in seen and data[CAPACITY] - flows.get(u, {}).get(v, 0.0) > FLOW_EPSILON:
                seen.add(v)
                queue.append(v)
        for v in g.pred[u]:
            if v not in seen and flows.get(v, {}).get(u, 0.0) > FLOW_EPSILON:
                seen.add(v)
                queue.append(v)
    return seen


@register
class MaxFlowAlgorithm(Algorithm):
    """Maximum flow from ``source`` to ``sink`` along edge direction."""

    type = "max-flow"
    options_schema = {
        "source": node_option("Source Node", "Where flow enters (defaults to the first node)"),
        "sink": node_option("Sink Node", "Where flow leaves (defaults to the last node)"),
    }
    suggested_styles = edge_metric_styles(
        "max-flow",
        "flowPct",
        name="Max Flow",
        description="Edge width and color by the flow they carry",
    )

    def execute(self) -> None:
        source = self.resolve_node_option("source")
        sink = self.resolve_node_option("sink", default_last=True)
        ids = self.node_ids()
        capacities = to_capacity_map(self.graph)
        g = map_to_graph(capacities, directed=True, attribute=CAPACITY)
        g.remove_edges_from(list(nx.selfloop_edges(g)))

        if source == sink:
            self.logger.info("Source and sink are both %r; max flow is 0.", source)
            flow_value: float = 0.0
            flows: Mapping[Hashable, Mapping[Hashable, float]] = {}
            partition = (set(ids), set())
        else:
            flow_value, flows = nx.maximum_flow(g, source, sink, capacity=CAPACITY)
            source_side = _residual_source_side(g, source, flows)
            partition = (source_side, set(ids) - source_side)

        edge_flow: dict[str, float] = {}
        for key, edge in self.edge_items():
            pair_capacity = capacities.get(edge.src_id, {}).get(edge.dst_id, 0.0)
            pair_flow = flows.get(edge.src_id, {}).get(edge.dst_id, 0.0)
            share = _edge_capacity(edge) / pair_capacity if pair_capacity > 0 else 0.0
            edge_flow[key] = float(pair_flow) * share if edge.src_id != edge.dst_id else 0.0

        flow_pct = max_normalize(edge_flow)
        for key, edge in self.edge_items():
            capacity = _edge_capacity(edge)
            utilization = edge_flow[key] / capacity if capacity > 0 else 0.0
            self.add_edge_result(edge, "flow", edge_flow[key])
            self.add_edge_result(edge, "flowPct", flow_pct[key])
            self.add_edge_result(edge, "capacity", capacity)
            self.add_edge_result(edge, "utilization", utilization)
            self.add_edge_result(edge, "isSaturated", capacity > 0 and utilization >= SATURATION_THRESHOLD)

        inflow = {n: 0.0 for n in ids}
        outflow = {n: 0.0 for n in ids}
        for src, targets in flows.items():
            for dst, value in targets.items():
                if src != dst and value > 0:
                    outflow[src] += value
                    inflow[dst] += value
        for node_id in ids:
            self.add_node_result(node_id, "isSource", node_id == source)
            self.add_node_result(node_id, "isSink", node_id == sink)
            self.add_node_result(node_id, "inFlow", float(inflow[node_id]))
            self.add_node_result(node_id, "outFlow", float(outflow[node_id]))
            self.add_node_result(node_id, "netFlow", float(outflow[node_id] - inflow[node_id]))

        source_side, sink_side = partition
        self.add_graph_result("maxFlow", float(flow_value))
        self.add_graph_result("source", source)
        self.add_graph_result("sink", sink)
        self.add_graph_result("sourcePartition", _ordered(source_side, ids))
        self.add_graph_result("sinkPartition", _ordered(sink_side, ids))


def _min_cut_styles() -> SuggestedStylesConfig:
    styles = path_styles(
        "min-cut",
        name="Min Cut",
        node_key="isInPartition1",
        edge_key="inCut",
        description="Cut edges and the two sides of the minimum cut",
        category="grouping",
    )
    styles.layers.insert(
        0,
        layer(
            "Min Cut - Partitions",
            description="One color per side of the cut",
            node=style_rule(
                style={"enabled": True},
                inputs=[path("min-cut", "partition")],
                output="style.texture.color",
                expr='{ return arguments[0] === "1" ? "#457b9d" : "#f4a261" }',
            ),
        ),
    )
    return styles


@register
class MinCutAlgorithm(Algorithm):
    """Minimum cut, either between ``source`` and ``sink`` or global.

    Edge direction is ignored. The global cut uses Stoer-Wagner; on a
    disconnected graph it is 0 and separates the first node's component from
    the rest.
    """

    type = "min-cut"
    options_schema = {
        "source": node_option("Source Node", "One side of the cut (defaults to the first node)"),
        "sink": node_option("Sink Node", "Other side of the cut (defaults to the last node)"),
        "useGlobalMinCut": {
            "type": "boolean",
            "default": False,
            "label": "Global Min Cut",
            "description": "Find the smallest cut over all node pairs instead of source/sink",
        },
    }
    suggested_styles = _min_cut_styles()

    def execute(self) -> None:
        ids = self.node_ids()
        capacities = to_capacity_map(self.graph, add_reverse=True)
        if self.option("useGlobalMinCut"):
            method = "stoer-wagner"
            side_one, side_two = self._global_cut(capacities, ids)
        else:
            method = "source-sink"
            side_one, side_two = self._source_sink_cut(capacities, ids)

        cut_value = 0.0
        cut_edges = 0
        for _, edge in self.edge_items():
            crosses = (edge.src_id in side_one) != (edge.dst_id in side_one)
            weight = _edge_capacity(edge) if crosses else 0.0
            cut_value += weight
            cut_edges += int(crosses)
            self.add_edge_result(edge, "inCut", crosses)
            self.add_edge_result(edge, "cutWeight", weight)

        for node_id in ids:
            first = node_id in side_one
            self.add_node_result(node_id, "partition", "1" if first else "2")
            self.add_node_result(node_id, "isInPartition1", first)
            self.add_node_result(node_id, "isInPartition2", not first)

        self.add_graph_result("method", method)
        self.add_graph_result("cutValue", float(cut_value))
        self.add_graph_result("cutEdgeCount", cut_edges)
        self.add_graph_result("partition1Size", len(side_one))
        self.add_graph_result("partition2Size", len(side_two))
        self.add_graph_result("partition1", _ordered(side_one, ids))
        self.add_graph_result("partition2", _ordered(side_two, ids))

    def _global_cut(self, capacities: Mapping, ids: list[Any]) -> tuple[set, set]:
        if len(ids) < 2:
            return set(ids), set()
        g = map_to_graph(capacities, directed=False, attribute=CAPACITY)
        g.remove_edges_from(list(nx.selfloop_edges(g)))
        if not nx.is_connected(g):
            first = nx.node_connected_component(g, ids[0])
            self.logger.info("Graph is disconnected; global min cut is 0.")
            return set(first), set(ids) - set(first)
        _, (side_one, side_two) = nx.stoer_wagner(g, weight=CAPACITY)
        if ids[0] not in side_one:
            side_one, side_two = side_two, side_one
        return set(side_one), set(side_two)

    def _source_sink_cut(self, capacities: Mapping, ids: list[Any]) -> tuple[set, set]:
        source = self.resolve_node_option("source")
        sink = self.resolve_node_option("sink", default_last=True)
        self.add_graph_result("source", source)
        self.add_graph_result("sink", sink)
        if source == sink:
            return set(ids), set()
        g = map_to_graph(capacities, directed=True, attribute=CAPACITY)
        g.remove_edges_from(list(nx.selfloop_edges(g)))
        _, flows = nx.maximum_flow(g, source, sink, capacity=CAPACITY)
        side_one = _residual_source_side(g, source, flows)
        return side_one, set(ids) - side_one


__all__ = ["SATURATION_THRESHOLD", "MaxFlowAlgorithm", "MinCutAlgorithm"]
