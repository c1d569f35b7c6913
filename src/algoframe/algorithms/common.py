"""Option and style building blocks shared by the adapters."""

from __future__ import annotations

from typing import Any, Optional

from algoframe.algorithms.base import DEFAULT_NAMESPACE
from algoframe.results import result_path
from algoframe.styles import SuggestedStylesConfig, layer, style_rule

COLOR_OUTPUT = "style.texture.color"
SIZE_OUTPUT = "style.shape.size"
EDGE_COLOR_OUTPUT = "style.line.color"
EDGE_WIDTH_OUTPUT = "style.line.width"


def max_iterations_option(default: int = 100, maximum: int = 1000) -> dict[str, Any]:
    return {
        "type": "integer",
        "default": default,
        "label": "Max Iterations",
        "description": "Upper bound on iterations before giving up on convergence",
        "min": 1,
        "max": maximum,
        "advanced": True,
        "group": "convergence",
    }


def tolerance_option(default: float = 1e-6) -> dict[str, Any]:
    return {
        "type": "number",
        "default": default,
        "label": "Tolerance",
        "description": "Convergence threshold",
        "min": 1e-10,
        "max": 0.01,
        "advanced": True,
        "group": "convergence",
    }


def random_seed_option(default: int = 42) -> dict[str, Any]:
    return {
        "type": "integer",
        "default": default,
        "label": "Random Seed",
        "description": "Seed for reproducible results",
        "min": 0,
        "advanced": True,
    }


def node_option(label: str, description: str) -> dict[str, Any]:
    return {
        "type": "nodeId",
        "default": None,
        "label": label,
        "description": description,
        "required": False,
    }


def path(algorithm_type: str, key: str) -> str:
    return result_path(DEFAULT_NAMESPACE, algorithm_type, key)


def node_metric_styles(
    algorithm_type: str,
    pct_key: str,
    *,
    name: str,
    description: str,
    palette: str = "viridis",
    with_size: bool = True,
) -> SuggestedStylesConfig:
    layers = [
        layer(
            f"{name} - Color",
            description=f"{palette} gradient from low to high",
            node=style_rule(
                style={"enabled": True},
                inputs=[path(algorithm_type, pct_key)],
                output=COLOR_OUTPUT,
                expr=f"{{ return StyleHelpers.color.sequential.{palette}(arguments[0]) }}",
            ),
        )
    ]
    if with_size:
        layers.append(
            layer(
                f"{name} - Size",
                description="Larger nodes score higher",
                node=style_rule(
                    style={"enabled": True},
                    inputs=[path(algorithm_type, pct_key)],
                    output=SIZE_OUTPUT,
                    expr="{ return StyleHelpers.size.linear(arguments[0], 1, 5) }",
                ),
            )
        )
    return SuggestedStylesConfig(layers=layers, description=description, category="node-metric")


def grouping_styles(
    algorithm_type: str,
    *,
    name: str,
    description: str,
    key: str = "communityId",
    palette: str = "okabeIto",
) -> SuggestedStylesConfig:
    return SuggestedStylesConfig(
        layers=[
            layer(
                f"{name} - Colors",
                description="Categorical palette, one color per group",
                node=style_rule(
                    style={"enabled": True},
                    inputs=[path(algorithm_type, key)],
                    output=COLOR_OUTPUT,
                    expr=f"{{ return StyleHelpers.color.categorical.{palette}(arguments[0]) }}",
                ),
            )
        ],
        description=description,
        category="grouping",
    )


def path_styles(
    algorithm_type: str,
    *,
    name: str,
    description: str,
    node_key: str = "isInPath",
    edge_key: Optional[str] = "isInPath",
    category: str = "path",
) -> SuggestedStylesConfig:
    layers = [
        layer(
            f"{name} - Nodes",
            description="Highlight nodes on the result",
            node=style_rule(
                selector=f"{path(algorithm_type, node_key)} == `true`",
                style={"texture": {"color": "#e63946"}, "shape": {"size": 1.5}},
            ),
        )
    ]
    if edge_key is not None:
        layers.append(
            layer(
                f"{name} - Edges",
                description="Highlight edges on the result",
                edge=style_rule(
                    selector=f"{path(algorithm_type, edge_key)} == `true`",
                    style={"line": {"color": "#e63946", "width": 3}},
                ),
            )
        )
    return SuggestedStylesConfig(layers=layers, description=description, category=category)


def edge_metric_styles(
    algorithm_type: str,
    pct_key: str,
    *,
    name: str,
    description: str,
    palette: str = "plasma",
) -> SuggestedStylesConfig:
    return SuggestedStylesConfig(
        layers=[
            layer(
                f"{name} - Edge Width",
                description="Wider edges carry more",
                edge=style_rule(
                    style={"enabled": True},
                    inputs=[path(algorithm_type, pct_key)],
                    output=EDGE_WIDTH_OUTPUT,
                    expr="{ return 0.5 + arguments[0] * 4.5 }",
                ),
            ),
            layer(
                f"{name} - Edge Color",
                description=f"{palette} gradient",
                edge=style_rule(
                    style={"enabled": True},
                    inputs=[path(algorithm_type, pct_key)],
                    output=EDGE_COLOR_OUTPUT,
                    expr=f"{{ return StyleHelpers.color.sequential.{palette}(arguments[0]) }}",
                ),
            ),
        ],
        description=description,
        category="edge-metric",
    )


__all__ = [
    "max_iterations_option",
    "tolerance_option",
    "random_seed_option",
    "node_option",
    "path",
    "node_metric_styles",
    "grouping_styles",
    "path_styles",
    "edge_metric_styles",
]
