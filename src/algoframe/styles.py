"""Suggested visualization descriptors attached to algorithms.

The descriptors are consumed by an external styling engine; this module only
models them and exposes the result paths they read from.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from algoframe.results import split_result_path

StyleCategory = Literal["node-metric", "edge-metric", "grouping", "path", "hierarchy"]


class _StyleModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CalculatedStyle(_StyleModel):
    inputs: list[str]
    output: str
    expr: str


class StyleRule(_StyleModel):
    selector: str = ""
    style: dict[str, Any] = Field(default_factory=dict)
    calculated_style: Optional[CalculatedStyle] = Field(default=None, alias="calculatedStyle")


class LayerMetadata(_StyleModel):
    name: str
    description: str = ""


class SuggestedStyleLayer(_StyleModel):
    node: Optional[StyleRule] = None
    edge: Optional[StyleRule] = None
    metadata: Optional[LayerMetadata] = None


class SuggestedStylesConfig(_StyleModel):
    layers: list[SuggestedStyleLayer]
    description: str = ""
    category: Optional[StyleCategory] = None

    def input_paths(self) -> list[str]:
        paths: list[str] = []
        for layer in self.layers:
            for rule in (layer.node, layer.edge):
                if rule is not None and rule.calculated_style is not None:
                    paths.extend(rule.calculated_style.inputs)
        return paths


def style_rule(
    *,
    selector: str = "",
    style: Optional[dict[str, Any]] = None,
    inputs: Optional[list[str]] = None,
    output: Optional[str] = None,
    expr: Optional[str] = None,
) -> StyleRule:
    calculated = None
    if inputs is not None or output is not None or expr is not None:
        calculated = CalculatedStyle(inputs=inputs or [], output=output or "", expr=expr or "")
    return StyleRule(selector=selector, style=style or {}, calculated_style=calculated)


def layer(
    name: str,
    *,
    description: str = "",
    node: Optional[StyleRule] = None,
    edge: Optional[StyleRule] = None,
) -> SuggestedStyleLayer:
    return SuggestedStyleLayer(
        node=node,
        edge=edge,
        metadata=LayerMetadata(name=name, description=description),
    )


def foreign_input_paths(
    config: SuggestedStylesConfig,
    namespace: str,
    algorithm_type: str,
) -> list[str]:
    """Input paths that do not point into the given algorithm's subtree."""
    foreign: list[str] = []
    for path in config.input_paths():
        try:
            ns, kind, _ = split_result_path(path)
        except ValueError:
            foreign.append(path)
            continue
        if (ns, kind) != (namespace, algorithm_type):
            foreign.append(path)
    return foreign


__all__ = [
    "StyleCategory",
    "CalculatedStyle",
    "StyleRule",
    "LayerMetadata",
    "SuggestedStyleLayer",
    "SuggestedStylesConfig",
    "style_rule",
    "layer",
    "foreign_input_paths",
]
