"""Structured config schema for Hydra."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Optional


@dataclass
class CommonConfig:
    seed: int = 0


@dataclass
class GraphConfig:
    path: str = ""
    # None keeps the ``directed`` flag stored in the graph file.
    directed: Optional[bool] = None


@dataclass
class OutputConfig:
    path: str = "results.json"
    include_graph: bool = False


@dataclass
class AppConfig:
    common: CommonConfig = field(default_factory=CommonConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    # Entries are "namespace:type" strings or {algorithm, options} mappings.
    algorithms: list[Any] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"


def register_configs() -> None:
    try:
        from hydra.core.config_store import ConfigStore
    except ModuleNotFoundError:
        return
    cs = ConfigStore.instance()
    try:
        cs.store(group="schema", name="base", node=AppConfig, package="_global_")
    except Exception as exc:
        logging.getLogger(__name__).warning(
            "Hydra config store registration failed: %s", exc
        )


__all__ = ["CommonConfig", "GraphConfig", "OutputConfig", "AppConfig", "register_configs"]
