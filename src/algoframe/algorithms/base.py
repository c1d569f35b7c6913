"""Base class shared by every algorithm adapter."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any, ClassVar, Optional

import networkx as nx

from algoframe.converters import to_algorithm_graph
from algoframe.errors import NodeNotFoundError, ValidationError
from algoframe.logging_utils import algorithm_logger
from algoframe.normalization import max_normalize, min_max_normalize
from algoframe.options import (
    OptionsSchema,
    define_options_schema,
    describe_options_schema,
    resolve_options,
    validate_option,
)
from algoframe.results import clear_results, collect_results, set_result
from algoframe.styles import SuggestedStylesConfig

DEFAULT_NAMESPACE = "algoframe"
KEY_SEPARATOR = ":"


class Algorithm:
    """An algorithm bound to one host graph.

    Subclasses set ``namespace``, ``type``, ``options_schema`` and optionally
    ``suggested_styles``, and implement :meth:`execute`. Options are resolved
    and validated in the constructor, so invalid options never reach
    :meth:`run`.

    Each instance writes only to the ``[namespace][type]`` subtree of the
    node, edge and graph result trees, and :meth:`run` replaces that subtree
    wholesale. Runs of two different algorithms on one graph never collide.
    Callers must not run two instances of the same algorithm type against the
    same graph at the same time; nothing serializes such runs.
    """

    namespace: ClassVar[str] = DEFAULT_NAMESPACE
    type: ClassVar[str] = ""
    options_schema: ClassVar[OptionsSchema] = {}
    suggested_styles: ClassVar[Optional[SuggestedStylesConfig]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "options_schema" in cls.__dict__:
            cls.options_schema = define_options_schema(cls.__dict__["options_schema"])

    def __init__(self, graph: Any, options: Optional[Mapping[str, Any]] = None) -> None:
        self.graph = graph
        self._resolved = resolve_options(self.options_schema, options)
        self._legacy: dict[str, Any] = {}
        self.logger = algorithm_logger(self.namespace, self.type)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key()}>"

    # identity / introspection

    @classmethod
    def key(cls) -> str:
        return f"{cls.namespace}{KEY_SEPARATOR}{cls.type}"

    @classmethod
    def get_options_schema(cls) -> OptionsSchema:
        return dict(cls.options_schema)

    @classmethod
    def has_options(cls) -> bool:
        return bool(cls.options_schema)

    @classmethod
    def has_suggested_styles(cls) -> bool:
        return cls.suggested_styles is not None

    @classmethod
    def get_suggested_styles(cls) -> Optional[SuggestedStylesConfig]:
        if cls.suggested_styles is None:
            return None
        return cls.suggested_styles.model_copy(deep=True)

    @classmethod
    def describe(cls) -> dict[str, Any]:
        styles = cls.get_suggested_styles()
        return {
            "key": cls.key(),
            "namespace": cls.namespace,
            "type": cls.type,
            "description": (cls.__doc__ or "").strip().splitlines()[0] if cls.__doc__ else "",
            "options": describe_options_schema(cls.options_schema),
            "suggestedStyles": styles.to_dict() if styles is not None else None,
        }

    # options

    def configure(self, **overrides: Any) -> "Algorithm":
        """Legacy override path; values win over schema-resolved options."""
        for name, value in overrides.items():
            definition = self.options_schema.get(name)
            if definition is not None:
                value = validate_option(name, value, definition)
            else:
                self.logger.debug("Legacy option %r is not in the schema.", name)
            self._legacy[name] = value
        return self

    def option(self, name: str, fallback: Any = None) -> Any:
        """Legacy override, then schema value, then ``fallback``."""
        value = self._legacy.get(name)
        if value is not None:
            return value
        value = self._resolved.get(name)
        if value is not None:
            return value
        return fallback

    @property
    def options(self) -> dict[str, Any]:
        merged = dict(self._resolved)
        merged.update({k: v for k, v in self._legacy.items() if v is not None})
        return merged

    # lifecycle

    def run(self) -> None:
        """Recompute this algorithm's results, replacing any earlier run."""
        self.clear_results()
        if not self.graph.data_manager.nodes:
            self.logger.debug("Graph is empty; nothing to compute for %s.", self.key())
            return
        self.logger.debug("Running %s with options %s.", self.key(), self.options)
        self.execute()

    def execute(self) -> None:
        raise NotImplementedError

    def clear_results(self) -> None:
        data_manager = self.graph.data_manager
        for node in data_manager.nodes.values():
            clear_results(node.algorithm_results, self.namespace, self.type)
        for edge in data_manager.edges.values():
            clear_results(edge.algorithm_results, self.namespace, self.type)
        if data_manager.graph_results is not None:
            clear_results(data_manager.graph_results, self.namespace, self.type)

    # result writers

    def add_node_result(self, node_id: Hashable, key: str, value: Any) -> None:
        node = self.graph.data_manager.nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(
                f"couldn't find nodeId {node_id!r} while trying to run algorithm {self.key()!r}",
                context={"node_id": node_id, "algorithm": self.key()},
            )
        set_result(node.algorithm_results, self.namespace, self.type, key, value)

    def add_edge_result(self, edge: Any, key: str, value: Any) -> None:
        if isinstance(edge, str):
            record = self.graph.data_manager.edges.get(edge)
            if record is None:
                raise ValidationError(
                    f"couldn't find edge {edge!r} while trying to run algorithm {self.key()!r}",
                    context={"edge": edge, "algorithm": self.key()},
                )
            edge = record
        set_result(edge.algorithm_results, self.namespace, self.type, key, value)

    def add_graph_result(self, key: str, value: Any) -> None:
        data_manager = self.graph.data_manager
        if data_manager.graph_results is None:
            data_manager.graph_results = {}
        set_result(data_manager.graph_results, self.namespace, self.type, key, value)

    @property
    def results(self) -> dict[str, Any]:
        return collect_results(self.graph)

    # helpers for subclasses

    def node_ids(self) -> list[Any]:
        return list(self.graph.data_manager.nodes.keys())

    def edge_items(self) -> list[tuple[str, Any]]:
        return list(self.graph.data_manager.edges.items())

    def is_directed(self) -> bool:
        return bool(getattr(self.graph, "directed", False))

    def algorithm_graph(self, **kwargs: Any) -> nx.Graph:
        return to_algorithm_graph(self.graph, **kwargs)

    def simple_graph(self, *, directed: Optional[bool] = None) -> nx.Graph:
        """``nx.Graph`` or ``nx.DiGraph`` with each host edge inserted once."""
        return to_algorithm_graph(
            self.graph,
            directed=self.is_directed() if directed is None else directed,
            allow_parallel_edges=False,
            add_reverse_edges=False,
        )

    def resolve_node_option(self, name: str, *, default_last: bool = False) -> Any:
        """Return a node id option, defaulting to the first (or last) node."""
        ids = self.node_ids()
        fallback = (ids[-1] if default_last else ids[0]) if ids else None
        value = self.option(name, fallback)
        nodes = self.graph.data_manager.nodes
        if value in nodes:
            return value
        # Ids typed on a command line arrive as strings.
        if isinstance(value, str):
            try:
                as_int = int(value)
            except ValueError:
                as_int = None
            if as_int is not None and as_int in nodes:
                return as_int
        if isinstance(value, float) and value.is_integer() and int(value) in nodes:
            return int(value)
        raise NodeNotFoundError(
            f"{name} node {value!r} is not in the graph for algorithm {self.key()!r}",
            context={"option": name, "node_id": value, "algorithm": self.key()},
        )

    def write_node_scores(
        self,
        key: str,
        scores: Mapping[Hashable, Any],
        *,
        pct_key: Optional[str] = None,
        scale: str = "min-max",
        missing: Any = 0.0,
    ) -> None:
        """Write one raw score per node plus an optional [0, 1] companion."""
        ids = self.node_ids()
        for node_id in ids:
            self.add_node_result(node_id, key, scores.get(node_id, missing))
        if pct_key is None:
            return
        if scale == "max":
            pct = max_normalize(scores, ids)
        else:
            pct = min_max_normalize(scores, ids)
        for node_id in ids:
            self.add_node_result(node_id, pct_key, pct[node_id])


__all__ = ["DEFAULT_NAMESPACE", "KEY_SEPARATOR", "Algorithm"]
