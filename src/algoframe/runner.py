"""Run algorithms by ``namespace:type`` key."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import logging
from typing import Any, Optional, Union

from algoframe.algorithms.base import KEY_SEPARATOR, Algorithm
from algoframe.errors import AlgoframeError, AlgorithmError, ConfigError
from algoframe.logging_utils import get_user_message, log_duration
from algoframe.registry import AlgorithmRegistry, default_registry

AlgorithmSpec = Union[str, Mapping[str, Any]]

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    key: str
    ok: bool
    algorithm: Optional[Algorithm] = None
    error: Optional[str] = None
    options: dict[str, Any] = field(default_factory=dict)


def parse_algorithm_key(key: str) -> tuple[str, str]:
    """Split ``"namespace:type"``; whitespace around either part is ignored."""
    if not isinstance(key, str):
        raise ConfigError(f"Algorithm key must be a string, got {key!r}.")
    parts = key.split(KEY_SEPARATOR)
    if len(parts) != 2:
        raise ConfigError(
            f"Invalid algorithm key {key!r}; expected 'namespace:type'.",
            context={"key": key},
        )
    namespace, algorithm_type = (part.strip() for part in parts)
    if not namespace or not algorithm_type:
        raise ConfigError(
            f"Invalid algorithm key {key!r}; namespace and type must be non-empty.",
            context={"key": key},
        )
    return namespace, algorithm_type


def _select_registry(registry: Optional[AlgorithmRegistry]) -> AlgorithmRegistry:
    return registry if registry is not None else default_registry()


def resolve_algorithm(
    key: str,
    *,
    registry: Optional[AlgorithmRegistry] = None,
) -> type[Algorithm]:
    registry = _select_registry(registry)
    namespace, algorithm_type = parse_algorithm_key(key)
    cls = registry.get_class(namespace, algorithm_type)
    if cls is None:
        raise AlgorithmError(
            f"Algorithm {namespace}:{algorithm_type} is not registered. "
            f"Available: {registry.available()}.",
            context={"algorithm": key},
        )
    return cls


def run_algorithm(
    graph: Any,
    key: str,
    options: Optional[Mapping[str, Any]] = None,
    *,
    registry: Optional[AlgorithmRegistry] = None,
) -> Algorithm:
    """Construct and run one algorithm; returns the instance after ``run()``.

    Option errors propagate as raised. Unexpected failures inside the
    algorithm are wrapped in :class:`~algoframe.errors.AlgorithmError`.
    """
    cls = resolve_algorithm(key, registry=registry)
    algorithm = cls(graph, options)
    try:
        with log_duration(logger, f"Algorithm {cls.key()}"):
            algorithm.run()
    except AlgoframeError:
        raise
    except Exception as exc:
        raise AlgorithmError(
            f"Algorithm {cls.key()!r} failed: {exc}",
            context={"algorithm": cls.key()},
        ) from exc
    return algorithm


def normalize_spec(spec: AlgorithmSpec) -> tuple[str, dict[str, Any]]:
    """Accept ``"ns:type"`` or ``{"algorithm": "ns:type", "options": {...}}``."""
    if isinstance(spec, str):
        return spec, {}
    if isinstance(spec, Mapping):
        key = spec.get("algorithm") or spec.get("key")
        if key is None and "namespace" in spec and "type" in spec:
            key = f"{spec['namespace']}{KEY_SEPARATOR}{spec['type']}"
        if not isinstance(key, str):
            raise ConfigError(f"Algorithm entry needs an 'algorithm' key: {dict(spec)!r}.")
        options = spec.get("options") or {}
        if not isinstance(options, Mapping):
            raise ConfigError(f"Options for {key!r} must be a mapping.")
        return key, dict(options)
    raise ConfigError(f"Unsupported algorithm entry: {spec!r}.")


def run_algorithms(
    graph: Any,
    specs: Iterable[AlgorithmSpec],
    *,
    registry: Optional[AlgorithmRegistry] = None,
) -> list[RunOutcome]:
    """Run each spec in order, continuing past failures."""
    outcomes: list[RunOutcome] = []
    for spec in specs:
        key = str(spec)
        options: dict[str, Any] = {}
        try:
            key, options = normalize_spec(spec)
            algorithm = run_algorithm(graph, key, options, registry=registry)
        except Exception as exc:
            message = get_user_message(exc)
            logger.error("Algorithm %s failed: %s", key, message)
            logger.debug("Detailed traceback:", exc_info=exc)
            outcomes.append(RunOutcome(key=key, ok=False, error=message, options=options))
            continue
        outcomes.append(RunOutcome(key=key, ok=True, algorithm=algorithm, options=options))

    failed = [outcome.key for outcome in outcomes if not outcome.ok]
    if failed:
        logger.warning("%d of %d algorithms failed: %s", len(failed), len(outcomes), ", ".join(failed))
    return outcomes


__all__ = [
    "AlgorithmSpec",
    "RunOutcome",
    "parse_algorithm_key",
    "resolve_algorithm",
    "run_algorithm",
    "normalize_spec",
    "run_algorithms",
]
