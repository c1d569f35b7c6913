"""Algorithm registry keyed by ``namespace:type``."""

from __future__ import annotations

import builtins
from collections.abc import Iterable, Iterator, Mapping
import logging
from typing import Any, Optional, TypeVar

from algoframe.algorithms.base import KEY_SEPARATOR, Algorithm
from algoframe.errors import RegistryError
from algoframe.styles import SuggestedStylesConfig

logger = logging.getLogger(__name__)

_A = TypeVar("_A", bound=type)


def _validate_key(label: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{label} must be a non-empty string.")
    return value


def make_key(namespace: str, algorithm_type: str) -> str:
    return f"{namespace}{KEY_SEPARATOR}{algorithm_type}"


def _format_options(options: Iterable[str]) -> str:
    values = builtins.list(options)
    if not values:
        return "<none>"
    return ", ".join(sorted(values))


class AlgorithmRegistry:
    """Maps ``namespace:type`` keys to algorithm classes.

    Registering a second class under an existing key is an error unless
    ``overwrite=True`` is passed. Lookups of unknown keys return ``None``.
    """

    def __init__(self, algorithms: Iterable[type[Algorithm]] = ()) -> None:
        self._entries: dict[str, type[Algorithm]] = {}
        for cls in algorithms:
            self.register(cls)

    def register(self, cls: _A, *, overwrite: bool = False) -> _A:
        if not isinstance(cls, type) or not issubclass(cls, Algorithm):
            raise TypeError(f"Only Algorithm subclasses can be registered, got {cls!r}.")
        namespace = _validate_key("namespace", cls.namespace)
        algorithm_type = _validate_key("type", cls.type)
        key = make_key(namespace, algorithm_type)
        existing = self._entries.get(key)
        if existing is not None and existing is not cls and not overwrite:
            raise RegistryError(
                f"Algorithm {key!r} is already registered by "
                f"{existing.__module__}.{existing.__qualname__}; use overwrite=True to replace.",
                context={"key": key},
            )
        if existing is not None and existing is not cls:
            logger.info("Replacing algorithm %s with %s.", key, cls.__qualname__)
        self._entries[key] = cls
        return cls

    def unregister(self, namespace: str, algorithm_type: str) -> bool:
        return self._entries.pop(make_key(namespace, algorithm_type), None) is not None

    def get_class(self, namespace: str, algorithm_type: str) -> Optional[type[Algorithm]]:
        return self._entries.get(make_key(namespace, algorithm_type))

    def get(
        self,
        graph: Any,
        namespace: str,
        algorithm_type: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Algorithm]:
        """Construct the algorithm for ``graph``; ``None`` for unknown keys.

        Invalid options raise :class:`~algoframe.errors.OptionValidationError`.
        """
        cls = self.get_class(namespace, algorithm_type)
        if cls is None:
            return None
        return cls(graph, options)

    def get_suggested_styles(
        self, namespace: str, algorithm_type: str
    ) -> Optional[SuggestedStylesConfig]:
        cls = self.get_class(namespace, algorithm_type)
        if cls is None:
            return None
        return cls.get_suggested_styles()

    def list(self, namespace: Optional[str] = None) -> builtins.list[str]:
        keys = self._entries.keys()
        if namespace is not None:
            prefix = f"{namespace}{KEY_SEPARATOR}"
            keys = [key for key in keys if key.startswith(prefix)]
        return sorted(keys)

    def keys(self) -> builtins.list[str]:
        return self.list()

    def available(self) -> str:
        return _format_options(self._entries.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._entries)


_DEFAULT_REGISTRY = AlgorithmRegistry()
_BUILTINS_LOADED = False


def _load_builtin_algorithms() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    _BUILTINS_LOADED = True
    # Import for side effects: register built-in algorithms.
    import algoframe.algorithms.centrality  # noqa: F401
    import algoframe.algorithms.community  # noqa: F401
    import algoframe.algorithms.components  # noqa: F401
    import algoframe.algorithms.flow  # noqa: F401
    import algoframe.algorithms.matching  # noqa: F401
    import algoframe.algorithms.shortest_path  # noqa: F401
    import algoframe.algorithms.spanning_tree  # noqa: F401
    import algoframe.algorithms.traversal  # noqa: F401


def default_registry() -> AlgorithmRegistry:
    _load_builtin_algorithms()
    return _DEFAULT_REGISTRY


def register(cls: _A, *, overwrite: bool = False) -> _A:
    """Class decorator adding ``cls`` to the default registry."""
    return _DEFAULT_REGISTRY.register(cls, overwrite=overwrite)


def get(
    graph: Any,
    namespace: str,
    algorithm_type: str,
    options: Optional[Mapping[str, Any]] = None,
) -> Optional[Algorithm]:
    return default_registry().get(graph, namespace, algorithm_type, options)


def get_class(namespace: str, algorithm_type: str) -> Optional[type[Algorithm]]:
    return default_registry().get_class(namespace, algorithm_type)


def get_suggested_styles(
    namespace: str, algorithm_type: str
) -> Optional[SuggestedStylesConfig]:
    return default_registry().get_suggested_styles(namespace, algorithm_type)


def list_algorithms(namespace: Optional[str] = None) -> builtins.list[str]:
    return default_registry().list(namespace)


__all__ = [
    "AlgorithmRegistry",
    "make_key",
    "default_registry",
    "register",
    "get",
    "get_class",
    "get_suggested_styles",
    "list_algorithms",
]
