"""Shared JSON/YAML I/O helpers and graph file loading."""

from __future__ import annotations

import json
import os
from pathlib import Path
import tempfile
from typing import Any, Optional, Type, Union

import yaml

from algoframe.errors import ConfigError, ValidationError
from algoframe.graph import Graph

YAML_SUFFIXES = (".yaml", ".yml")


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def write_json_atomic(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_handle: Optional[int] = None
    tmp_path: Optional[str] = None
    try:
        tmp_handle, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        with os.fdopen(tmp_handle, "w", encoding="utf-8") as handle:
            tmp_handle = None
            json.dump(payload, handle, indent=2, sort_keys=True, ensure_ascii=True, default=str)
            handle.write("\n")
        os.replace(tmp_path, path)
        tmp_path = None
    finally:
        if tmp_handle is not None:
            try:
                os.close(tmp_handle)
            except OSError:
                pass
        if tmp_path is not None and os.path.exists(tmp_path):
            try:
                os.unlink(tmp_path)
            except OSError:
                pass


def read_yaml_payload(
    path: Path,
    *,
    error_message: Optional[str] = None,
    error_cls: Type[Exception] = ConfigError,
) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        text = handle.read()
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise error_cls(error_message or f"Invalid YAML in {path}: {exc}") from exc


def read_payload(path: Union[str, Path]) -> Any:
    """Read JSON or YAML depending on the file suffix."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"File not found: {path}")
    if path.suffix.lower() in YAML_SUFFIXES:
        return read_yaml_payload(path)
    try:
        return read_json(path)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc


def load_graph(path: Union[str, Path], *, directed: Optional[bool] = None) -> Graph:
    """Load a node-link graph file (JSON or YAML)."""
    payload = read_payload(path)
    if not isinstance(payload, dict):
        raise ValidationError(f"Graph file {path} must contain a mapping.")
    if directed is not None:
        payload = dict(payload, directed=directed)
    return Graph.from_dict(payload)


def save_graph(path: Union[str, Path], graph: Graph, *, include_results: bool = True) -> None:
    write_json_atomic(Path(path), graph.to_dict(include_results=include_results))


__all__ = [
    "read_json",
    "write_json_atomic",
    "read_yaml_payload",
    "read_payload",
    "load_graph",
    "save_graph",
]
