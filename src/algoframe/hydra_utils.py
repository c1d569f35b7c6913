"""Hydra config composition and seeding helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
import random
from typing import Any, Optional, Union

import numpy as np

from algoframe.errors import ConfigError

try:
    from hydra import compose, initialize_config_dir
    from hydra.core.global_hydra import GlobalHydra
    from omegaconf import OmegaConf
except ImportError:  # pragma: no cover - optional dependency
    compose = None
    initialize_config_dir = None
    GlobalHydra = None
    OmegaConf = None

DEFAULT_CONFIG_PATH = "configs"
DEFAULT_CONFIG_NAME = "default"
DEFAULT_SEED_PATHS = ("common.seed", "seed")


def _require_hydra() -> None:
    if compose is None or initialize_config_dir is None or GlobalHydra is None:
        raise ConfigError("hydra-core is required to compose configs.")


def _normalize_config_name(config_name: str) -> str:
    if config_name.endswith((".yaml", ".yml")):
        return Path(config_name).stem
    return config_name


def _normalize_overrides(overrides: Optional[Sequence[str]]) -> list[str]:
    if not overrides:
        return []
    return [item for item in overrides if item and item != "--"]


def compose_config(
    *,
    config_path: Union[Path, str] = DEFAULT_CONFIG_PATH,
    config_name: str = DEFAULT_CONFIG_NAME,
    overrides: Optional[Sequence[str]] = None,
) -> Any:
    _require_hydra()
    from algoframe.config.schema import register_configs

    register_configs()
    config_dir = Path(config_path)
    if not config_dir.is_absolute():
        config_dir = (Path.cwd() / config_dir).resolve()
    if not config_dir.exists():
        raise ConfigError(f"Config directory not found: {config_dir}")
    if GlobalHydra.instance().is_initialized():
        GlobalHydra.instance().clear()
    try:
        with initialize_config_dir(config_dir=str(config_dir), version_base=None):
            return compose(
                config_name=_normalize_config_name(config_name),
                overrides=_normalize_overrides(overrides),
            )
    except ConfigError:
        raise
    except Exception as exc:
        raise ConfigError(
            f"Failed to compose config {config_name!r} from {config_dir}: {exc}",
            context={"config_dir": str(config_dir)},
        ) from exc


def resolve_config(cfg: Any) -> dict[str, Any]:
    if OmegaConf is not None and OmegaConf.is_config(cfg):
        resolved = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=False)
    elif isinstance(cfg, Mapping):
        resolved = dict(cfg)
    else:
        raise ConfigError("Config must be a mapping or an OmegaConf config.")
    if not isinstance(resolved, dict):
        raise ConfigError("Resolved config must be a mapping.")
    return resolved


def format_config(cfg: Any) -> str:
    _require_hydra()
    if OmegaConf.is_config(cfg):
        return OmegaConf.to_yaml(cfg, resolve=True)
    return OmegaConf.to_yaml(OmegaConf.create(resolve_config(cfg)))


def _select_from_mapping(cfg: Mapping[str, Any], path: str) -> Any:
    current: Any = cfg
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def _extract_seed(cfg: Any, seed_paths: Sequence[str]) -> Optional[Any]:
    if OmegaConf is not None and OmegaConf.is_config(cfg):
        for path in seed_paths:
            value = OmegaConf.select(cfg, path, default=None)
            if value is not None:
                return value
    if isinstance(cfg, Mapping):
        for path in seed_paths:
            value = _select_from_mapping(cfg, path)
            if value is not None:
                return value
    return None


def seed_everything(
    cfg: Any,
    *,
    seed_paths: Sequence[str] = DEFAULT_SEED_PATHS,
) -> Optional[int]:
    """Seed ``random`` and numpy from the first seed found in ``cfg``.

    networkx draws from these global generators when an algorithm is run
    without an explicit seed.
    """
    seed = _extract_seed(cfg, seed_paths)
    if seed is None:
        return None
    try:
        seed_int = int(seed)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Seed must be an integer, got {seed!r}.") from exc
    random.seed(seed_int)
    np.random.seed(seed_int)
    return seed_int


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_SEED_PATHS",
    "compose_config",
    "resolve_config",
    "format_config",
    "seed_everything",
]
