from pathlib import Path
import random

import pytest

from algoframe.errors import ConfigError
from algoframe.hydra_utils import (
    compose_config,
    format_config,
    resolve_config,
    seed_everything,
)


def _config_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "configs"


def test_hydra_compose_defaults() -> None:
    cfg = compose_config(config_path=_config_dir(), config_name="default")
    resolved = resolve_config(cfg)

    assert resolved["common"]["seed"] == 0
    assert resolved["graph"]["directed"] is None
    assert resolved["algorithms"][0] == "algoframe:degree"
    assert resolved["algorithms"][1]["options"]["dampingFactor"] == 0.85
    assert resolved["output"]["include_graph"] is False
    rendered = format_config(cfg)
    assert "common:" in rendered


def test_hydra_overrides_apply() -> None:
    cfg = compose_config(
        config_path=_config_dir(),
        config_name="default.yaml",
        overrides=["graph.path=graph.json", "common.seed=7", "log_level=DEBUG"],
    )
    resolved = resolve_config(cfg)

    assert resolved["graph"]["path"] == "graph.json"
    assert resolved["common"]["seed"] == 7
    assert resolved["log_level"] == "DEBUG"


def test_schema_rejects_wrong_types() -> None:
    with pytest.raises(ConfigError):
        compose_config(config_path=_config_dir(), overrides=["common.seed=not-a-number"])


def test_missing_config_dir_raises(tmp_path) -> None:
    with pytest.raises(ConfigError) as exc:
        compose_config(config_path=tmp_path / "nowhere")

    assert "Config directory not found" in str(exc.value)


def test_seed_everything_is_reproducible() -> None:
    cfg = compose_config(config_path=_config_dir(), overrides=["common.seed=11"])

    assert seed_everything(cfg) == 11
    first = random.random()
    seed_everything(cfg)
    assert random.random() == first


def test_seed_everything_accepts_plain_mappings() -> None:
    assert seed_everything({"seed": 3}) == 3
    assert seed_everything({"common": {}}) is None
    with pytest.raises(ConfigError):
        seed_everything({"seed": "abc"})
