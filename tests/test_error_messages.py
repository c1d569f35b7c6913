import logging

import pytest

from algoframe.errors import AlgorithmError, ConfigError, NodeNotFoundError
from algoframe.graph import Graph
from algoframe.io_utils import load_graph
from algoframe.logging_utils import log_exception, run_with_error_handling
from algoframe.registry import AlgorithmRegistry
from algoframe.runner import resolve_algorithm


def test_missing_graph_file_raises_config_error(tmp_path) -> None:
    missing = tmp_path / "missing.json"

    with pytest.raises(ConfigError) as exc:
        load_graph(missing)

    message = str(exc.value)
    assert "File not found" in message
    assert str(missing) in message


def test_invalid_json_raises_config_error(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError) as exc:
        load_graph(path)

    assert "Invalid JSON" in str(exc.value)


def test_missing_algorithm_raises_algorithm_error() -> None:
    registry = AlgorithmRegistry()

    with pytest.raises(AlgorithmError) as exc:
        resolve_algorithm("custom:missing-algorithm", registry=registry)

    message = str(exc.value)
    assert "not registered" in message
    assert "custom:missing-algorithm" in message


def test_missing_node_error_reads_cleanly() -> None:
    with pytest.raises(NodeNotFoundError) as exc:
        Graph().get_node("ghost")

    assert str(exc.value) == "Node 'ghost' is not in the graph."
    assert isinstance(exc.value, KeyError)


def test_run_with_error_handling_logs_and_reraises(caplog) -> None:
    logger = logging.getLogger("algoframe.test")
    logger.setLevel(logging.INFO)
    logger.propagate = True
    logger.handlers.clear()

    def _raise_config_error() -> None:
        raise ConfigError("File not found: graphs/missing.json")

    with caplog.at_level(logging.INFO, logger=logger.name):
        with pytest.raises(ConfigError):
            run_with_error_handling(_raise_config_error, logger=logger)

    assert any("File not found" in record.getMessage() for record in caplog.records)


def test_unexpected_errors_are_labelled(caplog) -> None:
    logger = logging.getLogger("algoframe.test.unexpected")
    logger.setLevel(logging.INFO)
    logger.propagate = True
    logger.handlers.clear()

    with caplog.at_level(logging.INFO, logger=logger.name):
        message = log_exception(logger, RuntimeError("boom"))

    assert message == "Unexpected error: boom"


def test_log_exception_emits_traceback_at_debug_level(caplog) -> None:
    logger = logging.getLogger("algoframe.test.debug")
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    logger.handlers.clear()

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        log_exception(logger, ConfigError("File not found: graphs/missing.json"))

    assert any(record.exc_info for record in caplog.records)


def test_error_context_is_included_in_log_message() -> None:
    error = AlgorithmError("Algorithm failed", context={"algorithm": "algoframe:bfs"})

    assert error.log_message() == "Algorithm failed: {'algorithm': 'algoframe:bfs'}"
    assert error.user_message == "Algorithm failed"
