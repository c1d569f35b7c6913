"""Logging configuration and error reporting helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import logging
import time
from typing import Any, TypeVar, Union

from algoframe.errors import AlgoframeError

DEFAULT_LOGGER_NAME = "algoframe"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_T = TypeVar("_T")


def parse_log_level(level: Union[int, str, None]) -> int:
    if level is None:
        return DEFAULT_LOG_LEVEL
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if isinstance(value, int):
        return value
    raise ValueError(f"Unknown log level: {level!r}.")


def configure_logging(
    level: Union[int, str] = DEFAULT_LOG_LEVEL,
    *,
    logger_name: str = DEFAULT_LOGGER_NAME,
    fmt: str = DEFAULT_LOG_FORMAT,
    force: bool = False,
) -> logging.Logger:
    level = parse_log_level(level)
    logging.basicConfig(level=level, format=fmt, force=force)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    return logger


def algorithm_logger(namespace: str, algorithm_type: str) -> logging.Logger:
    """Return the logger an algorithm instance reports through."""
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.run.{namespace}.{algorithm_type}")


@contextmanager
def log_duration(
    logger: logging.Logger,
    label: str,
    *,
    level: int = logging.INFO,
) -> Iterator[None]:
    start = time.perf_counter()
    yield
    elapsed = time.perf_counter() - start
    logger.log(level, "%s finished in %.3fs.", label, elapsed)


def get_user_message(exc: BaseException) -> str:
    if isinstance(exc, AlgoframeError):
        return exc.user_message
    return f"Unexpected error: {exc}"


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    *,
    show_traceback: bool = False,
) -> str:
    user_message = get_user_message(exc)
    logger.error(user_message)
    if show_traceback:
        logger.error("Detailed traceback:", exc_info=exc)
    else:
        logger.debug("Detailed traceback:", exc_info=exc)
    return user_message


def run_with_error_handling(
    func: Callable[..., _T],
    *args: Any,
    logger: logging.Logger,
    show_traceback: bool = False,
    **kwargs: Any,
) -> _T:
    try:
        return func(*args, **kwargs)
    except Exception as exc:
        log_exception(logger, exc, show_traceback=show_traceback)
        raise


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_FORMAT",
    "parse_log_level",
    "configure_logging",
    "algorithm_logger",
    "log_duration",
    "get_user_message",
    "log_exception",
    "run_with_error_handling",
]
