"""Error hierarchy for algoframe."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class AlgoframeError(Exception):
    """Base exception for algoframe failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigError(AlgoframeError):
    """Configuration loading or definition error."""


class ValidationError(AlgoframeError):
    """Validation error for input data or schema."""


class OptionValidationError(ValidationError):
    """An algorithm option failed validation.

    Always raised while an algorithm is constructed or configured, never
    from ``run()``.
    """

    def __init__(self, option_key: str, reason: str) -> None:
        super().__init__(
            f"Invalid option {option_key!r}: {reason}",
            context={"option": option_key},
        )
        self.option_key = option_key
        self.reason = reason


class NodeNotFoundError(AlgoframeError, KeyError):
    """A result write referenced a node id that is not in the graph."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0]) if self.args else ""


class RegistryError(AlgoframeError):
    """Algorithm registration error."""


class AlgorithmError(AlgoframeError):
    """Algorithm resolution or execution error."""


__all__ = [
    "AlgoframeError",
    "ConfigError",
    "ValidationError",
    "OptionValidationError",
    "NodeNotFoundError",
    "RegistryError",
    "AlgorithmError",
]
