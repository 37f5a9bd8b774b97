"""
Input validation utilities for the workflow layout engine.

Provides the exception hierarchy and the validation helpers used for layout
options and graph input. Every helper raises a descriptive exception on
invalid input; nothing is silently corrected.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Optional, Sequence


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidOptionsError(ValidationError):
    """Raised when layout options are invalid."""

    pass


class GraphError(ValidationError):
    """Raised when the node/edge input does not form a valid graph."""

    pass


class InvalidNodeError(GraphError):
    """Raised when a node is malformed."""

    pass


class InvalidDimensionError(InvalidNodeError, InvalidOptionsError):
    """Raised when a node width or height is not a positive number."""

    pass


class DuplicateNodeError(GraphError):
    """Raised when two nodes share the same id."""

    pass


class DuplicateEdgeError(GraphError):
    """Raised when two edges share the same explicit id."""

    pass


class DanglingEdgeError(GraphError):
    """
    Raised when edges reference node ids that are not in the node set.

    Attributes:
        issues: List of (edge_index, issue_description) tuples, one per
            unresolved endpoint.
    """

    def __init__(self, issues: Sequence[tuple[int, str]]) -> None:
        self.issues: list[tuple[int, str]] = list(issues)
        msg = "Edges reference unknown nodes:\n" + "\n".join(issue[1] for issue in self.issues)
        super().__init__(msg)


def validate_positive(name: str, value: Any, error: type[ValidationError] = InvalidOptionsError) -> float:
    """
    Validate that a value is a finite, strictly positive number.

    Args:
        name: Parameter name used in the error message
        value: Value to check
        error: Exception class to raise

    Returns:
        The value as a float

    Raises:
        InvalidOptionsError: (or ``error``) if the value is not positive
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise error(f"{name} must be a number, got {value!r}")
    result = float(value)
    if not math.isfinite(result) or result <= 0:
        raise error(f"{name} must be positive, got {value!r}")
    return result


def validate_non_negative_int(name: str, value: Any, minimum: int = 0) -> int:
    """
    Validate that a value is an integer >= ``minimum``.

    Raises:
        InvalidOptionsError: If the value is not an integer or is too small
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOptionsError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidOptionsError(f"{name} must be >= {minimum}, got {value}")
    return value


def validate_flag(name: str, value: Any) -> bool:
    """Validate that a value is a real boolean."""
    if not isinstance(value, bool):
        raise InvalidOptionsError(f"{name} must be a boolean, got {value!r}")
    return value


def validate_dimension(node_id: Any, name: str, value: Optional[Any]) -> Optional[float]:
    """
    Validate an optional node dimension.

    ``None`` means "use the configured default" and is passed through.

    Raises:
        InvalidDimensionError: If the dimension is present but not positive
    """
    if value is None:
        return None
    return validate_positive(f"Node {node_id!r}: {name}", value, error=InvalidDimensionError)


__all__ = [
    "ValidationError",
    "InvalidOptionsError",
    "GraphError",
    "InvalidNodeError",
    "InvalidDimensionError",
    "DuplicateNodeError",
    "DuplicateEdgeError",
    "DanglingEdgeError",
    "validate_positive",
    "validate_non_negative_int",
    "validate_flag",
    "validate_dimension",
]
