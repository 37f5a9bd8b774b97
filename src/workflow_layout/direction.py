"""Layout direction selection."""

from __future__ import annotations

from typing import Optional, Union

from .types import Direction

DEFAULT_DIRECTION = Direction.TB

# Graphs with fewer nodes read best as a vertical approval chain.
AUTO_DIRECTION_THRESHOLD = 5


def select_direction(
    node_count: int,
    explicit_direction: Optional[Union[Direction, str]] = None,
    auto_direction: bool = True,
    threshold: int = AUTO_DIRECTION_THRESHOLD,
) -> Direction:
    """
    Pick the layout direction.

    An explicit direction always wins. Otherwise, with ``auto_direction``
    small graphs (``node_count < threshold``) are laid out top-to-bottom and
    larger ones left-to-right. Without ``auto_direction`` the default
    direction is used.

    Args:
        node_count: Number of nodes in the graph
        explicit_direction: Caller override
        auto_direction: Enable the size heuristic
        threshold: Node count from which LR is chosen

    Returns:
        The resolved Direction
    """
    if explicit_direction is not None:
        return Direction.parse(explicit_direction)
    if auto_direction:
        return Direction.TB if node_count < threshold else Direction.LR
    return DEFAULT_DIRECTION


__all__ = ["DEFAULT_DIRECTION", "AUTO_DIRECTION_THRESHOLD", "select_direction"]
