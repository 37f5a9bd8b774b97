"""
Common types for the workflow layout engine.

This module provides the input and output model of the engine:
- WorkflowNode / WorkflowEdge: immutable graph input
- Direction: layout orientation
- LayoutOptions: validated layout configuration
- Point / PositionedNode / PositionedEdge / LayoutResult: layout output

Positioned nodes use a top-left anchor: ``(x, y)`` is the top-left corner
of the node's bounding box.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, NamedTuple, Optional, Union

if TYPE_CHECKING:
    from typing_extensions import Self

from .validation import (
    InvalidOptionsError,
    validate_flag,
    validate_non_negative_int,
    validate_positive,
)

NodeId = Union[str, int]
"""Identity of a workflow node (the step code in the workflow definition)."""


class Direction(str, Enum):
    """
    Layout orientation.

    - TB: ranks flow top to bottom
    - LR: ranks flow left to right
    - BT: ranks flow bottom to top
    - RL: ranks flow right to left
    """

    TB = "TB"
    LR = "LR"
    BT = "BT"
    RL = "RL"

    @property
    def is_vertical(self) -> bool:
        """True when ranks are laid out along the vertical axis."""
        return self in (Direction.TB, Direction.BT)

    @property
    def is_reversed(self) -> bool:
        """True when the rank axis runs against screen coordinates."""
        return self in (Direction.BT, Direction.RL)

    @classmethod
    def parse(cls, value: Union[Direction, str]) -> Direction:
        """
        Parse a direction from an enum member, a code or a long name.

        Raises:
            InvalidOptionsError: If the value is not a known direction
        """
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            key = value.strip()
            if key.upper() in cls.__members__:
                return cls[key.upper()]
            if key.lower() in _LONG_NAMES:
                return _LONG_NAMES[key.lower()]
        valid = sorted(cls.__members__) + sorted(_LONG_NAMES)
        raise InvalidOptionsError(f"direction must be one of {valid}, got {value!r}")


_LONG_NAMES: dict[str, Direction] = {
    "top-to-bottom": Direction.TB,
    "left-to-right": Direction.LR,
    "bottom-to-top": Direction.BT,
    "right-to-left": Direction.RL,
}


@dataclass(frozen=True)
class WorkflowNode:
    """
    A workflow step as seen by the layout engine.

    Attributes:
        id: Unique node id
        kind: Step type (opaque to the engine)
        label: Display label
        width: Node width, or None for the configured default
        height: Node height, or None for the configured default
        data: Opaque payload carried for the caller
    """

    id: NodeId
    kind: str = "default"
    label: str = ""
    width: Optional[float] = None
    height: Optional[float] = None
    data: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class WorkflowEdge:
    """A transition between two workflow steps."""

    source: NodeId
    target: NodeId
    id: Optional[str] = None
    label: Optional[str] = None
    data: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class LayoutOptions:
    """
    Layout configuration.

    Attributes:
        direction: Forced direction, or None to let the selector decide
        node_width: Default width for nodes without one
        node_height: Default height for nodes without one
        rank_spacing: Gap between consecutive rank bands
        node_spacing: Gap between neighbouring nodes in a layer
        auto_direction: Choose the direction from the graph size when no
            direction is forced
        auto_direction_threshold: Node count from which auto direction
            switches from TB to LR
        crossing_iterations: Number of barycenter sweeps
        component_spacing: Gap between disconnected components
        parallel_edge_spacing: Lateral offset between parallel edges
        back_edge_spacing: Distance between feedback edge lanes

    Raises:
        InvalidOptionsError: On construction, if any value is invalid.
    """

    direction: Optional[Direction] = None
    node_width: float = 250.0
    node_height: float = 100.0
    rank_spacing: float = 100.0
    node_spacing: float = 80.0
    auto_direction: bool = True
    auto_direction_threshold: int = 5
    crossing_iterations: int = 24
    component_spacing: float = 120.0
    parallel_edge_spacing: float = 12.0
    back_edge_spacing: float = 30.0

    def __post_init__(self) -> None:
        if self.direction is not None:
            object.__setattr__(self, "direction", Direction.parse(self.direction))
        for name in _POSITIVE_FIELDS:
            object.__setattr__(self, name, validate_positive(name, getattr(self, name)))
        validate_flag("auto_direction", self.auto_direction)
        validate_non_negative_int("auto_direction_threshold", self.auto_direction_threshold, 1)
        validate_non_negative_int("crossing_iterations", self.crossing_iterations)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Self:
        """
        Build options from a mapping of camelCase or snake_case keys.

        ``None`` values fall back to the defaults.

        Raises:
            InvalidOptionsError: On unknown keys or invalid values
        """
        return cls().merged(**mapping)

    def merged(self, **overrides: Any) -> Self:
        """
        Return a copy with the given options replaced.

        Keys may be field names or their camelCase aliases; None values are
        ignored.
        """
        known = {f.name for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise InvalidOptionsError(f"Unknown layout option {key!r}")
            if value is not None:
                changes[name] = value
        return replace(self, **changes)


_POSITIVE_FIELDS = (
    "node_width",
    "node_height",
    "rank_spacing",
    "node_spacing",
    "component_spacing",
    "parallel_edge_spacing",
    "back_edge_spacing",
)

_OPTION_ALIASES: dict[str, str] = {
    "nodeWidth": "node_width",
    "nodeHeight": "node_height",
    "rankSpacing": "rank_spacing",
    "rankSep": "rank_spacing",
    "nodeSpacing": "node_spacing",
    "nodeSep": "node_spacing",
    "autoDirection": "auto_direction",
    "autoDirectionThreshold": "auto_direction_threshold",
    "crossingIterations": "crossing_iterations",
    "componentSpacing": "component_spacing",
    "parallelEdgeSpacing": "parallel_edge_spacing",
    "backEdgeSpacing": "back_edge_spacing",
}


class Point(NamedTuple):
    """An (x, y) waypoint."""

    x: float
    y: float


@dataclass(frozen=True)
class PositionedNode:
    """A node with its computed top-left position, size, rank and order."""

    id: NodeId
    x: float
    y: float
    width: float
    height: float
    rank: int
    order: int
    kind: str = "default"

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def overlaps(self, other: PositionedNode) -> bool:
        """Check whether the two bounding boxes intersect (touching is not overlap)."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


@dataclass(frozen=True)
class PositionedEdge:
    """
    A routed edge.

    Attributes:
        id: Edge id (given or generated)
        source: Source node id
        target: Target node id
        waypoints: Path from the source anchor to the target anchor
        label: Edge label
        feedback: True if the edge was excluded from ranking to break a cycle
        parallel_index: Position among edges sharing the same source/target
    """

    id: str
    source: NodeId
    target: NodeId
    waypoints: tuple[Point, ...]
    label: Optional[str] = None
    feedback: bool = False
    parallel_index: int = 0


@dataclass(frozen=True)
class LayoutResult:
    """
    Output of a layout computation.

    Nodes and edges are listed in input order. ``width``/``height`` cover
    the node boxes; feedback detours may extend beyond them.
    """

    nodes: tuple[PositionedNode, ...]
    edges: tuple[PositionedEdge, ...]
    direction: Direction
    width: float = 0.0
    height: float = 0.0

    def node(self, node_id: NodeId) -> PositionedNode:
        """Look up a positioned node by id (KeyError if absent)."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    def edge(self, edge_id: str) -> PositionedEdge:
        """Look up a routed edge by id (KeyError if absent)."""
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        raise KeyError(edge_id)

    @property
    def ranks(self) -> dict[NodeId, int]:
        """Mapping of node id to rank."""
        return {node.id: node.rank for node in self.nodes}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-ready primitives for the rendering front-end."""
        return {
            "direction": self.direction.value,
            "width": self.width,
            "height": self.height,
            "nodes": [
                {
                    "id": n.id,
                    "x": n.x,
                    "y": n.y,
                    "width": n.width,
                    "height": n.height,
                    "rank": n.rank,
                    "order": n.order,
                }
                for n in self.nodes
            ],
            "edges": [
                {
                    "id": e.id,
                    "source": e.source,
                    "target": e.target,
                    "label": e.label,
                    "feedback": e.feedback,
                    "waypoints": [{"x": p.x, "y": p.y} for p in e.waypoints],
                }
                for e in self.edges
            ],
        }


NodeLike = Union[WorkflowNode, Mapping[str, Any], Any]
"""Input type for nodes: WorkflowNode, dicts, or objects with node attributes."""

EdgeLike = Union[WorkflowEdge, Mapping[str, Any], Any]
"""Input type for edges: WorkflowEdge, dicts, or objects with source/target."""

OptionsLike = Union[LayoutOptions, Mapping[str, Any], None]
"""Input type for options: LayoutOptions, a mapping of option names, or None."""


__all__ = [
    "NodeId",
    "Direction",
    "WorkflowNode",
    "WorkflowEdge",
    "LayoutOptions",
    "Point",
    "PositionedNode",
    "PositionedEdge",
    "LayoutResult",
    "NodeLike",
    "EdgeLike",
    "OptionsLike",
]
