"""
workflow-layout: deterministic layered layout for workflow graphs.

This package positions the steps and transitions of business-process
templates (approval chains, branches, parallel paths) for rendering.

Pipeline:
- graph: normalize and validate nodes/edges
- direction: choose TB/LR/BT/RL
- layering: rank nodes, breaking cycles with feedback edges
- ordering: barycenter crossing minimization
- coordinates: concrete positions per direction
- routing: polyline waypoints per edge
- engine: compute_layout(), the single entry point
"""

__version__ = "0.1.0"

from .cache import LayoutCache, layout_cache_key
from .direction import AUTO_DIRECTION_THRESHOLD, DEFAULT_DIRECTION, select_direction
from .engine import compute_layout, resolve_options
from .geometry import bounding_box, center_in_viewport, node_dimensions, translate
from .graph import GraphEdge, InternalGraph, build_graph
from .layering import Layering, assign_layers
from .ordering import Ordering, count_crossings, order_layers
from .types import (
    Direction,
    EdgeLike,
    LayoutOptions,
    LayoutResult,
    NodeId,
    NodeLike,
    OptionsLike,
    Point,
    PositionedEdge,
    PositionedNode,
    WorkflowEdge,
    WorkflowNode,
)
from .validation import (
    DanglingEdgeError,
    DuplicateEdgeError,
    DuplicateNodeError,
    GraphError,
    InvalidDimensionError,
    InvalidNodeError,
    InvalidOptionsError,
    ValidationError,
)
from .workflow import WorkflowGraph, layout_workflow_graph, parse_workflow_graph

__all__ = [
    # Version
    "__version__",
    # Facade
    "compute_layout",
    "resolve_options",
    # Types
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
    # Pipeline phases
    "build_graph",
    "InternalGraph",
    "GraphEdge",
    "select_direction",
    "DEFAULT_DIRECTION",
    "AUTO_DIRECTION_THRESHOLD",
    "assign_layers",
    "Layering",
    "order_layers",
    "Ordering",
    "count_crossings",
    # Geometry
    "node_dimensions",
    "bounding_box",
    "translate",
    "center_in_viewport",
    # Workflow payloads
    "WorkflowGraph",
    "parse_workflow_graph",
    "layout_workflow_graph",
    # Caching
    "LayoutCache",
    "layout_cache_key",
    # Errors
    "ValidationError",
    "InvalidOptionsError",
    "GraphError",
    "InvalidNodeError",
    "InvalidDimensionError",
    "DuplicateNodeError",
    "DuplicateEdgeError",
    "DanglingEdgeError",
]
