"""
Layout engine facade.

``compute_layout`` runs the full pipeline:

1. Graph model building and validation
2. Direction selection
3. Layer assignment (with cycle breaking)
4. Crossing minimization
5. Coordinate assignment
6. Edge routing

It is a pure function: each call builds its own working structures and
returns a fresh LayoutResult, or raises before producing anything.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .coordinates import assign_coordinates
from .direction import DEFAULT_DIRECTION, select_direction
from .graph import build_graph
from .layering import assign_layers
from .ordering import order_layers
from .routing import route_edges
from .types import EdgeLike, LayoutOptions, LayoutResult, NodeLike, OptionsLike
from .validation import InvalidOptionsError


def resolve_options(options: OptionsLike = None, **overrides: Any) -> LayoutOptions:
    """
    Normalize the accepted option forms into a validated LayoutOptions.

    Args:
        options: LayoutOptions, a mapping of option names (camelCase or
            snake_case), or None for defaults
        **overrides: Individual options applied on top

    Raises:
        InvalidOptionsError: On unknown option names or invalid values
    """
    if options is None:
        resolved = LayoutOptions()
    elif isinstance(options, LayoutOptions):
        resolved = options
    elif isinstance(options, Mapping):
        resolved = LayoutOptions.from_mapping(options)
    else:
        raise InvalidOptionsError(
            f"options must be LayoutOptions, a mapping or None, got {type(options).__name__}"
        )
    if overrides:
        resolved = resolved.merged(**overrides)
    return resolved


def compute_layout(
    nodes: Sequence[NodeLike],
    edges: Sequence[EdgeLike] = (),
    options: OptionsLike = None,
    **overrides: Any,
) -> LayoutResult:
    """
    Compute a layered layout for a workflow graph.

    Example:
        result = compute_layout(
            nodes=[{"id": "A"}, {"id": "B"}, {"id": "C"}],
            edges=[{"source": "A", "target": "B"}, {"source": "B", "target": "C"}],
            options={"direction": "LR", "nodeSpacing": 40},
        )
        for node in result.nodes:
            print(node.id, node.x, node.y)

    Args:
        nodes: Node-likes (WorkflowNode, dicts or objects with ``id``)
        edges: Edge-likes (WorkflowEdge, dicts or objects with
            ``source``/``target``)
        options: LayoutOptions, a mapping of options, or None
        **overrides: Individual options applied on top of ``options``

    Returns:
        LayoutResult with positioned nodes, routed edges and the direction
        actually used.

    Raises:
        InvalidOptionsError: If the options are invalid
        DanglingEdgeError: If an edge references an unknown node
        GraphError: If the nodes or edges are otherwise malformed
    """
    opts = resolve_options(options, **overrides)
    graph = build_graph(nodes, edges)

    if len(graph) == 0:
        return LayoutResult(nodes=(), edges=(), direction=DEFAULT_DIRECTION)

    direction = select_direction(
        len(graph),
        explicit_direction=opts.direction,
        auto_direction=opts.auto_direction,
        threshold=opts.auto_direction_threshold,
    )

    layering = assign_layers(graph)
    ordering = order_layers(graph, layering, iterations=opts.crossing_iterations)
    placement = assign_coordinates(graph, layering, ordering, opts, direction)
    routed = route_edges(graph, layering, placement.nodes, direction, opts)

    return LayoutResult(
        nodes=tuple(placement.nodes),
        edges=tuple(routed),
        direction=direction,
        width=placement.width,
        height=placement.height,
    )


__all__ = ["compute_layout", "resolve_options"]
