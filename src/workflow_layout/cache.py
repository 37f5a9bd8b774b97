"""
Memoization of layout results for embedding applications.

The engine itself is stateless. Editors that re-render often can wrap it in
a LayoutCache, keyed by a content hash of everything that influences the
result, so layouts are recomputed only when the graph or options change.
"""

from __future__ import annotations

import hashlib
import json
import threading
from collections import OrderedDict
from dataclasses import asdict
from typing import Any, Sequence

from .engine import compute_layout, resolve_options
from .graph import normalize_edge, normalize_node
from .types import EdgeLike, LayoutOptions, LayoutResult, NodeLike, OptionsLike
from .validation import validate_non_negative_int


def layout_cache_key(
    nodes: Sequence[NodeLike],
    edges: Sequence[EdgeLike],
    options: LayoutOptions,
) -> str:
    """
    Compute a content hash for a layout request.

    Covers node ids, kinds and sizes, edge ids, endpoints and labels, and
    every option. Labels of nodes do not influence the layout and are left
    out.

    Returns:
        64-character hex string (SHA-256 hash)
    """
    canonical = {
        "nodes": [
            [n.id, n.kind, n.width, n.height] for n in (normalize_node(node) for node in nodes)
        ],
        "edges": [
            [e.id, e.source, e.target, e.label] for e in (normalize_edge(edge) for edge in edges)
        ],
        "options": {
            key: (value.value if key == "direction" and value is not None else value)
            for key, value in asdict(options).items()
        },
    }
    canonical_json = json.dumps(canonical, sort_keys=True, separators=(",", ":"), default=repr)
    return hashlib.sha256(canonical_json.encode()).hexdigest()


class LayoutCache:
    """
    Thread-safe LRU cache of LayoutResults.

    Example:
        cache = LayoutCache(maxsize=32)
        result = cache.get_or_compute(nodes, edges, {"direction": "LR"})
    """

    def __init__(self, maxsize: int = 128) -> None:
        self._maxsize = validate_non_negative_int("maxsize", maxsize, 1)
        self._entries: OrderedDict[str, LayoutResult] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_or_compute(
        self,
        nodes: Sequence[NodeLike],
        edges: Sequence[EdgeLike] = (),
        options: OptionsLike = None,
        **overrides: Any,
    ) -> LayoutResult:
        """
        Return the cached layout for this input, computing it on a miss.

        Failed computations raise and are not cached.
        """
        opts = resolve_options(options, **overrides)
        key = layout_cache_key(nodes, edges, opts)

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached
            self.misses += 1

        result = compute_layout(nodes, edges, opts)

        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self._maxsize:
                self._entries.popitem(last=False)
        return result

    def clear(self) -> None:
        """Drop all cached layouts and reset the counters."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0


__all__ = ["LayoutCache", "layout_cache_key"]
