"""
Route every edge of a positioned graph in one call.

For each edge the obstacles are the bounding boxes of all nodes except the
edge's own source and target, so an edge is never asked to avoid the nodes
it connects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from edge_routing.models import Point, PortSide, Rect, RoutedEdge, Size
from edge_routing.routers import EdgeRouter, OptionsArg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphNode:
    """A positioned node: center plus size."""
    id: str
    center: Point
    size: Size

    @property
    def bounds(self) -> Rect:
        return Rect.from_center(self.center, self.size)


@dataclass(frozen=True)
class GraphEdge:
    """A connection to route.  Sides default from the layout direction."""
    id: str
    source: str
    target: str
    source_side: Optional[PortSide] = None
    target_side: Optional[PortSide] = None


# (exit side, entry side) per layout direction
_DEFAULT_SIDES: dict[str, tuple[PortSide, PortSide]] = {
    "TB": (PortSide.BOTTOM, PortSide.TOP),
    "BT": (PortSide.TOP, PortSide.BOTTOM),
    "LR": (PortSide.RIGHT, PortSide.LEFT),
    "RL": (PortSide.LEFT, PortSide.RIGHT),
}


def default_sides(direction: str = "TB") -> tuple[PortSide, PortSide]:
    """Return ``(exit_side, entry_side)`` for a layout direction."""
    key = direction.strip().upper()
    if key not in _DEFAULT_SIDES:
        choices = ", ".join(sorted(_DEFAULT_SIDES))
        raise ValueError(f"Unknown direction '{direction}'. Valid: {choices}.")
    return _DEFAULT_SIDES[key]


def obstacles_for_edge(
    nodes: Sequence[GraphNode],
    source: str,
    target: str,
) -> list[Rect]:
    """Bounding boxes of every node except *source* and *target*."""
    return [n.bounds for n in nodes if n.id != source and n.id != target]


def route_graph(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    router: EdgeRouter,
    direction: str = "TB",
    options: OptionsArg = None,
) -> list[RoutedEdge]:
    """Route all *edges* with *router*.

    Edges whose source or target is not among *nodes* are skipped.

    Returns:
        One RoutedEdge per routable edge, in input order.
    """
    exit_side, entry_side = default_sides(direction)
    by_id = {n.id: n for n in nodes}

    routed: list[RoutedEdge] = []
    for edge in edges:
        src = by_id.get(edge.source)
        tgt = by_id.get(edge.target)
        if src is None or tgt is None:
            logger.info(
                "Skipping edge '%s': unknown endpoint (%s -> %s)",
                edge.id, edge.source, edge.target,
            )
            continue

        points = router.route(
            src.center,
            src.size,
            edge.source_side or exit_side,
            tgt.center,
            tgt.size,
            edge.target_side or entry_side,
            obstacles=obstacles_for_edge(nodes, edge.source, edge.target),
            options=options,
        )
        routed.append(RoutedEdge(edge_id=edge.id, points=tuple(points)))

    logger.debug("Routed %d of %d edge(s) with %s", len(routed), len(edges), router.name)
    return routed
