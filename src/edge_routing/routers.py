"""
Edge routing strategies.

Every router answers the same question: given two nodes (center, size and
the side each edge attaches to) and an optional list of obstacle
rectangles, which points should the edge pass through?

- DirectRouter     — straight segment between the two ports
- CurvedRouter     — cubic Bezier control points pushed out of each port
- OrthogonalRouter — right-angle paths, either via a fixed midpoint or,
                     with pathfinding enabled, via A* around obstacles

Routers are stateless; concurrent calls on the same instance are safe.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from edge_routing.models import Point, PortSide, Rect, Size, port_position
from edge_routing.pathfinding import route_on_grid, simplify_path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_GRID_SIZE = 10.0
DEFAULT_PADDING = 20.0


@dataclass(frozen=True)
class RoutingOptions:
    """Options recognised by the routers."""
    use_pathfinding: bool = False
    grid_size: float = DEFAULT_GRID_SIZE  # Cell edge length for A*
    corner_radius: float = 0.0            # Rendering hint only, never used for routing
    padding: float = DEFAULT_PADDING      # Clearance added around every obstacle

    @classmethod
    def from_mapping(
        cls,
        values: Mapping[str, Any],
        base: Optional[RoutingOptions] = None,
    ) -> RoutingOptions:
        """Build options from a dict, accepting camelCase or snake_case keys.

        Keys missing from *values* keep their value from *base*.  Unknown
        keys are ignored, and so is a non-boolean pathfinding flag.
        """
        updates: dict[str, Any] = {}
        for key, value in values.items():
            attr = _OPTION_KEYS.get(key)
            if attr is None or value is None:
                continue
            if attr == "use_pathfinding" and not isinstance(value, bool):
                logger.warning("Ignoring non-boolean %s %r", key, value)
                continue
            updates[attr] = value
        return replace(base or cls(), **updates)

    def normalized(self) -> RoutingOptions:
        """Clamp values that would break grid mapping to safe ones."""
        grid_size = self.grid_size
        if not _is_finite_number(grid_size) or grid_size <= 0:
            logger.warning(
                "Invalid grid_size %r, using default %s", grid_size, DEFAULT_GRID_SIZE,
            )
            grid_size = DEFAULT_GRID_SIZE
        padding = self.padding
        if not _is_finite_number(padding) or padding < 0:
            logger.warning("Invalid padding %r, using 0", padding)
            padding = 0.0
        use_pathfinding = self.use_pathfinding
        if not isinstance(use_pathfinding, bool):
            logger.warning("Invalid use_pathfinding %r, using False", use_pathfinding)
            use_pathfinding = False
        corner_radius = self.corner_radius
        if not _is_finite_number(corner_radius) or corner_radius < 0:
            corner_radius = 0.0
        return RoutingOptions(
            use_pathfinding=use_pathfinding,
            grid_size=float(grid_size),
            corner_radius=float(corner_radius),
            padding=float(padding),
        )


_OPTION_KEYS = {
    "usePathfinding": "use_pathfinding",
    "use_pathfinding": "use_pathfinding",
    "gridSize": "grid_size",
    "grid_size": "grid_size",
    "cornerRadius": "corner_radius",
    "corner_radius": "corner_radius",
    "padding": "padding",
}

OptionsArg = Union[RoutingOptions, Mapping[str, Any], None]


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


# ---------------------------------------------------------------------------
# Router interface
# ---------------------------------------------------------------------------

class EdgeRouter(Protocol):
    """Shared contract of all routing strategies."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    def route(
        self,
        start: Point,
        start_size: Size,
        start_side: PortSide,
        end: Point,
        end_size: Size,
        end_side: PortSide,
        obstacles: Sequence[Rect] = (),
        options: OptionsArg = None,
    ) -> list[Point]:
        """Route one edge between the port positions of two nodes.

        Args:
            start: Center of the source node.
            start_size: Size of the source node.
            start_side: Side of the source node the edge leaves from.
            end: Center of the target node.
            end_size: Size of the target node.
            end_side: Side of the target node the edge enters.
            obstacles: Bounding boxes of other nodes to avoid.
            options: Router-specific overrides.

        Returns:
            Points from the source port to the target port (at least two).
        """
        ...


# ---------------------------------------------------------------------------
# Direct
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DirectRouter:
    """Straight line between the two ports; obstacles and options are ignored."""

    @property
    def name(self) -> str:
        return "Straight"

    @property
    def description(self) -> str:
        return "Direct line between nodes"

    def route(
        self,
        start: Point,
        start_size: Size,
        start_side: PortSide,
        end: Point,
        end_size: Size,
        end_side: PortSide,
        obstacles: Sequence[Rect] = (),
        options: OptionsArg = None,
    ) -> list[Point]:
        return [
            port_position(start, start_size, start_side),
            port_position(end, end_size, end_side),
        ]


# ---------------------------------------------------------------------------
# Curved
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CurvedRouter:
    """Cubic Bezier between the ports.

    Returns ``[start_port, cp1, cp2, end_port]``.  Control points sit on the
    outward normal of each port, at a distance proportional to the port
    separation but never closer than ``min_control_distance``.
    """
    curvature: float = 0.5
    min_control_distance: float = 30.0

    @property
    def name(self) -> str:
        return "Curved"

    @property
    def description(self) -> str:
        return "Bezier curves with smooth bends"

    def route(
        self,
        start: Point,
        start_size: Size,
        start_side: PortSide,
        end: Point,
        end_size: Size,
        end_side: PortSide,
        obstacles: Sequence[Rect] = (),
        options: OptionsArg = None,
    ) -> list[Point]:
        start_port = port_position(start, start_size, start_side)
        end_port = port_position(end, end_size, end_side)

        control = max(start_port.distance_to(end_port) * self.curvature,
                      self.min_control_distance)
        sdx, sdy = start_side.outward
        edx, edy = end_side.outward
        cp1 = Point(start_port.x + sdx * control, start_port.y + sdy * control)
        cp2 = Point(end_port.x + edx * control, end_port.y + edy * control)
        return [start_port, cp1, cp2, end_port]


# ---------------------------------------------------------------------------
# Orthogonal
# ---------------------------------------------------------------------------

def route_simple(
    start: Point,
    start_side: PortSide,
    end: Point,
    end_side: PortSide,
) -> list[Point]:
    """Right-angle path between two port positions via a fixed midpoint.

    Both ports horizontal: bend twice on the x-midpoint.  Both vertical:
    bend twice on the y-midpoint.  Mixed: one bend where the straight-out
    lines of the two ports cross.
    """
    points = [start]
    start_h = start_side.is_horizontal
    end_h = end_side.is_horizontal

    if start_h == end_h:
        if start_h:
            mid_x = (start.x + end.x) / 2
            points.append(Point(mid_x, start.y))
            points.append(Point(mid_x, end.y))
        else:
            mid_y = (start.y + end.y) / 2
            points.append(Point(start.x, mid_y))
            points.append(Point(end.x, mid_y))
    elif start_h:
        points.append(Point(end.x, start.y))
    else:
        points.append(Point(start.x, end.y))

    points.append(end)
    # Aligned ports collapse a bend onto a neighbour; drop the zero-length legs.
    return simplify_path(points, tolerance=0.0)


@dataclass(frozen=True)
class OrthogonalRouter:
    """Right-angle edges, optionally routed around obstacles with A*.

    Without pathfinding (or without obstacles) the simple midpoint route is
    used.  With pathfinding, a failed search silently falls back to that
    same simple route, so a valid path is always returned.
    """
    use_pathfinding: bool = False
    grid_size: float = DEFAULT_GRID_SIZE
    corner_radius: float = 0.0
    padding: float = DEFAULT_PADDING

    @property
    def name(self) -> str:
        return "Orthogonal (A*)" if self.use_pathfinding else "Orthogonal"

    @property
    def description(self) -> str:
        if self.use_pathfinding:
            return "Right-angle edges with obstacle avoidance"
        return "Right-angle edges via midpoint"

    @property
    def defaults(self) -> RoutingOptions:
        return RoutingOptions(
            use_pathfinding=self.use_pathfinding,
            grid_size=self.grid_size,
            corner_radius=self.corner_radius,
            padding=self.padding,
        )

    def resolve_options(self, options: OptionsArg = None) -> RoutingOptions:
        """Merge per-call *options* over this router's defaults."""
        if options is None:
            opts = self.defaults
        elif isinstance(options, RoutingOptions):
            opts = options
        else:
            opts = RoutingOptions.from_mapping(options, base=self.defaults)
        return opts.normalized()

    def route(
        self,
        start: Point,
        start_size: Size,
        start_side: PortSide,
        end: Point,
        end_size: Size,
        end_side: PortSide,
        obstacles: Sequence[Rect] = (),
        options: OptionsArg = None,
    ) -> list[Point]:
        opts = self.resolve_options(options)
        start_port = port_position(start, start_size, start_side)
        end_port = port_position(end, end_size, end_side)

        if opts.use_pathfinding and obstacles:
            path = route_on_grid(
                start_port, start_side, end_port, end_side,
                obstacles, opts.grid_size, opts.padding,
            )
            if path is not None:
                return path
            logger.debug(
                "No grid path from %s to %s around %d obstacle(s); using midpoint route",
                start_port, end_port, len(obstacles),
            )

        return route_simple(start_port, start_side, end_port, end_side)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_ROUTER_ALIASES = {
    "direct": "straight",
    "bezier": "curved",
    "simple": "orthogonal",
    "astar": "orthogonal (a*)",
    "a*": "orthogonal (a*)",
    "pathfinding": "orthogonal (a*)",
}


def available_routers() -> list[EdgeRouter]:
    """All routing strategies, in picker order."""
    return [
        DirectRouter(),
        CurvedRouter(),
        OrthogonalRouter(),
        OrthogonalRouter(use_pathfinding=True),
    ]


def get_router(name: str) -> EdgeRouter:
    """Look up a router by its display name (case-insensitive) or alias."""
    key = name.strip().lower()
    key = _ROUTER_ALIASES.get(key, key)
    for router in available_routers():
        if router.name.lower() == key:
            return router
    choices = ", ".join(r.name for r in available_routers())
    raise KeyError(f"Unknown router '{name}'. Available: {choices}.")
