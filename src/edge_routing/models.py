"""
Core geometry model classes for edge routing.

Provides small immutable value types (points, sizes, rectangles) plus the
port geometry every router shares: where an edge leaves or enters a
rectangular node given its center, size and side.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PortSide(Enum):
    """Which side of a node an edge attaches to."""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_horizontal(self) -> bool:
        """True for sides whose edges leave horizontally (left/right)."""
        return self in (PortSide.LEFT, PortSide.RIGHT)

    @property
    def outward(self) -> tuple[float, float]:
        """Unit vector pointing away from the node through this side."""
        return _OUTWARD[self]


class Direction(Enum):
    """A single orthogonal step on the routing grid (screen coordinates, y down)."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def from_side(cls, side: PortSide) -> Direction:
        """Initial travel direction for a path leaving through *side*."""
        return _SIDE_DIRECTION[side]


_OUTWARD: dict[PortSide, tuple[float, float]] = {
    PortSide.TOP: (0.0, -1.0),
    PortSide.BOTTOM: (0.0, 1.0),
    PortSide.LEFT: (-1.0, 0.0),
    PortSide.RIGHT: (1.0, 0.0),
}

_SIDE_DIRECTION: dict[PortSide, Direction] = {
    PortSide.TOP: Direction.UP,
    PortSide.BOTTOM: Direction.DOWN,
    PortSide.LEFT: Direction.LEFT,
    PortSide.RIGHT: Direction.RIGHT,
}


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point:
    """A 2-D coordinate."""
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def to_list(self) -> list[float]:
        return [self.x, self.y]


@dataclass(frozen=True)
class Size:
    """Width and height of a node."""
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle, stored as top-left corner plus size."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_center(cls, center: Point, size: Size) -> Rect:
        return cls(
            center.x - size.width / 2,
            center.y - size.height / 2,
            size.width,
            size.height,
        )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def cx(self) -> float:
        return self.x + self.width / 2

    @property
    def cy(self) -> float:
        return self.y + self.height / 2

    def inflate(self, amount: float) -> Rect:
        """Return a copy grown outward by *amount* on every side."""
        return Rect(
            self.x - amount,
            self.y - amount,
            self.width + 2 * amount,
            self.height + 2 * amount,
        )

    def intersects(self, other: Rect, margin: float = 0) -> bool:
        """Check if two rectangles overlap (with optional margin)."""
        return not (
            self.right + margin <= other.x
            or other.right + margin <= self.x
            or self.bottom + margin <= other.y
            or other.bottom + margin <= self.y
        )

    def contains_point(self, px: float, py: float, margin: float = 0) -> bool:
        """Check if a point is inside this rectangle, boundary included."""
        return (
            self.x - margin <= px <= self.right + margin
            and self.y - margin <= py <= self.bottom + margin
        )


@dataclass(frozen=True)
class RoutedEdge:
    """The routed path for one edge.

    ``points`` runs from the source port to the target port; anything in
    between is a bend (orthogonal routers) or a control point (curved router).
    """
    edge_id: str
    points: tuple[Point, ...]

    @property
    def is_straight(self) -> bool:
        return len(self.points) == 2

    @property
    def has_bends(self) -> bool:
        return len(self.points) > 2

    @property
    def bend_count(self) -> int:
        return max(len(self.points) - 2, 0)

    @property
    def length(self) -> float:
        """Poly-line length through every point."""
        return sum(a.distance_to(b) for a, b in zip(self.points, self.points[1:]))

    def to_dict(self) -> dict:
        return {
            "edge_id": self.edge_id,
            "points": [p.to_list() for p in self.points],
            "is_straight": self.is_straight,
            "has_bends": self.has_bends,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def port_position(center: Point, size: Size, side: PortSide) -> Point:
    """Midpoint of the *side* of a node centered at *center*."""
    if side is PortSide.TOP:
        return Point(center.x, center.y - size.height / 2)
    if side is PortSide.BOTTOM:
        return Point(center.x, center.y + size.height / 2)
    if side is PortSide.LEFT:
        return Point(center.x - size.width / 2, center.y)
    return Point(center.x + size.width / 2, center.y)
