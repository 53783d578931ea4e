"""
Obstacle-aware orthogonal routing on a uniform grid.

Algorithm:
1. Inflate every obstacle by the padding and take the bounding region of
   both ports plus all inflated obstacles, widened by two cells per side.
2. Discretise that region into square cells of ``grid_size``.  The lattice
   is anchored on the source port, so the source cell center *is* the
   source port and every emitted waypoint shares exact coordinates with
   its axis-aligned neighbours.
3. A cell is blocked when its center lies inside (or on the border of) any
   inflated obstacle.
4. A* over the 4-connected grid.  Every step costs 1, plus a 0.5 penalty
   whenever the step changes direction, which steers the search towards
   paths with fewer bends.
5. Convert the winning cells back to world coordinates, attach the exact
   port positions and remove redundant collinear waypoints.

Search cost grows with the cell count, i.e. with (region size / grid_size)².
Callers routing across large regions should pick a coarser ``grid_size``.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from edge_routing.models import Direction, Point, PortSide, Rect

logger = logging.getLogger(__name__)

# Tolerance for treating two coordinates as equal when simplifying.
EPSILON = 0.01

STEP_COST = 1.0
BEND_PENALTY = 0.5
MARGIN_CELLS = 2

Cell = tuple[int, int]


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------

@dataclass
class RoutingGrid:
    """Finite cell lattice covering one routing call.

    Cells are addressed by integer ``(gx, gy)`` pairs relative to ``anchor``
    and stored in flat arrays indexed by :meth:`index`.
    """
    anchor: Point
    grid_size: float
    min_gx: int
    min_gy: int
    width: int
    height: int
    obstacles: tuple[Rect, ...]
    _blocked: list[Optional[bool]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self._blocked:
            self._blocked = [None] * (self.width * self.height)

    @classmethod
    def build(
        cls,
        start: Point,
        end: Point,
        obstacles: Sequence[Rect],
        grid_size: float,
        padding: float,
    ) -> RoutingGrid:
        inflated = tuple(obs.inflate(padding) for obs in obstacles)

        min_x = min(start.x, end.x)
        max_x = max(start.x, end.x)
        min_y = min(start.y, end.y)
        max_y = max(start.y, end.y)
        for obs in inflated:
            min_x = min(min_x, obs.x)
            max_x = max(max_x, obs.right)
            min_y = min(min_y, obs.y)
            max_y = max(max_y, obs.bottom)

        min_gx = math.floor((min_x - start.x) / grid_size) - MARGIN_CELLS
        max_gx = math.ceil((max_x - start.x) / grid_size) + MARGIN_CELLS
        min_gy = math.floor((min_y - start.y) / grid_size) - MARGIN_CELLS
        max_gy = math.ceil((max_y - start.y) / grid_size) + MARGIN_CELLS

        return cls(
            anchor=start,
            grid_size=grid_size,
            min_gx=min_gx,
            min_gy=min_gy,
            width=max_gx - min_gx + 1,
            height=max_gy - min_gy + 1,
            obstacles=inflated,
        )

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def to_grid(self, point: Point) -> Cell:
        return (
            round((point.x - self.anchor.x) / self.grid_size),
            round((point.y - self.anchor.y) / self.grid_size),
        )

    def to_world(self, gx: int, gy: int) -> Point:
        return Point(
            self.anchor.x + gx * self.grid_size,
            self.anchor.y + gy * self.grid_size,
        )

    def in_bounds(self, gx: int, gy: int) -> bool:
        return (
            self.min_gx <= gx < self.min_gx + self.width
            and self.min_gy <= gy < self.min_gy + self.height
        )

    def index(self, gx: int, gy: int) -> int:
        return (gx - self.min_gx) + (gy - self.min_gy) * self.width

    def cell_at(self, idx: int) -> Cell:
        row, col = divmod(idx, self.width)
        return col + self.min_gx, row + self.min_gy

    def is_blocked(self, gx: int, gy: int) -> bool:
        """True if the cell center lies within any inflated obstacle."""
        idx = self.index(gx, gy)
        blocked = self._blocked[idx]
        if blocked is None:
            center = self.to_world(gx, gy)
            blocked = any(
                obs.contains_point(center.x, center.y) for obs in self.obstacles
            )
            self._blocked[idx] = blocked
        return blocked


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def find_cell_path(
    grid: RoutingGrid,
    start: Cell,
    goal: Cell,
    initial_direction: Direction,
) -> Optional[list[Cell]]:
    """A* from *start* to *goal*; returns the cell sequence or ``None``.

    The open set is a binary heap ordered by ``(f, insertion order)``.  A
    cheaper path to a queued cell pushes a fresh entry; the stale one is
    skipped when it surfaces because the cell is already closed.
    """
    goal_x, goal_y = goal

    def _h(gx: int, gy: int) -> float:
        return float(abs(gx - goal_x) + abs(gy - goal_y))

    size = grid.cell_count
    g_score = [math.inf] * size
    came_from = [-1] * size
    closed = bytearray(size)

    start_idx = grid.index(*start)
    g_score[start_idx] = 0.0
    counter = itertools.count()
    open_set: list[tuple[float, int, int, Direction]] = []
    heapq.heappush(open_set, (_h(*start), next(counter), start_idx, initial_direction))

    expanded = 0
    while open_set:
        _, _, idx, direction = heapq.heappop(open_set)
        gx, gy = grid.cell_at(idx)
        if (gx, gy) == goal:
            logger.debug("A* reached goal after expanding %d of %d cells", expanded, size)
            return _reconstruct(grid, came_from, idx)

        if closed[idx]:
            continue
        closed[idx] = 1
        expanded += 1

        for step in Direction:
            nx, ny = gx + step.dx, gy + step.dy
            if not grid.in_bounds(nx, ny):
                continue
            n_idx = grid.index(nx, ny)
            if closed[n_idx] or grid.is_blocked(nx, ny):
                continue

            cost = STEP_COST if step is direction else STEP_COST + BEND_PENALTY
            tentative = g_score[idx] + cost
            if tentative < g_score[n_idx]:
                g_score[n_idx] = tentative
                came_from[n_idx] = idx
                heapq.heappush(
                    open_set,
                    (tentative + _h(nx, ny), next(counter), n_idx, step),
                )

    logger.debug("A* exhausted %d reachable cells without reaching goal", expanded)
    return None


def _reconstruct(grid: RoutingGrid, came_from: list[int], idx: int) -> list[Cell]:
    cells: list[Cell] = []
    while idx != -1:
        cells.append(grid.cell_at(idx))
        idx = came_from[idx]
    cells.reverse()
    return cells


def route_on_grid(
    start: Point,
    start_side: PortSide,
    end: Point,
    end_side: PortSide,
    obstacles: Sequence[Rect],
    grid_size: float,
    padding: float,
) -> Optional[list[Point]]:
    """Route between two port positions around *obstacles*.

    Returns the simplified orthogonal path, or ``None`` when no path exists
    at this grid resolution.
    """
    grid = RoutingGrid.build(start, end, obstacles, grid_size, padding)
    goal = grid.to_grid(end)
    cells = find_cell_path(grid, (0, 0), goal, Direction.from_side(start_side))
    if cells is None:
        return None

    points = [start]
    points.extend(grid.to_world(gx, gy) for gx, gy in cells)

    # The goal cell center is within half a cell of the end port; join them
    # with an elbow so the final segment arrives along the port's axis.
    last = points[-1]
    if end_side.is_horizontal:
        points.append(Point(last.x, end.y))
    else:
        points.append(Point(end.x, last.y))
    points.append(end)

    return simplify_path(points, tolerance=0.0)


# ---------------------------------------------------------------------------
# Simplification
# ---------------------------------------------------------------------------

def _same_point(a: Point, b: Point, tolerance: float) -> bool:
    return abs(a.x - b.x) <= tolerance and abs(a.y - b.y) <= tolerance


def simplify_path(
    path: Sequence[Point],
    tolerance: float = EPSILON,
) -> list[Point]:
    """Remove duplicate and collinear intermediate points from a path.

    Coordinates within *tolerance* of each other count as equal.  The
    first and last points are always kept verbatim.  Routers pass
    ``tolerance=0``: their waypoints carry exact lattice or port
    coordinates, and only exact merges keep every segment axis-aligned.
    """
    if len(path) <= 2:
        return list(path)

    deduped: list[Point] = [path[0]]
    for pt in path[1:-1]:
        if not _same_point(pt, deduped[-1], tolerance):
            deduped.append(pt)
    last = path[-1]
    if len(deduped) > 1 and _same_point(last, deduped[-1], tolerance):
        deduped[-1] = last
    else:
        deduped.append(last)

    result: list[Point] = [deduped[0]]
    for i in range(1, len(deduped) - 1):
        prev = result[-1]
        curr = deduped[i]
        nxt = deduped[i + 1]
        horizontal = abs(prev.y - curr.y) <= tolerance and abs(curr.y - nxt.y) <= tolerance
        vertical = abs(prev.x - curr.x) <= tolerance and abs(curr.x - nxt.x) <= tolerance
        if not (horizontal or vertical):
            result.append(curr)
    result.append(deduped[-1])
    return result
