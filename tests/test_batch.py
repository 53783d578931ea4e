"""Tests for routing every edge of a positioned graph."""

import pytest

from edge_routing.batch import (
    GraphEdge,
    GraphNode,
    default_sides,
    obstacles_for_edge,
    route_graph,
)
from edge_routing.models import Point, PortSide, Rect, Size
from edge_routing.routers import DirectRouter, OrthogonalRouter


def _column() -> list[GraphNode]:
    """A above C above B, all 100x40, centers 100 apart."""
    size = Size(100, 40)
    return [
        GraphNode("A", Point(0, 0), size),
        GraphNode("B", Point(0, 200), size),
        GraphNode("C", Point(0, 100), size),
    ]


class TestObstacles:

    def test_excludes_edge_endpoints(self) -> None:
        obstacles = obstacles_for_edge(_column(), "A", "B")
        assert obstacles == [Rect(-50, 80, 100, 40)]

    def test_node_bounds(self) -> None:
        node = GraphNode("n", Point(10, 20), Size(40, 10))
        assert node.bounds == Rect(-10, 15, 40, 10)


class TestDefaultSides:

    def test_directions(self) -> None:
        assert default_sides("TB") == (PortSide.BOTTOM, PortSide.TOP)
        assert default_sides("bt") == (PortSide.TOP, PortSide.BOTTOM)
        assert default_sides("LR") == (PortSide.RIGHT, PortSide.LEFT)
        assert default_sides("RL") == (PortSide.LEFT, PortSide.RIGHT)

    def test_unknown_direction(self) -> None:
        with pytest.raises(ValueError, match="Unknown direction"):
            default_sides("diagonal")


class TestRouteGraph:

    def test_edge_avoids_node_in_between(self) -> None:
        nodes = _column()
        routed = route_graph(
            nodes, [GraphEdge("e1", "A", "B")], OrthogonalRouter(use_pathfinding=True),
        )

        assert len(routed) == 1
        edge = routed[0]
        assert edge.edge_id == "e1"
        assert edge.points[0] == Point(0, 20)
        assert edge.points[-1] == Point(0, 180)
        assert edge.has_bends

        blocker = nodes[2].bounds
        for a, b in zip(edge.points, edge.points[1:]):
            assert a.x == b.x or a.y == b.y
            if a.x == b.x:
                crosses = blocker.x < a.x < blocker.right and min(a.y, b.y) < blocker.bottom and max(a.y, b.y) > blocker.y
            else:
                crosses = blocker.y < a.y < blocker.bottom and min(a.x, b.x) < blocker.right and max(a.x, b.x) > blocker.x
            assert not crosses

    def test_direct_router_is_straight(self) -> None:
        routed = route_graph(_column(), [GraphEdge("e1", "A", "B")], DirectRouter())
        assert routed[0].is_straight
        assert routed[0].points == (Point(0, 20), Point(0, 180))

    def test_explicit_sides_override_direction(self) -> None:
        edge = GraphEdge("e1", "A", "C", source_side=PortSide.RIGHT, target_side=PortSide.RIGHT)
        routed = route_graph(_column(), [edge], OrthogonalRouter())
        assert routed[0].points[0] == Point(50, 0)
        assert routed[0].points[-1] == Point(50, 100)

    def test_lr_direction(self) -> None:
        nodes = [
            GraphNode("L", Point(0, 0), Size(40, 40)),
            GraphNode("R", Point(200, 0), Size(40, 40)),
        ]
        routed = route_graph(nodes, [GraphEdge("e", "L", "R")], OrthogonalRouter(), direction="LR")
        assert routed[0].points == (Point(20, 0), Point(180, 0))

    def test_unknown_endpoint_skipped(self) -> None:
        edges = [GraphEdge("bad", "A", "Z"), GraphEdge("good", "A", "C")]
        routed = route_graph(_column(), edges, DirectRouter())
        assert [r.edge_id for r in routed] == ["good"]

    def test_options_passed_through(self) -> None:
        plain = route_graph(_column(), [GraphEdge("e1", "A", "B")], OrthogonalRouter())
        astar = route_graph(
            _column(), [GraphEdge("e1", "A", "B")], OrthogonalRouter(),
            options={"usePathfinding": True},
        )
        assert plain[0].is_straight
        assert astar[0].has_bends
