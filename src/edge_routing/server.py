"""
Edge Routing MCP Server — compute edge paths between diagram nodes via
Model Context Protocol.

Exposes 3 tools:
  1. route_edge   — route one edge between two nodes, optionally around obstacles
  2. route_graph  — route every edge of a positioned graph
  3. list_routers — names and descriptions of the available strategies
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from edge_routing.batch import GraphEdge, GraphNode, route_graph as _route_graph
from edge_routing.models import Point, Rect, RoutedEdge, Size
from edge_routing.routers import EdgeRouter, available_routers, get_router
from edge_routing.validation import (
    ValidationError,
    validate_bool,
    validate_direction,
    validate_edge_dict,
    validate_list,
    validate_node_dict,
    validate_non_empty_string,
    validate_non_negative_number,
    validate_point,
    validate_positive_number,
    validate_rect,
    validate_side,
    validate_size,
)

# ---------------------------------------------------------------------------
# Logging: suppress routine FastMCP INFO messages on stderr.
# ---------------------------------------------------------------------------
logging.getLogger("mcp.server").setLevel(logging.WARNING)
logger = logging.getLogger("edge-routing-mcp")

# ---------------------------------------------------------------------------
# MCP Server
# ---------------------------------------------------------------------------
mcp = FastMCP(
    "edge-routing-mcp",
    instructions=(
        "MCP server that computes the poly-line path of a diagram edge.\n\n"
        "1. route_edge(start, start_size, start_side, end, end_size, end_side, ...)\n"
        "   — one edge; pass obstacles=[[x, y, w, h], ...] to avoid other nodes.\n"
        "2. route_graph(nodes, edges, ...) — every edge of a positioned graph;\n"
        "   each edge avoids all nodes except its own endpoints.\n"
        "3. list_routers() — available strategies.\n\n"
        "=== RULES ===\n"
        "- Node positions are CENTERS, not top-left corners.\n"
        "- Obstacles are top-left corner + size.\n"
        "- Sides: top, bottom, left, right.\n"
        "- Routers: straight, curved, orthogonal, orthogonal (a*).\n"
        "- Returned points start and end exactly on the node borders.\n"
    ),
)


# ===================================================================
# RESOURCES
# ===================================================================

@mcp.resource("edge-routing://routers")
def router_catalog() -> str:
    """Return all available routing strategies as a reference."""
    return _router_listing()


def _router_listing() -> str:
    return json.dumps(
        [{"name": r.name, "description": r.description} for r in available_routers()],
        indent=2,
    )


# ===================================================================
# Helpers
# ===================================================================

def _build_options(
    use_pathfinding: Any,
    grid_size: Any,
    corner_radius: Any,
    padding: Any,
) -> dict[str, Any]:
    """Validate the optional routing overrides; only given values are returned."""
    options: dict[str, Any] = {}
    if use_pathfinding is not None:
        options["use_pathfinding"] = validate_bool(use_pathfinding, "use_pathfinding")
    if grid_size is not None:
        options["grid_size"] = validate_positive_number(grid_size, "grid_size")
    if corner_radius is not None:
        options["corner_radius"] = validate_non_negative_number(corner_radius, "corner_radius")
    if padding is not None:
        options["padding"] = validate_non_negative_number(padding, "padding")
    return options


def _resolve_router(name: Any) -> EdgeRouter:
    name = validate_non_empty_string(name, "router")
    try:
        return get_router(name)
    except KeyError as exc:
        raise ValidationError(exc.args[0]) from exc


# ===================================================================
# TOOLS
# ===================================================================

@mcp.tool()
def route_edge(
    start: list[float] | dict[str, float],
    start_size: list[float] | dict[str, float],
    start_side: str,
    end: list[float] | dict[str, float],
    end_size: list[float] | dict[str, float],
    end_side: str,
    obstacles: Optional[list[Any]] = None,
    router: str = "orthogonal",
    use_pathfinding: Optional[bool] = None,
    grid_size: Optional[float] = None,
    corner_radius: Optional[float] = None,
    padding: Optional[float] = None,
    edge_id: str = "edge",
) -> str:
    """Route a single edge between two nodes.

    Args:
        start: Center of the source node, [x, y] or {"x", "y"}.
        start_size: Size of the source node, [w, h] or {"width", "height"}.
        start_side: Side the edge leaves the source from (top/bottom/left/right).
        end: Center of the target node.
        end_size: Size of the target node.
        end_side: Side the edge enters the target through.
        obstacles: Rectangles to avoid, [x, y, w, h] or {"x","y","width","height"}.
        router: straight, curved, orthogonal or "orthogonal (a*)".
        use_pathfinding: Override the router's A* setting (orthogonal only).
        grid_size: A* cell size (> 0, default 10).
        corner_radius: Rendering hint, echoed back unchanged.
        padding: Clearance around each obstacle (default 20).
        edge_id: Identifier echoed in the result.

    Returns:
        JSON with points, is_straight and has_bends.
    """
    try:
        chosen = _resolve_router(router)
        src = validate_point(start, "start")
        src_size = validate_size(start_size, "start_size")
        src_side = validate_side(start_side, "start_side")
        tgt = validate_point(end, "end")
        tgt_size = validate_size(end_size, "end_size")
        tgt_side = validate_side(end_side, "end_side")
        rects: list[Rect] = [
            validate_rect(o, i)
            for i, o in enumerate(validate_list(obstacles or [], "obstacles"))
        ]
        options = _build_options(use_pathfinding, grid_size, corner_radius, padding)
    except ValidationError as exc:
        return f"Error: {exc.message}"

    points = chosen.route(
        src, src_size, src_side, tgt, tgt_size, tgt_side,
        obstacles=rects, options=options or None,
    )
    result = RoutedEdge(edge_id=edge_id, points=tuple(points)).to_dict()
    result["router"] = chosen.name
    if corner_radius is not None:
        result["corner_radius"] = options["corner_radius"]
    return json.dumps(result)


@mcp.tool()
def route_graph(
    nodes: list[dict],
    edges: list[dict],
    router: str = "orthogonal (a*)",
    direction: str = "TB",
    use_pathfinding: Optional[bool] = None,
    grid_size: Optional[float] = None,
    corner_radius: Optional[float] = None,
    padding: Optional[float] = None,
) -> str:
    """Route every edge of a positioned graph.

    Each edge avoids all nodes except its own source and target.

    Args:
        nodes: [{"id", "x", "y", "width"?, "height"?}]; x/y are centers,
               size defaults to 120x60.
        edges: [{"source_id", "target_id", "id"?, "source_side"?, "target_side"?}].
        router: Routing strategy name.
        direction: TB, BT, LR or RL; picks default sides for edges without them.
        use_pathfinding, grid_size, corner_radius, padding: Routing overrides.

    Returns:
        JSON list of {edge_id, points, is_straight, has_bends}.
    """
    try:
        chosen = _resolve_router(router)
        direction = validate_direction(direction)
        validate_list(nodes, "nodes")
        validate_list(edges, "edges")
        for i, n in enumerate(nodes):
            validate_node_dict(n, i)
        for i, e in enumerate(edges):
            validate_edge_dict(e, i)
        options = _build_options(use_pathfinding, grid_size, corner_radius, padding)
    except ValidationError as exc:
        return f"Error: {exc.message}"

    graph_nodes = [
        GraphNode(
            id=n["id"],
            center=Point(float(n["x"]), float(n["y"])),
            size=Size(float(n.get("width", 120)), float(n.get("height", 60))),
        )
        for i, n in enumerate(nodes)
    ]
    graph_edges = [
        GraphEdge(
            id=e.get("id") or f"e{i}",
            source=e["source_id"],
            target=e["target_id"],
            source_side=validate_side(e["source_side"], "source_side") if "source_side" in e else None,
            target_side=validate_side(e["target_side"], "target_side") if "target_side" in e else None,
        )
        for i, e in enumerate(edges)
    ]

    routed = _route_graph(
        graph_nodes, graph_edges, chosen,
        direction=direction, options=options or None,
    )
    skipped = len(graph_edges) - len(routed)
    if skipped:
        logger.warning("route_graph skipped %d edge(s) with unknown endpoints", skipped)
    return json.dumps([r.to_dict() for r in routed])


@mcp.tool()
def list_routers() -> str:
    """List the available routing strategies.

    Returns:
        JSON list of {name, description}.
    """
    return _router_listing()


# ===================================================================
# Entry point
# ===================================================================

def main() -> None:
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
