"""
Hexagon Geometry
================
Pure functions for flat-top hexagons laid out on an offset grid.

Conventions:
    - Screen coordinates: x grows to the right, y grows downwards.
    - Grid coordinates are offset coordinates (column x, row y) in the
      "odd-q" layout: odd columns are shifted down by half a row.
    - `size` is the horizontal radius (centre to corner).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from math import pi, sqrt
from typing import TYPE_CHECKING, Collection, Dict, Iterable, Tuple

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

SQRT3 = sqrt(3.0)


class EdgeDirection(StrEnum):
    """The six edges of a flat-top hexagon, clockwise from the top."""
    N = "N"
    NE = "NE"
    SE = "SE"
    S = "S"
    SW = "SW"
    NW = "NW"


EDGE_ORDER: Tuple[EdgeDirection, ...] = tuple(EdgeDirection)

# Direction of travel along each edge when walking the hexagon clockwise.
# N is 0 (pointing +x on screen), each following edge turns by 60 degrees.
EDGE_ANGLES: Dict[EdgeDirection, float] = {
    EdgeDirection.N: 0.0,
    EdgeDirection.NE: pi / 3,
    EdgeDirection.SE: pi * 2 / 3,
    EdgeDirection.S: pi,
    EdgeDirection.SW: -pi * 2 / 3,
    EdgeDirection.NW: -pi / 3,
}

# Axial (q, r) steps towards each neighbour of a flat-top hexagon.
_AXIAL_STEPS: Dict[EdgeDirection, Tuple[int, int]] = {
    EdgeDirection.N: (0, -1),
    EdgeDirection.NE: (1, -1),
    EdgeDirection.SE: (1, 0),
    EdgeDirection.S: (0, 1),
    EdgeDirection.SW: (-1, 1),
    EdgeDirection.NW: (-1, 0),
}


@dataclass(frozen=True)
class HexCoord:
    """Offset grid coordinate of a cell."""
    x: int
    y: int

    def to_axial(self) -> Tuple[int, int]:
        return self.x, self.y - (self.x - (self.x & 1)) // 2

    @classmethod
    def from_axial(cls, q: int, r: int) -> HexCoord:
        return cls(q, r + (q - (q & 1)) // 2)


@dataclass(frozen=True)
class HexEdge:
    """
    One edge of a hexagon cell in a grid.

    Attributes:
        direction: Which of the six edges this is.
        points: (2, 2) array, start and end corner when walking clockwise.
        angle: Direction of travel from start to end, in radians.
        connected: Names of the previous and next edge (clockwise).
        has_neighbor: Whether another cell of the grid lies across this edge.
    """
    direction: EdgeDirection
    points: npt.NDArray[np.float64]
    angle: float
    connected: Tuple[EdgeDirection, EdgeDirection]
    has_neighbor: bool


def hex_width(size: float) -> float:
    return 2.0 * size


def hex_height(size: float) -> float:
    return SQRT3 * size


def edge_angle(direction: EdgeDirection) -> float:
    """Angle of an edge in radians (N=0, clockwise)."""
    return EDGE_ANGLES[EdgeDirection(direction)]


def hex_corners(size: float, center: Iterable[float] | None = None) -> npt.NDArray[np.float64]:
    """
    Corner points of a flat-top hexagon.

    Args:
        size: Horizontal radius of the hexagon.
        center: Optional (x, y) centre. Defaults to the origin.

    Returns:
        Array of shape (6, 2). Corner 0 lies at angle 0 (to the right of the
        centre), the others follow clockwise on screen in 60 degree steps.
    """
    theta = np.arange(6) * (pi / 3)
    corners = np.c_[size * np.cos(theta), size * np.sin(theta)]
    if center is not None:
        corners = corners + np.asarray(tuple(center), dtype=np.float64)
    return corners


def hex_center(coord: HexCoord, size: float) -> npt.NDArray[np.float64]:
    """
    Pixel centre of a cell.

    Columns are `1.5 * size` apart, rows `sqrt(3) * size` apart, odd columns
    are shifted down by half a row. The bounding box of cell (0, 0) touches
    the origin so that a layout with non-negative coordinates stays in the
    positive quadrant.
    """
    x = size * 1.5 * coord.x + size
    y = hex_height(size) * (coord.y + 0.5 * (coord.x & 1)) + hex_height(size) / 2
    return np.array([x, y], dtype=np.float64)


def place_cells(
    coords: Iterable[HexCoord],
    size: float,
    offset: Tuple[float, float] = (0.0, 0.0)
) -> Dict[HexCoord, npt.NDArray[np.float64]]:
    """Map each coordinate to its pixel centre, translated by `offset`."""
    shift = np.asarray(offset, dtype=np.float64)
    return {coord: hex_center(coord, size) + shift for coord in coords}


def neighbor(coord: HexCoord, direction: EdgeDirection) -> HexCoord:
    """Coordinate of the adjacent cell in a direction."""
    q, r = coord.to_axial()
    dq, dr = _AXIAL_STEPS[EdgeDirection(direction)]
    return HexCoord.from_axial(q + dq, r + dr)


def has_neighbor(occupied: Collection[HexCoord], coord: HexCoord, direction: EdgeDirection) -> bool:
    return neighbor(coord, direction) in occupied


def hex_edges(
    occupied: Collection[HexCoord],
    coord: HexCoord,
    size: float
) -> Dict[EdgeDirection, HexEdge]:
    """
    Edge records of one cell, relative to the cell centre.

    Args:
        occupied: Every coordinate of the grid (used for neighbour lookup).
        coord: The cell to examine.
        size: Size of the hexagon the corners are taken from. It may differ
              from the size used to place the cells (e.g. a halo hexagon).

    Returns:
        Edge data keyed by direction, in clockwise order starting at N.
    """
    corners = hex_corners(size)
    count = len(EDGE_ORDER)
    edges: Dict[EdgeDirection, HexEdge] = {}
    for i, direction in enumerate(EDGE_ORDER):
        # edge N runs from corner 4 to corner 5, each next edge one corner further
        start = corners[(i + 4) % count]
        end = corners[(i + 5) % count]
        edges[direction] = HexEdge(
            direction=direction,
            points=np.array([start, end]),
            angle=EDGE_ANGLES[direction],
            connected=(EDGE_ORDER[(i - 1) % count], EDGE_ORDER[(i + 1) % count]),
            has_neighbor=has_neighbor(occupied, coord, direction),
        )
    return edges
