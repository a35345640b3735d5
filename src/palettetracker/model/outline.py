"""
Cluster Outline
===============
Computes the outer border of a cluster of hexagon cells.

The cells' edges that have no neighbour are collected as segments, then the
segments are chained end-to-start into one closed polyline. The cluster must
be simply connected (one island, no holes).
"""
from __future__ import annotations

import logging
from math import cos, sin
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from palettetracker.model.exceptions import MalformedCluster
from palettetracker.model.hex_geometry import HexCoord, hex_edges, place_cells

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

DEFAULT_MARGIN_OF_ERROR = 0.01

Segment = Tuple[float, float, float, float]


def boundary_segments(
    placement: Mapping[HexCoord, npt.NDArray[np.float64]],
    size: float,
    outline_size: Optional[float] = None
) -> List[Segment]:
    """
    Collect the edges of a cluster that do not border another cell.

    Args:
        placement: Pixel centre of every cell, keyed by grid coordinate.
        size: Size the cells were placed with.
        outline_size: Size of a larger halo hexagon to take the corners from.
            Endpoints touching an edge that has a neighbour are moved along
            the edge by `outline_size - size`, so the halo segments of two
            adjacent cells meet in one point.

    Returns:
        Segments as (x0, y0, x1, y1), oriented clockwise.
    """
    corner_size = size if outline_size is None else outline_size
    margin = corner_size - size
    occupied = set(placement)

    segments: List[Segment] = []
    for coord, center in placement.items():
        edges = hex_edges(occupied, coord, corner_size)
        for edge in edges.values():
            if edge.has_neighbor:
                continue
            (x0, y0), (x1, y1) = edge.points + center
            previous_edge, next_edge = edge.connected
            if margin and edges[previous_edge].has_neighbor:
                x0 += cos(edge.angle) * margin
                y0 += sin(edge.angle) * margin
            if margin and edges[next_edge].has_neighbor:
                x1 -= cos(edge.angle) * margin
                y1 -= sin(edge.angle) * margin
            segments.append((float(x0), float(y0), float(x1), float(y1)))
    return segments


def segments_to_polyline(
    segments: Sequence[Segment],
    margin_of_error: float = DEFAULT_MARGIN_OF_ERROR
) -> npt.NDArray[np.float64]:
    """
    Convert line segments into a polyline by connecting close-enough points.

    Starting from the first segment, the next segment is the first remaining
    one whose start lies within `margin_of_error` (square window) of the
    current end point. With degenerate geometry several segments may match;
    the first one in list order is taken.

    Args:
        segments: Segments as (x0, y0, x1, y1).
        margin_of_error: How close two points must be to be considered equal.

    Returns:
        Array of shape (N, 2). For a closed cluster the last point repeats the first.

    Raises:
        MalformedCluster: No segments were given, or some segments could not be
            chained (disconnected cells or a cluster with holes).
    """
    if not segments:
        raise MalformedCluster("No boundary segments to connect")

    remaining = list(segments[1:])
    x0, y0, x1, y1 = segments[0]
    points = [(x0, y0), (x1, y1)]

    while remaining:
        end_x, end_y = points[-1]
        index = next(
            (i for i, seg in enumerate(remaining)
             if abs(end_x - seg[0]) < margin_of_error and abs(end_y - seg[1]) < margin_of_error),
            None
        )
        if index is None:
            break
        segment = remaining.pop(index)
        points.append((segment[2], segment[3]))

    if remaining:
        msg = f"{len(remaining)} of {len(segments)} boundary segments are not connected to the outline"
        logger.error(msg)
        raise MalformedCluster(msg)

    return np.array(points, dtype=np.float64)


def trace_outline(
    coords: Iterable[HexCoord],
    size: float,
    outline_size: Optional[float] = None,
    offset: Tuple[float, float] = (0.0, 0.0),
    margin_of_error: float = DEFAULT_MARGIN_OF_ERROR
) -> npt.NDArray[np.float64]:
    """Place the cells and return the outline polyline of the cluster."""
    placement = place_cells(coords, size, offset)
    segments = boundary_segments(placement, size, outline_size)
    logger.debug(f"Outline of {len(placement)} cells from {len(segments)} segments.")
    return segments_to_polyline(segments, margin_of_error)
