"""Tests for cluster outline tracing."""

import numpy as np
import pytest

from palettetracker.model.exceptions import MalformedCluster
from palettetracker.model.hex_geometry import HexCoord, hex_center, neighbor, EdgeDirection, place_cells
from palettetracker.model.outline import boundary_segments, segments_to_polyline, trace_outline


def distinct_points(points, tol=1e-6):
    """Points that are not within `tol` of an earlier point."""
    distinct = []
    for p in np.asarray(points, dtype=float):
        if not any(np.allclose(p, q, atol=tol) for q in distinct):
            distinct.append(p)
    return distinct


class TestBoundarySegments:
    """Test segment collection."""

    def test_single_cell(self):
        placement = place_cells([HexCoord(0, 0)], 46)
        assert len(boundary_segments(placement, 46)) == 6

    def test_shared_edge_excluded(self):
        placement = place_cells([HexCoord(0, 0), HexCoord(1, 0)], 46)
        assert len(boundary_segments(placement, 46)) == 10

    def test_halo_segments_meet(self):
        """With a larger halo hexagon, segments of adjacent cells still join."""
        placement = place_cells([HexCoord(0, 0), HexCoord(0, 1)], 46)
        segments = boundary_segments(placement, 46, outline_size=50)
        ends = [(s[2], s[3]) for s in segments]
        for x0, y0, _, _ in segments:
            assert any(np.allclose((x0, y0), end, atol=1e-6) for end in ends)


class TestSegmentsToPolyline:
    """Test stitching."""

    def test_empty_raises(self):
        with pytest.raises(MalformedCluster):
            segments_to_polyline([])

    def test_chains_out_of_order_segments(self):
        segments = [(0, 0, 1, 0), (1, 1, 0, 0), (1, 0, 1, 1)]
        points = segments_to_polyline(segments)
        assert points.tolist() == [[0, 0], [1, 0], [1, 1], [0, 0]]

    def test_tolerance(self):
        segments = [(0, 0, 1, 0), (1.005, 0.005, 0, 0)]
        assert len(segments_to_polyline(segments)) == 3
        with pytest.raises(MalformedCluster):
            segments_to_polyline(segments, margin_of_error=0.001)

    def test_first_match_wins(self):
        """Two segments start at (1, 0); only taking the first one in list order uses them all."""
        segments = [(0, 0, 1, 0), (1, 0, 2, 1), (2, 1, 1, 0), (1, 0, 0, 1), (0, 1, 0, 0)]
        points = segments_to_polyline(segments)
        assert points.tolist() == [[0, 0], [1, 0], [2, 1], [1, 0], [0, 1], [0, 0]]


class TestTraceOutline:
    """Test full outlines."""

    def test_single_hex(self):
        points = trace_outline([HexCoord(0, 0)], 46)
        assert points.shape == (7, 2)
        assert len(distinct_points(points)) == 6
        assert np.allclose(points[0], points[-1])

    def test_two_adjacent_cells(self):
        points = trace_outline([HexCoord(0, 0), HexCoord(0, 1)], 46)
        assert points.shape == (11, 2)
        assert len(distinct_points(points)) == 10
        assert np.allclose(points[0], points[-1])

    def test_two_adjacent_cells_with_halo(self):
        points = trace_outline([HexCoord(0, 0), HexCoord(1, 0)], 46, outline_size=50)
        assert len(distinct_points(points)) == 10
        assert np.allclose(points[0], points[-1])

    def test_halo_is_outside_cells(self):
        """The halo outline surrounds the cell centres at a larger radius."""
        points = trace_outline([HexCoord(0, 0)], 46, outline_size=50)
        center = hex_center(HexCoord(0, 0), 46)
        assert np.allclose(np.hypot(*(points - center).T), 50)

    def test_offset(self):
        plain = trace_outline([HexCoord(0, 0)], 46)
        moved = trace_outline([HexCoord(0, 0)], 46, offset=(10, 20))
        assert np.allclose(moved - plain, (10, 20))

    def test_larger_cluster_closes(self):
        center = HexCoord(2, 2)
        coords = [center] + [neighbor(center, d) for d in EdgeDirection]
        points = trace_outline(coords, 46)
        # 7 hexes: 42 edges, 12 shared twice
        assert len(points) == 42 - 24 + 1
        assert np.allclose(points[0], points[-1])

    def test_disconnected_cells_raise(self):
        with pytest.raises(MalformedCluster):
            trace_outline([HexCoord(0, 0), HexCoord(5, 5)], 46)

    def test_cluster_with_hole_raises(self):
        center = HexCoord(2, 2)
        ring = [neighbor(center, d) for d in EdgeDirection]
        with pytest.raises(MalformedCluster):
            trace_outline(ring, 46)

    def test_no_cells_raise(self):
        with pytest.raises(MalformedCluster):
            trace_outline([], 46)
