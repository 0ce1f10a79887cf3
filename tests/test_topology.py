"""Tests for offset enumeration and the fallback resolver."""

import pytest

from bellman_table.compiler import topology
from bellman_table.compiler.errors import TopologyError
from bellman_table.compiler.topology import (
    ORIGIN,
    Offset,
    Topology,
    enumerate_offsets,
    nearest_initialized,
)
from bellman_table.model.direction import Direction


class TestEnumerateOffsets:
    def test_radius_zero_is_empty(self) -> None:
        assert enumerate_offsets(0) == []

    def test_negative_radius_rejected(self) -> None:
        with pytest.raises(ValueError):
            enumerate_offsets(-1)

    def test_first_shells_in_scan_order(self) -> None:
        assert enumerate_offsets(2) == [
            Offset(-1, 0), Offset(0, -1), Offset(0, 1), Offset(1, 0),
            Offset(-1, -1), Offset(-1, 1), Offset(1, -1), Offset(1, 1),
        ]

    @pytest.mark.parametrize("radius", [1, 2, 5, 8, 13, 20, 34])
    def test_non_decreasing_and_origin_excluded(self, radius: int) -> None:
        offsets = enumerate_offsets(radius)
        distances = [o.distance_squared for o in offsets]
        assert distances == sorted(distances)
        assert ORIGIN not in offsets
        assert all(1 <= d <= radius for d in distances)

    @pytest.mark.parametrize("radius,count", [(1, 4), (2, 8), (8, 24), (20, 68)])
    def test_covers_every_cell_in_radius(self, radius: int, count: int) -> None:
        offsets = enumerate_offsets(radius)
        assert len(offsets) == count
        assert len(set(offsets)) == count

    def test_deterministic(self) -> None:
        assert enumerate_offsets(20) == enumerate_offsets(20)


class TestNearestInitialized:
    @pytest.mark.parametrize("offset", enumerate_offsets(2))
    def test_origin_ring_resolves_from_origin(self, offset: Offset) -> None:
        assert nearest_initialized(offset) == ORIGIN

    def test_first_closer_neighbor_in_scan_order(self) -> None:
        # (1,-1) is scanned before (1,0) and (1,1)
        assert nearest_initialized(Offset(2, 0)) == Offset(1, -1)
        assert nearest_initialized(Offset(0, 2)) == Offset(-1, 1)

    @pytest.mark.parametrize("offset", enumerate_offsets(50)[8:])
    def test_far_cells_use_adjacent_closer_neighbor(self, offset: Offset) -> None:
        source = nearest_initialized(offset)
        assert source.distance_squared < offset.distance_squared
        assert max(abs(source.x - offset.x), abs(source.y - offset.y)) == 1

    def test_missing_neighbor_aborts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(topology, "NEIGHBOR_DELTAS", ((1, 0),))
        with pytest.raises(TopologyError):
            nearest_initialized(Offset(3, 0))


class TestOffset:
    def test_direction_to_neighbor(self) -> None:
        assert Offset(1, 1).direction_to(ORIGIN) is Direction.SOUTHWEST
        assert Offset(0, 0).direction_to(Offset(0, 1)) is Direction.NORTH

    def test_neighbors_exclude_self(self) -> None:
        neighbors = list(Offset(2, 3).neighbors())
        assert len(neighbors) == 8
        assert Offset(2, 3) not in neighbors
        assert neighbors[0] == Offset(1, 2)


class TestTopology:
    def test_index_matches_order(self) -> None:
        topo = Topology.build(13)
        for i, offset in enumerate(topo):
            assert topo.index_of(offset) == i
        assert len(topo) == len(enumerate_offsets(13))

    def test_membership_and_window(self) -> None:
        topo = Topology.build(8)
        assert Offset(2, 2) in topo
        assert Offset(0, 0) not in topo
        assert Offset(3, 0) not in topo
        assert topo.in_window(Offset(-2, 2))
        assert not topo.in_window(ORIGIN)
