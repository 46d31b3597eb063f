"""
Unit tests for the disjoint-set store.

Covers the signed-array encoding, union-by-size, path compression
and rejection of invalid arguments.
"""

import random

import pytest

from disjoint_set import DisjointSet


class TestInitialState:
    """A fresh store has one singleton set per cell."""

    def test_all_cells_are_roots(self):
        ds = DisjointSet(5)
        assert ds.cells == [-1] * 5
        assert ds.set_count == 5
        assert ds.count_roots() == 5
        assert len(ds) == 5

    def test_find_on_singleton_returns_itself(self):
        ds = DisjointSet(3)
        assert [ds.find(i) for i in range(3)] == [0, 1, 2]

    def test_empty_universe_rejected(self):
        with pytest.raises(ValueError):
            DisjointSet(0)


class TestUnion:
    """Union-by-size and its tie-break."""

    def test_tie_second_root_absorbs_first(self):
        ds = DisjointSet(2)
        keep = ds.union(0, 1)
        assert keep == 1
        assert ds.cells == [1, -2]
        assert ds.set_count == 1

    def test_larger_set_absorbs_smaller(self):
        ds = DisjointSet(4)
        ds.union(0, 1)  # root 1, size 2
        keep = ds.union(1, 2)
        assert keep == 1
        assert ds.cells[1] == -3
        assert ds.cells[2] == 1

        keep = ds.union(3, 1)
        assert keep == 1
        assert ds.cells[1] == -4
        assert ds.cells[3] == 1

    def test_same_root_rejected(self):
        ds = DisjointSet(3)
        with pytest.raises(ValueError):
            ds.union(1, 1)

    def test_non_root_rejected(self):
        ds = DisjointSet(3)
        ds.union(0, 1)
        with pytest.raises(ValueError):
            ds.union(0, 2)
        assert ds.set_count == 2

    def test_out_of_range_rejected(self):
        ds = DisjointSet(3)
        with pytest.raises(IndexError):
            ds.find(3)
        with pytest.raises(IndexError):
            ds.find(-1)
        with pytest.raises(IndexError):
            ds.union(0, 7)


def _chain(path_compression):
    """Build 0 -> 1 -> 3 with root 3 by hand-picked unions."""
    ds = DisjointSet(4, path_compression=path_compression)
    ds.union(2, 3)  # root 3: {2, 3}
    ds.union(0, 1)  # root 1: {0, 1}
    ds.union(1, 3)  # tie, root 3 absorbs 1
    return ds


class TestFind:
    """Root lookup with and without path compression."""

    def test_find_walks_to_root(self):
        ds = _chain(False)
        assert ds.cells == [1, 3, 3, -4]
        assert ds.find(0) == 3
        # no compression: parent pointers untouched
        assert ds.cells == [1, 3, 3, -4]

    def test_path_compression_rewrites_parents(self):
        ds = _chain(True)
        assert ds.find(0) == 3
        assert ds.cells == [3, 3, 3, -4]

    def test_compression_keeps_root_size(self):
        ds = _chain(True)
        ds.find(0)
        assert ds.cells[3] == -4
        assert ds.size(0) == 4

    @pytest.mark.parametrize("path_compression", [False, True])
    def test_find_is_idempotent(self, path_compression):
        ds = _chain(path_compression)
        for i in range(4):
            assert ds.find(i) == ds.find(i)

    def test_connected(self):
        ds = DisjointSet(4)
        ds.union(0, 1)
        assert ds.connected(0, 1)
        assert not ds.connected(0, 2)


class TestRandomUnions:
    """Random union sequences keep the counters consistent."""

    @pytest.mark.parametrize("path_compression", [False, True])
    def test_root_count_never_exceeds_universe(self, path_compression):
        rng = random.Random(7)
        n = 50
        ds = DisjointSet(n, path_compression=path_compression)
        for _ in range(200):
            a = ds.find(rng.randrange(n))
            b = ds.find(rng.randrange(n))
            if a != b:
                ds.union(a, b)
            assert ds.count_roots() == ds.set_count <= n

        sizes = [-v for v in ds.cells if v < 0]
        assert sum(sizes) == n

    def test_compression_does_not_change_partition(self):
        rng = random.Random(11)
        n = 40
        plain = DisjointSet(n)
        compressed = DisjointSet(n, path_compression=True)
        for _ in range(120):
            a, b = rng.randrange(n), rng.randrange(n)
            ra, rb = plain.find(a), plain.find(b)
            ca, cb = compressed.find(a), compressed.find(b)
            assert (ra, rb) == (ca, cb)
            if ra != rb:
                assert plain.union(ra, rb) == compressed.union(ca, cb)
        assert [plain.find(i) for i in range(n)] == [
            compressed.find(i) for i in range(n)
        ]
