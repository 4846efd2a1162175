"""Tests for row decomposition logic."""

import pytest
from Hotplate import RowPartitioner, row_range


class TestRowPartition:
    """Tests for the contiguous row split."""

    @pytest.mark.parametrize(
        "rows,size", [(3, 1), (5, 2), (5, 4), (10, 4), (11, 4), (50, 7), (64, 8), (100, 3)]
    )
    def test_full_coverage_no_overlaps(self, rows, size):
        """Each interior row owned by exactly one rank."""
        part = RowPartitioner(rows=rows, size=size)

        owned = []
        for start, stop in part.ranges():
            owned.extend(range(start, stop))

        assert owned == list(range(1, rows - 1))

    @pytest.mark.parametrize("rows,size", [(5, 4), (10, 4), (11, 4), (50, 7), (64, 8)])
    def test_ranges_are_chained(self, rows, size):
        """Each rank starts where the previous one stopped."""
        ranges = RowPartitioner(rows=rows, size=size).ranges()

        assert ranges[0][0] == 1
        assert ranges[-1][1] == rows - 1
        for (_, prev_stop), (start, _) in zip(ranges, ranges[1:]):
            assert start == prev_stop

    def test_four_ranks_ten_rows(self):
        """rows_per_pe = 3: rank 0 gets [1, 3), rank 3 gets [9, 9)."""
        part = RowPartitioner(rows=10, size=4)

        assert part.rows_per_pe == 3
        assert part.get_range(0) == (1, 3)
        assert part.get_range(1) == (3, 6)
        assert part.get_range(2) == (6, 9)
        assert part.get_range(3) == (9, 9)

    def test_uneven_split_last_rank_clipped(self):
        """Last rank stops at rows - 1 even when the block would run past it."""
        assert row_range(11, 4, 3) == (9, 10)
        assert row_range(12, 4, 3) == (9, 11)

    def test_tail_ranks_get_empty_ranges(self):
        """Blocks past the last interior row collapse instead of going out of bounds."""
        part = RowPartitioner(rows=5, size=4)

        assert part.ranges() == [(1, 2), (2, 4), (4, 4), (4, 4)]
        for start, stop in part.ranges():
            assert 1 <= start <= stop <= 4


class TestRankInfo:
    """Tests for per-rank LocalParams."""

    def test_rank_info(self):
        part = RowPartitioner(rows=10, size=4)
        info = part.get_rank_info(1, hostname="node01")

        assert info.rank == 1
        assert (info.start_row, info.stop_row) == (3, 6)
        assert info.n_rows == 3
        assert info.hostname == "node01"


class TestEdgeCases:
    """Edge cases."""

    def test_single_rank(self):
        """Single rank gets entire interior."""
        part = RowPartitioner(rows=50, size=1)
        assert part.get_range(0) == (1, 49)

    def test_smallest_plate(self):
        assert row_range(3, 1, 0) == (1, 2)
