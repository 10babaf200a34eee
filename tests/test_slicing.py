"""
Test suite for slice selection and extraction.
Run with: python -m pytest tests/test_slicing.py -v
"""

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ctslices.errors import UnsupportedShapeError
from ctslices.slicing import (
    volume_depth,
    pick_slice_index,
    reconcile_depths,
    extract_slice
)


class TestVolumeDepth:
    """Tests for depth computation."""

    def test_plane_has_depth_one(self):
        assert volume_depth(np.zeros((10, 10))) == 1

    def test_volume_depth_is_third_axis(self):
        assert volume_depth(np.zeros((10, 12, 20))) == 20
        assert volume_depth(np.zeros((10, 12, 20, 3))) == 20

    def test_unsupported_rank(self):
        with pytest.raises(UnsupportedShapeError):
            volume_depth(np.zeros(10))
        with pytest.raises(UnsupportedShapeError):
            volume_depth(np.zeros((2, 2, 2, 2, 2)))


class TestPickSliceIndex:
    """Tests for the slice selection policy."""

    def test_eval_is_deterministic(self):
        """Eval phase always returns the midpoint of the allowed range."""
        picks = {pick_slice_index(20, exclude_slices=2, phase='eval') for _ in range(50)}
        assert picks == {9}

    def test_eval_midpoint_without_exclusion(self):
        assert pick_slice_index(5, phase='test') == 2
        assert pick_slice_index(4, phase='test') == 1
        assert pick_slice_index(1, phase='test') == 0

    def test_train_stays_within_exclusion(self):
        """Random picks never land in the excluded end slices."""
        rng = np.random.default_rng(0)
        picks = [
            pick_slice_index(20, exclude_slices=3, phase='train', randomize=True, rng=rng)
            for _ in range(500)
        ]
        assert min(picks) == 3
        assert max(picks) == 16

    def test_train_without_randomization_is_midpoint(self):
        """Serial batches make training selection deterministic."""
        idx = pick_slice_index(20, exclude_slices=2, phase='train', randomize=False)
        assert idx == pick_slice_index(20, exclude_slices=2, phase='eval')

    def test_seeded_train_is_reproducible(self):
        a = [pick_slice_index(30, phase='train', rng=np.random.default_rng(7)) for _ in range(3)]
        assert len(set(a)) == 1

    @pytest.mark.parametrize("depth,expected", [(1, 0), (3, 1), (4, 1), (5, 2), (10, 4)])
    def test_exclusion_falls_back_to_center(self, depth, expected):
        """Excluding more than the volume holds yields the centre slice."""
        rng = np.random.default_rng(0)
        for phase in ('train', 'eval'):
            idx = pick_slice_index(depth, exclude_slices=depth, phase=phase, rng=rng)
            assert idx == expected
            assert 0 <= idx < depth

    def test_negative_exclusion_is_ignored(self):
        assert pick_slice_index(9, exclude_slices=-4, phase='eval') == 4


class TestReconcileDepths:
    """Tests for depth reconciliation between paired volumes."""

    def test_shared_depth_is_minimum(self):
        shared, _, _ = reconcile_depths(5, 3, lambda depth: 0)
        assert shared == 3

    def test_indices_stay_in_bounds(self):
        """Any index chosen against the shared depth is valid for both volumes."""
        for idx in range(3):
            shared, idx_a, idx_b = reconcile_depths(5, 3, lambda depth: idx)
            assert idx_a == min(idx, 4)
            assert idx_b == min(idx, 2)
            assert 0 <= idx_a < 5
            assert 0 <= idx_b < 3

    def test_pick_receives_shared_depth(self):
        seen = []
        reconcile_depths(20, 18, lambda depth: seen.append(depth) or 0)
        assert seen == [18]

    def test_plane_paired_with_volume(self):
        shared, idx_a, idx_b = reconcile_depths(1, 12, lambda depth: depth // 2)
        assert (shared, idx_a, idx_b) == (1, 0, 0)


class TestExtractSlice:
    """Tests for plane extraction."""

    def test_plane_returned_as_is(self):
        plane = np.random.rand(8, 6)
        assert extract_slice(plane, 3) is plane

    def test_volume_slice(self):
        volume = np.random.rand(8, 6, 10)
        result = extract_slice(volume, 4)
        assert result.shape == (8, 6)
        np.testing.assert_array_equal(result, volume[:, :, 4])

    def test_4d_uses_first_frame_only(self):
        """Frames beyond T=0 never reach the output."""
        volume = np.zeros((8, 6, 10, 5), dtype=np.float32)
        volume[..., 1:] = 999.0
        volume[:, :, 4, 0] = 7.0
        result = extract_slice(volume, 4)
        assert result.shape == (8, 6)
        assert np.all(result == 7.0)

    def test_4d_single_frame(self):
        volume = np.random.rand(8, 6, 10, 1)
        np.testing.assert_array_equal(extract_slice(volume, 2), volume[:, :, 2, 0])

    def test_unsupported_rank(self):
        with pytest.raises(UnsupportedShapeError):
            extract_slice(np.zeros((2, 2, 2, 2, 2)), 0)

    def test_out_of_range_index(self):
        with pytest.raises(IndexError):
            extract_slice(np.zeros((4, 4, 3)), 3)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
