"""
Alignment Tests

Tests for trigger-masked alignment of several channels.
"""

import numpy as np
import pytest

from framesync import alignment
from framesync.errors import ShapeMismatchError, ValidationError


nan = np.nan


class TestAlignChannels:
    """Tests for align_channels."""

    def test_retained_samples(self):
        """Only frames with event == 1 survive, in order."""
        event = np.array([1, 0, nan, 1, 1])
        aligned = alignment.align_channels(event, {
            'pupil': [10, 11, 12, 13, 14],
            'accel_x': [0.0, 0.1, 0.2, 0.3, 0.4],
        })
        np.testing.assert_array_equal(aligned['pupil'], [10, 13, 14])
        np.testing.assert_array_equal(aligned['accel_x'], [0.0, 0.3, 0.4])

    @pytest.mark.parametrize("event", [
        np.zeros(6),
        np.ones(6),
        np.array([nan] * 6),
        np.array([1, nan, 0, 1, nan, 1]),
    ])
    def test_cardinality(self, event):
        """Every channel length equals the number of 1-valued samples."""
        channels = {name: np.arange(6, dtype=float) for name in ('a', 'b', 'c')}
        aligned = alignment.align_channels(event, channels)
        expected = int(np.sum(event == 1))
        assert all(len(values) == expected for values in aligned.values())

    def test_all_zero_gives_empty(self):
        """An event that never fires gives empty channels, not an error."""
        aligned = alignment.align_channels(np.zeros(4), {'pupil': [1, 2, 3, 4]})
        assert aligned['pupil'].shape == (0,)

    def test_all_one_keeps_everything(self):
        """An event that always fires keeps the channel unchanged."""
        values = np.array([3.0, 1.0, 2.0])
        aligned = alignment.align_channels(np.ones(3), {'pupil': values})
        np.testing.assert_array_equal(aligned['pupil'], values)

    def test_channel_nan_kept(self):
        """NaN already in a channel at a retained frame stays in place."""
        aligned = alignment.align_channels(
            np.array([1, 1, 0]), {'a': [nan, 2.0, 3.0], 'b': [1.0, 2.0, 3.0]}
        )
        np.testing.assert_array_equal(aligned['a'], [nan, 2.0])
        assert len(aligned['a']) == len(aligned['b'])

    def test_key_order(self):
        """Output keys follow input order."""
        channels = {'z': [1], 'a': [2], 'm': [3]}
        assert list(alignment.align_channels([1], channels)) == ['z', 'a', 'm']

    def test_inputs_not_modified(self):
        """Input arrays are left untouched."""
        values = np.array([1.0, 2.0, 3.0])
        alignment.align_channels(np.array([0, 1, 0]), {'a': values})
        np.testing.assert_array_equal(values, [1.0, 2.0, 3.0])

    def test_length_mismatch(self):
        """Channel length != event length raises ShapeMismatchError."""
        with pytest.raises(ShapeMismatchError) as info:
            alignment.align_channels(np.ones(3), {'ok': [1, 2, 3], 'short': [1, 2]})
        assert info.value.name == 'short'

    def test_2d_channel(self):
        """Channels must be 1-D."""
        with pytest.raises(ShapeMismatchError):
            alignment.align_channels(np.ones(2), {'a': np.ones((2, 2))})

    def test_no_channels(self):
        """An empty mapping raises ValidationError."""
        with pytest.raises(ValidationError):
            alignment.align_channels(np.ones(2), {})


class TestHelpers:
    """Tests for retained_indices and mask_channel."""

    def test_retained_indices(self):
        """Indices of 1-valued samples."""
        np.testing.assert_array_equal(
            alignment.retained_indices([0, 1, nan, 1]), [1, 3]
        )

    def test_mask_channel(self):
        """Non-retained samples become NaN, length unchanged."""
        masked = alignment.mask_channel([1, 0, nan], [5.0, 6.0, 7.0])
        np.testing.assert_array_equal(masked, [5.0, nan, nan])

    def test_mask_then_compact_matches_align(self):
        """Compacting the masked channel gives the aligned channel."""
        event = np.array([1, 0, 1, nan, 1])
        channel = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        masked = alignment.mask_channel(event, channel)
        aligned = alignment.align_channels(event, {'c': channel})
        np.testing.assert_array_equal(masked[~np.isnan(masked)], aligned['c'])
