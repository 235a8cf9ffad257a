"""
Trigger Detection Tests

Tests for hysteresis trigger detection and trigger segment extraction.
"""

import numpy as np
import pytest

from framesync import triggers
from framesync.errors import ConfigError, ValidationError


nan = np.nan


class TestDetectTriggerHysteresis:
    """Tests for detect_trigger_hysteresis."""

    def test_reference_trace(self):
        """[260, 250, 240, 255] -> [1, undetermined, 0, 1]."""
        event = triggers.detect_trigger_hysteresis([260, 250, 240, 255], high=254, low=245)
        np.testing.assert_array_equal(event, [1.0, nan, 0.0, 1.0])

    def test_threshold_boundaries(self):
        """Equal to high is undetermined, equal to low is no event."""
        event = triggers.detect_trigger_hysteresis([254, 245, 254.001, 245.001], high=254, low=245)
        np.testing.assert_array_equal(event, [nan, 0.0, 1.0, nan])

    def test_unmeasured_frames_are_no_event(self):
        """NaN and infinite intensities keep the initial 0."""
        event = triggers.detect_trigger_hysteresis([nan, np.inf, -np.inf, 300], high=254, low=245)
        np.testing.assert_array_equal(event, [0.0, 0.0, 0.0, 1.0])

    def test_positive_infinity_is_unmeasured(self):
        """+Inf is unmeasured even with thresholds far below it."""
        event = triggers.detect_trigger_hysteresis([np.inf, 10.0], high=1.0, low=0.0)
        np.testing.assert_array_equal(event, [0.0, 1.0])

    def test_output_values(self):
        """Output only holds 0, 1 and NaN."""
        rng = np.random.default_rng(3)
        event = triggers.detect_trigger_hysteresis(rng.uniform(200, 300, 500), 254, 245)
        values = event[~np.isnan(event)]
        assert set(np.unique(values)) <= {0.0, 1.0}
        assert len(event) == 500

    def test_empty_trace(self):
        """Empty trace gives an empty event signal."""
        event = triggers.detect_trigger_hysteresis([], 254, 245)
        assert event.shape == (0,)

    def test_thresholds_not_swapped(self):
        """Inverted thresholds are not swapped; "> high" wins over "<= low"."""
        event = triggers.detect_trigger_hysteresis([0.0, 3.0, 10.0], high=1.0, low=5.0)
        np.testing.assert_array_equal(event, [0.0, 1.0, 1.0])

    def test_overlapping_thresholds_never_undetermined(self):
        """With high < low every measured frame is 0 or 1."""
        event = triggers.detect_trigger_hysteresis(np.linspace(-5, 15, 41), high=1.0, low=5.0)
        assert not np.any(np.isnan(event))
        np.testing.assert_array_equal(event, np.linspace(-5, 15, 41) > 1.0)

    def test_determinism(self):
        """Same input -> same output."""
        trace = np.linspace(230, 270, 101)
        np.testing.assert_array_equal(
            triggers.detect_trigger_hysteresis(trace, 254, 245),
            triggers.detect_trigger_hysteresis(trace, 254, 245)
        )

    def test_rejects_2d(self):
        """Intensity must be 1-D."""
        with pytest.raises(ValidationError):
            triggers.detect_trigger_hysteresis(np.zeros((3, 3)), 254, 245)


class TestValidateThresholds:
    """Tests for validate_thresholds."""

    def test_valid(self):
        """high > low passes."""
        triggers.validate_thresholds(254, 245)

    @pytest.mark.parametrize("high,low", [(245, 254), (250, 250)])
    def test_unordered(self, high, low):
        """high <= low raises ConfigError."""
        with pytest.raises(ConfigError):
            triggers.validate_thresholds(high, low)

    def test_non_finite(self):
        """Infinite thresholds raise ConfigError."""
        with pytest.raises(ConfigError):
            triggers.validate_thresholds(np.inf, 0)


class TestTriggerSegments:
    """Tests for find_trigger_segments and count_trigger_frames."""

    def test_segments(self):
        """Contiguous active runs are reported with exclusive ends."""
        event = np.array([0, 1, 1, nan, 1, 0, 1])
        segments = triggers.find_trigger_segments(event)
        assert segments == [
            {'start_idx': 1, 'end_idx': 3, 'n_frames': 2},
            {'start_idx': 4, 'end_idx': 5, 'n_frames': 1},
            {'start_idx': 6, 'end_idx': 7, 'n_frames': 1},
        ]

    def test_no_segments(self):
        """No active frame, no segment."""
        assert triggers.find_trigger_segments(np.array([0, nan, 0])) == []
        assert triggers.find_trigger_segments(np.array([])) == []

    def test_all_active(self):
        """A fully active signal is a single segment."""
        segments = triggers.find_trigger_segments(np.ones(5))
        assert segments == [{'start_idx': 0, 'end_idx': 5, 'n_frames': 5}]

    def test_count(self):
        """Undetermined frames are not counted."""
        assert triggers.count_trigger_frames([1, nan, 1, 0]) == 2
