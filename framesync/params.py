"""
Parameters Module - All Tunable Constants

Frozen parameter groups for the synchronization pipeline. The primitives
themselves take explicit arguments; these dataclasses only bundle the
values the pipeline passes to them.

USAGE:
    from framesync.params import SyncConfig, DEFAULT_CONFIG

    # Use default config
    config = DEFAULT_CONFIG

    # Create custom config
    custom = SyncConfig(
        trigger=TriggerParams(high=200.0, low=150.0),
        smoothing=SmoothingParams(sigma=0.01)
    )
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from framesync.errors import ConfigError
from framesync.natural_order import SortOptions
from framesync.triggers import validate_thresholds


@dataclass(frozen=True)
class OrderingParams:
    """
    Frame ordering parameters.

    Attributes:
        remove_dot_entries: Drop "." and ".." entries (default True)
        treat_as_directory: Keep extensions in the base name (default False)
        path_only: Ignore parent folders when ordering (default False)
    """
    remove_dot_entries: bool = True
    treat_as_directory: bool = False
    path_only: bool = False

    def to_sort_options(self) -> SortOptions:
        """Sort options for natural_sort."""
        return SortOptions(
            remove_dot_entries=self.remove_dot_entries,
            treat_as_directory=self.treat_as_directory,
            path_only=self.path_only
        )


@dataclass(frozen=True)
class TriggerParams:
    """
    Hysteresis trigger thresholds.

    Attributes:
        high: Intensity strictly above -> event (default 254, saturated LED)
        low: Intensity at or below -> no event (default 245)
    """
    high: float = 254.0
    low: float = 245.0


@dataclass(frozen=True)
class SmoothingParams:
    """
    Frequency-domain smoothing parameters.

    Attributes:
        sigma: Gaussian width as a fraction of the trace length (default 0.002)
        enabled: Skip smoothing when False (default True)
    """
    sigma: float = 0.002
    enabled: bool = True


@dataclass(frozen=True)
class NormalizationParams:
    """
    Range normalization parameters.

    Attributes:
        output_range: Target range (default (0, 1))
        input_limits: Optional clamping limits (default None = data range)
    """
    output_range: Tuple[float, float] = (0.0, 1.0)
    input_limits: Optional[Tuple[float, float]] = None


@dataclass(frozen=True)
class TimebaseParams:
    """
    Camera timing parameters.

    Attributes:
        frame_rate_hz: Acquisition frame rate (default 30.0)
        start_time_sec: Time of the first frame (default 0.0)
    """
    frame_rate_hz: float = 30.0
    start_time_sec: float = 0.0


@dataclass
class SyncConfig:
    """
    Complete synchronization configuration aggregating all parameter groups.

    Example usage:
        config = SyncConfig()  # All defaults
        config = SyncConfig(trigger=TriggerParams(high=200.0, low=150.0))
    """
    ordering: OrderingParams = field(default_factory=OrderingParams)
    trigger: TriggerParams = field(default_factory=TriggerParams)
    smoothing: SmoothingParams = field(default_factory=SmoothingParams)
    normalization: NormalizationParams = field(default_factory=NormalizationParams)
    timebase: TimebaseParams = field(default_factory=TimebaseParams)

    def to_dict(self) -> Dict:
        """
        Export all parameters as a flat dictionary for JSON serialization.

        Returns:
            Dictionary with all parameter values
        """
        limits = self.normalization.input_limits
        return {
            # Ordering params
            'ordering_remove_dot_entries': self.ordering.remove_dot_entries,
            'ordering_treat_as_directory': self.ordering.treat_as_directory,
            'ordering_path_only': self.ordering.path_only,

            # Trigger params
            'trigger_high': self.trigger.high,
            'trigger_low': self.trigger.low,

            # Smoothing params
            'smoothing_sigma': self.smoothing.sigma,
            'smoothing_enabled': self.smoothing.enabled,

            # Normalization params
            'normalization_output_range': list(self.normalization.output_range),
            'normalization_input_limits': list(limits) if limits is not None else None,

            # Timebase params
            'frame_rate_hz': self.timebase.frame_rate_hz,
            'start_time_sec': self.timebase.start_time_sec,
        }


# Default configuration instance
DEFAULT_CONFIG = SyncConfig()


def validate_config(config: SyncConfig) -> bool:
    """
    Validate configuration parameters for consistency.

    Parameters:
        config: SyncConfig instance to validate

    Returns:
        True if config is valid

    Raises:
        ConfigError: If configuration is invalid
    """
    validate_thresholds(config.trigger.high, config.trigger.low)

    if config.smoothing.enabled and not config.smoothing.sigma > 0:
        raise ConfigError("smoothing sigma must be positive", option='sigma')

    if len(config.normalization.output_range) != 2:
        raise ConfigError("normalization output_range must hold two values", option='output_range')

    limits = config.normalization.input_limits
    if limits is not None:
        if len(limits) != 2:
            raise ConfigError("normalization input_limits must hold two values", option='input_limits')
        if limits[0] > limits[1]:
            raise ConfigError("normalization input_limits must be ordered", option='input_limits')

    if config.timebase.frame_rate_hz <= 0:
        raise ConfigError("frame_rate_hz must be positive", option='frame_rate_hz')

    return True


# Validate default config on import
validate_config(DEFAULT_CONFIG)
