"""
Error Module - Exception Hierarchy

All framesync exceptions inherit from FrameSyncError. The concrete classes
also inherit from ValueError so callers that only guard against bad values
keep working.

TAXONOMY:
- ValidationError: malformed or out-of-contract arguments, raised before
  any computation starts
- ConfigError: conflicting, duplicated or unknown configuration flags
- ShapeMismatchError: length/dimension mismatch between cooperating sequences

Numeric preconditions (e.g. non-positive sigma) raise plain ValueError.
"""

from typing import Optional


class FrameSyncError(Exception):
    """Base exception for all framesync errors."""
    pass


class ValidationError(FrameSyncError, ValueError):
    """
    Argument validation failed.

    Raised when:
    - Name list contains non-string entries
    - Structured name record is missing 'name' or 'folder'
    - output_range / input_limits is not exactly two real numbers
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        index: Optional[int] = None,
    ):
        super().__init__(message)
        self.field = field
        self.index = index


class ConfigError(FrameSyncError, ValueError):
    """
    Configuration flags are invalid.

    Raised when:
    - The same sort option is given twice
    - Mutually exclusive options are combined (ascend + descend)
    - Trigger thresholds are not ordered (high <= low)
    """

    def __init__(self, message: str, option: Optional[str] = None):
        super().__init__(message)
        self.option = option


class ShapeMismatchError(FrameSyncError, ValueError):
    """
    Cooperating sequences do not line up.

    Raised when:
    - A channel length differs from the event signal length
    - A region-of-interest mask does not match the frame shape
    """

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        expected: Optional[tuple] = None,
        actual: Optional[tuple] = None,
    ):
        super().__init__(message)
        self.name = name
        self.expected = expected
        self.actual = actual
