"""
framesync - Configuration

Default parameters for the command line interface, with rationale.
Library functions take explicit arguments; see framesync/params.py for
the dataclass form used by the pipeline.
"""

from typing import List, Tuple

# =============================================================================
# TRIGGER DETECTION
# =============================================================================

# Intensity strictly above which the sync LED counts as on
# Why: the LED saturates the 8-bit sensor in its ROI; 254 only accepts
#      frames where the ROI mean is at (or numerically above) saturation
TRIGGER_HIGH_THRESHOLD: float = 254.0

# Intensity at or below which the sync LED counts as off
# Why: 245 leaves a 9-level band for partially exposed frames at the
#      LED edges, which are classified as undetermined and discarded
TRIGGER_LOW_THRESHOLD: float = 245.0

# Name of the intensity trace in a session archive
TRIGGER_KEY: str = 'trigger'

# =============================================================================
# CHANNEL CONDITIONING
# =============================================================================

# Gaussian smoothing width as a fraction of the trace length
# Why: 0.002 of a 10-minute 30 fps session is ~36 frames (~1.2 s), enough
#      to remove frame-to-frame measurement jitter without blurring whisking
#      bouts
SMOOTHING_SIGMA: float = 0.002

# Target range for range normalization
# Why: [0, 1] makes channels with different units (pixels, g, motion
#      energy) directly comparable in plots and exports
OUTPUT_RANGE: Tuple[float, float] = (0.0, 1.0)

# =============================================================================
# FRAMES
# =============================================================================

# Camera frame rate (Hz)
# Why: behavior cameras run at 30 fps unless configured otherwise
FRAME_RATE_HZ: float = 30.0

# Accepted frame file extensions when scanning a frame directory
FRAME_EXTENSIONS: List[str] = ['.tif', '.tiff', '.png', '.jpg']

# Drop "." and ".." entries from directory listings before ordering
REMOVE_DOT_ENTRIES: bool = True

# =============================================================================
# OUTPUT
# =============================================================================

# Session archive suffix scanned in directory mode
SESSION_SUFFIX: str = '.npz'
