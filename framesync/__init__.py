"""
framesync - Source Modules

This package contains the core modules for trigger-synchronized behavioral
signals:
- natural_order: Natural ordering of hierarchical frame names
- normalize: Range normalization with special-value handling
- smoothing: Frequency-domain Gaussian smoothing
- triggers: Hysteresis trigger detection
- alignment: Trigger-masked channel alignment
- stack: Frame stack projections and ROI intensity
- pipeline: Session synchronization
- session_io, export: Session archives and JSON outputs
"""

__version__ = "1.0.0"
