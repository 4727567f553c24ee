"""
Error kinds raised by the motion pipeline.

All of them are local and recoverable: the caller decides whether to skip a
joint, abort a recording or substitute a default pose.
"""


class MotionError(Exception):
    """Base class for all kinemotion errors."""


class DegenerateVectorError(MotionError, ValueError):
    """A zero-length vector was passed where a direction is required."""


class EmptyClipError(MotionError):
    """A clip was finalized without any keyframes."""


class ClipNotFinalizedError(MotionError):
    """Orientation data or export was requested before finalize."""


class MalformedInterchangeError(MotionError, ValueError):
    """The interchange document is structurally invalid."""
