"""
Data structures and export functionality for skeletal motion data.

Provides:
- The fixed 17-joint skeleton and per-instant poses
- Motion clip storage and finalization
- Export to the XML interchange format, JSON and CSV
"""

from kinemotion.data.skeleton import (
    JointKind,
    JointSample,
    Pose,
    JOINT_ORDER,
    JOINT_NAMES,
    NUM_JOINTS,
)
from kinemotion.data.motion_data import MotionClip

__all__ = [
    "JointKind",
    "JointSample",
    "Pose",
    "JOINT_ORDER",
    "JOINT_NAMES",
    "NUM_JOINTS",
    "MotionClip",
]
