"""
kinemotion - Skeletal motion recording and angle solving

Records poses from a depth-sensor skeleton tracker and turns them into
motion clips that drive an articulated robot or avatar.

Features:
- Fixed 17-joint tracking skeleton
- Per-joint roll/pitch/yaw derived from joint positions
- Fixed-interval background recording
- XML interchange format (read and write)
- Export to JSON and CSV
"""

__version__ = "1.0.0"
__author__ = "kinemotion Contributors"

from kinemotion.data.skeleton import Pose, JointKind, JointSample
from kinemotion.data.motion_data import MotionClip
from kinemotion.core.angle_solver import AngleSolver, solve_pose
from kinemotion.core.recorder import MotionRecorder
from kinemotion.data.exporters import InterchangeCodec
from kinemotion.errors import (
    MotionError,
    DegenerateVectorError,
    EmptyClipError,
    ClipNotFinalizedError,
    MalformedInterchangeError,
)

__all__ = [
    "Pose",
    "JointKind",
    "JointSample",
    "MotionClip",
    "AngleSolver",
    "solve_pose",
    "MotionRecorder",
    "InterchangeCodec",
    "MotionError",
    "DegenerateVectorError",
    "EmptyClipError",
    "ClipNotFinalizedError",
    "MalformedInterchangeError",
]
