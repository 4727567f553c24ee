"""
Kinematic angle solver.

Derives per-joint roll/pitch/yaw angles from the 17 joint positions of a
single pose. Every angle is recomputed from the pose's own positions, so the
solver keeps no state between poses and solving is a pure function.
"""

import logging
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from kinemotion.config.settings import SolverConfig
from kinemotion.data.skeleton import Pose, JointKind, JOINT_INDEX, YAW
from kinemotion.errors import DegenerateVectorError
from kinemotion.utils.math_utils import (
    Y_AXIS,
    Z_AXIS,
    angle_between,
    cross_product,
    degrees_to_radians,
    direction_vector,
    roll,
)

logger = logging.getLogger(__name__)

Angles = Tuple[float, float, float]  # roll, pitch, yaw

ANKLE_PITCH_DEGREES = -20.0
HIP_YAW_OFFSET = 150.0


def _vec(pose: Pose, start: JointKind, end: JointKind) -> np.ndarray:
    """Direction vector between two joints of a pose."""
    return direction_vector(
        pose.positions[JOINT_INDEX[start]], pose.positions[JOINT_INDEX[end]]
    )


def _center_vec(pose: Pose) -> np.ndarray:
    """Trunk axis, neck to spine."""
    return _vec(pose, JointKind.NECK, JointKind.SPINE)


def _head(pose: Pose) -> Angles:
    neck_vec = _vec(pose, JointKind.SPINE, JointKind.NECK)
    head_vec = _vec(pose, JointKind.NECK, JointKind.HEAD)

    pitch = angle_between(neck_vec, head_vec)
    if neck_vec[2] < head_vec[2]:
        pitch = -pitch
    return 0.0, pitch, 0.0


def _right_shoulder(pose: Pose) -> Angles:
    shoulder_vec = _vec(pose, JointKind.LEFT_SHOULDER, JointKind.RIGHT_SHOULDER)
    upper_arm = _vec(pose, JointKind.RIGHT_SHOULDER, JointKind.RIGHT_ELBOW)

    shoulder_roll = angle_between(shoulder_vec, upper_arm) - 90.0
    pitch = -angle_between(_center_vec(pose), upper_arm) + 90.0
    return shoulder_roll, pitch, 0.0


def _left_shoulder(pose: Pose) -> Angles:
    shoulder_vec = _vec(pose, JointKind.RIGHT_SHOULDER, JointKind.LEFT_SHOULDER)
    upper_arm = _vec(pose, JointKind.LEFT_SHOULDER, JointKind.LEFT_ELBOW)

    # Only the left side is folded to a magnitude
    shoulder_roll = abs(angle_between(shoulder_vec, upper_arm) - 90.0)
    pitch = -angle_between(_center_vec(pose), upper_arm) + 90.0
    return shoulder_roll, pitch, 0.0


def _elbow(
    pose: Pose,
    shoulder: JointKind,
    elbow: JointKind,
    hand: JointKind,
    roll_sign: float,
) -> Angles:
    upper_arm = _vec(pose, shoulder, elbow)
    lower_arm = _vec(pose, elbow, hand)
    shoulder_to_neck = _vec(pose, shoulder, JointKind.NECK)

    elbow_roll = roll_sign * angle_between(upper_arm, lower_arm)
    arm_normal = cross_product(shoulder_to_neck, upper_arm)
    yaw = angle_between(lower_arm, arm_normal) - 90.0
    return elbow_roll, 0.0, yaw


def _right_elbow(pose: Pose) -> Angles:
    return _elbow(pose, JointKind.RIGHT_SHOULDER, JointKind.RIGHT_ELBOW, JointKind.RIGHT_HAND, 1.0)


def _left_elbow(pose: Pose) -> Angles:
    return _elbow(pose, JointKind.LEFT_SHOULDER, JointKind.LEFT_ELBOW, JointKind.LEFT_HAND, -1.0)


def _hip_yaw(pose: Pose) -> float:
    """Yaw shared by both hips."""
    hip_center_vec = _vec(pose, JointKind.CENTER_HIP, JointKind.SPINE)
    return -(angle_between(hip_center_vec, _center_vec(pose)) - HIP_YAW_OFFSET)


def _hip(pose: Pose, hip: JointKind, knee: JointKind) -> Angles:
    """Hip roll and pitch. Yaw is filled in once for both sides."""
    center_vec = _center_vec(pose)
    upper_leg = _vec(pose, hip, knee)

    pitch = -angle_between(center_vec, upper_leg)
    if center_vec[2] < upper_leg[2]:
        pitch = -pitch

    return roll(upper_leg), pitch, 0.0


def _right_hip(pose: Pose) -> Angles:
    return _hip(pose, JointKind.RIGHT_HIP, JointKind.RIGHT_KNEE)


def _left_hip(pose: Pose) -> Angles:
    return _hip(pose, JointKind.LEFT_HIP, JointKind.LEFT_KNEE)


def _knee(pose: Pose, hip: JointKind, knee: JointKind, ankle: JointKind) -> Angles:
    upper_leg = _vec(pose, hip, knee)
    lower_leg = _vec(pose, knee, ankle)
    return 0.0, angle_between(upper_leg, lower_leg), 0.0


def _right_knee(pose: Pose) -> Angles:
    return _knee(pose, JointKind.RIGHT_HIP, JointKind.RIGHT_KNEE, JointKind.RIGHT_ANKLE)


def _left_knee(pose: Pose) -> Angles:
    return _knee(pose, JointKind.LEFT_HIP, JointKind.LEFT_KNEE, JointKind.LEFT_ANKLE)


def _hand(pose: Pose) -> Angles:
    return 0.0, 0.0, 0.0


def _pelvis(pose: Pose) -> Tuple[float, float]:
    """Pelvis (pitch, yaw) against the sensor's Y and Z axes."""
    shoulder_vec = _vec(pose, JointKind.RIGHT_SHOULDER, JointKind.LEFT_SHOULDER)
    pitch = angle_between(_center_vec(pose), Y_AXIS)
    yaw = angle_between(shoulder_vec, Z_AXIS)
    return pitch, yaw


JointRule = Callable[[Pose], Angles]

# Neck, Spine and Center Hip have no rule and are left untouched.
# Pelvis and the ankles are handled separately.
JOINT_RULES: Dict[JointKind, JointRule] = {
    JointKind.HEAD: _head,
    JointKind.RIGHT_SHOULDER: _right_shoulder,
    JointKind.LEFT_SHOULDER: _left_shoulder,
    JointKind.RIGHT_ELBOW: _right_elbow,
    JointKind.LEFT_ELBOW: _left_elbow,
    JointKind.RIGHT_HIP: _right_hip,
    JointKind.LEFT_HIP: _left_hip,
    JointKind.RIGHT_KNEE: _right_knee,
    JointKind.LEFT_KNEE: _left_knee,
    JointKind.RIGHT_HAND: _hand,
    JointKind.LEFT_HAND: _hand,
}

UNSOLVED_JOINTS = frozenset((JointKind.NECK, JointKind.SPINE, JointKind.CENTER_HIP))
ANKLE_JOINTS = (JointKind.RIGHT_ANKLE, JointKind.LEFT_ANKLE)
HIP_JOINTS = (JointKind.RIGHT_HIP, JointKind.LEFT_HIP)


class AngleSolver:
    """
    Computes joint orientation angles for a pose.

    Example:
        >>> solver = AngleSolver()
        >>> solved = solver.solve(pose)
        >>> solved.orientation(JointKind.HEAD)
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        """
        Initialize the solver.

        Args:
            config: Solver configuration (or use defaults)
        """
        self.config = config or SolverConfig()

    @property
    def ankle_pitch(self) -> float:
        """Constant ankle pitch written for both ankles."""
        if self.config.ankle_pitch_in_degrees:
            return ANKLE_PITCH_DEGREES
        # Historical output stores this one angle in radians
        return degrees_to_radians(ANKLE_PITCH_DEGREES)

    def solve(self, pose: Pose) -> Pose:
        """
        Solve a pose without modifying it.

        Args:
            pose: Pose with joint positions

        Returns:
            New pose with the same positions and derived angles
        """
        solved = pose.copy()
        self.solve_in_place(solved)
        return solved

    def solve_in_place(self, pose: Pose) -> Pose:
        """Write derived angles into the given pose and return it."""
        for kind, rule in JOINT_RULES.items():
            i = JOINT_INDEX[kind]
            try:
                pose.angles[i] = rule(pose)
            except DegenerateVectorError as e:
                self._skip_joint(pose, kind, e)
                continue
            pose.confidence[i] = 1.0

        try:
            hip_yaw = _hip_yaw(pose)
        except DegenerateVectorError as e:
            if self.config.strict:
                raise
            hip_yaw = 0.0
            for kind in HIP_JOINTS:
                pose.confidence[JOINT_INDEX[kind]] = 0.0
            logger.warning(f"Skipping hip yaw at t={pose.time:.1f}ms: {e}")
        for kind in HIP_JOINTS:
            pose.angles[JOINT_INDEX[kind], YAW] = hip_yaw

        for kind in ANKLE_JOINTS:
            i = JOINT_INDEX[kind]
            pose.angles[i] = (0.0, self.ankle_pitch, 0.0)
            pose.confidence[i] = 1.0

        pelvis = JOINT_INDEX[JointKind.PELVIS]
        pose.angles[pelvis] = 0.0
        if self.config.legacy_pelvis:
            pose.positions[pelvis] = 0.0
        try:
            pose.pelvis_pitch, pose.pelvis_yaw = _pelvis(pose)
        except DegenerateVectorError as e:
            pose.pelvis_pitch = pose.pelvis_yaw = 0.0
            self._skip_joint(pose, JointKind.PELVIS, e)
        else:
            pose.confidence[pelvis] = 1.0

        return pose

    def _skip_joint(self, pose: Pose, kind: JointKind, error: DegenerateVectorError):
        """Substitute zero angles for a joint that cannot be solved."""
        if self.config.strict:
            raise error

        i = JOINT_INDEX[kind]
        pose.angles[i] = 0.0
        pose.confidence[i] = 0.0
        logger.warning(f"Skipping {kind.value} at t={pose.time:.1f}ms: {error}")


def solve_pose(pose: Pose, config: Optional[SolverConfig] = None) -> Pose:
    """Solve a single pose with a one-off solver."""
    return AngleSolver(config).solve(pose)
