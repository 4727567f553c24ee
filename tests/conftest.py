from __future__ import annotations

import pytest

from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import JointKind, Pose

# Upright subject facing the sensor, two meters away. Pelvis is left at the
# origin; tests that need a tracked pelvis set it explicitly.
STANDING_POSITIONS = {
    JointKind.HEAD: (0.0, 0.75, 2.0),
    JointKind.NECK: (0.0, 0.55, 2.0),
    JointKind.SPINE: (0.0, 0.2, 2.0),
    JointKind.LEFT_SHOULDER: (-0.2, 0.5, 2.0),
    JointKind.RIGHT_SHOULDER: (0.2, 0.5, 2.0),
    JointKind.RIGHT_ELBOW: (0.25, 0.25, 2.0),
    JointKind.LEFT_ELBOW: (-0.25, 0.25, 2.0),
    JointKind.RIGHT_HAND: (0.3, 0.0, 1.9),
    JointKind.LEFT_HAND: (-0.3, 0.0, 1.9),
    JointKind.RIGHT_HIP: (0.1, -0.05, 2.0),
    JointKind.LEFT_HIP: (-0.1, -0.05, 2.0),
    JointKind.CENTER_HIP: (0.0, -0.05, 2.0),
    JointKind.LEFT_KNEE: (-0.1, -0.45, 2.05),
    JointKind.RIGHT_KNEE: (0.1, -0.45, 2.05),
    JointKind.RIGHT_ANKLE: (0.1, -0.85, 2.0),
    JointKind.LEFT_ANKLE: (-0.1, -0.85, 2.0),
}


def make_standing_pose(time: float = 0.0) -> Pose:
    return Pose.from_positions(STANDING_POSITIONS, time=time)


@pytest.fixture
def standing_pose() -> Pose:
    return make_standing_pose()


@pytest.fixture
def head_up_pose() -> Pose:
    """Only neck, spine and head tracked; head straight above the neck."""
    return Pose.from_positions(
        {
            JointKind.NECK: (0.0, 1.0, 0.0),
            JointKind.SPINE: (0.0, 0.0, 0.0),
            JointKind.HEAD: (0.0, 1.5, 0.0),
        },
        time=0.0,
    )


@pytest.fixture
def raw_clip() -> MotionClip:
    """Three keyframes, 200ms apart, right arm raising."""
    clip = MotionClip(interval_ms=200)
    for i in range(3):
        pose = make_standing_pose(time=200.0 * i)
        pose.set_position(JointKind.RIGHT_HAND, (0.3 + 0.05 * i, 0.1 * i, 1.9))
        clip.add_keyframe(pose)
    return clip


@pytest.fixture
def finalized_clip(raw_clip) -> MotionClip:
    return raw_clip.finalize()
