"""Tests for skeleton poses and motion clips."""

from __future__ import annotations

import numpy as np
import pytest

from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import (
    JOINT_NAMES,
    JOINT_ORDER,
    NUM_JOINTS,
    JointKind,
    JointSample,
    Pose,
)
from kinemotion.errors import EmptyClipError


class TestSkeleton:
    def test_serialization_order(self):
        assert JOINT_NAMES == (
            "Head", "Neck", "Spine", "Left Shoulder", "Right Shoulder",
            "Right Elbow", "Left Elbow", "Right Hand", "Left Hand",
            "Right Hip", "Left Hip", "Center Hip", "Left Knee", "Right Knee",
            "Pelvis", "Right Ankle", "Left Ankle",
        )
        assert NUM_JOINTS == 17

    def test_from_name(self):
        assert JointKind.from_name("Center Hip") is JointKind.CENTER_HIP
        assert JointKind.from_name("Unrecognized") is None
        assert JointKind.from_name("head") is None

    def test_index_matches_order(self):
        for i, kind in enumerate(JOINT_ORDER):
            assert kind.index == i


class TestPose:
    def test_defaults(self):
        pose = Pose()
        assert pose.positions.shape == (NUM_JOINTS, 3)
        assert pose.angles.shape == (NUM_JOINTS, 3)
        assert not pose.confidence.any()

    def test_from_positions(self, standing_pose):
        np.testing.assert_array_equal(standing_pose.position(JointKind.HEAD), [0.0, 0.75, 2.0])
        np.testing.assert_array_equal(standing_pose.position(JointKind.PELVIS), [0.0, 0.0, 0.0])

    def test_joint_is_independent(self, standing_pose):
        sample = standing_pose.joint(JointKind.HEAD)
        sample.position[0] = 9.0
        sample.roll = 9.0
        assert standing_pose.position(JointKind.HEAD)[0] == 0.0
        assert standing_pose.orientation(JointKind.HEAD)[0] == 0.0

    def test_set_joint(self):
        pose = Pose()
        pose.set_joint(
            JointKind.LEFT_KNEE,
            JointSample(position=[1, 2, 3], roll=4.0, pitch=5.0, yaw=6.0, confidence=0.5),
        )
        sample = pose.joint(JointKind.LEFT_KNEE)
        np.testing.assert_array_equal(sample.position, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(sample.orientation, [4.0, 5.0, 6.0])
        assert sample.confidence == 0.5

    def test_joints_in_serialization_order(self, standing_pose):
        assert list(standing_pose.joints()) == list(JOINT_ORDER)

    def test_copy_is_deep(self, standing_pose):
        copy = standing_pose.copy()
        copy.positions[0, 0] = 5.0
        copy.pelvis_yaw = 1.0
        assert standing_pose.positions[0, 0] == 0.0
        assert standing_pose.pelvis_yaw == 0.0


class TestMotionClip:
    def test_new_clip_is_empty(self):
        clip = MotionClip(interval_ms=100)
        assert clip.interval_ms == 100
        assert clip.keyframe_count == 0
        assert len(clip) == 0
        assert not clip.is_finalized

    def test_add_keyframe_counts(self, raw_clip):
        assert raw_clip.keyframe_count == 3
        assert len(raw_clip.keyframes) == 3

    def test_add_keyframe_copies(self, standing_pose):
        clip = MotionClip()
        clip.add_keyframe(standing_pose)
        standing_pose.set_position(JointKind.HEAD, (5.0, 5.0, 5.0))
        np.testing.assert_array_equal(
            clip.keyframes[0].position(JointKind.HEAD), [0.0, 0.75, 2.0]
        )

    def test_add_keyframe_does_not_solve(self, raw_clip):
        assert not raw_clip.angles_array().any()
        assert not raw_clip.is_finalized

    def test_finalize_empty_raises(self):
        with pytest.raises(EmptyClipError):
            MotionClip().finalize()

    def test_finalize_sets_duration(self, raw_clip):
        raw_clip.finalize()
        assert raw_clip.is_finalized
        assert raw_clip.duration == pytest.approx(0.4)
        assert raw_clip.angles_array().any()

    def test_single_keyframe_at_zero(self, head_up_pose):
        clip = MotionClip(interval_ms=200)
        clip.add_keyframe(head_up_pose)
        clip.finalize()

        assert clip.duration == 0.0
        assert clip.keyframes[0].orientation(JointKind.HEAD)[1] == pytest.approx(0.0, abs=1e-6)

    def test_finalize_is_idempotent(self, raw_clip):
        first = raw_clip.finalize().angles_array()
        second = raw_clip.finalize().angles_array()
        np.testing.assert_array_equal(first, second)

    def test_length_is_always_zero(self, finalized_clip):
        assert finalized_clip.length == 0.0

    def test_keyframes_view_is_read_only(self, raw_clip):
        with pytest.raises(AttributeError):
            raw_clip.keyframes.append(Pose())
        assert raw_clip.keyframe_count == 3

    def test_snapshot(self, standing_pose):
        clip = MotionClip.snapshot(standing_pose, interval_ms=50)
        assert clip.is_finalized
        assert clip.keyframe_count == 1
        assert clip.interval_ms == 50
        assert clip.keyframes[0].pelvis_pitch == pytest.approx(180.0)


class TestClipAccessors:
    def test_get_keyframe(self, raw_clip):
        assert raw_clip.get_keyframe(1).time == 200.0
        assert raw_clip.get_keyframe(3) is None
        assert raw_clip.get_keyframe(-1) is None

    def test_get_keyframe_at_time(self, raw_clip):
        assert raw_clip.get_keyframe_at_time(-50).time == 0.0
        assert raw_clip.get_keyframe_at_time(250).time == 200.0
        assert raw_clip.get_keyframe_at_time(1000).time == 400.0
        assert MotionClip().get_keyframe_at_time(0) is None

    def test_arrays(self, finalized_clip):
        np.testing.assert_array_equal(finalized_clip.timestamps(), [0.0, 200.0, 400.0])
        assert finalized_clip.positions_array().shape == (3, NUM_JOINTS, 3)
        assert finalized_clip.angles_array().shape == (3, NUM_JOINTS, 3)

    def test_empty_arrays(self):
        clip = MotionClip()
        assert clip.positions_array().shape == (0, NUM_JOINTS, 3)
        assert clip.timestamps().shape == (0,)

    def test_iteration(self, raw_clip):
        assert [pose.time for pose in raw_clip] == [0.0, 200.0, 400.0]
