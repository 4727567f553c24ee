"""Tests for the XML interchange format."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

import numpy as np
import pytest

from kinemotion.config.settings import SolverConfig
from kinemotion.core.angle_solver import AngleSolver
from kinemotion.data.exporters.xml_codec import (
    InterchangeCodec,
    from_interchange_tree,
    to_interchange_tree,
)
from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import JOINT_NAMES, JointKind
from kinemotion.errors import ClipNotFinalizedError, MalformedInterchangeError

HEAD_ONLY_FRAME = """
<Frame Time="{time}">
  <JointData>
    <Name>Head</Name>
    <Position><X>0.1</X><Y>0.2</Y><Z>0.3</Z></Position>
    <Angles><Roll>1.0</Roll><Yaw>2.0</Yaw><Pitch>3.0</Pitch></Angles>
  </JointData>
  <JointData>
    <Name>Unrecognized</Name>
    <Position><X>9</X><Y>9</Y><Z>9</Z></Position>
    <Angles><Roll>9</Roll><Yaw>9</Yaw><Pitch>9</Pitch></Angles>
  </JointData>
</Frame>
"""


def _document(frames: str = HEAD_ONLY_FRAME.format(time="0"), **attributes) -> str:
    attrs = {"Interval": "200", "Length": "0.0", "Keyframes": "1"}
    attrs.update(attributes)
    rendered = " ".join(f'{k}="{v}"' for k, v in attrs.items() if v is not None)
    return f"<Motion><Data {rendered}>{frames}</Data></Motion>"


class TestEncode:
    def test_data_attributes(self, finalized_clip):
        data = to_interchange_tree(finalized_clip)
        assert data.tag == "Data"
        assert data.get("Interval") == "200"
        assert float(data.get("Length")) == pytest.approx(0.4)
        assert data.get("Keyframes") == "3"

    def test_frame_layout(self, finalized_clip):
        data = to_interchange_tree(finalized_clip)
        frames = data.findall("Frame")
        assert [float(f.get("Time")) for f in frames] == [0.0, 200.0, 400.0]

        joints = frames[0].findall("JointData")
        assert tuple(j.findtext("Name") for j in joints) == JOINT_NAMES
        assert [c.tag for c in joints[0]] == ["Name", "Position", "Angles"]
        assert [c.tag for c in joints[0].find("Position")] == ["X", "Y", "Z"]
        assert [c.tag for c in joints[0].find("Angles")] == ["Roll", "Yaw", "Pitch"]

    def test_angles_written_roll_yaw_pitch(self, finalized_clip):
        data = to_interchange_tree(finalized_clip)
        hip = data.find("Frame").findall("JointData")[JointKind.RIGHT_HIP.index]
        angles = finalized_clip.keyframes[0].orientation(JointKind.RIGHT_HIP)
        assert float(hip.findtext("Angles/Roll")) == angles[0]
        assert float(hip.findtext("Angles/Pitch")) == angles[1]
        assert float(hip.findtext("Angles/Yaw")) == angles[2]

    def test_legacy_pelvis_position_holds_angles(self, finalized_clip):
        data = to_interchange_tree(finalized_clip)
        pelvis = data.find("Frame").findall("JointData")[JointKind.PELVIS.index]
        pose = finalized_clip.keyframes[0]
        assert float(pelvis.findtext("Position/X")) == 0.0
        assert float(pelvis.findtext("Position/Y")) == pose.pelvis_pitch
        assert float(pelvis.findtext("Position/Z")) == pose.pelvis_yaw

    def test_unfinalized_clip_raises(self, raw_clip):
        with pytest.raises(ClipNotFinalizedError):
            to_interchange_tree(raw_clip)

    def test_to_string_has_root(self, finalized_clip):
        root = ET.fromstring(InterchangeCodec().to_string(finalized_clip))
        assert root.tag == "Motion"
        assert root.find("Data") is not None


class TestRoundTrip:
    def test_tree_round_trip(self, finalized_clip):
        decoded = from_interchange_tree(to_interchange_tree(finalized_clip))

        assert decoded.interval_ms == finalized_clip.interval_ms
        assert decoded.duration == finalized_clip.duration
        assert decoded.keyframe_count == finalized_clip.keyframe_count
        assert decoded.is_finalized

        for original, restored in zip(finalized_clip, decoded):
            assert restored.time == original.time
            np.testing.assert_array_equal(restored.positions, original.positions)
            np.testing.assert_array_equal(restored.angles, original.angles)
            assert restored.pelvis_pitch == original.pelvis_pitch
            assert restored.pelvis_yaw == original.pelvis_yaw

    def test_round_trip_with_tracked_pelvis(self, standing_pose):
        standing_pose.set_position(JointKind.PELVIS, (0.0, -0.02, 2.0))
        clip = MotionClip.snapshot(standing_pose)

        decoded = from_interchange_tree(to_interchange_tree(clip))
        np.testing.assert_array_equal(decoded.positions_array(), clip.positions_array())
        assert decoded.keyframes[0].pelvis_pitch == clip.keyframes[0].pelvis_pitch
        assert decoded.keyframes[0].pelvis_yaw == clip.keyframes[0].pelvis_yaw

    def test_warns_when_pelvis_position_dropped(self, standing_pose, caplog):
        standing_pose.set_position(JointKind.PELVIS, (0.0, -0.02, 2.0))
        solver = AngleSolver(SolverConfig(legacy_pelvis=False))
        clip = MotionClip.snapshot(standing_pose, solver=solver)

        with caplog.at_level(logging.WARNING, logger="kinemotion.data.exporters.xml_codec"):
            to_interchange_tree(clip)
        assert "Pelvis position" in caplog.text

    def test_string_round_trip_without_pretty_print(self, finalized_clip):
        codec = InterchangeCodec(pretty_print=False)
        decoded = codec.from_string(codec.to_string(finalized_clip))
        np.testing.assert_array_equal(decoded.angles_array(), finalized_clip.angles_array())

    def test_pelvis_position_kept_without_legacy_mode(self, finalized_clip):
        finalized_clip.keyframes[0].set_position(JointKind.PELVIS, (0.0, -0.02, 2.0))
        codec = InterchangeCodec(legacy_pelvis=False)

        decoded = codec.from_tree(codec.to_tree(finalized_clip))
        pose = decoded.keyframes[0]
        np.testing.assert_array_equal(pose.position(JointKind.PELVIS), [0.0, -0.02, 2.0])
        assert pose.pelvis_pitch == 0.0

    def test_file_round_trip(self, finalized_clip, tmp_path):
        path = tmp_path / "nested" / "clip.xml"
        codec = InterchangeCodec()

        assert codec.export(finalized_clip, path)
        assert path.read_text(encoding="utf-8").startswith("<?xml")

        decoded = codec.load(path)
        np.testing.assert_array_equal(decoded.positions_array(), finalized_clip.positions_array())

    def test_export_empty_clip_returns_false(self, tmp_path):
        path = tmp_path / "empty.xml"
        assert not InterchangeCodec().export(MotionClip(), path)
        assert not path.exists()


class TestDecode:
    def test_unknown_joint_skipped(self):
        clip = InterchangeCodec().from_string(_document())
        pose = clip.keyframes[0]

        np.testing.assert_array_equal(pose.position(JointKind.HEAD), [0.1, 0.2, 0.3])
        np.testing.assert_array_equal(pose.orientation(JointKind.HEAD), [1.0, 3.0, 2.0])

        others = [kind.index for kind in JointKind if kind is not JointKind.HEAD]
        assert not pose.positions[others].any()
        assert not pose.angles[others].any()

    def test_decoded_joints_have_no_confidence(self):
        clip = InterchangeCodec().from_string(_document())
        assert not clip.keyframes[0].confidence.any()

    def test_accepts_bare_data_element(self):
        data = ET.fromstring(_document()).find("Data")
        assert from_interchange_tree(data).keyframe_count == 1

    def test_keyframe_count_from_frames(self, caplog):
        frames = HEAD_ONLY_FRAME.format(time="0") + HEAD_ONLY_FRAME.format(time="200")
        with caplog.at_level(logging.WARNING):
            clip = InterchangeCodec().from_string(_document(frames, Keyframes="5"))
        assert clip.keyframe_count == 2
        assert "Keyframes" in caplog.text

    def test_duration_from_length(self):
        clip = InterchangeCodec().from_string(_document(Length="3.397"))
        assert clip.duration == pytest.approx(3.397)
        assert clip.length == 0.0

    def test_missing_data_raises(self):
        with pytest.raises(MalformedInterchangeError):
            InterchangeCodec().from_string("<Motion><Frame Time='0'/></Motion>")

    @pytest.mark.parametrize("attribute", ["Interval", "Length", "Keyframes"])
    def test_missing_attribute_raises(self, attribute):
        with pytest.raises(MalformedInterchangeError):
            InterchangeCodec().from_string(_document(**{attribute: None}))

    def test_unparsable_number_raises(self):
        with pytest.raises(MalformedInterchangeError):
            InterchangeCodec().from_string(_document(Interval="fast"))
        with pytest.raises(MalformedInterchangeError):
            InterchangeCodec().from_string(_document(HEAD_ONLY_FRAME.format(time="noon")))

    def test_unparsable_joint_value_raises(self):
        frame = HEAD_ONLY_FRAME.format(time="0").replace("<X>0.1</X>", "<X>1,5</X>")
        with pytest.raises(MalformedInterchangeError):
            InterchangeCodec().from_string(_document(frame))

    def test_invalid_xml_raises(self):
        with pytest.raises(MalformedInterchangeError):
            InterchangeCodec().from_string("<Motion><Data")

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            InterchangeCodec().from_string("not xml")

    def test_load_invalid_file(self, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_text("<Data Interval=", encoding="utf-8")
        with pytest.raises(MalformedInterchangeError):
            InterchangeCodec().load(path)
