"""
JSON format exporter for motion clips.

Provides human-readable export of a finalized clip with per-joint positions
and angles.
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging

import numpy as np

from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import Pose, JointKind, JOINT_ORDER
from kinemotion.errors import ClipNotFinalizedError

logger = logging.getLogger(__name__)

FORMAT_NAME = "kinemotion_clip"
FORMAT_VERSION = "1.0"


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        return super().default(obj)


class JSONExporter:
    """
    Exports motion clips to JSON format.

    Output contains:
    - Metadata (interval, duration, keyframe count)
    - Per-keyframe joint positions and angles
    - Optional confidence scores
    """

    def __init__(self, pretty_print: bool = True, include_confidence: bool = True):
        """
        Initialize JSON exporter.

        Args:
            pretty_print: Format output for readability
            include_confidence: Include per-joint confidence scores
        """
        self.pretty_print = pretty_print
        self.include_confidence = include_confidence

    def _serialize_pose(self, pose: Pose) -> Dict[str, Any]:
        """Serialize a single keyframe to dictionary."""
        joints = {}
        for kind in JOINT_ORDER:
            sample = pose.joint(kind)
            joint = {
                "position": sample.position,
                "roll": sample.roll,
                "pitch": sample.pitch,
                "yaw": sample.yaw,
            }
            if self.include_confidence:
                joint["confidence"] = sample.confidence
            joints[kind.value] = joint

        return {
            "time": pose.time,
            "pelvis_pitch": pose.pelvis_pitch,
            "pelvis_yaw": pose.pelvis_yaw,
            "joints": joints,
        }

    def to_dict(self, clip: MotionClip) -> Dict[str, Any]:
        """Build the export document for a finalized clip."""
        if not clip.is_finalized:
            raise ClipNotFinalizedError("Finalize the clip before exporting it")

        return {
            "version": FORMAT_VERSION,
            "format": FORMAT_NAME,
            "metadata": {
                "interval_ms": clip.interval_ms,
                "duration": clip.duration,
                "num_keyframes": clip.keyframe_count,
            },
            "keyframes": [self._serialize_pose(pose) for pose in clip.keyframes],
        }

    def export(self, clip: MotionClip, output_path: Path) -> bool:
        """
        Export motion clip to JSON file.

        Args:
            clip: Finalized motion clip
            output_path: Output file path

        Returns:
            True if successful, False for an empty clip
        """
        if clip.keyframe_count == 0:
            return False

        export_data = self.to_dict(clip)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            if self.pretty_print:
                json.dump(export_data, f, indent=2, cls=NumpyEncoder)
            else:
                json.dump(export_data, f, cls=NumpyEncoder)

        logger.info(f"Exported {clip.keyframe_count} keyframes to {output_path}")
        return True


def import_json(file_path: Path) -> Optional[MotionClip]:
    """
    Import a motion clip from a JSON file written by JSONExporter.

    Args:
        file_path: Path to JSON file

    Returns:
        MotionClip if the file is in the expected format, None otherwise
    """
    with open(file_path, "r") as f:
        data = json.load(f)

    if data.get("format") != FORMAT_NAME:
        logger.warning(f"{file_path} is not a {FORMAT_NAME} document")
        return None

    metadata = data.get("metadata", {})
    clip = MotionClip(interval_ms=metadata.get("interval_ms", 200))

    for frame_data in data.get("keyframes", []):
        pose = Pose(
            time=frame_data.get("time", 0.0),
            pelvis_pitch=frame_data.get("pelvis_pitch", 0.0),
            pelvis_yaw=frame_data.get("pelvis_yaw", 0.0),
        )

        for name, joint in frame_data.get("joints", {}).items():
            kind = JointKind.from_name(name)
            if kind is None:
                logger.debug(f"Skipping joint with unknown name {name!r}")
                continue
            sample = pose.joint(kind)
            sample.position[:] = joint.get("position", [0.0, 0.0, 0.0])
            sample.roll = joint.get("roll", 0.0)
            sample.pitch = joint.get("pitch", 0.0)
            sample.yaw = joint.get("yaw", 0.0)
            sample.confidence = joint.get("confidence", 0.0)
            pose.set_joint(kind, sample)

        clip.add_keyframe(pose)

    clip.restore(metadata.get("duration", 0.0))
    return clip
