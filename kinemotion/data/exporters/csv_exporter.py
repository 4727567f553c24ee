"""
CSV format exporter for motion clips.

Provides spreadsheet-compatible export for analysis in external tools.
"""

from pathlib import Path
from typing import List
import csv
import logging

from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import Pose, JOINT_ORDER, ROLL, PITCH, YAW
from kinemotion.errors import ClipNotFinalizedError

logger = logging.getLogger(__name__)


def _column_prefix(name: str) -> str:
    return name.lower().replace(" ", "_")


class CSVExporter:
    """
    Exports motion clips to CSV format.

    Creates one of two tables, one row per keyframe:
    - Angles: roll/pitch/yaw for every joint plus pelvis pitch/yaw
    - Positions: x/y/z for every joint
    """

    def __init__(self, delimiter: str = ",", include_header: bool = True):
        """
        Initialize CSV exporter.

        Args:
            delimiter: CSV delimiter character
            include_header: Whether to include header row
        """
        self.delimiter = delimiter
        self.include_header = include_header

    def _build_angles_header(self) -> List[str]:
        header = ["frame", "time_ms"]
        for kind in JOINT_ORDER:
            prefix = _column_prefix(kind.value)
            header.extend([f"{prefix}_roll", f"{prefix}_pitch", f"{prefix}_yaw"])
        header.extend(["pelvis_pitch", "pelvis_yaw"])
        return header

    def _build_positions_header(self) -> List[str]:
        header = ["frame", "time_ms"]
        for kind in JOINT_ORDER:
            prefix = _column_prefix(kind.value)
            header.extend([f"{prefix}_x", f"{prefix}_y", f"{prefix}_z"])
        return header

    def _serialize_angles(self, index: int, pose: Pose) -> List:
        row = [index, pose.time]
        for angles in pose.angles:
            row.extend([angles[ROLL], angles[PITCH], angles[YAW]])
        row.extend([pose.pelvis_pitch, pose.pelvis_yaw])
        return row

    def _serialize_positions(self, index: int, pose: Pose) -> List:
        row = [index, pose.time]
        for position in pose.positions:
            row.extend(position.tolist())
        return row

    def _write(self, output_path: Path, header: List[str], rows: List[List]):
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", newline="") as f:
            writer = csv.writer(f, delimiter=self.delimiter)
            if self.include_header:
                writer.writerow(header)
            writer.writerows(rows)

    def export_angles(self, clip: MotionClip, output_path: Path) -> bool:
        """
        Export joint angles to CSV.

        Returns:
            True if successful, False for an empty clip
        """
        if clip.keyframe_count == 0:
            return False
        if not clip.is_finalized:
            raise ClipNotFinalizedError("Finalize the clip before exporting angles")

        rows = [self._serialize_angles(i, pose) for i, pose in enumerate(clip.keyframes)]
        self._write(output_path, self._build_angles_header(), rows)
        logger.info(f"Exported angles for {clip.keyframe_count} keyframes to {output_path}")
        return True

    def export_positions(self, clip: MotionClip, output_path: Path) -> bool:
        """
        Export joint positions to CSV.

        Returns:
            True if successful, False for an empty clip
        """
        if clip.keyframe_count == 0:
            return False

        rows = [self._serialize_positions(i, pose) for i, pose in enumerate(clip.keyframes)]
        self._write(output_path, self._build_positions_header(), rows)
        logger.info(f"Exported positions for {clip.keyframe_count} keyframes to {output_path}")
        return True

    def export_all(self, clip: MotionClip, output_dir: Path, base_name: str = "motion") -> bool:
        """
        Export angles and positions as two files in a directory.

        Args:
            clip: Finalized motion clip
            output_dir: Output directory
            base_name: File name prefix

        Returns:
            True if both files were written
        """
        output_dir = Path(output_dir)
        return (
            self.export_angles(clip, output_dir / f"{base_name}_angles.csv")
            and self.export_positions(clip, output_dir / f"{base_name}_positions.csv")
        )
