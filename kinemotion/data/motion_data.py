"""
Motion data storage.

A MotionClip accumulates position-only poses as keyframes while recording,
then derives every keyframe's joint angles and the clip duration in a
single finalize step.
"""

import logging
from typing import Iterator, List, Optional, Tuple

import numpy as np

from kinemotion.core.angle_solver import AngleSolver
from kinemotion.data.skeleton import Pose, NUM_JOINTS
from kinemotion.errors import EmptyClipError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 200


class MotionClip:
    """
    An ordered sequence of keyframe poses.

    Not internally synchronized: add_keyframe and finalize on the same clip
    must come from a single writer.

    Example:
        >>> clip = MotionClip(interval_ms=200)
        >>> clip.add_keyframe(pose)
        >>> clip.finalize()
        >>> clip.duration
    """

    def __init__(self, interval_ms: int = DEFAULT_INTERVAL_MS):
        """
        Create an empty clip.

        Args:
            interval_ms: Intended spacing between keyframes. Not necessarily
                the actual spacing between samples.
        """
        self._interval_ms = interval_ms
        self._keyframes: List[Pose] = []
        self._duration = 0.0
        self._finalized = False

    @classmethod
    def snapshot(
        cls,
        pose: Pose,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        solver: Optional[AngleSolver] = None,
    ) -> "MotionClip":
        """Create a finalized single-keyframe clip from a pose."""
        clip = cls(interval_ms)
        clip.add_keyframe(pose)
        return clip.finalize(solver)

    @property
    def interval_ms(self) -> int:
        """Nominal sampling interval in milliseconds."""
        return self._interval_ms

    @property
    def keyframes(self) -> Tuple[Pose, ...]:
        """Keyframes in playback order."""
        return tuple(self._keyframes)

    @property
    def keyframe_count(self) -> int:
        """Number of keyframes."""
        return len(self._keyframes)

    @property
    def duration(self) -> float:
        """Duration in seconds. Only meaningful once finalized."""
        return self._duration

    @property
    def length(self) -> float:
        """Unused recorded length. Always 0.0; see `duration`."""
        return 0.0

    @property
    def is_finalized(self) -> bool:
        """Whether keyframe angles and duration have been computed."""
        return self._finalized

    def __len__(self) -> int:
        return len(self._keyframes)

    def __iter__(self) -> Iterator[Pose]:
        return iter(self._keyframes)

    def add_keyframe(self, pose: Pose):
        """Append an independent copy of a pose."""
        self._keyframes.append(pose.copy())

    def finalize(self, solver: Optional[AngleSolver] = None) -> "MotionClip":
        """
        Compute joint angles for every keyframe and the clip duration.

        Safe to call again; angles depend only on positions.

        Args:
            solver: Angle solver to use (or a default one)

        Returns:
            This clip

        Raises:
            EmptyClipError: If the clip has no keyframes
        """
        if not self._keyframes:
            raise EmptyClipError("Cannot finalize a clip without keyframes")

        solver = solver or AngleSolver()
        for pose in self._keyframes:
            solver.solve_in_place(pose)

        self._duration = self._keyframes[-1].time / 1000
        self._finalized = True

        logger.debug(
            f"Finalized clip: {self.keyframe_count} keyframes, {self._duration:.3f}s"
        )
        return self

    def restore(self, duration: float):
        """Mark a clip rebuilt from stored data as finalized."""
        self._duration = duration
        self._finalized = True

    def get_keyframe(self, index: int) -> Optional[Pose]:
        """Get keyframe at index."""
        if 0 <= index < len(self._keyframes):
            return self._keyframes[index]
        return None

    def get_keyframe_at_time(self, time_ms: float) -> Optional[Pose]:
        """Get the last keyframe at or before a time, clamped to the clip."""
        if not self._keyframes:
            return None

        selected = self._keyframes[0]
        for pose in self._keyframes:
            if pose.time > time_ms:
                break
            selected = pose
        return selected

    def timestamps(self) -> np.ndarray:
        """Keyframe times in milliseconds."""
        return np.array([pose.time for pose in self._keyframes], dtype=np.float64)

    def positions_array(self) -> np.ndarray:
        """All positions as a (num_keyframes, 17, 3) array."""
        if not self._keyframes:
            return np.zeros((0, NUM_JOINTS, 3))
        return np.stack([pose.positions for pose in self._keyframes])

    def angles_array(self) -> np.ndarray:
        """All [roll, pitch, yaw] angles as a (num_keyframes, 17, 3) array."""
        if not self._keyframes:
            return np.zeros((0, NUM_JOINTS, 3))
        return np.stack([pose.angles for pose in self._keyframes])
