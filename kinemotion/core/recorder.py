"""
Background motion recorder.

Samples the most recent pose delivered by a tracking sensor at a fixed
interval and accumulates the samples into a MotionClip:
- The sensor callback writes the latest pose into a lock-guarded buffer
- A recording thread copies that pose into the clip once per interval
- Stopping joins the thread and finalizes the clip
"""

import logging
import time
from threading import Event, Lock, Thread
from typing import Callable, Mapping, Optional, Sequence, Union

from kinemotion.config.settings import Settings
from kinemotion.core.angle_solver import AngleSolver
from kinemotion.data.motion_data import MotionClip
from kinemotion.data.skeleton import Pose, JointKind

logger = logging.getLogger(__name__)

PoseInput = Union[Pose, Mapping[JointKind, Sequence[float]]]


class LatestPoseBuffer:
    """Single-slot handoff of the most recent pose between threads."""

    def __init__(self):
        self._lock = Lock()
        self._pose: Optional[Pose] = None

    def update(self, pose: Pose):
        """Replace the stored pose with a copy of the given one."""
        pose = pose.copy()
        with self._lock:
            self._pose = pose

    def latest(self) -> Optional[Pose]:
        """Get a copy of the stored pose, or None if nothing arrived yet."""
        with self._lock:
            return self._pose.copy() if self._pose is not None else None

    def restamp(self, time_ms: float):
        """Rewrite the timestamp of the stored pose, if any."""
        with self._lock:
            if self._pose is not None:
                self._pose.time = time_ms

    def clear(self):
        """Drop the stored pose."""
        with self._lock:
            self._pose = None


class MotionRecorder:
    """
    Records sensor poses into motion clips.

    Example:
        >>> recorder = MotionRecorder()
        >>> sensor.on_skeleton = recorder.on_pose
        >>> recorder.start_recording(200)
        >>> ...
        >>> clip = recorder.stop_recording()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the recorder.

        Args:
            settings: Application settings (or use defaults)
            clock: Monotonic clock in seconds
        """
        self.settings = settings or Settings(load=False)
        self._clock = clock

        self._buffer = LatestPoseBuffer()
        self._solver = AngleSolver(self.settings.solver)

        # Recording state
        self._clip = MotionClip(self.settings.recording.interval_ms)
        self._start_time = self._clock()
        self._state_lock = Lock()

        # Threading
        self._stop_event = Event()
        self._record_thread: Optional[Thread] = None

    @property
    def is_recording(self) -> bool:
        """Check if the recording thread is running."""
        return self._record_thread is not None

    @property
    def last_clip(self) -> MotionClip:
        """The clip being recorded, or the last one recorded."""
        return self._clip

    def on_pose(self, pose: PoseInput):
        """
        Sensor callback: store a position-only pose as the latest sample.

        The pose is timestamped relative to the recording start. While the
        clip has no keyframes yet the start time follows the newest sample,
        so the first keyframe lands at t=0.

        Args:
            pose: Pose, or a mapping of joint positions
        """
        if not isinstance(pose, Pose):
            pose = Pose.from_positions(pose)
        else:
            pose = pose.copy()

        with self._state_lock:
            now = self._clock()
            if self._clip.keyframe_count == 0:
                self._start_time = now
            pose.time = (now - self._start_time) * 1000
            self._buffer.update(pose)

    def start_recording(self, interval_ms: Optional[int] = None):
        """
        Start recording keyframes in a background thread.

        Args:
            interval_ms: Sampling interval (or the configured default)
        """
        if self.is_recording:
            self._stop_thread()

        interval_ms = interval_ms or self.settings.recording.interval_ms

        with self._state_lock:
            self._clip = MotionClip(interval_ms)
            self._start_time = self._clock()
            # A pose left over from an earlier recording becomes t=0
            self._buffer.restamp(0.0)

        self._stop_event.clear()
        self._record_thread = Thread(
            target=self._record_loop,
            args=(interval_ms / 1000,),
            name="motion-recorder",
            daemon=True,
        )
        self._record_thread.start()
        logger.info(f"Recording started at {interval_ms}ms interval")

    def _record_loop(self, interval_s: float):
        while not self._stop_event.is_set():
            self.record_tick()
            self._stop_event.wait(interval_s)

    def record_tick(self) -> bool:
        """
        Copy the latest pose into the clip.

        Returns:
            True if a keyframe was added, False if no pose has arrived yet
        """
        pose = self._buffer.latest()
        if pose is None:
            logger.debug("No pose received yet, skipping keyframe")
            return False

        with self._state_lock:
            self._clip.add_keyframe(pose)
        return True

    def _stop_thread(self):
        self._stop_event.set()
        if self._record_thread is not None:
            self._record_thread.join(timeout=self.settings.recording.join_timeout)
            if self._record_thread.is_alive():
                logger.warning("Recording thread did not stop within the timeout")
            self._record_thread = None

    def stop_recording(self) -> MotionClip:
        """
        Stop recording and finalize the recorded clip.

        Returns:
            The finalized clip

        Raises:
            EmptyClipError: If no keyframe was recorded
        """
        self._stop_thread()

        with self._state_lock:
            clip = self._clip.finalize(self._solver)

        logger.info(
            f"Recording stopped: {clip.keyframe_count} keyframes, {clip.duration:.3f}s"
        )
        return clip

    def toggle_recording(self) -> Optional[MotionClip]:
        """
        Start recording if idle, otherwise stop.

        Returns:
            The finalized clip when stopping, None when starting
        """
        if self.is_recording:
            return self.stop_recording()
        self.start_recording()
        return None

    def take_snapshot(self) -> Optional[MotionClip]:
        """
        Capture the latest pose as a finalized single-keyframe clip.

        Returns:
            The clip, or None if no pose has arrived yet
        """
        pose = self._buffer.latest()
        if pose is None:
            return None
        pose.time = 0.0
        return MotionClip.snapshot(pose, self.settings.recording.interval_ms, self._solver)
