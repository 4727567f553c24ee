"""
Skeleton data structures and definitions.

Provides the fixed 17-joint tracking skeleton:
- JointKind: closed set of tracked joints
- JointSample: one joint's state at one instant
- Pose: all 17 joints at one instant
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Dict, Mapping, Sequence
import numpy as np


class JointKind(Enum):
    """
    Tracked skeleton joints.

    Values are the canonical interchange names. Definition order is the
    serialization order.
    """
    HEAD = "Head"
    NECK = "Neck"
    SPINE = "Spine"
    LEFT_SHOULDER = "Left Shoulder"
    RIGHT_SHOULDER = "Right Shoulder"
    RIGHT_ELBOW = "Right Elbow"
    LEFT_ELBOW = "Left Elbow"
    RIGHT_HAND = "Right Hand"
    LEFT_HAND = "Left Hand"
    RIGHT_HIP = "Right Hip"
    LEFT_HIP = "Left Hip"
    CENTER_HIP = "Center Hip"
    LEFT_KNEE = "Left Knee"
    RIGHT_KNEE = "Right Knee"
    PELVIS = "Pelvis"
    RIGHT_ANKLE = "Right Ankle"
    LEFT_ANKLE = "Left Ankle"

    @property
    def index(self) -> int:
        """Row of this joint in a Pose's arrays."""
        return JOINT_INDEX[self]

    @classmethod
    def from_name(cls, name: str) -> Optional["JointKind"]:
        """Look up a joint by its canonical name, or None if unknown."""
        return _JOINTS_BY_NAME.get(name)


JOINT_ORDER = tuple(JointKind)
JOINT_INDEX: Dict[JointKind, int] = {kind: i for i, kind in enumerate(JOINT_ORDER)}
JOINT_NAMES = tuple(kind.value for kind in JOINT_ORDER)
NUM_JOINTS = len(JOINT_ORDER)

_JOINTS_BY_NAME: Dict[str, JointKind] = {kind.value: kind for kind in JOINT_ORDER}

# Column order of Pose.angles
ROLL, PITCH, YAW = 0, 1, 2


@dataclass
class JointSample:
    """
    A single joint's state at one instant.

    Attributes:
        position: Sensor-space position in meters [x, y, z]
        roll: Roll in degrees (written by the angle solver)
        pitch: Pitch in degrees (written by the angle solver)
        yaw: Yaw in degrees (written by the angle solver)
        confidence: Tracking confidence, 0.0 to 1.0
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    confidence: float = 0.0

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64).reshape(3)

    @property
    def orientation(self) -> np.ndarray:
        """Orientation as [roll, pitch, yaw]."""
        return np.array([self.roll, self.pitch, self.yaw])

    def copy(self) -> "JointSample":
        """Create an independent copy of the sample."""
        return JointSample(
            position=self.position.copy(),
            roll=self.roll,
            pitch=self.pitch,
            yaw=self.yaw,
            confidence=self.confidence,
        )


@dataclass
class Pose:
    """
    A complete skeleton at one instant.

    Every joint is always present; rows of the arrays follow JOINT_ORDER.
    """
    time: float = 0.0  # milliseconds since recording start

    # Joint positions (17x3 array)
    positions: np.ndarray = field(default_factory=lambda: np.zeros((NUM_JOINTS, 3)))

    # Joint orientations as [roll, pitch, yaw] in degrees (17x3 array)
    angles: np.ndarray = field(default_factory=lambda: np.zeros((NUM_JOINTS, 3)))

    # Confidence per joint (17 array)
    confidence: np.ndarray = field(default_factory=lambda: np.zeros(NUM_JOINTS))

    # Derived pelvis angles in degrees
    pelvis_pitch: float = 0.0
    pelvis_yaw: float = 0.0

    def __post_init__(self):
        self.positions = np.array(self.positions, dtype=np.float64).reshape(NUM_JOINTS, 3)
        self.angles = np.array(self.angles, dtype=np.float64).reshape(NUM_JOINTS, 3)
        self.confidence = np.array(self.confidence, dtype=np.float64).reshape(NUM_JOINTS)

    @classmethod
    def from_positions(
        cls,
        positions: Mapping[JointKind, Sequence[float]],
        time: float = 0.0,
    ) -> "Pose":
        """
        Create a position-only pose.

        Args:
            positions: Joint positions; joints not given stay at the origin
            time: Timestamp in milliseconds

        Returns:
            Pose with zeroed orientation data
        """
        pose = cls(time=time)
        for kind, xyz in positions.items():
            pose.set_position(kind, xyz)
        return pose

    def position(self, kind: JointKind) -> np.ndarray:
        """Get a copy of a joint's position."""
        return self.positions[JOINT_INDEX[kind]].copy()

    def set_position(self, kind: JointKind, xyz: Sequence[float]):
        """Set a joint's position."""
        self.positions[JOINT_INDEX[kind]] = xyz

    def orientation(self, kind: JointKind) -> np.ndarray:
        """Get a copy of a joint's [roll, pitch, yaw]."""
        return self.angles[JOINT_INDEX[kind]].copy()

    def joint(self, kind: JointKind) -> JointSample:
        """Get an independent sample for one joint."""
        i = JOINT_INDEX[kind]
        roll, pitch, yaw = self.angles[i]
        return JointSample(
            position=self.positions[i].copy(),
            roll=float(roll),
            pitch=float(pitch),
            yaw=float(yaw),
            confidence=float(self.confidence[i]),
        )

    def set_joint(self, kind: JointKind, sample: JointSample):
        """Overwrite one joint with the values of a sample."""
        i = JOINT_INDEX[kind]
        self.positions[i] = sample.position
        self.angles[i] = (sample.roll, sample.pitch, sample.yaw)
        self.confidence[i] = sample.confidence

    def joints(self) -> Dict[JointKind, JointSample]:
        """Get independent samples for all joints, in serialization order."""
        return {kind: self.joint(kind) for kind in JOINT_ORDER}

    def copy(self) -> "Pose":
        """Create a deep copy of the pose."""
        return Pose(
            time=self.time,
            positions=self.positions.copy(),
            angles=self.angles.copy(),
            confidence=self.confidence.copy(),
            pelvis_pitch=self.pelvis_pitch,
            pelvis_yaw=self.pelvis_yaw,
        )
