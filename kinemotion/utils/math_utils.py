"""
Vector math primitives for skeletal joint data.

Provides functions for:
- Direction vectors between joint positions
- Dot/cross products and angle-between
- Octant-based roll angle
- Degree/radian conversion
"""

import numpy as np

from kinemotion.errors import DegenerateVectorError

# Vectors shorter than this are treated as zero-length
EPSILON = 1e-10

Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])

# Roll is positive in these octants and negated in the rest
_POSITIVE_ROLL_OCTANTS = frozenset((1, 2, 3, 4))


def degrees_to_radians(deg: float) -> float:
    """Convert degrees to radians."""
    return deg * np.pi / 180


def radians_to_degrees(rad: float) -> float:
    """Convert radians to degrees."""
    return rad * 180 / np.pi


def direction_vector(start: np.ndarray, end: np.ndarray) -> np.ndarray:
    """
    Calculate the vector pointing from one position to another.

    Args:
        start: Start position [x, y, z]
        end: End position [x, y, z]

    Returns:
        end - start, component-wise
    """
    return np.asarray(end, dtype=np.float64) - np.asarray(start, dtype=np.float64)


def vector_length(v: np.ndarray) -> float:
    """Euclidean length of a vector."""
    return float(np.linalg.norm(v))


def cross_product(v1: np.ndarray, v2: np.ndarray) -> np.ndarray:
    """Right-handed cross product of two 3-vectors."""
    return np.cross(np.asarray(v1, dtype=np.float64), np.asarray(v2, dtype=np.float64))


def angle_between(v1: np.ndarray, v2: np.ndarray) -> float:
    """
    Calculate the angle between two vectors.

    Args:
        v1: First vector
        v2: Second vector

    Returns:
        Angle in degrees, in [0, 180]

    Raises:
        DegenerateVectorError: If either vector has zero length
    """
    len1 = vector_length(v1)
    len2 = vector_length(v2)
    if len1 < EPSILON or len2 < EPSILON:
        raise DegenerateVectorError(
            f"Cannot measure angle with a zero-length vector: {v1!r}, {v2!r}"
        )

    # Clip so rounding never pushes acos outside its domain
    cos_angle = np.clip(np.dot(v1, v2) / (len1 * len2), -1.0, 1.0)
    return float(radians_to_degrees(np.arccos(cos_angle)))


def solve_octant(v: np.ndarray) -> int:
    """
    Classify a vector into one of eight octants by the signs of (y, z, x).

    The numbering is specific to the skeleton's sensor frame and is not the
    conventional octant numbering.
    """
    x, y, z = v[0], v[1], v[2]
    if y > 0.0:
        if z < 0.0:
            return 1 if x < 0.0 else 5
        return 2 if x < 0.0 else 6
    if z < 0.0:
        return 4 if x < 0.0 else 8
    return 3 if x < 0.0 else 7


def roll(v: np.ndarray) -> float:
    """
    Signed lateral tilt of a vector about the forward axis.

    Args:
        v: Direction vector

    Returns:
        asin(|x| / |v|) in degrees, negated for octants 5-8

    Raises:
        DegenerateVectorError: If the vector has zero length
    """
    hypotenuse = vector_length(v)
    if hypotenuse < EPSILON:
        raise DegenerateVectorError(f"Cannot compute roll of a zero-length vector: {v!r}")

    ratio = min(abs(float(v[0])) / hypotenuse, 1.0)
    angle = float(radians_to_degrees(np.arcsin(ratio)))

    if solve_octant(v) in _POSITIVE_ROLL_OCTANTS:
        return angle
    return -angle
