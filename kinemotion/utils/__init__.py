"""Utility modules for kinemotion."""

from kinemotion.utils.math_utils import (
    degrees_to_radians,
    radians_to_degrees,
    direction_vector,
    vector_length,
    cross_product,
    angle_between,
    solve_octant,
    roll,
)

__all__ = [
    "degrees_to_radians",
    "radians_to_degrees",
    "direction_vector",
    "vector_length",
    "cross_product",
    "angle_between",
    "solve_octant",
    "roll",
]
