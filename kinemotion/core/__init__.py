"""
Core processing for kinemotion.

The angle solver is exported here; the recorder lives in
kinemotion.core.recorder since it depends on the data package.
"""

from kinemotion.core.angle_solver import AngleSolver, solve_pose

__all__ = ["AngleSolver", "solve_pose"]
