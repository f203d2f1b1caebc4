"""Utility functions for flexrod simulations."""

from .orientation import direction_from_axis_angle, direction_from_euler, rotate_direction
from .validation import (
    validate_finite,
    validate_non_negative,
    validate_positive,
    validate_range,
    validate_timestep,
)
from .vector import Vector3

# io is not re-exported here: it depends on flexrod.dynamics, which in turn
# imports this package.

__all__ = [
    "Vector3",
    "direction_from_euler",
    "direction_from_axis_angle",
    "rotate_direction",
    "validate_finite",
    "validate_positive",
    "validate_non_negative",
    "validate_range",
    "validate_timestep",
]
