"""
Handle direction utilities.

The rod is driven by a handle *direction* (a unit vector), not a full
orientation. These helpers build such directions from engineer-friendly
angle descriptions so drivers and scripts never need to touch rotation
matrices or quaternions directly.

Common Use Cases
----------------
- Tilt the default +Y handle by roll/pitch/yaw: `direction_from_euler()`
- Rotate a base direction about an axis: `direction_from_axis_angle()`
- Rotate an existing direction: `rotate_direction()`

Examples
--------
>>> from flexrod.utils.orientation import direction_from_axis_angle
>>> d = direction_from_axis_angle(axis=[0, 0, 1], angle=-90)  # +Y -> +X
"""
from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation as R

from flexrod.utils.vector import Vector3, as_vector

EPSILON_AXIS = 1e-12

UP: Vector3 = Vector3(0.0, 1.0, 0.0)
"""Default handle direction (+Y)."""


def _axis_unit(axis) -> NDArray[np.float64]:
    a = np.asarray(list(as_vector(axis)), dtype=np.float64)
    n = np.linalg.norm(a)
    if n < EPSILON_AXIS:
        raise ValueError(f"Rotation axis must be non-zero, got {a.tolist()}")
    return a / n


# =============================================================================
# Euler Angles (Roll, Pitch, Yaw)
# =============================================================================

def direction_from_euler(
    roll: float = 0.0,
    pitch: float = 0.0,
    yaw: float = 0.0,
    base: Vector3 | tuple[float, float, float] = UP,
    degrees: bool = True,
    order: str = "xyz",
) -> Vector3:
    """
    Rotate a base direction by Euler angles.

    Parameters
    ----------
    roll : float
        Rotation about X [degrees or radians]
    pitch : float
        Rotation about Y [degrees or radians]
    yaw : float
        Rotation about Z [degrees or radians]
    base : Vector3 | tuple
        Direction to rotate. Default +Y (the rod's rest direction).
    degrees : bool
        If True (default), angles are in degrees.
    order : str
        Euler sequence passed to scipy. Default "xyz".

    Returns
    -------
    Vector3
        Rotated unit direction.

    Examples
    --------
    >>> direction_from_euler(roll=90)   # +Y tipped toward +Z
    """
    rot = R.from_euler(order, [roll, pitch, yaw], degrees=degrees)
    b = as_vector(base).to_numpy()
    return Vector3.from_iterable(rot.apply(b / np.linalg.norm(b)))


# =============================================================================
# Axis-Angle Rotation
# =============================================================================

def direction_from_axis_angle(
    axis,
    angle: float,
    base: Vector3 | tuple[float, float, float] = UP,
    degrees: bool = True,
) -> Vector3:
    """
    Rotate ``base`` by ``angle`` about ``axis`` (right-hand rule).

    Raises
    ------
    ValueError
        If ``axis`` has zero length.
    """
    return rotate_direction(base, axis, angle, degrees=degrees)


def rotate_direction(
    direction,
    axis,
    angle: float,
    degrees: bool = True,
) -> Vector3:
    """
    Rotate a direction vector about an axis.

    The result keeps the input's length; callers pass unit vectors when
    they want unit output.
    """
    if degrees:
        angle = np.deg2rad(angle)
    rot = R.from_rotvec(_axis_unit(axis) * angle)
    return Vector3.from_iterable(rot.apply(as_vector(direction).to_numpy()))


def describe_direction(direction) -> str:
    """
    Human-readable summary of a direction relative to +Y.

    Examples
    --------
    >>> describe_direction(Vector3(1, 0, 0))
    'dir=(1.000, 0.000, 0.000), tilt from +Y: 90.0°'
    """
    d = as_vector(direction).to_numpy()
    n = np.linalg.norm(d)
    tilt = 0.0 if n == 0 else float(np.degrees(np.arccos(np.clip(d[1] / n, -1.0, 1.0))))
    return f"dir=({d[0]:.3f}, {d[1]:.3f}, {d[2]:.3f}), tilt from +Y: {tilt:.1f}°"
