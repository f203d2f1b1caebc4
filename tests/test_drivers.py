import math

import pytest

from flexrod.dynamics.drivers import FunctionHandle, StaticHandle, SwingHandle
from flexrod.utils.orientation import (
    describe_direction,
    direction_from_axis_angle,
    direction_from_euler,
    rotate_direction,
)
from flexrod.utils.vector import Vector3, distance, length


def _close(a, b, tol=1e-9):
    return distance(a, b) < tol


# --- Orientation helpers ---

def test_axis_angle_tilts_up_to_right():
    """+Y rotated -90° about +Z points along +X."""
    d = direction_from_axis_angle([0, 0, 1], -90)
    assert _close(d, Vector3(1.0, 0.0, 0.0))


def test_euler_roll_tilts_up_to_z():
    d = direction_from_euler(roll=90)
    assert _close(d, Vector3(0.0, 0.0, 1.0))


def test_radians_supported():
    d = rotate_direction(Vector3(0.0, 1.0, 0.0), (0, 0, 1), math.pi / 2, degrees=False)
    assert _close(d, Vector3(-1.0, 0.0, 0.0))


def test_zero_axis_rejected():
    with pytest.raises(ValueError, match="non-zero"):
        rotate_direction(Vector3(0.0, 1.0, 0.0), (0, 0, 0), 45)


def test_describe_direction():
    assert "90.0" in describe_direction(Vector3(1.0, 0.0, 0.0))


# --- Drivers ---

def test_static_handle_normalizes():
    drv = StaticHandle((1, 2, 3), (0, 0, 4))
    pos, direction = drv.pose(12.5)
    assert pos == Vector3(1.0, 2.0, 3.0)
    assert direction == Vector3(0.0, 0.0, 1.0)


def test_swing_handle_angles():
    drv = SwingHandle(axis=(0, 0, 1), amplitude_deg=90.0, frequency_hz=1.0)
    _, d0 = drv.pose(0.0)
    _, d_quarter = drv.pose(0.25)
    _, d_three_quarter = drv.pose(0.75)
    assert _close(d0, Vector3(0.0, 1.0, 0.0))
    assert _close(d_quarter, Vector3(-1.0, 0.0, 0.0))
    assert _close(d_three_quarter, Vector3(1.0, 0.0, 0.0))
    assert drv.angle(0.25) == pytest.approx(90.0)


def test_swing_handle_keeps_unit_direction_and_pivot():
    drv = SwingHandle(pivot=(5, 0, 0), axis=(1, 1, 0), amplitude_deg=70.0, frequency_hz=2.3)
    for t in (0.0, 0.1, 0.37, 1.9):
        pos, direction = drv.pose(t)
        assert pos == Vector3(5.0, 0.0, 0.0)
        assert length(direction) == pytest.approx(1.0)


def test_function_handle_converts_tuples():
    drv = FunctionHandle(lambda t: ((t, 0, 0), (0, 1, 0)))
    pos, direction = drv.pose(2.0)
    assert pos == Vector3(2.0, 0.0, 0.0)
    assert direction == Vector3(0.0, 1.0, 0.0)
