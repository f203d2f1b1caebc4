import math

import pytest

from flexrod.dynamics.constraints import (
    apply_bend_limit,
    apply_max_stretch,
    apply_soft_length,
    relaxation_factor,
    slerp_direction,
)
from flexrod.utils.vector import Vector3, angle_between, distance

ORIGIN = Vector3(0.0, 0.0, 0.0)
UP = Vector3(0.0, 1.0, 0.0)


def _approx(a: Vector3, b: Vector3, tol: float = 1e-9) -> bool:
    return distance(a, b) < tol


# --- Soft length ---

def test_relaxation_factor_is_clamped():
    assert relaxation_factor(20.0, 1.0 / 480.0) == pytest.approx(20.0 * 0.05 / 480.0)
    assert relaxation_factor(1e6, 1.0) == 1.0
    assert relaxation_factor(-5.0, 1.0) == 0.0
    assert relaxation_factor(20.0, 0.0) == 0.0


def test_soft_length_full_correction():
    """alpha = 20 * 0.05 * 1.0 = 1 snaps straight to the rest length."""
    out = apply_soft_length(Vector3(0.0, 200.0, 0.0), ORIGIN, 100.0, 20.0, 1.0)
    assert _approx(out, Vector3(0.0, 100.0, 0.0))


def test_soft_length_partial_correction():
    """alpha = 0.5 moves halfway from 200 to 100, along the same ray."""
    out = apply_soft_length(Vector3(200.0, 0.0, 0.0), ORIGIN, 100.0, 20.0, 0.5)
    assert _approx(out, Vector3(150.0, 0.0, 0.0))


def test_soft_length_skips_near_handle():
    p = Vector3(0.0, 5e-5, 0.0)
    assert apply_soft_length(p, ORIGIN, 100.0, 20.0, 1.0) is p


def test_soft_length_relative_to_moved_handle():
    handle = Vector3(10.0, 10.0, 10.0)
    out = apply_soft_length(Vector3(10.0, 10.0, 60.0), handle, 100.0, 20.0, 1.0)
    assert _approx(out, Vector3(10.0, 10.0, 110.0))


# --- Bend cone ---

def test_slerp_direction_midpoint():
    out = slerp_direction(UP, Vector3(1.0, 0.0, 0.0), 0.5, math.pi / 2)
    s = math.sqrt(0.5)
    assert _approx(out, Vector3(s, s, 0.0))


def test_bend_limit_projects_onto_cone():
    """A tip bent 90° with a 45° limit lands on the cone, distance kept."""
    out = apply_bend_limit(Vector3(100.0, 0.0, 0.0), ORIGIN, UP, 45.0)
    assert math.degrees(angle_between(out, UP)) == pytest.approx(45.0, abs=1e-9)
    assert distance(out, ORIGIN) == pytest.approx(100.0)
    assert out.x > 0.0 and out.z == pytest.approx(0.0)


def test_bend_limit_inside_cone_untouched():
    p = Vector3(10.0, 100.0, 0.0)
    assert apply_bend_limit(p, ORIGIN, UP, 45.0) is p


def test_bend_limit_disabled_at_180():
    p = Vector3(0.0, -100.0, 1.0)
    assert apply_bend_limit(p, ORIGIN, UP, 180.0) is p
    assert apply_bend_limit(p, ORIGIN, UP, 179.95) is p


def test_bend_limit_zero_angle_collapses_to_axis():
    """Malformed zero limit: tip pulled onto the handle axis, no crash."""
    out = apply_bend_limit(Vector3(50.0, 50.0, 0.0), ORIGIN, UP, 0.0)
    assert _approx(out, Vector3(0.0, math.hypot(50.0, 50.0), 0.0), tol=1e-6)


def test_bend_limit_negative_angle_is_finite():
    out = apply_bend_limit(Vector3(50.0, 50.0, 0.0), ORIGIN, UP, -30.0)
    assert all(math.isfinite(c) for c in out)


def test_bend_limit_skips_tip_on_handle():
    p = Vector3(1e-5, 0.0, 0.0)
    assert apply_bend_limit(p, ORIGIN, UP, 10.0) is p


# --- Max stretch ---

def test_max_stretch_clamps_radially():
    out = apply_max_stretch(Vector3(0.0, 300.0, 0.0), ORIGIN, 150.0)
    assert _approx(out, Vector3(0.0, 150.0, 0.0))


def test_max_stretch_within_limit_untouched():
    p = Vector3(30.0, 40.0, 0.0)
    assert apply_max_stretch(p, ORIGIN, 150.0) is p
