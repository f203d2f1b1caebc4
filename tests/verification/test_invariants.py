"""
Rod Invariant Verification Tests.

Drives the rod through rough handle motion and checks the properties that
must hold for every reachable state:
- Reset idempotence and zero-dt pause
- Hard stretch and bend limits after every advance
- Convergence to the rigid rest pose under a fixed handle
- Shape query boundaries and the degenerate short rod
"""

import math

import numpy as np
import pytest

from flexrod.dynamics.drivers import SwingHandle
from flexrod.dynamics.properties import MATERIAL_PRESETS, ElasticProperties
from flexrod.dynamics.rod import Rod
from flexrod.utils.vector import Vector3, angle_between, distance, normalize, sub

# Tolerances
LIMIT_TOLERANCE = 1e-6  # length units / degrees
REST_TOLERANCE = 1e-2  # length units

ORIGIN = Vector3(0.0, 0.0, 0.0)
RIGHT = Vector3(1.0, 0.0, 0.0)


def _random_poses(seed: int, n: int):
    """Jerky handle motion: random unit directions and jittered positions."""
    rng = np.random.default_rng(seed)
    for _ in range(n):
        d = rng.normal(size=3)
        p = rng.normal(scale=20.0, size=3)
        yield Vector3(*p), Vector3(*d)


def _bend_deg(rod: Rod) -> float:
    to_tip = normalize(sub(rod.tip_position, rod.handle_position))
    return math.degrees(angle_between(to_tip, rod.handle_direction))


class TestReset:

    def test_reset_twice_is_identical(self):
        rod = Rod(100.0)
        for _ in range(5):
            rod.advance(ORIGIN, RIGHT, 1.0 / 60.0)
        rod.reset()
        first = rod.state
        rod.reset()
        assert rod.state == first
        assert rod.state.velocity == Vector3.zero()

    def test_zero_dt_after_motion(self):
        rod = Rod(100.0)
        for _ in range(3):
            rod.advance(ORIGIN, RIGHT, 1.0 / 60.0)
        before = rod.tip_position
        rod.advance(Vector3(10.0, 0.0, 0.0), Vector3(0.0, 0.0, 1.0), 0.0)
        assert rod.tip_position == before


class TestHardLimits:

    @pytest.mark.parametrize("preset", sorted(MATERIAL_PRESETS))
    def test_limits_under_random_motion(self, preset):
        props = MATERIAL_PRESETS[preset]
        rod = Rod(100.0, props)
        max_len = rod.active_length * props.max_stretch_ratio

        for pos, direction in _random_poses(seed=7, n=200):
            rod.advance(pos, direction, 1.0 / 30.0)
            assert distance(rod.tip_position, rod.handle_position) <= max_len + LIMIT_TOLERANCE
            if props.max_bend_angle < 179.9:
                assert _bend_deg(rod) <= props.max_bend_angle + LIMIT_TOLERANCE

    def test_limits_under_fast_swing(self):
        props = ElasticProperties(
            stiffness=2.0, damping=0.5, max_stretch_ratio=1.1, max_bend_angle=30.0
        )
        rod = Rod(100.0, props)
        driver = SwingHandle(axis=(0, 0, 1), amplitude_deg=120.0, frequency_hz=4.0)
        dt = 1.0 / 60.0
        for i in range(300):
            pos, direction = driver.pose(i * dt)
            rod.advance(pos, direction, dt)
            assert rod.stretch_ratio() <= 1.1 + LIMIT_TOLERANCE
            assert _bend_deg(rod) <= 30.0 + LIMIT_TOLERANCE

    def test_gripped_rod_limits_use_active_length(self):
        props = ElasticProperties(grip_ratio=0.4, max_stretch_ratio=1.2)
        rod = Rod(100.0, props)
        for pos, direction in _random_poses(seed=3, n=100):
            rod.advance(pos, direction, 1.0 / 60.0)
            assert distance(rod.tip_position, rod.handle_position) <= 60.0 * 1.2 + LIMIT_TOLERANCE


class TestConvergence:

    def test_converges_to_rigid_pose(self):
        rod = Rod(100.0)
        ideal = Vector3(100.0, 0.0, 0.0)
        for _ in range(1200):
            rod.advance(ORIGIN, RIGHT, 1.0 / 60.0)
        assert distance(rod.tip_position, ideal) < REST_TOLERANCE

    def test_converges_with_moved_handle(self):
        rod = Rod(100.0, ElasticProperties(grip_ratio=0.2))
        handle = Vector3(5.0, -3.0, 2.0)
        direction = Vector3(0.0, 0.0, -1.0)
        for _ in range(1200):
            rod.advance(handle, direction, 1.0 / 60.0)
        ideal = Vector3(5.0, -3.0, 2.0 - 80.0)
        assert distance(rod.tip_position, ideal) < REST_TOLERANCE


class TestQueryBoundaries:

    def test_tip_and_grip_endpoints(self):
        rod = Rod(100.0, ElasticProperties(grip_ratio=0.25, taper=0.6))
        for pos, direction in _random_poses(seed=11, n=20):
            rod.advance(pos, direction, 1.0 / 60.0)
        assert distance(rod.query_normalized_position(1.0), rod.tip_position) < 1e-9
        assert distance(rod.query_normalized_position(0.25), rod.handle_position) < 1e-9

    def test_zero_grip_start_is_handle(self):
        rod = Rod(100.0)
        rod.advance(Vector3(1.0, 2.0, 3.0), RIGHT, 1.0 / 60.0)
        assert distance(rod.query_normalized_position(0.0), rod.handle_position) < 1e-9

    def test_degenerate_rod_pins_tip(self):
        rod = Rod(1.0, ElasticProperties(grip_ratio=0.95))
        handle = Vector3(3.0, 4.0, 5.0)
        rod.advance(handle, RIGHT, 1.0 / 60.0)
        assert rod.tip_position == handle
        assert rod.query_normalized_position(1.0) == handle


class TestTiltScenario:
    """
    Length 100, default material, handle at origin facing +Y, then tilted
    90° to +X for a single 1/60 s frame.
    """

    def test_single_frame_lags_behind_ideal(self):
        rod = Rod(100.0)
        rod.reset()
        assert rod.tip_position == Vector3(0.0, 100.0, 0.0)

        ideal = Vector3(100.0, 0.0, 0.0)
        start_gap = distance(rod.tip_position, ideal)
        rod.advance(ORIGIN, RIGHT, 1.0 / 60.0)

        gap = distance(rod.tip_position, ideal)
        assert rod.tip_position.x > 0.0
        assert gap < start_gap
        assert gap > 1.0
        assert distance(rod.tip_position, ORIGIN) <= 150.0
