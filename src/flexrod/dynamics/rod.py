"""
Elastic rod with one simulated tip driven by a kinematic handle.

The handle (pivot) pose is supplied every tick; only the tip is integrated.
Velocity is implicit in the Verlet pair (tip, previous tip). Each tick is
split into ``SUB_STEPS`` equal sub-steps; every sub-step applies, in order:

    damping -> bending spring -> Verlet step -> soft length
            -> bend cone -> max stretch

The shape between handle and tip is reconstructed on demand as a cubic
Bezier whose control points are biased by the material taper.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from flexrod.dynamics.constraints import (
    apply_bend_limit,
    apply_max_stretch,
    apply_soft_length,
)
from flexrod.dynamics.properties import UNCONSTRAINED_BEND_ANGLE, ElasticProperties
from flexrod.utils.vector import (
    Vector3,
    add,
    angle_between,
    as_vector,
    distance,
    normalize,
    scale,
    sub,
)

SUB_STEPS = 8
MIN_ACTIVE_LENGTH = 0.1  # Shorter rods are pinned to the handle
TAPER_STIFFNESS_GAIN = 0.5

# Bezier control point weights (fraction of active length)
HANDLE_WEIGHT_BASE = 0.33
HANDLE_WEIGHT_TAPER = 0.4
TIP_WEIGHT_BASE = 0.33
TIP_WEIGHT_TAPER = 0.1
TIP_HANDLE_BLEND = 0.5


@dataclass(frozen=True)
class RodState:
    """
    Verlet state of the tip.

    Attributes
    ----------
    tip_position : Vector3
        Current tip position
    previous_tip_position : Vector3
        Tip position one sub-step earlier
    """

    tip_position: Vector3
    previous_tip_position: Vector3

    @property
    def velocity(self) -> Vector3:
        """Implicit per-step displacement (not divided by dt)."""
        return sub(self.tip_position, self.previous_tip_position)

    @classmethod
    def at_rest(cls, position: Vector3) -> RodState:
        return cls(position, position)


def step_once(
    state: RodState,
    handle_position: Vector3,
    handle_direction: Vector3,
    active_length: float,
    props: ElasticProperties,
    dt: float,
) -> RodState:
    """
    Advance the tip by one sub-step.

    Parameters
    ----------
    state : RodState
        Tip state before the step
    handle_position : Vector3
        Pivot position (held fixed during the tick)
    handle_direction : Vector3
        Unit handle direction
    active_length : float
        Rest distance between pivot and tip
    props : ElasticProperties
        Material parameters
    dt : float
        Sub-step duration [s]

    Returns
    -------
    RodState
        New state; ``previous_tip_position`` is the input tip position.

    Notes
    -----
    Pure function: ``state`` is not modified, so folding it over the
    sub-steps cannot alias the tip pair mid-step.
    """
    tip = state.tip_position

    # Implicit velocity with drag floored at zero (large damping stops, never reverses)
    drag = max(0.0, 1.0 - props.damping * dt)
    damped_velocity = scale(state.velocity, drag)

    # Bending spring toward the rigid pose; taper models a thicker, stiffer base
    ideal = add(handle_position, scale(handle_direction, active_length))
    displacement = sub(ideal, tip)
    stiffness = props.stiffness * (1.0 + props.taper * TAPER_STIFFNESS_GAIN)
    acceleration = scale(displacement, stiffness / props.effective_mass)

    nxt = add(add(tip, damped_velocity), scale(acceleration, dt * dt))

    nxt = apply_soft_length(nxt, handle_position, active_length,
                            props.stretch_factor, dt)
    nxt = apply_bend_limit(nxt, handle_position, handle_direction,
                           props.max_bend_angle, UNCONSTRAINED_BEND_ANGLE)
    nxt = apply_max_stretch(nxt, handle_position,
                            active_length * props.max_stretch_ratio)

    return RodState(tip_position=nxt, previous_tip_position=tip)


class Rod:
    """
    Flexible rod whose free end follows a driven handle.

    Parameters
    ----------
    length : float
        Nominal total length (pommel to tip)
    properties : ElasticProperties | None
        Material parameters. Defaults to ``ElasticProperties()``.
        Out-of-domain values emit ``RuntimeWarning`` but are accepted.

    Attributes
    ----------
    length : float
        Total length
    properties : ElasticProperties
        Current material parameters
    handle_position : Vector3
        Last supplied pivot position (default origin)
    handle_direction : Vector3
        Last supplied handle direction, unit length (default +Y)
    tip_position : Vector3
        Simulated tip position
    previous_tip_position : Vector3
        Tip position one sub-step earlier

    Notes
    -----
    **Lifecycle:**
    The constructor seats the tip at the rigid rest pose. ``reconfigure``
    only swaps length/properties; call ``reset`` afterwards if the grip
    ratio or length changed and a consistent rest pose is wanted.

    Not reentrant: serialize ``advance``/``reconfigure``/``reset`` on one
    instance. Separate instances share nothing.

    Examples
    --------
    >>> rod = Rod(100.0)
    >>> rod.advance(Vector3(0, 0, 0), Vector3(1, 0, 0), 1 / 60)
    >>> curve = rod.sample_curve(30)   # (31, 3) array for rendering
    """

    __slots__ = (
        "length", "properties",
        "handle_position", "handle_direction",
        "tip_position", "previous_tip_position",
    )

    def __init__(self, length: float, properties: ElasticProperties | None = None) -> None:
        self.length = float(length)
        self.properties = properties if properties is not None else ElasticProperties()
        self.properties.validate(strict=False)

        self.handle_position = Vector3(0.0, 0.0, 0.0)
        self.handle_direction = Vector3(0.0, 1.0, 0.0)
        self.tip_position = Vector3(0.0, self.length, 0.0)
        self.previous_tip_position = self.tip_position

        self.reset()

    # --- Configuration ---

    @property
    def active_length(self) -> float:
        """Simulated length beyond the grip, recomputed on every access."""
        return self.properties.active_length(self.length)

    @property
    def state(self) -> RodState:
        return RodState(self.tip_position, self.previous_tip_position)

    @state.setter
    def state(self, value: RodState) -> None:
        self.tip_position = value.tip_position
        self.previous_tip_position = value.previous_tip_position

    def reconfigure(self, length: float, properties: ElasticProperties) -> None:
        """Replace length and material. Does not move the tip."""
        self.length = float(length)
        self.properties = properties

    def reset(self) -> None:
        """Seat the tip at the rigid rest pose and zero its velocity."""
        rest = add(self.handle_position, scale(self.handle_direction, self.active_length))
        self.state = RodState.at_rest(rest)

    # --- Integration ---

    def advance(self, handle_position, handle_direction, dt: float) -> None:
        """
        Advance the rod by one frame.

        Parameters
        ----------
        handle_position : Vector3 | array-like
            New pivot position
        handle_direction : Vector3 | array-like
            New handle direction; need not be normalized
        dt : float
            Frame duration [s], already time-scaled. ``dt <= 0`` stores the
            handle pose but leaves the tip pair untouched.
        """
        self.handle_position = as_vector(handle_position)
        self.handle_direction = normalize(as_vector(handle_direction))

        active = self.active_length
        if active < MIN_ACTIVE_LENGTH:
            self.state = RodState.at_rest(self.handle_position)
            return

        # Paused frame: tip pair stays as is
        if dt <= 0.0:
            return

        sub_dt = dt / SUB_STEPS
        state = self.state
        for _ in range(SUB_STEPS):
            state = step_once(state, self.handle_position, self.handle_direction,
                              active, self.properties, sub_dt)
        self.state = state

    # --- Shape queries ---

    def query_normalized_position(self, t: float) -> Vector3:
        """
        Point on the rod at normalized arc parameter ``t``.

        Parameters
        ----------
        t : float
            0 is the pommel end, ``grip_ratio`` the pivot, 1 the tip.
            Values below ``grip_ratio`` lie on the rigid pommel extension.

        Returns
        -------
        Vector3
            World position. Read-only; does not touch simulation state.
        """
        grip = self.properties.grip_ratio
        taper = self.properties.taper
        p0 = self.handle_position
        direction = self.handle_direction

        if t < grip:
            if grip == 0.0:
                return p0
            return sub(p0, scale(direction, (grip - t) * self.length))

        active = self.active_length
        if active <= MIN_ACTIVE_LENGTH:
            return p0

        s = (t - grip) / (1.0 - grip)
        p3 = self.tip_position

        handle_weight = HANDLE_WEIGHT_BASE + taper * HANDLE_WEIGHT_TAPER
        tip_weight = TIP_WEIGHT_BASE - taper * TIP_WEIGHT_TAPER

        p1 = add(p0, scale(direction, active * handle_weight))
        back = scale(normalize(sub(p3, p0)), -1.0)
        p2_dir = normalize(add(back, scale(direction, TIP_HANDLE_BLEND)))
        p2 = add(p3, scale(p2_dir, active * tip_weight))

        u = 1.0 - s
        return add(
            add(scale(p0, u * u * u), scale(p1, 3.0 * u * u * s)),
            add(scale(p2, 3.0 * u * s * s), scale(p3, s * s * s)),
        )

    def landmarks(self) -> dict[str, Vector3]:
        """Marker positions: pommel (t=0), grip (t=grip_ratio), tip (t=1)."""
        return {
            "pommel": self.query_normalized_position(0.0),
            "grip": self.query_normalized_position(self.properties.grip_ratio),
            "tip": self.query_normalized_position(1.0),
        }

    def sample_curve(self, segments: int = 30) -> NDArray[np.float64]:
        """
        Sample the rod at ``segments + 1`` evenly spaced parameters.

        Returns
        -------
        NDArray[np.float64]
            Points (segments + 1, 3) from pommel to tip.

        Raises
        ------
        ValueError
            If segments < 1
        """
        if segments < 1:
            raise ValueError(f"segments must be >= 1, got {segments}")
        pts = np.empty((segments + 1, 3), dtype=np.float64)
        for i in range(segments + 1):
            pts[i] = tuple(self.query_normalized_position(i / segments))
        return pts

    # --- Diagnostics ---

    def stretch_ratio(self) -> float:
        """Tip distance / active length (0.0 for a degenerate rod)."""
        active = self.active_length
        if active < MIN_ACTIVE_LENGTH:
            return 0.0
        return distance(self.tip_position, self.handle_position) / active

    def bend_angle(self) -> float:
        """Angle between handle direction and handle->tip direction [deg]."""
        return math.degrees(
            angle_between(sub(self.tip_position, self.handle_position), self.handle_direction)
        )

    def __repr__(self) -> str:
        t = self.tip_position
        return (
            f"Rod(length={self.length:g}, active={self.active_length:g}, "
            f"tip=({t.x:.3f}, {t.y:.3f}, {t.z:.3f}))"
        )
