"""
Position-based constraint stages applied to the tip after each Verlet step.

Each stage takes a candidate tip position and returns a corrected one; none
of them keeps state. They are applied in a fixed order by
``flexrod.dynamics.rod.step_once``:

1. ``apply_soft_length``  - relax the handle-tip distance toward the rest length
2. ``apply_bend_limit``   - project the tip direction back onto the bend cone
3. ``apply_max_stretch``  - clamp the handle-tip distance to the stretch cap

A later stage may reintroduce a small violation of an earlier one (the bend
projection keeps the distance, which is why stretch is checked last). That
residual is relaxed over the following sub-steps rather than solved jointly.
"""
from __future__ import annotations

import math

from flexrod.utils.vector import Vector3, add, dot, length, normalize, scale, sub

EPSILON_LENGTH = 1e-4   # Below this the handle-tip vector has no usable direction
EPSILON_ANGLE = 1e-3    # [rad] Below this the slerp weights are ill-conditioned
LENGTH_RELAXATION = 0.05  # Scales stretch_factor * dt into a relaxation factor


def relaxation_factor(stretch_factor: float, dt: float) -> float:
    """Soft-length blend factor, clamped to [0, 1] so it never overshoots."""
    return min(1.0, max(0.0, stretch_factor * LENGTH_RELAXATION * dt))


def apply_soft_length(
    position: Vector3,
    handle: Vector3,
    rest_length: float,
    stretch_factor: float,
    dt: float,
) -> Vector3:
    """
    Relax the handle-tip distance toward ``rest_length``.

    Parameters
    ----------
    position : Vector3
        Candidate tip position
    handle : Vector3
        Pivot position
    rest_length : float
        Target distance (the active length)
    stretch_factor : float
        Constraint stiffness; the blend is ``stretch_factor * 0.05 * dt``
    dt : float
        Sub-step duration [s]

    Returns
    -------
    Vector3
        Corrected position, or ``position`` unchanged if it sits on the handle.
    """
    to_tip = sub(position, handle)
    current = length(to_tip)
    if current <= EPSILON_LENGTH:
        return position

    alpha = relaxation_factor(stretch_factor, dt)
    corrected = current + (rest_length - current) * alpha
    return add(handle, scale(normalize(to_tip), corrected))


def slerp_direction(a: Vector3, b: Vector3, t: float, angle: float) -> Vector3:
    """
    Great-circle interpolation between unit vectors ``a`` and ``b``.

    ``angle`` is the angle between them [rad] and must be well away from 0
    (callers skip below ``EPSILON_ANGLE``). The result is renormalized.
    """
    s = math.sin(angle)
    w1 = math.sin((1.0 - t) * angle) / s
    w2 = math.sin(t * angle) / s
    return normalize(add(scale(a, w1), scale(b, w2)))


def apply_bend_limit(
    position: Vector3,
    handle: Vector3,
    handle_direction: Vector3,
    max_bend_angle: float,
    unconstrained_above: float = 179.9,
) -> Vector3:
    """
    Keep the tip inside a cone of half-angle ``max_bend_angle`` [deg].

    When the tip direction leaves the cone it is rotated back toward
    ``handle_direction`` along the great circle so it lands exactly on the
    boundary. The handle-tip distance is preserved.

    Notes
    -----
    Angles at or above ``unconstrained_above`` disable the cone. A zero or
    negative limit is not rejected: every tip direction then lies outside
    the cone and is pulled onto (or, for negative limits, past) the handle
    axis. It stays finite either way.
    """
    if max_bend_angle >= unconstrained_above:
        return position

    to_tip = sub(position, handle)
    tip_dist = length(to_tip)
    if tip_dist <= EPSILON_LENGTH:
        return position

    tip_dir = scale(to_tip, 1.0 / tip_dist)
    cos_angle = dot(tip_dir, handle_direction)
    max_rad = math.radians(max_bend_angle)
    if cos_angle >= math.cos(max_rad):
        return position

    current = math.acos(max(-1.0, min(1.0, cos_angle)))
    if current <= EPSILON_ANGLE:
        return position

    clamped = slerp_direction(handle_direction, tip_dir, max_rad / current, current)
    return add(handle, scale(clamped, tip_dist))


def apply_max_stretch(
    position: Vector3,
    handle: Vector3,
    max_length: float,
) -> Vector3:
    """Project the tip radially back to ``max_length`` if it is farther."""
    to_tip = sub(position, handle)
    if length(to_tip) > max_length:
        return add(handle, scale(normalize(to_tip), max_length))
    return position
