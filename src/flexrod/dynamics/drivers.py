"""
Kinematic handle drivers.

A driver answers "where is the handle at time t?" with a
(position, direction) pair. The rod never simulates the handle; the
simulation loop samples a driver every frame and feeds the pose to
``Rod.advance``.
"""
from __future__ import annotations

import math
from collections.abc import Callable
from typing import Protocol

from flexrod.utils.orientation import rotate_direction
from flexrod.utils.vector import Vector3, as_vector, normalize

HandlePose = tuple[Vector3, Vector3]


class HandleDriver(Protocol):
    """Protocol for kinematic handle pose sources."""
    def pose(self, t: float) -> HandlePose:
        """
        Return the handle pose at time ``t``.

        Parameters
        ----------
        t : float
            Simulation time [s]

        Returns
        -------
        tuple[Vector3, Vector3]
            (position, direction). The direction need not be normalized.
        """
        ...


class StaticHandle:
    """Handle held still at a fixed pose."""
    def __init__(self, position=(0.0, 0.0, 0.0), direction=(0.0, 1.0, 0.0)) -> None:
        self.position = as_vector(position)
        self.direction = normalize(as_vector(direction))

    def pose(self, t: float) -> HandlePose:
        return self.position, self.direction


class SwingHandle:
    """
    Handle swinging sinusoidally about a fixed axis through the pivot.

    The direction at time t is ``rest_direction`` rotated about ``axis`` by
    ``amplitude * sin(2π f t + phase)``.

    Parameters
    ----------
    pivot : array-like
        Fixed handle position
    rest_direction : array-like
        Direction at zero swing angle
    axis : array-like
        Swing axis (right-hand rule). Must be non-zero.
    amplitude_deg : float
        Peak swing angle [deg]
    frequency_hz : float
        Swing frequency [Hz]
    phase : float
        Phase offset [rad]

    Examples
    --------
    >>> # Horizontal slash: +Y handle sweeping ±80° about Z at 1 Hz
    >>> driver = SwingHandle(axis=[0, 0, 1], amplitude_deg=80, frequency_hz=1.0)
    """
    def __init__(
        self,
        pivot=(0.0, 0.0, 0.0),
        rest_direction=(0.0, 1.0, 0.0),
        axis=(0.0, 0.0, 1.0),
        amplitude_deg: float = 60.0,
        frequency_hz: float = 1.0,
        phase: float = 0.0,
    ) -> None:
        self.pivot = as_vector(pivot)
        self.rest_direction = normalize(as_vector(rest_direction))
        self.axis = as_vector(axis)
        self.amplitude_deg = float(amplitude_deg)
        self.frequency_hz = float(frequency_hz)
        self.phase = float(phase)

    def angle(self, t: float) -> float:
        """Swing angle at time t [deg]."""
        return self.amplitude_deg * math.sin(2.0 * math.pi * self.frequency_hz * t + self.phase)

    def pose(self, t: float) -> HandlePose:
        return self.pivot, rotate_direction(self.rest_direction, self.axis, self.angle(t))


class FunctionHandle:
    """Adapter turning any ``t -> (position, direction)`` callable into a driver."""
    def __init__(self, fn: Callable[[float], tuple]) -> None:
        self.fn = fn

    def pose(self, t: float) -> HandlePose:
        position, direction = self.fn(t)
        return as_vector(position), as_vector(direction)
