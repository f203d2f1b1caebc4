"""
Validation utilities for material parameters and time steps.

The rod simulator must keep running on malformed configuration, so most
checks here support a non-strict mode that warns instead of raising.
"""
from __future__ import annotations
import math
import warnings


def _report(msg: str, strict: bool) -> None:
    if strict:
        raise ValueError(msg)
    warnings.warn(msg, RuntimeWarning, stacklevel=3)


def validate_finite(value: float, name: str, strict: bool = True) -> None:
    """Validate that a value is a finite number (no NaN / Inf)."""
    if not math.isfinite(value):
        _report(f"{name} must be finite, got {value}", strict)


def validate_positive(value: float, name: str, strict: bool = True) -> None:
    """
    Validate that a scalar value is positive.

    Parameters
    ----------
    value : float
        Value to validate
    name : str
        Parameter name for error messages
    strict : bool
        If True, raise ValueError. If False, issue warning.

    Raises
    ------
    ValueError
        If strict=True and value <= 0
    """
    if value <= 0:
        _report(f"{name} must be positive, got {value}", strict)


def validate_non_negative(value: float, name: str, strict: bool = True) -> None:
    """Validate that a value is non-negative."""
    if value < 0:
        _report(f"{name} must be non-negative, got {value}", strict)


def validate_range(
    value: float,
    name: str,
    low: float,
    high: float,
    include_low: bool = True,
    include_high: bool = True,
    strict: bool = True,
) -> None:
    """
    Validate that ``value`` lies in the interval [low, high].

    Parameters
    ----------
    include_low, include_high : bool
        Whether each bound is closed. ``grip_ratio`` for example lives in
        [0, 1), so it is checked with ``include_high=False``.
    """
    lo_ok = value >= low if include_low else value > low
    hi_ok = value <= high if include_high else value < high
    if not (lo_ok and hi_ok):
        lb = "[" if include_low else "("
        rb = "]" if include_high else ")"
        _report(f"{name} must be in {lb}{low}, {high}{rb}, got {value}", strict)


def validate_timestep(dt: float, max_dt: float = 0.1) -> None:
    """
    Validate a frame time step.

    ``dt == 0`` is allowed (a paused frame). Negative steps are rejected.

    Parameters
    ----------
    dt : float
        Time step [s]
    max_dt : float
        Largest step that does not trigger a warning [s]

    Raises
    ------
    ValueError
        If timestep is negative or not finite
    """
    if not math.isfinite(dt):
        raise ValueError(f"Timestep must be finite, got {dt}")
    if dt < 0:
        raise ValueError(f"Timestep must be non-negative, got {dt}")
    if dt > max_dt:
        warnings.warn(
            f"Large timestep {dt}s may look soft or jumpy. "
            f"Consider using dt < {max_dt}s.",
            RuntimeWarning,
            stacklevel=2
        )
