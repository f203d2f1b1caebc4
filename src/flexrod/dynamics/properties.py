"""
Material configuration for the elastic rod.

``ElasticProperties`` is a fully populated, immutable record: every field
carries an explicit default, and defaults are applied once when the record
is built. The simulator reads it but never mutates it; reconfiguration
swaps in a new record.

Units are "scene units" (the reference rod is 100 units long) and seconds.
``max_bend_angle`` is in degrees.
"""
from __future__ import annotations

import warnings
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from flexrod.utils.validation import (
    validate_finite,
    validate_non_negative,
    validate_positive,
    validate_range,
)

# Numeric floors used by the integrator
MIN_MASS = 0.1
UNCONSTRAINED_BEND_ANGLE = 179.9  # [deg] at or above this the bend cone is off

# camelCase keys produced by the original UI / JSON exports
_ALIASES = {
    "stretchFactor": "stretch_factor",
    "gripRatio": "grip_ratio",
    "maxStretchRatio": "max_stretch_ratio",
    "maxBendAngle": "max_bend_angle",
}


@dataclass(frozen=True)
class ElasticProperties:
    """
    Material parameters of a flexible rod.

    Parameters
    ----------
    stiffness : float
        Bending spring constant pulling the tip toward the rigid pose. > 0
    damping : float
        Per-step velocity attenuation rate [1/s]. >= 0
    mass : float
        Effective tip mass. > 0, floored at ``MIN_MASS`` by the integrator.
    stretch_factor : float
        Stiffness of the soft axial-length constraint. > 0
    grip_ratio : float
        Fraction of the total length behind the pivot (rigid pommel). [0, 1)
    max_stretch_ratio : float
        Hard cap on tip distance / active length. >= 1
    max_bend_angle : float
        Hard cap on the angle between handle and tip direction [deg]. (0, 180]
    taper : float
        Bias of stiffness and curve weighting toward the base. [0, 1]

    Notes
    -----
    Out-of-domain values are allowed; ``validate()`` reports them. The
    integrator clamps what it must (mass, drag, relaxation factor) and
    otherwise runs on whatever it is given.

    Examples
    --------
    >>> props = ElasticProperties(stiffness=60.0, taper=0.8)
    >>> softer = props.with_overrides(damping=1.0)
    """

    stiffness: float = 8.0
    damping: float = 2.5
    mass: float = 2.0
    stretch_factor: float = 20.0
    grip_ratio: float = 0.0
    max_stretch_ratio: float = 1.5
    max_bend_angle: float = 180.0
    taper: float = 0.0

    def __post_init__(self) -> None:
        # Coerce ints / numpy scalars so downstream math sees plain floats
        for f in fields(self):
            object.__setattr__(self, f.name, float(getattr(self, f.name)))

    @property
    def effective_mass(self) -> float:
        """Mass with the integrator's floor applied."""
        return max(MIN_MASS, self.mass)

    @property
    def bend_limited(self) -> bool:
        """True if the bend cone constraint is active."""
        return self.max_bend_angle < UNCONSTRAINED_BEND_ANGLE

    def active_length(self, length: float) -> float:
        """Length of the simulated portion beyond the grip."""
        return length * (1.0 - self.grip_ratio)

    def validate(self, strict: bool = False) -> None:
        """
        Check every field against its physical domain.

        Parameters
        ----------
        strict : bool
            If True, raise ``ValueError`` on the first violation. If False
            (default), emit a ``RuntimeWarning`` per violation.
        """
        for f in fields(self):
            validate_finite(getattr(self, f.name), f.name, strict=strict)
        validate_positive(self.stiffness, "stiffness", strict=strict)
        validate_non_negative(self.damping, "damping", strict=strict)
        validate_positive(self.mass, "mass", strict=strict)
        validate_positive(self.stretch_factor, "stretch_factor", strict=strict)
        validate_range(self.grip_ratio, "grip_ratio", 0.0, 1.0,
                       include_high=False, strict=strict)
        validate_range(self.max_stretch_ratio, "max_stretch_ratio", 1.0, float("inf"),
                       strict=strict)
        validate_range(self.max_bend_angle, "max_bend_angle", 0.0, 180.0,
                       include_low=False, strict=strict)
        validate_range(self.taper, "taper", 0.0, 1.0, strict=strict)

    def with_overrides(self, **changes: float) -> ElasticProperties:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ElasticProperties:
        """
        Build from a plain mapping.

        Missing keys take their defaults. camelCase keys (``gripRatio``,
        ``maxBendAngle``...) are accepted. Unknown keys are ignored with a
        ``RuntimeWarning``.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, float] = {}
        unknown = []
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                unknown.append(key)
        if unknown:
            warnings.warn(
                f"Ignoring unknown elastic property keys: {sorted(unknown)}",
                RuntimeWarning,
                stacklevel=2
            )
        return cls(**kwargs)


# =============================================================================
# Material presets
# =============================================================================

MATERIAL_PRESETS: dict[str, ElasticProperties] = {
    "default": ElasticProperties(),
    # Stiff and snappy: high damping absorbs vibration, light tip tracks tightly
    "wax_wood": ElasticProperties(
        stiffness=300.0, damping=20.0, mass=0.1, stretch_factor=396.0,
        grip_ratio=0.0, max_stretch_ratio=1.01, max_bend_angle=45.0, taper=0.3,
    ),
    # Full taper moves all flex to the tip; tight cone keeps the line straight
    "carbon_fiber": ElasticProperties(
        stiffness=300.0, damping=12.8, mass=0.1, stretch_factor=396.0,
        grip_ratio=0.0, max_stretch_ratio=3.0, max_bend_angle=35.0, taper=1.0,
    ),
    "fishing_rod": ElasticProperties(
        stiffness=60.0, damping=1.0, mass=0.5, stretch_factor=300.0,
        grip_ratio=0.0, max_stretch_ratio=1.05, max_bend_angle=160.0, taper=0.8,
    ),
    "steel_bar": ElasticProperties(
        stiffness=300.0, damping=20.0, mass=4.0, stretch_factor=400.0,
        grip_ratio=0.0, max_stretch_ratio=1.0, max_bend_angle=180.0, taper=0.0,
    ),
    "rubber_hose": ElasticProperties(
        stiffness=10.0, damping=3.0, mass=1.5, stretch_factor=20.0,
        grip_ratio=0.0, max_stretch_ratio=1.3, max_bend_angle=180.0, taper=0.0,
    ),
    "rigid": ElasticProperties(
        stiffness=300.0, damping=15.0, mass=0.5, stretch_factor=400.0,
        grip_ratio=0.0, max_stretch_ratio=1.01, max_bend_angle=180.0, taper=1.0,
    ),
}


def get_preset(name: str) -> ElasticProperties:
    """
    Look up a material preset by name.

    Raises
    ------
    KeyError
        If ``name`` is not a known preset.
    """
    try:
        return MATERIAL_PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown material preset '{name}'. "
            f"Available: {sorted(MATERIAL_PRESETS)}"
        ) from None
