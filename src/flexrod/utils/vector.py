"""
Minimal immutable 3D vector value type and pure vector operations.

Vectors are small value objects rather than numpy arrays so that rod state
can be snapshotted and compared without copies or aliasing. Use
``Vector3.to_numpy()`` / ``Vector3.from_iterable()`` at numpy boundaries
(plotting, logging, curve sampling).

All functions are total over finite inputs. ``normalize`` of a zero-length
vector returns the zero vector instead of raising.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, slots=True)
class Vector3:
    """
    Immutable 3-component vector.

    Parameters
    ----------
    x, y, z : float
        Components in world units.

    Examples
    --------
    >>> a = Vector3(1.0, 2.0, 3.0)
    >>> b = a * 2.0 - Vector3(0.0, 0.0, 6.0)
    >>> tuple(b)
    (2.0, 4.0, 0.0)
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def zero(cls) -> Vector3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_iterable(cls, values: Iterable[float]) -> Vector3:
        """Build from any 3-element iterable (list, tuple, numpy array)."""
        vals = [float(v) for v in values]
        if len(vals) != 3:
            raise ValueError(f"Vector3 needs exactly 3 components, got {len(vals)}")
        return cls(vals[0], vals[1], vals[2])

    def to_numpy(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3) -> Vector3:
        return add(self, other)

    def __sub__(self, other: Vector3) -> Vector3:
        return sub(self, other)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, s: float) -> Vector3:
        return scale(self, s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> Vector3:
        return scale(self, 1.0 / s)


def as_vector(v: Vector3 | Iterable[float]) -> Vector3:
    """Coerce tuples, lists and arrays to ``Vector3``; pass vectors through."""
    if isinstance(v, Vector3):
        return v
    return Vector3.from_iterable(v)


def add(a: Vector3, b: Vector3) -> Vector3:
    return Vector3(a.x + b.x, a.y + b.y, a.z + b.z)


def sub(a: Vector3, b: Vector3) -> Vector3:
    return Vector3(a.x - b.x, a.y - b.y, a.z - b.z)


def scale(v: Vector3, s: float) -> Vector3:
    return Vector3(v.x * s, v.y * s, v.z * s)


def dot(a: Vector3, b: Vector3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross(a: Vector3, b: Vector3) -> Vector3:
    return Vector3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


def length(v: Vector3) -> float:
    return math.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


def normalize(v: Vector3) -> Vector3:
    """
    Return the unit vector along ``v``.

    Returns
    -------
    Vector3
        ``v / |v|``, or the zero vector when ``|v| == 0``.
    """
    n = length(v)
    if n == 0.0:
        return Vector3.zero()
    return Vector3(v.x / n, v.y / n, v.z / n)


def distance(a: Vector3, b: Vector3) -> float:
    return length(sub(a, b))


def lerp(a: Vector3, b: Vector3, t: float) -> Vector3:
    """Linear interpolation ``a + (b - a) * t``. ``t`` is not clamped."""
    return Vector3(
        a.x + (b.x - a.x) * t,
        a.y + (b.y - a.y) * t,
        a.z + (b.z - a.z) * t,
    )


def angle_between(a: Vector3, b: Vector3) -> float:
    """
    Angle between two vectors [rad].

    Zero-length inputs give 0.0. The cosine is clamped to [-1, 1] before
    ``acos`` so rounding never produces NaN.
    """
    na = normalize(a)
    nb = normalize(b)
    if length(na) == 0.0 or length(nb) == 0.0:
        return 0.0
    c = max(-1.0, min(1.0, dot(na, nb)))
    return math.acos(c)
