"""Minimal 3-component vector value type used by the quaternion module."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True, slots=True)
class Vec3:
    x: float
    y: float
    z: float


ZERO = Vec3(0.0, 0.0, 0.0)


def dot(a: Vec3, b: Vec3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross(a: Vec3, b: Vec3) -> Vec3:
    return Vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


def length(v: Vec3) -> float:
    return math.sqrt(dot(v, v))


def normalize(v: Vec3) -> Vec3:
    """Unit vector along v, or the zero vector when v is degenerate."""
    n = length(v)
    if n <= 1e-12:
        return ZERO
    return Vec3(v.x / n, v.y / n, v.z / n)


def add(a: Vec3, b: Vec3) -> Vec3:
    return Vec3(a.x + b.x, a.y + b.y, a.z + b.z)


def scale(v: Vec3, s: float) -> Vec3:
    return Vec3(v.x * s, v.y * s, v.z * s)


def as_array(v: Vec3) -> np.ndarray:
    return np.array([v.x, v.y, v.z], dtype=np.float64)


def from_array(values: Sequence[float] | np.ndarray) -> Vec3:
    arr = np.asarray(values, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 vector components, got {arr.shape[0]}")
    return Vec3(float(arr[0]), float(arr[1]), float(arr[2]))
