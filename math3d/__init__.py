"""Quaternion rotation algebra over a minimal Vec3."""

from .quaternion import IDENTITY, Quaternion, identity
from .vec3 import Vec3

__all__ = [
    "IDENTITY",
    "Quaternion",
    "Vec3",
    "identity",
]
