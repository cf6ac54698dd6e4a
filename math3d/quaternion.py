"""Quaternion utilities for right-handed coordinates.

Quaternions are stored as (x, y, z, w) with w the scalar part. All functions
are pure and return new values; rotation-applying and composing functions
expect unit quaternions.

Composition order: ``multiply(q1, q2)`` applies q1 first, then q2, so
``rotate(multiply(q1, q2), v) == rotate(q2, rotate(q1, v))``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from . import scalar, vec3
from .vec3 import Vec3

# Thresholds below are part of the numeric contract; keep them exact.
_DEGENERATE_MAGNITUDE = 0.0001
_PARALLEL_DOT = 0.999999
_ANTIPARALLEL_DOT = -0.999999
_SLERP_LINEAR_DOT = 0.9995
_NEAR_X_AXIS = 0.99
_NO_AXIS_SIN2 = 0.0001

_WORLD_X = Vec3(1.0, 0.0, 0.0)
_WORLD_Y = Vec3(0.0, 1.0, 0.0)
_WORLD_UP = _WORLD_Y


@dataclass(frozen=True, slots=True)
class Quaternion:
    x: float
    y: float
    z: float
    w: float


IDENTITY = Quaternion(0.0, 0.0, 0.0, 1.0)
identity = IDENTITY


def as_array(q: Quaternion) -> np.ndarray:
    """Quaternion as a float64 array in [x, y, z, w] order."""
    return np.array([q.x, q.y, q.z, q.w], dtype=np.float64)


def from_array(values: Sequence[float] | np.ndarray) -> Quaternion:
    arr = np.asarray(values, dtype=np.float64).reshape(-1)
    if arr.shape != (4,):
        raise ValueError(f"Expected 4 quaternion components [x, y, z, w], got {arr.shape[0]}")
    return Quaternion(float(arr[0]), float(arr[1]), float(arr[2]), float(arr[3]))


# -- algebra -----------------------------------------------------------------


def dot(a: Quaternion, b: Quaternion) -> float:
    """Component-wise dot product. |dot| == 1 means the same rotation."""
    return a.x * b.x + a.y * b.y + a.z * b.z + a.w * b.w


def multiply(q1: Quaternion, q2: Quaternion) -> Quaternion:
    """Compose two rotations: q1 is applied first, then q2.

    This is the Hamilton product ``q2 * q1``.
    """
    a, b = q2, q1
    return Quaternion(
        a.w * b.x + a.x * b.w + a.y * b.z - a.z * b.y,
        a.w * b.y - a.x * b.z + a.y * b.w + a.z * b.x,
        a.w * b.z + a.x * b.y - a.y * b.x + a.z * b.w,
        a.w * b.w - a.x * b.x - a.y * b.y - a.z * b.z,
    )


def normalize(q: Quaternion) -> Quaternion:
    n = scalar.sqrt(dot(q, q))
    if n is None or n <= _DEGENERATE_MAGNITUDE:
        return IDENTITY
    return Quaternion(q.x / n, q.y / n, q.z / n, q.w / n)


def conjugate(q: Quaternion) -> Quaternion:
    return Quaternion(-q.x, -q.y, -q.z, q.w)


def inverse(q: Quaternion) -> Quaternion:
    """Multiplicative inverse; identity for near-zero input."""
    n2 = dot(q, q)
    if n2 <= _DEGENERATE_MAGNITUDE:
        return IDENTITY
    c = conjugate(q)
    return Quaternion(c.x / n2, c.y / n2, c.z / n2, c.w / n2)


# -- construction ------------------------------------------------------------


def from_axis_angle(axis: Vec3, angle_rad: float) -> Quaternion:
    """Rotation of angle_rad about axis.

    The axis is normalized here; a zero-length axis is the caller's problem
    unless the angle is zero, which always yields identity.
    """
    axis = vec3.normalize(axis)
    half = angle_rad / 2.0
    s = scalar.sin(half)
    return Quaternion(axis.x * s, axis.y * s, axis.z * s, scalar.cos(half))


def from_euler(euler: Vec3) -> Quaternion:
    """
    Euler triple (x=roll, y=pitch, z=yaw), radians.
    Composition: roll about X first, then pitch about Y, then yaw about Z,
    i.e. multiply(multiply(q_roll, q_pitch), q_yaw).
    """
    cr = scalar.cos(euler.x * 0.5)
    sr = scalar.sin(euler.x * 0.5)
    cp = scalar.cos(euler.y * 0.5)
    sp = scalar.sin(euler.y * 0.5)
    cy = scalar.cos(euler.z * 0.5)
    sy = scalar.sin(euler.z * 0.5)
    return Quaternion(
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
        cr * cp * cy + sr * sp * sy,
    )


def to_euler(q: Quaternion) -> Vec3:
    """Inverse of from_euler. Exact only up to quaternion sign near gimbal lock."""
    sinr_cosp = 2.0 * (q.w * q.x + q.y * q.z)
    cosr_cosp = 1.0 - 2.0 * (q.x * q.x + q.y * q.y)
    roll = scalar.atan2(sinr_cosp, cosr_cosp)

    sinp = 2.0 * (q.w * q.y - q.z * q.x)
    if sinp >= 1.0:
        pitch = math.pi / 2.0
    elif sinp <= -1.0:
        pitch = -math.pi / 2.0
    else:
        pitch = scalar.asin(sinp)
        if pitch is None:
            pitch = 0.0

    siny_cosp = 2.0 * (q.w * q.z + q.x * q.y)
    cosy_cosp = 1.0 - 2.0 * (q.y * q.y + q.z * q.z)
    yaw = scalar.atan2(siny_cosp, cosy_cosp)

    return Vec3(roll, pitch, yaw)


def _reject(v: Vec3, n: Vec3) -> Vec3:
    """Component of v perpendicular to unit vector n."""
    return vec3.add(v, vec3.scale(n, -vec3.dot(v, n)))


def _perpendicular_axis(v: Vec3) -> Vec3:
    """World X (world Y when v is close to X), projected off unit vector v."""
    ref = _WORLD_Y if scalar.absolute(v.x) >= _NEAR_X_AXIS else _WORLD_X
    return vec3.normalize(_reject(ref, v))


def from_to_rotation(from_dir: Vec3, to_dir: Vec3) -> Quaternion:
    """Shortest rotation taking direction from_dir onto direction to_dir."""
    f = vec3.normalize(from_dir)
    t = vec3.normalize(to_dir)
    d = vec3.dot(f, t)

    if d > _PARALLEL_DOT:
        return IDENTITY
    if d < _ANTIPARALLEL_DOT:
        # cross(f, t) vanishes; any axis perpendicular to f gives a half turn.
        return from_axis_angle(_perpendicular_axis(f), math.pi)

    c = vec3.cross(f, t)
    return normalize(Quaternion(c.x, c.y, c.z, 1.0 + d))


def look_at(forward: Vec3, target: Vec3, up: Vec3) -> Quaternion:
    """Rotation pointing local `forward` along `target`, rolled towards `up`.

    forward:
      Object-local axis that should end up looking along target.
    target:
      Look direction (object to target), any non-zero length.
    up:
      World direction the rotated world +Y should stay closest to.

    The swing (forward -> target) is found first, then a twist about the look
    direction brings the rotated +Y as close as possible to `up`. When the look
    direction is colinear with `up` there is no roll to resolve and the swing
    is returned unchanged.
    """
    f = vec3.normalize(forward)
    look = vec3.normalize(target)
    if vec3.dot(f, look) > _PARALLEL_DOT:
        return IDENTITY

    swing = from_to_rotation(f, look)

    current_up = _reject(rotate(swing, _WORLD_UP), look)
    desired_up = _reject(up, look)
    if vec3.length(current_up) < 1e-6 or vec3.length(desired_up) < 1e-6:
        return swing
    current_up = vec3.normalize(current_up)
    desired_up = vec3.normalize(desired_up)

    if vec3.dot(current_up, desired_up) < _ANTIPARALLEL_DOT:
        # from_to_rotation would pick an arbitrary half-turn axis; the twist
        # must stay about the look direction.
        twist = from_axis_angle(look, math.pi)
    else:
        twist = from_to_rotation(current_up, desired_up)
    return normalize(multiply(swing, twist))


# -- interpolation -----------------------------------------------------------


def _lerp_components(a: Quaternion, b: Quaternion, t: float) -> Quaternion:
    return Quaternion(
        a.x + (b.x - a.x) * t,
        a.y + (b.y - a.y) * t,
        a.z + (b.z - a.z) * t,
        a.w + (b.w - a.w) * t,
    )


def spherical_linear_interpolation(
    from_quat: Quaternion, to_quat: Quaternion, t: float
) -> Quaternion:
    """Constant angular velocity blend along the shorter arc.

    t=0 gives from_quat; t=1 gives to_quat up to sign.
    """
    d = dot(from_quat, to_quat)
    if d < 0.0:
        to_quat = Quaternion(-to_quat.x, -to_quat.y, -to_quat.z, -to_quat.w)
        d = -d

    if d > _SLERP_LINEAR_DOT:
        return normalize(_lerp_components(from_quat, to_quat, t))

    d = scalar.clamp(d, -1.0, 1.0)
    theta0 = scalar.acos(d)
    if theta0 is None:
        theta0 = 0.0
    theta = theta0 * t
    sin_theta0 = scalar.sin(theta0)
    sin_theta = scalar.sin(theta)

    s1 = scalar.cos(theta) - d * sin_theta / sin_theta0
    s2 = sin_theta / sin_theta0
    return Quaternion(
        s1 * from_quat.x + s2 * to_quat.x,
        s1 * from_quat.y + s2 * to_quat.y,
        s1 * from_quat.z + s2 * to_quat.z,
        s1 * from_quat.w + s2 * to_quat.w,
    )


def linear_interpolation(from_quat: Quaternion, to_quat: Quaternion, t: float) -> Quaternion:
    """Normalized component lerp. No shortest-path sign flip."""
    return normalize(_lerp_components(from_quat, to_quat, t))


# -- vectors and queries -----------------------------------------------------


def rotate(q: Quaternion, v: Vec3) -> Vec3:
    """Rotate vector v by unit quaternion q: v' = q*(v,0)*q^{-1}."""
    u = Vec3(q.x, q.y, q.z)
    t = vec3.scale(vec3.cross(u, v), 2.0)
    return vec3.add(vec3.add(v, vec3.scale(t, q.w)), vec3.cross(u, t))


def angle(q: Quaternion) -> float:
    """Rotation angle 2*acos(w).

    In [0, pi] for w >= 0; a quaternion with negative w (the same rotation as
    its negation) reports the long way round, up to 2*pi.
    """
    half = scalar.acos(scalar.clamp(q.w, -1.0, 1.0))
    if half is None:
        return 0.0
    return 2.0 * half


def axis(q: Quaternion) -> Optional[Vec3]:
    """Unit rotation axis, or None for an identity-like rotation."""
    sin2 = 1.0 - q.w * q.w
    if sin2 < _NO_AXIS_SIN2:
        return None
    s = scalar.sqrt(sin2)
    if s is None:
        return None
    return Vec3(q.x / s, q.y / s, q.z / s)
