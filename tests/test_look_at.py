import math

import numpy as np
import pytest

from math3d import quaternion as quat
from math3d.quaternion import IDENTITY
from math3d.vec3 import Vec3

WORLD_UP = Vec3(0.0, 1.0, 0.0)


def _arr(v: Vec3) -> np.ndarray:
    return np.array([v.x, v.y, v.z], dtype=np.float64)


def _check(forward, target, up, expected_up):
    q = quat.look_at(forward, target, up)
    assert quat.dot(q, q) == pytest.approx(1.0, abs=1e-12)
    look = _arr(target) / np.linalg.norm(_arr(target))
    np.testing.assert_allclose(_arr(quat.rotate(q, forward)), look, atol=1e-9)
    np.testing.assert_allclose(_arr(quat.rotate(q, WORLD_UP)), np.asarray(expected_up), atol=1e-9)
    return q


def test_target_along_forward_is_identity():
    forward = Vec3(0.0, 0.0, 1.0)
    assert quat.look_at(forward, forward, WORLD_UP) == IDENTITY
    assert quat.look_at(forward, Vec3(0.0, 0.0, 3.0), WORLD_UP) == IDENTITY


def test_quarter_turn_keeps_world_up():
    _check(Vec3(0.0, 0.0, 1.0), Vec3(1.0, 0.0, 0.0), WORLD_UP, [0.0, 1.0, 0.0])


def test_diagonal_target_projects_up():
    h = 1.0 / math.sqrt(2.0)
    _check(Vec3(0.0, 0.0, 1.0), Vec3(1.0, 1.0, 0.0), WORLD_UP, [-h, h, 0.0])


def test_tilted_up_hint_is_projected():
    _check(Vec3(0.0, 0.0, 1.0), Vec3(1.0, 0.0, 0.0), Vec3(0.3, 1.0, 0.0), [0.0, 1.0, 0.0])


def test_roll_follows_up_hint():
    _check(Vec3(0.0, 0.0, 1.0), Vec3(1.0, 0.0, 0.0), Vec3(0.0, 0.0, -1.0), [0.0, 0.0, -1.0])


def test_opposite_target_corrects_flipped_up():
    # The half-turn fallback for Z turns about world X and flips up; the roll pass undoes it.
    swing = quat.from_to_rotation(Vec3(0.0, 0.0, 1.0), Vec3(0.0, 0.0, -1.0))
    np.testing.assert_allclose(_arr(quat.rotate(swing, WORLD_UP)), [0.0, -1.0, 0.0], atol=1e-9)

    _check(Vec3(0.0, 0.0, 1.0), Vec3(0.0, 0.0, -1.0), WORLD_UP, [0.0, 1.0, 0.0])


def test_opposite_target_along_x_keeps_up():
    # Along X the fallback turns about world Y, which already leaves up alone.
    forward = Vec3(1.0, 0.0, 0.0)
    target = Vec3(-1.0, 0.0, 0.0)
    swing = quat.from_to_rotation(forward, target)
    np.testing.assert_allclose(_arr(quat.rotate(swing, WORLD_UP)), [0.0, 1.0, 0.0], atol=1e-9)

    q = _check(forward, target, WORLD_UP, [0.0, 1.0, 0.0])
    np.testing.assert_allclose(np.abs(quat.as_array(q)), [0.0, 1.0, 0.0, 0.0], atol=1e-9)


def test_target_colinear_with_up_keeps_swing():
    forward = Vec3(0.0, 0.0, 1.0)
    target = Vec3(0.0, 1.0, 0.0)
    q = quat.look_at(forward, target, WORLD_UP)
    np.testing.assert_allclose(
        quat.as_array(q), quat.as_array(quat.from_to_rotation(forward, target)), atol=1e-12
    )
    np.testing.assert_allclose(_arr(quat.rotate(q, forward)), [0.0, 1.0, 0.0], atol=1e-9)
