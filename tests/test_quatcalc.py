import logging
import math

import numpy as np
import pytest

from config import AppConfig
from math3d import quaternion as quat
from math3d.quaternion import IDENTITY
from math3d.vec3 import Vec3
from quatcalc import OpResult, evaluate, format_result, main


def test_evaluate_axis_angle():
    cfg = AppConfig(op="axis-angle", axis=(0.0, 1.0, 0.0), angle=math.pi / 2.0)
    result = evaluate(cfg)
    assert result.label == "quat"
    np.testing.assert_allclose(
        quat.as_array(result.value), np.array([0.0, 0.7071068, 0.0, 0.7071068]), atol=1e-6
    )


def test_evaluate_rotate():
    h = math.sqrt(0.5)
    cfg = AppConfig(op="rotate", quat=(0.0, h, 0.0, h), vector=(1.0, 0.0, 0.0))
    result = evaluate(cfg)
    assert result.label == "vector"
    assert result.value.z == pytest.approx(-1.0)


def test_evaluate_from_to_opposite_has_half_turn_angle():
    cfg = AppConfig(op="from-to", from_dir=(1.0, 0.0, 0.0), to_dir=(-1.0, 0.0, 0.0))
    q = evaluate(cfg).value
    assert quat.angle(q) == pytest.approx(math.pi)


def test_evaluate_slerp_and_look_at():
    to = quat.from_axis_angle(Vec3(0.0, 0.0, 1.0), 1.0)
    cfg = AppConfig(op="slerp", quat=(0.0, 0.0, 0.0, 1.0), quat_to=tuple(quat.as_array(to)), t=0.5)
    mid = evaluate(cfg).value
    assert quat.angle(mid) == pytest.approx(0.5)

    cfg = AppConfig(op="look-at", forward=(0.0, 0.0, 1.0), target=(0.0, 0.0, 1.0))
    assert evaluate(cfg).value == IDENTITY


def test_evaluate_axis_without_rotation_is_none():
    result = evaluate(AppConfig(op="axis", quat=(0.0, 0.0, 0.0, 1.0)))
    assert result.value is None
    assert format_result(result) == "axis: none"


def test_format_result_rounds_negative_zero():
    out = format_result(OpResult("vector", Vec3(1e-17, -1e-12, -1.0)), precision=3)
    assert out == "vector: 0.000 0.000 -1.000"
    assert format_result(OpResult("angle", math.pi), precision=2) == "angle: 3.14"


def test_main_prints_result(capsys):
    rc = main(["--op", "to-euler", "--quat", "0", "0", "0", "1", "--precision", "1"])
    assert rc == 0
    assert capsys.readouterr().out.strip() == "euler: 0.0 0.0 0.0"


def test_main_warns_when_axis_is_undefined(capsys, caplog):
    with caplog.at_level(logging.WARNING):
        rc = main(["--op", "axis", "--quat", "0", "0", "0", "1"])
    assert rc == 0
    assert "no well-defined axis" in caplog.text
    assert capsys.readouterr().out.strip() == "axis: none"
