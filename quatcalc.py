"""
Quaternion calculator:
- Build rotations (axis-angle, Euler, from-to, look-at)
- Compose / invert them
- Interpolate (slerp, lerp)
- Rotate a vector, query angle / axis
- Inputs from CLI flags, optionally seeded by a YAML --config file

Example:
  quatcalc --op axis-angle --axis 0 1 0 --angle 1.5707963
  quatcalc --op rotate --quat 0 0.7071068 0 0.7071068 --vector 1 0 0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import numpy as np

from config import AppConfig, parse_args
from math3d import quaternion as quat
from math3d import vec3
from math3d.quaternion import Quaternion
from math3d.vec3 import Vec3

logger = logging.getLogger(__name__)

Value = Union[Quaternion, Vec3, float, None]


@dataclass(slots=True)
class OpResult:
    """Outcome of one operation.

    label:
      Short name for the printed line ("quat", "vector", "euler", ...).
    value:
      Quaternion, Vec3 or float. None only for an axis query on a rotation
      without a well-defined axis.
    """

    label: str
    value: Value


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _q(values) -> Quaternion:
    return quat.from_array(values)


def _v(values) -> Vec3:
    return vec3.from_array(values)


def evaluate(cfg: AppConfig) -> OpResult:
    op = cfg.op
    if op == "axis-angle":
        return OpResult("quat", quat.from_axis_angle(_v(cfg.axis), cfg.angle))
    if op == "euler":
        return OpResult("quat", quat.from_euler(_v(cfg.euler)))
    if op == "to-euler":
        return OpResult("euler", quat.to_euler(_q(cfg.quat)))
    if op == "from-to":
        return OpResult("quat", quat.from_to_rotation(_v(cfg.from_dir), _v(cfg.to_dir)))
    if op == "look-at":
        return OpResult(
            "quat", quat.look_at(_v(cfg.forward), _v(cfg.target), _v(cfg.up))
        )
    if op == "multiply":
        return OpResult("quat", quat.multiply(_q(cfg.quat), _q(cfg.quat_to)))
    if op == "inverse":
        return OpResult("quat", quat.inverse(_q(cfg.quat)))
    if op == "slerp":
        return OpResult(
            "quat",
            quat.spherical_linear_interpolation(_q(cfg.quat), _q(cfg.quat_to), cfg.t),
        )
    if op == "lerp":
        return OpResult(
            "quat", quat.linear_interpolation(_q(cfg.quat), _q(cfg.quat_to), cfg.t)
        )
    if op == "rotate":
        return OpResult("vector", quat.rotate(_q(cfg.quat), _v(cfg.vector)))
    if op == "angle":
        return OpResult("angle", quat.angle(_q(cfg.quat)))
    if op == "axis":
        return OpResult("axis", quat.axis(_q(cfg.quat)))
    raise RuntimeError(f"Unsupported op: {op}")


def format_result(result: OpResult, precision: int = 6) -> str:
    value = result.value
    if value is None:
        return f"{result.label}: none"
    if isinstance(value, Quaternion):
        arr = quat.as_array(value)
    elif isinstance(value, Vec3):
        arr = vec3.as_array(value)
    else:
        arr = np.array([value], dtype=np.float64)
    # Avoid printing "-0.000000" for values that round to zero.
    arr = np.where(np.abs(arr) < 0.5 * 10.0 ** (-precision), 0.0, arr)
    return f"{result.label}: " + " ".join(f"{float(v):.{precision}f}" for v in arr)


def main(argv=None) -> int:
    cfg = parse_args(argv)
    configure_logging(cfg.log_level)
    logger.debug("[QUAT] op=%s config=%s", cfg.op, cfg)

    result = evaluate(cfg)
    if result.value is None:
        logger.warning("[QUAT] rotation has no well-defined axis (identity-like quaternion)")
    print(format_result(result, cfg.precision))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
