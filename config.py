"""CLI config and defaults."""

from __future__ import annotations

import argparse
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

Vec3Tuple = tuple[float, float, float]
QuatTuple = tuple[float, float, float, float]

OPS = (
    "axis-angle",
    "euler",
    "to-euler",
    "from-to",
    "look-at",
    "multiply",
    "inverse",
    "slerp",
    "lerp",
    "rotate",
    "angle",
    "axis",
)
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class AppConfig:
    op: str = "rotate"
    axis: Vec3Tuple = (0.0, 1.0, 0.0)
    angle: float = 0.0
    euler: Vec3Tuple = (0.0, 0.0, 0.0)
    quat: QuatTuple = (0.0, 0.0, 0.0, 1.0)
    quat_to: QuatTuple = (0.0, 0.0, 0.0, 1.0)
    t: float = 0.5
    vector: Vec3Tuple = (1.0, 0.0, 0.0)
    from_dir: Vec3Tuple = (1.0, 0.0, 0.0)
    to_dir: Vec3Tuple = (0.0, 1.0, 0.0)
    forward: Vec3Tuple = (0.0, 0.0, 1.0)
    target: Vec3Tuple = (0.0, 0.0, 1.0)
    up: Vec3Tuple = (0.0, 1.0, 0.0)
    precision: int = 6
    log_level: str = "info"


_APP_CONFIG_FIELDS = {f.name for f in fields(AppConfig)}
_INT_FIELDS = {"precision"}
_FLOAT_FIELDS = {"angle", "t"}
_VEC3_FIELDS = {
    "axis",
    "euler",
    "vector",
    "from_dir",
    "to_dir",
    "forward",
    "target",
    "up",
}
_QUAT_FIELDS = {"quat", "quat_to"}
_STRING_FIELDS = {"op", "log_level"}
# Direction inputs that the core would silently collapse to a zero vector.
_NONZERO_VEC3_FIELDS = ("axis", "from_dir", "to_dir", "forward", "target", "up")


def _flag(key: str) -> str:
    return "--" + key.replace("_", "-")


def _parse_components(value: Any, key: str, count: int) -> tuple[float, ...]:
    if isinstance(value, str):
        value = value.replace(",", " ").split()
    if not isinstance(value, (list, tuple)) or len(value) != count:
        raise ValueError(f"config key '{key}' expects {count} numbers, got {value!r}")
    return tuple(float(v) for v in value)


def _coerce_config_value(key: str, value: Any) -> Any:
    try:
        if key in _INT_FIELDS:
            return int(value)
        if key in _FLOAT_FIELDS:
            return float(value)
        if key in _VEC3_FIELDS:
            return _parse_components(value, key, 3)
        if key in _QUAT_FIELDS:
            return _parse_components(value, key, 4)
        if key in _STRING_FIELDS:
            return "" if value is None else str(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid value for config key '{key}': {value!r}") from exc
    raise ValueError(f"unsupported config key '{key}'")


def _normalize_config_key(raw_key: Any) -> str:
    if not isinstance(raw_key, str):
        raise ValueError(f"config key must be string, got {type(raw_key).__name__}")
    key = raw_key.strip().replace("-", "_")
    if not key:
        raise ValueError("config key cannot be empty")
    return key


def _load_yaml_config(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ValueError(f"--config file not found: {p}")
    if not p.is_file():
        raise ValueError(f"--config must point to a file: {p}")

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"failed to read --config file {p}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed to parse YAML config {p}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"--config root must be a mapping/object, got {type(loaded).__name__}")

    normalized: dict[str, Any] = {}
    for raw_key, raw_value in loaded.items():
        key = _normalize_config_key(raw_key)
        if key not in _APP_CONFIG_FIELDS:
            raise ValueError(f"unknown config key in {p}: {raw_key!r}")
        normalized[key] = _coerce_config_value(key, raw_value)
    return normalized


def _add_vec3(ap: argparse.ArgumentParser, key: str, default: Vec3Tuple, help_text: str) -> None:
    ap.add_argument(
        _flag(key),
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=default,
        help=help_text,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    defaults = AppConfig()
    ap = argparse.ArgumentParser(
        prog="quatcalc",
        description="Evaluate one quaternion rotation operation (radians throughout).",
    )
    ap.add_argument(
        "--config",
        type=str,
        default="",
        help="YAML config file path. CLI args override YAML values.",
    )
    ap.add_argument(
        "--op",
        choices=OPS,
        default=defaults.op,
        help="Operation to evaluate.",
    )

    _add_vec3(ap, "axis", defaults.axis, "Rotation axis for axis-angle.")
    ap.add_argument(
        "--angle",
        type=float,
        default=defaults.angle,
        help="Rotation angle in radians for axis-angle.",
    )
    ap.add_argument(
        "--euler",
        type=float,
        nargs=3,
        metavar=("ROLL", "PITCH", "YAW"),
        default=defaults.euler,
        help="Euler triple in radians, applied roll (X), pitch (Y), yaw (Z).",
    )
    ap.add_argument(
        "--quat",
        type=float,
        nargs=4,
        metavar=("X", "Y", "Z", "W"),
        default=defaults.quat,
        help="Input quaternion, scalar last.",
    )
    ap.add_argument(
        "--quat-to",
        type=float,
        nargs=4,
        metavar=("X", "Y", "Z", "W"),
        default=defaults.quat_to,
        help="Second quaternion for multiply/slerp/lerp.",
    )
    ap.add_argument(
        "--t",
        type=float,
        default=defaults.t,
        help="Interpolation parameter in [0,1].",
    )
    _add_vec3(ap, "vector", defaults.vector, "Vector to rotate by --quat.")
    _add_vec3(ap, "from_dir", defaults.from_dir, "Source direction for from-to.")
    _add_vec3(ap, "to_dir", defaults.to_dir, "Destination direction for from-to.")
    _add_vec3(ap, "forward", defaults.forward, "Object-local forward axis for look-at.")
    _add_vec3(ap, "target", defaults.target, "Look direction for look-at.")
    _add_vec3(ap, "up", defaults.up, "World up hint for look-at.")
    ap.add_argument(
        "--precision",
        type=int,
        default=defaults.precision,
        help="Decimal places in printed results.",
    )
    ap.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help="Global log level.",
    )

    return ap


def validate_config(cfg: AppConfig) -> None:
    if cfg.op not in OPS:
        raise ValueError(f"--op must be one of {'|'.join(OPS)}, got {cfg.op}")
    if cfg.log_level not in LOG_LEVELS:
        raise ValueError(
            f"--log-level must be one of {'|'.join(LOG_LEVELS)}, got {cfg.log_level}"
        )
    if not (0 <= cfg.precision <= 17):
        raise ValueError(f"--precision must be in [0,17], got {cfg.precision}")
    if not math.isfinite(cfg.angle):
        raise ValueError("--angle must be a finite number")
    if not (0.0 <= cfg.t <= 1.0):
        raise ValueError(f"--t must be in [0,1], got {cfg.t}")

    for key in sorted(_VEC3_FIELDS | _QUAT_FIELDS):
        values = getattr(cfg, key)
        if not all(math.isfinite(float(v)) for v in values):
            raise ValueError(f"{_flag(key)} must be finite numbers")
    for key in _NONZERO_VEC3_FIELDS:
        if not any(float(v) != 0.0 for v in getattr(cfg, key)):
            raise ValueError(f"{_flag(key)} must be a non-zero vector")


def parse_args(argv=None) -> AppConfig:
    bootstrap = argparse.ArgumentParser(add_help=False)
    bootstrap.add_argument("--config", type=str, default="")
    bootstrap_ns, _ = bootstrap.parse_known_args(argv)

    yaml_cfg: dict[str, Any] = {}
    yaml_error: Optional[str] = None
    if bootstrap_ns.config:
        try:
            yaml_cfg = _load_yaml_config(bootstrap_ns.config)
        except ValueError as exc:
            yaml_error = str(exc)

    ap = build_arg_parser()
    if yaml_error is not None:
        ap.error(yaml_error)
    if yaml_cfg:
        ap.set_defaults(**yaml_cfg)
    args = ap.parse_args(argv)

    cfg = AppConfig(
        op=args.op,
        axis=tuple(args.axis),
        angle=float(args.angle),
        euler=tuple(args.euler),
        quat=tuple(args.quat),
        quat_to=tuple(args.quat_to),
        t=float(args.t),
        vector=tuple(args.vector),
        from_dir=tuple(args.from_dir),
        to_dir=tuple(args.to_dir),
        forward=tuple(args.forward),
        target=tuple(args.target),
        up=tuple(args.up),
        precision=args.precision,
        log_level=args.log_level,
    )
    try:
        validate_config(cfg)
    except ValueError as exc:
        ap.error(str(exc))
    return cfg
