"""Persistence of tuned control parameters as a fixed block of float32 values."""

from __future__ import annotations

import os
import struct
from pathlib import Path

from .pid import ControlParams

# Slot order of the stored block; each entry is (section, attribute).
FIELDS: tuple[tuple[str, str], ...] = (
    ("gyro", "kp"),
    ("gyro", "ki"),
    ("angle", "kp"),
    ("angle", "kd"),
    ("speed", "kp"),
    ("speed", "ki"),
    ("turn", "kp"),
    ("turn", "kp2"),
    ("turn", "kd"),
    ("turn", "kd2"),
    ("gyro", "i_limit"),
    ("gyro", "out_limit"),
    ("angle", "out_limit"),
    ("speed", "out_limit"),
    ("speed", "i_limit"),
    ("user", "mid_angle"),
    ("user", "target_speed"),
)

_LAYOUT = struct.Struct(f"<{len(FIELDS)}f")
BLOCK_SIZE = _LAYOUT.size


def pack_params(params: ControlParams) -> bytes:
    """Serialise the tunable parameters into the stored block."""
    return _LAYOUT.pack(
        *(getattr(getattr(params, section), name) for section, name in FIELDS)
    )


def unpack_params(data: bytes, params: ControlParams) -> ControlParams:
    """Load the parameters from a stored block into ``params`` and return it."""
    if len(data) < BLOCK_SIZE:
        raise ValueError(
            f"parameter block needs {BLOCK_SIZE} bytes, got {len(data)}"
        )
    values = _LAYOUT.unpack_from(data)
    for (section, name), value in zip(FIELDS, values):
        setattr(getattr(params, section), name, value)
    return params


def save_params(params: ControlParams, path: str | os.PathLike[str]) -> None:
    """Write the parameter block to ``path``, replacing any previous contents."""
    Path(path).write_bytes(pack_params(params))


def load_params(params: ControlParams, path: str | os.PathLike[str]) -> ControlParams:
    """Read the parameter block from ``path`` into ``params``."""
    return unpack_params(Path(path).read_bytes(), params)