"""Attitude estimation with a first-order complementary filter."""

from __future__ import annotations

from dataclasses import dataclass, field

DEADBAND = 5


def _int16(value: int) -> int:
    return (value + 0x8000) % 0x10000 - 0x8000


@dataclass(frozen=True)
class GyroBias:
    """Static gyro offsets added to every raw reading."""

    gx: int = 0
    gy: int = 0
    gz: int = 0


@dataclass(frozen=True)
class ImuSample:
    """One raw reading of angular rate and acceleration."""

    gx: int = 0
    gy: int = 0
    gz: int = 0
    ax: int = 0
    ay: int = 0
    az: int = 0


@dataclass
class ComplementaryFilter:
    """Blends the integrated gyro rate with the accelerometer reading."""

    acc_ratio: float = 4
    gyro_ratio: float = 4
    cycle_t: float = 0.0
    bias: GyroBias = field(default_factory=GyroBias)
    angle: float = 0.0

    def _corrected(self, raw: int, offset: int) -> int:
        value = _int16(raw + offset)
        return 0 if -DEADBAND < value < DEADBAND else value

    def update(self, sample: ImuSample) -> float:
        """Feed one reading and return the new angle estimate."""
        gx = self._corrected(sample.gx, self.bias.gx)
        gyro_term = gx * self.gyro_ratio
        acc_term = (sample.ay - self.angle) * self.acc_ratio
        self.angle += (gyro_term + acc_term) * self.cycle_t
        return self.angle