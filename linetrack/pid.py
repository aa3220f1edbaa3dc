"""Positional PID controllers and the tunable parameter set of the car."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class PidController:
    """Positional PID with integral and output limits."""

    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    i_limit: float = 0.0
    out_limit: float = 0.0
    ek: float = 0.0
    ek1: float = 0.0
    ek2: float = 0.0
    location_sum: float = 0.0
    out: float = 0.0

    def _accumulate(self, setvalue: float, actualvalue: float) -> None:
        self.ek = setvalue - actualvalue
        self.location_sum += self.ek
        if self.ki != 0 and self.location_sum * self.ki > self.i_limit:
            self.location_sum = self.i_limit
        if self.ki != 0 and self.location_sum * self.ki < -self.i_limit:
            self.location_sum = -self.i_limit

    def _limit_output(self) -> float:
        if self.out < -self.out_limit:
            self.out = -self.out_limit
        if self.out > self.out_limit:
            self.out = self.out_limit
        return self.out

    def location(self, setvalue: float, actualvalue: float) -> float:
        """One step of the positional PID; returns the limited output."""
        self._accumulate(setvalue, actualvalue)
        self.out = (
            self.kp * self.ek
            + self.ki * self.location_sum
            + self.kd * (self.ek - self.ek1)
        )
        self.ek1 = self.ek
        return self._limit_output()

    def d_pre_location(self, setvalue: float, actualvalue: float, gyro: float) -> float:
        """PID step whose derivative term is the measured rate ``gyro``."""
        self._accumulate(setvalue, actualvalue)
        self.out = self.kp * self.ek + self.ki * self.location_sum + self.kd * gyro
        return self._limit_output()

    def reset(self) -> None:
        """Clear the running state, keeping gains and limits."""
        self.ek = 0.0
        self.ek1 = 0.0
        self.ek2 = 0.0
        self.location_sum = 0.0
        self.out = 0.0


@dataclass
class TurnParams:
    """Gains of the steering loop (two proportional and two derivative terms)."""

    kp: float = 0.0
    kd: float = 0.0
    kp2: float = 0.0
    kd2: float = 0.0
    out_limit: float = 0.0


@dataclass
class UserParams:
    """Frequently tuned set points."""

    mid_angle: float = 0.0
    target_speed: float = 0.0


@dataclass
class ControlParams:
    """All control loops of the car together with the user set points."""

    gyro: PidController = field(default_factory=PidController)
    angle: PidController = field(default_factory=PidController)
    speed: PidController = field(default_factory=PidController)
    turn: TurnParams = field(default_factory=TurnParams)
    user: UserParams = field(default_factory=UserParams)

    def reset(self) -> None:
        """Zero every loop gain and limit; user set points are left alone."""
        for controller in (self.gyro, self.angle, self.speed):
            controller.kp = 0.0
            controller.ki = 0.0
            controller.kd = 0.0
            controller.i_limit = 0.0
            controller.out_limit = 0.0
        self.turn.kp = 0.0
        self.turn.kp2 = 0.0
        self.turn.kd = 0.0
        self.turn.kd2 = 0.0
        self.turn.out_limit = 0.0