from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Protocol

from .angle_scoring import normalize_deg, place_at_angle, position_to_angle
from .phase_core import ORIGIN, Point2D


class Clock(Protocol):
    """Monotonic time source; the simulation never reads real time directly."""

    def now(self) -> float: ...


class RealClock:
    def now(self) -> float:
        return time.monotonic()


@dataclass(frozen=True, slots=True)
class OrbitConfig:
    default_speed_deg_per_s: float = 20.0
    orbit_radius: float = 1.0


def illuminated_fraction(angle_deg: float) -> float:
    """Lit fraction of the Moon's visible disc: 0 at New Moon (0), 1 at Full Moon (180)."""

    return (1.0 - math.cos(math.radians(float(angle_deg)))) / 2.0


class OrbitSimulation:
    """Moon on a circular orbit around the Earth at the origin.

    The Sun lies far along +X, so an orbital angle of 0 degrees is New Moon.
    The quiz pauses the orbit (speed 0) while a session is open and restores
    the default speed when it ends.
    """

    def __init__(self, *, clock: Clock, config: OrbitConfig | None = None, start_angle_deg: float = 0.0) -> None:
        cfg = config or OrbitConfig()
        if cfg.orbit_radius <= 0.0:
            raise ValueError("orbit_radius must be > 0")
        if cfg.default_speed_deg_per_s < 0.0:
            raise ValueError("default_speed_deg_per_s must be >= 0")

        self._clock = clock
        self._config = cfg
        self._speed = float(cfg.default_speed_deg_per_s)
        self._angle = normalize_deg(start_angle_deg)
        self._last_update_s = clock.now()

    @property
    def config(self) -> OrbitConfig:
        return self._config

    @property
    def speed_deg_per_s(self) -> float:
        return self._speed

    @property
    def moon_angle_deg(self) -> float:
        return self._angle

    @property
    def is_paused(self) -> bool:
        return self._speed == 0.0

    def set_speed(self, speed_deg_per_s: float) -> None:
        self._sync()
        self._speed = max(0.0, float(speed_deg_per_s))

    def pause(self) -> None:
        self.set_speed(0.0)

    def restore_default_speed(self) -> None:
        self.set_speed(self._config.default_speed_deg_per_s)

    def update(self) -> None:
        self._sync()

    def moon_position(self) -> Point2D:
        return place_at_angle(ORIGIN, self._angle, self._config.orbit_radius)

    def set_moon_angle(self, angle_deg: float) -> None:
        self._sync()
        self._angle = normalize_deg(angle_deg)

    def set_moon_position(self, point: Point2D) -> None:
        """Move the Moon to the orbit point nearest ``point`` (radial projection)."""

        if point == ORIGIN:
            return
        self.set_moon_angle(position_to_angle(ORIGIN, point))

    def _sync(self) -> None:
        now = self._clock.now()
        dt = max(0.0, now - self._last_update_s)
        self._last_update_s = now
        if self._speed > 0.0 and dt > 0.0:
            self._angle = normalize_deg(self._angle + self._speed * dt)
