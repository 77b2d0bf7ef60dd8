"""Seedable generator of bounded piecewise-linear setpoint trajectories."""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass, replace
from typing import Mapping

import numpy as np

from rng.rng_manager import make_generator, time_seed

from . import state_description as sd

logger = logging.getLogger(__name__)

STATIONARY_MIN = 0.0
STATIONARY_MAX = 100.0

# Thresholds on the sign draw of a new segment.
NEGATIVE_BELOW = 0.45
ZERO_ABOVE = 0.9


class ConfigError(ValueError):
    """Raised when a setpoint configuration is missing or malformed."""


@dataclass(frozen=True, slots=True)
class SetPointConfig:
    """Immutable parameters of the setpoint trajectory.

    ``max_sequence_length`` is an exclusive upper bound on the number of
    steps of a segment, so it must be at least 2.  ``stationary_value`` is
    required when ``stationary`` is set and forbidden otherwise.
    """

    max_change_rate_per_step: float = 1.0
    max_sequence_length: int = 100
    min_setpoint: float = 0.0
    max_setpoint: float = 100.0
    step_size: float = 1.0
    stationary: bool = False
    stationary_value: float | None = None

    def validate(self) -> "SetPointConfig":
        """Check every constraint and return ``self``.

        :raises ConfigError: on the first violated constraint.
        """
        for name in (
            "max_change_rate_per_step",
            "min_setpoint",
            "max_setpoint",
            "step_size",
        ):
            value = getattr(self, name)
            if (
                not isinstance(value, numbers.Real)
                or isinstance(value, bool)
                or not math.isfinite(value)
            ):
                raise ConfigError(f"{name} must be a finite real number, got {value!r}")
        if not isinstance(self.max_sequence_length, numbers.Integral) or isinstance(
            self.max_sequence_length, bool
        ):
            raise ConfigError(
                f"max_sequence_length must be an integer, got {self.max_sequence_length!r}"
            )
        if self.max_change_rate_per_step <= 0:
            raise ConfigError("max_change_rate_per_step must be > 0")
        if self.max_sequence_length < 2:
            raise ConfigError("max_sequence_length must be >= 2")
        if self.min_setpoint > self.max_setpoint:
            raise ConfigError("min_setpoint must be <= max_setpoint")

        if self.stationary:
            value = self.stationary_value
            if value is None:
                raise ConfigError("stationary_value is required for a stationary setpoint")
            if (
                not isinstance(value, numbers.Real)
                or isinstance(value, bool)
                or not STATIONARY_MIN <= value <= STATIONARY_MAX
            ):
                raise ConfigError(
                    f"setpoint must be in range [{STATIONARY_MIN:g}, {STATIONARY_MAX:g}], got {value!r}"
                )
        elif self.stationary_value is not None:
            raise ConfigError("stationary_value is only allowed for a stationary setpoint")
        return self


@dataclass(frozen=True, slots=True)
class SetPointState:
    """Snapshot of the mutable part of a generator."""

    value: float = 0.0
    change_rate_per_step: float = 0.0
    current_steps: int = 0
    last_sequence_steps: int = 0

    def as_dict(self) -> dict[str, float]:
        """Return the state keyed by the host variable names."""
        return {
            sd.SET_POINT: float(self.value),
            sd.SET_POINT_CHANGE_RATE_PER_STEP: float(self.change_rate_per_step),
            sd.SET_POINT_CURRENT_STEPS: float(self.current_steps),
            sd.SET_POINT_LAST_SEQUENCE_STEPS: float(self.last_sequence_steps),
        }

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "SetPointState":
        """Build a state from a mapping produced by :meth:`as_dict`."""
        return cls(
            value=float(values[sd.SET_POINT]),
            change_rate_per_step=float(values[sd.SET_POINT_CHANGE_RATE_PER_STEP]),
            current_steps=int(values[sd.SET_POINT_CURRENT_STEPS]),
            last_sequence_steps=int(values[sd.SET_POINT_LAST_SEQUENCE_STEPS]),
        )


def sample_segment(value: float, config: SetPointConfig, rng: np.random.Generator) -> SetPointState:
    """Draw a new linear segment starting from ``value``.

    The sign is assigned first and the zero override applied afterwards on
    the same uniform draw, giving 45 % negative, 10 % flat and 45 % positive
    slopes.
    """
    last_sequence_steps = int(rng.integers(1, config.max_sequence_length))
    change_rate = float(rng.uniform(0.0, 1.0)) * config.max_change_rate_per_step
    r = float(rng.uniform(0.0, 1.0))
    if r < NEGATIVE_BELOW:
        change_rate = -change_rate
    if r > ZERO_ABOVE:
        change_rate = 0.0
    logger.debug(
        f"New setpoint segment: {last_sequence_steps} steps at {change_rate:+.4f}/step"
    )
    return SetPointState(
        value=value,
        change_rate_per_step=change_rate,
        current_steps=0,
        last_sequence_steps=last_sequence_steps,
    )


def _coin(rng: np.random.Generator) -> bool:
    return int(rng.binomial(1, 0.5)) == 1


def advance(
    state: SetPointState, config: SetPointConfig, rng: np.random.Generator
) -> tuple[SetPointState, float]:
    """Advance ``state`` by one tick and return ``(new_state, new_value)``.

    When the candidate value crosses a bound it is clamped to that bound and
    the slope is negated on a fair coin.  The flipped slope is not applied
    again on the same tick.
    """
    if config.stationary:
        return state, state.value

    if state.current_steps >= state.last_sequence_steps:
        state = sample_segment(state.value, config, rng)

    change_rate = state.change_rate_per_step
    level = state.value + change_rate * config.step_size

    if level > config.max_setpoint:
        level = float(config.max_setpoint)
        if _coin(rng):
            change_rate = -change_rate
            logger.debug(f"Setpoint reflected at upper bound {level}")
    elif level < config.min_setpoint:
        level = float(config.min_setpoint)
        if _coin(rng):
            change_rate = -change_rate
            logger.debug(f"Setpoint reflected at lower bound {level}")

    new_state = replace(
        state,
        value=level,
        change_rate_per_step=change_rate,
        current_steps=state.current_steps + 1,
    )
    return new_state, level


class SetPointGenerator:
    """Stateful setpoint source stepped once per simulation tick.

    The generator owns its state and its random source.  ``seed`` defaults to
    the current time in milliseconds; ``rng`` may be given to inject any
    :class:`numpy.random.Generator` instead of the default MT19937 stream.
    """

    def __init__(
        self,
        config: SetPointConfig,
        seed: int | None = None,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        if not isinstance(config, SetPointConfig):
            raise ConfigError("config must be a SetPointConfig")
        self.config = config.validate()
        self.seed = time_seed() if seed is None else int(seed)
        if rng is None:
            rng = make_generator(self.seed)
        elif not isinstance(rng, np.random.Generator):
            raise TypeError("rng must be a numpy.random.Generator")
        self.rng = rng

        if config.stationary:
            self._state = SetPointState(value=float(config.stationary_value))
        else:
            self._state = SetPointState()
            self._start_new_segment()

    # ------------------------------------------------------------------
    @property
    def setpoint(self) -> float:
        return self._state.value

    @property
    def change_rate_per_step(self) -> float:
        return self._state.change_rate_per_step

    @property
    def current_steps(self) -> int:
        return self._state.current_steps

    @property
    def last_sequence_steps(self) -> int:
        return self._state.last_sequence_steps

    # ------------------------------------------------------------------
    def step(self) -> float:
        """Return the next setpoint and store it as the current one."""
        self._state, value = advance(self._state, self.config, self.rng)
        return value

    def trajectory(self, steps: int) -> np.ndarray:
        """Return the next ``steps`` setpoints as a float array."""
        if steps < 0:
            raise ValueError("steps must be >= 0")
        return np.fromiter((self.step() for _ in range(steps)), dtype=float, count=steps)

    def _start_new_segment(self) -> None:
        self._state = sample_segment(self._state.value, self.config, self.rng)

    def snapshot(self) -> SetPointState:
        """Return an immutable copy of the current state."""
        return self._state

    def restore_state(
        self,
        value: float,
        current_steps: int,
        last_sequence_steps: int,
        change_rate_per_step: float,
    ) -> None:
        """Overwrite the whole state without sampling or validation."""
        self._state = SetPointState(
            value=value,
            change_rate_per_step=change_rate_per_step,
            current_steps=current_steps,
            last_sequence_steps=last_sequence_steps,
        )
        logger.debug(f"Setpoint state restored: {self._state}")

    def restore(self, state: SetPointState) -> None:
        """Restore a state previously returned by :meth:`snapshot`."""
        self.restore_state(
            state.value,
            state.current_steps,
            state.last_sequence_steps,
            state.change_rate_per_step,
        )

    def set_seed(self, seed: int) -> None:
        """Reseed the random source; the current state is left untouched."""
        self.seed = int(seed)
        self.rng = make_generator(self.seed)
        logger.debug(f"Setpoint generator reseeded with {self.seed}")
