"""Adapter plugging the setpoint generator into a host simulation loop.

The host owns a generic vector of named values.  At every tick it hands the
vector to :meth:`SetPointDriver.filter`, which advances the setpoint and
writes the four state variables back.  Checkpoints go the other way through
:meth:`SetPointDriver.get_state` and :meth:`SetPointDriver.set_configuration`.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from .generator import SetPointConfig, SetPointGenerator, SetPointState
from .state_description import SetPointStateDescription


@runtime_checkable
class DataVector(Protocol):
    """Named value store owned by the host simulator."""

    def get_value(self, name: str) -> float: ...

    def set_value(self, name: str, value: float) -> None: ...

    def key_list(self) -> list[str]: ...


@runtime_checkable
class ExternalDriver(Protocol):
    """Contract of a driver stepped by the host once per tick."""

    def set_seed(self, seed: int) -> None: ...

    def filter(self, state: DataVector) -> None: ...

    def set_configuration(self, state: DataVector) -> None: ...

    def get_state(self) -> DataVector: ...


class DataVectorImpl:
    """Dict backed :class:`DataVector` restricted to a fixed set of names."""

    def __init__(self, names: Iterable[str] | SetPointStateDescription, default: float = 0.0) -> None:
        if isinstance(names, SetPointStateDescription):
            names = names.var_names()
        self._values: dict[str, float] = {name: default for name in names}

    def _check(self, name: str) -> None:
        if name not in self._values:
            raise KeyError(f"unknown state variable {name!r}")

    def get_value(self, name: str) -> float:
        self._check(name)
        return self._values[name]

    def set_value(self, name: str, value: float) -> None:
        self._check(name)
        self._values[name] = float(value)

    def key_list(self) -> list[str]:
        return list(self._values)

    def as_dict(self) -> dict[str, float]:
        return dict(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"DataVectorImpl({items})"


class SetPointDriver:
    """External driver producing the setpoint of the benchmark."""

    def __init__(
        self,
        config: SetPointConfig | None = None,
        seed: int | None = None,
        *,
        generator: SetPointGenerator | None = None,
    ) -> None:
        if generator is None:
            if config is None:
                raise ValueError("either config or generator must be given")
            generator = SetPointGenerator(config, seed)
        self.generator = generator
        self.description = SetPointStateDescription()

    def set_seed(self, seed: int) -> None:
        self.generator.set_seed(seed)

    def _write(self, state: DataVector, snapshot: SetPointState) -> None:
        for name, value in snapshot.as_dict().items():
            state.set_value(name, value)

    def filter(self, state: DataVector) -> None:
        """Advance the setpoint by one tick and publish it into ``state``."""
        self.generator.step()
        self._write(state, self.generator.snapshot())

    def set_configuration(self, state: DataVector) -> None:
        """Restore the generator from the four variables held in ``state``."""
        restored = SetPointState.from_mapping(
            {name: state.get_value(name) for name in self.description.var_names()}
        )
        self.generator.restore(restored)

    def get_state(self) -> DataVectorImpl:
        vector = DataVectorImpl(self.description)
        self._write(vector, self.generator.snapshot())
        return vector
