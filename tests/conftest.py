import os
import sys
import pytest

# Ensure the project root is on the module search path when the package is not
# installed. This allows ``import setpoint_gen`` to succeed during test
# collection without requiring an editable installation.
ROOT_DIR = os.path.dirname(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

os.environ.setdefault("MPLBACKEND", "Agg")

from rng.rng_manager import activate_global_hooks, deactivate_global_hooks  # noqa: E402
from setpoint_gen.generator import SetPointConfig  # noqa: E402


@pytest.fixture
def strict_rng():
    """Fail the test if anything draws from an unmanaged random source."""
    activate_global_hooks()
    yield
    deactivate_global_hooks()


@pytest.fixture
def config():
    return SetPointConfig(
        max_change_rate_per_step=1.0,
        max_sequence_length=5,
        min_setpoint=0.0,
        max_setpoint=100.0,
        step_size=1.0,
    )


@pytest.fixture
def stationary_config():
    return SetPointConfig(stationary=True, stationary_value=50.0)


class ScriptedRng:
    """Stand-in random source returning pre-recorded draws."""

    def __init__(self, integers=(), uniforms=(), coins=()):
        self._integers = list(integers)
        self._uniforms = list(uniforms)
        self._coins = list(coins)

    def integers(self, low, high):
        value = self._integers.pop(0)
        assert low <= value < high
        return value

    def uniform(self, low, high):
        return self._uniforms.pop(0)

    def binomial(self, n, p):
        assert (n, p) == (1, 0.5)
        return self._coins.pop(0)

    def exhausted(self) -> bool:
        return not (self._integers or self._uniforms or self._coins)


@pytest.fixture
def scripted_rng():
    return ScriptedRng
