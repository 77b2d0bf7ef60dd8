from __future__ import annotations

import hashlib
import random
import secrets
import time
import numpy as np
from typing import Dict, Tuple

SEED_MASK = 0xFFFFFFFFFFFFFFFF


class UncontrolledRandomError(RuntimeError):
    """Raised when an unmanaged RNG source is accessed."""


def time_seed() -> int:
    """Return a seed derived from the wall clock in milliseconds."""
    return int(time.time() * 1000)


def make_generator(seed: int) -> np.random.Generator:
    """Return an MT19937 ``Generator`` seeded with ``seed``.

    Seeds are reduced to 64 bits so that negative values coming from hosts
    using signed longs map onto a valid MT19937 seed.
    """
    return np.random.Generator(np.random.MT19937(int(seed) & SEED_MASK))


class RngManager:
    """Derive deterministic generators for named drivers and episodes."""

    def __init__(self, master_seed: int) -> None:
        self.master_seed = master_seed
        self._streams: Dict[Tuple[str, int], np.random.Generator] = {}

    def stream_seed(self, stream_name: str, episode: int = 0) -> int:
        # ``hash()`` is not stable across interpreter runs so we
        # derive a deterministic hash from the stream name instead.
        digest = hashlib.sha256(stream_name.encode()).digest()
        stream_hash = int.from_bytes(digest[:8], "little")
        return (self.master_seed ^ stream_hash ^ episode) & SEED_MASK

    def get_stream(self, stream_name: str, episode: int = 0) -> np.random.Generator:
        """Return the Generator for the given stream and episode."""
        key = (stream_name, episode)
        if key not in self._streams:
            self._streams[key] = make_generator(self.stream_seed(stream_name, episode))
        return self._streams[key]


_hook_enabled = False
_orig_random_funcs: dict[str, object] = {}
_orig_numpy_funcs: dict[str, object] = {}
_orig_secret_funcs: dict[str, object] = {}


def _reject(*_: object, **__: object) -> None:
    raise UncontrolledRandomError(
        "Unmanaged random source: use make_generator() or RngManager.get_stream()"
    )


def activate_global_hooks() -> None:
    """Globally reject draws from the module level random sources."""

    global _hook_enabled
    if _hook_enabled:
        return
    _hook_enabled = True

    for name in ["random", "randrange", "randint", "choice", "uniform", "gauss"]:
        _orig_random_funcs[name] = getattr(random, name)
        setattr(random, name, _reject)

    for name in ["random", "rand", "randint", "uniform", "binomial"]:
        _orig_numpy_funcs[name] = getattr(np.random, name)
        setattr(np.random, name, _reject)

    for name in ["randbelow", "randbits"]:
        _orig_secret_funcs[name] = getattr(secrets, name)
        setattr(secrets, name, _reject)


def deactivate_global_hooks() -> None:
    """Restore modules to their original state."""

    global _hook_enabled
    if not _hook_enabled:
        return

    for name, func in _orig_random_funcs.items():
        setattr(random, name, func)
    _orig_random_funcs.clear()

    for name, func in _orig_numpy_funcs.items():
        setattr(np.random, name, func)
    _orig_numpy_funcs.clear()

    for name, func in _orig_secret_funcs.items():
        setattr(secrets, name, func)
    _orig_secret_funcs.clear()

    _hook_enabled = False
