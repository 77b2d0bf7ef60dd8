from .rng_manager import (
    RngManager,
    make_generator,
    time_seed,
    activate_global_hooks,
    deactivate_global_hooks,
    UncontrolledRandomError,
)

__all__ = [
    "RngManager",
    "make_generator",
    "time_seed",
    "activate_global_hooks",
    "deactivate_global_hooks",
    "UncontrolledRandomError",
]
