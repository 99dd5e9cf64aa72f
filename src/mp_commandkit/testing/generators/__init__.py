"""Testing generators – deterministic timers and property-based strategies."""
from mp_commandkit.testing.generators.step_timer import StepTimer
from mp_commandkit.testing.generators.strategies import (
    command_name_strategy,
    sentinel_batch_strategy,
)

__all__ = ["StepTimer", "command_name_strategy", "sentinel_batch_strategy"]
