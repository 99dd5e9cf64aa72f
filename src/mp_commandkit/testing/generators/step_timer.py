"""Testing generators – StepTimer."""
from __future__ import annotations


class StepTimer:
    """Deterministic timer for :class:`~mp_commandkit.context.ExecutionEnvironment`.

    Each call returns the current reading (seconds) and advances it by
    *step*::

        env = ExecutionEnvironment(timer=StepTimer(step=0.25))
        env.mark_start("ping")   # reads 0.0
        env.mark_end()           # reads 0.25
        assert env.get_execution_time() == 250.0
    """

    def __init__(self, start: float = 0.0, step: float = 1.0) -> None:
        self._current = start
        self._step = step
        self.call_count = 0

    def __call__(self) -> float:
        value = self._current
        self._current += self._step
        self.call_count += 1
        return value

    def peek(self) -> float:
        return self._current


__all__ = ["StepTimer"]
