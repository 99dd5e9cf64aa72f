"""Context – per-dispatch execution environment and its ambient carrier."""
from mp_commandkit.context.carrier import (
    after,
    cancel_after,
    exit_context,
    get_environment,
    make_context_aware_function,
    provide_context,
    use_environment,
)
from mp_commandkit.context.environment import (
    DeferredFunction,
    EnvironmentType,
    ExecutionEnvironment,
)

__all__ = [
    "DeferredFunction",
    "EnvironmentType",
    "ExecutionEnvironment",
    "after",
    "cancel_after",
    "exit_context",
    "get_environment",
    "make_context_aware_function",
    "provide_context",
    "use_environment",
]
