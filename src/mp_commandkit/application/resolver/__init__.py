"""Application resolver – request → command + middleware chain."""
from mp_commandkit.application.resolver.loader import CommandLoader, LoaderData
from mp_commandkit.application.resolver.resolver import (
    CommandResolver,
    PrefixProvider,
    PrefixResult,
)

__all__ = ["CommandLoader", "CommandResolver", "LoaderData", "PrefixProvider", "PrefixResult"]
