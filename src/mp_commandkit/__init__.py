"""
mp_commandkit – command/event dispatch runtime for chat platforms.

Import path convention::

    from mp_commandkit.application.dispatcher import Dispatcher
    from mp_commandkit.application.commands import Context, MiddlewareContext
    from mp_commandkit.kernel.signals import stop_middlewares
    from mp_commandkit.context import after, use_environment
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
