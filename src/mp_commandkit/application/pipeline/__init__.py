"""Application pipeline – middleware runner and built-in middlewares."""
from mp_commandkit.application.pipeline.middleware import CommandMiddleware
from mp_commandkit.application.pipeline.middlewares import (
    PERMISSIONS_MIDDLEWARE_ID,
    PermissionsMiddleware,
    format_list,
    humanize_permission,
    permissions_middleware,
)
from mp_commandkit.application.pipeline.runner import (
    CANCELLED_MESSAGE,
    CommandRunner,
    RunCommandOptions,
    cancelled_result,
)

__all__ = [
    "CANCELLED_MESSAGE",
    "PERMISSIONS_MIDDLEWARE_ID",
    "CommandMiddleware",
    "CommandRunner",
    "PermissionsMiddleware",
    "RunCommandOptions",
    "cancelled_result",
    "format_list",
    "humanize_permission",
    "permissions_middleware",
]
