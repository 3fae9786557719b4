"""Route dependencies: resolve the CacheRuntime from app.state."""

from fastapi import Request

from littlelemon.core.errors import RuntimeNotReadyError
from littlelemon.infrastructure.runtime import CacheRuntime


def get_runtime(request: Request) -> CacheRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise RuntimeNotReadyError()
    return runtime
