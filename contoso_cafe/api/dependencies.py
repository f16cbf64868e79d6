"""FastAPI dependencies."""

from fastapi import Request

from contoso_cafe.core.runtime import BotRuntime


def get_runtime(request: Request) -> BotRuntime:
    """The runtime built by ``create_app``.

    Usage in FastAPI:
        runtime: BotRuntime = Depends(get_runtime)
    """
    return request.app.state.runtime
