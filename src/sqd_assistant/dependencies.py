from __future__ import annotations

from fastapi import Request

from .commands import AppState


# PUBLIC_INTERFACE
def get_state(request: Request) -> AppState:
    """
    FastAPI dependency returning the AppState opened by the app lifespan.
    """
    return request.app.state.sqd
