from __future__ import annotations

from fastapi import APIRouter, Response, status

from .. import commands
from ..schemas import FrontendLog

router = APIRouter(
    prefix="/api/v1/logs",
    tags=["logs"],
)


# PUBLIC_INTERFACE
@router.post(
    "/",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Log From Frontend",
    description="Append a UI log line to the application log file.",
)
def log_from_frontend(payload: FrontendLog) -> Response:
    commands.log_from_frontend(payload.level, payload.message, payload.context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
