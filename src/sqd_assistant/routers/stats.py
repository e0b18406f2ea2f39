from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from .. import commands
from ..commands import AppState
from ..dependencies import get_state
from ..schemas import StatsOut

router = APIRouter(
    prefix="/api/v1",
    tags=["stats"],
)

_MEDIA_TYPES = {"markdown": "text/markdown", "text": "text/plain"}


# PUBLIC_INTERFACE
@router.get(
    "/stats/",
    response_model=StatsOut,
    summary="Statistics",
    description=(
        "Status and broker breakdown of todos created within [start, end] "
        "(all todos when no range is given) and a daily created/completed trend "
        "(last 30 days by default). Dates are YYYY-MM-DD."
    ),
)
def get_stats(
    start: Optional[str] = Query(None, description="First day, YYYY-MM-DD"),
    end: Optional[str] = Query(None, description="Last day, YYYY-MM-DD"),
    state: AppState = Depends(get_state),
) -> StatsOut:
    return StatsOut(**asdict(commands.get_stats(state, start, end)))


# PUBLIC_INTERFACE
@router.get(
    "/reports/",
    response_class=PlainTextResponse,
    summary="Export Report",
    description=(
        "Completed-work report grouped by broker. range is daily, weekly or custom "
        "(custom needs start and end); format is markdown or text."
    ),
)
def export_report(
    range_kind: str = Query("daily", alias="range", description="daily, weekly or custom"),
    start: Optional[str] = Query(None, description="First day for custom ranges, YYYY-MM-DD"),
    end: Optional[str] = Query(None, description="Last day for custom ranges, YYYY-MM-DD"),
    fmt: str = Query("markdown", alias="format", description="markdown or text"),
    state: AppState = Depends(get_state),
) -> PlainTextResponse:
    body = commands.export_report(state, range_kind, start, end, fmt)
    return PlainTextResponse(body, media_type=_MEDIA_TYPES[fmt])
