from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from .. import commands
from ..commands import AppState
from ..dependencies import get_state

router = APIRouter(
    prefix="/api/v1/brokers",
    tags=["brokers"],
)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[str],
    summary="Broker Pool",
    description="Distinct broker tags currently used by any todo, in no particular order.",
)
def get_broker_pool(state: AppState = Depends(get_state)) -> List[str]:
    return commands.get_broker_pool(state)
