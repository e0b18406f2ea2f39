"""
Request and response bodies of the command bridge.

Length limits and trimming are enforced by the services, not here, so the UI
always gets the same validation messages whichever way a command is invoked.
The limits still appear in the OpenAPI schema as maxLength; pydantic does not
check them because they apply to the trimmed value.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import BROKER_MAX_LENGTH, TITLE_MAX_LENGTH

_TITLE_BOUNDS = {"minLength": 1, "maxLength": TITLE_MAX_LENGTH}
_BROKER_BOUNDS = {"minLength": 1, "maxLength": BROKER_MAX_LENGTH}


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Send quarterly statement",
                "status": "pending",
                "broker": "Huatai",
            }
        }
    )

    title: str = Field(
        ..., description="Title, 1..500 characters after trimming", json_schema_extra=_TITLE_BOUNDS
    )
    status: str = Field(..., description="Free-form status, e.g. pending/in_progress/completed")
    broker: str = Field(
        ..., description="Broker tag, 1..100 characters after trimming", json_schema_extra=_BROKER_BOUNDS
    )


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"status": "completed"}}
    )

    title: Optional[str] = Field(default=None, description="New title", json_schema_extra=_TITLE_BOUNDS)
    status: Optional[str] = Field(default=None, description="New status")
    broker: Optional[str] = Field(default=None, description="New broker tag", json_schema_extra=_BROKER_BOUNDS)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the bridge for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 12,
                "title": "Send quarterly statement",
                "status": "pending",
                "broker": "Huatai",
                "created_at": "2025-01-25 10:15:30",
                "updated_at": "2025-01-26 09:00:00",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title")
    status: str = Field(..., description="Status")
    broker: str = Field(..., description="Broker tag")
    created_at: str = Field(..., description="Creation time, 'YYYY-MM-DD HH:MM:SS' local")
    updated_at: str = Field(..., description="Last update time, 'YYYY-MM-DD HH:MM:SS' local")


# PUBLIC_INTERFACE
class FrontendLog(BaseModel):
    """A log line forwarded by the UI."""

    level: str = Field(..., description="error, warn, info, debug; anything else logs as trace")
    message: str = Field(..., description="Log message")
    context: Optional[str] = Field(default=None, description="Optional UI component name")


class TrendOut(BaseModel):
    dates: List[str] = Field(..., description="Each day of the range, 'YYYY-MM-DD'")
    created: List[int] = Field(..., description="Todos created per day")
    completed: List[int] = Field(..., description="Completed todos last updated per day")


# PUBLIC_INTERFACE
class StatsOut(BaseModel):
    """Breakdown shown by the stats window."""

    start: Optional[str] = Field(default=None, description="Range start, if any")
    end: Optional[str] = Field(default=None, description="Range end, if any")
    total: int = Field(..., description="Todos created within the range")
    status_counts: Dict[str, int] = Field(..., description="Todo count per status")
    broker_counts: Dict[str, int] = Field(..., description="Todo count per broker")
    broker_status_counts: Dict[str, Dict[str, int]] = Field(
        ..., description="Todo count per status, for each broker"
    )
    trend: TrendOut
