from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from .. import commands
from ..commands import AppState
from ..dependencies import get_state
from ..schemas import TodoCreate, TodoOut, TodoUpdate

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the stored row.",
    responses={
        201: {"description": "Todo created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_todo(payload: TodoCreate, state: AppState = Depends(get_state)) -> TodoOut:
    """
    Create a new Todo.
    """
    created = commands.create_todo(state, payload.title, payload.status, payload.broker)
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every Todo item ordered by id.",
)
def list_todos(state: AppState = Depends(get_state)) -> List[TodoOut]:
    """
    List all todos.
    """
    return [TodoOut(**t) for t in commands.get_todos(state)]


# PUBLIC_INTERFACE
@router.get(
    "/search",
    response_model=List[TodoOut],
    summary="Search Todos",
    description=(
        "Substring search on title. The query is matched literally: '%', '_' and '\\' "
        "are not treated as wildcards."
    ),
)
def search_todos(
    q: str = Query("", description="Text to look for in titles"),
    state: AppState = Depends(get_state),
) -> List[TodoOut]:
    """
    Search todos by title.
    """
    return [TodoOut(**t) for t in commands.search_todos(state, q)]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: int, state: AppState = Depends(get_state)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoOut(**commands.get_todo(state, todo_id))


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Partially update fields of a Todo item. updated_at is always refreshed.",
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
        422: {"description": "Validation error"},
    },
)
def patch_todo(todo_id: int, payload: TodoUpdate, state: AppState = Depends(get_state)) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    updated = commands.update_todo(
        state,
        todo_id,
        title=payload.title,
        status=payload.status,
        broker=payload.broker,
    )
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a Todo item by ID. Deleting an unknown ID also returns 204.",
)
def delete_todo(todo_id: int, state: AppState = Depends(get_state)) -> Response:
    """
    Delete a Todo.
    """
    commands.delete_todo(state, todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
