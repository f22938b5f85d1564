# todo_api/api/todos.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query, status

from todo_api.api.deps import get_current_user_id, get_todo_service
from todo_api.api.responses import render
from todo_api.schemas.todo import TodoOut, TodoPage
from todo_api.services.todo_service import TodoService

router = APIRouter()

@router.post("", status_code=status.HTTP_201_CREATED, response_model=TodoOut)
def create_todo(
    payload: Dict[str, Any] = Body(...),
    user_id: int = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    return render(service.create(user_id, payload))

@router.put("/{todo_id}", response_model=TodoOut)
def update_todo(
    todo_id: int,
    payload: Dict[str, Any] = Body(...),
    user_id: int = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    return render(service.update(user_id, todo_id, payload))

@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: int,
    user_id: int = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    return render(service.delete(user_id, todo_id))

@router.get("", response_model=TodoPage)
def list_todos(
    page: int = Query(...),
    limit: int = Query(...),
    user_id: int = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
):
    return render(service.list(user_id, page, limit))
