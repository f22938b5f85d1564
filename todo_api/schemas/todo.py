# todo_api/schemas/todo.py
from typing import List
from pydantic import BaseModel, Field

class TodoRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)

class TodoOut(BaseModel):
    id: int
    title: str
    description: str

    model_config = {"from_attributes": True}

class TodoPage(BaseModel):
    data: List[TodoOut]
    page: int
    limit: int
    total: int
