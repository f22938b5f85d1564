# todo_api/api/router.py
from fastapi import APIRouter
from todo_api.api import auth, todos

api_router = APIRouter()

# -------- public --------
api_router.include_router(auth.router, tags=["auth"])
# -------- Authorization cookie required --------
api_router.include_router(todos.router, prefix="/todos", tags=["todos"])
