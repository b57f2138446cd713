from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from todoapp.client.render import render, render_page
from todoapp.client.state import TodoState
from todoapp.models.todos import FilterMode
from todoapp.services import todos as todos_service

router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
def index(filter: FilterMode = FilterMode.ALL) -> HTMLResponse:
    state = TodoState(todos=todos_service.list_todos(), filter=filter)
    return HTMLResponse(render_page(render(state)))
