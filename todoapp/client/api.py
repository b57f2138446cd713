import requests

from todoapp.http_client import get_session
from todoapp.models.todos import Todo

API_PATH = "/api/todos"


class TodoApiError(Exception):
    """Raised when a call to the todo API fails.

    status_code is 0 when the request never got a response.
    """

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


def _error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {resp.status_code}"


class TodoApiClient:
    """Thin client for the /api/todos endpoints.

    session may be anything exposing requests' ``request(method, url, json=...)``
    call, which lets tests drive the app through FastAPI's TestClient.
    """

    def __init__(self, base_url: str = "http://localhost:3000", session=None):
        self.base_url = base_url.rstrip("/")
        self._session = session if session is not None else get_session()

    def _request(self, method: str, path: str = "", json: dict | None = None):
        url = f"{self.base_url}{API_PATH}{path}"
        try:
            resp = self._session.request(method, url, json=json)
        except requests.RequestException as e:
            raise TodoApiError(f"Request to {url} failed: {e}") from e
        if resp.status_code >= 400:
            raise TodoApiError(_error_message(resp), resp.status_code)
        return resp

    def list_todos(self) -> list[Todo]:
        return [Todo.model_validate(t) for t in self._request("GET").json()]

    def get_todo(self, todo_id: int) -> Todo:
        return Todo.model_validate(self._request("GET", f"/{todo_id}").json())

    def create_todo(self, title: str, completed: bool = False) -> Todo:
        body = {"title": title, "completed": completed}
        return Todo.model_validate(self._request("POST", json=body).json())

    def update_todo(self, todo_id: int, title: str | None = None, completed: bool | None = None) -> Todo:
        body = {}
        if title is not None:
            body["title"] = title
        if completed is not None:
            body["completed"] = completed
        return Todo.model_validate(self._request("PUT", f"/{todo_id}", json=body).json())

    def delete_todo(self, todo_id: int) -> None:
        self._request("DELETE", f"/{todo_id}")
