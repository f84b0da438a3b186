"""
Client HTTP de l'API tâches - utilisé par l'interface (board)
"""

import requests
from datetime import date
from typing import Optional, List
import logging

from taskmanager.core.config import settings

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


class TaskClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}


def validate_task_form(data: dict, today: Optional[date] = None, creating: bool = True) -> dict:
    """Même validation que le formulaire: titre requis, pas de date passée à la création"""
    errors = {}
    title = data.get("title")
    if not title or not str(title).strip():
        errors["title"] = "Title is required"

    due_date = data.get("due_date")
    if creating and due_date:
        if isinstance(due_date, str):
            try:
                due_date = date.fromisoformat(due_date[:10])
            except ValueError:
                errors["due_date"] = "Invalid due date"
                return errors
        if due_date < (today or date.today()):
            errors["due_date"] = "Due date cannot be in the past"

    return errors


class TaskClient:
    def __init__(self, base_url: Optional[str] = None, timeout: float = REQUEST_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TaskClientError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok:
            message = body.get("message") or body.get("error") or f"HTTP {response.status_code}"
            logger.error(f"{method} {path} -> {response.status_code}: {message}")
            raise TaskClientError(message, status_code=response.status_code)

        return body

    def get_tasks(self, status: Optional[str] = None, priority: Optional[str] = None) -> List[dict]:
        params = {}
        if status:
            params["status"] = status
        if priority:
            params["priority"] = priority
        return self._request("GET", "/api/tasks", params=params)["data"]

    def get_task(self, task_id: int) -> dict:
        return self._request("GET", f"/api/tasks/{task_id}")["data"]

    def create_task(self, task_data: dict) -> dict:
        errors = validate_task_form(task_data)
        if errors:
            raise TaskClientError(next(iter(errors.values())), errors=errors)
        payload = dict(task_data)
        if not payload.get("due_date"):
            payload["due_date"] = None
        return self._request("POST", "/api/tasks", json=payload)["data"]

    def update_task(self, task_id: int, task_data: dict) -> dict:
        if "title" in task_data:
            errors = validate_task_form(task_data, creating=False)
            if errors:
                raise TaskClientError(next(iter(errors.values())), errors=errors)
        return self._request("PUT", f"/api/tasks/{task_id}", json=task_data)["data"]

    def delete_task(self, task_id: int) -> bool:
        self._request("DELETE", f"/api/tasks/{task_id}")
        return True

    def get_stats(self) -> dict:
        return self._request("GET", "/api/stats")["data"]

    def health_check(self) -> dict:
        return self._request("GET", "/health")
