"""
Todo Backend API Client

Thin requests-based client for the application's CRUD API, used by
scenarios that check the backend contract directly:

    POST   /add          create a task      {"task": "..."}
    GET    /get          list tasks
    PUT    /edit/<id>    mark a task done
    PUT    /update/<id>  replace task text  {"task": "..."}
    DELETE /delete/<id>  delete a task
    GET    /health       liveness, body contains "OK"

Every call is attempted once.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from utils.harness_errors import (
    BackendClientError,
    BackendUnavailableError,
    BackendValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10
HEALTH_MARKER = 'OK'


def validate_task_text(task: Any) -> str:
    """Same rule as the server: a non-empty string, trimmed."""
    if not isinstance(task, str) or not task.strip():
        raise BackendValidationError("Task is required and must be a non-empty string",
                                     status_code=None, context={'task': task})
    return task.strip()


class TodoApiClient:
    """
    Client for one backend base URL.

    Args:
        base_url: Backend base URL, e.g. http://localhost:5100
        timeout: Per-request timeout in seconds
        session: Optional pre-configured requests.Session
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_S,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = self._url(path)
        try:
            resp = self.session.request(method, url, json=payload, headers=self.headers,
                                        timeout=self.timeout)
        except requests.RequestException as e:
            raise BackendUnavailableError("Backend request failed",
                                          {'method': method, 'url': url, 'cause': str(e)}) from e

        logger.debug(f"{method} {url} -> {resp.status_code}")
        if resp.status_code >= 500:
            raise BackendUnavailableError("Backend server error",
                                          {'method': method, 'url': url, 'status': resp.status_code})
        if resp.status_code >= 400:
            message = self._error_message(resp)
            error_cls = BackendValidationError if resp.status_code == 400 else BackendClientError
            raise error_cls(message, status_code=resp.status_code,
                            context={'method': method, 'url': url})
        return resp

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            return resp.json().get('error') or resp.reason
        except ValueError:
            return resp.text or resp.reason or f"HTTP {resp.status_code}"

    def create_todo(self, task: str) -> Dict[str, Any]:
        payload = {'task': validate_task_text(task)}
        return self._request('POST', '/add', payload).json()

    def list_todos(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/get').json()

    def mark_done(self, todo_id: str) -> Dict[str, Any]:
        return self._request('PUT', f'/edit/{todo_id}').json()

    def update_todo(self, todo_id: str, task: str) -> Dict[str, Any]:
        payload = {'task': validate_task_text(task)}
        return self._request('PUT', f'/update/{todo_id}', payload).json()

    def delete_todo(self, todo_id: str) -> Dict[str, Any]:
        return self._request('DELETE', f'/delete/{todo_id}').json()

    def create_raw(self, payload: Dict[str, Any]) -> requests.Response:
        """POST /add without client-side validation, to probe server validation."""
        return self._request('POST', '/add', payload)

    def is_healthy(self) -> bool:
        try:
            resp = self.session.get(self._url('/health'), timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"⚠️ Backend health check failed: {e}")
            return False
        return resp.ok and HEALTH_MARKER in resp.text

    def close(self):
        self.session.close()
