# src/recurring_tasks/tasks/google_tasks.py

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

import httpx

from ..config import DEFAULT_API_BASE_URL
from ..core.errors import AuthenticationFailure, StoreOperationFailure
from ..core.ports import TokenProvider
from .notes_codec import format_timestamp, parse_timestamp
from .task_models import NewTaskSpec, TaskList, TaskRecord, TaskStatus

logger = logging.getLogger(__name__)

PAGE_SIZE = 100

# Keys mapped onto TaskRecord attributes; everything else ends up in TaskRecord.extra.
_KNOWN_KEYS = {"id", "title", "status", "completed", "due", "notes", "updated"}


class StaticTokenProvider:
    """Bearer token handed over by whatever did the sign-in (env var, secret store, ...)."""

    def __init__(self, token: str | None) -> None:
        self._token = (token or "").strip() or None

    def access_token(self) -> str | None:
        return self._token


def _auth_status(code: int) -> bool:
    return code in (401, 403)


def task_from_api(item: Mapping[str, Any]) -> TaskRecord:
    return TaskRecord(
        id=str(item.get("id") or ""),
        title=str(item.get("title") or ""),
        status=TaskStatus.from_api(item.get("status")),
        completed=parse_timestamp(item.get("completed")),
        due=parse_timestamp(item.get("due")),
        notes=item.get("notes") if isinstance(item.get("notes"), str) else None,
        updated=parse_timestamp(item.get("updated")),
        extra={k: v for k, v in item.items() if k not in _KNOWN_KEYS},
    )


def spec_to_api(spec: NewTaskSpec) -> dict[str, Any]:
    body: dict[str, Any] = {"title": spec.title}
    if spec.notes is not None:
        body["notes"] = spec.notes
    if spec.due is not None:
        body["due"] = format_timestamp(spec.due)
    return body


class GoogleTasksClient:
    """
    Google Tasks REST client (JSON over HTTPS, bearer auth).

    Failures surface as StoreOperationFailure; 401/403 and a missing token as
    AuthenticationFailure. Retries are left to the caller: the batch scanner just
    picks the task up again on its next run.
    """

    def __init__(
            self,
            token_provider: TokenProvider,
            *,
            base_url: str = DEFAULT_API_BASE_URL,
            timeout_seconds: float = 20.0,
            http_client: httpx.Client | None = None,
    ) -> None:
        self._tokens = token_provider
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=httpx.Timeout(timeout_seconds, connect=5.0))

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> GoogleTasksClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ---- low-level helpers ----

    def _headers(self, operation: str, list_id: str | None, task_id: str | None) -> dict[str, str]:
        token = self._tokens.access_token()
        if not token:
            raise AuthenticationFailure(operation, "user not authenticated", list_id=list_id, task_id=task_id)
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _request(
            self,
            operation: str,
            method: str,
            path: str,
            *,
            list_id: str | None = None,
            task_id: str | None = None,
            params: dict[str, Any] | None = None,
            json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = self._headers(operation, list_id, task_id)
        url = f"{self._base_url}{path}"

        try:
            resp = self._http.request(method, url, headers=headers, params=params, json=json_body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            exc_type = AuthenticationFailure if _auth_status(code) else StoreOperationFailure
            raise exc_type(
                operation,
                e.response.reason_phrase,
                list_id=list_id,
                task_id=task_id,
                status_code=code,
            ) from e
        except httpx.HTTPError as e:
            msg = f"{e.__class__.__name__}: {e}"
            raise StoreOperationFailure(operation, msg, list_id=list_id, task_id=task_id) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise StoreOperationFailure(operation, "response is not JSON", list_id=list_id, task_id=task_id) from e
        if not isinstance(data, dict):
            raise StoreOperationFailure(operation, "unexpected response shape", list_id=list_id, task_id=task_id)
        return data

    def _paged(
            self,
            operation: str,
            path: str,
            params: dict[str, Any],
            *,
            list_id: str | None = None,
    ) -> Iterator[dict[str, Any]]:
        page_params = dict(params)
        while True:
            data = self._request(operation, "GET", path, list_id=list_id, params=page_params)
            for item in data.get("items") or []:
                if isinstance(item, dict):
                    yield item
            token = data.get("nextPageToken")
            if not token:
                return
            page_params["pageToken"] = token

    # ---- public API ----

    def list_task_lists(self) -> list[TaskList]:
        lists = [
            TaskList(id=item.get("id") or None, title=str(item.get("title") or ""))
            for item in self._paged("list_task_lists", "/users/@me/lists", {"maxResults": PAGE_SIZE})
        ]
        logger.debug("Fetched %d task lists", len(lists))
        return lists

    def list_tasks(
            self,
            list_id: str,
            *,
            completed_after: datetime | None = None,
            show_completed: bool = True,
            show_hidden: bool = True,
    ) -> list[TaskRecord]:
        params: dict[str, Any] = {
            "maxResults": PAGE_SIZE,
            "showCompleted": "true" if show_completed else "false",
            "showHidden": "true" if show_hidden else "false",
        }
        if completed_after is not None:
            params["completedMin"] = format_timestamp(completed_after)

        tasks = [
            task_from_api(item)
            for item in self._paged("list_tasks", f"/lists/{list_id}/tasks", params, list_id=list_id)
        ]
        logger.debug("Fetched %d tasks list=%s completedMin=%s", len(tasks), list_id, params.get("completedMin"))
        return tasks

    def insert_task(self, list_id: str, spec: NewTaskSpec) -> TaskRecord:
        data = self._request(
            "insert_task",
            "POST",
            f"/lists/{list_id}/tasks",
            list_id=list_id,
            json_body=spec_to_api(spec),
        )
        return task_from_api(data)

    def patch_task(self, list_id: str, task_id: str, fields: Mapping[str, Any]) -> TaskRecord:
        body: dict[str, Any] = {}
        for key, value in fields.items():
            body[key] = format_timestamp(value) if isinstance(value, datetime) else value

        data = self._request(
            "patch_task",
            "PATCH",
            f"/lists/{list_id}/tasks/{task_id}",
            list_id=list_id,
            task_id=task_id,
            json_body=body,
        )
        return task_from_api(data)
