"""Remote task storage over a PostgREST-style HTTP API."""

import logging
from typing import Any

import requests

from circula.errors import RepositoryError
from circula.schedule.models import Task
from circula.storage.mapping import record_to_task, task_to_record
from circula.storage.repository import merge_by_id

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    """Quote a value for a PostgREST in.() list."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class RemoteTaskRepository:
    """Task repository backed by a relational table behind a REST endpoint.

    Rows are scoped to a single user; every request filters on user_id.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        user_id: str,
        table: str = "tasks",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            base_url: Service root (e.g. https://project.example.co)
            api_key: Key sent as apikey and bearer token
            user_id: Owner of the rows read and written
            table: Table name
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self._endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._user_id = user_id
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            }
        )

    def list_tasks(self) -> list[Task]:
        rows = self._request(
            "GET",
            params={
                "select": "*",
                "user_id": f"eq.{self._user_id}",
                "order": "start_time.asc",
            },
        )
        return [record_to_task(row) for row in rows or []]

    def upsert(self, task: Task) -> Task:
        saved = self.upsert_many([task])
        if not saved:
            raise RepositoryError(f"Upsert of task {task.id} returned no row")
        return saved[0]

    def upsert_many(self, tasks: list[Task]) -> list[Task]:
        if not tasks:
            return []
        # One row per id per statement, later duplicates win
        tasks = merge_by_id([], tasks)
        rows = self._request(
            "POST",
            params={"on_conflict": "id"},
            json=[task_to_record(task, self._user_id) for task in tasks],
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        logger.info(f"[RemoteStore] Upserted {len(tasks)} tasks")
        return [record_to_task(row) for row in rows or []]

    def delete(self, task_id: str) -> None:
        self._request(
            "DELETE",
            params={"id": f"eq.{task_id}", "user_id": f"eq.{self._user_id}"},
        )
        logger.info(f"[RemoteStore] Deleted task {task_id}")

    def replace_all(self, tasks: list[Task]) -> list[Task]:
        """Replace the user's schedule.

        New rows are written before stale ones are removed, so a failed
        write leaves the previous schedule in place.
        """
        if not tasks:
            self.clear()
            return []

        saved = self.upsert_many(tasks)
        keep = ",".join(_quote(task.id) for task in tasks)
        self._request(
            "DELETE",
            params={"user_id": f"eq.{self._user_id}", "id": f"not.in.({keep})"},
        )
        logger.info(f"[RemoteStore] Replaced schedule with {len(saved)} tasks")
        return saved

    def clear(self) -> None:
        self._request("DELETE", params={"user_id": f"eq.{self._user_id}"})
        logger.info(f"[RemoteStore] Cleared tasks for user {self._user_id}")

    def _request(
        self,
        method: str,
        params: dict[str, str],
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            resp = self._session.request(
                method,
                self._endpoint,
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise RepositoryError(f"Remote store unreachable: {e}") from e

        if resp.status_code >= 400:
            logger.error(f"[RemoteStore] {method} failed: {resp.status_code} {resp.text}")
            raise RepositoryError(f"Remote store error: {resp.status_code} {resp.text}")

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RepositoryError("Remote store returned invalid JSON") from e
