from __future__ import annotations

"""REST client for the hosted quiz database.

Talks to the PostgREST endpoint of the hosted database (`/rest/v1/<table>`) with
the project's anon key. Reads return raw rows (list of dicts); parsing into
models is the repository's job.

Reads are best-effort: any transport or HTTP failure is logged and yields an
empty list. Writes raise `RemoteStoreError` so callers decide how loud to be.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import requests

from korean_work.domain.enums import ImageQuizCategory
from korean_work.domain.models import SessionResult

logger = logging.getLogger(__name__)


class RemoteStoreError(RuntimeError):
    """A write to the hosted database failed."""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RemoteQuizStore:
    KOREAN_QUIZ_TABLE = "korean_quiz"
    IMAGE_QUIZ_TABLE = "image_quiz"
    TOPICS_TABLE = "topics"
    TOPIC_ITEMS_TABLE = "topic_items"
    TOPIC_ATTEMPTS_TABLE = "topic_attempts"
    TOPIC_PROGRESS_TABLE = "topic_progress"
    SESSION_RESULTS_TABLE = "session_results"

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        access_token: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10,
    ) -> None:
        self._url = (url or "").rstrip("/")
        self._api_key = api_key or ""
        self._access_token = access_token
        self._session = session or requests.Session()
        self._timeout = timeout

    def is_enabled(self) -> bool:
        return bool(self._url and self._api_key)

    # --- HTTP plumbing ---

    def _headers(self) -> dict[str, str]:
        token = self._access_token or self._api_key
        return {
            "apikey": self._api_key,
            "Authorization": "Bearer {}".format(token),
            "Content-Type": "application/json",
        }

    def _table_url(self, table: str) -> str:
        return "{}/rest/v1/{}".format(self._url, table)

    @staticmethod
    def _error_message(response: Any) -> str:
        try:
            data = response.json()
            return data.get("message") or data.get("msg") or data.get("error_description") or "HTTP {}".format(
                response.status_code
            )
        except (ValueError, AttributeError):
            return "HTTP {}".format(response.status_code)

    def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        if not self.is_enabled():
            logger.debug("Remote store disabled; skipping read of %s", table)
            return []
        try:
            resp = self._session.get(
                self._table_url(table),
                headers=self._headers(),
                params=params,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("Error fetching %s: %s", table, e)
            return []
        if resp.status_code != 200:
            logger.error("Error fetching %s: %s", table, self._error_message(resp))
            return []
        try:
            rows = resp.json() or []
        except ValueError as e:
            logger.error("Error decoding %s rows: %s", table, e)
            return []
        return [r for r in rows if isinstance(r, dict)] if isinstance(rows, list) else []

    def _write(self, table: str, body: dict[str, Any], *, upsert_on: str | None = None) -> None:
        if not self.is_enabled():
            raise RemoteStoreError("Remote store is not configured")
        headers = self._headers()
        params: dict[str, str] = {}
        if upsert_on:
            headers["Prefer"] = "resolution=merge-duplicates,return=minimal"
            params["on_conflict"] = upsert_on
        try:
            resp = self._session.post(
                self._table_url(table),
                headers=headers,
                params=params,
                json=body,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise RemoteStoreError("Failed to write {}: {}".format(table, e)) from e
        if resp.status_code not in (200, 201, 204):
            raise RemoteStoreError("Failed to write {}: {}".format(table, self._error_message(resp)))

    # --- Reads ---

    def fetch_korean_quiz(self) -> list[dict[str, Any]]:
        return self._select(self.KOREAN_QUIZ_TABLE, {"select": "*", "order": "number.asc"})

    def fetch_image_quiz(self, category: ImageQuizCategory | str | None = None) -> list[dict[str, Any]]:
        params = {"select": "*", "order": "id.asc"}
        if category is not None:
            try:
                params["category"] = "eq.{}".format(ImageQuizCategory(category).value)
            except ValueError:
                logger.debug("Unknown image quiz category %r; nothing to fetch", category)
                return []
        return self._select(self.IMAGE_QUIZ_TABLE, params)

    def fetch_topic(self, slug: str) -> dict[str, Any] | None:
        rows = self._select(
            self.TOPICS_TABLE,
            {"select": "id,title,slug,subtitle", "slug": "eq.{}".format(slug), "limit": "1"},
        )
        return rows[0] if rows else None

    def fetch_topics_for_group(self, group: str) -> list[dict[str, Any]]:
        return self._select(
            self.TOPICS_TABLE,
            {
                "select": "id,title,slug,subtitle,order_no,created_at",
                "slug": "like.{}-*".format(group),
                "order": "order_no.asc.nullslast,created_at.asc",
            },
        )

    def fetch_topic_items(self, topic_id: str) -> list[dict[str, Any]]:
        return self._select(
            self.TOPIC_ITEMS_TABLE,
            {"select": "*", "topic_id": "eq.{}".format(topic_id), "is_active": "eq.true"},
        )

    # --- Writes ---

    def record_attempt(
        self,
        *,
        user_id: str,
        topic_id: str,
        item_id: str,
        is_correct: bool,
        chosen_answer: str,
    ) -> None:
        self._write(
            self.TOPIC_ATTEMPTS_TABLE,
            {
                "user_id": user_id,
                "topic_id": topic_id,
                "item_id": item_id,
                "is_correct": bool(is_correct),
                "chosen_answer": chosen_answer,
                "created_at": _now_iso(),
            },
        )

    def upsert_progress(
        self,
        *,
        user_id: str,
        topic_id: str,
        correct_count: int,
        total_count: int,
        last_item_id: str,
    ) -> None:
        self._write(
            self.TOPIC_PROGRESS_TABLE,
            {
                "user_id": user_id,
                "topic_id": topic_id,
                "correct_count": int(correct_count),
                "total_count": int(total_count),
                "last_item_id": last_item_id,
                "updated_at": _now_iso(),
            },
            upsert_on="user_id,topic_id",
        )

    def record_session_result(self, user_id: str, result: SessionResult) -> None:
        body: dict[str, Any] = {"user_id": user_id}
        body.update(result.to_dict())
        self._write(self.SESSION_RESULTS_TABLE, body, upsert_on="user_id")
