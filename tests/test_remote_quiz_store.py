"""
Tests for the hosted-database REST client.

A fake session stands in for `requests.Session` so no network is touched.
"""

from typing import Any

import pytest
import requests

from korean_work.controllers.question_bank_repository import QuestionBankRepository
from korean_work.domain.enums import LearnMode
from korean_work.domain.models import SessionResult
from korean_work.services.remote_quiz_store import RemoteQuizStore, RemoteStoreError


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response: Any = None) -> None:
        self.response = response if response is not None else FakeResponse(200, [])
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def _reply(self) -> FakeResponse:
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(("GET", url, kwargs))
        return self._reply()

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(("POST", url, kwargs))
        return self._reply()


def _store(session: FakeSession, **kwargs: Any) -> RemoteQuizStore:
    return RemoteQuizStore("https://proj.supabase.co/", "anon-key", session=session, **kwargs)


def test_fetch_korean_quiz_request_shape() -> None:
    session = FakeSession(FakeResponse(200, [{"id": 1, "number": 1, "question": "q"}]))
    rows = _store(session).fetch_korean_quiz()

    assert rows == [{"id": 1, "number": 1, "question": "q"}]
    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == "https://proj.supabase.co/rest/v1/korean_quiz"
    assert kwargs["params"] == {"select": "*", "order": "number.asc"}
    assert kwargs["headers"]["apikey"] == "anon-key"
    assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
    assert kwargs["timeout"] == 10


def test_access_token_used_for_authorization() -> None:
    session = FakeSession()
    _store(session, access_token="user-jwt").fetch_topic_items("t-1")
    _, _, kwargs = session.calls[0]
    assert kwargs["headers"]["Authorization"] == "Bearer user-jwt"
    assert kwargs["params"]["topic_id"] == "eq.t-1"
    assert kwargs["params"]["is_active"] == "eq.true"


def test_fetch_image_quiz_filters_by_category() -> None:
    session = FakeSession()
    store = _store(session)
    store.fetch_image_quiz("kpop")
    store.fetch_image_quiz()
    assert session.calls[0][2]["params"]["category"] == "eq.kpop"
    assert "category" not in session.calls[1][2]["params"]


def test_unknown_image_category_reads_nothing() -> None:
    session = FakeSession()
    assert _store(session).fetch_image_quiz("space") == []
    assert session.calls == []


def test_fetch_topics() -> None:
    session = FakeSession(FakeResponse(200, [{"id": "t1", "slug": "cafe-order"}]))
    store = _store(session)
    assert store.fetch_topic("cafe-order") == {"id": "t1", "slug": "cafe-order"}
    store.fetch_topics_for_group("cafe")
    assert session.calls[1][2]["params"]["slug"] == "like.cafe-*"


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(500, {"message": "boom"}),
        FakeResponse(200, ValueError("not json")),
        FakeResponse(200, {"unexpected": "object"}),
        requests.ConnectionError("offline"),
    ],
)
def test_fetch_failures_return_empty(response: Any) -> None:
    assert _store(FakeSession(response)).fetch_korean_quiz() == []


def test_disabled_store_skips_reads_and_rejects_writes() -> None:
    session = FakeSession()
    store = RemoteQuizStore("", "", session=session)
    assert not store.is_enabled()
    assert store.fetch_korean_quiz() == []
    assert session.calls == []
    with pytest.raises(RemoteStoreError):
        store.record_session_result("demo", SessionResult(last_mode=LearnMode.JAMO, correct=1, wrong=0))


def test_record_attempt_and_progress() -> None:
    session = FakeSession(FakeResponse(201))
    store = _store(session)
    store.record_attempt(user_id="demo", topic_id="t1", item_id="i1", is_correct=True, chosen_answer="0")
    store.upsert_progress(user_id="demo", topic_id="t1", correct_count=1, total_count=1, last_item_id="i1")

    (_, url1, kw1), (_, url2, kw2) = session.calls
    assert url1.endswith("/rest/v1/topic_attempts")
    assert kw1["json"]["is_correct"] is True
    assert kw1["json"]["created_at"]
    assert "Prefer" not in kw1["headers"]

    assert url2.endswith("/rest/v1/topic_progress")
    assert kw2["params"] == {"on_conflict": "user_id,topic_id"}
    assert kw2["headers"]["Prefer"].startswith("resolution=merge-duplicates")
    assert kw2["json"]["correct_count"] == 1


def test_record_session_result_body() -> None:
    session = FakeSession(FakeResponse(204))
    result = SessionResult(last_mode=LearnMode.IMAGE, correct=4, wrong=1, updated_at="2026-01-01T00:00:00+00:00")
    _store(session).record_session_result("demo", result)
    body = session.calls[0][2]["json"]
    assert body == {
        "user_id": "demo",
        "last_mode": "image",
        "correct": 4,
        "wrong": 1,
        "updated_at": "2026-01-01T00:00:00+00:00",
    }


@pytest.mark.parametrize("response", [FakeResponse(409, {"message": "conflict"}), requests.Timeout("slow")])
def test_write_failures_raise(response: Any) -> None:
    store = _store(FakeSession(response))
    with pytest.raises(RemoteStoreError):
        store.record_attempt(user_id="demo", topic_id="t", item_id="i", is_correct=False, chosen_answer="x")


def test_repository_parses_remote_rows() -> None:
    session = FakeSession(
        FakeResponse(
            200,
            [{"id": 1, "number": 1, "question": "q", "option1": "a", "option2": "b", "option3": "c",
              "option4": "d", "answer_index": 2}],
        )
    )
    repo = QuestionBankRepository(remote=_store(session))
    items = repo.korean_quiz()
    assert len(items) == 1
    assert items[0].correct_option == "b"
