import random

import pytest

from korean_work.controllers.choice_quiz_session import (
    ChoiceQuestion,
    ChoiceQuizSession,
    image_quiz_questions,
    korean_quiz_questions,
    speech_quiz_questions,
)
from korean_work.controllers.question_bank_repository import (
    QuestionBankRepository,
    image_quiz_from_rows,
    korean_quiz_from_rows,
)
from korean_work.domain.enums import LearnMode
from korean_work.domain.models import SpeechEntry
from korean_work.services.session_store import SessionStore


def _korean_rows(n: int) -> list[dict]:
    return [
        {
            "id": i,
            "number": i,
            "question": "질문 {}".format(i),
            "option1": "가",
            "option2": "나",
            "option3": "다",
            "option4": "라",
            "answer_index": (i % 4) + 1,
            "rationale": "because",
        }
        for i in range(1, n + 1)
    ]


def test_korean_questions_score_against_answer_index(rng: random.Random) -> None:
    items = korean_quiz_from_rows(_korean_rows(25))
    questions = korean_quiz_questions(items, rng=rng)

    assert len(questions) == 10
    assert len({q.prompt for q in questions}) == 10
    for q in questions:
        assert q.choices == ("가", "나", "다", "라")
        number = int(q.prompt.split()[-1])
        assert q.answer_index == number % 4
        assert q.explanation == "because"


def test_table_questions_with_missing_key_are_never_correct() -> None:
    rows = _korean_rows(1)
    rows[0]["answer_index"] = None
    q = korean_quiz_questions(korean_quiz_from_rows(rows))[0]
    assert q.answer_index is None
    assert q.answer is None

    session = ChoiceQuizSession([q], mode=LearnMode.KOREAN)
    assert session.answer(0) is False


def test_image_questions_carry_image(rng: random.Random) -> None:
    rows = [
        {
            "id": 7,
            "category": "food",
            "image_url": "https://cdn.example/bibimbap.png",
            "question": "이 음식은?",
            "option1": "비빔밥",
            "option2": "김밥",
            "option3": "라면",
            "option4": "떡볶이",
            "answer_index": 1,
            "rationale": "밥 위에 나물",
        }
    ]
    q = image_quiz_questions(image_quiz_from_rows(rows), rng=rng)[0]
    assert q.media == "https://cdn.example/bibimbap.png"
    assert q.answer == "비빔밥"


def test_speech_questions(bank: QuestionBankRepository, rng: random.Random) -> None:
    entries = bank.speech_entries()
    questions = speech_quiz_questions(entries, rng=rng)

    assert len(questions) == 15
    assert len({q.prompt for q in questions}) == 15
    for q in questions:
        assert len(q.choices) == 4
        assert len(set(q.choices)) == 4
        assert q.answer == q.prompt
        assert q.media.endswith(".mp3")


def test_speech_questions_need_enough_entries() -> None:
    entries = [SpeechEntry(id="00{}".format(i), word=w) for i, w in enumerate(["가", "나", "다"])]
    with pytest.raises(ValueError):
        speech_quiz_questions(entries)


def test_session_counts_each_question_once(session_store: SessionStore) -> None:
    questions = [
        ChoiceQuestion(prompt="a", choices=("x", "y"), answer_index=0),
        ChoiceQuestion(prompt="b", choices=("x", "y"), answer_index=1),
    ]
    session = ChoiceQuizSession(questions, mode=LearnMode.SPEECH, store=session_store)

    assert session.answer(0) is True
    assert session.answer(1) is True
    assert (session.correct, session.wrong) == (1, 0)
    session.advance()

    assert session.answer(0) is False
    assert session.answer(1) is False
    session.advance()

    assert session.finished
    assert session.current() is None
    with pytest.raises(RuntimeError):
        session.answer(0)

    result = session.finish()
    assert (result.last_mode, result.correct, result.wrong) == (LearnMode.SPEECH, 1, 1)
    assert session_store.load_result() == result
