import random

import pytest

from pocketguard.api.deps import get_rng
from pocketguard.core.seed import DEFAULT_QUIZ_QUESTIONS
from pocketguard.main import app
from tests.conftest import add_expense

ANSWER_KEY = {q["question"]: q["correct_answer"] for q in DEFAULT_QUIZ_QUESTIONS}


def _answers(questions, right):
    """First `right` answers correct, the rest deliberately wrong."""
    out = []
    for i, q in enumerate(questions):
        key = ANSWER_KEY[q["question"]]
        out.append(key if i < right else (key + 1) % len(q["options"]))
    return out


@pytest.fixture
def blocked_user(client, categories, food_budget):
    add_expense(client, categories["Food"], 950)
    res = add_expense(client, categories["Food"], 100, is_upi=True)
    assert res.status_code == 400
    assert client.get("/api/user").json()["upiCurrentlyBlocked"] is True
    return categories


def test_start_strips_answers(client, user):
    res = client.post("/api/quiz/start", json={"difficulty": "medium", "count": 3})
    assert res.status_code == 200
    body = res.json()
    assert body["totalQuestions"] == 3
    for q in body["questions"]:
        assert q["difficulty"] == "medium"
        assert "correctAnswer" not in q
        assert "explanation" not in q
        assert len(q["options"]) == 4


def test_start_uses_injected_rng(client, user):
    app.dependency_overrides[get_rng] = lambda: random.Random(42)
    first = client.post("/api/quiz/start", json={"count": 5}).json()
    second = client.post("/api/quiz/start", json={"count": 5}).json()
    assert [q["id"] for q in first["questions"]] == [q["id"] for q in second["questions"]]


def test_start_caps_at_available_questions(client, user):
    res = client.post("/api/quiz/start", json={"difficulty": "hard", "count": 50})
    hard = [q for q in DEFAULT_QUIZ_QUESTIONS if q["difficulty"] == "hard"]
    assert res.json()["totalQuestions"] == len(hard)


def test_start_rejects_unknown_difficulty(client, user):
    res = client.post("/api/quiz/start", json={"difficulty": "impossible"})
    assert res.status_code == 400


def test_pass_with_three_of_five_unblocks(client, blocked_user):
    questions = client.post("/api/quiz/start", json={"count": 5}).json()["questions"]

    res = client.post("/api/quiz/complete", json={"answers": _answers(questions, 3)})
    assert res.status_code == 200
    result = res.json()
    assert result["correctAnswers"] == 3
    assert result["totalQuestions"] == 5
    assert result["score"] == 60
    assert result["passed"] is True
    assert result["upiUnblocked"] is True
    assert len(result["review"]) == 5
    assert [r["correct"] for r in result["review"]] == [True, True, True, False, False]

    assert client.get("/api/user").json()["upiCurrentlyBlocked"] is False
    assert add_expense(client, blocked_user["Shopping"], 10, is_upi=True).status_code == 201


def test_fail_with_two_of_five_stays_blocked(client, blocked_user):
    questions = client.post("/api/quiz/start", json={"count": 5}).json()["questions"]

    result = client.post("/api/quiz/complete", json={"answers": _answers(questions, 2)}).json()
    assert result["score"] == 40
    assert result["passed"] is False
    assert result["upiUnblocked"] is False
    assert client.get("/api/user").json()["upiCurrentlyBlocked"] is True

    # attempt is finished; a new one can be started
    again = client.post("/api/quiz/complete", json={"answers": []})
    assert again.status_code == 404
    assert client.post("/api/quiz/start", json={"count": 5}).status_code == 200


def test_pass_unblocks_even_when_not_blocked(client, user):
    questions = client.post("/api/quiz/start", json={"count": 5}).json()["questions"]
    result = client.post("/api/quiz/complete", json={"answers": _answers(questions, 5)}).json()
    assert result["passed"] is True
    assert result["upiUnblocked"] is True


def test_restart_discards_previous_attempt(client, user):
    app.dependency_overrides[get_rng] = lambda: random.Random(1)
    old = client.post("/api/quiz/start", json={"difficulty": "easy", "count": 4}).json()["questions"]
    new = client.post("/api/quiz/start", json={"difficulty": "hard", "count": 4}).json()["questions"]

    # answers keyed to the old set are graded against the new set
    result = client.post("/api/quiz/complete", json={"answers": _answers(new, 4)}).json()
    assert result["correctAnswers"] == 4
    assert {r["questionId"] for r in result["review"]} == {q["id"] for q in new}
    assert not {q["id"] for q in old} & {r["questionId"] for r in result["review"]}


def test_missing_answers_count_as_wrong(client, user):
    questions = client.post("/api/quiz/start", json={"count": 5}).json()["questions"]
    result = client.post("/api/quiz/complete", json={"answers": _answers(questions, 5)[:2]}).json()
    assert result["correctAnswers"] == 2
    assert result["review"][4]["selected"] is None


def test_complete_without_attempt(client, user):
    res = client.post("/api/quiz/complete", json={"answers": [1, 2]})
    assert res.status_code == 404
    assert res.json()["message"] == "No active quiz attempt found"
