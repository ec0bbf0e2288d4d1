"""
/api/quiz, /api/grade エンドポイントのテスト
"""
import sys
from pathlib import Path

# app モジュールをインポート可能にする
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from app.main import app
from app.routers import grade as grade_router
from app.schemas.grade import AnswerInput

client = TestClient(app)

ANSWER_KEYS = {"correctIndex", "correctIndexes", "correctText", "correct_index", "correct_indexes", "correct_text"}


def test_root_and_health():
    assert client.get("/").json() == {"message": "Quiz API is running"}
    assert client.get("/health").json() == {"status": "ok", "questions": 10}


def test_quiz_has_no_answer_keys():
    response = client.get("/api/quiz")
    assert response.status_code == 200
    questions = response.json()
    assert len(questions) == 10
    for q in questions:
        assert not ANSWER_KEYS & set(q)
        assert set(q) <= {"id", "type", "question", "choices"}
        if q["type"] == "text":
            assert "choices" not in q
        else:
            assert q["choices"]


def test_grade_scenarios():
    response = client.post(
        "/api/grade",
        json={"answers": [
            {"id": "q3", "value": " 200 "},
            {"id": "q2", "value": [3, 1, 0]},
            {"id": "q4", "value": "1"},
            {"id": "missing", "value": "x"},
        ]},
    )
    assert response.status_code == 200
    assert response.json() == {
        "score": 3,
        "total": 10,
        "results": [
            {"id": "q3", "correct": True},
            {"id": "q2", "correct": True},
            {"id": "q4", "correct": True},
            {"id": "missing", "correct": False},
        ],
    }


def test_grade_numeric_id_is_echoed():
    response = client.post("/api/grade", json={"answers": [{"id": 7, "value": 0}]})
    assert response.status_code == 200
    assert response.json()["results"] == [{"id": 7, "correct": False}]


def test_grade_empty_answers():
    response = client.post("/api/grade", json={"answers": []})
    assert response.status_code == 200
    assert response.json() == {"score": 0, "total": 10, "results": []}


@pytest.mark.parametrize(
    "body",
    [
        b"{not json",
        b"",
        b"   ",
        b'{"answers":[{"id":NaN,"value":0}]}',
        b'{"answers":[{"id":"q1","value":Infinity}]}',
        b'{"answers":[{"id":"q2","value":[0,-Infinity]}]}',
    ],
)
def test_invalid_json(body):
    response = client.post(
        "/api/grade",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON"}


def test_answer_schema_rejects_non_finite_numbers():
    for bad in (float("nan"), float("inf"), float("-inf")):
        with pytest.raises(ValidationError):
            AnswerInput(id=bad, value=0)
        with pytest.raises(ValidationError):
            AnswerInput(id="q1", value=bad)
        with pytest.raises(ValidationError):
            AnswerInput(id="q2", value=[0, bad])
    assert AnswerInput(id=1.5, value=[0, 2.0]).value == [0, 2.0]


def test_grade_ignores_content_type():
    """Content-Type が JSON でなくても、ボディが正しい JSON なら採点する"""
    for content_type in ("text/plain", "application/x-www-form-urlencoded"):
        response = client.post(
            "/api/grade",
            content=b'{"answers":[{"id":"q3","value":"200"}]}',
            headers={"Content-Type": content_type},
        )
        assert response.status_code == 200
        assert response.json() == {"score": 1, "total": 10, "results": [{"id": "q3", "correct": True}]}


def test_grade_without_content_type():
    response = client.post("/api/grade", content=b'{"answers":[]}')
    assert response.status_code == 200
    assert response.json()["total"] == 10


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"answers": "q1"},
        {"answers": [{"id": "q1"}]},
        {"answers": [{"id": True, "value": 0}]},
        {"answers": [{"id": None, "value": 0}]},
        {"answers": [{"id": "q1", "value": True}]},
        {"answers": [{"id": "q1", "value": None}]},
        {"answers": [{"id": "q2", "value": ["0", "1"]}]},
        {"answers": [{"id": "q2", "value": {"a": 1}}]},
        [],
        "answers",
    ],
)
def test_invalid_shape(body):
    response = client.post("/api/grade", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Invalid request format"
    assert isinstance(data["details"], list) and data["details"]


def test_unexpected_failure_is_generic_500(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("secret internal detail")

    monkeypatch.setattr(grade_router, "grade_quiz", boom)
    response = client.post("/api/grade", json={"answers": [{"id": "q1", "value": 0}]})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to grade quiz"}


def test_cors_allows_configured_origin():
    response = client.options(
        "/api/grade",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
