"""
クイズAPIクライアントとターミナル版ランナーのテスト

APIサーバーは httpx.ASGITransport で app を直接つなぐか、
httpx.MockTransport で失敗パターンを再現する
"""
import asyncio
import io
import sys
from pathlib import Path

# app モジュールをインポート可能にする
sys.path.insert(0, str(Path(__file__).parent))

import httpx
import pytest

from app.client.api import QuizApiClient
from app.client.base import QuizApiConnectionError, QuizApiHTTPError, QuizApiTimeoutError
from app.client.console import ConsoleReader
from app.client.runner import parse_input, run_quiz
from app.main import app
from app.quiz.questions import QUESTIONS, to_public_question
from app.quiz.session import SessionState
from app.quiz.shuffle import shuffle_quiz
from app.schemas.grade import AnswerInput

CANONICAL = {q.id: q for q in QUESTIONS}
PUBLIC_JSON = [to_public_question(q).model_dump(exclude_none=True) for q in QUESTIONS]


def _asgi_client() -> QuizApiClient:
    return QuizApiClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))


def _mock_client(grade_responses) -> QuizApiClient:
    """GET /api/quiz は正常、POST /api/grade は grade_responses を順番に返す"""
    queue = list(grade_responses)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == "/api/quiz":
            return httpx.Response(200, json=PUBLIC_JSON)
        if request.method == "POST" and request.url.path == "/api/grade":
            return queue.pop(0)
        return httpx.Response(404, json={"error": "not found"})

    return QuizApiClient(base_url="http://testserver", transport=httpx.MockTransport(handler))


def _scripted(lines):
    pending = list(lines)
    prompts = []

    async def ask(prompt: str) -> str:
        prompts.append(prompt)
        return pending.pop(0)

    return ask, prompts


def _correct_inputs(seed):
    """同じシードでシャッフルして、表示位置ベースの正解入力を作る"""
    quiz = shuffle_quiz([to_public_question(q) for q in QUESTIONS], seed)
    lines = []
    for q in quiz.questions:
        canonical = CANONICAL[q.id]
        mapping = quiz.mappings.get(q.id)
        if q.type == "radio":
            lines.append(str(mapping.index(canonical.correct_index) + 1))
        elif q.type == "checkbox":
            lines.append(",".join(str(mapping.index(i) + 1) for i in canonical.correct_indexes))
        else:
            lines.append(f"  {canonical.correct_text.upper()} ")
    return lines


def test_fetch_and_grade_against_app():
    async def scenario():
        client = _asgi_client()
        questions = await client.fetch_quiz()
        result = await client.grade([
            AnswerInput(id="q3", value="200"),
            AnswerInput(id="q2", value=[1, 3, 0]),
        ])
        return questions, result

    questions, result = asyncio.run(scenario())
    assert [q.id for q in questions] == [q.id for q in QUESTIONS]
    assert result.score == 2
    assert result.total == 10


def test_http_error_carries_server_message():
    client = _mock_client([httpx.Response(500, json={"error": "Failed to grade quiz"})])
    with pytest.raises(QuizApiHTTPError) as exc_info:
        asyncio.run(client.grade([]))
    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Failed to grade quiz"


def test_timeout_and_connection_errors():
    def timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    def refused(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(QuizApiTimeoutError):
        asyncio.run(QuizApiClient("http://testserver", transport=httpx.MockTransport(timeout)).fetch_quiz())
    with pytest.raises(QuizApiConnectionError):
        asyncio.run(QuizApiClient("http://testserver", transport=httpx.MockTransport(refused)).fetch_quiz())


def test_parse_input():
    by_type = {q.type: to_public_question(q) for q in QUESTIONS}
    assert parse_input(by_type["text"], "  Hello ") == "  Hello "
    assert parse_input(by_type["radio"], "2") == 1
    assert parse_input(by_type["checkbox"], "1, 3 3") == [0, 2]
    assert parse_input(by_type["checkbox"], "   ") is None
    with pytest.raises(ValueError):
        parse_input(by_type["radio"], "1,2")
    with pytest.raises(ValueError):
        parse_input(by_type["radio"], "9")
    with pytest.raises(ValueError):
        parse_input(by_type["checkbox"], "a")


def test_run_quiz_all_correct():
    seed = 2024
    ask, _ = _scripted(_correct_inputs(seed))
    output = []

    session = asyncio.run(
        run_quiz(_asgi_client(), ask=ask, emit=output.append, seed=seed, duration_sec=300, tick_interval=60)
    )
    assert session.state is SessionState.SUBMITTED
    assert session.result.score == 10
    assert session.result.total == 10
    assert "評価 A" in output[-1]


def test_run_quiz_reprompts_on_bad_input():
    seed = 5
    lines = _correct_inputs(seed)
    quiz = shuffle_quiz([to_public_question(q) for q in QUESTIONS], seed)
    # 最初の選択式の問題の前に範囲外の番号を入れる
    first_choice = next(i for i, q in enumerate(quiz.questions) if q.choices)
    lines.insert(first_choice, "99")
    ask, prompts = _scripted(lines)
    output = []

    session = asyncio.run(
        run_quiz(_asgi_client(), ask=ask, emit=output.append, seed=seed, duration_sec=300, tick_interval=60)
    )
    assert session.state is SessionState.SUBMITTED
    assert session.result.score == 10
    assert len(prompts) == 11
    assert any("番号を入力してください: 99" in line for line in output)


def test_run_quiz_auto_submits_on_expiry():
    async def never(prompt: str) -> str:
        await asyncio.Event().wait()
        return ""

    output = []
    session = asyncio.run(
        run_quiz(_asgi_client(), ask=never, emit=output.append, seed=1, duration_sec=2, tick_interval=0)
    )
    assert session.state is SessionState.SUBMITTED
    assert session.result.score == 0
    assert session.result.total == 10
    assert session.result.results == []
    assert any("時間切れ" in line for line in output)


def test_run_quiz_submit_error_then_manual_retry():
    client = _mock_client([
        httpx.Response(500, json={"error": "Failed to grade quiz"}),
        httpx.Response(200, json={"score": 0, "total": 10, "results": []}),
    ])
    ask, _ = _scripted([""] * 10 + ["y"])
    output = []

    session = asyncio.run(
        run_quiz(client, ask=ask, emit=output.append, seed=3, duration_sec=300, tick_interval=60)
    )
    assert session.state is SessionState.SUBMITTED
    assert any("Failed to grade quiz" in line for line in output)


def test_run_quiz_submit_error_without_retry():
    client = _mock_client([httpx.Response(500, json={"error": "Failed to grade quiz"})])
    ask, _ = _scripted([""] * 10 + ["n"])

    session = asyncio.run(
        run_quiz(client, ask=ask, emit=lambda _: None, seed=3, duration_sec=300, tick_interval=60)
    )
    assert session.state is SessionState.ERROR
    assert "Failed to grade quiz" in session.error
    assert session.answers == {}


def test_console_reader_reads_stream_lines():
    prompts = []
    reader = ConsoleReader(stream=io.StringIO("1\r\n2,3\n"), write=prompts.append)

    async def scenario():
        reader.start()
        return [await reader.ask(f"Q{i}> ") for i in range(4)]

    assert asyncio.run(scenario()) == ["1", "2,3", "", ""]
    assert prompts == ["Q0> ", "Q1> ", "Q2> ", "Q3> "]


def test_console_reader_keeps_line_after_cancelled_ask():
    """打ち切られた ask の後に入力された行は、次の ask が受け取る"""
    reader = ConsoleReader(write=lambda _: None)

    async def scenario():
        pending = asyncio.create_task(reader.ask("> "))
        await asyncio.sleep(0)
        pending.cancel()
        reader.feed("y")
        return await reader.ask("再送信しますか？ (y/N): ")

    assert asyncio.run(scenario()) == "y"


@pytest.mark.parametrize("typed_after", ["時間切れ", "提出に失敗しました"])
def test_run_quiz_expiry_then_failed_submit_then_retry(typed_after):
    client = _mock_client([
        httpx.Response(500, json={"error": "Failed to grade quiz"}),
        httpx.Response(200, json={"score": 0, "total": 10, "results": []}),
    ])
    prompts = []
    reader = ConsoleReader(write=prompts.append)
    output = []

    def emit(line: str) -> None:
        output.append(line)
        # 問題の入力待ちが時間切れで打ち切られた後に、ユーザーが "y" を打つ
        if line.startswith(typed_after):
            reader.feed("y")

    session = asyncio.run(
        run_quiz(client, ask=reader.ask, emit=emit, seed=1, duration_sec=2, tick_interval=0)
    )
    assert session.state is SessionState.SUBMITTED
    assert session.result.total == 10
    assert prompts[-1] == "再送信しますか？ (y/N): "
    assert any(line.startswith("時間切れ") for line in output)
    assert any("Failed to grade quiz" in line for line in output)
