"""
ターミナル版クイズの実行ロジック

【初心者向け】
- 問題取得 → シャッフル → 回答 → 正規インデックスに戻す → 提出 → 結果表示 の流れ
- 入力待ちとカウントダウンを asyncio で同時に走らせ、時間切れになったら
  その時点までの回答を自動提出する
- 入出力は ask / emit として外から渡す（テストで差し替えられるように）
"""
import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Optional

from app.client.api import QuizApiClient
from app.client.base import QuizApiError
from app.core.settings import settings
from app.quiz.results import summarize
from app.quiz.session import Countdown, QuizSession, SessionState
from app.quiz.shuffle import new_base_seed, shuffle_quiz
from app.schemas.grade import GradeResponse
from app.schemas.quiz import QuizQuestion

# ロガー設定
logger = logging.getLogger(__name__)

Ask = Callable[[str], Awaitable[str]]
Emit = Callable[[str], None]

_SPLIT = re.compile(r"[,\s]+")


def parse_input(question: QuizQuestion, raw: str) -> Any:
    """
    入力文字列を表示位置ベースの回答値に変換する

    - text: 入力そのまま
    - radio: 1始まりの番号1つ → 0始まりの表示位置
    - checkbox: カンマ/空白区切りの番号 → 0始まりの表示位置のリスト（重複は除く）

    Returns:
        回答値、または未回答（空入力）の場合None

    Raises:
        ValueError: 番号が数字でない・範囲外の場合
    """
    s = raw.strip()
    if not s:
        return None
    if question.type == "text":
        return raw

    n = len(question.choices or [])
    tokens = [t for t in _SPLIT.split(s) if t]
    if question.type == "radio" and len(tokens) != 1:
        raise ValueError("番号を1つだけ入力してください")

    positions: list[int] = []
    for token in tokens:
        if not token.isdigit():
            raise ValueError(f"数字で入力してください: {token}")
        number = int(token)
        if not 1 <= number <= n:
            raise ValueError(f"1〜{n}の番号を入力してください: {number}")
        if number - 1 not in positions:
            positions.append(number - 1)

    return positions[0] if question.type == "radio" else positions


def format_question(number: int, question: QuizQuestion) -> str:
    lines = [f"{number}. {question.question}"]
    for i, choice in enumerate(question.choices or [], start=1):
        lines.append(f"   {i}) {choice}")
    if question.type == "checkbox":
        lines.append("   （複数選択: 例 1,3）")
    return "\n".join(lines)


def format_results(session: QuizSession, result: GradeResponse) -> str:
    summary = summarize(result)
    prompts = {q.id: q.question for q in session.quiz.questions}
    lines = [
        f"結果: {summary.score} / {summary.total}（{summary.percentage}%）評価 {summary.letter}",
    ]
    for r in result.results:
        mark = "○" if r.correct else "×"
        lines.append(f"  {mark} {prompts.get(r.id, r.id)}")
    return "\n".join(lines)


async def _ask_or_expire(ask: Ask, prompt: str, expired: asyncio.Event) -> Optional[str]:
    """入力と時間切れを競わせる（時間切れならNone）"""
    ask_task = asyncio.ensure_future(ask(prompt))
    expire_task = asyncio.ensure_future(expired.wait())
    done, _ = await asyncio.wait({ask_task, expire_task}, return_when=asyncio.FIRST_COMPLETED)
    if ask_task in done:
        expire_task.cancel()
        return ask_task.result()
    ask_task.cancel()
    return None


async def submit_session(session: QuizSession, client: QuizApiClient) -> Optional[GradeResponse]:
    """
    セッションの回答を提出する

    失敗した場合はセッションを error にして None を返す（回答は保持される）
    """
    answers = session.begin_submit()
    try:
        result = await client.grade(answers)
    except QuizApiError as e:
        session.fail(str(e))
        return None
    session.complete(result)
    return result


async def run_quiz(
    client: QuizApiClient,
    ask: Ask,
    emit: Emit = print,
    seed: Optional[int] = None,
    duration_sec: Optional[int] = None,
    tick_interval: float = 1.0,
) -> QuizSession:
    """
    1回分のクイズを実行する

    Args:
        client: クイズAPIクライアント
        ask: プロンプトを表示して1行読む非同期関数
        emit: 出力関数
        seed: ベースシード（省略時は設定値、それもなければ時刻から生成）
        duration_sec: 制限時間（省略時は設定値）
        tick_interval: カウントダウンの間隔（秒）

    Returns:
        終了時のセッション（submitted または error）

    Raises:
        QuizApiError: 問題セットの取得に失敗した場合
    """
    questions = await client.fetch_quiz()

    if seed is None:
        seed = settings.quiz_seed if settings.quiz_seed is not None else new_base_seed()
    quiz = shuffle_quiz(questions, seed)
    session = QuizSession(quiz, duration_sec or settings.quiz_duration_sec)

    expired = asyncio.Event()
    countdown = Countdown(session, on_expire=expired.set, interval=tick_interval)

    session.start()
    countdown.start()
    emit(f"クイズ開始: {len(quiz.questions)}問 / 制限時間 {session.duration_sec}秒（空Enterでスキップ）")

    try:
        for number, q in enumerate(quiz.questions, start=1):
            emit(format_question(number, q))
            while session.state is SessionState.IN_PROGRESS:
                raw = await _ask_or_expire(ask, f"[残り{session.remaining_sec}秒] > ", expired)
                if raw is None or session.state is not SessionState.IN_PROGRESS:
                    break
                try:
                    value = parse_input(q, raw)
                except ValueError as e:
                    emit(f"  {e}")
                    continue
                if value is not None:
                    session.record_answer(q.id, value)
                break
            if session.state is not SessionState.IN_PROGRESS:
                break
    finally:
        await countdown.stop()

    if session.state is SessionState.TIME_EXPIRED:
        emit("時間切れです。ここまでの回答を自動提出します。")

    result = await submit_session(session, client)
    while result is None:
        emit(f"提出に失敗しました: {session.error}")
        answer = await ask("再送信しますか？ (y/N): ")
        if answer.strip().lower() not in ("y", "yes"):
            return session
        logger.info("提出を再試行します")
        result = await submit_session(session, client)

    emit(format_results(session, result))
    return session
