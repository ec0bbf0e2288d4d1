"""
クイズ受験セッション（状態遷移とカウントダウン）

【初心者向け】
- SessionState: 受験の状態を1つの値で表す（フラグを散らばらせない）
    not_started → in_progress → time_expired → submitting → submitted
    in_progress → submitting（ユーザーが提出）
    submitting → error → submitting（手動リトライ）
- tick(): in_progress のときだけ残り秒数を1減らす。0になったら time_expired に遷移し、
  そのときだけ True を返す（2回目以降は False なので自動提出が二重に走らない）
- 回答は「表示位置」で記録し、提出時に ChoiceMapping で正規インデックスに戻す
- Countdown: asyncio で1秒ごとに tick() を呼ぶ。in_progress を抜けたら止まる
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

from app.quiz.shuffle import ShuffledQuiz, remap_answer
from app.schemas.grade import AnswerInput, GradeResponse

# ロガー設定
logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    TIME_EXPIRED = "time_expired"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ERROR = "error"


class SessionStateError(Exception):
    """現在の状態では許可されない操作"""
    pass


# 提出を開始できる状態
_SUBMITTABLE = (SessionState.IN_PROGRESS, SessionState.TIME_EXPIRED, SessionState.ERROR)


class QuizSession:
    """
    1回分の受験セッション

    UIやネットワークのコールバックから順番に呼ばれる前提（並列実行はしない）
    """

    def __init__(self, quiz: ShuffledQuiz, duration_sec: int):
        if duration_sec <= 0:
            raise ValueError("duration_sec は1以上を指定してください")
        self.quiz = quiz
        self.duration_sec = duration_sec
        self.remaining_sec = duration_sec
        self.state = SessionState.NOT_STARTED
        self.answers: dict[str, Any] = {}
        self.result: Optional[GradeResponse] = None
        self.error: Optional[str] = None
        self._questions = {q.id: q for q in quiz.questions}

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise SessionStateError(f"state={self.state.value} では実行できません（許可: {allowed}）")

    def start(self) -> None:
        self._require(SessionState.NOT_STARTED)
        self.state = SessionState.IN_PROGRESS
        logger.info(f"受験開始: seed={self.quiz.seed}, duration={self.duration_sec}s")

    def record_answer(self, question_id: str, value: Any) -> None:
        """表示位置のまま回答を記録する"""
        self._require(SessionState.IN_PROGRESS)
        if question_id not in self._questions:
            raise KeyError(question_id)
        self.answers[question_id] = value

    def tick(self) -> bool:
        """
        1秒経過を反映する

        Returns:
            このtickで時間切れになった場合のみTrue（自動提出のトリガー）
        """
        if self.state is not SessionState.IN_PROGRESS:
            return False
        self.remaining_sec = max(0, self.remaining_sec - 1)
        if self.remaining_sec > 0:
            return False
        self.state = SessionState.TIME_EXPIRED
        logger.info(f"時間切れ: answered={len(self.answers)}/{len(self._questions)}")
        return True

    def build_answers(self) -> list[AnswerInput]:
        """記録済みの回答を正規インデックスに戻して、送信用のリストにする"""
        out: list[AnswerInput] = []
        for question_id, value in self.answers.items():
            q = self._questions[question_id]
            canonical = remap_answer(q, self.quiz.mapping_for(question_id), value)
            out.append(AnswerInput(id=question_id, value=canonical))
        return out

    def begin_submit(self) -> list[AnswerInput]:
        """
        提出を開始する（in_progress / time_expired / error から）

        Raises:
            SessionStateError: 提出中・提出済みなど、提出できない状態の場合
        """
        self._require(*_SUBMITTABLE)
        answers = self.build_answers()
        self.state = SessionState.SUBMITTING
        self.error = None
        return answers

    def complete(self, result: GradeResponse) -> None:
        self._require(SessionState.SUBMITTING)
        self.result = result
        self.state = SessionState.SUBMITTED
        logger.info(f"提出完了: score={result.score}/{result.total}")

    def fail(self, message: str) -> None:
        """提出失敗（回答は保持したまま error に遷移）"""
        self._require(SessionState.SUBMITTING)
        self.error = message
        self.state = SessionState.ERROR
        logger.warning(f"提出失敗: {message}")

    def reset(self) -> None:
        """再受験（回答・結果・タイマーを初期化）"""
        self.answers.clear()
        self.result = None
        self.error = None
        self.remaining_sec = self.duration_sec
        self.state = SessionState.NOT_STARTED


class Countdown:
    """
    セッションを interval 秒ごとに tick するタイマー

    on_expire はこのタイマーが時間切れを検知したときに1回だけ呼ばれる
    """

    def __init__(
        self,
        session: QuizSession,
        on_expire: Optional[Callable[[], Any]] = None,
        interval: float = 1.0,
    ):
        self.session = session
        self.on_expire = on_expire
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    async def run(self) -> None:
        while self.session.state is SessionState.IN_PROGRESS:
            await asyncio.sleep(self.interval)
            if self.session.tick() and self.on_expire is not None:
                self.on_expire()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """タイマーを止める（提出後に余計な tick が走らないように）"""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
