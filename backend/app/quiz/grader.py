"""
採点ロジック

【初心者向け】
- grade_quiz: 正規の問題セットと回答リストから GradeResponse を作る純粋関数
- クライアントから送られた「正誤」は一切信用せず、サーバー側の正解キーで毎回判定する
- 問題IDが見つからない回答はエラーにせず「不正解」として扱う（寛容なマッチング）
- total は回答数ではなく問題セットの問題数
"""
import logging
import math
from typing import Any, Iterable, Mapping, Optional, Sequence

from app.quiz.questions import Question
from app.schemas.grade import AnswerInput, GradeResponse, GradeResult

# ロガー設定
logger = logging.getLogger(__name__)


def _to_text(value: Any) -> str:
    """回答値を文字列化する（JSONクライアントと同じ見た目にそろえる: 200.0 -> "200"）"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(_to_text(v) for v in value)
    return str(value)


def _to_number(value: Any) -> Optional[float]:
    """
    回答値を数値に変換する

    Returns:
        数値、または変換できない場合None（空文字・配列・NaN など）
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            number = float(s)
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def _grade_text(q: Question, value: Any) -> bool:
    return _to_text(value).strip().lower() == q.correct_text.strip().lower()


def _grade_radio(q: Question, value: Any) -> bool:
    number = _to_number(value)
    return number is not None and number == q.correct_index


def _grade_checkbox(q: Question, value: Any) -> bool:
    if not isinstance(value, list):
        return False
    if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in value):
        return False
    # 数値順でソートして要素ごとに比較（文字列順だと 10 が 2 より前に来てしまう）
    return sorted(value) == sorted(q.correct_indexes)


_GRADERS = {
    "text": _grade_text,
    "radio": _grade_radio,
    "checkbox": _grade_checkbox,
}


def grade_answer(q: Question, value: Any) -> bool:
    """1問分の回答を採点する"""
    return _GRADERS[q.type](q, value)


def index_questions(questions: Iterable[Question]) -> dict[str, Question]:
    """問題IDから問題を引ける辞書を作る"""
    return {q.id: q for q in questions}


def grade_quiz(
    questions: Sequence[Question],
    answers: Sequence[AnswerInput],
    index: Optional[Mapping[Any, Question]] = None,
) -> GradeResponse:
    """
    回答を採点する

    Args:
        questions: 正規の問題セット
        answers: 正規インデックスに戻された回答のリスト
        index: 問題ID → 問題 の辞書（省略時は questions から作る）

    Returns:
        GradeResponse（results は回答の送信順）
    """
    by_id = index if index is not None else index_questions(questions)

    results: list[GradeResult] = []
    score = 0
    unmatched = 0

    for answer in answers:
        # IDは型も含めて完全一致（数値の1と"q1"は一致しない）
        q = by_id.get(answer.id) if isinstance(answer.id, str) else None
        if q is None:
            unmatched += 1
            logger.warning(f"問題IDが見つからないため不正解として扱います: id={answer.id!r}")
            results.append(GradeResult(id=answer.id, correct=False))
            continue

        correct = grade_answer(q, answer.value)
        if correct:
            score += 1
        results.append(GradeResult(id=answer.id, correct=correct))

    logger.info(
        f"採点完了: score={score}/{len(questions)}, "
        f"submitted={len(answers)}, unmatched={unmatched}"
    )
    return GradeResponse(score=score, total=len(questions), results=results)
