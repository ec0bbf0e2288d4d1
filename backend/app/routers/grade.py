"""
Grade APIルーター（回答の採点）

【初心者向け】
- ボディは Content-Type に関係なく JSON として読む（text/plain で送られても採点する）
- 空のボディ、壊れたJSON、NaN / Infinity のような JSON にない値は "Invalid JSON"
- JSONとしては正しいが形が違うものは "Invalid request format" + details
"""
import json
import logging
from types import MappingProxyType
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from app.core.errors import raise_internal_error, raise_invalid_input, raise_invalid_json
from app.quiz.grader import grade_quiz, index_questions
from app.quiz.questions import QUESTIONS
from app.schemas.grade import GradeRequest, GradeResponse

# ロガー設定
logger = logging.getLogger(__name__)

router = APIRouter()

# 起動時に一度だけ作る読み取り専用の索引（リクエスト間で共有、ロック不要）
_QUESTION_INDEX = MappingProxyType(index_questions(QUESTIONS))


def _reject_constant(name: str) -> Any:
    # json.loads は NaN / Infinity / -Infinity を受け付けてしまう
    raise ValueError(f"JSONでは使えない値です: {name}")


def parse_grade_request(body: bytes) -> GradeRequest:
    """
    リクエストボディを GradeRequest に変換する

    Raises:
        AppError: INVALID_JSON（JSONとして読めない）または INVALID_INPUT（形式不正）
    """
    try:
        data = json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        # JSONDecodeError と UnicodeDecodeError はどちらも ValueError
        logger.info(f"JSON不正のリクエスト: {type(e).__name__}")
        raise_invalid_json()

    try:
        return GradeRequest.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        logger.info(f"形式不正のリクエスト: errors={len(errors)}件")
        raise_invalid_input(jsonable_encoder(errors))


@router.post("", response_model=GradeResponse)
async def grade_answers(request: Request) -> GradeResponse:
    """
    回答を採点する

    - answers: 必須。[{ "id": 問題ID, "value": 回答 }, ...]
    - 存在しない問題IDの回答は不正解として扱う（エラーにはしない）
    - total は常に問題セットの問題数

    エラーレスポンス形式:
    - 形式不正: HTTP 400 + { "error": "Invalid request format", "details": [...] }
    - JSON不正: HTTP 400 + { "error": "Invalid JSON" }
    - 予期しないエラー: HTTP 500 + { "error": "Failed to grade quiz" }
    """
    grade_request = parse_grade_request(await request.body())

    try:
        return grade_quiz(QUESTIONS, grade_request.answers, index=_QUESTION_INDEX)
    except Exception as e:
        logger.error(f"採点に失敗しました: {type(e).__name__}: {e}")
        raise_internal_error("Failed to grade quiz")
