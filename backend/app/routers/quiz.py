"""
Quiz APIルーター（問題セットの取得）
"""
import logging
from fastapi import APIRouter

from app.core.errors import raise_internal_error
from app.quiz.questions import QUESTIONS, to_public_question
from app.schemas.quiz import QuizQuestion

# ロガー設定
logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[QuizQuestion],
    response_model_exclude_none=True,
)
async def get_quiz() -> list[QuizQuestion]:
    """
    問題セットを返す

    - correctIndex / correctIndexes / correctText はレスポンスに含めない
    - 失敗時は HTTP 500 + { "error": "Failed to fetch quiz questions" }
    """
    try:
        return [to_public_question(q) for q in QUESTIONS]
    except Exception as e:
        logger.error(f"問題セットの取得に失敗しました: {type(e).__name__}: {e}")
        raise_internal_error("Failed to fetch quiz questions")
