"""
Quiz API用スキーマ（出題する問題の型）

【初心者向け】
- QuestionType: text（記述）/ radio（単一選択）/ checkbox（複数選択）
- QuizQuestion: クライアントに返す1問分。正解（correctIndex等）は含めない
"""
from typing import Literal, Optional
from pydantic import BaseModel, Field

QuestionType = Literal["text", "radio", "checkbox"]


class QuizQuestion(BaseModel):
    """出題用の問題（正解キーを除いた公開用の形）"""
    id: str = Field(..., description="問題ID（例：q1）")
    type: QuestionType = Field(..., description="問題タイプ")
    question: str = Field(..., description="問題文")
    choices: Optional[list[str]] = Field(
        None,
        description="選択肢（radio / checkbox のみ）"
    )
