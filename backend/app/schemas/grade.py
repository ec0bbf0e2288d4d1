"""
Grade API用スキーマ（採点のリクエスト・レスポンス型）

【初心者向け】
- AnswerInput: 1問分の回答。id は文字列か数値、value は文字列・数値・数値の配列
- GradeRequest: { "answers": [AnswerInput, ...] }
- GradeResult / GradeResponse: 問題ごとの正誤と合計点
- Strict* 型を使うのは、true や "1" を数値として勝手に変換させないため
"""
from typing import Union
from pydantic import BaseModel, Field, StrictInt, StrictStr, confloat

# NaN / Infinity は JSON の値ではないので受け付けない
FiniteFloat = confloat(strict=True, allow_inf_nan=False)

AnswerId = Union[StrictStr, StrictInt, FiniteFloat]
AnswerValue = Union[StrictStr, StrictInt, FiniteFloat, list[Union[StrictInt, FiniteFloat]]]


class AnswerInput(BaseModel):
    """回答（正規インデックスに戻した後の値）"""
    id: AnswerId = Field(..., description="問題ID")
    value: AnswerValue = Field(..., description="回答値（text=文字列, radio=数値, checkbox=数値の配列）")


class GradeRequest(BaseModel):
    """採点リクエスト"""
    answers: list[AnswerInput] = Field(..., description="回答のリスト")


class GradeResult(BaseModel):
    """1問分の採点結果"""
    id: AnswerId
    correct: bool


class GradeResponse(BaseModel):
    """採点レスポンス"""
    score: int = Field(..., description="正解数")
    total: int = Field(..., description="全問題数（回答数ではない）")
    results: list[GradeResult] = Field(..., description="回答順の採点結果")
