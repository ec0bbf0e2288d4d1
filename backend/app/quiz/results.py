"""
採点結果のサマリー（正答率と評価）
"""
from dataclasses import dataclass

from app.schemas.grade import GradeResponse

# (下限%, 評価) を高い順に並べる
GRADE_THRESHOLDS = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]


@dataclass(frozen=True)
class ResultSummary:
    score: int
    total: int
    percentage: int
    letter: str


def letter_grade(percentage: int) -> str:
    for threshold, letter in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return letter
    return "F"


def _round_half_up(x: float) -> int:
    # round() は偶数丸めなので 62.5 -> 62 になってしまう
    return int(x + 0.5)


def summarize(response: GradeResponse) -> ResultSummary:
    """GradeResponse から正答率（%、四捨五入）と評価を計算する"""
    if response.total <= 0:
        percentage = 0
    else:
        percentage = _round_half_up(response.score / response.total * 100)
    return ResultSummary(
        score=response.score,
        total=response.total,
        percentage=percentage,
        letter=letter_grade(percentage),
    )
