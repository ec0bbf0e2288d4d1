"""
出題順・選択肢順のシャッフルと、回答インデックスの復元

【初心者向け】
- seeded_random: sin を使った簡易な疑似乱数（同じシードなら毎回同じ値）
  ※ 暗号用途には使えない。偏りもあるが、出題順を並べ替えるだけなら十分
- shuffle_array: Fisher–Yates（末尾から先頭へ）でシャッフルする
- shuffle_quiz: 問題順をベースシードで、各問題の選択肢を「ベースシード + 表示位置」でシャッフル
- ChoiceMapping: mapping[表示位置] = 元の（正規の）選択肢インデックス
- remap_answer: ユーザーが選んだ表示位置を、採点用の正規インデックスに戻す
- サーバーはシャッフルの存在を知らない。送られてくるのは常に正規インデックス
"""
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Sequence, TypeVar

from app.schemas.quiz import QuizQuestion

# ロガー設定
logger = logging.getLogger(__name__)

T = TypeVar("T")

ChoiceMapping = tuple[int, ...]


def seeded_random(seed: float) -> float:
    """シードから [0, 1) の疑似乱数を返す（frac(sin(seed) * 10000)）"""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def shuffle_array(items: Sequence[T], seed: float) -> list[T]:
    """
    シード付きでシャッフルしたコピーを返す（元のシーケンスは変更しない）

    i を末尾から1まで下げながら、j = floor(seeded_random(seed + i) * (i + 1)) と入れ替える
    """
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = math.floor(seeded_random(seed + i) * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def new_base_seed() -> int:
    """受験ごとのベースシードを時刻から作る"""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class ShuffledQuiz:
    """シャッフル済みの問題セット"""
    seed: int
    questions: tuple[QuizQuestion, ...]
    # 問題ID → ChoiceMapping（選択肢のある問題のみ）
    mappings: dict[str, ChoiceMapping]

    def mapping_for(self, question_id: str) -> ChoiceMapping | None:
        return self.mappings.get(question_id)


def shuffle_quiz(questions: Sequence[QuizQuestion], base_seed: int) -> ShuffledQuiz:
    """
    問題順と選択肢順をシャッフルする

    Args:
        questions: 公開用の問題（正解キーなし）
        base_seed: ベースシード。同じ値なら出題順もマッピングも毎回同じになる

    Returns:
        ShuffledQuiz（表示用の問題と、問題ごとの ChoiceMapping）
    """
    ordered = shuffle_array(questions, base_seed)

    shuffled_questions: list[QuizQuestion] = []
    mappings: dict[str, ChoiceMapping] = {}

    for position, q in enumerate(ordered):
        if not q.choices:
            shuffled_questions.append(q)
            continue

        mapping = tuple(shuffle_array(range(len(q.choices)), base_seed + position))
        mappings[q.id] = mapping
        shuffled_questions.append(
            q.model_copy(update={"choices": [q.choices[m] for m in mapping]})
        )

    logger.debug(f"シャッフル完了: seed={base_seed}, questions={len(shuffled_questions)}")
    return ShuffledQuiz(seed=base_seed, questions=tuple(shuffled_questions), mappings=mappings)


def _lookup(mapping: ChoiceMapping, position: Any) -> int:
    if isinstance(position, bool) or not isinstance(position, int):
        raise ValueError(f"選択位置は整数で指定してください: {position!r}")
    if not 0 <= position < len(mapping):
        raise ValueError(f"選択位置が範囲外です: {position}（選択肢数 {len(mapping)}）")
    return mapping[position]


def remap_answer(question: QuizQuestion, mapping: ChoiceMapping | None, value: Any) -> Any:
    """
    表示位置で記録された回答を正規インデックスに戻す

    - radio: mapping[選択位置]
    - checkbox: 各選択位置を mapping で変換
    - text: そのまま（選択肢がない）

    Raises:
        ValueError: 選択位置が整数でない、範囲外、または複数選択の回答がリストでない場合
    """
    if question.type == "text" or mapping is None:
        return value
    if question.type == "radio":
        return _lookup(mapping, value)
    if not isinstance(value, list):
        raise ValueError(f"複数選択の回答はリストで渡してください: {value!r}")
    return [_lookup(mapping, v) for v in value]
