"""
正規の問題セット（サーバー側だけが持つ、正解キー付きの問題）

【初心者向け】
- Question: 1問分。frozen な dataclass なので起動後に書き換えられない
- QUESTIONS: プロセス起動時に一度だけ作られる読み取り専用の問題セット
- to_public_question: クライアントに返す前に正解キーを取り除く
- 複数リクエストから同時に参照されても、誰も書き換えないのでロック不要
"""
import logging
from dataclasses import dataclass
from typing import Optional

from app.schemas.quiz import QuestionType, QuizQuestion

# ロガー設定
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Question:
    """正解キー付きの問題（typeに対応する正解フィールドが1つだけ入る）"""
    id: str
    type: QuestionType
    question: str
    choices: Optional[tuple[str, ...]] = None
    correct_text: Optional[str] = None
    correct_index: Optional[int] = None
    correct_indexes: Optional[frozenset[int]] = None

    def __post_init__(self):
        keys = {
            "text": self.correct_text,
            "radio": self.correct_index,
            "checkbox": self.correct_indexes,
        }
        populated = [t for t, v in keys.items() if v is not None]
        if populated != [self.type]:
            raise ValueError(f"{self.id}: 正解キーは type={self.type} に対応するものを1つだけ指定してください")
        if self.type == "text":
            if self.choices is not None:
                raise ValueError(f"{self.id}: text問題に選択肢は指定できません")
            return
        if not self.choices:
            raise ValueError(f"{self.id}: {self.type}問題には選択肢が必要です")
        indexes = [self.correct_index] if self.type == "radio" else list(self.correct_indexes)
        for i in indexes:
            if not 0 <= i < len(self.choices):
                raise ValueError(f"{self.id}: 正解インデックス {i} が選択肢の範囲外です")


def to_public_question(q: Question) -> QuizQuestion:
    """正解キーを取り除いた公開用の問題に変換する"""
    return QuizQuestion(
        id=q.id,
        type=q.type,
        question=q.question,
        choices=list(q.choices) if q.choices is not None else None,
    )


QUESTIONS: tuple[Question, ...] = (
    Question(
        id="q1",
        type="radio",
        question="What does JSX stand for?",
        choices=("JavaScript XML", "JavaScript Extension", "Java Syntax Extension", "JavaScript Execution"),
        correct_index=0,
    ),
    Question(
        id="q2",
        type="checkbox",
        question="Which of these are React hooks? (Select all that apply)",
        choices=("useState", "useEffect", "useStyle", "useContext", "useClass"),
        correct_indexes=frozenset({0, 1, 3}),
    ),
    Question(
        id="q3",
        type="text",
        question="What HTTP status code indicates a successful response?",
        correct_text="200",
    ),
    Question(
        id="q4",
        type="radio",
        question="Which company developed Next.js?",
        choices=("Meta", "Vercel", "Google", "Netflix"),
        correct_index=1,
    ),
    Question(
        id="q5",
        type="checkbox",
        question="Which are valid CSS display values? (Select all that apply)",
        choices=("flex", "grid", "table", "hidden", "inline-block"),
        correct_indexes=frozenset({0, 1, 2, 4}),
    ),
    Question(
        id="q6",
        type="text",
        question="What is the default port for a Next.js development server?",
        correct_text="3000",
    ),
    Question(
        id="q7",
        type="radio",
        question="What does API stand for?",
        choices=(
            "Application Programming Interface",
            "Advanced Programming Integration",
            "Application Process Integration",
            "Advanced Protocol Interface",
        ),
        correct_index=0,
    ),
    Question(
        id="q8",
        type="checkbox",
        question="Which HTTP methods are idempotent? (Select all that apply)",
        choices=("GET", "POST", "PUT", "DELETE", "PATCH"),
        correct_indexes=frozenset({0, 2, 3}),
    ),
    Question(
        id="q9",
        type="text",
        question="What keyword is used to define a constant in JavaScript?",
        correct_text="const",
    ),
    Question(
        id="q10",
        type="radio",
        question="Which rendering strategy does Next.js use by default in App Router?",
        choices=(
            "Client-side Rendering",
            "Static Site Generation",
            "Server Components",
            "Incremental Static Regeneration",
        ),
        correct_index=2,
    ),
)

logger.debug(f"問題セット読み込み完了: {len(QUESTIONS)}問")
