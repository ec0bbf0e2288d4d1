"""
クイズAPIクライアントの例外定義

【初心者向け】
- QuizApiError: API呼び出し失敗の基底例外。runner で捕捉して「エラー状態」にする
- 元のセッション状態（回答など）は保持したまま、手動で再試行できる
"""
from typing import Optional


class QuizApiError(Exception):
    """クイズAPI関連の基底例外"""
    pass


class QuizApiTimeoutError(QuizApiError):
    """API呼び出しのタイムアウトエラー"""
    pass


class QuizApiConnectionError(QuizApiError):
    """APIサーバーへの接続エラー"""
    pass


class QuizApiHTTPError(QuizApiError):
    """APIがエラーステータスを返した（サーバー側の error メッセージを保持）"""

    def __init__(self, status_code: int, message: str, details: Optional[object] = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details
