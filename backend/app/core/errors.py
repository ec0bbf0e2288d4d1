"""
共通エラーハンドリング（APIで返すエラー形式の統一）

【初心者向け】
- フロントエンドが { "error": "...", "details": ... } でエラーを受け取れるよう、
  共通形式で例外を投げる
- raise_invalid_json, raise_internal_error 等のヘルパーで、コードごとのHTTPステータスを自動設定
- main.py の例外ハンドラが detail をそのままレスポンスボディとして返す
"""
from fastapi import HTTPException, status
from typing import Any, Literal

# エラーコード一覧（型安全のため Literal で定義）
ErrorCode = Literal[
    "INVALID_INPUT",
    "INVALID_JSON",
    "INTERNAL_ERROR",
]

# エラーコードとHTTPステータスのマッピング
ERROR_STATUS_MAP: dict[ErrorCode, int] = {
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "INVALID_JSON": status.HTTP_400_BAD_REQUEST,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INVALID_JSON_MESSAGE = "Invalid JSON"
INVALID_REQUEST_MESSAGE = "Invalid request format"


class AppError(HTTPException):
    """アプリケーション共通エラー

    detail にはレスポンスボディそのもの（{"error": ..., "details": ...}）を持たせる。
    内部の例外メッセージはここに入れない（500で内部情報を漏らさないため）。
    """

    def __init__(self, code: ErrorCode, message: str, details: Any = None):
        self.code = code
        body: dict[str, Any] = {"error": message}
        if details is not None:
            body["details"] = details
        super().__init__(status_code=ERROR_STATUS_MAP[code], detail=body)


def raise_internal_error(message: str) -> None:
    """INTERNAL_ERRORエラーを発生させる"""
    raise AppError("INTERNAL_ERROR", message)


def raise_invalid_json() -> None:
    """INVALID_JSONエラーを発生させる"""
    raise AppError("INVALID_JSON", INVALID_JSON_MESSAGE)


def raise_invalid_input(details: Any) -> None:
    """INVALID_INPUTエラーを発生させる（details に検証エラーの一覧を入れる）"""
    raise AppError("INVALID_INPUT", INVALID_REQUEST_MESSAGE, details)
