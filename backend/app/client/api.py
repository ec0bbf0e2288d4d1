"""
クイズAPIクライアント実装
"""
import logging
from functools import lru_cache
from typing import Any, List, Optional, Sequence

import httpx

from app.client.base import (
    QuizApiConnectionError,
    QuizApiError,
    QuizApiHTTPError,
    QuizApiTimeoutError,
)
from app.core.settings import settings
from app.schemas.grade import AnswerInput, GradeResponse
from app.schemas.quiz import QuizQuestion

# ロガー設定
logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    """エラーレスポンスから { "error", "details" } を取り出す（JSONでなければ本文そのまま）"""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    if isinstance(body, dict) and "error" in body:
        return str(body["error"]), body.get("details")
    return str(body), None


class QuizApiClient:
    """
    クイズAPIクライアント

    - httpx.AsyncClient で /api/quiz, /api/grade を叩く
    - transport を渡すとテストで httpx.MockTransport に差し替えられる
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_sec: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout_sec = timeout_sec or settings.api_timeout_sec
        self.transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_sec, transport=self.transport) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()  # HTTPエラーを例外に変換
                return response.json()

        except httpx.TimeoutException as e:
            logger.error(f"APIタイムアウト: {method} {url}: {e}")
            raise QuizApiTimeoutError(f"APIへのリクエストがタイムアウトしました（{self.timeout_sec}秒）")

        except httpx.HTTPStatusError as e:
            message, details = _error_message(e.response)
            logger.error(f"API HTTPエラー: {e.response.status_code} - {message}")
            raise QuizApiHTTPError(e.response.status_code, message, details)

        except httpx.RequestError as e:
            logger.error(f"API接続エラー: {e}")
            raise QuizApiConnectionError(f"APIへの接続に失敗しました: {str(e)}")

        except ValueError as e:
            logger.error(f"APIレスポンスのJSON解析に失敗: {e}")
            raise QuizApiError(f"APIレスポンスが不正です: {str(e)}")

    async def fetch_quiz(self) -> List[QuizQuestion]:
        """
        問題セットを取得する

        Raises:
            QuizApiError: 通信・HTTP・レスポンス形式のエラー
        """
        data = await self._request("GET", "/api/quiz")
        if not isinstance(data, list):
            raise QuizApiError("問題セットのレスポンスが配列ではありません")
        try:
            questions = [QuizQuestion.model_validate(item) for item in data]
        except ValueError as e:
            raise QuizApiError(f"問題セットの形式が不正です: {e}")
        logger.info(f"問題セット取得成功: {len(questions)}問")
        return questions

    async def grade(self, answers: Sequence[AnswerInput]) -> GradeResponse:
        """
        回答（正規インデックス）を送信して採点結果を受け取る

        Raises:
            QuizApiError: 通信・HTTP・レスポンス形式のエラー
        """
        payload = {"answers": [a.model_dump() for a in answers]}
        data = await self._request("POST", "/api/grade", json=payload)
        try:
            result = GradeResponse.model_validate(data)
        except ValueError as e:
            raise QuizApiError(f"採点結果の形式が不正です: {e}")
        logger.info(f"採点結果取得成功: score={result.score}/{result.total}")
        return result


@lru_cache(maxsize=1)
def get_api_client() -> QuizApiClient:
    """
    クイズAPIクライアントのシングルトンインスタンスを取得（@lru_cacheで生成を抑える）
    """
    return QuizApiClient()
