"""
Health check APIルーター（死活確認用）

【初心者向け】
- GET /health: サーバーが生きているか、問題セットが読み込めているかを返す
- ロードバランサーや監視ツールからよく叩かれる
"""
from fastapi import APIRouter

from app.quiz.questions import QUESTIONS

router = APIRouter()


@router.get("")
async def health_check():
    """ヘルスチェック用エンドポイント"""
    return {"status": "ok", "questions": len(QUESTIONS)}
