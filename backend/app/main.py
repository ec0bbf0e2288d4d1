"""
FastAPIアプリケーションのエントリーポイント（アプリの起動入口）

【初心者向け】
このファイルはクイズAPIサーバーの「玄関」です。
- FastAPI: PythonのWebフレームワーク。REST APIを簡単に作れる
- /api/quiz（問題取得）, /api/grade（採点）, /health（死活確認）を登録する
- エラーは { "error": "...", "details": ... } 形式でそのまま返す

実行方法:
    pip install -e .
    uvicorn app.main:app --reload --port 8000 --app-dir backend
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.errors import AppError
from app.core.settings import settings
from app.routers import grade, health, quiz

# ロガー設定
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Quiz API",
    description="Timed quiz: question set and grading API",
    version="0.1.0",
)

# CORS設定: フロントエンドからAPIを呼ぶ際の跨域通信を許可
# 環境変数 CORS_ORIGINS で許可するオリジン（例: ["http://localhost:3000"]）を指定
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info(f"CORS許可オリジン: {settings.cors_origins}")

# ルーター登録: 各APIの「窓口」をURLパスに割り当て
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(quiz.router, prefix="/api/quiz", tags=["quiz"])
app.include_router(grade.router, prefix="/api/grade", tags=["grade"])


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """AppError の detail をそのままボディとして返す（FastAPIの "detail" で包まない）"""
    return JSONResponse(status_code=exc.status_code, content=exc.detail)


@app.get("/")
async def root():
    """ルートエンドポイント"""
    return {"message": "Quiz API is running"}
