#!/usr/bin/env python3
"""
ターミナル版クイズ

APIサーバーから問題を取得し、制限時間付きでクイズを解きます。
時間切れになると、その時点までの回答が自動で提出されます。

使用方法:
    cd backend
    source .venv/bin/activate
    python scripts/play_quiz.py [--base-url URL] [--seed N] [--duration SEC]

オプション:
    --base-url: APIのベースURL（デフォルト: API_BASE_URL）
    --seed: シャッフルのベースシード（同じ値なら同じ出題順）
    --duration: 制限時間（秒）（デフォルト: QUIZ_DURATION_SEC）
"""
import asyncio
import sys
import logging
from pathlib import Path

# プロジェクトルートをパスに追加
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from app.client.api import QuizApiClient, get_api_client
from app.client.base import QuizApiError
from app.client.console import ConsoleReader
from app.client.runner import run_quiz
from app.quiz.session import SessionState

# ロガー設定（画面の邪魔にならないよう WARNING 以上のみ）
logging.basicConfig(
    level=logging.WARNING,
    format='%(levelname)s - %(message)s'
)


async def play(client: QuizApiClient, seed: int | None, duration: int | None) -> int:
    reader = ConsoleReader()
    reader.start()
    try:
        session = await run_quiz(client, ask=reader.ask, seed=seed, duration_sec=duration)
    except QuizApiError as e:
        print(f"問題の取得に失敗しました: {e}")
        print("サーバーを確認して、もう一度実行してください。")
        return 1
    return 0 if session.state is SessionState.SUBMITTED else 1


def main():
    """メイン処理"""
    import argparse

    parser = argparse.ArgumentParser(description='ターミナル版クイズ')
    parser.add_argument(
        '--base-url',
        default=None,
        help='APIのベースURL（デフォルト: API_BASE_URL）'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='シャッフルのベースシード'
    )
    parser.add_argument(
        '--duration',
        type=int,
        default=None,
        help='制限時間（秒）'
    )
    args = parser.parse_args()

    client = QuizApiClient(base_url=args.base_url) if args.base_url else get_api_client()
    sys.exit(asyncio.run(play(client, args.seed, args.duration)))


if __name__ == "__main__":
    main()
