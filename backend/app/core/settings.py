"""
アプリケーション設定（環境変数・定数の一元管理）

【初心者向け】
- Pydantic Settings: 環境変数や.envを読んで型付きで扱うための仕組み
- ここで定義した値は app.core.settings.settings から参照できる
- 主な分類: CORS, APIクライアント, クイズ（制限時間・シード）, ログ
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """
    アプリケーション設定クラス
    環境変数（または.env）の値が自動でここにマッピングされる
    """

    # CORS設定（許可するフロントエンドのオリジン）
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ORIGINS",
        description="CORSで許可するオリジンのリスト"
    )

    # APIクライアント設定（ターミナル版クライアントが叩く先）
    api_base_url: str = Field(
        default="http://localhost:8000",
        alias="API_BASE_URL",
        description="クライアントが利用するAPIのベースURL"
    )
    api_timeout_sec: float = Field(
        default=10.0,
        alias="API_TIMEOUT_SEC",
        description="API呼び出しのタイムアウト秒数"
    )

    # クイズ設定
    quiz_duration_sec: int = Field(
        default=300,
        ge=1,
        alias="QUIZ_DURATION_SEC",
        description="クイズの制限時間（秒）。カウントダウンの開始値"
    )
    quiz_seed: Optional[int] = Field(
        default=None,
        alias="QUIZ_SEED",
        description="シャッフルのベースシード（未指定なら受験ごとに時刻から生成）"
    )

    # ログ設定
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="ログレベル（DEBUG/INFO/WARNING/ERROR）"
    )

    # Pydantic v2の設定（Configクラスの代わりにmodel_configを使用）
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,  # Fieldのaliasとフィールド名の両方で読み込み可能
        extra="ignore"  # 未定義の環境変数を無視
    )


# グローバル設定インスタンス
settings = Settings()
