# -*- coding: utf-8 -*-
"""ストアフロント設定.

このモジュールは、ストアフロント状態コンテナの設定を管理します。

使用例:
    ```python
    from storefront.config import get_settings

    settings = get_settings()
    print(settings.api_base_url)  # "/api"
    ```

環境変数:
    - STOREFRONT_API_BASE_URL: リモート API のベース URL
    - STOREFRONT_REQUEST_TIMEOUT: リクエストタイムアウト（秒）
    - STOREFRONT_STORAGE_KEY: 永続化スライスの保存キー
    - STOREFRONT_STORAGE_DIR: ファイルストレージのディレクトリ
    - STOREFRONT_STORAGE_URL: ストレージ URL（memory:// / file://...）
    - STOREFRONT_NOTIFICATION_DURATION: 通知の表示時間（秒）
    - STOREFRONT_FULL_CATALOG_DEFERMENT: フルカタログ取得までの遅延（秒）
    - STOREFRONT_LOG_LEVEL: ログレベル（DEBUG/INFO/WARNING/ERROR）
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.observability.logging import setup_logging


class StorefrontSettings(BaseSettings):
    """ストアフロント設定.

    環境変数または.envファイルから設定を読み込みます。

    Attributes:
        api_base_url: リモート API のベース URL
        request_timeout: リクエストタイムアウト（秒）
        storage_key: 永続化スライスの名前空間付きキー
        storage_dir: ファイルストレージのディレクトリ
        storage_url: ストレージ URL（指定時は storage_dir より優先）
        notification_duration: 通知の表示時間（秒）
        notification_correlated_clear: 通知ごとに自身のみをクリアするか
        full_catalog_deferment: ライト取得後フル取得までの遅延（秒）
        default_rail_count: ホームのレール表示件数（既定値）
        currency: 分析イベントの通貨コード
        max_history: アクション履歴の最大件数
        log_level: ログレベル
        log_format: ログ形式（text / json）
    """

    # API設定
    api_base_url: str = Field(default="/api", description="リモート API のベース URL")
    request_timeout: float = Field(default=30.0, gt=0, description="タイムアウト（秒）")

    # 永続化設定
    storage_key: str = Field(default="sazo-storage", description="永続化スライスのキー")
    storage_dir: Path = Field(
        default=Path.home() / ".storefront",
        description="ファイルストレージのディレクトリ",
    )
    storage_url: str | None = Field(
        default=None,
        description="ストレージ URL（memory:// または file://...、未指定時は storage_dir）",
    )

    # 通知設定
    notification_duration: float = Field(default=3.0, gt=0, description="通知表示時間（秒）")
    notification_correlated_clear: bool = Field(
        default=False, description="タイマーが自身の通知のみクリアするか"
    )

    # カタログ設定
    full_catalog_deferment: float = Field(
        default=0.1, ge=0, description="フルカタログ取得までの遅延（秒）"
    )
    default_rail_count: int = Field(default=4, gt=0, description="レール表示件数")

    # 分析設定
    currency: str = Field(default="BDT", description="分析イベントの通貨コード")

    # ストア設定
    max_history: int = Field(default=100, gt=0, description="アクション履歴の最大件数")

    # ログ設定
    log_level: str = Field(default="INFO", description="ログレベル")
    log_format: str = Field(default="text", description="ログ形式（text / json）")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STOREFRONT_",
        case_sensitive=False,
    )

    def configure_logging(self) -> None:
        """ログ設定を適用."""
        setup_logging(level=self.log_level, format=self.log_format)


@lru_cache
def get_settings() -> StorefrontSettings:
    """設定シングルトンを取得.

    この関数は設定をキャッシュし、アプリケーション全体で同じインスタンスを返します。

    Returns:
        ストアフロント設定
    """
    settings = StorefrontSettings()
    settings.configure_logging()
    return settings
