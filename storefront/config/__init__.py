"""設定管理モジュール.

このモジュールは、ストアフロント状態コンテナの設定管理を提供します。
"""

from storefront.config.settings import StorefrontSettings, get_settings


__all__ = ["StorefrontSettings", "get_settings"]
