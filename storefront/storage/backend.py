"""キー・バリューストレージ協議.

永続化アダプター・鮮度トラッカーが使用する同期 Key-Value ストレージ。
値は文字列（JSON 文字列を想定）。
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Key-Value ストレージプロトコル.

    Implementations:
    - MemoryStorage: インメモリ（テスト用）
    - FileStorage: JSON ファイル（セッション間の永続化）
    """

    def get_item(self, key: str) -> str | None:
        """値を取得.

        Args:
            key: キー

        Returns:
            値（存在しない場合はNone）
        """
        ...

    def set_item(self, key: str, value: str) -> None:
        """値を設定."""
        ...

    def remove_item(self, key: str) -> bool:
        """値を削除.

        Returns:
            削除成功の場合True
        """
        ...


class BaseStorage(ABC):
    """ストレージ基底クラス.

    名前空間付きキーの生成を共通化する。
    """

    def __init__(self, namespace: str = "storefront") -> None:
        """初期化.

        Args:
            namespace: 名前空間（データ分離用）
        """
        self._namespace = namespace
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _prefixed_key(self, key: str) -> str:
        """名前空間付きキーを生成."""
        return f"{self._namespace}:{key}"

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """値を取得."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """値を設定."""

    @abstractmethod
    def remove_item(self, key: str) -> bool:
        """値を削除."""


def get_storage(
    url: str | None = None,
    namespace: str = "storefront",
) -> KeyValueStorage:
    """ストレージを取得.

    Args:
        url: 接続URL（None の場合は環境変数 STOREFRONT_STORAGE_URL から取得）
             - "memory://": メモリストレージ
             - "file:///path/to/dir": ファイルストレージ
        namespace: 名前空間

    Returns:
        KeyValueStorage インスタンス
    """
    from storefront.storage.file_backend import FileStorage
    from storefront.storage.memory_backend import MemoryStorage

    if url is None:
        url = os.environ.get("STOREFRONT_STORAGE_URL", "memory://")

    scheme = url.split("://")[0].lower() if "://" in url else "memory"
    rest = url.split("://", 1)[1] if "://" in url else ""

    if scheme == "memory":
        return MemoryStorage(namespace=namespace)

    if scheme == "file":
        return FileStorage(Path(rest), namespace=namespace)

    msg = f"Unknown storage scheme: {scheme}"
    raise ValueError(msg)
