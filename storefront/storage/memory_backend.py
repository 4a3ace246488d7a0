"""メモリストレージ.

開発・テスト用のインメモリ実装。プロセス終了でデータは消失。
"""

from __future__ import annotations

from storefront.storage.backend import BaseStorage


class MemoryStorage(BaseStorage):
    """メモリベースのストレージ.

    Example:
        >>> storage = MemoryStorage()
        >>> storage.set_item("sazo-storage", '{"cart": []}')
        >>> storage.get_item("sazo-storage")
        '{"cart": []}'
    """

    def __init__(self, namespace: str = "storefront") -> None:
        """初期化."""
        super().__init__(namespace=namespace)
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        """値を取得."""
        return self._data.get(self._prefixed_key(key))

    def set_item(self, key: str, value: str) -> None:
        """値を設定."""
        self._data[self._prefixed_key(key)] = value

    def remove_item(self, key: str) -> bool:
        """値を削除."""
        return self._data.pop(self._prefixed_key(key), None) is not None

    def __len__(self) -> int:
        return len(self._data)
