# -*- coding: utf-8 -*-
"""ストレージ抽象層.

永続化スライスと注文閲覧ウォーターマークを保存する Key-Value ストレージ。

Backends:
- MemoryStorage: インメモリ（開発/テスト用）
- FileStorage: JSON ファイル（セッション間の永続化）

Example:
    >>> from storefront.storage import get_storage
    >>>
    >>> storage = get_storage("file:///tmp/storefront")
    >>> storage.set_item("sazo-storage", "{}")
"""

from storefront.storage.backend import BaseStorage, KeyValueStorage, get_storage
from storefront.storage.file_backend import FileStorage
from storefront.storage.memory_backend import MemoryStorage


__all__ = [
    "BaseStorage",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "get_storage",
]
