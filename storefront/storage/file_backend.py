"""ファイルストレージ.

キーごとに1ファイルへ保存する。書き込みは一時ファイル経由で置き換える。
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from storefront.storage.backend import BaseStorage


class FileStorage(BaseStorage):
    """ファイルベースのストレージ.

    ブラウザの localStorage 相当。セッションをまたいで値を保持する。

    Example:
        >>> storage = FileStorage(Path("~/.storefront").expanduser())
        >>> storage.set_item("sazo-storage", "{}")
    """

    def __init__(self, root_dir: str | Path, namespace: str = "storefront") -> None:
        """初期化.

        Args:
            root_dir: 保存先ディレクトリ
            namespace: 名前空間
        """
        super().__init__(namespace=namespace)
        self.root_dir = Path(root_dir)

    def _path(self, key: str) -> Path:
        digest = hashlib.sha1(self._prefixed_key(key).encode("utf-8")).hexdigest()[:16]
        safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
        return self.root_dir / f"{self._namespace}_{safe}_{digest}.json"

    def get_item(self, key: str) -> str | None:
        """値を取得."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        """値を設定."""
        self.root_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove_item(self, key: str) -> bool:
        """値を削除."""
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True
