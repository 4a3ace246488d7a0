"""永続化アダプター.

状態のうち {cart, settings, products} のみを1つのキーに JSON で保存する。
読み込み時は保存値を信用せず、フィールドごとに検証してから採用する。
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from storefront.commerce.models import (
    DEFAULT_SETTINGS,
    CartKey,
    CartLine,
    Product,
    StoreSettings,
    cart_total,
)
from storefront.core.exceptions import DataIntegrityError
from storefront.state.models import StorefrontState
from storefront.storage import KeyValueStorage


logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "sazo-storage"


@dataclass
class RehydratedSlice:
    """復元されたスライス.

    Attributes:
        cart: 検証済みカート行
        settings: ストア設定
        products: 商品一覧
        restored: 保存値から復元したか
    """

    cart: list[CartLine] = field(default_factory=list)
    settings: StoreSettings = field(default_factory=lambda: DEFAULT_SETTINGS.model_copy(deep=True))
    products: list[Product] = field(default_factory=list)
    restored: bool = False

    @property
    def total(self) -> float:
        """カート合計（保存値ではなく再計算）."""
        return cart_total(self.cart)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_cart_entry(entry: Any) -> bool:
    return (
        isinstance(entry, dict)
        and isinstance(entry.get("id"), str)
        and _is_number(entry.get("price"))
        and _is_number(entry.get("quantity"))
    )


def sanitize_cart(raw: Any) -> list[CartLine]:
    """保存されたカートを検証.

    形が正しくない行・モデル検証に失敗した行は黙って捨てる。
    同じ複合キーの行は後の行が優先される。

    Args:
        raw: 保存値

    Returns:
        検証済みカート行（挿入順）
    """
    if not isinstance(raw, list):
        return []

    lines: dict[CartKey, CartLine] = {}
    dropped = 0
    for entry in raw:
        if not _is_cart_entry(entry):
            dropped += 1
            continue
        try:
            line = CartLine.model_validate(entry)
        except PydanticValidationError:
            dropped += 1
            continue
        lines[line.key] = line

    if dropped:
        logger.warning(f"Dropped {dropped} invalid cart entries from persisted state")
    return list(lines.values())


class PersistenceAdapter:
    """永続化アダプター.

    Example:
        >>> adapter = PersistenceAdapter(MemoryStorage())
        >>> adapter.save(state)
        >>> restored = adapter.load(StorefrontState())
        >>> restored.total
        3000.0
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        """初期化.

        Args:
            storage: 保存先ストレージ
            key: ストレージキー
        """
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        """ストレージキー."""
        return self._key

    def dump(self, state: StorefrontState) -> dict[str, Any]:
        """永続化スライスを辞書に変換."""
        return {
            "cart": [line.to_wire() for line in state.cart_lines],
            "settings": state.settings.to_wire(),
            "products": [product.to_wire() for product in state.products],
        }

    def save(self, state: StorefrontState) -> None:
        """永続化スライスを保存.

        保存失敗は記録のみ行い、呼び出し元には送出しない。

        Args:
            state: 現在の状態
        """
        try:
            self._storage.set_item(self._key, json.dumps(self.dump(state), ensure_ascii=False))
        except OSError as e:
            logger.error(f"Failed to persist state under {self._key!r}: {e}")

    def load(self, defaults: StorefrontState | None = None) -> RehydratedSlice:
        """永続化スライスを検証して復元.

        保存値がない・壊れている場合は既定値をそのまま返す。

        Args:
            defaults: メモリ上の既定状態

        Returns:
            RehydratedSlice
        """
        defaults = defaults or StorefrontState()
        fallback = RehydratedSlice(
            cart=defaults.cart_lines,
            settings=defaults.settings,
            products=list(defaults.products),
        )

        try:
            raw = self._read()
            if raw is None:
                return fallback
            blob = self._decode(raw)
        except DataIntegrityError as e:
            logger.warning(f"Discarding persisted state: {e}")
            return fallback

        return RehydratedSlice(
            cart=sanitize_cart(blob.get("cart")),
            settings=self._load_settings(blob, defaults.settings),
            products=self._load_products(blob, defaults.products),
            restored=True,
        )

    def clear(self) -> bool:
        """保存値を削除."""
        return self._storage.remove_item(self._key)

    def _read(self) -> str | None:
        try:
            return self._storage.get_item(self._key)
        except (UnicodeDecodeError, OSError) as e:
            raise DataIntegrityError(f"unreadable value under {self._key!r}: {e}") from e

    def _decode(self, raw: str) -> dict[str, Any]:
        try:
            blob = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise DataIntegrityError(f"malformed JSON under {self._key!r}") from e
        if not isinstance(blob, dict):
            raise DataIntegrityError(f"expected an object under {self._key!r}")
        # zustand 形式（{"state": {...}, "version": 0}）も受け付ける
        if isinstance(blob.get("state"), dict) and "cart" not in blob:
            blob = blob["state"]
        return blob

    @staticmethod
    def _load_settings(blob: dict[str, Any], default: StoreSettings) -> StoreSettings:
        if "settings" not in blob:
            return default
        try:
            return StoreSettings.model_validate(blob["settings"])
        except PydanticValidationError:
            logger.warning("Persisted settings are invalid, using defaults")
            return default

    @staticmethod
    def _load_products(blob: dict[str, Any], default: list[Product]) -> list[Product]:
        raw = blob.get("products")
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning("Persisted products are not a list, using defaults")
            return list(default)

        products: list[Product] = []
        for entry in raw:
            try:
                products.append(Product.model_validate(entry))
            except PydanticValidationError:
                logger.warning("Dropped invalid persisted product")
        return products
