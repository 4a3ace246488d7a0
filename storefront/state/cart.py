"""カートエンジン.

複合キー (商品ID, サイズ) で行を管理する。
合計は保存せず、行の内容から常に再計算する。
数量の変化は add_to_cart / remove_from_cart 分析イベントとして出力する。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from storefront.analytics import AnalyticsEvent, EventSink, NullEventSink, ecommerce_item
from storefront.commerce.models import CartKey, CartLine, Product, cart_total
from storefront.core.exceptions import ValidationError


logger = logging.getLogger(__name__)


class CartChangeKind(str, Enum):
    """カート変更の種別."""

    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class CartChange:
    """カート変更結果.

    Attributes:
        kind: 変更種別
        key: 対象の複合キー
        line: 変更後の行（削除・未変更の場合None）
        delta: 数量の符号付き差分
    """

    kind: CartChangeKind
    key: CartKey
    line: CartLine | None
    delta: int


class CartEngine:
    """カートエンジン.

    Example:
        >>> engine = CartEngine()
        >>> engine.add_item(product, 2, "M")
        >>> engine.total
        7000.0
    """

    def __init__(
        self,
        lines: dict[CartKey, CartLine] | None = None,
        event_sink: EventSink | None = None,
        currency: str = "BDT",
    ) -> None:
        """初期化.

        Args:
            lines: 管理するカート行（ストア状態と共有する辞書）
            event_sink: 分析イベントの出力先
            currency: 分析イベントの通貨コード
        """
        self._lines: dict[CartKey, CartLine] = lines if lines is not None else {}
        self._event_sink = event_sink or NullEventSink()
        self._currency = currency

    @property
    def lines(self) -> list[CartLine]:
        """カート行一覧（挿入順）."""
        return list(self._lines.values())

    @property
    def total(self) -> float:
        """カート合計."""
        return cart_total(self.lines)

    def get(self, product_id: str, variant: str) -> CartLine | None:
        """行を取得."""
        return self._lines.get(CartKey(product_id, variant))

    def add_item(
        self,
        product: Product,
        quantity: int = 1,
        variant: str | None = None,
    ) -> CartChange:
        """商品をカートに追加.

        同じキーの行があれば数量を加算し、なければ価格スナップショット付きで追加する。

        Args:
            product: 商品
            quantity: 追加数量
            variant: サイズ

        Returns:
            CartChange

        Raises:
            ValidationError: サイズ未選択、または数量が1未満
        """
        if not variant:
            raise ValidationError("Please select a size.")
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1.")

        key = CartKey(product.id, variant)
        existing = self._lines.get(key)
        if existing is not None:
            line = existing.model_copy(update={"quantity": existing.quantity + quantity})
            kind = CartChangeKind.UPDATED
        else:
            line = CartLine(
                product_id=product.id,
                size=variant,
                price=product.price,
                quantity=quantity,
                name=product.name,
                image=product.thumbnail,
            )
            kind = CartChangeKind.ADDED
        self._lines[key] = line

        self._emit(
            "add_to_cart",
            product_id=product.id,
            name=product.name,
            category=product.category,
            price=product.price,
            quantity=quantity,
            variant=variant,
        )
        return CartChange(kind=kind, key=key, line=line, delta=quantity)

    def set_quantity(
        self,
        product_id: str,
        variant: str,
        new_quantity: int,
        product: Product | None = None,
    ) -> CartChange:
        """行の数量を設定.

        0以下の場合は行を削除する。存在しない行に対しては何もしない。

        Args:
            product_id: 商品ID
            variant: サイズ
            new_quantity: 新しい数量
            product: カタログ上の商品（分析イベントの詳細に使用）

        Returns:
            CartChange
        """
        key = CartKey(product_id, variant)
        existing = self._lines.get(key)
        if existing is None:
            return CartChange(kind=CartChangeKind.UNCHANGED, key=key, line=None, delta=0)

        delta = max(new_quantity, 0) - existing.quantity
        if delta != 0:
            self._emit(
                "add_to_cart" if delta > 0 else "remove_from_cart",
                product_id=product_id,
                name=product.name if product else existing.name,
                category=product.category if product else "",
                price=product.price if product else existing.price,
                quantity=abs(delta),
                variant=variant,
            )

        if new_quantity <= 0:
            del self._lines[key]
            return CartChange(kind=CartChangeKind.REMOVED, key=key, line=None, delta=delta)

        line = existing.model_copy(update={"quantity": new_quantity})
        self._lines[key] = line
        kind = CartChangeKind.UPDATED if delta else CartChangeKind.UNCHANGED
        return CartChange(kind=kind, key=key, line=line, delta=delta)

    def clear(self) -> None:
        """カートを空にする."""
        self._lines.clear()

    def replace(self, lines: Iterable[CartLine]) -> None:
        """カート全体を置き換え（同一キーは後勝ち）."""
        self._lines.clear()
        for line in lines:
            self._lines[line.key] = line

    def _emit(
        self,
        event: str,
        *,
        product_id: str,
        name: str,
        category: str,
        price: float,
        quantity: int,
        variant: str,
    ) -> None:
        item = ecommerce_item(
            item_id=product_id,
            item_name=name,
            item_category=category,
            price=price,
            quantity=quantity,
            item_variant=variant,
        )
        self._event_sink.emit(
            AnalyticsEvent(event, {"ecommerce": {"currency": self._currency, "items": [item]}})
        )
