"""カートデータモデル.

カート行は (商品ID, サイズ) の複合キーで一意に識別される。
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic import ConfigDict, Field

from storefront.commerce.models.base import StorefrontModel


class CartKey(NamedTuple):
    """カート行の複合キー.

    Attributes:
        product_id: 商品ID
        size: 選択されたバリアント（サイズ）
    """

    product_id: str
    size: str


class CartLine(StorefrontModel):
    """カート行モデル.

    価格は追加時点のスナップショット。名前・画像は表示用に非正規化して保持する。

    Attributes:
        product_id: 商品ID（ワイヤー形式では ``id``）
        size: サイズ
        price: 追加時点の単価
        quantity: 数量（1以上）
        name: 商品名
        image: サムネイル画像URL
    """

    product_id: str = Field(..., alias="id", description="商品ID")
    size: str = Field(default="", description="サイズ")
    price: float = Field(..., ge=0, description="追加時点の単価")
    quantity: int = Field(..., ge=1, description="数量")
    name: str = Field(default="", description="商品名")
    image: str = Field(default="", description="サムネイル画像URL")

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> CartKey:
        """複合キー."""
        return CartKey(self.product_id, self.size)

    @property
    def subtotal(self) -> float:
        """小計を計算."""
        return self.price * self.quantity


def cart_total(lines: list[CartLine] | tuple[CartLine, ...]) -> float:
    """カート合計を計算.

    Args:
        lines: カート行一覧

    Returns:
        Σ 単価 × 数量
    """
    return sum((line.subtotal for line in lines), 0.0)
