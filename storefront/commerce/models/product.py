"""商品データモデル.

ストアフロント向け商品データ構造。
一覧表示用のライト版（画像1枚）と完全版の両方を同じモデルで表現する。
"""

from __future__ import annotations

from pydantic import Field

from storefront.commerce.models.base import StorefrontModel


# 配置ヒントの番兵値（これ以上は固定位置なし）
PINNED_THRESHOLD = 1000


class Product(StorefrontModel):
    """商品モデル.

    Attributes:
        id: 商品一意識別子（不透明な文字列）
        name: 商品名
        category: カテゴリ
        price: 価格
        description: 商品説明
        fabric: 生地
        colors: カラー一覧
        sizes: サイズ一覧
        images: 画像URL一覧（先頭がサムネイル）
        is_new_arrival: 新着フラグ
        is_trending: トレンドフラグ
        on_sale: セールフラグ
        new_arrival_display_order: 新着レールの配置ヒント
        trending_display_order: トレンドレールの配置ヒント
        display_order: 汎用の配置ヒント（後方互換）

    Example:
        >>> product = Product(
        ...     id="101",
        ...     name="Gulmohar Lawn Suit",
        ...     price=3500,
        ...     sizes=["S", "M", "L"],
        ... )
    """

    id: str = Field(..., description="商品一意識別子")
    name: str = Field(..., description="商品名")
    category: str = Field(default="", description="カテゴリ")
    price: float = Field(..., ge=0, description="価格")
    description: str = Field(default="", description="商品説明")
    fabric: str = Field(default="", description="生地")
    colors: list[str] = Field(default_factory=list, description="カラー一覧")
    sizes: list[str] = Field(default_factory=list, description="サイズ一覧")
    images: list[str] = Field(default_factory=list, description="画像URL一覧")

    # 分類フラグ
    is_new_arrival: bool = Field(default=False, description="新着フラグ")
    is_trending: bool = Field(default=False, description="トレンドフラグ")
    on_sale: bool = Field(default=False, description="セールフラグ")

    # 配置ヒント
    new_arrival_display_order: int | None = Field(
        default=PINNED_THRESHOLD, description="新着レールの配置ヒント"
    )
    trending_display_order: int | None = Field(
        default=PINNED_THRESHOLD, description="トレンドレールの配置ヒント"
    )
    display_order: int | None = Field(
        default=PINNED_THRESHOLD, description="汎用の配置ヒント"
    )

    @property
    def thumbnail(self) -> str:
        """サムネイル画像URL（画像がない場合は空文字）."""
        return self.images[0] if self.images else ""

    def to_lite(self) -> Product:
        """画像を1枚に切り詰めたライト版を返す."""
        return self.model_copy(update={"images": self.images[:1]})
