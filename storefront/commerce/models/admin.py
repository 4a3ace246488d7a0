"""管理画面向けデータモデル.

問い合わせメッセージ、ダッシュボード統計、管理用商品ページング。
"""

from __future__ import annotations

from pydantic import Field

from storefront.commerce.models.base import StorefrontModel
from storefront.commerce.models.product import Product


class ContactMessage(StorefrontModel):
    """問い合わせメッセージ."""

    id: str = Field(..., description="メッセージID")
    name: str = Field(default="", description="送信者名")
    email: str = Field(default="", description="送信者メール")
    message: str = Field(default="", description="本文")
    date: str = Field(default="", description="受信日時")
    is_read: bool = Field(default=False, description="既読フラグ")


class DashboardStats(StorefrontModel):
    """ダッシュボード統計."""

    total_orders: int = Field(default=0, ge=0, description="注文総数")
    online_transactions: int = Field(default=0, ge=0, description="オンライン決済件数")
    total_revenue: float = Field(default=0.0, description="売上合計")
    total_products: int = Field(default=0, ge=0, description="商品総数")


class AdminProductsPage(StorefrontModel):
    """管理用商品一覧の1ページ."""

    products: list[Product] = Field(default_factory=list, description="商品一覧")
    page: int = Field(default=1, ge=1, description="現在ページ")
    pages: int = Field(default=1, ge=0, description="総ページ数")
    total: int = Field(default=0, ge=0, description="総件数")
