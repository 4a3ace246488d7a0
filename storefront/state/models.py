"""状態モデル定義.

ストアが所有する状態グラフの全フィールドを型付けで定義。

設計原則:
- カート合計は保存せず、カート内容から常に導出する
- 通知・読み込みフラグ・選択中商品・認証状態はセッション限り（永続化しない）
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from storefront.commerce.models import (
    DEFAULT_SETTINGS,
    CartKey,
    CartLine,
    ContactMessage,
    DashboardStats,
    Order,
    Product,
    StoreSettings,
    cart_total,
)


class NotificationType(str, Enum):
    """通知の重要度."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notification(BaseModel):
    """一時通知.

    Attributes:
        message: メッセージ
        type: 重要度
    """

    message: str = Field(..., description="メッセージ")
    type: NotificationType = Field(default=NotificationType.SUCCESS, description="重要度")


class AdminProductsPagination(BaseModel):
    """管理用商品一覧のページ情報."""

    page: int = Field(default=1, ge=1)
    pages: int = Field(default=1, ge=0)
    total: int = Field(default=0, ge=0)


@dataclass
class StorefrontState:
    """ストアフロント状態.

    Attributes:
        products: 保持中の商品一覧
        full_products_loaded: 完全版カタログ取得済みか
        loading: 初回ロード中か
        settings: ストア設定
        cart: カート行（複合キー → 行、挿入順を保持）
        selected_product: 選択中の商品
        notification: 表示中の通知
        orders: 注文一覧（管理者）
        new_orders_count: 新着注文数
        is_admin_authenticated: 管理者認証済みか
        admin_products: 管理用商品一覧の現在ページ
        admin_products_pagination: 管理用商品一覧のページ情報
        dashboard_stats: ダッシュボード統計
        contact_messages: 問い合わせ一覧
    """

    products: list[Product] = field(default_factory=list)
    full_products_loaded: bool = False
    loading: bool = True
    settings: StoreSettings = field(default_factory=lambda: DEFAULT_SETTINGS.model_copy(deep=True))
    cart: dict[CartKey, CartLine] = field(default_factory=dict)
    selected_product: Product | None = None
    notification: Notification | None = None
    orders: list[Order] = field(default_factory=list)
    new_orders_count: int = 0
    is_admin_authenticated: bool = False
    admin_products: list[Product] = field(default_factory=list)
    admin_products_pagination: AdminProductsPagination = field(
        default_factory=AdminProductsPagination
    )
    dashboard_stats: DashboardStats | None = None
    contact_messages: list[ContactMessage] = field(default_factory=list)

    @property
    def cart_lines(self) -> list[CartLine]:
        """カート行一覧（挿入順）."""
        return list(self.cart.values())

    @property
    def cart_total(self) -> float:
        """カート合計（Σ 単価 × 数量）."""
        return cart_total(self.cart_lines)

    @property
    def cart_count(self) -> int:
        """カート内の総数量."""
        return sum(line.quantity for line in self.cart.values())

    def snapshot(self) -> StorefrontState:
        """状態のディープコピーを返す."""
        return copy.deepcopy(self)
