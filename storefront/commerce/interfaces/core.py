# -*- coding: utf-8 -*-
"""ネットワークポート抽象インターフェース.

状態コンテナがリモート API を呼び出すための抽象ポート。
HTTP/CRUD バックエンドの実装詳細には依存しない。

設計原則:
- 非同期優先（async/await）
- 失敗は storefront.core.exceptions の型付き例外で表現
  （NetworkError / NotFoundError / ValidationError / AuthorizationError）
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from storefront.commerce.models import (
        AdminProductsPage,
        CartLine,
        ContactMessage,
        CustomerDetails,
        DashboardStats,
        Order,
        OrderStatus,
        PaymentInfo,
        Product,
        StoreSettings,
    )


@dataclass
class HomeData:
    """ホーム画面用ペイロード.

    Attributes:
        settings: ストア設定（未設定の場合None）
        products: ライト版商品一覧（新着・トレンドのみ、画像1枚）
    """

    settings: StoreSettings | None = None
    products: list[Product] = field(default_factory=list)


class IStorefrontAPI(ABC):
    """ストアフロント API ポート.

    実装例: HttpStorefrontAPI, InMemoryStorefrontAPI

    Example:
        >>> class MyAPI(IStorefrontAPI):
        ...     async def fetch_all_products(self) -> list[Product]:
        ...         return await self.db.all()
    """

    # =========================================================================
    # カタログ
    # =========================================================================

    @abstractmethod
    async def fetch_home_data(self) -> HomeData:
        """ホーム画面用のライトペイロードを取得.

        Returns:
            設定とライト版商品一覧
        """

    @abstractmethod
    async def fetch_all_products(self) -> list[Product]:
        """完全版カタログを取得.

        Returns:
            全商品（全画像付き）
        """

    @abstractmethod
    async def fetch_admin_products(
        self,
        page: int,
        search: str,
        token: str,
    ) -> AdminProductsPage:
        """管理用商品一覧を取得.

        Args:
            page: ページ番号（1始まり）
            search: 商品名検索語
            token: 認証トークン

        Returns:
            商品ページ
        """

    @abstractmethod
    async def create_product(self, data: dict[str, Any], token: str) -> Product:
        """商品を作成."""

    @abstractmethod
    async def update_product(self, product: Product, token: str) -> Product:
        """商品を更新."""

    @abstractmethod
    async def delete_product(self, product_id: str, token: str) -> None:
        """商品を削除."""

    # =========================================================================
    # 注文
    # =========================================================================

    @abstractmethod
    async def fetch_orders(self, token: str) -> list[Order]:
        """注文一覧を取得.

        Args:
            token: 認証トークン

        Returns:
            注文一覧
        """

    @abstractmethod
    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        token: str,
    ) -> Order:
        """注文ステータスを更新.

        Args:
            order_id: 注文ID
            status: 新しいステータス
            token: 認証トークン

        Returns:
            更新後の注文
        """

    @abstractmethod
    async def delete_order(self, order_id: str, token: str) -> None:
        """注文を削除."""

    @abstractmethod
    async def create_order(
        self,
        customer: CustomerDetails,
        line_items: list[CartLine],
        total: float,
        payment_info: PaymentInfo,
        shipping_charge: float,
    ) -> Order:
        """注文を作成（チェックアウト）.

        Args:
            customer: 顧客連絡先
            line_items: カート行
            total: 合計金額
            payment_info: 支払い情報
            shipping_charge: 配送料

        Returns:
            作成された注文
        """

    @abstractmethod
    async def fetch_dashboard_stats(self, token: str) -> DashboardStats:
        """ダッシュボード統計を取得."""

    # =========================================================================
    # 設定・認証
    # =========================================================================

    @abstractmethod
    async def update_settings(self, partial: dict[str, Any], token: str) -> StoreSettings:
        """設定を更新.

        Args:
            partial: 更新フィールド
            token: 認証トークン

        Returns:
            更新後の設定全体
        """

    @abstractmethod
    async def login(self, email: str, password: str) -> str:
        """ログイン.

        Args:
            email: メールアドレス
            password: パスワード

        Returns:
            認証トークン
        """

    # =========================================================================
    # 問い合わせ
    # =========================================================================

    @abstractmethod
    async def fetch_messages(self, token: str) -> list[ContactMessage]:
        """問い合わせ一覧を取得."""

    @abstractmethod
    async def create_message(self, data: dict[str, Any]) -> None:
        """問い合わせを送信."""

    @abstractmethod
    async def update_message_read(
        self,
        message_id: str,
        is_read: bool,
        token: str,
    ) -> ContactMessage:
        """既読状態を更新."""

    @abstractmethod
    async def delete_message(self, message_id: str, token: str) -> None:
        """問い合わせを削除."""
