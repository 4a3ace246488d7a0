"""インメモリ API プロバイダー.

テスト・開発用の IStorefrontAPI 参照実装。
障害注入（fail_next）で各種エラー経路を再現できる。
"""

from __future__ import annotations

import itertools
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from storefront.commerce.interfaces import HomeData, IStorefrontAPI
from storefront.commerce.models import (
    AdminProductsPage,
    CartLine,
    ContactMessage,
    CustomerDetails,
    DashboardStats,
    Order,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    Product,
    StoreSettings,
)
from storefront.core.exceptions import AuthorizationError, NotFoundError


ADMIN_PAGE_SIZE = 10


class InMemoryStorefrontAPI(IStorefrontAPI):
    """インメモリ API.

    Example:
        >>> api = InMemoryStorefrontAPI(products=[Product(id="1", name="A", price=10)])
        >>> api.fail_next("fetch_all_products", NetworkError("offline"))
        >>> products = await api.fetch_all_products()  # NetworkError
    """

    def __init__(
        self,
        products: list[Product] | None = None,
        settings: StoreSettings | None = None,
        orders: list[Order] | None = None,
        messages: list[ContactMessage] | None = None,
        admin_email: str = "admin@example.com",
        admin_password: str = "secret",
    ) -> None:
        """初期化."""
        self._products: dict[str, Product] = {p.id: p for p in products or []}
        self._settings = settings
        self._orders: dict[str, Order] = {o.id: o for o in orders or []}
        self._messages: dict[str, ContactMessage] = {m.id: m for m in messages or []}
        self._admin_email = admin_email
        self._admin_password = admin_password
        self._tokens: set[str] = set()
        self._failures: dict[str, list[Exception]] = {}
        self._order_codes = itertools.count(1001)
        self.calls: Counter[str] = Counter()

    # =========================================================================
    # テスト補助
    # =========================================================================

    def fail_next(self, method: str, error: Exception, times: int = 1) -> None:
        """次回以降の呼び出しで例外を送出させる.

        Args:
            method: メソッド名
            error: 送出する例外
            times: 失敗させる回数
        """
        self._failures.setdefault(method, []).extend([error] * times)

    def issue_token(self) -> str:
        """有効なトークンを発行."""
        token = uuid.uuid4().hex
        self._tokens.add(token)
        return token

    def revoke_tokens(self) -> None:
        """全トークンを失効させる."""
        self._tokens.clear()

    def _enter(self, method: str) -> None:
        self.calls[method] += 1
        pending = self._failures.get(method)
        if pending:
            raise pending.pop(0)

    def _authorize(self, token: str) -> None:
        if token not in self._tokens:
            raise AuthorizationError("Not authorized, token failed")

    # =========================================================================
    # カタログ
    # =========================================================================

    async def fetch_home_data(self) -> HomeData:
        """ホーム画面用ペイロードを取得."""
        self._enter("fetch_home_data")
        products = [
            p.to_lite()
            for p in self._products.values()
            if p.is_new_arrival or p.is_trending
        ]
        return HomeData(settings=self._settings, products=products)

    async def fetch_all_products(self) -> list[Product]:
        """完全版カタログを取得."""
        self._enter("fetch_all_products")
        return [p.model_copy(deep=True) for p in self._products.values()]

    async def fetch_admin_products(
        self,
        page: int,
        search: str,
        token: str,
    ) -> AdminProductsPage:
        """管理用商品一覧を取得."""
        self._enter("fetch_admin_products")
        self._authorize(token)
        term = search.lower()
        matched = [p for p in self._products.values() if term in p.name.lower()]
        pages = -(-len(matched) // ADMIN_PAGE_SIZE)
        start = (page - 1) * ADMIN_PAGE_SIZE
        return AdminProductsPage(
            products=matched[start:start + ADMIN_PAGE_SIZE],
            page=page,
            pages=pages,
            total=len(matched),
        )

    async def create_product(self, data: dict[str, Any], token: str) -> Product:
        """商品を作成."""
        self._enter("create_product")
        self._authorize(token)
        product = Product.model_validate({**data, "id": uuid.uuid4().hex[:24]})
        self._products[product.id] = product
        return product

    async def update_product(self, product: Product, token: str) -> Product:
        """商品を更新."""
        self._enter("update_product")
        self._authorize(token)
        if product.id not in self._products:
            raise NotFoundError(f"product {product.id}")
        self._products[product.id] = product
        return product

    async def delete_product(self, product_id: str, token: str) -> None:
        """商品を削除."""
        self._enter("delete_product")
        self._authorize(token)
        if self._products.pop(product_id, None) is None:
            raise NotFoundError(f"product {product_id}")

    # =========================================================================
    # 注文
    # =========================================================================

    async def fetch_orders(self, token: str) -> list[Order]:
        """注文一覧を取得（新しい順）."""
        self._enter("fetch_orders")
        self._authorize(token)
        return list(reversed(self._orders.values()))

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        token: str,
    ) -> Order:
        """注文ステータスを更新."""
        self._enter("update_order_status")
        self._authorize(token)
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError(f"order {order_id}")
        updated = order.model_copy(update={"status": status})
        self._orders[order_id] = updated
        return updated

    async def delete_order(self, order_id: str, token: str) -> None:
        """注文を削除."""
        self._enter("delete_order")
        self._authorize(token)
        if self._orders.pop(order_id, None) is None:
            raise NotFoundError(f"order {order_id}")

    async def create_order(
        self,
        customer: CustomerDetails,
        line_items: list[CartLine],
        total: float,
        payment_info: PaymentInfo,
        shipping_charge: float,
    ) -> Order:
        """注文を作成."""
        self._enter("create_order")
        now = datetime.now(timezone.utc)
        order = Order(
            id=uuid.uuid4().hex[:24],
            order_id=str(next(self._order_codes)),
            customer_name=customer.name,
            phone=customer.phone,
            address=customer.address,
            city=customer.city,
            cart_items=list(line_items),
            total=total,
            shipping_charge=shipping_charge,
            date=now.isoformat(),
            created_at=now,
            payment_method=payment_info.payment_method,
            payment_details=payment_info.payment_details,
        )
        self._orders[order.id] = order
        return order

    async def fetch_dashboard_stats(self, token: str) -> DashboardStats:
        """ダッシュボード統計を取得."""
        self._enter("fetch_dashboard_stats")
        self._authorize(token)
        orders = list(self._orders.values())
        return DashboardStats(
            total_orders=len(orders),
            online_transactions=sum(
                1 for o in orders if o.payment_method == PaymentMethod.ONLINE
            ),
            total_revenue=sum(
                o.total for o in orders if o.status != OrderStatus.CANCELLED
            ),
            total_products=len(self._products),
        )

    # =========================================================================
    # 設定・認証
    # =========================================================================

    async def update_settings(self, partial: dict[str, Any], token: str) -> StoreSettings:
        """設定を更新."""
        self._enter("update_settings")
        self._authorize(token)
        self._settings = (self._settings or StoreSettings()).merged(partial)
        return self._settings

    async def login(self, email: str, password: str) -> str:
        """ログイン."""
        self._enter("login")
        if email != self._admin_email or password != self._admin_password:
            raise AuthorizationError("Invalid email or password")
        return self.issue_token()

    # =========================================================================
    # 問い合わせ
    # =========================================================================

    async def fetch_messages(self, token: str) -> list[ContactMessage]:
        """問い合わせ一覧を取得."""
        self._enter("fetch_messages")
        self._authorize(token)
        return list(self._messages.values())

    async def create_message(self, data: dict[str, Any]) -> None:
        """問い合わせを送信."""
        self._enter("create_message")
        message = ContactMessage.model_validate(
            {
                **data,
                "id": uuid.uuid4().hex[:24],
                "date": datetime.now(timezone.utc).isoformat(),
                "isRead": False,
            }
        )
        self._messages[message.id] = message

    async def update_message_read(
        self,
        message_id: str,
        is_read: bool,
        token: str,
    ) -> ContactMessage:
        """既読状態を更新."""
        self._enter("update_message_read")
        self._authorize(token)
        message = self._messages.get(message_id)
        if message is None:
            raise NotFoundError(f"message {message_id}")
        updated = message.model_copy(update={"is_read": is_read})
        self._messages[message_id] = updated
        return updated

    async def delete_message(self, message_id: str, token: str) -> None:
        """問い合わせを削除."""
        self._enter("delete_message")
        self._authorize(token)
        if self._messages.pop(message_id, None) is None:
            raise NotFoundError(f"message {message_id}")
