"""HTTP API プロバイダー.

httpx.AsyncClient による IStorefrontAPI 実装。
HTTP ステータスとトランスポート障害を型付き例外に変換する。

エラー変換:
- 401/403: AuthorizationError
- 404: NotFoundError
- 400/422: RemoteValidationError
- 5xx・接続失敗・タイムアウト・不正な応答: NetworkError
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

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
    Product,
    StoreSettings,
)
from storefront.config import StorefrontSettings
from storefront.core.exceptions import (
    AuthorizationError,
    NetworkError,
    NotFoundError,
    RemoteValidationError,
    StorefrontError,
)


logger = logging.getLogger(__name__)

_products_adapter = TypeAdapter(list[Product])
_orders_adapter = TypeAdapter(list[Order])
_messages_adapter = TypeAdapter(list[ContactMessage])


class HttpStorefrontAPI(IStorefrontAPI):
    """HTTP API クライアント.

    Example:
        >>> api = HttpStorefrontAPI("https://shop.example.com/api")
        >>> home = await api.fetch_home_data()
        >>> await api.aclose()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """初期化.

        Args:
            base_url: API のベース URL
            timeout: タイムアウト（秒）
            client: 既存の httpx クライアント（テスト用トランスポート注入など）
        """
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: StorefrontSettings) -> HttpStorefrontAPI:
        """設定のベース URL・タイムアウトからクライアントを作成."""
        return cls(settings.api_base_url, timeout=settings.request_timeout)

    async def aclose(self) -> None:
        """クライアントを閉じる."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpStorefrontAPI:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # =========================================================================
    # 内部処理
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """リクエストを送信し、JSON 応答を返す."""
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {method} {path}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {method} {path}: {e}") from e

        _raise_for_status(response, f"{method} {path}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid JSON response: {method} {path}") from e

    @staticmethod
    def _parse(adapter: Any, data: Any, what: str) -> Any:
        try:
            if isinstance(adapter, TypeAdapter):
                return adapter.validate_python(data)
            return adapter.model_validate(data)
        except PydanticValidationError as e:
            raise NetworkError(f"Malformed {what} payload: {e.error_count()} errors") from e

    # =========================================================================
    # カタログ
    # =========================================================================

    async def fetch_home_data(self) -> HomeData:
        """ホーム画面用ペイロードを取得."""
        data = await self._request("GET", "/page-data/home") or {}
        if not isinstance(data, dict):
            raise NetworkError("Malformed home payload: expected an object")
        settings = data.get("settings")
        return HomeData(
            settings=self._parse(StoreSettings, settings, "settings") if settings else None,
            products=self._parse(_products_adapter, data.get("products") or [], "products"),
        )

    async def fetch_all_products(self) -> list[Product]:
        """完全版カタログを取得."""
        data = await self._request("GET", "/products")
        return self._parse(_products_adapter, data or [], "products")

    async def fetch_admin_products(
        self,
        page: int,
        search: str,
        token: str,
    ) -> AdminProductsPage:
        """管理用商品一覧を取得."""
        data = await self._request(
            "GET",
            "/products/admin",
            token=token,
            params={"page": str(page), "search": search},
        )
        return self._parse(AdminProductsPage, data, "admin products")

    async def create_product(self, data: dict[str, Any], token: str) -> Product:
        """商品を作成."""
        created = await self._request("POST", "/products", token=token, json=data)
        return self._parse(Product, created, "product")

    async def update_product(self, product: Product, token: str) -> Product:
        """商品を更新."""
        saved = await self._request(
            "PUT", f"/products/{product.id}", token=token, json=product.to_wire()
        )
        return self._parse(Product, saved, "product")

    async def delete_product(self, product_id: str, token: str) -> None:
        """商品を削除."""
        await self._request("DELETE", f"/products/{product_id}", token=token)

    # =========================================================================
    # 注文
    # =========================================================================

    async def fetch_orders(self, token: str) -> list[Order]:
        """注文一覧を取得."""
        data = await self._request("GET", "/orders", token=token)
        return self._parse(_orders_adapter, data or [], "orders")

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        token: str,
    ) -> Order:
        """注文ステータスを更新."""
        data = await self._request(
            "PUT",
            f"/orders/{order_id}/status",
            token=token,
            json={"status": status.value},
        )
        return self._parse(Order, data, "order")

    async def delete_order(self, order_id: str, token: str) -> None:
        """注文を削除."""
        await self._request("DELETE", f"/orders/{order_id}", token=token)

    async def create_order(
        self,
        customer: CustomerDetails,
        line_items: list[CartLine],
        total: float,
        payment_info: PaymentInfo,
        shipping_charge: float,
    ) -> Order:
        """注文を作成."""
        data = await self._request(
            "POST",
            "/orders",
            json={
                "customerDetails": customer.to_wire(),
                "cartItems": [line.to_wire() for line in line_items],
                "total": total,
                "paymentInfo": payment_info.to_wire(),
                "shippingCharge": shipping_charge,
            },
        )
        return self._parse(Order, data, "order")

    async def fetch_dashboard_stats(self, token: str) -> DashboardStats:
        """ダッシュボード統計を取得."""
        data = await self._request("GET", "/orders/stats", token=token)
        return self._parse(DashboardStats, data, "stats")

    # =========================================================================
    # 設定・認証
    # =========================================================================

    async def update_settings(self, partial: dict[str, Any], token: str) -> StoreSettings:
        """設定を更新."""
        data = await self._request(
            "PUT",
            "/settings",
            token=token,
            json=StoreSettings.normalize_keys(partial),
        )
        return self._parse(StoreSettings, data, "settings")

    async def login(self, email: str, password: str) -> str:
        """ログイン."""
        data = await self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        token = data.get("token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise NetworkError("Login response did not contain a token")
        return token

    # =========================================================================
    # 問い合わせ
    # =========================================================================

    async def fetch_messages(self, token: str) -> list[ContactMessage]:
        """問い合わせ一覧を取得."""
        data = await self._request("GET", "/messages", token=token)
        return self._parse(_messages_adapter, data or [], "messages")

    async def create_message(self, data: dict[str, Any]) -> None:
        """問い合わせを送信."""
        await self._request("POST", "/messages", json=data)

    async def update_message_read(
        self,
        message_id: str,
        is_read: bool,
        token: str,
    ) -> ContactMessage:
        """既読状態を更新."""
        data = await self._request(
            "PUT",
            f"/messages/{message_id}/read",
            token=token,
            json={"isRead": is_read},
        )
        return self._parse(ContactMessage, data, "message")

    async def delete_message(self, message_id: str, token: str) -> None:
        """問い合わせを削除."""
        await self._request("DELETE", f"/messages/{message_id}", token=token)


def _raise_for_status(response: httpx.Response, what: str) -> None:
    """エラーステータスを型付き例外に変換."""
    status = response.status_code
    if status < 400:
        return

    message = _error_message(response) or f"{what} failed with HTTP {status}"
    logger.debug(f"API error {status} for {what}: {message}")

    if status in (401, 403):
        raise AuthorizationError(message)
    if status == 404:
        raise NotFoundError(what)
    if status in (400, 422):
        raise RemoteValidationError(message)
    if status >= 500:
        raise NetworkError(message)
    raise StorefrontError(message)


def _error_message(response: httpx.Response) -> str | None:
    """応答本文の ``message`` フィールドを取り出す."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None
