"""HTTP API プロバイダーのテスト."""

import json

import httpx
import pytest

from storefront.commerce.models import OrderStatus
from storefront.commerce.providers import HttpStorefrontAPI
from storefront.config import StorefrontSettings
from storefront.core.exceptions import (
    AuthorizationError,
    NetworkError,
    NotFoundError,
    RemoteValidationError,
)


BASE_URL = "https://shop.example.com/api"


def _api(handler) -> HttpStorefrontAPI:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpStorefrontAPI(BASE_URL, client=client)


class TestRequests:
    """リクエスト組み立てのテスト."""

    @pytest.mark.asyncio
    async def test_fetch_home_data(self) -> None:
        """ホームデータが設定と商品に変換されること."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "settings": {"contactPhone": "123", "homepageTrendingCount": 6},
                    "products": [{"id": "1", "name": "A", "price": 10, "isTrending": True}],
                },
            )

        async with _api(handler) as api:
            home = await api.fetch_home_data()

        assert seen[0].url.path == "/api/page-data/home"
        assert home.settings.contact_phone == "123"
        assert home.settings.homepage_trending_count == 6
        assert home.products[0].is_trending is True

    @pytest.mark.asyncio
    async def test_home_without_settings(self) -> None:
        """設定がない応答では settings が None になること."""
        api = _api(lambda request: httpx.Response(200, json={"products": []}))

        home = await api.fetch_home_data()

        assert home.settings is None
        assert home.products == []

    @pytest.mark.asyncio
    async def test_bearer_token_sent(self) -> None:
        """管理者呼び出しで Bearer トークンが付与されること."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "o1", "status": "Shipped"})

        order = await _api(handler).update_order_status("o1", OrderStatus.SHIPPED, "tok")

        request = seen[0]
        assert request.method == "PUT"
        assert request.url.path == "/api/orders/o1/status"
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {"status": "Shipped"}
        assert order.status == OrderStatus.SHIPPED

    @pytest.mark.asyncio
    async def test_admin_products_query(self) -> None:
        """ページ・検索語がクエリに含まれること."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"products": [], "page": 2, "pages": 3, "total": 25})

        page = await _api(handler).fetch_admin_products(2, "silk", "tok")

        assert seen[0].url.params["page"] == "2"
        assert seen[0].url.params["search"] == "silk"
        assert page.pages == 3

    @pytest.mark.asyncio
    async def test_settings_update_uses_wire_keys(self) -> None:
        """設定の部分更新が camelCase で送信されること."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"contactPhone": "999"})

        settings = await _api(handler).update_settings({"contact_phone": "999"}, "tok")

        assert seen == [{"contactPhone": "999"}]
        assert settings.contact_phone == "999"

    @pytest.mark.asyncio
    async def test_login_returns_token(self) -> None:
        """ログイン応答からトークンを取り出すこと."""
        api = _api(lambda request: httpx.Response(200, json={"token": "abc"}))

        assert await api.login("admin@example.com", "secret") == "abc"

    @pytest.mark.asyncio
    async def test_login_without_token(self) -> None:
        """トークンのない応答は NetworkError になること."""
        api = _api(lambda request: httpx.Response(200, json={"ok": True}))

        with pytest.raises(NetworkError):
            await api.login("admin@example.com", "secret")

    @pytest.mark.asyncio
    async def test_delete_with_empty_body(self) -> None:
        """本文のない応答を受け付けること."""
        api = _api(lambda request: httpx.Response(204))

        assert await api.delete_message("m1", "tok") is None


class TestErrorMapping:
    """エラー変換のテスト."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (401, AuthorizationError),
            (403, AuthorizationError),
            (404, NotFoundError),
            (400, RemoteValidationError),
            (422, RemoteValidationError),
            (500, NetworkError),
            (503, NetworkError),
        ],
    )
    async def test_status_codes(self, status: int, error: type) -> None:
        """HTTP ステータスが型付き例外に変換されること."""
        api = _api(lambda request: httpx.Response(status, json={"message": "nope"}))

        with pytest.raises(error):
            await api.fetch_orders("tok")

    @pytest.mark.asyncio
    async def test_message_from_body(self) -> None:
        """応答本文の message が例外メッセージになること."""
        api = _api(
            lambda request: httpx.Response(400, json={"message": "Phone is required"})
        )

        with pytest.raises(RemoteValidationError, match="Phone is required"):
            await api.create_message({"name": "Rina"})

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        """接続失敗は NetworkError になること."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError):
            await _api(handler).fetch_all_products()

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """タイムアウトは NetworkError になること."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(NetworkError, match="timed out"):
            await _api(handler).fetch_all_products()

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        """JSON でない応答は NetworkError になること."""
        api = _api(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(NetworkError, match="Invalid JSON"):
            await api.fetch_all_products()

    @pytest.mark.asyncio
    async def test_malformed_payload(self) -> None:
        """モデルに合わない応答は NetworkError になること."""
        api = _api(lambda request: httpx.Response(200, json=[{"name": "no id"}]))

        with pytest.raises(NetworkError, match="Malformed products"):
            await api.fetch_all_products()

    @pytest.mark.asyncio
    async def test_home_payload_must_be_object(self) -> None:
        """ホームデータが配列の場合は NetworkError になること."""
        api = _api(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(NetworkError, match="expected an object"):
            await api.fetch_home_data()

    @pytest.mark.asyncio
    async def test_undecodable_body(self) -> None:
        """復号できない応答本文は NetworkError になること."""
        api = _api(
            lambda request: httpx.Response(
                200, headers={"content-encoding": "gzip"}, content=b"not-gzip"
            )
        )

        with pytest.raises(NetworkError):
            await api.fetch_home_data()


class TestFromSettings:
    """from_settings のテスト."""

    @pytest.mark.asyncio
    async def test_uses_base_url_and_timeout(self) -> None:
        """設定のベース URL・タイムアウトが使われること."""
        settings = StorefrontSettings(
            api_base_url="https://shop.example.com/api", request_timeout=5.0
        )

        async with HttpStorefrontAPI.from_settings(settings) as api:
            client = api._client

            assert str(client.base_url) == "https://shop.example.com/api/"
            assert client.timeout.read == 5.0
