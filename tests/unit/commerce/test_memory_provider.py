"""インメモリ API プロバイダーのテスト."""

import pytest

from storefront.commerce.models import CustomerDetails, OrderStatus, PaymentInfo
from storefront.commerce.providers import InMemoryStorefrontAPI, sample_catalog
from storefront.core.exceptions import AuthorizationError, NetworkError, NotFoundError


@pytest.fixture
def memory_api() -> InMemoryStorefrontAPI:
    """サンプルカタログ入りの API."""
    return InMemoryStorefrontAPI(products=sample_catalog())


class TestCatalog:
    """カタログ取得のテスト."""

    @pytest.mark.asyncio
    async def test_home_data_is_lite(self, memory_api: InMemoryStorefrontAPI) -> None:
        """ホームデータは新着・トレンドのみで画像1枚になること."""
        home = await memory_api.fetch_home_data()

        assert "104" not in [p.id for p in home.products]
        assert all(len(p.images) == 1 for p in home.products)
        assert home.settings is None

    @pytest.mark.asyncio
    async def test_fail_next(self, memory_api: InMemoryStorefrontAPI) -> None:
        """fail_next で指定回数だけ失敗すること."""
        memory_api.fail_next("fetch_all_products", NetworkError("offline"), times=2)

        for _ in range(2):
            with pytest.raises(NetworkError):
                await memory_api.fetch_all_products()

        assert len(await memory_api.fetch_all_products()) == 8
        assert memory_api.calls["fetch_all_products"] == 3


class TestAdmin:
    """管理者呼び出しのテスト."""

    @pytest.mark.asyncio
    async def test_login(self, memory_api: InMemoryStorefrontAPI) -> None:
        """正しい認証情報でトークンを返すこと."""
        token = await memory_api.login("admin@example.com", "secret")

        assert token
        with pytest.raises(AuthorizationError):
            await memory_api.login("admin@example.com", "nope")

    @pytest.mark.asyncio
    async def test_privileged_calls_require_token(self, memory_api: InMemoryStorefrontAPI) -> None:
        """トークンなし・失効済みでは認可エラーになること."""
        with pytest.raises(AuthorizationError):
            await memory_api.fetch_orders("")

        token = memory_api.issue_token()
        memory_api.revoke_tokens()

        with pytest.raises(AuthorizationError):
            await memory_api.fetch_messages(token)

    @pytest.mark.asyncio
    async def test_admin_products_pagination(self, memory_api: InMemoryStorefrontAPI) -> None:
        """管理用一覧が検索・ページングされること."""
        token = memory_api.issue_token()

        page = await memory_api.fetch_admin_products(1, "", token)
        assert page.total == 8
        assert page.pages == 1

        page = await memory_api.fetch_admin_products(1, "COTTON", token)
        assert [p.id for p in page.products] == ["104"]

    @pytest.mark.asyncio
    async def test_order_lifecycle(self, memory_api: InMemoryStorefrontAPI) -> None:
        """注文の作成・更新・削除ができること."""
        token = memory_api.issue_token()
        order = await memory_api.create_order(
            CustomerDetails(name="Rina", phone="017", address="Road 1"),
            [],
            3560,
            PaymentInfo(),
            60,
        )

        assert order.order_id == "1001"
        assert order.created_at is not None

        updated = await memory_api.update_order_status(order.id, OrderStatus.CONFIRMED, token)
        assert updated.status == OrderStatus.CONFIRMED

        stats = await memory_api.fetch_dashboard_stats(token)
        assert stats.total_orders == 1
        assert stats.total_revenue == 3560

        await memory_api.delete_order(order.id, token)
        with pytest.raises(NotFoundError):
            await memory_api.delete_order(order.id, token)

    @pytest.mark.asyncio
    async def test_update_settings_merges(self, memory_api: InMemoryStorefrontAPI) -> None:
        """部分更新が既存設定にマージされること."""
        token = memory_api.issue_token()

        await memory_api.update_settings({"contactPhone": "1"}, token)
        settings = await memory_api.update_settings({"contact_email": "a@b.c"}, token)

        assert settings.contact_phone == "1"
        assert settings.contact_email == "a@b.c"
