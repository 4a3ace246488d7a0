"""永続化アダプターのテスト."""

import json
from pathlib import Path

import pytest

from conftest import make_product
from storefront.commerce.models import CartLine, StoreSettings
from storefront.state.models import StorefrontState
from storefront.state.persistence import PersistenceAdapter, sanitize_cart
from storefront.storage import FileStorage, MemoryStorage


@pytest.fixture
def adapter(storage: MemoryStorage) -> PersistenceAdapter:
    """テスト用アダプター."""
    return PersistenceAdapter(storage)


def _write(storage: MemoryStorage, blob) -> None:
    storage.set_item("sazo-storage", json.dumps(blob))


class TestSave:
    """save のテスト."""

    def test_writes_only_persisted_slice(
        self, adapter: PersistenceAdapter, storage: MemoryStorage
    ) -> None:
        """cart / settings / products のみが保存されること."""
        line = CartLine(product_id="7", size="M", price=1500, quantity=2)
        state = StorefrontState(
            products=[make_product("7")],
            cart={line.key: line},
            loading=False,
            selected_product=make_product("7"),
            is_admin_authenticated=True,
        )

        adapter.save(state)

        blob = json.loads(storage.get_item("sazo-storage"))
        assert set(blob) == {"cart", "settings", "products"}
        assert blob["cart"][0]["id"] == "7"
        assert blob["settings"]["homepageTrendingCount"] == 4
        assert "cartTotal" not in blob


class TestLoad:
    """load のテスト."""

    def test_round_trip(self, adapter: PersistenceAdapter) -> None:
        """保存・復元で同じカートが得られ、合計が 3000 になること."""
        line = CartLine(product_id="7", size="M", price=1500, quantity=2)
        adapter.save(StorefrontState(cart={line.key: line}))

        restored = adapter.load(StorefrontState(products=[make_product("1")]))

        assert restored.restored is True
        assert restored.cart == [line]
        assert restored.total == 3000

    def test_corrupt_entry_dropped(self, adapter: PersistenceAdapter, storage: MemoryStorage) -> None:
        """価格が数値でない行は捨てられ、残りで合計が計算されること."""
        _write(
            storage,
            {
                "cart": [
                    {"id": "7", "price": "bad", "quantity": 2},
                    {"id": "8", "size": "L", "price": 500, "quantity": 3},
                ],
                "cartTotal": 999999,
            },
        )

        restored = adapter.load()

        assert [line.product_id for line in restored.cart] == ["8"]
        assert restored.total == 1500

    @pytest.mark.parametrize(
        "entry",
        [
            None,
            "7",
            {"id": 7, "price": 10, "quantity": 1},
            {"id": "7", "price": True, "quantity": 1},
            {"id": "7", "price": 10, "quantity": "2"},
            {"id": "7", "price": 10},
            {"id": "7", "price": 10, "quantity": 0},
            {"id": "7", "price": -5, "quantity": 1},
        ],
    )
    def test_invalid_cart_entries(self, entry) -> None:
        """不正なカート行は全て捨てられること."""
        assert sanitize_cart([entry]) == []

    def test_nan_price_dropped(self, adapter: PersistenceAdapter, storage: MemoryStorage) -> None:
        """NaN の価格は捨てられること."""
        storage.set_item(
            "sazo-storage",
            '{"cart": [{"id": "7", "price": NaN, "quantity": 1}]}',
        )

        assert adapter.load().cart == []

    def test_duplicate_keys_later_wins(self) -> None:
        """同じキーの行は後の行が優先されること."""
        cart = sanitize_cart(
            [
                {"id": "7", "size": "M", "price": 10, "quantity": 1},
                {"id": "7", "size": "M", "price": 10, "quantity": 4},
            ]
        )

        assert len(cart) == 1
        assert cart[0].quantity == 4

    def test_missing_blob_keeps_defaults(self, adapter: PersistenceAdapter) -> None:
        """保存値がない場合は既定値を返すこと."""
        defaults = StorefrontState(products=[make_product("1")])

        restored = adapter.load(defaults)

        assert restored.restored is False
        assert [p.id for p in restored.products] == ["1"]
        assert restored.cart == []

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2, 3]", '"text"', "null"])
    def test_malformed_blob_discarded(
        self,
        adapter: PersistenceAdapter,
        storage: MemoryStorage,
        caplog: pytest.LogCaptureFixture,
        raw: str,
    ) -> None:
        """壊れた保存値は捨てられ、警告ログのみ出力されること."""
        storage.set_item("sazo-storage", raw)

        restored = adapter.load(StorefrontState(products=[make_product("1")]))

        assert restored.restored is False
        assert [p.id for p in restored.products] == ["1"]
        assert "Discarding persisted state" in caplog.text

    def test_settings_and_products_shallow_override(
        self, adapter: PersistenceAdapter, storage: MemoryStorage
    ) -> None:
        """設定・商品は保存値が優先され、不正な商品は個別に捨てられること."""
        _write(
            storage,
            {
                "settings": {"contactPhone": "123", "adminPassword": "leak"},
                "products": [
                    make_product("5").to_wire(),
                    {"id": "6"},
                ],
            },
        )

        restored = adapter.load(StorefrontState(products=[make_product("1")]))

        assert restored.settings.contact_phone == "123"
        assert not hasattr(restored.settings, "admin_password")
        assert [p.id for p in restored.products] == ["5"]
        assert restored.cart == []

    def test_invalid_settings_fall_back(
        self, adapter: PersistenceAdapter, storage: MemoryStorage
    ) -> None:
        """不正な設定は既定値に戻ること."""
        _write(storage, {"settings": {"homepageTrendingCount": "many"}})
        defaults = StorefrontState(settings=StoreSettings(contact_email="a@b.c"))

        restored = adapter.load(defaults)

        assert restored.settings.contact_email == "a@b.c"

    def test_infinite_price_dropped(self, adapter: PersistenceAdapter, storage: MemoryStorage) -> None:
        """無限大の価格・数量は捨てられ、合計が有限のままであること."""
        storage.set_item(
            "sazo-storage",
            '{"cart": [{"id": "7", "size": "M", "price": Infinity, "quantity": 1},'
            ' {"id": "8", "size": "M", "price": 10, "quantity": Infinity},'
            ' {"id": "9", "size": "M", "price": 10, "quantity": 2}]}',
        )

        restored = adapter.load()

        assert [line.product_id for line in restored.cart] == ["9"]
        assert restored.total == 20

    def test_undecodable_bytes_discarded(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """UTF-8 として読めない保存値は捨てられ、既定値を返すこと."""
        storage = FileStorage(tmp_path)
        storage.set_item("sazo-storage", "{}")
        next(tmp_path.glob("*.json")).write_bytes(b'{"cart": "\xff\xfe"}')

        restored = PersistenceAdapter(storage).load(
            StorefrontState(products=[make_product("1")])
        )

        assert restored.restored is False
        assert [p.id for p in restored.products] == ["1"]
        assert "Discarding persisted state" in caplog.text
