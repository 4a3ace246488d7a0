"""カートエンジンのテスト."""

import pytest

from conftest import make_product
from storefront.analytics import DataLayerSink
from storefront.commerce.models import CartKey
from storefront.core.exceptions import ValidationError
from storefront.state.cart import CartChangeKind, CartEngine


@pytest.fixture
def engine(sink: DataLayerSink) -> CartEngine:
    """テスト用カートエンジン."""
    return CartEngine(event_sink=sink)


class TestAddItem:
    """add_item のテスト."""

    def test_add_new_line_snapshots_price(self, engine: CartEngine) -> None:
        """新しい行が価格スナップショット付きで追加されること."""
        product = make_product("7", price=1500)

        change = engine.add_item(product, 2, "M")
        product.price = 9999

        assert change.kind == CartChangeKind.ADDED
        line = engine.get("7", "M")
        assert line is not None
        assert line.price == 1500
        assert line.quantity == 2
        assert line.name == "Product 7"
        assert line.image == "https://img.example/7/1.jpg"
        assert engine.total == 3000

    def test_same_key_increments_quantity(self, engine: CartEngine) -> None:
        """同じキーの追加で数量が加算されること."""
        product = make_product("7", price=1500)

        engine.add_item(product, 1, "M")
        change = engine.add_item(product, 2, "M")

        assert change.kind == CartChangeKind.UPDATED
        assert len(engine.lines) == 1
        assert engine.lines[0].quantity == 3

    def test_different_size_is_separate_line(self, engine: CartEngine) -> None:
        """サイズ違いは別の行になること."""
        product = make_product("7")

        engine.add_item(product, 1, "M")
        engine.add_item(product, 1, "L")

        assert [line.key for line in engine.lines] == [CartKey("7", "M"), CartKey("7", "L")]

    @pytest.mark.parametrize("variant", [None, ""])
    def test_missing_variant_raises(self, engine: CartEngine, sink: DataLayerSink, variant) -> None:
        """サイズ未選択で ValidationError が送出され、状態が変わらないこと."""
        with pytest.raises(ValidationError, match="Please select a size."):
            engine.add_item(make_product("7"), 1, variant)

        assert engine.lines == []
        assert sink.events == []

    def test_zero_quantity_rejected(self, engine: CartEngine) -> None:
        """数量0の追加は拒否されること."""
        with pytest.raises(ValidationError):
            engine.add_item(make_product("7"), 0, "M")

    def test_emits_add_to_cart_with_delta(self, engine: CartEngine, sink: DataLayerSink) -> None:
        """追加数量を持つ add_to_cart イベントが出力されること."""
        product = make_product("7", price=1500, category="Silk")
        engine.add_item(product, 1, "M")
        engine.add_item(product, 2, "M")

        assert sink.names() == ["add_to_cart", "add_to_cart"]
        last = sink.events[-1].to_dict()
        assert last["ecommerce"]["currency"] == "BDT"
        assert last["ecommerce"]["items"] == [
            {
                "item_id": "7",
                "item_name": "Product 7",
                "item_category": "Silk",
                "price": 1500,
                "quantity": 2,
                "item_variant": "M",
            }
        ]


class TestSetQuantity:
    """set_quantity のテスト."""

    def test_increase_emits_add(self, engine: CartEngine, sink: DataLayerSink) -> None:
        """増加時に差分の add_to_cart が出力されること."""
        product = make_product("7")
        engine.add_item(product, 1, "M")
        sink.clear()

        change = engine.set_quantity("7", "M", 4, product)

        assert change.kind == CartChangeKind.UPDATED
        assert change.delta == 3
        assert sink.names() == ["add_to_cart"]
        assert sink.events[0].data["ecommerce"]["items"][0]["quantity"] == 3

    def test_decrease_emits_remove(self, engine: CartEngine, sink: DataLayerSink) -> None:
        """減少時に remove_from_cart が出力されること."""
        engine.add_item(make_product("7"), 5, "M")
        sink.clear()

        change = engine.set_quantity("7", "M", 2)

        assert change.delta == -3
        assert sink.names() == ["remove_from_cart"]
        assert sink.events[0].data["ecommerce"]["items"][0]["quantity"] == 3
        assert engine.get("7", "M").quantity == 2

    def test_zero_removes_line_and_is_idempotent(
        self, engine: CartEngine, sink: DataLayerSink
    ) -> None:
        """0 で行が削除され、再実行は何もしないこと."""
        engine.add_item(make_product("7"), 2, "M")
        sink.clear()

        first = engine.set_quantity("7", "M", 0)
        second = engine.set_quantity("7", "M", 0)

        assert first.kind == CartChangeKind.REMOVED
        assert second.kind == CartChangeKind.UNCHANGED
        assert engine.lines == []
        assert sink.names() == ["remove_from_cart"]

    def test_negative_quantity_removes_line(self, engine: CartEngine) -> None:
        """負数でも行が削除されること."""
        engine.add_item(make_product("7"), 2, "M")

        engine.set_quantity("7", "M", -3)

        assert engine.get("7", "M") is None

    def test_missing_line_no_event(self, engine: CartEngine, sink: DataLayerSink) -> None:
        """存在しない行ではイベントも変更もないこと."""
        change = engine.set_quantity("404", "M", 3)

        assert change.kind == CartChangeKind.UNCHANGED
        assert change.line is None
        assert sink.events == []

    def test_same_quantity_no_event(self, engine: CartEngine, sink: DataLayerSink) -> None:
        """数量が変わらない場合はイベントを出さないこと."""
        engine.add_item(make_product("7"), 2, "M")
        sink.clear()

        change = engine.set_quantity("7", "M", 2)

        assert change.kind == CartChangeKind.UNCHANGED
        assert sink.events == []


class TestTotal:
    """合計のテスト."""

    def test_total_matches_fold_over_any_sequence(self, engine: CartEngine) -> None:
        """任意の操作列の後も合計が Σ 単価 × 数量 と一致すること."""
        a = make_product("1", price=250)
        b = make_product("2", price=1200.5)
        c = make_product("3", price=80)

        engine.add_item(a, 2, "S")
        engine.add_item(b, 1, "M")
        engine.add_item(a, 3, "S")
        engine.set_quantity("2", "M", 4)
        engine.add_item(c, 1, "L")
        engine.set_quantity("3", "L", 0)
        engine.add_item(a, 1, "M")
        engine.set_quantity("1", "S", 1)

        expected = sum(line.price * line.quantity for line in engine.lines)
        assert engine.total == pytest.approx(expected)
        assert engine.total == pytest.approx(250 + 1200.5 * 4 + 250)

    def test_clear_and_replace(self, engine: CartEngine) -> None:
        """clear で空になり、replace で同一キーは後勝ちになること."""
        product = make_product("7", price=100)
        engine.add_item(product, 1, "M")
        engine.clear()
        assert engine.total == 0

        first = product.model_copy(update={"price": 100})
        engine.add_item(first, 1, "M")
        line = engine.get("7", "M")
        engine.replace([line, line.model_copy(update={"quantity": 5})])

        assert len(engine.lines) == 1
        assert engine.total == 500
