"""表示順序エンジンのテスト."""

import pytest

from conftest import make_product
from storefront.state.ordering import (
    UNPINNED,
    Pinned,
    Rail,
    placement_of,
    rail_products,
    sort_for_display,
)


def _new_arrival(product_id: str, order: int | None = 1000):
    return make_product(product_id, is_new_arrival=True, new_arrival_display_order=order)


class TestPlacement:
    """配置ヒントの解釈のテスト."""

    @pytest.mark.parametrize("hint", [None, 0, 1000, 1500])
    def test_unpinned_hints(self, hint) -> None:
        """0・未設定・閾値以上は Unpinned になること."""
        assert placement_of(_new_arrival("1", hint), Rail.NEW_ARRIVALS) is UNPINNED

    def test_pinned_hint(self) -> None:
        """閾値未満は Pinned になること."""
        assert placement_of(_new_arrival("1", 3), Rail.NEW_ARRIVALS) == Pinned(3)

    def test_rails_read_independent_hints(self) -> None:
        """レールごとに別の配置ヒントを読むこと."""
        product = make_product("1", new_arrival_display_order=2, trending_display_order=1000)

        assert placement_of(product, Rail.NEW_ARRIVALS) == Pinned(2)
        assert placement_of(product, Rail.TRENDING) is UNPINNED


class TestSortForDisplay:
    """sort_for_display のテスト."""

    def test_pinned_interleave_example(self) -> None:
        """A:1, B:未固定(10), C:未固定(20), D:2 が [A, D, C, B] になること."""
        a = _new_arrival("A", 1)
        b = _new_arrival("10", None)
        c = _new_arrival("20", 0)
        d = _new_arrival("D", 2)

        result = sort_for_display([a, b, c, d], Rail.NEW_ARRIVALS)

        assert [p.id for p in result] == ["A", "D", "20", "10"]

    def test_flow_sorted_by_id_descending(self) -> None:
        """未固定の商品は ID 降順で並ぶこと."""
        items = [_new_arrival(i) for i in ["3", "9", "5"]]

        result = sort_for_display(items, Rail.NEW_ARRIVALS)

        assert [p.id for p in result] == ["9", "5", "3"]

    def test_pinned_fills_its_slot_between_flow(self) -> None:
        """固定位置3の商品が3番目に入ること."""
        items = [_new_arrival("1"), _new_arrival("2"), _new_arrival("3"), _new_arrival("P", 3)]

        result = sort_for_display(items, Rail.NEW_ARRIVALS)

        assert [p.id for p in result] == ["3", "2", "P", "1"]

    def test_pinned_drains_when_flow_exhausted(self) -> None:
        """未固定が尽きた後は固定商品がヒント順に出力されること."""
        items = [_new_arrival("X", 50), _new_arrival("1"), _new_arrival("Y", 7)]

        result = sort_for_display(items, Rail.NEW_ARRIVALS)

        assert [p.id for p in result] == ["1", "Y", "X"]

    def test_equal_hints_keep_input_order(self) -> None:
        """同じヒントは入力順を保つこと."""
        items = [_new_arrival("B", 1), _new_arrival("A", 1)]

        result = sort_for_display(items, Rail.NEW_ARRIVALS)

        assert [p.id for p in result] == ["B", "A"]

    def test_mixed_hints(self) -> None:
        """固定と未固定が混在しても欠落・重複なく並ぶこと."""
        hints = [None, 4, 1000, 2, 0, 9, None, 4, 1, 3]
        items = [_new_arrival(f"{i:02d}", h) for i, h in enumerate(hints)]

        result = sort_for_display(items, Rail.NEW_ARRIVALS)

        assert [p.id for p in result] == [
            "08", "03", "09", "01", "07", "06", "04", "02", "05", "00",
        ]
        assert sorted(p.id for p in result) == sorted(p.id for p in items)

    def test_unique_pins_never_late(self) -> None:
        """希望位置が重ならない固定商品は希望位置以前に現れること."""
        hints = [5, None, 2, None, None, 8, None]
        items = [_new_arrival(f"{i:02d}", h) for i, h in enumerate(hints)]

        result = sort_for_display(items, Rail.NEW_ARRIVALS)

        assert len(result) == len(items)
        for position, product in enumerate(result, start=1):
            placement = placement_of(product, Rail.NEW_ARRIVALS)
            if isinstance(placement, Pinned):
                assert position <= placement.order

    def test_empty(self) -> None:
        """空入力は空出力になること."""
        assert sort_for_display([], Rail.TRENDING) == []


class TestRailProducts:
    """rail_products のテスト."""

    def test_filters_and_truncates(self) -> None:
        """レール対象のみを抽出し、件数で切り詰めること."""
        products = [
            make_product(str(i), is_trending=i % 2 == 0)
            for i in range(1, 12)
        ]

        view = rail_products(products, Rail.TRENDING, 3)

        assert [p.id for p in view.items] == ["8", "6", "4"]
        assert view.total == 5
        assert view.has_more is True

    @pytest.mark.parametrize("limit", [0, None])
    def test_default_count(self, limit) -> None:
        """件数0・未指定は既定の4件になること."""
        products = [_new_arrival(str(i)) for i in range(1, 7)]

        view = rail_products(products, Rail.NEW_ARRIVALS, limit)

        assert len(view.items) == 4

    def test_no_more_when_all_shown(self) -> None:
        """全件表示時は has_more が False であること."""
        view = rail_products([_new_arrival("1")], Rail.NEW_ARRIVALS, 4)

        assert view.has_more is False
