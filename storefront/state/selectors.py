"""状態セレクター.

状態から必要な部分を取得するセレクターを提供。

使用例:
    >>> from storefront.state.selectors import select, StateSelector
    >>>
    >>> # 単純な選択
    >>> total = select(state, "cart_total")
    >>>
    >>> # セレクター関数
    >>> selector = StateSelector("settings.homepage_trending_count")
    >>> count = selector(state)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from storefront.state.ordering import Rail, RailView, rail_products


if TYPE_CHECKING:
    from storefront.state.models import StorefrontState


_MISSING = object()


@dataclass
class StateSelector:
    """状態セレクター.

    ドット区切りのパスで状態の一部を選択。

    Attributes:
        path: 選択パス（例: "settings.contact_phone"）
        default: デフォルト値
    """

    path: str
    default: Any = None

    def __call__(self, state: Any) -> Any:
        """状態から値を選択."""
        return select(state, self.path, self.default)


def select(state: Any, path: str, default: Any = None) -> Any:
    """状態からパスで値を選択.

    辞書キー・属性・リストのインデックスをたどる。

    Args:
        state: 状態（dataclass、pydantic モデル、辞書）
        path: ドット区切りのパス
        default: デフォルト値

    Returns:
        選択された値、またはデフォルト値

    Example:
        >>> select(state, "products.0.name")
        'Gulmohar Lawn Suit'
    """
    current = state
    for key in path.split("."):
        if isinstance(current, dict):
            current = current.get(key, _MISSING)
        elif isinstance(current, (list, tuple)):
            try:
                current = current[int(key)]
            except (ValueError, IndexError):
                current = _MISSING
        else:
            current = getattr(current, key, _MISSING)
        if current is _MISSING:
            return default
    return current


# =============================================================================
# 派生セレクター
# =============================================================================


def select_new_arrivals(state: StorefrontState) -> RailView:
    """ホームの新着レール."""
    return rail_products(
        state.products, Rail.NEW_ARRIVALS, state.settings.homepage_new_arrivals_count
    )


def select_trending(state: StorefrontState) -> RailView:
    """ホームのトレンドレール."""
    return rail_products(
        state.products, Rail.TRENDING, state.settings.homepage_trending_count
    )


def select_product(state: StorefrontState, product_id: str) -> Any:
    """IDで商品を選択（存在しない場合None）."""
    return next((p for p in state.products if p.id == product_id), None)
