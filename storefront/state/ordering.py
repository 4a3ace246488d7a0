"""表示順序エンジン.

「新着」「トレンド」レールの商品表示順を計算する。
運営者が固定した商品（Pinned）と、新しい順に並ぶ商品（Unpinned）を交互に埋める。

アルゴリズム:
1. 配置ヒントが 1 以上 1000 未満の商品を Pinned、0・未設定・1000 以上を Unpinned に分類
2. Unpinned を ID 降順（新しい順の近似）で整列
3. Pinned をヒント昇順で整列
4. 位置 1..N を順に埋める。先頭の Pinned のヒントが現在位置以下ならそれを、
   そうでなければ次の Unpinned を出力。Unpinned が尽きたら残りの Pinned を順に出力

ID 降順が作成順に一致するのは ID が単調に採番される場合に限る。
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from storefront.commerce.models import PINNED_THRESHOLD, Product


DEFAULT_RAIL_COUNT = 4


class Rail(str, Enum):
    """ホームのレール種別."""

    NEW_ARRIVALS = "new_arrivals"
    TRENDING = "trending"

    @property
    def hint_field(self) -> str:
        """このレールの配置ヒントのフィールド名."""
        if self is Rail.NEW_ARRIVALS:
            return "new_arrival_display_order"
        return "trending_display_order"

    def includes(self, product: Product) -> bool:
        """商品がこのレールの対象か."""
        if self is Rail.NEW_ARRIVALS:
            return product.is_new_arrival
        return product.is_trending


@dataclass(frozen=True)
class Pinned:
    """固定位置（1始まりの希望スロット）."""

    order: int


@dataclass(frozen=True)
class Unpinned:
    """固定位置なし."""


UNPINNED = Unpinned()

Placement = Pinned | Unpinned


def placement_of(product: Product, rail: Rail) -> Placement:
    """商品の配置ヒントを Pinned / Unpinned に変換.

    0・None・閾値以上は Unpinned として扱う。
    """
    hint = getattr(product, rail.hint_field)
    if hint is None or hint == 0 or hint >= PINNED_THRESHOLD:
        return UNPINNED
    return Pinned(int(hint))


def sort_for_display(items: Sequence[Product], rail: Rail) -> list[Product]:
    """レール表示順に並べ替え.

    出力長は常に入力長と等しい（欠落・重複なし）。
    Pinned は希望スロット以前に必ず現れる。

    Args:
        items: 対象商品（フィルター済み）
        rail: 配置ヒントを読むレール

    Returns:
        表示順の商品一覧
    """
    pinned: list[tuple[int, Product]] = []
    flow: list[Product] = []
    for product in items:
        placement = placement_of(product, rail)
        if isinstance(placement, Pinned):
            pinned.append((placement.order, product))
        else:
            flow.append(product)

    flow.sort(key=lambda p: p.id, reverse=True)
    pinned.sort(key=lambda entry: entry[0])

    queue = deque(pinned)
    result: list[Product] = []
    flow_index = 0
    position = 1
    while len(result) < len(items):
        if queue and queue[0][0] <= position:
            result.append(queue.popleft()[1])
        elif flow_index < len(flow):
            result.append(flow[flow_index])
            flow_index += 1
        else:
            result.append(queue.popleft()[1])
        position += 1
    return result


@dataclass(frozen=True)
class RailView:
    """レールの表示内容.

    Attributes:
        items: 表示する商品（件数で切り詰め済み）
        total: レール対象の総数
    """

    items: tuple[Product, ...]
    total: int

    @property
    def has_more(self) -> bool:
        """「すべて表示」を出すべきか."""
        return self.total > len(self.items)


def rail_products(
    products: Iterable[Product],
    rail: Rail,
    limit: int | None = None,
) -> RailView:
    """レールの表示内容を計算.

    Args:
        products: 保持中の全商品
        rail: レール種別
        limit: 表示件数（0 または None の場合は既定の 4）

    Returns:
        RailView
    """
    count = limit or DEFAULT_RAIL_COUNT
    ordered = sort_for_display([p for p in products if rail.includes(p)], rail)
    return RailView(items=tuple(ordered[:count]), total=len(ordered))
