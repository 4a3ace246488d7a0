"""注文鮮度トラッカー.

「最後に見た時刻」の透かし（watermark）1つで新着注文を判定する。
注文ごとの既読フラグは保存しない。
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from storefront.commerce.models import Order
from storefront.storage import KeyValueStorage


logger = logging.getLogger(__name__)

WATERMARK_KEY = "admin_last_orders_seen"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """現在時刻（UTC）."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # タイムゾーンなしは UTC とみなす
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str | None) -> datetime | None:
    """ISO 8601 文字列を UTC の日時に変換（解釈できない場合None）."""
    if not value:
        return None
    try:
        return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def order_timestamp(order: Order) -> datetime | None:
    """注文の作成日時（created_at、なければ date）."""
    if order.created_at is not None:
        return _as_utc(order.created_at)
    return parse_timestamp(order.date)


class OrderFreshnessTracker:
    """注文鮮度トラッカー.

    Example:
        >>> tracker = OrderFreshnessTracker(MemoryStorage())
        >>> tracker.count_new(orders)
        3
        >>> tracker.mark_seen()
        >>> tracker.count_new(orders)
        0
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Callable[[], datetime] = utc_now,
        key: str = WATERMARK_KEY,
    ) -> None:
        """初期化.

        Args:
            storage: 透かしの保存先
            clock: 現在時刻の取得関数
            key: ストレージキー
        """
        self._storage = storage
        self._clock = clock
        self._key = key

    @property
    def watermark(self) -> datetime:
        """現在の透かし（未設定・解釈不能の場合はエポック）."""
        try:
            raw = self._storage.get_item(self._key)
        except (UnicodeDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable watermark: {e}")
            return EPOCH
        parsed = parse_timestamp(raw)
        if raw and parsed is None:
            logger.warning(f"Ignoring unparseable watermark: {raw!r}")
        return parsed or EPOCH

    def is_new(self, order: Order, watermark: datetime | None = None) -> bool:
        """注文が透かしより後に作成されたか."""
        created = order_timestamp(order)
        if created is None:
            return False
        return created > (watermark or self.watermark)

    def count_new(self, orders: Iterable[Order]) -> int:
        """新着注文数を数える.

        Args:
            orders: 注文一覧

        Returns:
            透かしより厳密に後の注文数
        """
        watermark = self.watermark
        return sum(1 for order in orders if self.is_new(order, watermark))

    def mark_seen(self) -> datetime:
        """透かしを現在時刻に進めて保存.

        Returns:
            新しい透かし
        """
        now = _as_utc(self._clock())
        self._storage.set_item(self._key, now.isoformat())
        logger.debug(f"Orders marked as seen at {now.isoformat()}")
        return now
