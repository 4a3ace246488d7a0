"""分析イベントシンク.

カートエンジン・カタログ調停器が状態変更時に呼び出す注入可能なイベント出力先。
dataLayer 形式（event + ecommerce）のイベントを扱う。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@dataclass
class AnalyticsEvent:
    """分析イベント.

    Attributes:
        event: イベント名（add_to_cart / remove_from_cart / catalog_loaded など）
        data: イベント本体（ecommerce ブロック等）
        timestamp: 発生日時
    """

    event: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """dataLayer 形式の辞書に変換."""
        return {"event": self.event, **self.data}


@runtime_checkable
class EventSink(Protocol):
    """イベントシンクプロトコル."""

    def emit(self, event: AnalyticsEvent) -> None:
        """イベントを出力."""
        ...


class NullEventSink:
    """何もしないシンク."""

    def emit(self, event: AnalyticsEvent) -> None:
        return None


class DataLayerSink:
    """リストに蓄積するシンク（dataLayer 相当）.

    Example:
        >>> sink = DataLayerSink()
        >>> sink.emit(AnalyticsEvent("add_to_cart", {"ecommerce": {...}}))
        >>> sink.names()
        ['add_to_cart']
    """

    def __init__(self) -> None:
        """初期化."""
        self.events: list[AnalyticsEvent] = []

    def emit(self, event: AnalyticsEvent) -> None:
        """イベントを追加."""
        self.events.append(event)

    def names(self) -> list[str]:
        """イベント名一覧."""
        return [e.event for e in self.events]

    def clear(self) -> None:
        """蓄積をクリア."""
        self.events.clear()


class LoggingEventSink:
    """ログに出力するシンク."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        """初期化."""
        self._level = level

    def emit(self, event: AnalyticsEvent) -> None:
        """イベントをログ出力."""
        logger.log(self._level, f"analytics: {event.event}", extra={"analytics": event.to_dict()})


def ecommerce_item(
    *,
    item_id: str,
    item_name: str,
    item_category: str,
    price: float,
    quantity: int,
    item_variant: str,
) -> dict[str, Any]:
    """ecommerce.items の1要素を作成."""
    return {
        "item_id": item_id,
        "item_name": item_name,
        "item_category": item_category,
        "price": price,
        "quantity": quantity,
        "item_variant": item_variant,
    }
