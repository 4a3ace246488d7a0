"""分析イベントモジュール."""

from storefront.analytics.sink import (
    AnalyticsEvent,
    DataLayerSink,
    EventSink,
    LoggingEventSink,
    NullEventSink,
    ecommerce_item,
)


__all__ = [
    "AnalyticsEvent",
    "DataLayerSink",
    "EventSink",
    "LoggingEventSink",
    "NullEventSink",
    "ecommerce_item",
]
