"""ストアフロント状態管理層.

Redux風の状態コンテナと、それが組み合わせる各エンジンを提供。

モジュール:
- store: 状態ストア（オーケストレーター）
- actions: 状態アクション
- selectors: 状態セレクター
- cart: カートエンジン
- catalog: カタログ調停器（ライト/完全版マージ）
- ordering: レール表示順序エンジン
- freshness: 新着注文トラッカー
- persistence: 永続化アダプター
- notifications: 通知キュー
"""

from storefront.state.actions import (
    Action,
    ActionType,
    create_action,
)
from storefront.state.cart import CartChange, CartChangeKind, CartEngine
from storefront.state.catalog import (
    CatalogPhase,
    CatalogReconciler,
    CatalogResult,
    merge_products,
)
from storefront.state.freshness import OrderFreshnessTracker
from storefront.state.models import (
    AdminProductsPagination,
    Notification,
    NotificationType,
    StorefrontState,
)
from storefront.state.notifications import NotificationQueue
from storefront.state.ordering import (
    UNPINNED,
    Pinned,
    Rail,
    RailView,
    Unpinned,
    placement_of,
    rail_products,
    sort_for_display,
)
from storefront.state.persistence import PersistenceAdapter, RehydratedSlice
from storefront.state.scheduler import AsyncioScheduler, ManualScheduler
from storefront.state.selectors import (
    StateSelector,
    select,
)
from storefront.state.store import (
    StateSubscription,
    StorefrontStore,
)


__all__ = [
    "UNPINNED",
    # Actions
    "Action",
    "ActionType",
    "AdminProductsPagination",
    "AsyncioScheduler",
    # Cart
    "CartChange",
    "CartChangeKind",
    "CartEngine",
    # Catalog
    "CatalogPhase",
    "CatalogReconciler",
    "CatalogResult",
    "ManualScheduler",
    "Notification",
    "NotificationQueue",
    "NotificationType",
    "OrderFreshnessTracker",
    "PersistenceAdapter",
    # Ordering
    "Pinned",
    "Rail",
    "RailView",
    "RehydratedSlice",
    # Selectors
    "StateSelector",
    "StateSubscription",
    "StorefrontState",
    # Store
    "StorefrontStore",
    "Unpinned",
    "create_action",
    "merge_products",
    "placement_of",
    "rail_products",
    "select",
    "sort_for_display",
]
