# -*- coding: utf-8 -*-
"""状態アクション定義.

ストアの状態変更を表現するアクションを定義。

設計原則:
- 状態はリデューサーでのみ変更し、呼び出し側はアクションを発行する
- 全ての変更が履歴に記録される
- カート・設定・商品に触れるアクションは永続化の対象

使用例:
    >>> from storefront.state.actions import create_action, ActionType
    >>>
    >>> action = create_action(
    ...     ActionType.SET_SELECTED_PRODUCT,
    ...     {"product": product},
    ... )
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from storefront.commerce.models import (
    CartLine,
    ContactMessage,
    DashboardStats,
    Order,
    Product,
    StoreSettings,
)
from storefront.state.models import AdminProductsPagination, Notification


class ActionType(str, Enum):
    """アクション種別."""

    # カタログ
    SET_LOADING = "SET_LOADING"
    SET_CATALOG = "SET_CATALOG"
    SET_PRODUCTS = "SET_PRODUCTS"
    ADD_PRODUCT = "ADD_PRODUCT"
    UPDATE_PRODUCT = "UPDATE_PRODUCT"
    REMOVE_PRODUCT = "REMOVE_PRODUCT"
    SET_SELECTED_PRODUCT = "SET_SELECTED_PRODUCT"

    # 設定
    SET_SETTINGS = "SET_SETTINGS"

    # カート
    SET_CART = "SET_CART"

    # 永続化
    REHYDRATE = "REHYDRATE"

    # 通知
    SET_NOTIFICATION = "SET_NOTIFICATION"

    # 注文
    SET_ORDERS = "SET_ORDERS"
    ADD_ORDER = "ADD_ORDER"
    UPDATE_ORDER = "UPDATE_ORDER"
    REMOVE_ORDER = "REMOVE_ORDER"
    SET_NEW_ORDERS_COUNT = "SET_NEW_ORDERS_COUNT"

    # 管理者
    SET_AUTHENTICATED = "SET_AUTHENTICATED"
    LOGOUT = "LOGOUT"
    SET_ADMIN_PRODUCTS = "SET_ADMIN_PRODUCTS"
    SET_DASHBOARD_STATS = "SET_DASHBOARD_STATS"
    SET_CONTACT_MESSAGES = "SET_CONTACT_MESSAGES"
    UPDATE_CONTACT_MESSAGE = "UPDATE_CONTACT_MESSAGE"
    REMOVE_CONTACT_MESSAGE = "REMOVE_CONTACT_MESSAGE"

    # カスタム
    CUSTOM = "CUSTOM"


# 永続化スライス（cart / settings / products）に触れるアクション
PERSISTED_ACTIONS = frozenset(
    {
        ActionType.SET_CATALOG,
        ActionType.SET_PRODUCTS,
        ActionType.ADD_PRODUCT,
        ActionType.UPDATE_PRODUCT,
        ActionType.REMOVE_PRODUCT,
        ActionType.SET_SETTINGS,
        ActionType.SET_CART,
    }
)


@dataclass
class Action:
    """状態変更アクション.

    Attributes:
        id: アクションID
        type: アクション種別
        payload: ペイロード
        timestamp: タイムスタンプ
        metadata: メタデータ
    """

    id: str = field(default_factory=lambda: f"action-{uuid.uuid4().hex[:8]}")
    type: ActionType = ActionType.CUSTOM
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def touches_persisted_slice(self) -> bool:
        """永続化スライスに触れるか."""
        return self.type in PERSISTED_ACTIONS

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換（ペイロードはキー一覧のみ）."""
        return {
            "id": self.id,
            "type": self.type.value,
            "payload_keys": sorted(self.payload),
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


def create_action(
    action_type: ActionType,
    payload: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
) -> Action:
    """アクションを作成.

    Args:
        action_type: アクション種別
        payload: ペイロード
        metadata: メタデータ

    Returns:
        Action
    """
    return Action(
        type=action_type,
        payload=payload or {},
        metadata=metadata or {},
    )


# 便利なアクション作成関数
def set_loading(loading: bool) -> Action:
    """読み込み中フラグを設定するアクション."""
    return create_action(ActionType.SET_LOADING, {"loading": loading})


def set_catalog(
    products: list[Product],
    settings: StoreSettings,
    full_products_loaded: bool,
    phase: str = "lite",
) -> Action:
    """初回ロード結果を反映するアクション（読み込み中を解除）."""
    return create_action(
        ActionType.SET_CATALOG,
        {
            "products": products,
            "settings": settings,
            "full_products_loaded": full_products_loaded,
        },
        {"phase": phase},
    )


def set_products(
    products: list[Product],
    full_products_loaded: bool | None = None,
) -> Action:
    """商品一覧を置き換えるアクション."""
    payload: dict[str, Any] = {"products": products}
    if full_products_loaded is not None:
        payload["full_products_loaded"] = full_products_loaded
    return create_action(ActionType.SET_PRODUCTS, payload)


def add_product(product: Product) -> Action:
    """商品を先頭に追加するアクション."""
    return create_action(ActionType.ADD_PRODUCT, {"product": product})


def update_product(product: Product) -> Action:
    """商品を置き換えるアクション."""
    return create_action(ActionType.UPDATE_PRODUCT, {"product": product})


def remove_product(product_id: str) -> Action:
    """商品を削除するアクション."""
    return create_action(ActionType.REMOVE_PRODUCT, {"product_id": product_id})


def set_selected_product(product: Product | None) -> Action:
    """選択中の商品を設定するアクション."""
    return create_action(ActionType.SET_SELECTED_PRODUCT, {"product": product})


def set_settings(settings: StoreSettings) -> Action:
    """ストア設定を置き換えるアクション."""
    return create_action(ActionType.SET_SETTINGS, {"settings": settings})


def set_cart(lines: Iterable[CartLine], change: Any = None) -> Action:
    """カート内容を反映するアクション."""
    return create_action(
        ActionType.SET_CART,
        {"lines": list(lines)},
        {"change": change} if change is not None else None,
    )


def rehydrate(
    cart: list[CartLine],
    settings: StoreSettings,
    products: list[Product],
) -> Action:
    """永続化スライスを復元するアクション."""
    return create_action(
        ActionType.REHYDRATE,
        {"cart": cart, "settings": settings, "products": products},
    )


def set_notification(notification: Notification | None) -> Action:
    """通知スロットを設定するアクション."""
    return create_action(ActionType.SET_NOTIFICATION, {"notification": notification})


def set_orders(orders: list[Order], new_orders_count: int | None = None) -> Action:
    """注文一覧を置き換えるアクション."""
    payload: dict[str, Any] = {"orders": orders}
    if new_orders_count is not None:
        payload["new_orders_count"] = new_orders_count
    return create_action(ActionType.SET_ORDERS, payload)


def add_order(order: Order) -> Action:
    """注文を先頭に追加するアクション."""
    return create_action(ActionType.ADD_ORDER, {"order": order})


def update_order(order: Order) -> Action:
    """注文を置き換えるアクション."""
    return create_action(ActionType.UPDATE_ORDER, {"order": order})


def remove_order(order_id: str) -> Action:
    """注文を削除するアクション."""
    return create_action(ActionType.REMOVE_ORDER, {"order_id": order_id})


def set_new_orders_count(count: int) -> Action:
    """新着注文数を設定するアクション."""
    return create_action(ActionType.SET_NEW_ORDERS_COUNT, {"count": count})


def set_authenticated(authenticated: bool) -> Action:
    """管理者認証状態を設定するアクション."""
    return create_action(ActionType.SET_AUTHENTICATED, {"authenticated": authenticated})


def logout() -> Action:
    """ログアウトアクション（管理者データを破棄）."""
    return create_action(ActionType.LOGOUT)


def set_admin_products(
    products: list[Product],
    pagination: AdminProductsPagination,
) -> Action:
    """管理用商品一覧を設定するアクション."""
    return create_action(
        ActionType.SET_ADMIN_PRODUCTS,
        {"products": products, "pagination": pagination},
    )


def set_dashboard_stats(stats: DashboardStats | None) -> Action:
    """ダッシュボード統計を設定するアクション."""
    return create_action(ActionType.SET_DASHBOARD_STATS, {"stats": stats})


def set_contact_messages(messages: list[ContactMessage]) -> Action:
    """問い合わせ一覧を設定するアクション."""
    return create_action(ActionType.SET_CONTACT_MESSAGES, {"messages": messages})


def update_contact_message(message: ContactMessage) -> Action:
    """問い合わせを置き換えるアクション."""
    return create_action(ActionType.UPDATE_CONTACT_MESSAGE, {"message": message})


def remove_contact_message(message_id: str) -> Action:
    """問い合わせを削除するアクション."""
    return create_action(ActionType.REMOVE_CONTACT_MESSAGE, {"message_id": message_id})
