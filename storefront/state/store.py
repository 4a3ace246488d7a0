# -*- coding: utf-8 -*-
"""ストアフロント状態ストア.

Redux風の状態管理パターンで、カタログ・カート・注文・設定・管理者データを
一つの状態グラフとして保持する。

設計原則:
- 単一ソース: 状態はストアが所有し、リデューサーでのみ変更
- 注入可能: API ポート・ストレージ・イベントシンク・スケジューラー・時計を外から渡す
- 単一スレッド: ネットワーク呼び出しのみが await 点で、結果は1回の dispatch で反映
- 失敗の局所化: 検証エラー・通信エラーは通知に変換し、状態を壊さない

使用例:
    >>> from storefront.commerce.providers import InMemoryStorefrontAPI
    >>> from storefront.state import StorefrontStore
    >>>
    >>> store = StorefrontStore(InMemoryStorefrontAPI(products=sample_catalog()))
    >>> unsubscribe = store.subscribe(lambda state: print(state.cart_total))
    >>> await store.boot()
    >>> store.add_to_cart(product, 2, "M")
    >>> store.get_state("cart_total")
    7000.0
"""

from __future__ import annotations

import asyncio
import contextlib
import copy
import logging
import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from storefront.analytics import EventSink, NullEventSink
from storefront.commerce.interfaces import IStorefrontAPI
from storefront.commerce.models import (
    CartLine,
    CustomerDetails,
    Order,
    OrderStatus,
    PaymentInfo,
    Product,
    StoreSettings,
)
from storefront.config import StorefrontSettings, get_settings
from storefront.core.exceptions import AuthorizationError, StorefrontError, ValidationError
from storefront.state import actions
from storefront.state.actions import Action, ActionType
from storefront.state.cart import CartChange, CartChangeKind, CartEngine
from storefront.state.catalog import CatalogPhase, CatalogReconciler, merge_products
from storefront.state.freshness import OrderFreshnessTracker, utc_now
from storefront.state.models import (
    AdminProductsPagination,
    Notification,
    NotificationType,
    StorefrontState,
)
from storefront.state.notifications import NotificationQueue
from storefront.state.ordering import Rail, RailView, rail_products
from storefront.state.persistence import PersistenceAdapter, RehydratedSlice
from storefront.state.scheduler import Scheduler
from storefront.state.selectors import select, select_product
from storefront.storage import FileStorage, KeyValueStorage, get_storage


logger = logging.getLogger(__name__)

TOKEN_KEY = "admin_token"

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


@dataclass
class StateSubscription:
    """状態購読.

    Attributes:
        id: 購読ID
        callback: コールバック関数
        selector: セレクター（特定パスのみ監視）
    """

    id: str = field(default_factory=lambda: f"sub-{uuid.uuid4().hex[:8]}")
    callback: Callable[[Any], Any] = field(default=lambda _: None)
    selector: str | None = None


@dataclass
class _Outcome:
    ok: bool = True


class StorefrontStore:
    """ストアフロント状態ストア.

    主な機能:
    - 2段階カタログロード（ライト → 遅延後に完全版をマージ）
    - 複合キーのカートと導出合計
    - 透かしによる新着注文数
    - {cart, settings, products} の永続化と検証付き復元
    - 単一スロット通知

    Example:
        >>> store = StorefrontStore(api, storage=MemoryStorage())
        >>> await store.boot()
        >>> store.add_to_cart(store.get_state().products[0], 1, "M")
        >>> await store.close()
    """

    def __init__(
        self,
        api: IStorefrontAPI,
        storage: KeyValueStorage | None = None,
        event_sink: EventSink | None = None,
        scheduler: Scheduler | None = None,
        settings: StorefrontSettings | None = None,
        clock: Callable[[], datetime] = utc_now,
        on_unauthorized: Callable[[], Any] | None = None,
    ) -> None:
        """初期化.

        Args:
            api: ネットワークポート
            storage: 永続化先（省略時は設定の storage_url・storage_dir から生成）
            event_sink: 分析イベントの出力先
            scheduler: 通知消去タイマーのスケジューラー
            settings: ストアフロント設定
            clock: 現在時刻の取得関数（新着注文の透かしに使用）
            on_unauthorized: 認可エラー時に呼ぶフック（ログイン画面への誘導など）
        """
        self._api = api
        self._settings = settings or get_settings()
        self._storage = storage if storage is not None else _default_storage(self._settings)
        self._event_sink = event_sink or NullEventSink()
        self._on_unauthorized = on_unauthorized

        self._state = StorefrontState()
        self._subscriptions: dict[str, StateSubscription] = {}
        self._action_history: list[Action] = []
        self._max_history = self._settings.max_history
        self._background: asyncio.Task[bool] | None = None

        self._cart = CartEngine(event_sink=self._event_sink, currency=self._settings.currency)
        self._catalog = CatalogReconciler(api, self._event_sink)
        self._persistence = PersistenceAdapter(self._storage, self._settings.storage_key)
        self._freshness = OrderFreshnessTracker(self._storage, clock)
        self._notifications = NotificationQueue(
            on_change=lambda n: self.dispatch(actions.set_notification(n)),
            scheduler=scheduler,
            duration=self._settings.notification_duration,
            correlated_clear=self._settings.notification_correlated_clear,
        )

        self._token: str | None = self._storage.get_item(TOKEN_KEY)
        self._state.is_admin_authenticated = bool(self._token)

    # =========================================================================
    # 状態アクセス
    # =========================================================================

    def get_state(self, path: str | None = None, default: Any = None) -> Any:
        """状態を取得.

        Args:
            path: ドット区切りのパス（Noneの場合は全状態）
            default: デフォルト値

        Returns:
            状態のスナップショット、またはパスの値
        """
        if path is None:
            return self._state.snapshot()
        return copy.deepcopy(select(self._state, path, default))

    def dispatch(self, action: Action) -> None:
        """アクションをディスパッチ.

        Args:
            action: アクション
        """
        logger.debug(f"dispatch: {action.type.value}")

        self._reduce(action)

        self._action_history.append(action)
        if len(self._action_history) > self._max_history:
            self._action_history.pop(0)

        if action.touches_persisted_slice:
            self._persistence.save(self._state)

        self._notify_subscribers()

    def subscribe(
        self,
        callback: Callable[[Any], Any],
        selector: str | None = None,
    ) -> Callable[[], None]:
        """状態変更を購読.

        Args:
            callback: コールバック関数
            selector: 監視するパス（Noneの場合は全状態）

        Returns:
            購読解除関数
        """
        subscription = StateSubscription(callback=callback, selector=selector)
        self._subscriptions[subscription.id] = subscription

        def unsubscribe() -> None:
            self._subscriptions.pop(subscription.id, None)

        return unsubscribe

    def get_action_history(self, limit: int = 50) -> list[Action]:
        """アクション履歴を取得."""
        return self._action_history[-limit:]

    @property
    def is_admin_authenticated(self) -> bool:
        """管理者認証済みか."""
        return self._state.is_admin_authenticated

    def _notify_subscribers(self) -> None:
        for subscription in list(self._subscriptions.values()):
            try:
                if subscription.selector:
                    subscription.callback(self.get_state(subscription.selector))
                else:
                    subscription.callback(self._state.snapshot())
            except Exception as e:
                logger.error(f"Subscriber {subscription.id} raised: {e}")

    def _reduce(self, action: Action) -> None:
        """リデューサー - アクションに基づいて状態を更新.

        Args:
            action: アクション
        """
        state = self._state
        payload = action.payload

        if action.type == ActionType.SET_LOADING:
            state.loading = payload["loading"]

        elif action.type == ActionType.SET_CATALOG:
            state.products = list(payload["products"])
            state.settings = payload["settings"]
            state.full_products_loaded = payload["full_products_loaded"]
            state.loading = False

        elif action.type == ActionType.SET_PRODUCTS:
            state.products = list(payload["products"])
            if "full_products_loaded" in payload:
                state.full_products_loaded = payload["full_products_loaded"]

        elif action.type == ActionType.ADD_PRODUCT:
            state.products = [payload["product"], *state.products]

        elif action.type == ActionType.UPDATE_PRODUCT:
            product = payload["product"]
            state.products = _replace_by_id(state.products, product)
            state.admin_products = _replace_by_id(state.admin_products, product)
            if state.selected_product and state.selected_product.id == product.id:
                state.selected_product = product

        elif action.type == ActionType.REMOVE_PRODUCT:
            product_id = payload["product_id"]
            state.products = [p for p in state.products if p.id != product_id]
            state.admin_products = [p for p in state.admin_products if p.id != product_id]

        elif action.type == ActionType.SET_SELECTED_PRODUCT:
            state.selected_product = payload["product"]

        elif action.type == ActionType.SET_SETTINGS:
            state.settings = payload["settings"]

        elif action.type == ActionType.SET_CART:
            state.cart = {line.key: line for line in payload["lines"]}

        elif action.type == ActionType.REHYDRATE:
            state.cart = {line.key: line for line in payload["cart"]}
            state.settings = payload["settings"]
            state.products = list(payload["products"])

        elif action.type == ActionType.SET_NOTIFICATION:
            state.notification = payload["notification"]

        elif action.type == ActionType.SET_ORDERS:
            state.orders = list(payload["orders"])
            if "new_orders_count" in payload:
                state.new_orders_count = payload["new_orders_count"]

        elif action.type == ActionType.ADD_ORDER:
            state.orders = [payload["order"], *state.orders]

        elif action.type == ActionType.UPDATE_ORDER:
            state.orders = _replace_by_id(state.orders, payload["order"])

        elif action.type == ActionType.REMOVE_ORDER:
            order_id = payload["order_id"]
            state.orders = [o for o in state.orders if o.id != order_id]

        elif action.type == ActionType.SET_NEW_ORDERS_COUNT:
            state.new_orders_count = payload["count"]

        elif action.type == ActionType.SET_AUTHENTICATED:
            state.is_admin_authenticated = payload["authenticated"]

        elif action.type == ActionType.LOGOUT:
            state.is_admin_authenticated = False
            state.orders = []
            state.new_orders_count = 0
            state.contact_messages = []
            state.dashboard_stats = None
            state.admin_products = []
            state.admin_products_pagination = AdminProductsPagination()

        elif action.type == ActionType.SET_ADMIN_PRODUCTS:
            state.admin_products = list(payload["products"])
            state.admin_products_pagination = payload["pagination"]

        elif action.type == ActionType.SET_DASHBOARD_STATS:
            state.dashboard_stats = payload["stats"]

        elif action.type == ActionType.SET_CONTACT_MESSAGES:
            state.contact_messages = list(payload["messages"])

        elif action.type == ActionType.UPDATE_CONTACT_MESSAGE:
            state.contact_messages = _replace_by_id(state.contact_messages, payload["message"])

        elif action.type == ActionType.REMOVE_CONTACT_MESSAGE:
            message_id = payload["message_id"]
            state.contact_messages = [m for m in state.contact_messages if m.id != message_id]

    # =========================================================================
    # 起動・カタログ
    # =========================================================================

    async def boot(self) -> None:
        """起動シーケンス.

        永続化スライスを復元し、ライト版カタログを読み込み、
        一定時間後に完全版カタログの取得を予約する。
        """
        self.rehydrate()
        await self.load_initial_data()
        self._schedule_full_load()

    def rehydrate(self) -> RehydratedSlice:
        """永続化スライスを検証して状態に反映."""
        restored = self._persistence.load(self._state)
        self._cart.replace(restored.cart)
        self.dispatch(actions.rehydrate(self._cart.lines, restored.settings, restored.products))
        if restored.restored:
            logger.info(
                f"Rehydrated {len(restored.cart)} cart lines and {len(restored.products)} products"
            )
        return restored

    async def load_initial_data(self) -> None:
        """初回データを読み込む.

        ライト版カタログ（失敗時はサンプル）を反映し、
        管理者認証済みなら注文・問い合わせ・統計も読み込む。
        """
        result = await self._catalog.load_lite()
        products = result.products
        settings = result.settings or self._state.settings
        full_loaded = result.full_loaded

        if self._state.full_products_loaded:
            # 完全版を保持済みなら画像を切り詰めたライト版で上書きしない
            if result.phase is CatalogPhase.LITE:
                products = merge_products(self._state.products, result.products, overwrite=False)
            else:
                products = self._state.products
                settings = self._state.settings
            full_loaded = True

        self.dispatch(
            actions.set_catalog(products, settings, full_loaded, phase=result.phase.value)
        )

        if self._state.is_admin_authenticated:
            await self._load_admin_data()

    async def ensure_all_products_loaded(self) -> bool:
        """完全版カタログを取得してマージ.

        失敗しても例外は送出せず、次回の呼び出しで再試行できる。

        Returns:
            完全版カタログを保持している場合True
        """
        if self._state.full_products_loaded:
            return True

        try:
            result = await self._catalog.load_full(self._state.products)
        except StorefrontError as e:
            logger.warning(f"Failed to load all products: {e}")
            return False

        # 取得中に状態が変わっていても同じ結果に収束させる
        products = merge_products(self._state.products, result.products)
        self.dispatch(actions.set_products(products, full_products_loaded=True))
        return True

    def _schedule_full_load(self) -> None:
        if self._background is not None and not self._background.done():
            return
        self._background = asyncio.create_task(self._deferred_full_load())

    async def _deferred_full_load(self) -> bool:
        await asyncio.sleep(self._settings.full_catalog_deferment)
        return await self.ensure_all_products_loaded()

    async def wait_background(self) -> None:
        """予約済みの完全版カタログ取得の完了を待つ."""
        if self._background is not None:
            await self._background

    async def close(self) -> None:
        """バックグラウンド処理と通知タイマーを停止."""
        if self._background is not None and not self._background.done():
            self._background.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._background
        self._notifications.close()

    def set_products(self, products: list[Product]) -> None:
        """商品一覧を置き換える."""
        self.dispatch(actions.set_products(products))

    def set_selected_product(self, product: Product | None) -> None:
        """選択中の商品を設定."""
        self.dispatch(actions.set_selected_product(product))

    def home_rails(self) -> dict[Rail, RailView]:
        """ホームの新着・トレンドレールを計算."""
        settings = self._state.settings
        default = self._settings.default_rail_count
        return {
            Rail.NEW_ARRIVALS: rail_products(
                self._state.products,
                Rail.NEW_ARRIVALS,
                settings.homepage_new_arrivals_count or default,
            ),
            Rail.TRENDING: rail_products(
                self._state.products,
                Rail.TRENDING,
                settings.homepage_trending_count or default,
            ),
        }

    # =========================================================================
    # カート
    # =========================================================================

    def add_to_cart(
        self,
        product: Product,
        quantity: int = 1,
        size: str | None = None,
    ) -> CartChange | None:
        """商品をカートに追加.

        サイズ未選択などの検証エラーは通知に変換し、状態は変更しない。

        Args:
            product: 商品
            quantity: 数量
            size: サイズ

        Returns:
            CartChange（検証エラーの場合None）
        """
        try:
            change = self._cart.add_item(product, quantity, size)
        except ValidationError as e:
            self.notify(str(e), NotificationType.ERROR)
            return None

        self.dispatch(actions.set_cart(self._cart.lines, change.kind.value))
        if change.kind is CartChangeKind.UPDATED:
            self.notify(f"Quantity updated for {product.name} (Size: {size})!")
        else:
            self.notify(f"{product.name} (Size: {size}) added to cart!")
        return change

    def update_cart_quantity(self, product_id: str, size: str, new_quantity: int) -> CartChange:
        """カート行の数量を設定（0以下で削除）.

        Args:
            product_id: 商品ID
            size: サイズ
            new_quantity: 新しい数量

        Returns:
            CartChange
        """
        product = select_product(self._state, product_id)
        change = self._cart.set_quantity(product_id, size, new_quantity, product)
        if change.kind is not CartChangeKind.UNCHANGED:
            self.dispatch(actions.set_cart(self._cart.lines, change.kind.value))
        return change

    def clear_cart(self) -> None:
        """カートを空にする."""
        self._cart.clear()
        self.dispatch(actions.set_cart([]))

    # =========================================================================
    # 通知
    # =========================================================================

    def notify(
        self,
        message: str,
        severity: NotificationType | str = NotificationType.SUCCESS,
    ) -> Notification:
        """通知を表示（一定時間後に自動消去）."""
        return self._notifications.notify(message, severity)

    # =========================================================================
    # 注文
    # =========================================================================

    async def add_order(
        self,
        customer: CustomerDetails,
        cart_items: list[CartLine],
        total: float,
        payment_info: PaymentInfo,
        shipping_charge: float = 0.0,
    ) -> Order:
        """注文を作成.

        エラーは通知せず呼び出し元（チェックアウト画面）に送出する。

        Raises:
            StorefrontError: 注文作成に失敗した場合
        """
        order = await self._api.create_order(
            customer, cart_items, total, payment_info, shipping_charge
        )
        logger.info(f"Order placed: {order.display_id}")
        if self._state.is_admin_authenticated:
            self.dispatch(actions.add_order(order))
        return order

    async def refresh_orders(self) -> bool:
        """注文一覧を再取得し、新着注文数を更新."""
        if not self._token:
            return False

        with self._admin_call("refresh orders", "Could not refresh orders.") as outcome:
            orders = await self._api.fetch_orders(self._token)
            self.dispatch(actions.set_orders(orders, self._freshness.count_new(orders)))
            self.notify("Orders list refreshed.")
        return outcome.ok

    async def update_order_status(self, order_id: str, status: OrderStatus | str) -> Order | None:
        """注文ステータスを更新.

        ライフサイクルに反する遷移は API を呼ばずにエラー通知する。

        Args:
            order_id: 注文ID
            status: 新しいステータス

        Returns:
            更新後の注文（失敗時None）
        """
        target = OrderStatus(status)
        updated: Order | None = None
        with self._admin_call("update order status"):
            current = next((o for o in self._state.orders if o.id == order_id), None)
            if current is not None and not current.status.can_transition_to(target):
                raise ValidationError(
                    f"Cannot change order {current.display_id} "
                    f"from {current.status.value} to {target.value}."
                )
            updated = await self._api.update_order_status(order_id, target, self._token or "")
            self.dispatch(actions.update_order(updated))
            self.notify(f"Order {order_id} status updated to {target.value}.")
        return updated

    async def delete_order(self, order_id: str) -> bool:
        """注文を削除."""
        with self._admin_call("delete order") as outcome:
            await self._api.delete_order(order_id, self._token or "")
            self.dispatch(actions.remove_order(order_id))
            self.notify(f"Order {order_id} has been deleted.")
        return outcome.ok

    def mark_orders_as_seen(self) -> None:
        """透かしを現在時刻に進め、新着注文数を0にする."""
        self._freshness.mark_seen()
        self.dispatch(actions.set_new_orders_count(0))

    # =========================================================================
    # 設定
    # =========================================================================

    async def update_settings(self, partial: dict[str, Any]) -> StoreSettings:
        """ストア設定を更新.

        失敗時はエラー通知のうえ呼び出し元に送出する。

        Raises:
            StorefrontError: 更新に失敗した場合
        """
        try:
            updated = await self._api.update_settings(partial, self._token or "")
        except AuthorizationError:
            self._handle_unauthorized()
            raise
        except StorefrontError as e:
            self.notify(f"Error: {e}", NotificationType.ERROR)
            raise

        self.dispatch(actions.set_settings(updated))
        self.notify("Settings updated successfully!")
        return updated

    # =========================================================================
    # 認証
    # =========================================================================

    async def login(self, email: str, password: str) -> bool:
        """管理者ログイン.

        Returns:
            成功した場合True
        """
        try:
            token = await self._api.login(email, password)
        except StorefrontError as e:
            logger.info(f"Login failed: {e}")
            self.notify("Incorrect email or password.", NotificationType.ERROR)
            return False

        self._token = token
        self._storage.set_item(TOKEN_KEY, token)
        self.dispatch(actions.set_authenticated(True))
        await self._load_admin_data()
        self.notify("Login successful!")
        return True

    def logout(self) -> None:
        """ログアウトし、管理者データを破棄."""
        self._token = None
        self._storage.remove_item(TOKEN_KEY)
        self.dispatch(actions.logout())
        self.notify("You have been logged out.")

    async def _load_admin_data(self) -> None:
        token = self._token or ""
        try:
            orders, messages, stats = await asyncio.gather(
                self._api.fetch_orders(token),
                self._api.fetch_messages(token),
                self._api.fetch_dashboard_stats(token),
            )
        except AuthorizationError:
            self._handle_unauthorized()
            return
        except StorefrontError as e:
            logger.warning(f"Failed to load admin data: {e}")
            return

        self.dispatch(actions.set_orders(orders, self._freshness.count_new(orders)))
        self.dispatch(actions.set_contact_messages(messages))
        self.dispatch(actions.set_dashboard_stats(stats))

    def _handle_unauthorized(self) -> None:
        logger.warning("Authorization failed on a privileged call")
        self.notify(SESSION_EXPIRED_MESSAGE, NotificationType.ERROR)
        if self._on_unauthorized is not None:
            self._on_unauthorized()

    @contextlib.contextmanager
    def _admin_call(
        self,
        operation: str,
        failure_message: str | None = None,
    ) -> Iterator[_Outcome]:
        """管理者操作のエラーを通知に変換する.

        Args:
            operation: 操作名（ログ用）
            failure_message: 失敗時の通知（省略時は例外メッセージ）
        """
        outcome = _Outcome()
        try:
            yield outcome
        except AuthorizationError:
            outcome.ok = False
            self._handle_unauthorized()
        except StorefrontError as e:
            outcome.ok = False
            logger.error(f"Failed to {operation}: {e}")
            self.notify(failure_message or f"Error: {e}", NotificationType.ERROR)

    # =========================================================================
    # 管理用カタログ
    # =========================================================================

    async def load_admin_products(self, page: int = 1, search: str = "") -> bool:
        """管理用商品一覧の1ページを読み込む."""
        if not self._token:
            return False

        with self._admin_call(
            "load admin products", "Could not load products for admin panel."
        ) as outcome:
            result = await self._api.fetch_admin_products(page, search, self._token)
            pagination = AdminProductsPagination(
                page=result.page, pages=result.pages, total=result.total
            )
            self.dispatch(actions.set_admin_products(result.products, pagination))
        return outcome.ok

    async def add_product(self, data: dict[str, Any]) -> Product | None:
        """商品を作成し、一覧の先頭に追加."""
        created: Product | None = None
        with self._admin_call("add product"):
            created = await self._api.create_product(data, self._token or "")
            self.dispatch(actions.add_product(created))
            self.notify("Product added successfully!")
        return created

    async def update_product(self, product: Product) -> Product | None:
        """商品を更新."""
        saved: Product | None = None
        with self._admin_call("update product"):
            saved = await self._api.update_product(product, self._token or "")
            self.dispatch(actions.update_product(saved))
            self.notify("Product updated successfully!")
        return saved

    async def delete_product(self, product_id: str) -> bool:
        """商品を削除."""
        with self._admin_call("delete product") as outcome:
            await self._api.delete_product(product_id, self._token or "")
            self.dispatch(actions.remove_product(product_id))
            self.notify("Product deleted successfully.")
        return outcome.ok

    # =========================================================================
    # 問い合わせ
    # =========================================================================

    async def add_contact_message(self, data: dict[str, Any]) -> None:
        """問い合わせを送信（エラーは呼び出し元に送出）."""
        await self._api.create_message(data)

    async def mark_message_as_read(self, message_id: str, is_read: bool = True) -> bool:
        """問い合わせの既読状態を更新."""
        with self._admin_call("update message") as outcome:
            message = await self._api.update_message_read(message_id, is_read, self._token or "")
            self.dispatch(actions.update_contact_message(message))
            self.notify(f"Message marked as {'read' if is_read else 'unread'}.")
        return outcome.ok

    async def delete_contact_message(self, message_id: str) -> bool:
        """問い合わせを削除."""
        with self._admin_call("delete message") as outcome:
            await self._api.delete_message(message_id, self._token or "")
            self.dispatch(actions.remove_contact_message(message_id))
            self.notify("Message has been deleted.")
        return outcome.ok


def _default_storage(settings: StorefrontSettings) -> KeyValueStorage:
    """設定からストレージを作成（URL 未指定時は storage_dir のファイルストレージ）."""
    if settings.storage_url:
        return get_storage(settings.storage_url)
    return FileStorage(settings.storage_dir)


def _replace_by_id(items: list[Any], replacement: Any) -> list[Any]:
    return [replacement if item.id == replacement.id else item for item in items]


__all__ = [
    "StateSubscription",
    "StorefrontStore",
]
