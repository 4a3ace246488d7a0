"""カタログ調停器.

2段階ロードで初回表示までの待ち時間を短くしつつ、最終的に完全なカタログを保持する。

1. ライト段階: 新着・トレンド商品のみ（画像1枚）を取得。失敗時はサンプルカタログ
2. 完全段階: 全商品を取得し、ID をキーに既存の一覧へマージ（取得側が優先）

マージは冪等で、入力の並び順に依らず同じ商品集合になる。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from storefront.analytics import AnalyticsEvent, EventSink, NullEventSink
from storefront.commerce.interfaces import IStorefrontAPI
from storefront.commerce.models import DEFAULT_SETTINGS, Product, StoreSettings
from storefront.commerce.providers.sample_data import sample_catalog
from storefront.core.exceptions import StorefrontError


logger = logging.getLogger(__name__)


class CatalogPhase(str, Enum):
    """ロード段階."""

    LITE = "lite"
    FULL = "full"
    FALLBACK = "fallback"


@dataclass
class CatalogResult:
    """ロード結果.

    Attributes:
        products: 商品一覧
        settings: ストア設定（完全段階ではNone）
        full_loaded: 完全なカタログを保持したか
        phase: ロード段階
    """

    products: list[Product]
    settings: StoreSettings | None
    full_loaded: bool
    phase: CatalogPhase


def merge_products(
    existing: Iterable[Product],
    fetched: Iterable[Product],
    overwrite: bool = True,
) -> list[Product]:
    """ID をキーに商品一覧をマージ.

    既存の ID は元の位置を保ち、新しい ID は取得順で末尾に追加する。

    Args:
        existing: 保持中の商品
        fetched: 取得した商品
        overwrite: 重複 ID で取得側を優先するか

    Returns:
        マージ後の商品一覧
    """
    merged: dict[str, Product] = {p.id: p for p in existing}
    for product in fetched:
        if overwrite or product.id not in merged:
            merged[product.id] = product
    return list(merged.values())


class CatalogReconciler:
    """カタログ調停器.

    Example:
        >>> reconciler = CatalogReconciler(api)
        >>> lite = await reconciler.load_lite()
        >>> full = await reconciler.load_full(lite.products)
    """

    def __init__(self, port: IStorefrontAPI, event_sink: EventSink | None = None) -> None:
        """初期化.

        Args:
            port: ネットワークポート
            event_sink: 分析イベントの出力先
        """
        self._port = port
        self._event_sink = event_sink or NullEventSink()

    async def load_lite(self) -> CatalogResult:
        """ライト段階のロード.

        失敗時は例外を送出せず、サンプルカタログ（完全扱い）を返す。

        Returns:
            CatalogResult
        """
        try:
            home = await self._port.fetch_home_data()
        except StorefrontError as e:
            logger.warning(f"Failed to load initial data, using fallback: {e}")
            result = CatalogResult(
                products=sample_catalog(),
                settings=DEFAULT_SETTINGS.model_copy(deep=True),
                full_loaded=True,
                phase=CatalogPhase.FALLBACK,
            )
            self._emit(result)
            return result

        settings = home.settings or DEFAULT_SETTINGS.model_copy(deep=True)
        if home.products:
            result = CatalogResult(
                products=list(home.products),
                settings=settings,
                full_loaded=False,
                phase=CatalogPhase.LITE,
            )
            logger.info(f"Lite catalog loaded: {len(result.products)} products")
        else:
            logger.warning("Lite catalog is empty, using sample products")
            result = CatalogResult(
                products=sample_catalog(),
                settings=settings,
                full_loaded=False,
                phase=CatalogPhase.FALLBACK,
            )
        self._emit(result)
        return result

    async def load_full(self, existing: Iterable[Product]) -> CatalogResult:
        """完全段階のロード.

        Args:
            existing: 保持中の商品

        Returns:
            CatalogResult

        Raises:
            StorefrontError: 取得に失敗した場合
        """
        fetched = await self._port.fetch_all_products()
        if not fetched:
            logger.warning("Full catalog is empty, using sample products")
            fetched = sample_catalog()

        result = CatalogResult(
            products=merge_products(existing, fetched),
            settings=None,
            full_loaded=True,
            phase=CatalogPhase.FULL,
        )
        logger.info(f"Full catalog loaded: {len(result.products)} products")
        self._emit(result)
        return result

    def _emit(self, result: CatalogResult) -> None:
        self._event_sink.emit(
            AnalyticsEvent(
                "catalog_loaded",
                {"phase": result.phase.value, "count": len(result.products)},
            )
        )
