"""API プロバイダー実装.

- HttpStorefrontAPI: httpx によるリモート API クライアント
- InMemoryStorefrontAPI: テスト・開発用のインメモリ実装
"""

from storefront.commerce.providers.http import HttpStorefrontAPI
from storefront.commerce.providers.memory import InMemoryStorefrontAPI
from storefront.commerce.providers.sample_data import SAMPLE_PRODUCTS, sample_catalog


__all__ = [
    "SAMPLE_PRODUCTS",
    "HttpStorefrontAPI",
    "InMemoryStorefrontAPI",
    "sample_catalog",
]
