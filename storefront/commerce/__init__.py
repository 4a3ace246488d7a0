"""ストアフロント商取引モジュール.

データモデル、ネットワークポート、プロバイダー実装を提供。

使用例:
    >>> from storefront.commerce.models import Product
    >>> from storefront.commerce.providers import InMemoryStorefrontAPI
    >>>
    >>> api = InMemoryStorefrontAPI(products=[Product(id="1", name="A", price=10)])
"""

from storefront.commerce.interfaces import HomeData, IStorefrontAPI


__all__ = ["HomeData", "IStorefrontAPI"]
