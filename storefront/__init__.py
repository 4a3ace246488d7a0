"""Storefront - client-side state container for a small apparel storefront.

カタログの2段階ロード、複合キーのカート、新着注文の透かし、
検証付きの永続化を一つのストアで扱う。

Quick Start:
    >>> from storefront.commerce.providers import HttpStorefrontAPI
    >>> from storefront.state import StorefrontStore
    >>> from storefront.storage import get_storage
    >>>
    >>> async with HttpStorefrontAPI("https://shop.example.com/api") as api:
    ...     store = StorefrontStore(api, storage=get_storage("file:///tmp/storefront"))
    ...     await store.boot()
    ...     rails = store.home_rails()
"""

__version__ = "0.1.0"
