"""抽象インターフェース."""

from storefront.commerce.interfaces.core import HomeData, IStorefrontAPI


__all__ = ["HomeData", "IStorefrontAPI"]
