"""ストアフロントデータモデル.

設計原則:
- Pydantic v2 による型安全なデータ検証
- Python 側は snake_case、ワイヤー・永続化形式は camelCase
- カート行・注文明細は不変（frozen）
"""

from storefront.commerce.models.admin import AdminProductsPage, ContactMessage, DashboardStats
from storefront.commerce.models.base import StorefrontModel
from storefront.commerce.models.cart import CartKey, CartLine, cart_total
from storefront.commerce.models.order import (
    CustomerDetails,
    Order,
    OrderStatus,
    PaymentDetails,
    PaymentInfo,
    PaymentMethod,
)
from storefront.commerce.models.product import PINNED_THRESHOLD, Product
from storefront.commerce.models.settings import (
    DEFAULT_SETTINGS,
    CategoryImage,
    ShippingOption,
    SliderImage,
    SocialMediaLink,
    StoreSettings,
)


__all__ = [
    "DEFAULT_SETTINGS",
    "PINNED_THRESHOLD",
    # 管理
    "AdminProductsPage",
    # カート
    "CartKey",
    "CartLine",
    "CategoryImage",
    "ContactMessage",
    # 注文
    "CustomerDetails",
    "DashboardStats",
    "Order",
    "OrderStatus",
    "PaymentDetails",
    "PaymentInfo",
    "PaymentMethod",
    # 商品
    "Product",
    "ShippingOption",
    "SliderImage",
    "SocialMediaLink",
    # 設定
    "StoreSettings",
    "StorefrontModel",
    "cart_total",
]
