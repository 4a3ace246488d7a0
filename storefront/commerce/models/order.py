"""注文データモデル.

注文はチェックアウト時点のカート行の凍結コピーを保持する。
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from storefront.commerce.models.base import StorefrontModel
from storefront.commerce.models.cart import CartLine, cart_total


class OrderStatus(str, Enum):
    """注文ステータス.

    Pending → Confirmed → Shipped → Delivered の順に1段階ずつ、
    または非終端状態から Cancelled へ遷移する。
    """

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        """終端状態かどうか."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def can_transition_to(self, target: OrderStatus) -> bool:
        """指定ステータスへ遷移可能か判定.

        Args:
            target: 遷移先ステータス

        Returns:
            遷移可能な場合True（同一ステータスは常に許可、段階の飛び越しは不可）
        """
        if target == self:
            return True
        if self.is_terminal:
            return False
        if target == OrderStatus.CANCELLED:
            return True
        return _LIFECYCLE.index(target) == _LIFECYCLE.index(self) + 1


_LIFECYCLE = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


class PaymentMethod(str, Enum):
    """支払い方法."""

    COD = "COD"
    ONLINE = "Online"


class PaymentDetails(StorefrontModel):
    """オンライン決済の詳細."""

    payment_number: str = Field(default="", description="支払い元番号")
    method: str = Field(default="", description="決済手段")
    amount: float = Field(default=0.0, ge=0, description="支払い金額")
    transaction_id: str = Field(default="", description="取引ID")


class PaymentInfo(StorefrontModel):
    """支払い情報."""

    payment_method: PaymentMethod = Field(default=PaymentMethod.COD, description="支払い方法")
    payment_details: PaymentDetails | None = Field(default=None, description="決済詳細")


class CustomerDetails(StorefrontModel):
    """顧客連絡先."""

    name: str = Field(..., description="氏名")
    phone: str = Field(..., description="電話番号")
    address: str = Field(..., description="住所")
    city: str = Field(default="", description="市区町村")


class Order(StorefrontModel):
    """注文モデル.

    Attributes:
        id: 注文一意識別子
        order_id: 表示用の短い注文コード
        customer_name: 顧客氏名
        phone: 電話番号
        address: 住所
        city: 市区町村
        cart_items: 購入時点のカート行（凍結コピー）
        total: 合計金額（配送料込み）
        shipping_charge: 配送料
        status: 注文ステータス
        date: 表示用日付（ISO 8601 文字列）
        created_at: 作成日時
        payment_method: 支払い方法
        payment_details: 決済詳細
    """

    id: str = Field(..., description="注文一意識別子")
    order_id: str = Field(default="", description="表示用注文コード")
    customer_name: str = Field(default="", description="顧客氏名")
    phone: str = Field(default="", description="電話番号")
    address: str = Field(default="", description="住所")
    city: str = Field(default="", description="市区町村")
    cart_items: list[CartLine] = Field(default_factory=list, description="購入時カート行")
    total: float = Field(default=0.0, ge=0, description="合計金額")
    shipping_charge: float = Field(default=0.0, ge=0, description="配送料")
    status: OrderStatus = Field(default=OrderStatus.PENDING, description="注文ステータス")
    date: str = Field(default="", description="表示用日付")
    created_at: datetime | None = Field(default=None, description="作成日時")
    payment_method: PaymentMethod = Field(default=PaymentMethod.COD, description="支払い方法")
    payment_details: PaymentDetails | None = Field(default=None, description="決済詳細")

    @property
    def display_id(self) -> str:
        """表示用ID（短いコードがなければシステムID）."""
        return self.order_id or self.id

    @property
    def product_total(self) -> float:
        """商品小計（配送料を除く）."""
        return cart_total(self.cart_items)
