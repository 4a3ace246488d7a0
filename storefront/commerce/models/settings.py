"""ストア設定データモデル.

グローバル設定の集約。取得は一度、更新時は丸ごと置き換える。
"""

from __future__ import annotations

from pydantic import ConfigDict, Field

from storefront.commerce.models.base import StorefrontModel


DEFAULT_CATEGORY_IMAGE = "https://picsum.photos/seed/sazo-default-category/600/800"


class SliderImage(StorefrontModel):
    """ヒーロースライダー画像."""

    id: int = Field(..., description="スライドID")
    title: str = Field(default="", description="タイトル")
    subtitle: str = Field(default="", description="サブタイトル")
    color: str = Field(default="", description="テキスト色")
    image: str = Field(..., description="画像URL")
    mobile_image: str | None = Field(default=None, description="モバイル用画像URL")


class CategoryImage(StorefrontModel):
    """カテゴリ画像の対応."""

    category_name: str = Field(..., description="カテゴリ名")
    image: str = Field(..., description="画像URL")


class ShippingOption(StorefrontModel):
    """配送オプション."""

    id: str = Field(..., description="オプションID")
    label: str = Field(..., description="表示ラベル")
    charge: float = Field(default=0.0, ge=0, description="配送料")


class SocialMediaLink(StorefrontModel):
    """SNSリンク."""

    platform: str = Field(..., description="プラットフォーム名")
    url: str = Field(..., description="URL")


class StoreSettings(StorefrontModel):
    """ストア設定モデル.

    管理者パスワードはクライアント側で保持しない（未知フィールドは無視）。

    Attributes:
        cod_enabled: 代引き有効
        online_payment_enabled: オンライン決済有効
        online_payment_methods: オンライン決済手段一覧
        slider_images: スライダー画像
        category_images: カテゴリ→画像の対応
        homepage_new_arrivals_count: ホーム新着表示件数
        homepage_trending_count: ホームトレンド表示件数
    """

    # 支払い
    online_payment_info: str = Field(default="", description="オンライン決済の案内文")
    online_payment_info_styles: dict[str, str] = Field(
        default_factory=lambda: {"fontSize": "0.875rem"},
        description="案内文のスタイル",
    )
    cod_enabled: bool = Field(default=True, description="代引き有効")
    online_payment_enabled: bool = Field(default=True, description="オンライン決済有効")
    online_payment_methods: list[str] = Field(default_factory=list, description="決済手段")

    # 販促画像
    slider_images: list[SliderImage] = Field(default_factory=list, description="スライダー画像")
    category_images: list[CategoryImage] = Field(default_factory=list, description="カテゴリ画像")
    categories: list[str] = Field(default_factory=list, description="カテゴリ一覧")
    shipping_options: list[ShippingOption] = Field(default_factory=list, description="配送オプション")
    product_page_promo_image: str = Field(default="", description="商品ページの販促画像")

    # 連絡先
    contact_address: str = Field(default="", description="住所")
    contact_phone: str = Field(default="", description="電話番号")
    contact_email: str = Field(default="", description="メールアドレス")
    whatsapp_number: str = Field(default="", description="WhatsApp番号")
    show_whats_app_button: bool = Field(
        default=False, alias="showWhatsAppButton", description="WhatsAppボタン表示"
    )
    show_city_field: bool = Field(default=True, description="市区町村入力欄表示")
    social_media_links: list[SocialMediaLink] = Field(default_factory=list, description="SNSリンク")

    # テキスト
    privacy_policy: str = Field(default="", description="プライバシーポリシー")
    footer_description: str = Field(default="", description="フッター説明文")
    admin_email: str = Field(default="", description="管理者メールアドレス")

    # ホーム表示件数
    homepage_new_arrivals_count: int = Field(default=4, ge=0, description="新着表示件数")
    homepage_trending_count: int = Field(default=4, ge=0, description="トレンド表示件数")

    model_config = ConfigDict(extra="ignore")

    def category_image(self, category_name: str) -> str:
        """カテゴリ画像URLを取得.

        Args:
            category_name: カテゴリ名

        Returns:
            対応する画像URL、未設定の場合は既定画像
        """
        for entry in self.category_images:
            if entry.category_name == category_name:
                return entry.image
        return DEFAULT_CATEGORY_IMAGE

    def merged(self, partial: dict) -> StoreSettings:
        """部分更新を適用した新しい設定を返す.

        Args:
            partial: 更新フィールド（snake_case または camelCase）

        Returns:
            検証済みの新しい設定
        """
        data = self.model_dump(by_alias=True)
        data.update(StoreSettings.normalize_keys(partial))
        return StoreSettings.model_validate(data)

    @staticmethod
    def normalize_keys(partial: dict) -> dict:
        """snake_case キーを camelCase エイリアスに揃える."""
        aliases = {name: field.alias for name, field in StoreSettings.model_fields.items()}
        return {aliases.get(key, key): value for key, value in partial.items()}


DEFAULT_SETTINGS = StoreSettings()
