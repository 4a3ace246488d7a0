"""組み込みサンプルカタログ.

初回ロードが失敗した場合のフォールバック。UI が空にならないことを保証する。
"""

from __future__ import annotations

from storefront.commerce.models import Product


def _images(seed: str) -> list[str]:
    return [
        f"https://picsum.photos/seed/{seed}/400/500",
        f"https://picsum.photos/seed/{seed}2/400/500",
        f"https://picsum.photos/seed/{seed}3/400/500",
    ]


SAMPLE_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="101",
        name="Gulmohar Lawn Suit",
        category="Cotton",
        price=3500,
        description="Pure cotton lawn three-piece with exquisite embroidery and soft dupatta. Ideal for daily wear.",
        fabric="Lawn Cotton",
        colors=["Pastel Pink", "Beige", "Mint"],
        sizes=["S", "M", "L", "XL", "Free"],
        is_new_arrival=True,
        images=_images("gulmohar"),
    ),
    Product(
        id="102",
        name="Shalimar Silk Ensemble",
        category="Silk",
        price=6200,
        description="Elegant raw silk suit with delicate zari work. Perfect for evening occasions.",
        fabric="Raw Silk",
        colors=["Maroon", "Gold"],
        sizes=["36", "38", "40", "42"],
        is_new_arrival=True,
        is_trending=True,
        images=_images("shalimar"),
    ),
    Product(
        id="103",
        name="Party Princess Georgette",
        category="Party Wear",
        price=7800,
        description="Heavy georgette suit with stone embellishments. Ready for any celebration.",
        fabric="Georgette",
        colors=["Royal Blue", "Crimson"],
        sizes=["Free"],
        is_trending=True,
        on_sale=True,
        images=_images("georgette"),
    ),
    Product(
        id="104",
        name="Everyday Beige Cotton",
        category="Cotton",
        price=2800,
        description="Simple yet stylish cotton suit for comfortable daily use.",
        fabric="Cotton",
        colors=["Beige", "Lavender"],
        sizes=["38", "40", "42", "44", "46"],
        on_sale=True,
        images=_images("beige"),
    ),
    Product(
        id="105",
        name="Mogra Chiffon",
        category="Party Wear",
        price=5900,
        description="Flowy chiffon with printed motifs and lace detailing.",
        fabric="Chiffon",
        colors=["White", "Yellow"],
        sizes=["S", "M", "L"],
        is_trending=True,
        images=_images("mogra"),
    ),
    Product(
        id="106",
        name="Sapphire Lawn Print",
        category="Cotton",
        price=3200,
        description="Vibrant printed lawn suit with comfortable cotton dupatta.",
        fabric="Lawn Cotton",
        colors=["Blue", "Green", "White"],
        sizes=["36", "38", "40", "42", "44"],
        is_new_arrival=True,
        images=_images("sapphire"),
    ),
    Product(
        id="107",
        name="Emerald Viscose",
        category="Silk",
        price=5500,
        description="Smooth viscose silk blend with minimalist golden detailing.",
        fabric="Viscose Silk",
        colors=["Emerald", "Black"],
        sizes=["M", "L", "XL"],
        is_new_arrival=True,
        is_trending=True,
        images=_images("emerald"),
    ),
    Product(
        id="108",
        name="Maharani Velvet",
        category="Party Wear",
        price=9500,
        description="Luxurious velvet three-piece with heavy sequin work. Ultimate festive attire.",
        fabric="Velvet",
        colors=["Navy", "Wine Red"],
        sizes=["38", "40", "42", "44", "Free"],
        is_new_arrival=True,
        is_trending=True,
        on_sale=True,
        images=_images("maharani"),
    ),
)


def sample_catalog() -> list[Product]:
    """サンプルカタログのコピーを返す."""
    return [product.model_copy(deep=True) for product in SAMPLE_PRODUCTS]
