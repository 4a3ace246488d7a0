"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.analytics import DataLayerSink
from storefront.commerce.models import Product, StoreSettings
from storefront.commerce.providers import InMemoryStorefrontAPI, sample_catalog
from storefront.config import StorefrontSettings
from storefront.state import ManualScheduler, StorefrontStore
from storefront.storage import MemoryStorage


class FakeClock:
    """Manually advanced clock for watermark tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


def make_product(product_id: str, **overrides) -> Product:
    """Create a product with sensible defaults.

    Args:
        product_id: Product identity.
        **overrides: Field overrides.

    Returns:
        Product instance for testing.
    """
    data = {
        "id": product_id,
        "name": f"Product {product_id}",
        "category": "Cotton",
        "price": 1000.0,
        "sizes": ["S", "M", "L"],
        "images": [f"https://img.example/{product_id}/1.jpg", f"https://img.example/{product_id}/2.jpg"],
    }
    data.update(overrides)
    return Product(**data)


@pytest.fixture
def settings() -> StorefrontSettings:
    """Create settings tuned for fast tests."""
    return StorefrontSettings(full_catalog_deferment=0.0, log_level="DEBUG")


@pytest.fixture
def storage() -> MemoryStorage:
    """Create an empty in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a manually advanced scheduler."""
    return ManualScheduler()


@pytest.fixture
def sink() -> DataLayerSink:
    """Create an analytics sink that records events."""
    return DataLayerSink()


@pytest.fixture
def clock() -> FakeClock:
    """Create a fixed clock."""
    return FakeClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def api() -> InMemoryStorefrontAPI:
    """Create an in-memory API seeded with the sample catalog."""
    return InMemoryStorefrontAPI(
        products=sample_catalog(),
        settings=StoreSettings(contact_phone="+8801700000000"),
    )


@pytest.fixture
def store(
    api: InMemoryStorefrontAPI,
    storage: MemoryStorage,
    sink: DataLayerSink,
    scheduler: ManualScheduler,
    settings: StorefrontSettings,
    clock: FakeClock,
) -> StorefrontStore:
    """Create a store wired to in-memory collaborators."""
    return StorefrontStore(
        api,
        storage=storage,
        event_sink=sink,
        scheduler=scheduler,
        settings=settings,
        clock=clock,
    )
