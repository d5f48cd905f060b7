"""Tests for the decrement pipeline's per-variant locking."""
import asyncio

import pytest

from app.errors import InsufficientStockError, NotFoundError
from app.schemas import SelectedOption
from app.services.stock_service import StockService
from tests.conftest import SHIRT_M, FakeShopify, make_variant

SIZE_M = [SelectedOption(name="Size", value="M")]


class SlowFakeShopify(FakeShopify):
    """Yields to the event loop on every admin call so requests interleave."""

    async def admin(self, query, variables=None):
        await asyncio.sleep(0.01)
        return await super().admin(query, variables)


@pytest.fixture
def slow_service(test_settings):
    fake = SlowFakeShopify()
    fake.add_product("shirt", make_variant(SHIRT_M, "M", Size="M"))
    return StockService(config=test_settings, client=fake), fake


def test_concurrent_decrements_on_one_variant_are_serialized(slow_service):
    service, fake = slow_service
    fake.metafields[SHIRT_M] = "10"

    async def decrease_five_times():
        return await asyncio.gather(
            *[service.decrease_variant_stock("shirt", SIZE_M, 1) for _ in range(5)]
        )

    results = asyncio.run(decrease_five_times())

    assert fake.metafields[SHIRT_M] == "5"
    assert sorted(r.old_stock for r in results) == [6, 7, 8, 9, 10]
    assert service._variant_locks == {}


def test_concurrent_decrements_stop_at_zero(slow_service):
    service, fake = slow_service
    fake.metafields[SHIRT_M] = "2"

    async def decrease_three_times():
        return await asyncio.gather(
            *[service.decrease_variant_stock("shirt", SIZE_M, 1) for _ in range(3)],
            return_exceptions=True,
        )

    results = asyncio.run(decrease_three_times())

    assert fake.metafields[SHIRT_M] == "0"
    assert sum(isinstance(r, InsufficientStockError) for r in results) == 1


def test_variant_locks_are_released_after_each_decrement(stock_service, fake_shopify):
    variants = [
        make_variant(f"gid://shopify/ProductVariant/{n}", str(n), Size=str(n))
        for n in range(1000, 1050)
    ]
    fake_shopify.add_product("socks", *variants)
    for variant in variants:
        fake_shopify.metafields[variant["id"]] = "0"

    for variant in variants:
        size = [SelectedOption(name="Size", value=variant["title"])]
        with pytest.raises(InsufficientStockError):
            asyncio.run(stock_service.decrease_variant_stock("socks", size, 1))

    fake_shopify.metafields[variants[0]["id"]] = "3"
    asyncio.run(stock_service.decrease_variant_stock(
        "socks", [SelectedOption(name="Size", value="1000")], 1
    ))
    del fake_shopify.metafields[variants[1]["id"]]
    with pytest.raises(NotFoundError):
        asyncio.run(stock_service.decrease_variant_stock(
            "socks", [SelectedOption(name="Size", value="1001")], 1
        ))

    assert stock_service._variant_locks == {}
