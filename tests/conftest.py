"""
Shared pytest fixtures.

``FakeShopify`` stands in for both GraphQL endpoints: products are keyed by
handle for the storefront, variants by GID for the admin API.
"""
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import app
from app.services.stock_service import StockService, get_stock_service


def make_variant(gid: str, title: str, **options) -> dict:
    """Build a storefront variant node; option names keep their keyword casing."""
    return {
        "id": gid,
        "title": title,
        "selectedOptions": [{"name": name, "value": value} for name, value in options.items()],
    }


class FakeShopify:
    """In-memory double for ShopifyClient."""

    def __init__(self):
        self.products: Dict[str, List[dict]] = {}
        self.inventory_levels: Dict[str, List[Optional[int]]] = {}
        self.metafields: Dict[str, str] = {}
        self.user_errors: List[dict] = []
        self.writes: List[dict] = []
        self.storefront_calls: List[str] = []
        self.admin_calls = 0

    def add_product(self, handle: str, *variants: dict):
        self.products[handle] = list(variants)
        for variant in variants:
            self.inventory_levels.setdefault(variant["id"], [])

    async def storefront(self, query: str, variables: dict = None) -> dict:
        handle = variables["handle"]
        self.storefront_calls.append(handle)
        if handle not in self.products:
            return {"product": None}
        return {
            "product": {
                "variants": {"edges": [{"node": node} for node in self.products[handle]]}
            }
        }

    async def admin(self, query: str, variables: dict = None) -> dict:
        self.admin_calls += 1
        if "metafieldsSet" in query:
            return self._metafields_set(variables["metafields"])

        gid = variables["id"]
        if gid not in self.inventory_levels:
            return {"productVariant": None}

        if "inventoryLevels" in query:
            nodes = []
            for quantity in self.inventory_levels[gid]:
                quantities = [] if quantity is None else [{"name": "available", "quantity": quantity}]
                nodes.append({"quantities": quantities})
            return {
                "productVariant": {
                    "id": gid,
                    "inventoryItem": {"inventoryLevels": {"nodes": nodes}},
                }
            }

        value = self.metafields.get(gid)
        metafield = None if value is None else {"id": f"gid://shopify/Metafield/{len(gid)}", "value": value}
        return {"productVariant": {"id": gid, "metafield": metafield}}

    def _metafields_set(self, metafields: List[dict]) -> dict:
        if self.user_errors:
            return {"metafieldsSet": {"metafields": [], "userErrors": self.user_errors}}
        for metafield in metafields:
            self.writes.append(metafield)
            self.metafields[metafield["ownerId"]] = metafield["value"]
        return {
            "metafieldsSet": {
                "metafields": [{"id": "gid://shopify/Metafield/1", "value": m["value"]} for m in metafields],
                "userErrors": [],
            }
        }


SHIRT_M = "gid://shopify/ProductVariant/101"
SHIRT_L = "gid://shopify/ProductVariant/102"
STORE_SHIRT_M = "gid://shopify/ProductVariant/201"
STORE_SHIRT_L = "gid://shopify/ProductVariant/202"


@pytest.fixture
def test_settings():
    return Settings(
        shopify_store_domain="test-shop.myshopify.com",
        shopify_storefront_access_token="storefront-token",
        shopify_admin_access_token="admin-token",
        inventory_source_handles={},
    )


@pytest.fixture
def fake_shopify():
    fake = FakeShopify()
    fake.add_product(
        "shirt",
        make_variant(SHIRT_M, "M / Red", Size="M", Color="Red"),
        make_variant(SHIRT_L, "L / Red", Size="L", Color="Red"),
    )
    fake.add_product(
        "shirt-store",
        make_variant(STORE_SHIRT_M, "M / Red", Size="M", Color="Red"),
        make_variant(STORE_SHIRT_L, "L / Red", Size="L", Color="Red"),
    )
    return fake


@pytest.fixture
def stock_service(test_settings, fake_shopify):
    return StockService(config=test_settings, client=fake_shopify)


@pytest.fixture
def client(stock_service):
    app.dependency_overrides[get_stock_service] = lambda: stock_service
    yield TestClient(app)
    app.dependency_overrides.clear()
