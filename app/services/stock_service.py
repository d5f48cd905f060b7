"""Stock service - the lookup, decrement and synchronization pipelines."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple

from app.config import Settings, settings as default_settings
from app.errors import InsufficientStockError, ValidationError
from app.schemas import (
    DecreaseStockResponse,
    SelectedOption,
    SyncStockResponse,
    VariantIdResponse,
)
from app.services.inventory_service import InventoryService
from app.services.shopify_client import ShopifyClient
from app.services.variant_service import VariantService

logger = logging.getLogger(__name__)


class StockService:
    """Composes variant resolution with custom stock reads and writes."""

    def __init__(self, config: Optional[Settings] = None, client: Optional[ShopifyClient] = None):
        self.config = config or default_settings
        self.client = client or ShopifyClient(self.config)
        self.variants = VariantService(self.client)
        self.inventory = InventoryService(self.client, self.config)
        # Serializes read-modify-write per variant within this process only.
        # Each entry is (lock, number of holders and waiters).
        self._variant_locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _variant_lock(self, variant_gid: str):
        """Hold the lock for ``variant_gid``; the entry is dropped once unused."""
        lock, users = self._variant_locks.get(variant_gid, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._variant_locks[variant_gid] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._variant_locks[variant_gid]
            if users == 1:
                del self._variant_locks[variant_gid]
            else:
                self._variant_locks[variant_gid] = (lock, users - 1)

    async def get_variant_id(self, handle: str, options: List[SelectedOption]) -> VariantIdResponse:
        variant_gid = await self.variants.resolve_variant_gid(handle, options)
        return VariantIdResponse(variant_id=variant_gid)

    async def decrease_variant_stock(
        self,
        handle: str,
        options: List[SelectedOption],
        decrease_by: int = 1
    ) -> DecreaseStockResponse:
        """
        Decrease the custom stock metafield of the variant matching ``options``.

        Fails with InsufficientStockError, without writing, when the new value
        would be negative. Requests in other processes can still interleave
        between the read and the write.
        """
        if decrease_by <= 0:
            raise ValidationError("'decreaseBy' must be a positive integer.")

        variant_gid = await self.variants.resolve_variant_gid(handle, options)

        async with self._variant_lock(variant_gid):
            old_stock = await self.inventory.get_custom_stock(variant_gid)
            new_stock = old_stock - decrease_by
            if new_stock < 0:
                raise InsufficientStockError(old_stock, decrease_by)

            result = await self.inventory.set_custom_stock(variant_gid, new_stock)

        logger.info("Decreased %s stock %s -> %s", variant_gid, old_stock, new_stock)
        return DecreaseStockResponse(
            message="Variant custom stock successfully decreased.",
            variant_gid=variant_gid,
            product_handle=handle,
            options=options,
            old_stock=old_stock,
            new_stock=result["newStock"],
            decreased_by=decrease_by,
        )

    async def sync_variant_stock(self, handle: str, options: List[SelectedOption]) -> SyncStockResponse:
        """Overwrite the target variant's custom stock with its source's available inventory."""
        source_handle = self.config.inventory_source_handle(handle)

        metafield_owner_gid = await self.variants.resolve_variant_gid(handle, options)
        logger.info("Metafield owner GID (%s): %s", handle, metafield_owner_gid)

        inventory_source_gid = await self.variants.resolve_variant_gid(source_handle, options)
        logger.info("Inventory source GID (%s): %s", source_handle, inventory_source_gid)

        available_stock = await self.inventory.get_available_inventory(inventory_source_gid)
        logger.info("Available stock from source: %s", available_stock)

        result = await self.inventory.set_custom_stock(metafield_owner_gid, available_stock)

        return SyncStockResponse(
            message="Variant custom stock successfully synchronized from Shopify inventory to custom metafield.",
            product_handle=handle,
            inventory_source_handle=source_handle,
            options=options,
            metafield_owner_gid=metafield_owner_gid,
            new_stock=result["newStock"],
        )


# Singleton instance
stock_service = StockService()


def get_stock_service() -> StockService:
    """Dependency for FastAPI to get the stock service."""
    return stock_service
