"""Inventory service - reads inventory levels and the custom stock metafield."""
import logging
import re

from app.config import Settings
from app.errors import MetafieldUpdateError, NotFoundError
from app.services.shopify_client import ShopifyClient

logger = logging.getLogger(__name__)

INVENTORY_LEVELS_QUERY = """
query getVariantInventory($id: ID!) {
  productVariant(id: $id) {
    id
    inventoryItem {
      inventoryLevels(first: 100) {
        nodes {
          quantities(names: ["available"]) {
            name
            quantity
          }
        }
      }
    }
  }
}
"""

CUSTOM_STOCK_QUERY = """
query getVariantCustomStock($id: ID!, $namespace: String!, $key: String!) {
  productVariant(id: $id) {
    id
    metafield(namespace: $namespace, key: $key) {
      id
      value
    }
  }
}
"""

METAFIELDS_SET_MUTATION = """
mutation metafieldsSet($metafields: [MetafieldsSetInput!]!) {
  metafieldsSet(metafields: $metafields) {
    metafields {
      id
      value
    }
    userErrors {
      field
      message
    }
  }
}
"""

_STOCK_VALUE = re.compile(r"^\d+$")


class InventoryService:
    """Reads real inventory and reads/writes the custom stock metafield."""

    def __init__(self, client: ShopifyClient, config: Settings):
        self.client = client
        self.config = config

    async def get_available_inventory(self, variant_gid: str) -> int:
        """Sum the 'available' quantity of a variant across all locations."""
        data = await self.client.admin(INVENTORY_LEVELS_QUERY, {"id": variant_gid})
        variant = data.get("productVariant")
        if not variant:
            raise NotFoundError(f"Product variant GID {variant_gid} not found.")

        inventory_item = variant.get("inventoryItem") or {}
        levels = (inventory_item.get("inventoryLevels") or {}).get("nodes") or []
        if not levels:
            logger.warning("No inventory levels found for variant %s.", variant_gid)
            return 0

        total = 0
        for level in levels:
            for quantity in level.get("quantities") or []:
                if quantity.get("name") == "available":
                    total += quantity.get("quantity") or 0
                    break

        if total < 0:
            logger.warning(
                "Available inventory for %s is negative (%s); using 0.", variant_gid, total
            )
            return 0
        return total

    async def get_custom_stock(self, variant_gid: str) -> int:
        """Read the custom stock metafield, which must hold a non-negative integer."""
        field = self.config.stock_metafield
        data = await self.client.admin(
            CUSTOM_STOCK_QUERY,
            {
                "id": variant_gid,
                "namespace": self.config.stock_metafield_namespace,
                "key": self.config.stock_metafield_key,
            },
        )
        variant = data.get("productVariant")
        if not variant:
            raise NotFoundError(f"Product variant GID {variant_gid} not found.")

        metafield = variant.get("metafield")
        if not metafield or metafield.get("value") is None:
            raise NotFoundError(f"Metafield {field} not found on variant {variant_gid}.")

        raw = str(metafield["value"]).strip()
        if not _STOCK_VALUE.match(raw):
            raise NotFoundError(
                f"Valid integer stock value not found in metafield {field} "
                f"on variant {variant_gid} (got '{raw}')."
            )
        return int(raw)

    async def set_custom_stock(self, variant_gid: str, quantity: int) -> dict:
        """Create or update the custom stock metafield on a variant."""
        data = await self.client.admin(
            METAFIELDS_SET_MUTATION,
            {
                "metafields": [
                    {
                        "ownerId": variant_gid,
                        "namespace": self.config.stock_metafield_namespace,
                        "key": self.config.stock_metafield_key,
                        "value": str(quantity),
                        "type": "number_integer",
                    }
                ]
            },
        )
        result = data.get("metafieldsSet")
        if result is None:
            raise MetafieldUpdateError(
                [], message="Shopify Metafield Update Error: empty metafieldsSet response"
            )
        user_errors = result.get("userErrors") or []
        if user_errors:
            raise MetafieldUpdateError(user_errors)

        logger.info("Set %s on %s to %s", self.config.stock_metafield, variant_gid, quantity)
        return {"newStock": quantity}
