"""Variant resolution - finds a product variant by its selected options."""
import logging
from typing import Iterable, List, Optional

from app.errors import NotFoundError
from app.schemas import SelectedOption
from app.services.shopify_client import ShopifyClient

logger = logging.getLogger(__name__)

PRODUCT_VARIANTS_QUERY = """
query getProduct($handle: String!) {
  product(handle: $handle) {
    variants(first: 100) {
      edges {
        node {
          id
          title
          selectedOptions {
            name
            value
          }
        }
      }
    }
  }
}
"""


def _fold(text: Optional[str]) -> str:
    return (text or "").strip().casefold()


def variant_matches(variant: dict, options: Iterable[SelectedOption]) -> bool:
    """True when every requested option appears on the variant.

    Names and values are compared case-insensitively.
    """
    variant_options = {
        (_fold(o.get("name")), _fold(o.get("value")))
        for o in variant.get("selectedOptions") or []
    }
    return all((_fold(o.name), _fold(o.value)) in variant_options for o in options)


def find_matching_variant(variants: List[dict], options: List[SelectedOption]) -> Optional[dict]:
    """Return the first variant, in API order, matching all options."""
    for variant in variants:
        if variant_matches(variant, options):
            return variant
    return None


class VariantService:
    """Resolves variants through the storefront API."""

    def __init__(self, client: ShopifyClient):
        self.client = client

    async def fetch_variants(self, handle: str) -> List[dict]:
        """Fetch up to 100 variants of the product with ``handle``."""
        data = await self.client.storefront(PRODUCT_VARIANTS_QUERY, {"handle": handle})
        product = data.get("product")
        if not product:
            return []
        return [edge["node"] for edge in product.get("variants", {}).get("edges", [])]

    async def resolve_variant(self, handle: str, options: List[SelectedOption]) -> dict:
        variants = await self.fetch_variants(handle)
        match = find_matching_variant(variants, options)
        if match is None:
            raise NotFoundError(
                f"No matching variant found for product handle '{handle}' with the given options."
            )
        return match

    async def resolve_variant_gid(self, handle: str, options: List[SelectedOption]) -> str:
        variant = await self.resolve_variant(handle, options)
        logger.info("Resolved %s (%s) to %s", handle, variant.get("title"), variant["id"])
        return variant["id"]
