"""Liveness and status endpoints."""
from fastapi import APIRouter

from app.config import settings
from app.schemas import MessageResponse

router = APIRouter()


@router.get("/", response_model=MessageResponse)
async def root():
    """Liveness probe."""
    return {"message": f"{settings.app_name} is running."}


@router.get("/health")
async def health_check():
    """Report whether the Shopify credentials are configured."""
    missing = settings.missing_credentials()
    return {
        "status": "healthy" if not missing else "degraded",
        "shopify_configured": not missing,
        "api_version": settings.shopify_api_version,
    }


@router.get("/config")
async def get_config():
    """Get current configuration (non-sensitive)."""
    return {
        "shopify_store_domain": settings.shopify_store_domain,
        "shopify_api_version": settings.shopify_api_version,
        "stock_metafield": {
            "namespace": settings.stock_metafield_namespace,
            "key": settings.stock_metafield_key,
        },
        "inventory_source_suffix": settings.inventory_source_suffix,
        "inventory_source_handles": settings.inventory_source_handles,
    }
