"""Variant lookup and custom stock endpoints."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.errors import BridgeError
from app.schemas import (
    DecreaseStockRequest,
    DecreaseStockResponse,
    SyncStockRequest,
    SyncStockResponse,
    VariantIdResponse,
    VariantLookupRequest,
)
from app.services.stock_service import StockService, get_stock_service

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(error: Exception, endpoint: str, server_message: str) -> JSONResponse:
    """Turn an exception into the JSON error body returned to the caller."""
    if isinstance(error, BridgeError) and error.status_code < 500:
        return JSONResponse(status_code=error.status_code, content={"error": error.message})

    if isinstance(error, BridgeError):
        logger.error("Server error in %s: %s", endpoint, error.message)
    else:
        logger.exception("Unexpected error in %s", endpoint)
    return JSONResponse(
        status_code=500,
        content={"error": server_message, "details": str(error) or "An unknown error occurred."},
    )


@router.post("/get-variant-id", response_model=VariantIdResponse)
async def get_variant_id(
    request: VariantLookupRequest,
    service: StockService = Depends(get_stock_service)
):
    """Resolve the variant GID matching the selected options (storefront only)."""
    try:
        return await service.get_variant_id(request.handle, request.selected_options)
    except Exception as e:
        return error_response(e, "/get-variant-id", "Server error during variant lookup.")


@router.post("/decrease-variant-stock", response_model=DecreaseStockResponse)
async def decrease_variant_stock(
    request: DecreaseStockRequest,
    service: StockService = Depends(get_stock_service)
):
    """
    Decrease the custom stock metafield of a variant.

    Responds 409 when the stock would go negative; nothing is written then.
    """
    try:
        return await service.decrease_variant_stock(
            request.handle, request.selected_options, request.decrease_by
        )
    except Exception as e:
        return error_response(e, "/decrease-variant-stock", "Server error during stock decrease.")


@router.post("/sync-variant-stock", response_model=SyncStockResponse)
async def sync_variant_stock(
    request: SyncStockRequest,
    service: StockService = Depends(get_stock_service)
):
    """
    Copy the available inventory of the "-store" product variant into the
    custom stock metafield of the matching variant on ``handle``.
    """
    try:
        return await service.sync_variant_stock(request.handle, request.selected_options)
    except Exception as e:
        return error_response(e, "/sync-variant-stock", "Server error during stock synchronization.")
