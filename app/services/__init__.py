# Services package
from app.services.shopify_client import ShopifyClient
from app.services.stock_service import StockService, stock_service, get_stock_service

__all__ = [
    "ShopifyClient",
    "StockService",
    "stock_service",
    "get_stock_service",
]
