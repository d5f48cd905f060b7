"""Application configuration."""
from typing import Dict, List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App settings
    app_name: str = "Variant Stock Bridge"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"

    # Shopify
    shopify_store_domain: str = ""
    shopify_storefront_access_token: str = ""
    shopify_admin_access_token: str = ""
    shopify_api_version: str = "2024-10"
    shopify_request_timeout: float = 60.0

    # Custom stock metafield
    stock_metafield_namespace: str = "custom"
    stock_metafield_key: str = "store_stock"

    # Inventory source products: explicit handle mapping wins over the suffix
    inventory_source_suffix: str = "-store"
    inventory_source_handles: Dict[str, str] = {}

    def missing_credentials(self) -> List[str]:
        """Names of required environment variables that are not set."""
        required = {
            "SHOPIFY_STORE_DOMAIN": self.shopify_store_domain,
            "SHOPIFY_STOREFRONT_ACCESS_TOKEN": self.shopify_storefront_access_token,
            "SHOPIFY_ADMIN_ACCESS_TOKEN": self.shopify_admin_access_token,
        }
        return [name for name, value in required.items() if not value.strip()]

    def inventory_source_handle(self, handle: str) -> str:
        """Handle of the product whose real inventory feeds ``handle``."""
        return self.inventory_source_handles.get(handle, f"{handle}{self.inventory_source_suffix}")

    @property
    def stock_metafield(self) -> str:
        return f"{self.stock_metafield_namespace}.{self.stock_metafield_key}"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
