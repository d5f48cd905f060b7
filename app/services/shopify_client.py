"""Shopify GraphQL client for the storefront and admin endpoints."""
import logging
from typing import Optional

import requests
from fastapi.concurrency import run_in_threadpool

from app.config import Settings, settings as default_settings
from app.errors import RemoteCommunicationError

logger = logging.getLogger(__name__)

STOREFRONT_TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"
ADMIN_TOKEN_HEADER = "X-Shopify-Access-Token"


def normalize_store_domain(domain: str) -> str:
    """Strip protocol and trailing slashes from a configured store domain."""
    domain = domain.strip().replace("https://", "").replace("http://", "")
    return domain.rstrip("/")


class ShopifyClient:
    """Issues single-attempt GraphQL POSTs against a Shopify store."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    @property
    def storefront_url(self) -> str:
        domain = normalize_store_domain(self.config.shopify_store_domain)
        return f"https://{domain}/api/{self.config.shopify_api_version}/graphql.json"

    @property
    def admin_url(self) -> str:
        domain = normalize_store_domain(self.config.shopify_store_domain)
        return f"https://{domain}/admin/api/{self.config.shopify_api_version}/graphql.json"

    def _graphql_request(
        self,
        url: str,
        token_header: str,
        token: str,
        query: str,
        variables: dict = None,
        api_name: str = "Admin",
    ) -> dict:
        """Make a GraphQL request to Shopify and return its ``data`` object."""
        failure = f"Failed to communicate with Shopify {api_name} API."
        headers = {
            token_header: token,
            "Content-Type": "application/json"
        }
        try:
            response = requests.post(
                url,
                json={"query": query, "variables": variables or {}},
                headers=headers,
                timeout=self.config.shopify_request_timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            detail = f"Status: {e.response.status_code}, Body: {e.response.text[:500]}"
            logger.error("%s API error: %s", api_name, detail)
            raise RemoteCommunicationError(failure, detail=detail) from e
        except (requests.RequestException, ValueError) as e:
            logger.error("%s API error: %s", api_name, e)
            raise RemoteCommunicationError(failure, detail=str(e)) from e

        if data.get("errors"):
            logger.error("%s API GraphQL errors: %s", api_name, data["errors"])
            raise RemoteCommunicationError(failure, detail=str(data["errors"]))

        return data.get("data") or {}

    async def execute(
        self,
        url: str,
        token_header: str,
        token: str,
        query: str,
        variables: dict = None,
        api_name: str = "Admin",
    ) -> dict:
        """Run a GraphQL request in the threadpool so the event loop stays free."""
        return await run_in_threadpool(
            self._graphql_request, url, token_header, token, query, variables, api_name
        )

    async def storefront(self, query: str, variables: dict = None) -> dict:
        return await self.execute(
            self.storefront_url,
            STOREFRONT_TOKEN_HEADER,
            self.config.shopify_storefront_access_token,
            query,
            variables,
            api_name="Storefront",
        )

    async def admin(self, query: str, variables: dict = None) -> dict:
        return await self.execute(
            self.admin_url,
            ADMIN_TOKEN_HEADER,
            self.config.shopify_admin_access_token,
            query,
            variables,
            api_name="Admin",
        )
