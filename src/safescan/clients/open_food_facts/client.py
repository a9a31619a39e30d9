"""Open Food Facts client for barcode product lookup.

Resolves a barcode to a product name and its label ingredient list before
an analysis job is submitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

import httpx

from safescan.clients.open_food_facts.exceptions import (
    ProductLookupError,
    ProductNotFoundError,
)
from safescan.observability.logging import get_logger
from safescan.parsing.ingredients import parse_label_ingredients


logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Product:
    """Product data resolved from a barcode."""

    barcode: str
    product_name: str | None
    ingredients: tuple[str, ...]


class ProductLookupClient:
    """Looks products up in the Open Food Facts database by barcode."""

    DEFAULT_BASE_URL: Final[str] = "https://world.openfoodfacts.org"
    PRODUCT_ENDPOINT: Final[str] = "/api/v0/product/{barcode}.json"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        user_agent: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Open Food Facts base URL.
            timeout: HTTP timeout in seconds.
            user_agent: User-Agent header, as Open Food Facts asks clients
                to identify themselves.
            http_client: Optional preconfigured HTTP client (not closed by us).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        """Create the HTTP client if one was not provided."""
        if self._http is None:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            self._http = httpx.AsyncClient(timeout=self.timeout, headers=headers)
        logger.info("ProductLookupClient initialized", base_url=self.base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("ProductLookupClient shutdown")

    def product_url(self, barcode: str) -> str:
        """Product endpoint URL for a barcode."""
        return f"{self.base_url}{self.PRODUCT_ENDPOINT.format(barcode=barcode)}"

    async def get_product(self, barcode: str) -> Product:
        """Fetch a product by barcode.

        Raises:
            ProductNotFoundError: If the database has no such product.
            ProductLookupError: If the service cannot be reached or answers
                with an error.
        """
        if self._http is None:
            await self.initialize()
        assert self._http is not None

        try:
            response = await self._http.get(self.product_url(barcode))
            if response.status_code == 404:
                raise ProductNotFoundError(barcode)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(
                "Open Food Facts request failed",
                barcode=barcode,
                error=str(e),
            )
            msg = f"Failed to fetch product data: {e}"
            raise ProductLookupError(msg) from e
        except ValueError as e:
            msg = f"Malformed product response: {e}"
            raise ProductLookupError(msg) from e

        product = data.get("product") if isinstance(data, dict) else None
        if not isinstance(product, dict):
            logger.info("Product not found", barcode=barcode)
            raise ProductNotFoundError(barcode)

        return _parse_product(barcode, product)


def _text(product: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = product.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _parse_product(barcode: str, product: dict[str, Any]) -> Product:
    ingredients_text = _text(product, "ingredients_text") or ""
    return Product(
        barcode=barcode,
        product_name=_text(product, "product_name", "generic_name"),
        ingredients=tuple(parse_label_ingredients(ingredients_text)),
    )
