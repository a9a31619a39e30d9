"""Open Food Facts barcode lookup client."""

from safescan.clients.open_food_facts.client import Product, ProductLookupClient
from safescan.clients.open_food_facts.exceptions import (
    ProductLookupError,
    ProductNotFoundError,
)


__all__ = [
    "Product",
    "ProductLookupClient",
    "ProductLookupError",
    "ProductNotFoundError",
]
