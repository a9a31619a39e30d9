"""Product lookup exceptions."""

from __future__ import annotations


class ProductLookupError(Exception):
    """Raised when the product database cannot be queried."""


class ProductNotFoundError(ProductLookupError):
    """Raised when no product exists for a barcode."""

    def __init__(self, barcode: str) -> None:
        self.barcode = barcode
        super().__init__(f"Product not found: {barcode}")
