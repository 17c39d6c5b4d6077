"""Product catalogue port (abstract interface).

Order placement re-resolves every line against the catalogue so the price
charged is always the catalogue price, never one supplied by the client.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogueProduct:
    id: str
    name: str
    price: float
    pack_size: str | None = None
    is_available: bool = True

    @property
    def display_name(self) -> str:
        """Name as the storefront cart shows it, e.g. ``Fresh Boiled Milk (500 ml)``."""
        if self.pack_size:
            return f"{self.name} ({self.pack_size})"
        return self.name


class Catalogue(ABC):
    """Abstract product catalogue."""

    @abstractmethod
    def get(self, product_id: str) -> CatalogueProduct | None:
        """Look up a product by id; None when it does not exist."""
        ...

    @abstractmethod
    def find_by_name(self, name: str) -> list[CatalogueProduct]:
        """Products whose display name, or bare name, matches case-insensitively."""
        ...
