"""Catalogue factory.

Provides get_catalogue() / set_catalogue() so placement can run against the
in-memory storefront catalogue or any other Catalogue adapter.
"""

from ordering.catalogue.memory_adapter import InMemoryCatalogue
from ordering.catalogue.port import Catalogue

_current_catalogue: Catalogue | None = None


def get_catalogue() -> Catalogue:
    global _current_catalogue
    if _current_catalogue is None:
        _current_catalogue = InMemoryCatalogue()
    return _current_catalogue


def set_catalogue(catalogue: Catalogue) -> None:
    """Override the active catalogue (useful for tests)."""
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    global _current_catalogue
    _current_catalogue = None
