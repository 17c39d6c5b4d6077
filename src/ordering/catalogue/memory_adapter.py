"""In-memory catalogue seeded with the storefront's products."""

from ordering.catalogue.port import Catalogue, CatalogueProduct

STOREFRONT_PRODUCTS = [
    CatalogueProduct(id="milk-100ml", name="Fresh Boiled Milk", pack_size="100 ml", price=17.0),
    CatalogueProduct(id="milk-250ml", name="Fresh Boiled Milk", pack_size="250 ml", price=32.0),
    CatalogueProduct(id="milk-500ml", name="Fresh Boiled Milk", pack_size="500 ml", price=52.0),
    CatalogueProduct(id="milk-1l", name="Fresh Boiled Milk", pack_size="1 L", price=92.0),
    CatalogueProduct(id="milk-2l", name="Fresh Boiled Milk", pack_size="2 L", price=172.0),
    CatalogueProduct(id="milk-5l", name="Fresh Boiled Milk", pack_size="5 L", price=402.0),
    CatalogueProduct(id="eggs-boiled", name="Boiled Eggs", price=10.0),
    CatalogueProduct(id="eggs-normal", name="Normal Eggs", price=8.0),
    CatalogueProduct(id="glass-bottle", name="Reusable Glass Bottle", price=7.0),
]


class InMemoryCatalogue(Catalogue):
    def __init__(self, products: list[CatalogueProduct] | None = None) -> None:
        self._products = {product.id: product for product in (products or STOREFRONT_PRODUCTS)}

    def add(self, product: CatalogueProduct) -> None:
        self._products[product.id] = product

    def get(self, product_id: str) -> CatalogueProduct | None:
        return self._products.get(product_id)

    def find_by_name(self, name: str) -> list[CatalogueProduct]:
        wanted = " ".join((name or "").split()).lower()
        if not wanted:
            return []

        exact = [p for p in self._products.values() if p.display_name.lower() == wanted]
        if exact:
            return exact
        return [p for p in self._products.values() if p.name.lower() == wanted]
