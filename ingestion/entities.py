"""
Registered entity kinds.

The scheduler syncs every kind in ``ENTITY_KINDS`` in order; the order matters
only for logging since kinds are independent collections.
"""

from typing import Tuple
from ingestion.base import EntityKind
from ingestion.transformers.catalog import transform_price, transform_product
from schemas.catalog import Price, PriceRequestData, Product, ProductRequestData


class ProductKind(EntityKind):
    """Catalog items"""

    name = "products"
    endpoint = "products"
    collection_name = "products"
    customer_param = "customer"
    wire_model = Product
    storage_model = ProductRequestData

    def transform(self, entity: Product) -> ProductRequestData:
        return transform_product(entity)


class PriceKind(EntityKind):
    """Price records"""

    name = "prices"
    endpoint = "Prices"
    collection_name = "prices"
    customer_param = "Customer"
    wire_model = Price
    storage_model = PriceRequestData

    def transform(self, entity: Price) -> PriceRequestData:
        return transform_price(entity)


PRODUCTS = ProductKind()
PRICES = PriceKind()

ENTITY_KINDS: Tuple[EntityKind, ...] = (PRODUCTS, PRICES)
