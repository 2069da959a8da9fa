"""
Transform wire entities into the storage form persisted per collection
"""

import math
from typing import Any
from schemas.catalog import Price, PriceRequestData, Product, ProductRequestData
import logging

logger = logging.getLogger(__name__)

SUPPLIER_NAME = "Ashley Furniture"

# Price fields that arrive as strings and are stored as floats
PRICE_AMOUNT_FIELDS = (
    "base_price",
    "sell_price",
    "surcharge",
    "discount",
    "dfi_discount",
    "net_price_before_freight",
    "freight",
    "express_freight",
    "total_net_price",
    "container_price",
)


def parse_amount(value: Any, field_name: str = "", sku: str = "") -> float:
    """
    Parse a string amount.

    An empty string is 0.0. A malformed value is also stored as 0.0 and a
    warning is logged so the loss is visible. Padded text, digit separators
    and non-finite values (nan, inf) count as malformed.
    """
    if value is None or value == "":
        return 0.0

    text = str(value)
    try:
        if text != text.strip() or "_" in text:
            raise ValueError(text)
        amount = float(text)
        if not math.isfinite(amount):
            raise ValueError(text)
    except ValueError:
        logger.warning(
            f"Malformed amount for sku={sku!r} field={field_name}: {value!r}; storing 0.0"
        )
        return 0.0
    return amount


def transform_product(entity: Product) -> ProductRequestData:
    """Select the stored product fields and tag the supplier"""
    return ProductRequestData(
        consumer_description=entity.consumer_description,
        sku=entity.sku,
        item_sales_category_code_key=entity.item_sales_category_code_key,
        series_id=entity.series_id,
        supplier=SUPPLIER_NAME,
        chair_qty_per_carton=entity.chair_qty_per_carton,
        items_per_case=entity.items_per_case,
        status=entity.status,
        unit_height_mm=entity.unit_height_mm,
        unit_width_mm=entity.unit_width_mm,
        unit_depth_mm=entity.unit_depth_mm,
        item_weight_kg=entity.item_weight_kg,
    )


def transform_price(entity: Price) -> PriceRequestData:
    """Parse every string amount of a price record"""
    amounts = {
        field: parse_amount(getattr(entity, field), field_name=field, sku=entity.sku)
        for field in PRICE_AMOUNT_FIELDS
    }
    return PriceRequestData(
        description=entity.description,
        sku=entity.sku,
        fob_point=entity.fob_point,
        **amounts,
    )
