"""
Pydantic schemas for the upstream catalog API and the persisted storage form
"""

from pydantic import BaseModel, Field, root_validator
from typing import List, Generic, TypeVar


class APIConfig(BaseModel):
    """Upstream API settings, built once per run and passed into every fetch"""
    base_url: str
    authorization: str = ""
    client_id: str = ""
    customer: str = ""
    limit: int = Field(default=1000, ge=1)

    class Config:
        frozen = True


# ============================================================================
# Entity Contract
# ============================================================================

class CatalogEntity(BaseModel):
    """
    Shared contract for every fetchable or storable record.

    The SKU is the only identity concept: it is the storage key and the join
    key between collections. JSON nulls fall back to field defaults.
    """
    sku: str = ""

    @property
    def entity_id(self) -> str:
        return self.sku

    @root_validator(pre=True)
    def drop_nulls(cls, values):
        if isinstance(values, dict):
            return {k: v for k, v in values.items() if v is not None}
        return values

    class Config:
        populate_by_name = True
        extra = "ignore"


# ============================================================================
# Page Response
# ============================================================================

class Link(BaseModel):
    rel: str = ""
    href: str = ""


class PageMetadata(BaseModel):
    total_records: int = Field(default=0, alias="totalRecords")
    current_page_records: int = Field(default=0, alias="currentPageRecords")

    class Config:
        populate_by_name = True


T = TypeVar("T", bound=CatalogEntity)


class PageResponse(BaseModel, Generic[T]):
    """One page of a paginated listing"""
    links: List[Link] = Field(default_factory=list)
    metadata: PageMetadata = Field(default_factory=PageMetadata)
    entities: List[T] = Field(default_factory=list)


# ============================================================================
# Catalog (products)
# ============================================================================

class Product(CatalogEntity):
    """Product as returned by the catalog endpoint"""
    consumer_description: str = Field(default="", alias="consumerDescription")
    item_sales_category_code_key: str = Field(default="", alias="itemSalesCategoryCodeKey")
    series_id: str = Field(default="", alias="seriesId")
    chair_qty_per_carton: int = Field(default=0, alias="chairQtyPerCarton")
    items_per_case: int = Field(default=0, alias="itemsPerCase")
    status: str = ""
    unit_height_mm: float = Field(default=0.0, alias="unitHeightMm")
    unit_width_mm: float = Field(default=0.0, alias="unitWidthMm")
    unit_depth_mm: float = Field(default=0.0, alias="unitDepthMm")
    item_weight_kg: float = Field(default=0.0, alias="itemWeightKg")


class ProductRequestData(CatalogEntity):
    """Product as persisted in the ``products`` collection"""
    consumer_description: str = Field(default="", alias="consumerDescription")
    item_sales_category_code_key: str = Field(default="", alias="itemSalesCategoryCodeKey")
    item_series: str = Field(default="", alias="itemSeries")
    series_id: str = Field(default="", alias="seriesId")
    price: float = 0.0
    sell_price: float = Field(default=0.0, alias="sellPrice")
    total_net_price: float = Field(default=0.0, alias="totalNetPrice")
    supplier: str = ""
    chair_qty_per_carton: int = Field(default=0, alias="chairQtyPerCarton")
    items_per_case: int = Field(default=0, alias="itemsPerCase")
    status: str = ""
    unit_height_mm: float = Field(default=0.0, alias="unitHeightMm")
    unit_width_mm: float = Field(default=0.0, alias="unitWidthMm")
    unit_depth_mm: float = Field(default=0.0, alias="unitDepthMm")
    item_weight_kg: float = Field(default=0.0, alias="itemWeightKg")


# ============================================================================
# Pricing (prices)
# ============================================================================

class Price(CatalogEntity):
    """Price record as returned by the pricing endpoint; amounts arrive as strings"""
    description: str = ""
    base_price: str = Field(default="", alias="basePrice")
    sell_price: str = Field(default="", alias="sellPrice")
    surcharge: str = ""
    fob_point: str = Field(default="", alias="fobPoint")
    discount: str = ""
    dfi_discount: str = Field(default="", alias="dfiDiscount")
    net_price_before_freight: str = Field(default="", alias="netPriceBeforeFreight")
    freight: str = ""
    express_freight: str = Field(default="", alias="expressFreight")
    total_net_price: str = Field(default="", alias="totalNetPrice")
    container_price: str = Field(default="", alias="containerPrice")


class PriceRequestData(CatalogEntity):
    """Price record as persisted in the ``prices`` collection"""
    description: str = ""
    base_price: float = Field(default=0.0, alias="basePrice")
    sell_price: float = Field(default=0.0, alias="sellPrice")
    surcharge: float = 0.0
    fob_point: str = Field(default="", alias="fobPoint")
    discount: float = 0.0
    dfi_discount: float = Field(default=0.0, alias="dfiDiscount")
    net_price_before_freight: float = Field(default=0.0, alias="netPriceBeforeFreight")
    freight: float = 0.0
    express_freight: float = Field(default=0.0, alias="expressFreight")
    total_net_price: float = Field(default=0.0, alias="totalNetPrice")
    container_price: float = Field(default=0.0, alias="containerPrice")
