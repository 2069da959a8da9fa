"""
Merged products view: catalog records joined with their prices by SKU
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from typing import Optional
from api.dependencies import get_store
from core.exceptions import EntityNotFoundError, StorageError
from ingestion.entities import PRICES, PRODUCTS
from ingestion.loaders.kv_store import KeyValueStore
from schemas.api import ProductResponseData
from schemas.catalog import PriceRequestData, ProductRequestData
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Products"])


def render_product(
    product: ProductRequestData,
    price: Optional[PriceRequestData] = None
) -> ProductResponseData:
    """Render a stored product, and its price when one exists"""
    data = ProductResponseData(
        nombre=product.consumer_description,
        clave=product.sku,
        categoria=product.item_sales_category_code_key,
        modelo=f"{product.item_series} {product.series_id}",
        proveedor=product.supplier,
        cantidadSillas=product.chair_qty_per_carton,
        cantidadPorPaquete=product.items_per_case,
        descontinuado=product.status,
        alto=product.unit_height_mm,
        largo=product.unit_width_mm,
        ancho=product.unit_depth_mm,
        peso=product.item_weight_kg,
    )
    if price is not None:
        data.costo = price.sell_price
        data.costo2 = price.total_net_price
    return data


@router.get("/products")
async def get_all_products(store: KeyValueStore = Depends(get_store)):
    """
    Every stored product joined with its price.

    Returns 500 with a plain-text body when either collection cannot be read.
    """
    try:
        products = await store.read_all(PRODUCTS.collection_name, PRODUCTS.storage_model)
    except StorageError as e:
        logger.error(f"GET /products - failed to read products: {e}")
        return PlainTextResponse(f"Error fetching products: {e.message}", status_code=500)

    try:
        prices = await store.read_all(PRICES.collection_name, PRICES.storage_model)
    except StorageError as e:
        logger.error(f"GET /products - failed to read prices: {e}")
        return PlainTextResponse(f"Error fetching prices: {e.message}", status_code=500)

    price_by_sku = {price.sku: price for price in prices}
    response = [
        render_product(product, price_by_sku.get(product.sku)).model_dump()
        for product in products
    ]

    logger.info(f"GET /products - returned {len(response)} products")
    return JSONResponse(content=response)


@router.get("/products/{sku}")
async def get_product(sku: str, store: KeyValueStore = Depends(get_store)):
    """One stored product joined with its price; 404 when the SKU is unknown"""
    try:
        product = await store.read_one(PRODUCTS.collection_name, sku, PRODUCTS.storage_model)
    except EntityNotFoundError as e:
        return PlainTextResponse(e.message, status_code=404)
    except StorageError as e:
        logger.error(f"GET /products/{sku} - failed to read product: {e}")
        return PlainTextResponse(f"Error fetching product: {e.message}", status_code=500)

    try:
        price = await store.read_one(PRICES.collection_name, sku, PRICES.storage_model)
    except EntityNotFoundError:
        price = None
    except StorageError as e:
        logger.error(f"GET /products/{sku} - failed to read price: {e}")
        return PlainTextResponse(f"Error fetching price: {e.message}", status_code=500)

    return JSONResponse(content=render_product(product, price).model_dump())
