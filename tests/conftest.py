"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
from typing import Any, Dict, List, Optional
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.loaders.run_log import SyncRunLog
from schemas.catalog import APIConfig

BASE_URL = "https://api.example.com/productinformation"


@pytest.fixture
def store_url(tmp_path) -> str:
    """File-backed SQLite store unique to each test"""
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def store(store_url) -> KeyValueStore:
    """Store with the products and prices collections created"""
    kv_store = KeyValueStore(store_url, lock_timeout=3.0)
    await kv_store.initialize(["products", "prices"])
    return kv_store


@pytest.fixture
def run_log(store_url) -> SyncRunLog:
    return SyncRunLog(store_url, lock_timeout=3.0)


@pytest.fixture
def api_config() -> APIConfig:
    return APIConfig(
        base_url=BASE_URL,
        authorization="Basic dGVzdDp0ZXN0",
        client_id="client-123",
        customer="3423300",
        limit=2
    )


@pytest.fixture
def mock_product_data() -> List[Dict[str, Any]]:
    """Mock catalog entities as returned by the products endpoint"""
    return [
        {
            "consumerDescription": "Dining Room Chair",
            "sku": "A",
            "itemSalesCategoryCodeKey": "DR",
            "seriesId": "D123",
            "chairQtyPerCarton": 2,
            "itemsPerCase": 1,
            "status": "Active",
            "unitHeightMm": 990.0,
            "unitWidthMm": 470.0,
            "unitDepthMm": 560.0,
            "itemWeightKg": 9.5
        },
        {
            "consumerDescription": "Dining Table",
            "sku": "B",
            "itemSalesCategoryCodeKey": "DR",
            "seriesId": "D124",
            "chairQtyPerCarton": 0,
            "itemsPerCase": 1,
            "status": "Discontinued",
            "unitHeightMm": 760.0,
            "unitWidthMm": 1520.0,
            "unitDepthMm": 910.0,
            "itemWeightKg": 41.2
        }
    ]


@pytest.fixture
def mock_price_data() -> List[Dict[str, Any]]:
    """Mock price entities; amounts arrive as strings"""
    return [
        {
            "description": "Dining Room Chair",
            "sku": "A",
            "basePrice": "150.00",
            "sellPrice": "120.50",
            "surcharge": "",
            "fobPoint": "Arcadia",
            "discount": "10",
            "dfiDiscount": "2.5",
            "netPriceBeforeFreight": "108.45",
            "freight": "5.30",
            "expressFreight": "",
            "totalNetPrice": "98.75",
            "containerPrice": "95.00"
        }
    ]


@pytest.fixture
def page_builder():
    """Build a page response body shaped like the upstream API's"""

    def build(
        entities: List[Dict[str, Any]],
        page: int = 1,
        last_page: Optional[int] = 1,
        endpoint: str = "products",
        total_records: Optional[int] = None
    ) -> Dict[str, Any]:
        links = []
        if last_page is not None:
            links = [
                {"rel": "self", "href": f"{BASE_URL}/{endpoint}?Page={page}"},
                {"rel": "last", "href": f"{BASE_URL}/{endpoint}?Page={last_page}"},
            ]
            if page < last_page:
                links.append({"rel": "next", "href": f"{BASE_URL}/{endpoint}?Page={page + 1}"})
        return {
            "links": links,
            "metadata": {
                "totalRecords": total_records if total_records is not None else len(entities),
                "currentPageRecords": len(entities)
            },
            "entities": entities
        }

    return build
