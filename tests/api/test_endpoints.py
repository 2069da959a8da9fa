"""
API endpoint tests
"""

import asyncio
import pytest
from fastapi.testclient import TestClient
from api.main import app
from api.dependencies import get_run_log, get_store
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.loaders.run_log import SyncRunLog
from ingestion.transformers.catalog import transform_price, transform_product
from models.base import SyncStatus
from schemas.catalog import Price, Product


@pytest.fixture
def seeded_store(store_url, mock_product_data, mock_price_data):
    """Store holding products A and B and a price for A only"""
    kv_store = KeyValueStore(store_url, lock_timeout=3.0)

    async def seed():
        await kv_store.initialize(["products", "prices"])
        await kv_store.write_batch(
            "products", [Product.model_validate(p) for p in mock_product_data], transform_product
        )
        await kv_store.write_batch(
            "prices", [Price.model_validate(p) for p in mock_price_data], transform_price
        )

    asyncio.run(seed())
    return kv_store


def make_client(kv_store: KeyValueStore) -> TestClient:
    """Test client without lifespan events, so no scheduler is started"""
    app.dependency_overrides[get_store] = lambda: kv_store
    app.dependency_overrides[get_run_log] = lambda: SyncRunLog(
        kv_store.database_url, kv_store.lock_timeout
    )
    return TestClient(app)


@pytest.fixture
def client(seeded_store):
    yield make_client(seeded_store)
    app.dependency_overrides.clear()


@pytest.fixture
def empty_client(store_url):
    kv_store = KeyValueStore(store_url, lock_timeout=3.0)
    asyncio.run(kv_store.initialize(["products", "prices"]))
    yield make_client(kv_store)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(tmp_path):
    """Client whose store was never initialized"""
    kv_store = KeyValueStore(f"sqlite+aiosqlite:///{tmp_path / 'missing.db'}", lock_timeout=0.5)
    yield make_client(kv_store)
    app.dependency_overrides.clear()


def test_products_empty_store(empty_client):
    response = empty_client.get("/products")

    assert response.status_code == 200
    assert response.json() == []


def test_products_joined_with_prices(client):
    """Test each product is merged with its price by SKU"""
    response = client.get("/products")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    data = {item["clave"]: item for item in response.json()}
    assert set(data) == {"A", "B"}

    product_a = data["A"]
    assert product_a["nombre"] == "Dining Room Chair"
    assert product_a["categoria"] == "DR"
    assert product_a["modelo"] == " D123"
    assert product_a["costo"] == 120.5
    assert product_a["costo2"] == 98.75
    assert product_a["proveedor"] == "Ashley Furniture"
    assert product_a["cantidadSillas"] == 2
    assert product_a["cantidadPorPaquete"] == 1
    assert product_a["descontinuado"] == "Active"
    assert product_a["alto"] == 990.0
    assert product_a["largo"] == 470.0
    assert product_a["ancho"] == 560.0
    assert product_a["peso"] == 9.5


def test_product_without_price_has_zero_costs(client):
    product_b = {item["clave"]: item for item in client.get("/products").json()}["B"]

    assert product_b["costo"] == 0.0
    assert product_b["costo2"] == 0.0
    assert product_b["descontinuado"] == "Discontinued"


def test_products_store_failure_returns_plain_text_500(broken_client):
    response = broken_client.get("/products")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith("Error fetching products")


def test_single_product(client):
    response = client.get("/products/A")

    assert response.status_code == 200
    assert response.json()["clave"] == "A"
    assert response.json()["costo"] == 120.5


def test_single_product_not_found(client):
    response = client.get("/products/ZZZ")

    assert response.status_code == 404
    assert response.text == "entity not found for SKU ZZZ"


def test_health_endpoint(client, seeded_store):
    """Test health reports collection sizes and the latest sync runs"""
    run_log = SyncRunLog(seeded_store.database_url, seeded_store.lock_timeout)

    async def record_runs():
        run = await run_log.start("products")
        await run_log.complete(run, status=SyncStatus.SUCCESS, pages_fetched=1, records_loaded=2)
        run = await run_log.start("prices")
        await run_log.complete(run, status=SyncStatus.FAILED, error_message="failed after 3 attempts")

    asyncio.run(record_runs())

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["store_connected"] is True
    assert data["collections"] == {"products": 2, "prices": 1}
    assert data["status"] == "degraded"
    runs = {run["entity_kind"]: run for run in data["last_runs"]}
    assert runs["products"]["status"] == "success"
    assert runs["prices"]["error_message"] == "failed after 3 attempts"


def test_health_without_runs_is_healthy(empty_client):
    data = empty_client.get("/health").json()

    assert data["status"] == "healthy"
    assert data["last_runs"] == []


def test_health_store_unavailable(broken_client):
    data = broken_client.get("/health").json()

    assert data["status"] == "unhealthy"
    assert data["store_connected"] is False


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["products"] == "/products"
