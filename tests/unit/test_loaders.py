"""
Unit tests for the key-value store adapter and the sync run log
"""

import pytest
from core.exceptions import (
    CollectionNotFoundError,
    DatabaseError,
    EntityNotFoundError,
    NormalizationError,
    UpsertError,
)
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.transformers.catalog import transform_price, transform_product
from models.base import SyncStatus
from schemas.catalog import Price, PriceRequestData, Product, ProductRequestData


class TestKeyValueStore:
    """Test collection creation, batched upserts and reads"""

    @pytest.mark.asyncio
    async def test_ensure_collection_is_idempotent(self, store):
        await store.ensure_collection("products")
        await store.ensure_collection("products")

        assert await store.count("products") == 0

    @pytest.mark.asyncio
    async def test_write_batch_then_read_one_round_trips(self, store, mock_product_data):
        """Test a stored entity reads back equal to what was written"""
        products = [Product.model_validate(p) for p in mock_product_data]

        written = await store.write_batch("products", products, transform_product)

        assert written == 2
        for product in products:
            stored = await store.read_one("products", product.sku, ProductRequestData)
            assert stored == transform_product(product)

    @pytest.mark.asyncio
    async def test_price_round_trip(self, store, mock_price_data):
        price = Price.model_validate(mock_price_data[0])

        await store.write_batch("prices", [price], transform_price)
        stored = await store.read_one("prices", "A", PriceRequestData)

        assert stored == transform_price(price)

    @pytest.mark.asyncio
    async def test_write_batch_upserts_by_identifier(self, store, mock_product_data):
        """Test persisting the same identifier twice keeps one record, the latest"""
        first = Product.model_validate(mock_product_data[0])
        second = first.model_copy(update={"status": "Discontinued"})

        await store.write_batch("products", [first], transform_product)
        await store.write_batch("products", [second], transform_product)

        assert await store.count("products") == 1
        stored = await store.read_one("products", "A", ProductRequestData)
        assert stored == transform_product(second)
        assert stored.status == "Discontinued"

    @pytest.mark.asyncio
    async def test_write_empty_batch(self, store):
        assert await store.write_batch("products", [], transform_product) == 0

    @pytest.mark.asyncio
    async def test_read_all(self, store, mock_product_data):
        products = [Product.model_validate(p) for p in reversed(mock_product_data)]
        await store.write_batch("products", products, transform_product)

        stored = await store.read_all("products", ProductRequestData)

        assert sorted(p.sku for p in stored) == ["A", "B"]
        assert all(p.supplier == "Ashley Furniture" for p in stored)

    @pytest.mark.asyncio
    async def test_read_all_empty_collection(self, store):
        assert await store.read_all("prices", PriceRequestData) == []

    @pytest.mark.asyncio
    async def test_read_one_missing_entity(self, store):
        with pytest.raises(EntityNotFoundError) as exc_info:
            await store.read_one("products", "nope", ProductRequestData)

        assert exc_info.value.context["sku"] == "nope"

    @pytest.mark.asyncio
    async def test_missing_collection(self, store):
        with pytest.raises(CollectionNotFoundError):
            await store.write_batch("widgets", [Product(sku="A")], transform_product)

        with pytest.raises(CollectionNotFoundError):
            await store.read_all("widgets", ProductRequestData)

    @pytest.mark.asyncio
    async def test_batch_is_all_or_nothing_on_transform_failure(self, store):
        """Test a failing item aborts the whole batch"""
        products = [Product(sku="A"), Product(sku="B"), Product(sku="C")]

        def flaky_transform(product):
            if product.sku == "B":
                raise RuntimeError("cannot transform")
            return transform_product(product)

        with pytest.raises(NormalizationError) as exc_info:
            await store.write_batch("products", products, flaky_transform)

        assert exc_info.value.context["sku"] == "B"
        assert await store.count("products") == 0

    @pytest.mark.asyncio
    async def test_batch_is_all_or_nothing_on_missing_identifier(self, store):
        products = [Product(sku="A"), Product(sku="")]

        with pytest.raises(UpsertError) as exc_info:
            await store.write_batch("products", products, transform_product)

        assert exc_info.value.context["batch_index"] == 1
        assert await store.count("products") == 0

    @pytest.mark.asyncio
    async def test_uninitialized_store_raises_database_error(self, tmp_path):
        """Test reading a store whose schema was never created"""
        empty = KeyValueStore(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", lock_timeout=0.5)

        with pytest.raises(DatabaseError):
            await empty.read_all("products", ProductRequestData)


class TestSyncRunLog:
    """Test sync run tracking"""

    @pytest.mark.asyncio
    async def test_start_and_complete(self, store, run_log):
        run = await run_log.start("products")

        assert run.id is not None
        assert run.status == SyncStatus.RUNNING

        await run_log.complete(
            run,
            status=SyncStatus.SUCCESS,
            pages_fetched=3,
            records_loaded=5,
            total_records_reported=5
        )

        latest = await run_log.latest()
        assert len(latest) == 1
        assert latest[0].status == SyncStatus.SUCCESS
        assert latest[0].pages_fetched == 3
        assert latest[0].records_loaded == 5
        assert latest[0].completed_at is not None
        assert latest[0].duration_seconds >= 0

    @pytest.mark.asyncio
    async def test_latest_returns_most_recent_run_per_kind(self, store, run_log):
        first = await run_log.start("products")
        await run_log.complete(first, status=SyncStatus.FAILED, error_message="boom")
        second = await run_log.start("products")
        await run_log.complete(second, status=SyncStatus.SUCCESS, records_loaded=2)
        prices = await run_log.start("prices")
        await run_log.complete(prices, status=SyncStatus.FAILED, error_message="down")

        latest = {run.entity_kind: run for run in await run_log.latest()}

        assert set(latest) == {"prices", "products"}
        assert latest["products"].run_id == second.run_id
        assert latest["products"].status == SyncStatus.SUCCESS
        assert latest["prices"].error_message == "down"
