"""
Key-value store adapter with one durable collection per entity kind.

Each operation opens a fresh handle to the on-disk store with a short lock
acquisition timeout and releases it on completion. Writes are upserts keyed
by entity identifier; nothing is ever deleted.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Type, TypeVar
from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from core.config import settings
from core.database import create_schema, open_session
from core.exceptions import (
    CollectionNotFoundError,
    DatabaseError,
    EntityNotFoundError,
    NormalizationError,
    StorageError,
    SyncException,
    UpsertError,
)
from models.store import Collection, Entry
from schemas.catalog import CatalogEntity
import logging

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=CatalogEntity)


class KeyValueStore:
    """
    Persist storage entities as JSON bytes keyed by identifier.

    Ensures:
    - Collections are created idempotently
    - A batch is written in one transaction (all-or-nothing)
    - A re-written identifier replaces the prior value
    """

    def __init__(
        self,
        database_url: str = settings.DATABASE_URL,
        lock_timeout: float = settings.STORE_LOCK_TIMEOUT
    ):
        self.database_url = database_url
        self.lock_timeout = lock_timeout

    def _session(self):
        return open_session(self.database_url, self.lock_timeout)

    async def initialize(self, collections: Iterable[str] = ()) -> None:
        """Create the schema and every named collection"""
        await self._create_schema()
        for name in collections:
            await self.ensure_collection(name)

    async def _create_schema(self) -> None:
        try:
            await create_schema(self.database_url, self.lock_timeout)
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to create store schema",
                context={"operation": "create_schema"},
                original_exception=e
            )

    async def ensure_collection(self, name: str) -> None:
        """Create the collection if it does not exist yet"""
        await self._create_schema()
        try:
            async with self._session() as session:
                async with session.begin():
                    stmt = insert(Collection).values(name=name, created_at=datetime.utcnow())
                    await session.execute(stmt.on_conflict_do_nothing(index_elements=["name"]))
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to create collection {name}",
                context={"operation": "ensure_collection", "collection": name},
                original_exception=e
            )
        logger.debug(f"Collection {name} ready")

    async def write_batch(
        self,
        collection_name: str,
        entities: Sequence[CatalogEntity],
        transform: Callable[[CatalogEntity], CatalogEntity]
    ) -> int:
        """
        Transform, serialize, and upsert a batch in one transaction.

        Args:
            collection_name: Target collection
            entities: Wire entities of one page
            transform: Maps a wire entity to its storage entity

        Returns:
            Number of entities written

        Raises:
            CollectionNotFoundError: Collection was never created
            NormalizationError: A transform raised
            UpsertError: An entity has no identifier or cannot be serialized
            DatabaseError: The store could not be opened or the transaction failed
        """
        if not entities:
            return 0

        try:
            async with self._session() as session:
                async with session.begin():
                    await self._require_collection(session, collection_name)

                    for index, entity in enumerate(entities):
                        key = entity.entity_id
                        if not key:
                            raise UpsertError(
                                "Entity has no identifier",
                                context={"collection": collection_name, "batch_index": index}
                            )

                        try:
                            stored = transform(entity)
                        except Exception as e:
                            raise NormalizationError(
                                f"Failed to transform entity {key}",
                                context={"collection": collection_name, "sku": key},
                                original_exception=e
                            )

                        try:
                            payload = stored.model_dump_json(by_alias=True).encode("utf-8")
                        except Exception as e:
                            raise UpsertError(
                                f"Failed to serialize entity {key}",
                                context={"collection": collection_name, "sku": key, "batch_index": index},
                                original_exception=e
                            )

                        stmt = insert(Entry).values(
                            collection=collection_name,
                            key=key,
                            value=payload,
                            updated_at=datetime.utcnow()
                        )
                        stmt = stmt.on_conflict_do_update(
                            index_elements=["collection", "key"],
                            set_={
                                "value": stmt.excluded.value,
                                "updated_at": stmt.excluded.updated_at,
                            }
                        )
                        await session.execute(stmt)

        except SyncException:
            raise
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to write batch to {collection_name}",
                context={
                    "operation": "write_batch",
                    "collection": collection_name,
                    "batch_size": len(entities)
                },
                original_exception=e
            )

        logger.debug(f"Wrote {len(entities)} entities to {collection_name}")
        return len(entities)

    async def read_one(self, collection_name: str, entity_id: str, model: Type[E]) -> E:
        """
        Point lookup by identifier.

        Raises:
            EntityNotFoundError: No entity stored under ``entity_id``
        """
        try:
            async with self._session() as session:
                await self._require_collection(session, collection_name)
                result = await session.execute(
                    select(Entry.value).where(
                        Entry.collection == collection_name,
                        Entry.key == entity_id
                    )
                )
                value: Optional[bytes] = result.scalar_one_or_none()
        except StorageError:
            raise
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to read {entity_id} from {collection_name}",
                context={"operation": "read_one", "collection": collection_name, "sku": entity_id},
                original_exception=e
            )

        if value is None:
            raise EntityNotFoundError(
                f"entity not found for SKU {entity_id}",
                context={"collection": collection_name, "sku": entity_id}
            )
        return self._decode(collection_name, value, model)

    async def read_all(self, collection_name: str, model: Type[E]) -> List[E]:
        """
        Full collection scan.

        Entities come back in key order, which is the store's iteration order
        and not the order they were written in.
        """
        try:
            async with self._session() as session:
                await self._require_collection(session, collection_name)
                result = await session.execute(
                    select(Entry.value)
                    .where(Entry.collection == collection_name)
                    .order_by(Entry.key)
                )
                values = result.scalars().all()
        except StorageError:
            raise
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to read {collection_name}",
                context={"operation": "read_all", "collection": collection_name},
                original_exception=e
            )

        return [self._decode(collection_name, value, model) for value in values]

    async def count(self, collection_name: str) -> int:
        """Number of entities stored in a collection"""
        try:
            async with self._session() as session:
                await self._require_collection(session, collection_name)
                result = await session.execute(
                    select(func.count()).select_from(Entry).where(Entry.collection == collection_name)
                )
                return result.scalar_one()
        except StorageError:
            raise
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to count {collection_name}",
                context={"operation": "count", "collection": collection_name},
                original_exception=e
            )

    @staticmethod
    async def _require_collection(session, collection_name: str) -> None:
        result = await session.execute(
            select(Collection.name).where(Collection.name == collection_name)
        )
        if result.scalar_one_or_none() is None:
            raise CollectionNotFoundError(
                f"Collection {collection_name} does not exist",
                context={"collection": collection_name}
            )

    @staticmethod
    def _decode(collection_name: str, value: bytes, model: Type[E]) -> E:
        try:
            return model.model_validate_json(value)
        except ValueError as e:
            raise DatabaseError(
                f"Stored value in {collection_name} is not a valid {model.__name__}",
                context={"operation": "decode", "collection": collection_name},
                original_exception=e
            )
