"""
Abstract base class for syncable entity kinds
"""

from abc import ABC, abstractmethod
from typing import Type
from schemas.catalog import APIConfig, CatalogEntity, PageResponse
import logging

logger = logging.getLogger(__name__)


class EntityKind(ABC):
    """
    Abstract base class for every category of synced record.

    Responsibilities:
    - Name the upstream endpoint and the storage collection
    - Fetch one page of wire entities
    - Map a wire entity to its storage form

    Subclasses set the class attributes and implement ``transform``.
    """

    name: str
    endpoint: str
    collection_name: str
    customer_param: str = "customer"
    wire_model: Type[CatalogEntity]
    storage_model: Type[CatalogEntity]

    async def fetch_page(self, client, config: APIConfig, page: int) -> PageResponse:
        """
        Fetch one page of wire entities.

        Args:
            client: CatalogAPIClient used for the request
            config: Upstream API configuration
            page: 1-based page number

        Returns:
            Decoded page response
        """
        return await client.fetch_page(
            config,
            endpoint=self.endpoint,
            page=page,
            wire_model=self.wire_model,
            customer_param=self.customer_param,
        )

    @abstractmethod
    def transform(self, entity: CatalogEntity) -> CatalogEntity:
        """Map a wire entity to the storage entity persisted for it"""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"
