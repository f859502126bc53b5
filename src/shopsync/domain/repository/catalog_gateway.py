"""Abstract gateway to the remote product catalog.

Defined in the domain layer so the stores never depend on the transport.
Implementations raise the errors from ``shopsync.domain.exceptions``:
EntityNotFoundError for a missing product, AuthorizationError for 401/403,
NetworkError when the service cannot be reached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopsync.domain.model.product import Product, ProductChanges, ProductDraft


class CatalogGateway(ABC):

    @abstractmethod
    async def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    async def list_available(self) -> list[Product]:
        """Return only products that can currently be bought."""

    @abstractmethod
    async def get_by_id(self, product_id: int) -> Product:
        """Return one product, or raise EntityNotFoundError."""

    @abstractmethod
    async def list_by_seller(self, seller_id: int) -> list[Product]:
        """Return the products listed by one seller."""

    @abstractmethod
    async def search(self, text: str) -> list[Product]:
        """Return products whose name matches ``text``."""

    @abstractmethod
    async def list_related(self, product_id: int, limit: int) -> list[Product]:
        """Return up to ``limit`` products related to ``product_id``."""

    @abstractmethod
    async def create(self, draft: ProductDraft) -> Product:
        """Create a product and return it as stored by the catalog."""

    @abstractmethod
    async def update(self, product_id: int, changes: ProductChanges) -> Product:
        """Apply a partial update and return the stored product."""

    @abstractmethod
    async def delete(self, product_id: int) -> None:
        """Delete a product."""
