"""Product store: the coordinator for every read and write of catalog data.

Owns the in-memory product collection, the currently viewed product and
the fetch concurrency controls.

Fetches are single-flight: while one is in flight, any other fetch
returns immediately without touching state. The flag is checked and set
before the first ``await``, so under the event loop no second fetch can
slip in between the two. Create/update/delete are not guarded and may
interleave with a fetch; a fetch that resolves after a mutation overwrites
it, and late results are always applied.

Gateway failures never escape fetches: the message is stored in
``error``. Mutations store the message and re-raise so the caller can
react (keep a form open, for instance).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

import structlog

from shopsync.application.state import StateContainer
from shopsync.domain.exceptions import DomainException
from shopsync.domain.model.product import Product, ProductChanges, ProductDraft
from shopsync.domain.repository.catalog_gateway import CatalogGateway

logger = structlog.get_logger(__name__)

DEFAULT_RELATED_LIMIT = 4


class FetchStatus(Enum):
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    FETCHED = "FETCHED"
    ERROR = "ERROR"


class ProductStore(StateContainer):

    def __init__(self, gateway: CatalogGateway) -> None:
        super().__init__()
        self._gateway = gateway
        self.products: list[Product] = []
        self.current_product: Product | None = None
        self.is_loading = False
        self.is_fetching = False
        self.error: str | None = None
        self.last_fetched_seller_id: int | None = None
        self.status = FetchStatus.IDLE

    # --- Fetches (single-flight) ----------------------------------------------

    async def fetch_all(self) -> None:
        products = await self._fetch(
            self._gateway.list_all, "Failed to fetch products", op="fetch_all"
        )
        if products is not None:
            self._replace(products)

    async def fetch_available(self) -> None:
        products = await self._fetch(
            self._gateway.list_available,
            "Failed to fetch available products",
            op="fetch_available",
        )
        if products is not None:
            self._replace(products)

    async def fetch_by_id(self, product_id: int) -> None:
        product = await self._fetch(
            lambda: self._gateway.get_by_id(product_id),
            "Product not found",
            op="fetch_by_id",
        )
        if product is not None:
            self.current_product = product
            self._notify()

    async def fetch_by_seller(self, seller_id: int) -> None:
        """Fetch one seller's products, reusing the held collection if it is
        already that seller's and not empty."""
        if self.products and self.last_fetched_seller_id == seller_id:
            logger.debug("fetch_skipped_cached", seller_id=seller_id)
            return

        products = await self._fetch(
            lambda: self._gateway.list_by_seller(seller_id),
            "Failed to fetch seller products",
            op="fetch_by_seller",
        )
        if products is not None:
            self._replace(products, seller_id=seller_id)

    async def search(self, query: str) -> None:
        """Search by name. A blank query clears the collection locally."""
        if not query or not query.strip():
            self.products = []
            self.last_fetched_seller_id = None
            self._notify()
            return

        products = await self._fetch(
            lambda: self._gateway.search(query.strip()), "Search failed", op="search"
        )
        if products is not None:
            self._replace(products)

    async def fetch_related(
        self, product_id: int, limit: int = DEFAULT_RELATED_LIMIT
    ) -> list[Product]:
        """Related products are supplementary: any failure yields ``[]``."""
        try:
            return await self._gateway.list_related(product_id, limit)
        except Exception as exc:
            logger.warning(
                "related_products_unavailable", product_id=product_id, error=str(exc)
            )
            return []

    # --- Mutations (not guarded) ----------------------------------------------

    async def create(self, draft: ProductDraft) -> Product:
        product = await self._mutate(
            lambda: self._gateway.create(draft), "Failed to create product", op="create"
        )
        self.products = [*self.products, product]
        self._notify()
        return product

    async def update(self, product_id: int, changes: ProductChanges) -> Product:
        updated = await self._mutate(
            lambda: self._gateway.update(product_id, changes),
            "Failed to update product",
            op="update",
        )
        self.products = [updated if p.id == product_id else p for p in self.products]
        if self.current_product is not None and self.current_product.id == product_id:
            self.current_product = updated
        self._notify()
        return updated

    async def delete(self, product_id: int) -> None:
        await self._mutate(
            lambda: self._gateway.delete(product_id),
            "Failed to delete product",
            op="delete",
        )
        self.products = [p for p in self.products if p.id != product_id]
        if self.current_product is not None and self.current_product.id == product_id:
            self.current_product = None
        self._notify()

    # --- Local state management -----------------------------------------------

    def set_current_product(self, product: Product | None) -> None:
        self.current_product = product
        self._notify()

    def clear_error(self) -> None:
        self.error = None
        self._notify()

    def clear_products(self) -> None:
        """Forget everything held, e.g. on logout or leaving a seller view."""
        self.products = []
        self.current_product = None
        self.last_fetched_seller_id = None
        # an in-flight fetch still owns the single-flight flag
        if not self.is_fetching:
            self.status = FetchStatus.IDLE
        self._notify()

    # --- Internal helpers -----------------------------------------------------

    async def _fetch(self, call: Callable[[], Awaitable], fallback: str, *, op: str):
        """Run ``call`` under the single-flight guard.

        Returns the result, or None if the fetch was dropped or failed.
        """
        if self.is_fetching:
            logger.debug("fetch_dropped_in_flight", op=op)
            return None

        self.is_fetching = True
        self.is_loading = True
        self.error = None
        self.status = FetchStatus.FETCHING
        self._notify()
        try:
            result = await call()
        except Exception as exc:
            self.error = _message(exc, fallback)
            self.status = FetchStatus.ERROR
            logger.warning("fetch_failed", op=op, error=self.error)
            return None
        finally:
            self.is_fetching = False
            self.is_loading = False
            self._notify_if_failed()

        self.status = FetchStatus.FETCHED
        logger.info("fetch_succeeded", op=op)
        return result

    async def _mutate(self, call: Callable[[], Awaitable], fallback: str, *, op: str):
        self.is_loading = True
        self.error = None
        self._notify()
        try:
            result = await call()
        except Exception as exc:
            self.error = _message(exc, fallback)
            logger.warning("mutation_failed", op=op, error=self.error)
            raise
        finally:
            self.is_loading = False
            self._notify_if_failed()
        logger.info("mutation_succeeded", op=op)
        return result

    def _notify_if_failed(self) -> None:
        # success paths notify once after patching the collection
        if self.error is not None:
            self._notify()

    def _replace(self, products: list[Product], *, seller_id: int | None = None) -> None:
        """Swap in a new collection. Only a seller fetch leaves a scope marker."""
        self.products = list(products)
        self.last_fetched_seller_id = seller_id
        logger.info("products_replaced", count=len(self.products))
        self._notify()


def _message(exc: Exception, fallback: str) -> str:
    if isinstance(exc, DomainException) and str(exc):
        return str(exc)
    return fallback
