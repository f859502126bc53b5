"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Stores are built here and handed to whoever needs them; nothing reaches
for a module-level instance.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopsync.application.cart_store import CartStore
from shopsync.application.product_store import ProductStore
from shopsync.application.snapshot import SnapshotPersister
from shopsync.domain.repository.catalog_gateway import CatalogGateway
from shopsync.domain.repository.snapshot_storage import SnapshotStorage
from shopsync.infrastructure.auth.session import AuthSession
from shopsync.infrastructure.config.settings import ShopSettings
from shopsync.infrastructure.http.catalog_client import HttpCatalogGateway
from shopsync.infrastructure.http.retry_policy import RetryPolicy
from shopsync.infrastructure.observability.log_config import configure_logging
from shopsync.infrastructure.persistence.cart_snapshot import (
    project_cart_store,
    seed_cart_store,
)
from shopsync.infrastructure.persistence.json_snapshot_storage import (
    JsonSnapshotStorage,
)


@dataclass
class AppContainer:
    settings: ShopSettings
    session: AuthSession
    gateway: CatalogGateway
    storage: SnapshotStorage
    cart_store: CartStore
    product_store: ProductStore
    cart_persister: SnapshotPersister[CartStore]

    async def aclose(self) -> None:
        self.cart_persister.detach()
        if isinstance(self.gateway, HttpCatalogGateway):
            await self.gateway.aclose()


def build_container(
    settings: ShopSettings | None = None,
    *,
    gateway: CatalogGateway | None = None,
    storage: SnapshotStorage | None = None,
) -> AppContainer:
    """Build every store and seed the cart from its last snapshot."""
    settings = settings or ShopSettings()
    configure_logging(settings.log_format, settings.log_level)

    token = settings.api_token.get_secret_value() if settings.api_token else None
    session = AuthSession(token)
    if gateway is None:
        gateway = HttpCatalogGateway(
            settings.api_base_url,
            session,
            timeout=settings.request_timeout,
            retry_policy=RetryPolicy(max_attempts=settings.retry_attempts),
        )
    storage = storage or JsonSnapshotStorage(settings.data_dir)

    cart_store = CartStore()
    product_store = ProductStore(gateway)
    # logging out forgets whatever catalog view was held
    session.on_invalidated(product_store.clear_products)

    cart_persister = SnapshotPersister(
        cart_store,
        storage,
        settings.cart_storage_key,
        project=project_cart_store,
        seed=seed_cart_store,
    )
    cart_persister.restore()
    cart_persister.attach()

    return AppContainer(
        settings=settings,
        session=session,
        gateway=gateway,
        storage=storage,
        cart_store=cart_store,
        product_store=product_store,
        cart_persister=cart_persister,
    )
