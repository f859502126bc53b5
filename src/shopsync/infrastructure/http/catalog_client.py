"""httpx implementation of CatalogGateway.

Maps each gateway operation to one REST call and every failure to the
domain error taxonomy. Reads are retried on transport failures;
mutations are sent exactly once.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import httpx
import structlog
from pydantic import ValidationError as PayloadValidationError

from shopsync.domain.exceptions import (
    AuthorizationError,
    DomainException,
    EntityNotFoundError,
    GatewayError,
    NetworkError,
)
from shopsync.domain.model.product import Product, ProductChanges, ProductDraft
from shopsync.domain.repository.catalog_gateway import CatalogGateway
from shopsync.infrastructure.auth.session import AuthSession, BearerAuth
from shopsync.infrastructure.http.payloads import (
    ProductPayload,
    changes_to_json,
    draft_to_json,
)
from shopsync.infrastructure.http.retry_policy import RetryPolicy

logger = structlog.get_logger(__name__)

MSG_NETWORK = "Network error. Please check your connection."
MSG_TIMEOUT = "The catalog service did not respond in time."
MSG_UNAUTHORIZED = "Please log in to continue."
MSG_FORBIDDEN = "You are not allowed to perform this action."
MSG_NOT_FOUND = "Requested resource not found."


class HttpCatalogGateway(CatalogGateway):

    def __init__(
        self,
        base_url: str,
        session: AuthSession,
        *,
        timeout: float = 10.0,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._retry = retry_policy or RetryPolicy()
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=BearerAuth(session),
            timeout=timeout,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpCatalogGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- CatalogGateway interface ---------------------------------------------

    async def list_all(self) -> list[Product]:
        return _products(await self._get("/products"))

    async def list_available(self) -> list[Product]:
        return _products(await self._get("/products/available"))

    async def get_by_id(self, product_id: int) -> Product:
        return _product(await self._get(f"/products/{product_id}"))

    async def list_by_seller(self, seller_id: int) -> list[Product]:
        return _products(await self._get(f"/products/seller/{seller_id}"))

    async def search(self, text: str) -> list[Product]:
        return _products(await self._get("/products/search", params={"name": text}))

    async def list_related(self, product_id: int, limit: int) -> list[Product]:
        return _products(
            await self._get(f"/products/{product_id}/related", params={"limit": limit})
        )

    async def create(self, draft: ProductDraft) -> Product:
        response = await self._send("POST", "/products", json=draft_to_json(draft))
        return _product(_json(response))

    async def update(self, product_id: int, changes: ProductChanges) -> Product:
        response = await self._send(
            "PUT", f"/products/{product_id}", json=changes_to_json(changes)
        )
        return _product(_json(response))

    async def delete(self, product_id: int) -> None:
        await self._send("DELETE", f"/products/{product_id}")

    # --- Transport ------------------------------------------------------------

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        async def attempt() -> Any:
            return _json(await self._send("GET", path, params=params))

        return await self._retry.run(attempt)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("catalog_timeout", method=method, path=path)
            raise NetworkError(MSG_TIMEOUT) from exc
        except httpx.TransportError as exc:
            logger.warning("catalog_unreachable", method=method, path=path, error=str(exc))
            raise NetworkError(MSG_NETWORK) from exc

        logger.debug(
            "catalog_response", method=method, path=path, status=response.status_code
        )
        if response.is_success:
            return response
        raise self._error_for(response)

    def _error_for(self, response: httpx.Response) -> GatewayError:
        status = response.status_code
        detail = _server_message(response)
        if status == 401:
            self._session.invalidate()
            return AuthorizationError(MSG_UNAUTHORIZED)
        if status == 403:
            return AuthorizationError(detail or MSG_FORBIDDEN)
        if status == 404:
            return EntityNotFoundError(detail or MSG_NOT_FOUND)
        logger.error("catalog_error", status=status, detail=detail)
        return GatewayError(detail or f"Catalog service error ({status})")


# --- Decoding helpers -----------------------------------------------------------


def _json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json(parse_float=Decimal)
    except ValueError as exc:
        raise GatewayError("Catalog service returned malformed JSON") from exc


def _product(raw: Any) -> Product:
    try:
        return ProductPayload.model_validate(raw).to_domain()
    except (PayloadValidationError, DomainException) as exc:
        raise GatewayError(f"Unexpected product payload: {exc}") from exc


def _products(raw: Any) -> list[Product]:
    if not isinstance(raw, list):
        raise GatewayError("Expected a list of products from the catalog service")
    return [_product(item) for item in raw]


def _server_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return None
