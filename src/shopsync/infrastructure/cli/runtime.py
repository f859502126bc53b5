"""Helpers shared by CLI commands: container lifetime and error display."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from shopsync.application.product_store import ProductStore
from shopsync.domain.exceptions import DomainException
from shopsync.infrastructure.bootstrap import AppContainer, build_container

T = TypeVar("T")


def run(action: Callable[[AppContainer], Awaitable[T]]) -> T:
    """Build a container, run ``action`` on the event loop, always close it."""

    async def main() -> T:
        container = build_container()
        try:
            return await action(container)
        finally:
            await container.aclose()

    try:
        return asyncio.run(main())
    except DomainException as exc:
        raise click.ClickException(str(exc))


def raise_on_store_error(store: ProductStore) -> None:
    if store.error:
        raise click.ClickException(store.error)
