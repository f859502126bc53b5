"""CLI commands backed by the ProductStore."""

from __future__ import annotations

import click

from shopsync.application.dto import ProductDTO
from shopsync.application.product_store import ProductStore
from shopsync.domain.model.product import Product, ProductChanges, ProductDraft
from shopsync.domain.model.value_objects import Money
from shopsync.infrastructure.bootstrap import AppContainer
from shopsync.infrastructure.cli.runtime import raise_on_store_error, run


def _echo_products(products: list[Product]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10} {'Stock':>6}  {'Seller'}")
    click.echo("-" * 64)
    for p in map(ProductDTO.from_product, products):
        marker = "" if p.available else " (unavailable)"
        click.echo(f"{p.id:<6} {p.name:<24} {p.price:>10} {p.stock:>6}  {p.seller}{marker}")


def _echo_product(product: Product) -> None:
    click.echo(f"Product #{product.id} '{product.name}' at {product.price}")
    if product.description:
        click.echo(f"  {product.description}")
    click.echo(f"  stock: {product.stock}  active: {product.active}  available: {product.available}")
    if product.seller is not None:
        click.echo(f"  seller: {product.seller.full_name} <{product.seller.email}>")


async def _listing(container: AppContainer, fetch) -> list[Product]:
    store: ProductStore = container.product_store
    await fetch(store)
    raise_on_store_error(store)
    return store.products


@click.command("list")
def product_list() -> None:
    """List every product in the catalog."""
    _echo_products(run(lambda c: _listing(c, lambda s: s.fetch_all())))


@click.command("available")
def product_available() -> None:
    """List products that can be bought right now."""
    _echo_products(run(lambda c: _listing(c, lambda s: s.fetch_available())))


@click.command("seller")
@click.argument("seller_id", type=int)
def product_seller(seller_id: int) -> None:
    """List one seller's products."""
    _echo_products(run(lambda c: _listing(c, lambda s: s.fetch_by_seller(seller_id))))


@click.command("search")
@click.argument("query")
def product_search(query: str) -> None:
    """Search products by name."""
    _echo_products(run(lambda c: _listing(c, lambda s: s.search(query))))


@click.command("show")
@click.argument("product_id", type=int)
def product_show(product_id: int) -> None:
    """Show one product and what is related to it."""

    async def action(container: AppContainer) -> tuple[Product, list[Product]]:
        store = container.product_store
        await store.fetch_by_id(product_id)
        raise_on_store_error(store)
        related = await store.fetch_related(product_id)
        return store.current_product, related  # type: ignore[return-value]

    product, related = run(action)
    _echo_product(product)
    if related:
        click.echo("Related:")
        _echo_products(related)


@click.command("create")
@click.option("--name", required=True, help="Product name.")
@click.option("--description", default="", help="Product description.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", type=int, default=0, show_default=True, help="Units in stock.")
@click.option("--seller-id", type=int, required=True, help="Owning seller ID.")
def product_create(name: str, description: str, price: str, stock: int, seller_id: int) -> None:
    """Create a product in the catalog."""

    async def action(container: AppContainer) -> Product:
        draft = ProductDraft(
            name=name,
            description=description,
            price=Money.of(price),
            stock=stock,
            seller_id=seller_id,
        )
        return await container.product_store.create(draft)

    product = run(action)
    click.echo(f"Product #{product.id} '{product.name}' created at {product.price}")


@click.command("update")
@click.argument("product_id", type=int)
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None, help="New description.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--stock", type=int, default=None, help="New stock level.")
@click.option("--active/--inactive", default=None, help="Show or hide the product.")
def product_update(
    product_id: int,
    name: str | None,
    description: str | None,
    price: str | None,
    stock: int | None,
    active: bool | None,
) -> None:
    """Change some fields of a product."""

    async def action(container: AppContainer) -> Product:
        changes = ProductChanges(
            name=name,
            description=description,
            price=Money.of(price) if price is not None else None,
            stock=stock,
            active=active,
        )
        if changes.is_empty:
            raise click.UsageError("Nothing to update.")
        return await container.product_store.update(product_id, changes)

    product = run(action)
    click.echo(f"Product #{product.id} updated")


@click.command("delete")
@click.argument("product_id", type=int)
@click.confirmation_option(prompt="Delete this product?")
def product_delete(product_id: int) -> None:
    """Delete a product from the catalog."""
    run(lambda c: c.product_store.delete(product_id))
    click.echo(f"Product #{product_id} deleted")


@click.command("related")
@click.argument("product_id", type=int)
@click.option("--limit", type=click.IntRange(min=1), default=4, show_default=True)
def product_related(product_id: int, limit: int) -> None:
    """List products related to one product. Never fails: shows nothing instead."""
    _echo_products(run(lambda c: c.product_store.fetch_related(product_id, limit)))
