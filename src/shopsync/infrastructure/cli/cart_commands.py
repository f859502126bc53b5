"""CLI commands for the local cart. The cart survives between runs via its snapshot."""

from __future__ import annotations

import click

from shopsync.application.cart_store import CartStore
from shopsync.application.dto import CartDTO
from shopsync.infrastructure.bootstrap import AppContainer
from shopsync.infrastructure.cli.runtime import raise_on_store_error, run


def _echo_cart(store: CartStore) -> None:
    cart = CartDTO.from_cart(store.cart)
    if not cart.items:
        click.echo("Your cart is empty.")
        return

    click.echo(f"{'Line':<34} {'Product':<20} {'Qty':>4} {'Price':>10} {'Subtotal':>10}")
    click.echo("-" * 82)
    for item in cart.items:
        click.echo(
            f"{item.id:<34} {item.product_name:<20} {item.quantity:>4} "
            f"{item.unit_price:>10} {item.subtotal:>10}"
        )
    click.echo(f"{cart.item_count} item(s), total {cart.total}")


def _resolve_line(store: CartStore, ref: str) -> str:
    """Accept either a line ID or a product ID."""
    if store.cart.find_line(ref) is not None:
        return ref
    if ref.isdigit():
        item = store.get_item(int(ref))
        if item is not None:
            return item.id
    return ref


@click.command("show")
def cart_show() -> None:
    """Show the cart."""

    async def action(container: AppContainer) -> None:
        _echo_cart(container.cart_store)

    run(action)


@click.command("add")
@click.argument("product_id", type=int)
@click.option("--quantity", "-q", type=click.IntRange(min=1), default=1, show_default=True)
def cart_add(product_id: int, quantity: int) -> None:
    """Add a catalog product to the cart at its current price."""

    async def action(container: AppContainer) -> None:
        products = container.product_store
        await products.fetch_by_id(product_id)
        raise_on_store_error(products)
        product = products.current_product
        if product is None:
            raise click.ClickException(f"Product #{product_id} not found")
        if not product.in_stock:
            raise click.ClickException(f"'{product.name}' is not available")
        container.cart_store.add_item(product, quantity)
        _echo_cart(container.cart_store)

    run(action)


@click.command("remove")
@click.argument("line")
def cart_remove(line: str) -> None:
    """Remove a line (by line ID or product ID)."""

    async def action(container: AppContainer) -> None:
        store = container.cart_store
        store.remove_item(_resolve_line(store, line))
        _echo_cart(store)

    run(action)


@click.command("update")
@click.argument("line")
@click.argument("quantity", type=int)
def cart_update(line: str, quantity: int) -> None:
    """Set a line's quantity; 0 or less removes it."""

    async def action(container: AppContainer) -> None:
        store = container.cart_store
        store.update_quantity(_resolve_line(store, line), quantity)
        _echo_cart(store)

    run(action)


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart."""

    async def action(container: AppContainer) -> None:
        container.cart_store.clear_cart()
        click.echo("Cart cleared.")

    run(action)
