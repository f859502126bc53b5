import click

from shopsync.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from shopsync.infrastructure.cli.product_commands import (
    product_available,
    product_create,
    product_delete,
    product_list,
    product_related,
    product_search,
    product_seller,
    product_show,
    product_update,
)


@click.group()
def cli() -> None:
    """shopsync — catalog browsing and a local shopping cart"""


@cli.group()
def product() -> None:
    """Browse and manage catalog products."""


@cli.group()
def cart() -> None:
    """Manage the local shopping cart."""


# Register subcommands
product.add_command(product_available)
product.add_command(product_create)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_related)
product.add_command(product_search)
product.add_command(product_seller)
product.add_command(product_show)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
