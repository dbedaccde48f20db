"""Shop commands - spend coins on cosmetics."""

from typing import Annotated

import typer
from rich.table import Table

from urfocus_cli.utils.ui.console import get_console
from urfocus_cli.utils.ui.formatters import format_info, format_success

from .decorators import command_wrapper
from .utils import get_shop_service

app = typer.Typer(help="Spend focus coins on themes, stickers and titles")
console = get_console()


@app.command("list")
@command_wrapper(auth_required=False)
def list_items() -> None:
    """List shop items and your balance."""
    shop = get_shop_service()
    prefs = shop.preferences

    table = Table(title=f"🛍  Shop  (💰 {prefs.coins} coins)")
    table.add_column("ID", style="dim")
    table.add_column("Item", style="cyan")
    table.add_column("Cost", justify="right")
    table.add_column("Status")

    for item in shop.items:
        if item.kind == "background" and item.background == prefs.background:
            status = "[green]equipped[/green]"
        elif shop.is_owned(item.id):
            status = "owned"
        else:
            status = ""
        table.add_row(item.id, f"{item.name}\n[dim]{item.description}[/dim]", str(item.cost), status)

    console.print(table)


@app.command("buy")
@command_wrapper(auth_required=False)
def buy_item(
    item_id: Annotated[str, typer.Argument(help="Item ID from 'urfocus shop list'")],
) -> None:
    """Buy an item (owned backgrounds are equipped for free)."""
    shop = get_shop_service()
    item = shop.get_item(item_id)
    outcome = shop.purchase(item_id)

    if outcome == "purchased":
        format_success(
            f"Bought {item.name} for {item.cost} coins "
            f"({shop.preferences.coins} left)"
        )
    elif outcome == "equipped":
        format_success(f"Equipped {item.name}")
    else:
        format_info(f"You already own {item.name}")


@app.command("equip")
@command_wrapper(auth_required=False)
def equip_background(
    background: Annotated[
        str, typer.Argument(help="Background or item ID; 'system' for the default")
    ],
) -> None:
    """Switch the active background."""
    equipped = get_shop_service().equip(background)
    format_success(f"Background set to '{equipped}'")
