# cli.py - interactive admin console for the Card Boutique API
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.pyboutique import BoutiqueClient, error_message
import requests

console = Console()
c = BoutiqueClient(base_url=os.getenv("BOUTIQUE_URL", "http://127.0.0.1:3000"))


# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def format_price(price: Optional[float]) -> str:
    if price is None:
        return "[dim]on request[/dim]"
    return f"{price:.2f}"


def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="💌 Card Catalog",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=18)
    table.add_column("Name", style="bold", width=22)
    table.add_column("Description", width=34)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Category", width=14)

    for p in products:
        table.add_row(
            p.get("id", "N/A"),
            p.get("name", "N/A"),
            p.get("description", ""),
            format_price(p.get("price")),
            p.get("category") or "-"
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with error display
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner. On an HTTP or connection
    error prints the server's message, updates status_message and returns None.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except requests.exceptions.HTTPError as e:
        status_message = f"Error: {error_message(e)}"
    except requests.exceptions.RequestException as e:
        status_message = f"Error: {e}"
    console.print(show_status(status_message, False))
    return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    global product_cache
    if not product_cache:
        product_cache = try_api(c.list_products) or []
    ids = [p.get("id", "") for p in product_cache]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def get_category_completer():
    categories = {p.get("category") for p in product_cache if p.get("category")}
    return WordCompleter(sorted(categories), ignore_case=True)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    who = "[green]admin[/green]" if c.token else "[dim]not logged in[/dim]"
    header.add_row(
        f"💌 Card Boutique ({who})",
        "[bold blue]Catalog admin console[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_price(message: str, allow_keep: bool = False):
    """
    Empty answer means "price on request" (None), or "keep current" when
    allow_keep is set, in which case the string "keep" is returned.
    """
    hint = "blank to keep, '-' to clear" if allow_keep else "blank for on request"
    while True:
        raw = Prompt.ask(f"{message} ({hint})", default="").strip()
        if raw == "":
            return "keep" if allow_keep else None
        if raw == "-":
            return None
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, product_cache

    console.clear()
    console.print(create_header())

    # Preload products for autocomplete
    product_cache = try_api(c.list_products) or []

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "🔑 Log in", "5", "🗑️ Delete product"),
            ("2", "📦 List products", "6", "✉️ Send test order"),
            ("3", "➕ Create product", "7", "🩺 Health check"),
            ("4", "✏️ Update product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 8)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            username = prompt_with_autocomplete("Username", default="admin")
            password = Prompt.ask("Password", password=True)
            try_api(c.login, username, password, success_msg=f"Logged in as {username}")

        elif choice == "2":
            products = try_api(c.list_products, success_msg="Products loaded successfully")
            if products is not None:
                product_cache = products
                show_products(products)

        elif choice == "3":
            name = prompt_with_autocomplete("Card name")
            description = prompt_with_autocomplete("Description")
            price = ask_price("💰 Price")
            category = prompt_with_autocomplete("🏷️ Category", completer=get_category_completer())
            resp = try_api(
                c.create_product, name, description, price, category or None,
                success_msg=f"Product '{name}' created"
            )
            if resp:
                show_products([resp])
                product_cache = try_api(c.list_products) or []

        elif choice == "4":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            name = prompt_with_autocomplete("New name (blank keeps)")
            description = prompt_with_autocomplete("New description (blank keeps)")
            price = ask_price("💰 New price", allow_keep=True)
            category = prompt_with_autocomplete("New category (blank keeps)", completer=get_category_completer())
            kwargs: Dict[str, Any] = {
                "name": name or None,
                "description": description or None,
                "category": category or None,
            }
            if price != "keep":
                kwargs["price"] = price
            resp = try_api(c.update_product, pid, success_msg=f"Product {pid} updated", **kwargs)
            if resp:
                show_products([resp])
                product_cache = try_api(c.list_products) or []

        elif choice == "5":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            if Confirm.ask(f"[red]Delete {pid}?[/red]"):
                resp = try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
                if resp:
                    show_products([resp["removed"]])
                    product_cache = try_api(c.list_products) or []

        elif choice == "6":
            name = prompt_with_autocomplete("Customer name")
            email = prompt_with_autocomplete("Customer email")
            message = prompt_with_autocomplete("Order details")
            r = try_api(c.place_order, name, email, message)
            if r is not None:
                body = r.json()
                if r.status_code == 200:
                    console.print(Panel.fit("[green]Order emails sent[/green]", title="✅ Order relayed"))
                else:
                    console.print(Panel.fit(f"[red]{body.get('error')}[/red]", title="❌ Order failed"))

        elif choice == "7":
            resp = try_api(c.health, success_msg="Server is up")
            if resp:
                console.print(resp)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Card Boutique"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
