#!/usr/bin/env python3
"""
ShareSathi CLI
Command line watchlists, quotes and time machine
"""
import sys
import asyncio
import argparse
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from sharesathi.config import settings
from sharesathi.database import SessionLocal, init_db
from sharesathi.exceptions import ShareSathiException
from sharesathi.logging_config import get_logger, setup_logging
from sharesathi.services.calculator_service import YEARS_BACK_PRESETS
from sharesathi.services.stock_catalog import stock_catalog
from sharesathi.services.stock_service import stock_service
from sharesathi.services.storage_service import KeyValueStorage
from sharesathi.services.watchlist_service import WatchlistStore
from sharesathi.utils.formatters import (
    format_change,
    format_indian_number,
    format_market_cap,
    format_price,
    format_volume,
)
from sharesathi.utils.market_hours import get_market_status_text, now_ist

console = Console()
logger = get_logger(__name__)


def print_header():
    console.print()
    console.print(Panel.fit(
        f"[bold orange1]{settings.APP_NAME}[/bold orange1]\n"
        f"[dim]version {settings.APP_VERSION}[/dim]",
        border_style="orange1",
    ))
    console.print()


def _color(value: float) -> str:
    return "green" if value >= 0 else "red"


def _open_store() -> WatchlistStore:
    init_db()
    store = WatchlistStore(KeyValueStorage(SessionLocal))
    store.load()
    return store


# ==================== Watchlists ====================

def print_watchlists(store: WatchlistStore):
    table = Table(title="Watchlists", box=box.ROUNDED)
    table.add_column("", justify="center")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Stocks", justify="right")
    table.add_column("Symbols", style="dim")

    for w in store.watchlists:
        marker = "*" if w.id == store.active_watchlist_id else ""
        name = f"{w.name} [dim](read-only)[/dim]" if w.is_default else w.name
        table.add_row(marker, w.id, name, str(len(w.symbols)), ", ".join(w.symbols[:8]))

    console.print(table)
    console.print(
        f"[dim]{len(store.watchlists)}/{store.max_watchlists} watchlists, "
        f"* marks the active one[/dim]"
    )


def cmd_watchlist(args):
    """Watchlist management"""
    store = _open_store()
    action = args.action

    if action == "list":
        print_watchlists(store)
        return 0

    if action == "create":
        new_id = store.create_watchlist(args.name or "")
        if new_id is None:
            console.print(f"[red]Watchlist limit reached ({store.max_watchlists})[/red]")
            return 1
        console.print(f"[green]Created {store.get_watchlist(new_id).name} ({new_id})[/green]")
        return 0

    if action == "use":
        if not store.set_active_watchlist(args.id):
            console.print(f"[red]No watchlist {args.id}[/red]")
            return 1
        console.print(f"[green]Active watchlist: {args.id}[/green]")
        return 0

    watchlist_id = getattr(args, "watchlist", None) or getattr(args, "id", None)
    target = store.get_watchlist(watchlist_id) if watchlist_id else store.get_active_watchlist()
    if target is None:
        console.print(f"[red]No watchlist {watchlist_id}[/red]")
        return 1
    if target.is_default:
        console.print(f"[red]{target.name} is read-only[/red]")
        return 1

    if action == "add":
        symbol = args.symbol.strip().upper()
        if store.is_in_watchlist(symbol, target.id):
            console.print(f"[yellow]{symbol} is already in {target.name}[/yellow]")
            return 0
        if not store.can_add_to_watchlist(target.id):
            console.print(f"[red]{target.name} is full ({store.max_stocks} stocks)[/red]")
            return 1
        store.add_stock(symbol, target.id)
        console.print(f"[green]Added {symbol} to {target.name}[/green]")
    elif action == "remove":
        symbol = args.symbol.strip().upper()
        store.remove_stock(symbol, target.id)
        console.print(f"[green]Removed {symbol} from {target.name}[/green]")
    elif action == "rename":
        store.rename_watchlist(target.id, args.name)
        console.print(f"[green]Renamed to {store.get_watchlist(target.id).name}[/green]")
    elif action == "delete":
        before = len(store.watchlists)
        store.delete_watchlist(target.id)
        if len(store.watchlists) == before:
            console.print("[red]Can't delete the last watchlist[/red]")
            return 1
        console.print(f"[green]Deleted {target.name}[/green]")
    return 0


# ==================== Quotes ====================

def print_quote(quote):
    color = _color(quote.change)
    console.print(Panel(
        f"[bold]{quote.short_name}[/bold] - {quote.name}",
        border_style="blue",
    ))

    table = Table(box=box.ROUNDED, show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Price", f"[bold]{format_price(quote.price)}[/bold]")
    table.add_row("Change", f"[{color}]{format_change(quote.change, quote.change_percent)}[/{color}]")
    table.add_row("Open / High / Low", " / ".join(
        format_price(v) for v in (quote.open, quote.high, quote.low)
    ))
    table.add_row("52W High", format_price(quote.fifty_two_week_high))
    table.add_row("52W Low", format_price(quote.fifty_two_week_low))
    table.add_row("Volume", format_volume(quote.volume))
    if quote.market_cap:
        table.add_row("Market cap", format_market_cap(quote.market_cap))
    console.print(table)
    console.print(f"[dim]Updated: {quote.timestamp}[/dim]")


def cmd_quote(args):
    """Live quote"""
    symbol = args.symbol.strip().upper()
    with console.status(f"[bold green]Fetching {symbol}..."):
        try:
            quote = asyncio.run(stock_service.get_quote(symbol))
        except ShareSathiException as e:
            logger.warning(f"quote {symbol}: {e.message}")
            console.print(f"[red]{e.message}[/red]")
            return 1
    print_quote(quote)
    return 0


# ==================== Time machine ====================

def cmd_whatif(args):
    """What a past investment would be worth today"""
    symbol = args.symbol.strip().upper()
    with console.status(f"[bold green]Looking back {args.years} years on {symbol}..."):
        try:
            result = asyncio.run(stock_service.get_time_machine(symbol, args.amount, args.years))
        except ShareSathiException as e:
            logger.warning(f"whatif {symbol}: {e.message}")
            console.print(f"[red]{e.message}[/red]")
            return 1

    inv = result.result
    if inv is None:
        console.print(f"[yellow]Not enough price history for {symbol}[/yellow]")
        return 1

    names = stock_catalog.get_names(symbol)
    color = _color(inv.profit)
    table = Table(title=f"{names['name']}: {format_price(args.amount)} invested", box=box.ROUNDED, show_header=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Bought on", f"{inv.investment_date} at {format_price(inv.investment_price)}")
    table.add_row("Shares", format_indian_number(inv.shares, 4))
    table.add_row("Current price", format_price(inv.current_price))
    table.add_row("Worth today", f"[bold]{format_price(inv.current_value)}[/bold]")
    table.add_row("Profit", f"[{color}]{format_change(inv.profit, inv.profit_percent)}[/{color}]")
    table.add_row("Held", f"{inv.actual_years:.1f} years")
    table.add_row("CAGR", f"[{color}]{inv.cagr_percent:+.2f}%[/{color}]")
    console.print(table)
    return 0


def cmd_status(args):
    """Market status"""
    now = now_ist()
    console.print(f"{get_market_status_text(now)} [dim]({now:%Y-%m-%d %H:%M} IST)[/dim]")
    return 0


def cmd_init(args):
    """Create tables and the default watchlists"""
    store = _open_store()
    store.save()
    console.print(f"[green]Database ready, {len(store.watchlists)} watchlists[/green]")
    return 0


def main():
    """Entry point"""
    parser = argparse.ArgumentParser(
        description=f"{settings.APP_NAME} - Indian stock dashboard CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    subparsers = parser.add_subparsers(dest="command", help="commands")

    init_parser = subparsers.add_parser("init", help="initialise the database")
    init_parser.set_defaults(func=cmd_init)

    # watchlist
    wl_parser = subparsers.add_parser("watchlist", help="manage watchlists")
    wl_sub = wl_parser.add_subparsers(dest="action", required=True)
    wl_sub.add_parser("list", help="show all watchlists")
    create = wl_sub.add_parser("create", help="new watchlist")
    create.add_argument("name", nargs="?", default="")
    use = wl_sub.add_parser("use", help="set the active watchlist")
    use.add_argument("id")
    for name, help_text in (("add", "add a stock"), ("remove", "remove a stock")):
        p = wl_sub.add_parser(name, help=help_text)
        p.add_argument("symbol")
        p.add_argument("-w", "--watchlist", help="watchlist id (default: active)")
    rename = wl_sub.add_parser("rename", help="rename a watchlist")
    rename.add_argument("id")
    rename.add_argument("name")
    delete = wl_sub.add_parser("delete", help="delete a watchlist")
    delete.add_argument("id")
    wl_parser.set_defaults(func=cmd_watchlist)

    quote_parser = subparsers.add_parser("quote", help="live quote")
    quote_parser.add_argument("symbol", help="BSE code or NSE ticker, e.g. 500325")
    quote_parser.set_defaults(func=cmd_quote)

    whatif_parser = subparsers.add_parser("whatif", help="time machine")
    whatif_parser.add_argument("symbol")
    whatif_parser.add_argument("-a", "--amount", type=float, default=10000, help="rupees invested (default 10000)")
    whatif_parser.add_argument("-y", "--years", type=int, default=5, choices=YEARS_BACK_PRESETS,
                              help="years back (default 5)")
    whatif_parser.set_defaults(func=cmd_whatif)

    status_parser = subparsers.add_parser("status", help="market status")
    status_parser.set_defaults(func=cmd_status)

    args = parser.parse_args()

    setup_logging(log_level="DEBUG" if args.verbose else "WARNING", log_to_file=False)
    print_header()

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
