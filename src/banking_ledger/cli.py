import shlex
import sys
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

import click
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from banking_ledger.config.locale import LocaleRegistry
from banking_ledger.config.settings import LedgerSettings
from banking_ledger.database.connection import DatabaseConfig, DatabaseManager
from banking_ledger.domain.enums import FilterType, TransactionType
from banking_ledger.domain.models import Transaction
from banking_ledger.domain.seed import seed_snapshot
from banking_ledger.logging_setup import configure_logging
from banking_ledger.parsers.base import LedgerFileFormatError
from banking_ledger.repositories.ledger_repository import KeyValueLedgerRepository
from banking_ledger.repositories.sqlite_key_value_store import SQLiteKeyValueStore
from banking_ledger.services.exchange_rate import ExchangeRateService
from banking_ledger.services.forms import TransactionInputError, build_transaction, reuse_transaction
from banking_ledger.services.ledger_service import LedgerService
from banking_ledger.services.preferences import ThemePreferences
from banking_ledger.services.validation import TRANSACTION_NOT_FOUND

app = typer.Typer(
    name="banking-ledger",
    help="Record deposits and withdrawals and keep a running balance",
    add_completion=False,
)

console = Console()

DATE_FORMATS = ["%Y-%m-%d"]

class State:
    verbose: bool = False
    in_shell: bool = False
    settings: Optional[LedgerSettings] = None
    service: Optional[LedgerService] = None
    rates: Optional[ExchangeRateService] = None
    theme: Optional[ThemePreferences] = None
    locale: Optional[LocaleRegistry] = None


state = State()

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    Banking Ledger - track deposits, withdrawals and your running balance.
    """
    if not state.in_shell:
        state.verbose = verbose
    configure_logging("INFO" if state.verbose else None)

    if state.service is None:
        settings = LedgerSettings.from_config()
        db_manager = DatabaseManager(DatabaseConfig(settings.db_path))
        store = SQLiteKeyValueStore(db_manager)

        state.settings = settings
        state.service = LedgerService(
            KeyValueLedgerRepository(store),
            initial_snapshot=seed_snapshot(settings.initial_balance),
            currency=settings.currency,
            page_size=settings.page_size,
        )
        state.rates = ExchangeRateService(
            store,
            target_currency=settings.display_currency,
            url=settings.exchange_rate_url,
            cache_seconds=settings.exchange_rate_cache_seconds,
            timeout=settings.exchange_rate_timeout,
        )
        state.theme = ThemePreferences(store)
        state.locale = LocaleRegistry(settings.locale)

def _fail(e: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {e}")
    if state.verbose and sys.exc_info()[0] is not None:
        console.print_exception()
    raise typer.Exit(code=1)

def _money(amount) -> str:
    return state.locale.current.format_currency(amount, state.service.currency)

def _rate() -> Optional[Decimal]:
    return state.rates.get_rate() if state.rates else None

def _converted(amount: Decimal, rate: Optional[Decimal]) -> str:
    """Display-currency equivalent, or a dash when no rate is available"""
    if rate is None:
        return "—"
    return state.locale.current.format_currency(amount * rate, state.rates.target_currency)

def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value else None

def _print_transaction(txn: Transaction, title: str) -> None:
    color = "green" if txn.type == TransactionType.DEPOSIT else "red"
    console.print(Panel.fit(
        f"[bold]{txn.description}[/bold]\n"
        f"ID: {txn.id}\n"
        f"Date: {txn.date.strftime(state.locale.current.date_format)}\n"
        f"Type: {txn.type.label}\n"
        f"Amount: [{color}]{_money(txn.signed_amount)}[/{color}]",
        title=title,
        border_style=color,
    ))

@app.command(name="balance")
def show_balance(
    convert: bool = typer.Option(
        True,
        "--convert/--no-convert",
        help="Show the amounts in the display currency too",
    ),
):
    """
    Show the balance with total income and expenses.
    """
    try:
        summary = state.service.summary()
        balance_color = "green" if summary.is_positive else "red"

        text = (
            f"[bold {balance_color}]{_money(summary.balance)}[/bold {balance_color}]\n\n"
            f"[green]Income:[/green]   +{_money(summary.total_income)}\n"
            f"[red]Expenses:[/red] -{_money(summary.total_expenses)}"
        )
        if convert:
            text += (
                f"\n{'─' * 30}\n"
                f"[dim]≈ {_converted(summary.balance, _rate())}[/dim]"
            )
        if state.service.can_undo:
            text += "\n\n[yellow]Undo available: banking-ledger undo[/yellow]"

        console.print(Panel(text, title="[bold]Account Balance[/bold]", border_style="cyan", padding=(1, 2)))

    except Exception as e:
        _fail(e)

@app.command(name="list")
def list_transactions(
    transaction_type: Optional[FilterType] = typer.Option(
        None,
        "--type", "-t",
        help="Only show this type",
        case_sensitive=False,
    ),
    date_from: Optional[datetime] = typer.Option(
        None,
        "--from",
        help="Earliest date (inclusive)",
        formats=DATE_FORMATS,
    ),
    date_to: Optional[datetime] = typer.Option(
        None,
        "--to",
        help="Latest date (inclusive)",
        formats=DATE_FORMATS,
    ),
    search: Optional[str] = typer.Option(
        None,
        "--search", "-s",
        help="Case-insensitive text to find in descriptions",
    ),
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Clear all filters first",
    ),
    page: Optional[int] = typer.Option(
        None,
        "--page", "-p",
        help="Page number",
        min=1,
    ),
):
    """
    List transactions, newest first, one page at a time.

    Filters given here stay active for the rest of a shell session.

    Examples:
        banking-ledger list
        banking-ledger list --type deposit --search sal
        banking-ledger list --from 2025-12-01 --to 2025-12-07 --page 2
    """
    try:
        service = state.service

        if reset:
            service.reset_filter()

        changes = {}
        if transaction_type is not None:
            changes["type"] = transaction_type
        if date_from is not None:
            changes["date_from"] = _as_date(date_from)
        if date_to is not None:
            changes["date_to"] = _as_date(date_to)
        if search is not None:
            changes["search_term"] = search
        if changes:
            service.set_filter(**changes)

        if page is not None:
            # The ledger accepts any page; keep the request in range here
            page_count = service.current_page_view().page_count
            service.set_page(min(page, page_count))

        view = service.current_page_view()

        console.print(f"\n[bold]Transactions[/bold] [dim]({view.total_matched} entries)[/dim]")

        if view.is_empty:
            console.print(Panel(
                "[yellow]No transactions found[/yellow]",
                border_style="yellow"
            ))
            return

        txn_table = Table(show_header=True, padding=(0, 1))
        txn_table.add_column("ID", style="dim")
        txn_table.add_column("Date", style="cyan", width=12)
        txn_table.add_column("Description", style="white", max_width=40)
        txn_table.add_column("Type", justify="center")
        txn_table.add_column("Amount", justify="right")
        txn_table.add_column(state.rates.target_currency if state.rates else "", justify="right", style="dim")

        rate = _rate()
        for txn in view.visible:
            desc = txn.description[:37] + "..." if len(txn.description) > 40 else txn.description

            if txn.type == TransactionType.WITHDRAWAL:
                amount_str = f"[red]{_money(txn.signed_amount)}[/red]"
            else:
                amount_str = f"[green]+{_money(txn.amount)}[/green]"

            txn_table.add_row(
                txn.id,
                txn.date.strftime(state.locale.current.date_format),
                desc,
                txn.type.label,
                amount_str,
                _converted(txn.signed_amount, rate),
            )

        console.print(txn_table)
        console.print(f"[dim]Page {view.page} of {view.page_count}[/dim]")

    except Exception as e:
        _fail(e)

@app.command(name="add")
def add_transaction(
    amount: str = typer.Argument(..., help="Amount, greater than zero"),
    description: str = typer.Argument(..., help="What the transaction was for"),
    transaction_type: TransactionType = typer.Option(
        TransactionType.DEPOSIT,
        "--type", "-t",
        help="deposit or withdrawal",
        case_sensitive=False,
    ),
    txn_date: Optional[datetime] = typer.Option(
        None,
        "--date", "-d",
        help="Transaction date (defaults to today)",
        formats=DATE_FORMATS,
    ),
):
    """
    Add a deposit or withdrawal.

    Examples:
        banking-ledger add 2500 "Salary"
        banking-ledger add 42.10 "Groceries" --type withdrawal --date 2025-12-20
    """
    try:
        txn = build_transaction(transaction_type, amount, description, _as_date(txn_date))
    except TransactionInputError as e:
        _fail(e)

    error = state.service.add_transaction(txn)
    if error:
        _fail(ValueError(error))

    _print_transaction(txn, "Added")
    console.print(f"Balance: [bold]{_money(state.service.balance)}[/bold]")

@app.command(name="edit")
def edit_transaction(
    transaction_id: str = typer.Argument(..., help="ID of the transaction to change"),
    amount: Optional[str] = typer.Option(None, "--amount", "-a", help="New amount"),
    description: Optional[str] = typer.Option(None, "--description", "-m", help="New description"),
    transaction_type: Optional[TransactionType] = typer.Option(
        None,
        "--type", "-t",
        help="New type",
        case_sensitive=False,
    ),
    txn_date: Optional[datetime] = typer.Option(
        None,
        "--date", "-d",
        help="New date",
        formats=DATE_FORMATS,
    ),
):
    """
    Change a transaction. Fields not given keep their current value.

    Examples:
        banking-ledger edit txn-3 --amount 50
        banking-ledger edit txn-3 --type deposit --description "Refund"
    """
    service = state.service
    existing = service.get_transaction(transaction_id)
    if existing is None:
        _fail(LookupError(TRANSACTION_NOT_FOUND))

    service.set_editing(existing)
    try:
        txn = build_transaction(
            transaction_type or existing.type,
            amount if amount is not None else existing.amount,
            description if description is not None else existing.description,
            _as_date(txn_date) or existing.date,
            transaction_id=existing.id,
        )
    except TransactionInputError as e:
        service.set_editing(None)
        _fail(e)

    error = service.update_transaction(txn)
    if error:
        service.set_editing(None)
        _fail(ValueError(error))

    _print_transaction(txn, "Updated")
    console.print(f"Balance: [bold]{_money(service.balance)}[/bold]")

@app.command(name="reuse")
def reuse(
    transaction_id: str = typer.Argument(..., help="ID of the transaction to copy"),
):
    """
    Add a copy of an existing transaction, dated today.
    """
    service = state.service
    template = service.get_transaction(transaction_id)
    if template is None:
        _fail(LookupError(TRANSACTION_NOT_FOUND))

    service.set_reusing(template)
    txn = reuse_transaction(template)
    error = service.add_transaction(txn)
    service.set_reusing(None)
    if error:
        _fail(ValueError(error))

    _print_transaction(txn, "Added")
    console.print(f"Balance: [bold]{_money(service.balance)}[/bold]")

@app.command(name="delete")
def delete_transaction(
    transaction_id: str = typer.Argument(..., help="ID of the transaction to delete"),
):
    """
    Delete a transaction. Unknown IDs are ignored.
    """
    service = state.service
    txn = service.get_transaction(transaction_id)
    service.delete_transaction(transaction_id)

    if txn is None:
        console.print(f"[yellow]No transaction with ID {transaction_id}[/yellow]")
        return

    console.print(f"[green]✓[/green] Deleted {txn.description} ({_money(txn.signed_amount)})")
    console.print(f"Balance: [bold]{_money(service.balance)}[/bold]")

@app.command(name="undo")
def undo():
    """
    Undo the last add, edit or delete of this session.
    """
    service = state.service
    if not service.can_undo:
        console.print("[yellow]Nothing to undo[/yellow]")
        return

    service.undo()
    console.print("[green]✓[/green] Last action undone")
    console.print(f"Balance: [bold]{_money(service.balance)}[/bold]")

@app.command(name="import")
def import_transactions(
    filepath: Path = typer.Argument(
        ...,
        help="CSV file with Date,Amount,Description,Type columns",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
):
    """
    Import transactions from a CSV file.

    Example:
        banking-ledger import transactions_2025-12-14.csv
    """
    try:
        result = state.service.import_csv(filepath.read_text(encoding="utf-8"), filepath)
    except (LedgerFileFormatError, UnicodeDecodeError):
        _fail(ValueError("Invalid CSV file format"))

    if not result.success:
        _fail(ValueError(str(result)))

    console.print(f"[bold green]✓ {result}[/bold green]")
    console.print(f"Balance: [bold]{_money(state.service.balance)}[/bold]")

@app.command(name="export")
def export_transactions(
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Where to write the CSV (defaults to transactions_<today>.csv)",
        dir_okay=False,
    ),
):
    """
    Export the whole ledger to CSV.
    """
    service = state.service
    if not service.transactions:
        _fail(ValueError("No transactions to export"))

    try:
        path = output or Path(f"transactions_{date.today().isoformat()}.csv")
        path.write_text(service.export_csv() + "\n", encoding="utf-8")
    except Exception as e:
        _fail(e)

    console.print(f"[bold green]✓ Exported successfully[/bold green] to {path}")

@app.command(name="theme")
def theme(
    toggle: bool = typer.Option(False, "--toggle", help="Switch between light and dark"),
):
    """
    Show or switch the light/dark theme.
    """
    if toggle:
        state.theme.toggle()
    console.print(f"Theme: [bold]{state.theme.theme.value}[/bold]")

@app.command(name="locale")
def locale(
    key: Optional[str] = typer.Argument(None, help="Locale such as de-DE, en-US, en-GB, fr-FR"),
):
    """
    Show or change how amounts and dates are formatted.
    """
    if key:
        state.locale.set_locale(key)
    console.print(f"Locale: [bold]{state.locale.current.locale}[/bold]")

@app.command(name="rate")
def rate():
    """
    Show the exchange rate used for the converted amounts.
    """
    value = state.rates.get_rate()
    if value is None:
        console.print("[yellow]Exchange rate unavailable[/yellow]")
        return
    console.print(f"1 {state.service.currency} = {value} {state.rates.target_currency}")

@app.command(name="shell")
def shell():
    """
    Interactive session. Undo only works within one session.

    Type any command without the program name, 'help' for the list, 'exit' to quit.
    """
    if state.in_shell:
        console.print("[yellow]Already in a shell[/yellow]")
        return

    state.in_shell = True
    console.print(Panel.fit(
        "[bold cyan]Banking Ledger shell[/bold cyan]\n"
        "Commands: balance, list, add, edit, reuse, delete, undo, import, export, theme, locale, rate\n"
        "Type 'help' for details, 'exit' to quit",
        border_style="cyan"
    ))

    try:
        while True:
            try:
                line = console.input("[bold cyan]ledger>[/bold cyan] ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print("")
                break

            if not line:
                continue
            if line in ("exit", "quit"):
                break

            try:
                args = shlex.split(line)
            except ValueError as e:
                console.print(f"[bold red]Error:[/bold red] {e}")
                continue

            if args[0] == "help":
                args = ["--help"]

            try:
                app(args, prog_name="banking-ledger", standalone_mode=False)
            except click.exceptions.Exit:
                pass
            except click.ClickException as e:
                e.show()
            except click.exceptions.Abort:
                break
            except Exception as e:
                console.print(f"[bold red]Error:[/bold red] {e}")
                if state.verbose:
                    console.print_exception()
    finally:
        state.in_shell = False


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
