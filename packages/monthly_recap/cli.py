"""CLI for the ``monthly_recap`` package.

Command handlers (``cmd_*``) hold the logic and return an exit code; the Typer
commands below only parse options and delegate. Settings come from the
environment after a local ``.env`` is loaded (see :mod:`monthly_recap.config`);
``--database-url`` and ``--fuzzy-threshold`` on the root command override them.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer.models import OptionInfo

from . import api
from .config import Settings, build_store, load_settings
from .errors import RecapError
from .ingest import (
    format_rupiah,
    product_template,
    read_upload,
    transaction_template,
)
from .ingest.templates import PRODUCT_TEMPLATE_FILENAME, TRANSACTION_TEMPLATE_FILENAME
from .logging_setup import configure_logging
from .models import ImportReport, ParsedProductCandidate, ParsedTransactionCandidate
from .store.base import RecordStore

console = Console()
err_console = Console(stderr=True)


def _error(message: str) -> int:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return 1


# ---- Rendering ---------------------------------------------------------------


def _corrected(value: str, original: str, changed: bool) -> str:
    if not changed:
        return escape(value)
    return f"[green]{escape(value)}[/green] [dim](was {escape(original)})[/dim]"


def _transaction_preview(candidates: list[ParsedTransactionCandidate]) -> Table:
    table = Table(title="Transaction upload preview")
    for col in ("Row", "Date", "Item", "Customer", "Store", "Payment", "Purchase", "Status"):
        table.add_column(col)
    for c in candidates:
        corrected = set(c.corrected_fields)
        status = (
            "[green]ok[/green]"
            if c.is_valid
            else "[red]" + escape("; ".join(c.errors)) + "[/red]"
        )
        table.add_row(
            str(c.row_index + 1),
            c.date.isoformat() if c.date else "-",
            _corrected(c.item_purchased, c.item_purchased_original, "item_purchased" in corrected),
            _corrected(c.customer_name, c.customer_name_original, "customer_name" in corrected),
            _corrected(c.store_name, c.store_name_original, "store_name" in corrected),
            escape(c.payment_method),
            format_rupiah(c.purchase_price),
            status,
        )
    return table


def _product_preview(candidates: list[ParsedProductCandidate]) -> Table:
    table = Table(title="Product upload preview")
    for col in ("Row", "Name", "Type", "Price", "Status"):
        table.add_column(col)
    for c in candidates:
        status = (
            "[green]ok[/green]"
            if c.is_valid
            else "[red]" + escape("; ".join(c.errors)) + "[/red]"
        )
        table.add_row(
            str(c.row_index + 1), escape(c.name), escape(c.type), format_rupiah(c.price), status
        )
    return table


def _print_report(report: ImportReport, noun: str) -> int:
    if report.duplicates:
        console.print(
            f"Skipped {report.skipped} duplicate {noun}(s): "
            + escape(", ".join(report.duplicates))
        )
    if not report.ok:
        return _error(report.error or "import failed")
    console.print(f"Imported {report.created} {noun}(s).")
    return 0


def _confirm(valid: int, total: int, noun: str, *, assume_yes: bool) -> bool:
    console.print(f"{valid} of {total} row(s) valid.")
    if valid == 0:
        console.print(f"No valid {noun}s to import.")
        return False
    if assume_yes:
        return True
    return typer.confirm(f"Import {valid} {noun}(s)?", default=False)


# ---- Command handlers --------------------------------------------------------


def cmd_import_transactions(
    csv_path: str | Path, *, store: RecordStore, settings: Settings, assume_yes: bool = False
) -> int:
    """Preview a transaction upload, then write its valid rows after confirmation."""

    try:
        text = read_upload(csv_path)
        candidates = api.preview_transactions_upload(
            store, text, threshold=settings.fuzzy_threshold
        )
    except FileNotFoundError:
        return _error(f"file not found: {csv_path}")
    except RecapError as e:
        return _error(str(e))

    console.print(_transaction_preview(candidates))
    valid = sum(1 for c in candidates if c.is_valid)
    if not _confirm(valid, len(candidates), "transaction", assume_yes=assume_yes):
        return 0
    return _print_report(api.confirm_transactions_upload(store, candidates), "transaction")


def cmd_import_products(
    csv_path: str | Path, *, store: RecordStore, assume_yes: bool = False
) -> int:
    """Preview a product upload, then write its valid, non-duplicate rows."""

    try:
        candidates = api.preview_products_upload(read_upload(csv_path))
    except FileNotFoundError:
        return _error(f"file not found: {csv_path}")
    except RecapError as e:
        return _error(str(e))

    console.print(_product_preview(candidates))
    valid = sum(1 for c in candidates if c.is_valid)
    if not _confirm(valid, len(candidates), "product", assume_yes=assume_yes):
        return 0
    return _print_report(api.confirm_products_upload(store, candidates), "product")


def cmd_template(kind: str, *, output: Path | None = None) -> int:
    templates = {
        "transactions": (transaction_template, TRANSACTION_TEMPLATE_FILENAME),
        "products": (product_template, PRODUCT_TEMPLATE_FILENAME),
    }
    if kind not in templates:
        return _error(f"unknown template {kind!r}; expected 'transactions' or 'products'")
    render, default_name = templates[kind]
    if output is None:
        typer.echo(render())
        return 0
    target = output / default_name if output.is_dir() else output
    target.write_text(render(), encoding="utf-8")
    console.print(f"Wrote {escape(str(target))}")
    return 0


def cmd_list_transactions(store: RecordStore, *, month: int, year: int) -> int:
    try:
        rows = api.list_transactions(store, month, year)
    except RecapError as e:
        return _error(str(e))
    table = Table(title=f"Transactions {year}-{month:02d}")
    for col in ("ID", "Date", "Item", "Customer", "Store", "Payment", "Sale", "Revenue"):
        table.add_column(col)
    for t in rows:
        table.add_row(
            str(t.id),
            t.date.isoformat(),
            escape(t.item_purchased),
            escape(t.customer_name),
            escape(t.store_name),
            escape(t.payment_method),
            format_rupiah(t.selling_price),
            format_rupiah(t.revenue),
        )
    console.print(table)
    console.print(f"{len(rows)} transaction(s)")
    return 0


def cmd_list_products(
    store: RecordStore, *, search: str = "", product_type: str | None = None
) -> int:
    try:
        rows = api.search_products(api.list_products(store), search, product_type)
    except RecapError as e:
        return _error(str(e))
    table = Table(title="Products")
    for col in ("ID", "Name", "Type", "Price"):
        table.add_column(col)
    for p in rows:
        table.add_row(str(p.id), escape(p.name), escape(p.type), format_rupiah(p.price))
    console.print(table)
    console.print(f"{len(rows)} product(s)")
    return 0


def cmd_stats(store: RecordStore, *, month: int, year: int) -> int:
    try:
        stats = api.month_stats(store, month, year)
    except RecapError as e:
        return _error(str(e))
    console.print(f"Period: {year}-{month:02d}")
    console.print(f"Transactions: {stats.total_transactions}")
    console.print(f"Total sales: {format_rupiah(stats.total_sales)}")
    console.print(f"Total revenue: {format_rupiah(stats.total_revenue)}")
    console.print(f"Average revenue: {format_rupiah(round(stats.average_revenue))}")
    console.print(f"Top product: {escape(stats.top_product) or '-'}")
    return 0


def cmd_check(store: RecordStore) -> int:
    if api.check_store(store):
        console.print("Record store reachable.")
        return 0
    return _error("record store unreachable")


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    name="recap",
    no_args_is_help=True,
    add_completion=False,
    help="Record sales and products, and bulk-import them from CSV uploads.",
)

CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,
    "--csv-path",
    help="Path to the .csv upload",
    dir_okay=False,
    file_okay=True,
    exists=False,  # reported by the handler
)


def _settings(ctx: typer.Context) -> Settings:
    obj = ctx.find_root().obj
    return obj if isinstance(obj, Settings) else load_settings()


def _store(ctx: typer.Context) -> RecordStore:
    try:
        return build_store(_settings(ctx))
    except RecapError as e:
        raise typer.Exit(_error(str(e))) from e


def _exit(code: int) -> None:
    if code:
        raise typer.Exit(code)


def _this_month() -> tuple[int, int]:
    today = dt.date.today()
    return today.month, today.year


@app.command("import-transactions")
def import_transactions_cmd(
    ctx: typer.Context,
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    yes: bool = typer.Option(False, "--yes", "-y", help="Import without asking."),
) -> None:
    """Preview and import a transaction CSV (names are fuzzy-corrected)."""

    _exit(
        cmd_import_transactions(
            csv_path, store=_store(ctx), settings=_settings(ctx), assume_yes=yes
        )
    )


@app.command("import-products")
def import_products_cmd(
    ctx: typer.Context,
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    yes: bool = typer.Option(False, "--yes", "-y", help="Import without asking."),
) -> None:
    """Preview and import a product CSV (duplicate names are skipped)."""

    _exit(cmd_import_products(csv_path, store=_store(ctx), assume_yes=yes))


@app.command("template")
def template_cmd(
    kind: str = typer.Argument(..., help="transactions or products"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="File or directory to write instead of stdout."
    ),
) -> None:
    """Print (or write) an example upload file."""

    _exit(cmd_template(kind, output=output))


@app.command("list-transactions")
def list_transactions_cmd(
    ctx: typer.Context,
    month: int | None = typer.Option(None, min=1, max=12, help="Defaults to this month."),
    year: int | None = typer.Option(None, help="Defaults to this year."),
) -> None:
    """List one month's transactions, newest first."""

    this_month, this_year = _this_month()
    _exit(cmd_list_transactions(_store(ctx), month=month or this_month, year=year or this_year))


@app.command("list-products")
def list_products_cmd(
    ctx: typer.Context,
    search: str = typer.Option("", help="Case-insensitive name/type filter."),
    product_type: str | None = typer.Option(None, "--type", help="Exact product type."),
) -> None:
    """List the product catalog by name."""

    _exit(cmd_list_products(_store(ctx), search=search, product_type=product_type))


@app.command("stats")
def stats_cmd(
    ctx: typer.Context,
    month: int | None = typer.Option(None, min=1, max=12, help="Defaults to this month."),
    year: int | None = typer.Option(None, help="Defaults to this year."),
) -> None:
    """Show a month's totals."""

    this_month, this_year = _this_month()
    _exit(cmd_stats(_store(ctx), month=month or this_month, year=year or this_year))


@app.command("check")
def check_cmd(ctx: typer.Context) -> None:
    """Check that the record store answers."""

    _exit(cmd_check(_store(ctx)))


@app.callback()
def _root(
    ctx: typer.Context,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    fuzzy_threshold: float | None = typer.Option(
        None, min=0.0, max=1.0, help="Override RECAP_FUZZY_THRESHOLD (0 = exact only)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables), configures logging and stores the resolved
    :class:`~monthly_recap.config.Settings` on the context.
    """

    try:
        settings = load_settings().with_overrides(
            database_url=database_url, fuzzy_threshold=fuzzy_threshold
        )
    except ValueError as e:
        raise typer.Exit(_error(str(e))) from e
    configure_logging(settings.log_level)
    ctx.obj = settings


if __name__ == "__main__":  # pragma: no cover
    app()
