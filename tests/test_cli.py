from __future__ import annotations

from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from monthly_recap import cli

runner = CliRunner()

UPLOAD = "\n".join(
    [
        "Date,Item Purchase,Customer Name,Store Name,Payment Method,Purchase,Notes",
        '2024-12-20,Wireles Headphnes,Jon Smith,Tech Store,Cash,"Rp 1.125.000",gift',
        "not-a-date,,,,,,",
    ]
)
PRODUCTS = "Name,Type,Price\nDesk Lamp,Home,Rp 250.000\nStapler,Stationery,Rp 35.000\n"


@pytest.fixture(autouse=True)
def _plain_consoles(monkeypatch: pytest.MonkeyPatch) -> None:
    # No colors or highlighting so assertions see plain text.
    monkeypatch.setattr(cli, "console", Console(color_system=None, highlight=False, width=1000))
    monkeypatch.setattr(
        cli,
        "err_console",
        Console(stderr=True, color_system=None, highlight=False, width=1000),
    )


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# ---- Templates ---------------------------------------------------------------


def test_template_to_stdout() -> None:
    result = runner.invoke(cli.app, ["template", "transactions"])
    assert result.exit_code == 0
    assert result.output.startswith("Date,Item Purchase,Customer Name")


def test_template_to_directory(tmp_path: Path) -> None:
    result = runner.invoke(cli.app, ["template", "products", "--output", str(tmp_path)])
    assert result.exit_code == 0
    written = (tmp_path / "product_template.csv").read_text(encoding="utf-8")
    assert written.startswith("Name,Type,Price")


def test_unknown_template() -> None:
    result = runner.invoke(cli.app, ["template", "invoices"])
    assert result.exit_code == 1
    assert "Error: unknown template" in result.output


# ---- Imports -----------------------------------------------------------------


def test_import_transactions_into_demo_store(tmp_path: Path) -> None:
    path = _write(tmp_path, "upload.csv", UPLOAD)
    result = runner.invoke(cli.app, ["import-transactions", "--csv-path", str(path), "--yes"])

    assert result.exit_code == 0, result.output
    assert "(was Jon Smith)" in result.output
    assert "Row 2: Invalid date format" in result.output
    assert "1 of 2 row(s) valid." in result.output
    assert "Imported 1 transaction(s)." in result.output


def test_import_can_be_declined(tmp_path: Path) -> None:
    path = _write(tmp_path, "upload.csv", UPLOAD)
    result = runner.invoke(cli.app, ["import-transactions", "--csv-path", str(path)], input="n\n")
    assert result.exit_code == 0
    assert "Imported" not in result.output


def test_threshold_option_disables_correction(tmp_path: Path) -> None:
    path = _write(tmp_path, "upload.csv", UPLOAD)
    result = runner.invoke(
        cli.app,
        ["--fuzzy-threshold", "0", "import-transactions", "--csv-path", str(path), "--yes"],
    )
    assert result.exit_code == 0, result.output
    assert "(was" not in result.output


def test_import_products_into_sqlite_skips_duplicates(tmp_path: Path) -> None:
    path = _write(tmp_path, "products.csv", PRODUCTS)
    db = ["--database-url", f"sqlite:///{tmp_path / 'recap.db'}"]

    first = runner.invoke(cli.app, [*db, "import-products", "--csv-path", str(path), "--yes"])
    assert first.exit_code == 0, first.output
    assert "Imported 2 product(s)." in first.output

    second = runner.invoke(cli.app, [*db, "import-products", "--csv-path", str(path), "-y"])
    assert second.exit_code == 0, second.output
    assert "Skipped 2 duplicate product(s): Desk Lamp, Stapler" in second.output
    assert "Imported 0 product(s)." in second.output

    listed = runner.invoke(cli.app, [*db, "list-products", "--type", "Home"])
    assert listed.exit_code == 0
    assert "Desk Lamp" in listed.output
    assert "1 product(s)" in listed.output


def test_import_rejects_non_csv(tmp_path: Path) -> None:
    path = _write(tmp_path, "upload.txt", UPLOAD)
    result = runner.invoke(cli.app, ["import-transactions", "--csv-path", str(path), "--yes"])
    assert result.exit_code == 1
    assert "Please upload a CSV file (.csv)" in result.output


def test_import_reports_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app, ["import-products", "--csv-path", str(tmp_path / "nope.csv"), "--yes"]
    )
    assert result.exit_code == 1
    assert "file not found" in result.output


def test_header_only_upload_is_an_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "products.csv", "Name,Type,Price\n")
    result = runner.invoke(cli.app, ["import-products", "--csv-path", str(path), "--yes"])
    assert result.exit_code == 1
    assert "at least a header row and one data row" in result.output


# ---- Listing and stats -------------------------------------------------------


def test_list_transactions_and_stats_on_demo_data() -> None:
    listed = runner.invoke(cli.app, ["list-transactions", "--month", "12", "--year", "2024"])
    assert listed.exit_code == 0
    assert "2 transaction(s)" in listed.output

    stats = runner.invoke(cli.app, ["stats", "--month", "12", "--year", "2024"])
    assert stats.exit_code == 0
    assert "Transactions: 2" in stats.output
    assert "Total revenue: Rp 442.200" in stats.output
    assert "Top product: Coffee Mug" in stats.output


def test_check() -> None:
    result = runner.invoke(cli.app, ["check"])
    assert result.exit_code == 0
    assert "Record store reachable." in result.output
