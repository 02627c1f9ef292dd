"""Tests for the command line interface."""

import json
from decimal import Decimal

from posledger.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "journal" in result.output
    assert "report" in result.output


def test_accounts_init_and_list(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "accounts", "init")
    assert result.exit_code == 0
    assert "Created 53 accounts." in result.output

    result = _invoke(cli_runner, temp_db, "accounts", "init")
    assert "already initialized" in result.output

    result = _invoke(cli_runner, temp_db, "accounts", "list")
    assert result.exit_code == 0
    assert "1111" in result.output
    assert "Laptop Sales" in result.output


def test_accounts_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "accounts", "list")
    assert "No accounts found" in result.output


def test_accounts_create_and_deactivate(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner, temp_db, "accounts", "create", "1113", "Petty Cash", "--type", "asset", "--parent", "1110"
    )
    assert result.exit_code == 0
    assert "Created account 1113 'Petty Cash'" in result.output

    result = _invoke(cli_runner, temp_db, "accounts", "create", "1113", "Again", "--type", "asset")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = _invoke(cli_runner, temp_db, "accounts", "deactivate", "1113")
    assert result.exit_code == 0
    assert temp_db.get_account_by_code("1113").is_active is False


def test_journal_post_and_show(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Owner capital",
        "--line",
        "1111:5000000:0",
        "--line",
        "3100:0:5000000",
        "--date",
        "2024-01-02",
    )
    assert result.exit_code == 0
    assert "Posted JE-" in result.output
    assert "5,000,000.00" in result.output

    entry = temp_db.list_journal_entries()[0]
    result = _invoke(cli_runner, temp_db, "journal", "show", str(entry.id))
    assert result.exit_code == 0
    assert "Owner capital" in result.output
    assert "3100" in result.output

    result = _invoke(cli_runner, temp_db, "journal", "list")
    assert entry.journal_number in result.output


def test_journal_post_unbalanced(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Broken",
        "--line",
        "1111:100:0",
        "--line",
        "4110:0:80",
    )
    assert result.exit_code == 1
    assert "Debits" in result.output
    assert temp_db.list_journal_entries() == []


def test_journal_post_bad_line(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "journal", "post", "--description", "Bad", "--line", "1111-100")
    assert result.exit_code == 1
    assert "CODE:DEBIT:CREDIT" in result.output


def test_journal_show_missing(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "journal", "show", "99")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_transaction_add_and_balance_sheet(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--type",
        "income",
        "--category",
        "Sales Revenue",
        "--amount",
        "250000",
        "--description",
        "Laptop sale",
        "--payment-method",
        "cash",
    )
    assert result.exit_code == 0
    assert "Recorded income 250,000.00" in result.output
    assert "Journal entry ID" in result.output

    result = _invoke(cli_runner, temp_db, "report", "balance-sheet", "--json")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["balance_check"] is True
    assert Decimal(data["total_assets"]) == Decimal("250000")

    result = _invoke(cli_runner, temp_db, "transaction", "list", "--this-year")
    assert "Laptop sale" in result.output


def test_transaction_add_with_strict_mapping(cli_runner, temp_db, seeded_chart, tmp_path):
    mapping = tmp_path / "mapping.yaml"
    mapping.write_text("default_expense: null\n")

    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "--account-mapping",
            str(mapping),
            "transaction",
            "add",
            "--type",
            "expense",
            "--category",
            "Electricity",
            "--amount",
            "400000",
            "--description",
            "PLN",
        ],
    )
    assert result.exit_code == 0
    assert "no journal entry was posted" in result.output
    assert temp_db.list_journal_entries() == []


def test_transaction_add_invalid_amount(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--type",
        "income",
        "--category",
        "Sales Revenue",
        "--amount",
        "-5",
        "--description",
        "Bad",
    )
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_transaction_add_oversized_amount(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--type",
        "income",
        "--category",
        "Sales Revenue",
        "--amount",
        "1e30",
        "--description",
        "Too large",
    )
    assert result.exit_code == 1
    assert "exceeds the maximum" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_transaction_categories_and_clear_service(cli_runner, temp_db, seeded_chart):
    _invoke(cli_runner, temp_db, "service", "complete", "SVC-9", "--amount", "100000")

    result = _invoke(cli_runner, temp_db, "transaction", "categories")
    assert "Service Revenue" in result.output

    result = _invoke(cli_runner, temp_db, "transaction", "clear-service", "SVC-9", "--yes")
    assert result.exit_code == 0
    assert "Deleted 1 records" in result.output


def test_service_complete_is_idempotent(cli_runner, temp_db, seeded_chart):
    args = [
        "service",
        "complete",
        "SVC-1",
        "--amount",
        "150000",
        "--labor",
        "50000",
        "--description",
        "Screen repair",
        "--part",
        "HDD 1TB:2:150000:250000",
    ]

    result = _invoke(cli_runner, temp_db, *args)
    assert result.exit_code == 0
    assert "Service income: 150,000.00" in result.output
    assert "Parts cost HDD 1TB: 300,000.00" in result.output
    assert "Parts sale HDD 1TB: 500,000.00" in result.output

    result = _invoke(cli_runner, temp_db, *args)
    assert result.exit_code == 0
    assert "Service income: already recorded" in result.output
    assert "Parts sale HDD 1TB: already recorded" in result.output
    assert len(temp_db.find_financial_records("service", "SVC-1")) == 1


def test_service_complete_bad_part(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "service", "complete", "SVC-1", "--part", "HDD:two:1:2")
    assert result.exit_code == 1
    assert "Invalid part" in result.output


def test_service_cancel(cli_runner, temp_db, seeded_chart):
    result = _invoke(cli_runner, temp_db, "service", "cancel", "SVC-1", "--fee", "50000", "--reason", "No parts")
    assert result.exit_code == 0
    assert "Cancellation fee: 50,000.00" in result.output

    result = _invoke(
        cli_runner,
        temp_db,
        "service",
        "cancel",
        "SVC-2",
        "--fee",
        "50000",
        "--reason",
        "Defective",
        "--after-completion",
        "--labor",
        "100000",
        "--part",
        "RAM 8GB:1:400000:600000",
    )
    assert result.exit_code == 0
    assert "Created 3 records" in result.output
    assert "Journal entry JE-" in result.output

    result = _invoke(cli_runner, temp_db, "service", "cancel", "SVC-2", "--reason", "Defective", "--after-completion")
    assert "Cancellation already recorded" in result.output


def test_service_cancel_warranty(cli_runner, temp_db, seeded_chart):
    _invoke(cli_runner, temp_db, "service", "complete", "SVC-3", "--labor", "100000", "--part", "LCD:1:400000:600000")
    args = [
        "service",
        "cancel",
        "SVC-3",
        "--reason",
        "Flicker",
        "--warranty",
        "--labor",
        "100000",
        "--parts-cost",
        "600000",
        "--part",
        "LCD:1:400000:600000",
    ]

    result = _invoke(cli_runner, temp_db, *args)
    assert result.exit_code == 0
    assert "Created 2 records" in result.output
    assert "Journal entry JE-" in result.output
    assert temp_db.find_financial_records("service_labor", "SVC-3")[0].status == "reversed"

    result = _invoke(cli_runner, temp_db, *args)
    assert "Cancellation already recorded" in result.output


def test_service_cancel_warranty_excludes_after_completion(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner, temp_db, "service", "cancel", "SVC-1", "--reason", "x", "--warranty", "--after-completion"
    )
    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_service_cancel_part_requires_after_completion(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner, temp_db, "service", "cancel", "SVC-1", "--reason", "x", "--part", "RAM:1:1:2"
    )
    assert result.exit_code == 1
    assert "--after-completion" in result.output


def test_payroll_flow(cli_runner, temp_db, seeded_chart):
    result = _invoke(
        cli_runner, temp_db, "payroll", "add-employee", "Budi", "--position", "Technician", "--salary", "5000000"
    )
    assert result.exit_code == 0
    assert "Created employee EMP-" in result.output

    employee_id = temp_db.list_employees()[0].id
    result = _invoke(
        cli_runner,
        temp_db,
        "payroll",
        "create",
        str(employee_id),
        "--start",
        "2024-01-01",
        "--end",
        "2024-01-31",
        "--base-salary",
        "5000000",
        "--tax",
        "250000",
    )
    assert result.exit_code == 0
    assert "Created payroll PAY-" in result.output
    assert "net 4,750,000.00" in result.output

    payroll_id = temp_db.list_payroll_records()[0].id
    result = _invoke(cli_runner, temp_db, "payroll", "pay", str(payroll_id))
    assert result.exit_code == 0
    assert "paid" in result.output
    assert len(temp_db.find_financial_records("payroll", str(payroll_id))) == 1

    result = _invoke(cli_runner, temp_db, "payroll", "list")
    assert "PAY-" in result.output


def test_payroll_invalid_status(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "payroll", "status", "1", "cancelled")
    assert result.exit_code == 2


def test_report_commands(cli_runner, temp_db, seeded_chart):
    _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Sale",
        "--line",
        "1111:1000:0",
        "--line",
        "4110:0:1000",
    )

    result = _invoke(cli_runner, temp_db, "report", "balance-sheet")
    assert result.exit_code == 0
    assert "Current Period Earnings" in result.output

    result = _invoke(cli_runner, temp_db, "report", "income-statement", "--this-year")
    assert result.exit_code == 0
    assert "Laptop Sales" in result.output

    result = _invoke(cli_runner, temp_db, "report", "income-statement", "--json")
    assert Decimal(json.loads(result.output)["net_income"]) == Decimal("1000")

    result = _invoke(cli_runner, temp_db, "report", "trial-balance")
    assert result.exit_code == 0
    assert "Balanced" in result.output

    result = _invoke(cli_runner, temp_db, "report", "reconcile")
    assert result.exit_code == 0
    assert "All account balances match the journal." in result.output

    result = _invoke(cli_runner, temp_db, "report", "summary", "--json")
    assert result.exit_code == 0
    assert json.loads(result.output)["transaction_count"] == 0


def test_report_rejects_multiple_periods(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "report", "summary", "--this-month", "--last-month")
    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_inventory_add_list_and_summary(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "inventory", "add", "SSD 512GB", "--sku", "SSD-512", "--stock", "10", "--cost", "550000"
    )
    assert result.exit_code == 0
    assert "Created product SSD-512 'SSD 512GB'" in result.output

    result = _invoke(cli_runner, temp_db, "inventory", "add", "Other SSD", "--sku", "SSD-512")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = _invoke(cli_runner, temp_db, "inventory", "list")
    assert result.exit_code == 0
    assert "SSD-512" in result.output
    assert "5,500,000.00" in result.output

    result = _invoke(cli_runner, temp_db, "report", "summary", "--json")
    data = json.loads(result.output)
    assert Decimal(data["inventory_value"]) == Decimal("5500000")
    assert data["inventory_count"] == 10


def test_inventory_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "inventory", "list")
    assert "No products found." in result.output
