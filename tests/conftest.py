"""Shared pytest fixtures for posledger tests."""

import logging
import os
import tempfile

import pytest

from posledger.database.factories import create_sqlite_database
from posledger.domain.chart import AccountRegistry
from posledger.domain.inventory import ProductService
from posledger.domain.journal import JournalService
from posledger.domain.payroll import PayrollService
from posledger.domain.recorders import ServiceRecorder
from posledger.domain.reports import ReportService
from posledger.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop handlers installed by CLI invocations so they do not outlive the runner's streams."""
    yield
    root = logging.getLogger("posledger")
    for handler in list(root.handlers):
        if getattr(handler, "_posledger_handler", False):
            root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


@pytest.fixture
def registry(temp_db):
    """Create an AccountRegistry with a temporary database."""
    return AccountRegistry(temp_db)


@pytest.fixture
def seeded_chart(registry):
    """Seed the default chart of accounts."""
    registry.initialize_default_accounts()
    return registry


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def recorder(temp_db, transaction_service):
    """Create a ServiceRecorder sharing the transaction service."""
    return ServiceRecorder(temp_db, transaction_service)


@pytest.fixture
def payroll_service(temp_db, transaction_service):
    """Create a PayrollService sharing the transaction service."""
    return PayrollService(temp_db, transaction_service)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def product_service(temp_db):
    """Create a ProductService with a temporary database."""
    return ProductService(temp_db)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
