"""Shared pytest fixtures for betconta tests."""

import tempfile
import os
from datetime import datetime, UTC
import pytest

from betconta.database.factories import create_sqlite_database
from betconta.domain.account import AccountService
from betconta.domain.commission import CommissionLedger
from betconta.domain.expiry import ExpiryScanner
from betconta.domain.kyc import KycService
from betconta.domain.pix import PixKeyRegistry


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


@pytest.fixture
def now():
    """Fixed reference time for time-dependent tests."""
    return datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def pix_registry(temp_db):
    """Create a PixKeyRegistry with a temporary database."""
    return PixKeyRegistry(temp_db)


@pytest.fixture
def expiry_scanner(temp_db):
    """Create an ExpiryScanner with a temporary database."""
    return ExpiryScanner(temp_db)


@pytest.fixture
def kyc_service(temp_db):
    """Create a KycService with a temporary database."""
    return KycService(temp_db)


@pytest.fixture
def commission_ledger(temp_db):
    """Create a CommissionLedger with a temporary database."""
    return CommissionLedger(temp_db)


@pytest.fixture
def sample_master(account_service):
    """Create a sample master user for testing."""
    user_id = account_service.create_master_user(
        name="Maria Souza", email="maria@example.com", cpf="123.456.789-09"
    )
    return account_service.get_master_user(user_id)


@pytest.fixture
def sample_child(account_service, sample_master):
    """Create a sample child account for testing."""
    child_id = account_service.create_child_account(
        master_user_id=sample_master.id,
        name="Joao Lima",
        cpf="987.654.321-00",
        rg_number="1234567",
        email="joao@example.com",
    )
    return account_service.get_child_account(child_id)


@pytest.fixture
def other_child(account_service, sample_master):
    """Create a second child account under the sample master."""
    child_id = account_service.create_child_account(
        master_user_id=sample_master.id,
        name="Ana Costa",
        cpf="111.222.333-44",
        rg_number="7654321",
        email="ana@example.com",
    )
    return account_service.get_child_account(child_id)


@pytest.fixture
def sample_documents():
    """KYC document references."""
    from betconta.domain.entities import KycDocuments

    return KycDocuments(front="uploads/front.jpg", back="uploads/back.jpg", selfie="uploads/selfie.jpg")


@pytest.fixture
def approved_affiliate(commission_ledger, sample_master):
    """Create an approved, active affiliate for the sample master."""
    return commission_ledger.set_affiliate_approval(sample_master.id, "approved")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
