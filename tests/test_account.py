"""Tests for master user and child account management."""

import pytest

from betconta.cli.main import cli
from betconta.domain.entities import ChildAccountStatus
from betconta.domain.errors import ConflictError, NotFoundError, ValidationError
from betconta.utils.account_resolver import resolve_child_account


class TestMasterUsers:
    """Tests for master users."""

    def test_create_master_user(self, account_service):
        user_id = account_service.create_master_user("Maria Souza", "Maria@Example.com", "123.456.789-09")

        user = account_service.get_master_user(user_id)
        assert user.email == "maria@example.com"
        assert user.cpf == "12345678909"
        assert user.is_active is True
        assert user.affiliate_status is None

    def test_duplicate_email(self, account_service, sample_master):
        with pytest.raises(ConflictError, match="email 'maria@example.com' already exists"):
            account_service.create_master_user("Other", "maria@example.com", "000.000.000-01")

    def test_invalid_cpf(self, account_service):
        with pytest.raises(ValidationError, match="must contain 11 digits"):
            account_service.create_master_user("Maria", "m@example.com", "123")

    def test_toggle(self, account_service, sample_master):
        account_service.set_master_active(sample_master.id, False)
        assert account_service.get_master_user(sample_master.id).is_active is False

    def test_toggle_missing(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.set_master_active(999, False)


class TestChildAccounts:
    """Tests for child accounts."""

    def test_new_child_defaults(self, sample_child):
        assert sample_child.status is ChildAccountStatus.PENDING
        assert sample_child.cpf == "98765432100"
        assert sample_child.cpf_mask == "***.***.321-**"
        assert sample_child.balance == 0

    def test_missing_master(self, account_service):
        with pytest.raises(NotFoundError, match="Master user 999 not found"):
            account_service.create_child_account(999, "X", "987.654.321-00", "1", "x@example.com")

    @pytest.mark.parametrize(
        "name, cpf, rg, field",
        [
            ("Joao Lima", "222.333.444-55", "999", "name"),
            ("Someone Else", "987.654.321-00", "999", "CPF"),
            ("Someone Else", "222.333.444-55", "1234567", "RG"),
        ],
    )
    def test_identity_fields_are_unique(self, account_service, sample_master, sample_child, name, cpf, rg, field):
        with pytest.raises(ConflictError, match=f"Child account with {field}"):
            account_service.create_child_account(sample_master.id, name, cpf, rg, "new@example.com")

    def test_cpf_of_master_user_is_rejected(self, account_service, sample_master):
        with pytest.raises(ConflictError):
            account_service.create_child_account(sample_master.id, "Kid", sample_master.cpf, "55", "kid@example.com")

    def test_in_use_checks(self, account_service, sample_master, sample_child):
        assert account_service.cpf_in_use("987.654.321-00") is True
        assert account_service.cpf_in_use(sample_master.cpf) is True
        assert account_service.cpf_in_use("222.333.444-55") is False
        assert account_service.cpf_in_use("bad") is False
        assert account_service.rg_in_use(" 1234567 ") is True
        assert account_service.rg_in_use("0") is False

    def test_set_status(self, account_service, sample_child):
        account_service.set_child_status(sample_child.id, "active")
        assert account_service.get_child_account(sample_child.id).status is ChildAccountStatus.ACTIVE

    def test_set_invalid_status(self, account_service, sample_child):
        with pytest.raises(ValidationError, match="Invalid status 'frozen'"):
            account_service.set_child_status(sample_child.id, "frozen")

    def test_list_by_master(self, account_service, sample_master, sample_child, other_child):
        other_id = account_service.create_master_user("Carla Dias", "carla@example.com", "555.666.777-88")
        assert [c.id for c in account_service.list_child_accounts(sample_master.id)] == [sample_child.id, other_child.id]
        assert account_service.list_child_accounts(other_id) == []
        assert len(account_service.list_child_accounts()) == 2


class TestResolveChildAccount:
    """Tests for resolving child references."""

    def test_by_id(self, account_service, sample_child):
        assert resolve_child_account(account_service, sample_child.id) == sample_child.id
        assert resolve_child_account(account_service, str(sample_child.id)) == sample_child.id

    def test_by_cpf(self, account_service, sample_child):
        assert resolve_child_account(account_service, "987.654.321-00") == sample_child.id
        assert resolve_child_account(account_service, "98765432100") == sample_child.id

    def test_not_found(self, account_service, sample_child):
        with pytest.raises(ValueError, match="not found"):
            resolve_child_account(account_service, 999)
        with pytest.raises(ValueError, match="CPF"):
            resolve_child_account(account_service, "222.333.444-55")


def test_master_create_cli(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "master", "create", "Maria Souza", "--email", "maria@example.com", "--cpf", "12345678909"],
    )

    assert result.exit_code == 0
    assert "Created master user 'Maria Souza' (ID: 1)" in result.output


def test_master_list_cli_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "master", "list"])

    assert result.exit_code == 0
    assert "No master users found." in result.output


def test_master_list_cli(cli_runner, temp_db, sample_master):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "master", "list"])

    assert result.exit_code == 0
    assert "Maria Souza" in result.output
    assert "123.456.789-09" in result.output


def test_master_create_duplicate_cli(cli_runner, temp_db, sample_master):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "master", "create", "Maria", "--email", "maria@example.com", "--cpf", "00000000001"],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "already exists" in result.output


def test_child_create_cli(cli_runner, temp_db, sample_master):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "child", "create", str(sample_master.id),
            "--name", "Joao Lima",
            "--cpf", "987.654.321-00",
            "--rg", "1234567",
            "--email", "joao@example.com",
        ],
    )

    assert result.exit_code == 0
    assert "Created child account 'Joao Lima' (ID: 1)" in result.output


def test_child_list_cli(cli_runner, temp_db, sample_child):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "child", "list"])

    assert result.exit_code == 0
    assert "Joao Lima" in result.output
    assert "***.***.321-**" in result.output
    # Full CPF never appears in listings
    assert "98765432100" not in result.output


def test_child_show_cli(cli_runner, temp_db, sample_child):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "child", "show", "987.654.321-00"])

    assert result.exit_code == 0
    assert "Child account 1: Joao Lima" in result.output
    assert "KYC:         NotSubmitted" in result.output
    assert "none active" in result.output


def test_child_set_status_cli(cli_runner, temp_db, account_service, sample_child):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "child", "set-status", str(sample_child.id), "approved"]
    )

    assert result.exit_code == 0
    assert f"Child account {sample_child.id} status set to 'approved'" in result.output
    assert account_service.get_child_account(sample_child.id).status is ChildAccountStatus.APPROVED


def test_child_show_unknown_cli(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "child", "show", "42"])

    assert result.exit_code == 1
    assert "Child account ID 42 not found" in result.output
