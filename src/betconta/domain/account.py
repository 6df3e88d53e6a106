"""Account domain service (master users and child accounts)."""

import logging
from typing import Optional
from betconta.database.base import Database
from betconta.domain.entities import (
    ChildAccount as ChildAccountEntity,
    ChildAccountStatus,
    MasterUser as MasterUserEntity,
)
from betconta.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    master_user_not_found,
    duplicate_field,
)
from betconta.utils.cpf import normalize_cpf, mask_cpf

logger = logging.getLogger(__name__)


def parse_child_status(value: str | ChildAccountStatus) -> ChildAccountStatus:
    """Parse a child account status name.

    Raises:
        ValidationError: If the value is not a known status
    """
    if isinstance(value, ChildAccountStatus):
        return value
    try:
        return ChildAccountStatus(value.strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in ChildAccountStatus)
        raise ValidationError(f"Invalid status '{value}'. Use one of: {allowed}")


class AccountService:
    """Service for managing master users and their child accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_master_user(self, name: str, email: str, cpf: str) -> int:
        """Create a master user.

        Args:
            name: Full name
            email: Email address (unique)
            cpf: CPF, with or without punctuation (unique)

        Returns:
            Master user ID

        Raises:
            ValidationError: If a field is blank or the CPF is malformed
            ConflictError: If the email or CPF is already registered
        """
        if not name or not name.strip():
            raise ValidationError("Name is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email '{email}'")
        try:
            cpf = normalize_cpf(cpf)
        except ValueError as e:
            raise ValidationError(str(e))

        user_id = self.db.create_master_user(name=name.strip(), email=email.strip().lower(), cpf=cpf)
        logger.info("Created master user %d", user_id)
        return user_id

    def get_master_user(self, user_id: int) -> Optional[MasterUserEntity]:
        """Get master user by ID."""
        return self.db.get_master_user(user_id)

    def list_master_users(self) -> list[MasterUserEntity]:
        """List all master users."""
        return self.db.list_master_users()

    def set_master_active(self, user_id: int, is_active: bool) -> None:
        """Enable or disable a master user (admin toggle).

        Raises:
            NotFoundError: If the user doesn't exist
        """
        self.db.set_master_user_active(user_id, is_active)
        logger.info("Master user %d is_active=%s", user_id, is_active)

    def create_child_account(
        self,
        master_user_id: int,
        name: str,
        cpf: str,
        rg_number: str,
        email: str,
        whatsapp: Optional[str] = None,
    ) -> int:
        """Create a child account under a master user.

        The account starts in ``pending`` status with a zero balance and no
        PIX key.

        Args:
            master_user_id: Owning master user ID
            name: Account holder name (globally unique)
            cpf: Holder CPF (globally unique)
            rg_number: Holder RG document number (globally unique)
            email: Holder email
            whatsapp: Optional contact number

        Returns:
            Child account ID

        Raises:
            NotFoundError: If the master user doesn't exist
            ValidationError: If a field is blank or the CPF is malformed
            ConflictError: If name, CPF or RG number is already registered
        """
        if self.db.get_master_user(master_user_id) is None:
            raise NotFoundError(master_user_not_found(master_user_id))
        if not name or not name.strip():
            raise ValidationError("Name is required")
        if not rg_number or not rg_number.strip():
            raise ValidationError("RG number is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email '{email}'")
        try:
            cpf = normalize_cpf(cpf)
        except ValueError as e:
            raise ValidationError(str(e))

        # A CPF may belong to either a master user or a child account, never both
        if self.db.get_master_user_by_cpf(cpf) is not None:
            raise ConflictError(duplicate_field("Account", "CPF", cpf))

        child_id = self.db.create_child_account(
            master_user_id=master_user_id,
            name=name.strip(),
            cpf=cpf,
            cpf_mask=mask_cpf(cpf),
            rg_number=rg_number.strip(),
            email=email.strip().lower(),
            whatsapp=whatsapp,
        )
        logger.info("Created child account %d for master user %d", child_id, master_user_id)
        return child_id

    def get_child_account(self, child_account_id: int) -> Optional[ChildAccountEntity]:
        """Get child account by ID."""
        return self.db.get_child_account(child_account_id)

    def get_child_account_by_cpf(self, cpf: str) -> Optional[ChildAccountEntity]:
        """Get child account by CPF (punctuation is ignored)."""
        try:
            cpf = normalize_cpf(cpf)
        except ValueError:
            return None
        return self.db.get_child_account_by_cpf(cpf)

    def list_child_accounts(self, master_user_id: Optional[int] = None) -> list[ChildAccountEntity]:
        """List child accounts, optionally for one master user."""
        return self.db.list_child_accounts(master_user_id=master_user_id)

    def set_child_status(self, child_account_id: int, status: str | ChildAccountStatus) -> None:
        """Set a child account's status directly (admin action).

        This bypasses KYC case review; the account status is the
        authoritative value shown to users.

        Raises:
            ValidationError: If status is unknown
            NotFoundError: If the child account doesn't exist
        """
        status = parse_child_status(status)
        self.db.set_child_account_status(child_account_id, status)
        logger.info("Child account %d status set to %s", child_account_id, status.value)

    def cpf_in_use(self, cpf: str) -> bool:
        """Return True if a master user or child account already uses this CPF."""
        try:
            cpf = normalize_cpf(cpf)
        except ValueError:
            return False
        return (
            self.db.get_master_user_by_cpf(cpf) is not None
            or self.db.get_child_account_by_cpf(cpf) is not None
        )

    def rg_in_use(self, rg_number: str) -> bool:
        """Return True if a child account already uses this RG number."""
        return self.db.get_child_account_by_rg(rg_number.strip()) is not None
