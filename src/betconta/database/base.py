"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from betconta.domain.entities import (
    MasterUser,
    ChildAccount,
    ChildAccountStatus,
    PixKeyRecord,
    PixKeyType,
    KycCase,
    KycStatus,
    KycAccountType,
    KycDocuments,
    Affiliate,
    AffiliateApproval,
    AffiliateSettings,
    CommissionRecord,
)


class Database(ABC):
    """Abstract database interface for betconta.

    Every mutating method is a single atomic unit: it either applies all of
    its writes or none of them.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Master user operations
    @abstractmethod
    def create_master_user(self, name: str, email: str, cpf: str) -> int:
        """Create a master user. Returns user ID.

        Raises:
            ConflictError: If email or CPF is already registered
        """
        pass

    @abstractmethod
    def get_master_user(self, user_id: int) -> Optional[MasterUser]:
        """Get master user by ID."""
        pass

    @abstractmethod
    def get_master_user_by_cpf(self, cpf: str) -> Optional[MasterUser]:
        """Get master user by CPF."""
        pass

    @abstractmethod
    def list_master_users(self) -> list[MasterUser]:
        """List all master users."""
        pass

    @abstractmethod
    def set_master_user_active(self, user_id: int, is_active: bool) -> None:
        """Enable or disable a master user."""
        pass

    # Child account operations
    @abstractmethod
    def create_child_account(
        self,
        master_user_id: int,
        name: str,
        cpf: str,
        cpf_mask: str,
        rg_number: str,
        email: str,
        whatsapp: Optional[str] = None,
    ) -> int:
        """Create a child account. Returns child account ID.

        Raises:
            ConflictError: If name, CPF or RG number is already registered
        """
        pass

    @abstractmethod
    def get_child_account(self, child_account_id: int) -> Optional[ChildAccount]:
        """Get child account by ID."""
        pass

    @abstractmethod
    def get_child_account_by_cpf(self, cpf: str) -> Optional[ChildAccount]:
        """Get child account by CPF."""
        pass

    @abstractmethod
    def get_child_account_by_rg(self, rg_number: str) -> Optional[ChildAccount]:
        """Get child account by RG number."""
        pass

    @abstractmethod
    def list_child_accounts(self, master_user_id: Optional[int] = None) -> list[ChildAccount]:
        """List child accounts, optionally filtered by master user."""
        pass

    @abstractmethod
    def set_child_account_status(self, child_account_id: int, status: ChildAccountStatus) -> None:
        """Set the status of a child account."""
        pass

    # PIX key operations
    @abstractmethod
    def activate_pix_key(
        self, child_account_id: int, key_type: PixKeyType, value: str, now: datetime
    ) -> PixKeyRecord:
        """Close the active key of the slot (if any) and insert a new active key.

        Both writes happen in one transaction.

        Raises:
            NotFoundError: If the child account does not exist
            ConcurrentModificationError: If another activation won the slot
        """
        pass

    @abstractmethod
    def close_active_pix_key(self, child_account_id: int, key_type: PixKeyType, now: datetime) -> int:
        """Close the active key of a slot if it is still active. Returns rows closed."""
        pass

    @abstractmethod
    def close_all_active_pix_keys(self, child_account_id: int, now: datetime) -> int:
        """Close every active key of a child account. Returns rows closed."""
        pass

    @abstractmethod
    def close_expired_pix_keys(self, cutoff: datetime, now: datetime) -> int:
        """Close active keys created before cutoff. Returns rows closed."""
        pass

    @abstractmethod
    def get_pix_key(self, pix_key_id: int) -> Optional[PixKeyRecord]:
        """Get PIX key record by ID."""
        pass

    @abstractmethod
    def get_active_pix_key(self, child_account_id: int, key_type: PixKeyType) -> Optional[PixKeyRecord]:
        """Get the active key of a slot, if any."""
        pass

    @abstractmethod
    def list_pix_keys(self, child_account_id: int) -> list[PixKeyRecord]:
        """List all PIX key records of a child account, most recent first."""
        pass

    # KYC operations
    @abstractmethod
    def create_kyc_case(
        self,
        master_user_id: int,
        child_account_id: Optional[int],
        account_type: KycAccountType,
        documents: KycDocuments,
        submitted_at: datetime,
    ) -> KycCase:
        """Create a KYC case in submitted state."""
        pass

    @abstractmethod
    def get_kyc_case(self, case_id: int) -> Optional[KycCase]:
        """Get KYC case by ID."""
        pass

    @abstractmethod
    def list_kyc_cases(
        self, master_user_id: Optional[int] = None, child_account_id: Optional[int] = None
    ) -> list[KycCase]:
        """List KYC cases, most recent first."""
        pass

    @abstractmethod
    def get_latest_kyc_case(self, child_account_id: int) -> Optional[KycCase]:
        """Get the most recent KYC case of a child account."""
        pass

    @abstractmethod
    def transition_kyc_case(
        self,
        case_id: int,
        expected_status: KycStatus,
        new_status: KycStatus,
        reviewed_by: Optional[str],
        review_notes: Optional[str],
        now: datetime,
        child_status: Optional[ChildAccountStatus] = None,
    ) -> bool:
        """Move a case from expected_status to new_status.

        If child_status is given and the case belongs to a child account, the
        account's status is updated in the same transaction.

        Returns:
            False if the case was no longer in expected_status
        """
        pass

    # Affiliate operations
    @abstractmethod
    def create_affiliate(
        self,
        master_user_id: int,
        code: str,
        commission_rate: Decimal,
        min_price: Decimal,
        max_price: Decimal,
        default_price: Decimal,
        approval_status: AffiliateApproval,
    ) -> Affiliate:
        """Create an affiliate together with its default settings.

        Raises:
            ConflictError: If the user already has an affiliate or the code is taken
        """
        pass

    @abstractmethod
    def get_affiliate(self, affiliate_id: int) -> Optional[Affiliate]:
        """Get affiliate by ID."""
        pass

    @abstractmethod
    def get_affiliate_by_code(self, code: str) -> Optional[Affiliate]:
        """Get affiliate by referral code."""
        pass

    @abstractmethod
    def get_affiliate_by_user(self, master_user_id: int) -> Optional[Affiliate]:
        """Get the affiliate of a master user."""
        pass

    @abstractmethod
    def set_affiliate_approval(
        self, master_user_id: int, status: AffiliateApproval, is_active: Optional[bool] = None
    ) -> None:
        """Record the affiliate status on the master user and on its affiliate row, if any."""
        pass

    @abstractmethod
    def get_affiliate_settings(self, affiliate_id: int) -> Optional[AffiliateSettings]:
        """Get affiliate settings."""
        pass

    @abstractmethod
    def update_affiliate_settings(
        self, affiliate_id: int, default_price: Decimal, custom_message: Optional[str] = None
    ) -> AffiliateSettings:
        """Update affiliate settings."""
        pass

    @abstractmethod
    def record_commission(
        self,
        affiliate_id: int,
        child_account_id: int,
        sale_price: Decimal,
        base_cost: Decimal,
        commission: Decimal,
        now: datetime,
    ) -> CommissionRecord:
        """Insert a commission record and bump the affiliate totals atomically.

        Raises:
            ConflictError: If the child account already has a commission record
        """
        pass

    @abstractmethod
    def mark_commission_paid(self, record_id: int, now: datetime) -> bool:
        """Move a record from pending to paid. Returns False if it was not pending."""
        pass

    @abstractmethod
    def get_commission_record(self, record_id: int) -> Optional[CommissionRecord]:
        """Get commission record by ID."""
        pass

    @abstractmethod
    def list_commission_records(self, affiliate_id: int) -> list[CommissionRecord]:
        """List commission records of an affiliate, most recent first."""
        pass
