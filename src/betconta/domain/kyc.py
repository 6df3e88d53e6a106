"""KYC (identity verification) domain service."""

import logging
from datetime import datetime
from typing import Optional

from betconta.database.base import Database
from betconta.domain.entities import (
    ChildAccount,
    ChildAccountStatus,
    DisplayStatus,
    DocumentType,
    KycAccountType,
    KycCase,
    KycDocuments,
    KycStatus,
)
from betconta.domain.errors import (
    ConcurrentModificationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    child_account_not_found,
    child_account_not_owned,
    invalid_transition,
    kyc_case_not_found,
    master_user_not_found,
)
from betconta.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)

# Review may skip the under_review step; approved and rejected are terminal
ALLOWED_TRANSITIONS: dict[KycStatus, frozenset[KycStatus]] = {
    KycStatus.SUBMITTED: frozenset({KycStatus.UNDER_REVIEW, KycStatus.APPROVED, KycStatus.REJECTED}),
    KycStatus.UNDER_REVIEW: frozenset({KycStatus.APPROVED, KycStatus.REJECTED}),
    KycStatus.APPROVED: frozenset(),
    KycStatus.REJECTED: frozenset(),
}

_CASE_TO_DISPLAY = {
    KycStatus.SUBMITTED: DisplayStatus.PENDING,
    KycStatus.UNDER_REVIEW: DisplayStatus.UNDER_REVIEW,
    KycStatus.APPROVED: DisplayStatus.APPROVED,
    KycStatus.REJECTED: DisplayStatus.REJECTED,
}


def parse_kyc_status(value: str | KycStatus) -> KycStatus:
    """Parse a KYC status name such as "under_review" or "under-review".

    Raises:
        ValidationError: If the value is not a known status
    """
    if isinstance(value, KycStatus):
        return value
    try:
        return KycStatus(value.strip().lower().replace("-", "_"))
    except ValueError:
        allowed = ", ".join(s.value for s in KycStatus)
        raise ValidationError(f"Invalid KYC status '{value}'. Use one of: {allowed}")


def can_transition(current: KycStatus, requested: KycStatus) -> bool:
    """Return True if a case may move from current to requested."""
    return requested in ALLOWED_TRANSITIONS[current]


def derive_display_status(
    child_account: Optional[ChildAccount], latest_case: Optional[KycCase]
) -> DisplayStatus:
    """Decide which KYC status label the user sees.

    The child account's status is authoritative because admins can set it
    without touching any case. The latest case only refines a ``pending``
    account: no case means nothing was submitted yet, and a case in review
    shows as under review. Without a child account (master-level KYC) the
    latest case alone decides.
    """
    if child_account is not None:
        status = child_account.status
        if status in (ChildAccountStatus.APPROVED, ChildAccountStatus.ACTIVE):
            return DisplayStatus.APPROVED
        if status is ChildAccountStatus.REJECTED:
            return DisplayStatus.REJECTED
        if latest_case is None:
            return DisplayStatus.NOT_SUBMITTED
        if latest_case.status is KycStatus.UNDER_REVIEW:
            return DisplayStatus.UNDER_REVIEW
        return DisplayStatus.PENDING

    if latest_case is None:
        return DisplayStatus.NOT_SUBMITTED
    return _CASE_TO_DISPLAY[latest_case.status]


class KycService:
    """Service for KYC submissions and their review."""

    def __init__(self, db: Database):
        """Initialize KYC service.

        Args:
            db: Database instance
        """
        self.db = db

    def submit(
        self,
        master_user_id: int,
        child_account_id: Optional[int],
        documents: KycDocuments,
        now: Optional[datetime] = None,
    ) -> KycCase:
        """Open a new KYC case in ``submitted`` state.

        A resubmission after rejection creates a new case; earlier cases
        are kept. The child account's status is not changed here.

        Args:
            master_user_id: Owning master user
            child_account_id: Child account the documents are for, or None
                for the master user's own verification
            documents: Front, back and selfie references plus optional metadata
            now: Submission time (defaults to current UTC time)

        Returns:
            The new case

        Raises:
            ValidationError: If a document is missing or the child belongs to another master
            NotFoundError: If the master user or child account doesn't exist
        """
        for label, ref in (("front", documents.front), ("back", documents.back), ("selfie", documents.selfie)):
            if not ref or not ref.strip():
                raise ValidationError(f"Document {label} is required")
        if documents.document_type is not None and not isinstance(documents.document_type, DocumentType):
            raise ValidationError(f"Invalid document type '{documents.document_type}'")

        if self.db.get_master_user(master_user_id) is None:
            raise NotFoundError(master_user_not_found(master_user_id))

        account_type = KycAccountType.MASTER
        if child_account_id is not None:
            child = self.db.get_child_account(child_account_id)
            if child is None:
                raise NotFoundError(child_account_not_found(child_account_id))
            if child.master_user_id != master_user_id:
                raise ValidationError(child_account_not_owned(child_account_id, master_user_id))
            account_type = KycAccountType.CHILD

        now = as_utc(now) if now is not None else utcnow()
        case = self.db.create_kyc_case(
            master_user_id=master_user_id,
            child_account_id=child_account_id,
            account_type=account_type,
            documents=documents,
            submitted_at=now,
        )
        logger.info(
            "KYC case %d submitted (%s, master %d, child %s)",
            case.id,
            account_type.value,
            master_user_id,
            child_account_id,
        )
        return case

    def set_status(
        self,
        case_id: int,
        new_status: str | KycStatus,
        reviewer_id: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> KycCase:
        """Advance a case through review.

        When a child account's case reaches approved or rejected, the
        account status follows in the same transaction.

        Args:
            case_id: KYC case ID
            new_status: Requested status
            reviewer_id: Identifier of the reviewing admin
            notes: Review notes
            now: Review time (defaults to current UTC time)

        Returns:
            The updated case

        Raises:
            ValidationError: If new_status is unknown
            NotFoundError: If the case doesn't exist
            InvalidTransitionError: If the move is not allowed from the current status
            ConcurrentModificationError: If another reviewer changed the case first
        """
        new_status = parse_kyc_status(new_status)
        case = self.db.get_kyc_case(case_id)
        if case is None:
            raise NotFoundError(kyc_case_not_found(case_id))
        if not can_transition(case.status, new_status):
            raise InvalidTransitionError(invalid_transition(case_id, case.status.value, new_status.value))

        child_status = None
        if new_status is KycStatus.APPROVED:
            child_status = ChildAccountStatus.APPROVED
        elif new_status is KycStatus.REJECTED:
            child_status = ChildAccountStatus.REJECTED

        now = as_utc(now) if now is not None else utcnow()
        moved = self.db.transition_kyc_case(
            case_id,
            expected_status=case.status,
            new_status=new_status,
            reviewed_by=reviewer_id,
            review_notes=notes,
            now=now,
            child_status=child_status,
        )
        if not moved:
            logger.warning("KYC case %d changed during review", case_id)
            raise ConcurrentModificationError(f"KYC case {case_id} was modified concurrently")

        logger.info(
            "KYC case %d moved %s -> %s by %s", case_id, case.status.value, new_status.value, reviewer_id
        )
        return self.db.get_kyc_case(case_id)

    def get_case(self, case_id: int) -> Optional[KycCase]:
        """Get a case by ID."""
        return self.db.get_kyc_case(case_id)

    def list_cases(
        self, master_user_id: Optional[int] = None, child_account_id: Optional[int] = None
    ) -> list[KycCase]:
        """List cases, most recent first."""
        return self.db.list_kyc_cases(master_user_id=master_user_id, child_account_id=child_account_id)

    def latest_case(self, child_account_id: int) -> Optional[KycCase]:
        """Get the most recent case of a child account."""
        return self.db.get_latest_kyc_case(child_account_id)

    def display_status(self, child_account_id: int) -> DisplayStatus:
        """Derive the user-facing KYC status of a child account.

        Raises:
            NotFoundError: If the child account doesn't exist
        """
        child = self.db.get_child_account(child_account_id)
        if child is None:
            raise NotFoundError(child_account_not_found(child_account_id))
        return derive_display_status(child, self.db.get_latest_kyc_case(child_account_id))
