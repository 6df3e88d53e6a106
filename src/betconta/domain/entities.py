"""Domain model entities for betconta.

These are pure data classes representing business concepts, independent of
database schema. Status-like fields are closed enumerations so callers
cannot pass arbitrary strings through to storage.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional


class ChildAccountStatus(enum.Enum):
    """Composite KYC outcome stored on a child account."""

    PENDING = "pending"
    ACTIVE = "active"
    APPROVED = "approved"
    REJECTED = "rejected"


class PixKeyType(enum.Enum):
    """Kinds of PIX key a child account may hold."""

    CPF = "CPF"
    EMAIL = "Email"
    RANDOM = "Random"


class KycStatus(enum.Enum):
    """Review status of a single KYC case."""

    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (KycStatus.APPROVED, KycStatus.REJECTED)


class KycAccountType(enum.Enum):
    """Whether a KYC case concerns the master user or one of its children."""

    MASTER = "master"
    CHILD = "child"


class DocumentType(enum.Enum):
    """Identity document kinds accepted for KYC."""

    RG = "rg"
    CNH = "cnh"
    PASSPORT = "passport"


class DisplayStatus(enum.Enum):
    """KYC status label shown to end users."""

    NOT_SUBMITTED = "NotSubmitted"
    PENDING = "Pending"
    UNDER_REVIEW = "UnderReview"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AffiliateApproval(enum.Enum):
    """Admin approval state of an affiliate."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentStatus(enum.Enum):
    """Payout state of a commission record."""

    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True)
class MasterUser:
    """Master (paying) user account."""

    id: int
    name: str
    email: str
    cpf: str
    is_active: bool
    affiliate_status: Optional[AffiliateApproval]
    created_at: datetime


@dataclass(frozen=True)
class ChildAccount:
    """Sub-account owned by a master user."""

    id: int
    master_user_id: int
    name: str
    cpf: str
    cpf_mask: str
    rg_number: str
    email: str
    whatsapp: Optional[str]
    status: ChildAccountStatus
    balance: Decimal
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PixKeyRecord:
    """One activation of a PIX key; closed records are kept as history."""

    id: int
    child_account_id: int
    key_type: PixKeyType
    value: str
    is_active: bool
    created_at: datetime
    closed_at: Optional[datetime]


@dataclass(frozen=True)
class PixLifetime:
    """Time left before an active PIX key expires."""

    expired: bool
    remaining: timedelta


@dataclass(frozen=True)
class KycDocuments:
    """Document artifacts attached to a KYC submission.

    ``front``, ``back`` and ``selfie`` are opaque references (paths or
    storage keys) to uploaded files.
    """

    front: str
    back: str
    selfie: str
    document_type: Optional[DocumentType] = None
    document_number: Optional[str] = None
    holder_name: Optional[str] = None


@dataclass(frozen=True)
class KycCase:
    """A single KYC submission and its review outcome."""

    id: int
    master_user_id: int
    child_account_id: Optional[int]
    account_type: KycAccountType
    documents: KycDocuments
    status: KycStatus
    submitted_at: datetime
    reviewed_at: Optional[datetime]
    approved_at: Optional[datetime]
    reviewed_by: Optional[str]
    review_notes: Optional[str]


@dataclass(frozen=True)
class Affiliate:
    """Affiliate account of a master user."""

    id: int
    master_user_id: int
    code: str
    commission_rate: Decimal
    min_price: Decimal
    max_price: Decimal
    total_sales: int
    total_commission: Decimal
    is_active: bool
    approval_status: AffiliateApproval
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class AffiliateSettings:
    """Referral-link settings of an affiliate."""

    affiliate_id: int
    default_price: Decimal
    custom_message: Optional[str]
    landing_page_enabled: bool
    updated_at: datetime


@dataclass(frozen=True)
class CommissionRecord:
    """Commission earned by an affiliate for one child account sale."""

    id: int
    affiliate_id: int
    child_account_id: int
    sale_price: Decimal
    base_cost: Decimal
    commission: Decimal
    payment_status: PaymentStatus
    created_at: datetime
    paid_at: Optional[datetime]
