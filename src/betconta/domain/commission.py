"""Affiliate program and commission ledger."""

import logging
import secrets
import string
from datetime import datetime
from decimal import Decimal
from typing import Optional

from betconta.database.base import Database
from betconta.domain.entities import (
    Affiliate,
    AffiliateApproval,
    AffiliateSettings,
    CommissionRecord,
)
from betconta.domain.errors import (
    ConflictError,
    NotFoundError,
    PriceOutOfRangeError,
    ValidationError,
    affiliate_not_found,
    child_account_not_found,
    commission_record_not_found,
    master_user_not_found,
    price_out_of_range,
)
from betconta.utils.amount_parser import to_cents
from betconta.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)

# Platform cost per child account; the affiliate keeps the rest of the sale price
BASE_COST = Decimal("90.00")
MIN_SALE_PRICE = Decimal("90.00")
MAX_SALE_PRICE = Decimal("130.00")
DEFAULT_SALE_PRICE = Decimal("120.00")
DEFAULT_COMMISSION_RATE = Decimal("40.00")

AFFILIATE_CODE_ALPHABET = string.ascii_uppercase + string.digits
AFFILIATE_CODE_LENGTH = 8
_CODE_ATTEMPTS = 5


def generate_affiliate_code() -> str:
    """Generate an 8-character uppercase alphanumeric referral code."""
    return "".join(secrets.choice(AFFILIATE_CODE_ALPHABET) for _ in range(AFFILIATE_CODE_LENGTH))


def parse_approval(value: str | AffiliateApproval) -> AffiliateApproval:
    """Parse an affiliate approval status.

    Raises:
        ValidationError: If the value is not a known status
    """
    if isinstance(value, AffiliateApproval):
        return value
    try:
        return AffiliateApproval(value.strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in AffiliateApproval)
        raise ValidationError(f"Invalid affiliate status '{value}'. Use one of: {allowed}")


def check_price(price: Decimal, min_price: Decimal, max_price: Decimal) -> None:
    """Raise PriceOutOfRangeError unless min_price <= price <= max_price."""
    if price < min_price or price > max_price:
        raise PriceOutOfRangeError(price_out_of_range(price, min_price, max_price))


class CommissionLedger:
    """Service for affiliates, their settings and commission records."""

    def __init__(self, db: Database, base_cost: Decimal = BASE_COST):
        """Initialize commission ledger.

        Args:
            db: Database instance
            base_cost: Platform cost subtracted from each sale price
        """
        self.db = db
        self.base_cost = to_cents(base_cost)

    # Affiliates
    def create_affiliate(
        self,
        master_user_id: int,
        approval_status: AffiliateApproval = AffiliateApproval.PENDING,
    ) -> Affiliate:
        """Open an affiliate account for a master user.

        The affiliate gets a fresh referral code, the default price bounds and
        default referral settings.

        Raises:
            NotFoundError: If the master user doesn't exist
            ConflictError: If the user already has an affiliate account
        """
        if self.db.get_master_user(master_user_id) is None:
            raise NotFoundError(master_user_not_found(master_user_id))
        if self.db.get_affiliate_by_user(master_user_id) is not None:
            raise ConflictError(f"Master user {master_user_id} already has an affiliate account")

        for _ in range(_CODE_ATTEMPTS):
            code = generate_affiliate_code()
            if self.db.get_affiliate_by_code(code) is None:
                break
        else:
            raise ConflictError("Could not generate a unique affiliate code")

        affiliate = self.db.create_affiliate(
            master_user_id=master_user_id,
            code=code,
            commission_rate=DEFAULT_COMMISSION_RATE,
            min_price=MIN_SALE_PRICE,
            max_price=MAX_SALE_PRICE,
            default_price=DEFAULT_SALE_PRICE,
            approval_status=approval_status,
        )
        logger.info("Created affiliate %d (%s) for master user %d", affiliate.id, code, master_user_id)
        return affiliate

    def set_affiliate_approval(self, master_user_id: int, status: str | AffiliateApproval) -> Affiliate | None:
        """Record an admin decision on a master user's affiliate request.

        Approval creates the affiliate account if the user has none yet and
        reactivates an existing one.

        Returns:
            The user's affiliate, or None if not approved and none exists

        Raises:
            ValidationError: If status is unknown
            NotFoundError: If the master user doesn't exist
        """
        status = parse_approval(status)
        if self.db.get_master_user(master_user_id) is None:
            raise NotFoundError(master_user_not_found(master_user_id))

        if status is AffiliateApproval.APPROVED and self.db.get_affiliate_by_user(master_user_id) is None:
            self.create_affiliate(master_user_id, approval_status=AffiliateApproval.APPROVED)

        is_active = True if status is AffiliateApproval.APPROVED else None
        self.db.set_affiliate_approval(master_user_id, status, is_active=is_active)
        logger.info("Affiliate status of master user %d set to %s", master_user_id, status.value)
        return self.db.get_affiliate_by_user(master_user_id)

    def get_affiliate(self, affiliate_id: int) -> Optional[Affiliate]:
        """Get affiliate by ID."""
        return self.db.get_affiliate(affiliate_id)

    def get_affiliate_by_code(self, code: str) -> Optional[Affiliate]:
        """Get affiliate by referral code (case-insensitive)."""
        return self.db.get_affiliate_by_code(code.strip().upper())

    def get_affiliate_for_user(self, master_user_id: int) -> Optional[Affiliate]:
        """Get the affiliate account of a master user."""
        return self.db.get_affiliate_by_user(master_user_id)

    def get_settings(self, affiliate_id: int) -> Optional[AffiliateSettings]:
        """Get referral settings of an affiliate."""
        return self.db.get_affiliate_settings(affiliate_id)

    def update_settings(
        self, affiliate_id: int, default_price: Decimal, custom_message: Optional[str] = None
    ) -> AffiliateSettings:
        """Change the default referral price and message.

        Raises:
            NotFoundError: If the affiliate doesn't exist
            PriceOutOfRangeError: If default_price is outside the affiliate's bounds
        """
        affiliate = self._require_affiliate(affiliate_id)
        default_price = to_cents(Decimal(default_price))
        check_price(default_price, affiliate.min_price, affiliate.max_price)
        settings = self.db.update_affiliate_settings(affiliate_id, default_price, custom_message)
        logger.info("Affiliate %d default price set to %s", affiliate_id, default_price)
        return settings

    # Ledger
    def record_sale(
        self,
        affiliate_id: int,
        child_account_id: int,
        sale_price: Decimal,
        now: Optional[datetime] = None,
    ) -> CommissionRecord:
        """Book the commission for a child account sold through an affiliate.

        commission = sale_price - base_cost. The affiliate's totals are
        updated in the same transaction as the insert.

        Raises:
            NotFoundError: If the affiliate or child account doesn't exist
            ValidationError: If the affiliate is inactive
            PriceOutOfRangeError: If sale_price is outside the affiliate's bounds
            ConflictError: If a commission was already booked for the child account
        """
        affiliate = self._require_affiliate(affiliate_id)
        if not affiliate.is_active:
            raise ValidationError(f"Affiliate {affiliate_id} is not active")
        if self.db.get_child_account(child_account_id) is None:
            raise NotFoundError(child_account_not_found(child_account_id))

        sale_price = to_cents(Decimal(sale_price))
        check_price(sale_price, affiliate.min_price, affiliate.max_price)
        commission = sale_price - self.base_cost

        now = as_utc(now) if now is not None else utcnow()
        record = self.db.record_commission(
            affiliate_id=affiliate_id,
            child_account_id=child_account_id,
            sale_price=sale_price,
            base_cost=self.base_cost,
            commission=commission,
            now=now,
        )
        logger.info(
            "Recorded sale of child account %d for affiliate %d: price %s, commission %s",
            child_account_id,
            affiliate_id,
            sale_price,
            commission,
        )
        return record

    def mark_paid(self, record_id: int, now: Optional[datetime] = None) -> None:
        """Mark a commission as paid. No-op if it is already paid.

        Raises:
            NotFoundError: If the record doesn't exist
        """
        now = as_utc(now) if now is not None else utcnow()
        if self.db.mark_commission_paid(record_id, now):
            logger.info("Commission record %d marked paid", record_id)
            return
        if self.db.get_commission_record(record_id) is None:
            raise NotFoundError(commission_record_not_found(record_id))
        logger.debug("Commission record %d was already paid", record_id)

    def get_record(self, record_id: int) -> Optional[CommissionRecord]:
        """Get a commission record by ID."""
        return self.db.get_commission_record(record_id)

    def list_sales(self, affiliate_id: int) -> list[CommissionRecord]:
        """List an affiliate's commission records, most recent first."""
        return self.db.list_commission_records(affiliate_id)

    def _require_affiliate(self, affiliate_id: int) -> Affiliate:
        affiliate = self.db.get_affiliate(affiliate_id)
        if affiliate is None:
            raise NotFoundError(affiliate_not_found(affiliate_id))
        return affiliate
