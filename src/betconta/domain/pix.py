"""PIX key registry.

Each child account has one slot per key type (CPF, Email, Random). A slot
holds at most one active key at a time; activating a new key closes the
previous one, and closed keys are kept as history.
"""

import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

from betconta.database.base import Database
from betconta.domain.entities import PixKeyRecord, PixKeyType, PixLifetime
from betconta.domain.errors import (
    ConcurrentModificationError,
    InvalidKeyTypeError,
    NotFoundError,
    child_account_not_found,
    invalid_key_type,
)
from betconta.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)

# Active keys are closed by the expiry sweep once they reach this age
PIX_KEY_LIFETIME = timedelta(hours=72)

RANDOM_KEY_ALPHABET = string.ascii_lowercase + string.digits
RANDOM_KEY_LENGTH = 32
RANDOM_KEY_BLOCK = 8

_KEY_TYPE_ALIASES = {
    "cpf": PixKeyType.CPF,
    "email": PixKeyType.EMAIL,
    "e-mail": PixKeyType.EMAIL,
    "random": PixKeyType.RANDOM,
    "aleatoria": PixKeyType.RANDOM,
    "aleatória": PixKeyType.RANDOM,
}


def parse_key_type(value: str | PixKeyType) -> PixKeyType:
    """Parse a PIX key type name (case-insensitive).

    Raises:
        InvalidKeyTypeError: If the name is not a known key type
    """
    if isinstance(value, PixKeyType):
        return value
    key_type = _KEY_TYPE_ALIASES.get(str(value).strip().lower())
    if key_type is None:
        raise InvalidKeyTypeError(invalid_key_type(str(value)))
    return key_type


def generate_random_key() -> str:
    """Generate a random key: 32 lowercase alphanumerics in dash-separated blocks of 8."""
    raw = "".join(secrets.choice(RANDOM_KEY_ALPHABET) for _ in range(RANDOM_KEY_LENGTH))
    return "-".join(raw[i:i + RANDOM_KEY_BLOCK] for i in range(0, RANDOM_KEY_LENGTH, RANDOM_KEY_BLOCK))


def remaining_lifetime(record: PixKeyRecord, now: Optional[datetime] = None) -> PixLifetime:
    """Compute how long an active key has left before expiry.

    Pure function of ``now - record.created_at``; it does not close anything.
    """
    now = as_utc(now) if now is not None else utcnow()
    remaining = record.created_at + PIX_KEY_LIFETIME - now
    if remaining <= timedelta(0):
        return PixLifetime(expired=True, remaining=timedelta(0))
    return PixLifetime(expired=False, remaining=remaining)


def format_remaining(lifetime: PixLifetime) -> str:
    """Render a lifetime as "5h 12min remaining", "12min remaining" or "Expired"."""
    if lifetime.expired:
        return "Expired"
    total_minutes = int(lifetime.remaining.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}min remaining"
    return f"{minutes}min remaining"


class PixKeyRegistry:
    """Service for activating, closing and querying PIX keys of child accounts."""

    def __init__(self, db: Database):
        """Initialize PIX key registry.

        Args:
            db: Database instance
        """
        self.db = db

    def activate(
        self, child_account_id: int, key_type: str | PixKeyType, now: Optional[datetime] = None
    ) -> PixKeyRecord:
        """Activate a new PIX key for a child account.

        Any active key of the same type is closed in the same transaction
        as the insert of the new key.

        Args:
            child_account_id: Child account ID
            key_type: CPF, Email or Random
            now: Activation time (defaults to current UTC time)

        Returns:
            The new active record

        Raises:
            InvalidKeyTypeError: If key_type is not recognized
            NotFoundError: If the child account doesn't exist
            ConcurrentModificationError: If a racing activation won twice in a row
        """
        key_type = parse_key_type(key_type)
        child = self.db.get_child_account(child_account_id)
        if child is None:
            raise NotFoundError(child_account_not_found(child_account_id))

        if key_type is PixKeyType.CPF:
            value = child.cpf
        elif key_type is PixKeyType.EMAIL:
            value = child.email
        else:
            value = generate_random_key()

        now = as_utc(now) if now is not None else utcnow()
        try:
            record = self.db.activate_pix_key(child_account_id, key_type, value, now)
        except ConcurrentModificationError:
            logger.warning(
                "Concurrent %s activation for child account %d, retrying once",
                key_type.value,
                child_account_id,
            )
            record = self.db.activate_pix_key(child_account_id, key_type, value, now)

        logger.info("Activated %s PIX key %d for child account %d", key_type.value, record.id, child_account_id)
        return record

    def deactivate(
        self, child_account_id: int, key_type: str | PixKeyType, now: Optional[datetime] = None
    ) -> None:
        """Close the active key of a slot. No-op if nothing is active.

        Raises:
            InvalidKeyTypeError: If key_type is not recognized
        """
        key_type = parse_key_type(key_type)
        now = as_utc(now) if now is not None else utcnow()
        closed = self.db.close_active_pix_key(child_account_id, key_type, now)
        if closed:
            logger.info("Deactivated %s PIX key of child account %d", key_type.value, child_account_id)
        else:
            logger.debug("No active %s PIX key for child account %d", key_type.value, child_account_id)

    def deactivate_all(self, child_account_id: int, now: Optional[datetime] = None) -> int:
        """Close every active key of a child account. Returns the number closed."""
        now = as_utc(now) if now is not None else utcnow()
        closed = self.db.close_all_active_pix_keys(child_account_id, now)
        logger.info("Deactivated %d PIX key(s) of child account %d", closed, child_account_id)
        return closed

    def list_by_child(self, child_account_id: int) -> list[PixKeyRecord]:
        """List every key record of a child account, most recent first."""
        return self.db.list_pix_keys(child_account_id)

    def get_active(self, child_account_id: int, key_type: str | PixKeyType) -> Optional[PixKeyRecord]:
        """Get the active key of a slot, or None.

        Raises:
            InvalidKeyTypeError: If key_type is not recognized
        """
        return self.db.get_active_pix_key(child_account_id, parse_key_type(key_type))

    def get(self, pix_key_id: int) -> Optional[PixKeyRecord]:
        """Get a key record by ID."""
        return self.db.get_pix_key(pix_key_id)

    def remaining_lifetime(self, record: PixKeyRecord, now: Optional[datetime] = None) -> PixLifetime:
        """See :func:`remaining_lifetime`."""
        return remaining_lifetime(record, now)
