"""Domain layer for betconta application.

Services live in their own modules (``betconta.domain.pix``,
``betconta.domain.kyc`` ...) and are imported from there; only entities
and errors are re-exported here so the database layer can import them
without a cycle.
"""

from betconta.domain import entities, errors
from betconta.domain.errors import (
    DomainError,
    ValidationError,
    NotFoundError,
    ConflictError,
    InvalidKeyTypeError,
    InvalidTransitionError,
    PriceOutOfRangeError,
    ConcurrentModificationError,
)

__all__ = [
    "entities",
    "errors",
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "InvalidKeyTypeError",
    "InvalidTransitionError",
    "PriceOutOfRangeError",
    "ConcurrentModificationError",
]
