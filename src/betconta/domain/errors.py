"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidKeyTypeError(ValidationError):
    """Unrecognized PIX key type."""


class InvalidTransitionError(DomainError):
    """Requested status change is not an allowed move."""


class PriceOutOfRangeError(ValidationError):
    """Sale price outside the affiliate's configured bounds."""


class ConcurrentModificationError(ConflictError):
    """A guarded update lost a race with another writer."""


def master_user_not_found(user_id: int) -> str:
    """Return message for missing master user."""
    return f"Master user {user_id} not found"


def child_account_not_found(child_account_id: int) -> str:
    """Return message for missing child account."""
    return f"Child account {child_account_id} not found"


def child_account_not_owned(child_account_id: int, master_user_id: int) -> str:
    """Return message for a child account under a different master."""
    return f"Child account {child_account_id} does not belong to master user {master_user_id}"


def kyc_case_not_found(case_id: int) -> str:
    """Return message for missing KYC case."""
    return f"KYC case {case_id} not found"


def affiliate_not_found(affiliate_id: int) -> str:
    """Return message for missing affiliate."""
    return f"Affiliate {affiliate_id} not found"


def commission_record_not_found(record_id: int) -> str:
    """Return message for missing commission record."""
    return f"Commission record {record_id} not found"


def invalid_key_type(value: str) -> str:
    """Return message for an unknown PIX key type."""
    return f"Invalid PIX key type '{value}'. Use one of: CPF, Email, Random"


def invalid_transition(case_id: int, current: str, requested: str) -> str:
    """Return message for a disallowed KYC status change."""
    return f"KYC case {case_id} cannot move from '{current}' to '{requested}'"


def price_out_of_range(price, min_price, max_price) -> str:
    """Return message when a sale price falls outside the bounds."""
    return f"Price R$ {price} must be between R$ {min_price} and R$ {max_price}"


def duplicate_field(entity: str, field: str, value: str) -> str:
    """Return message for a uniqueness violation."""
    return f"{entity} with {field} '{value}' already exists"


def concurrent_pix_activation(child_account_id: int, key_type: str) -> str:
    """Return message when two activations race on the same slot."""
    return (
        f"Another {key_type} PIX key was activated concurrently for child account "
        f"{child_account_id}. Please try again."
    )
