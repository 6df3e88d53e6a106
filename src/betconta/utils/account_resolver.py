"""Utility for resolving child account references to IDs."""

from betconta.domain.account import AccountService
from betconta.utils.cpf import normalize_cpf


def resolve_child_account(account_service: AccountService, child: str | int) -> int:
    """Resolve a child account ID or CPF to a child account ID.

    Args:
        account_service: AccountService instance
        child: Child account ID (int or string representation of int) or CPF,
            with or without punctuation

    Returns:
        Child account ID

    Raises:
        ValueError: If the child account is not found
    """
    # If it's already an integer, use it as ID
    if isinstance(child, int):
        if account_service.get_child_account(child) is None:
            raise ValueError(f"Child account ID {child} not found")
        return child

    text = str(child).strip()

    # An 11-digit or punctuated value is a CPF, anything shorter an ID
    digits_only = text.isdigit()
    if digits_only and len(text) < 11:
        child_id = int(text)
        if account_service.get_child_account(child_id) is None:
            raise ValueError(f"Child account ID {child_id} not found")
        return child_id

    try:
        cpf = normalize_cpf(text)
    except ValueError:
        raise ValueError(f"Child account '{child}' not found")

    account = account_service.get_child_account_by_cpf(cpf)
    if account is None:
        raise ValueError(f"Child account with CPF '{child}' not found")
    return account.id
