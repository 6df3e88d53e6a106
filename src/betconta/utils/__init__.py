"""Utility functions for betconta."""

from betconta.utils.clock import utcnow, as_utc
from betconta.utils.date_parser import parse_datetime
from betconta.utils.amount_parser import parse_amount, to_cents
from betconta.utils.cpf import normalize_cpf, mask_cpf, format_cpf

__all__ = [
    "utcnow",
    "as_utc",
    "parse_datetime",
    "parse_amount",
    "to_cents",
    "normalize_cpf",
    "mask_cpf",
    "format_cpf",
]
