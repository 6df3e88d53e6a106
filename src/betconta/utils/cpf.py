"""CPF (Brazilian national id) helpers."""

import re


def normalize_cpf(cpf: str) -> str:
    """Strip punctuation from a CPF and check it has 11 digits.

    Raises:
        ValueError: If the CPF does not contain exactly 11 digits
    """
    digits = re.sub(r"\D", "", cpf or "")
    if len(digits) != 11:
        raise ValueError(f"CPF '{cpf}' must contain 11 digits")
    return digits


def mask_cpf(cpf: str) -> str:
    """Mask a CPF for display, keeping only digits 7-9: ***.***.XXX-**."""
    digits = re.sub(r"\D", "", cpf or "")
    if len(digits) != 11:
        return cpf
    return f"***.***.{digits[6:9]}-**"


def format_cpf(cpf: str) -> str:
    """Format an 11-digit CPF as XXX.XXX.XXX-XX."""
    digits = re.sub(r"\D", "", cpf or "")
    if len(digits) != 11:
        return cpf
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
