"""
Brazilian national documents - CPF (person) and CNPJ (company).

Pure checksum/format validation, no I/O. Used by the mutation pipeline
before any store is touched.
"""

import re
from dataclasses import dataclass

from ..exceptions import InvalidDocumentError

CPF_LENGTH = 11
CNPJ_LENGTH = 14

CPF_FIRST_WEIGHTS = tuple(range(10, 1, -1))
CPF_SECOND_WEIGHTS = tuple(range(11, 1, -1))
CNPJ_FIRST_WEIGHTS = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_SECOND_WEIGHTS = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)

_NON_DIGITS = re.compile(r"\D")


def only_digits(raw) -> str:
    """Remove every non-digit character."""
    if raw is None:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def _check_digit(digits: str, weights) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def _is_valid(raw, length: int, first_weights, second_weights) -> bool:
    digits = only_digits(raw)
    if len(digits) != length:
        return False

    # Repeated sequences (e.g. 00000000000) pass the math for some lengths.
    if len(set(digits)) == 1:
        return False

    body = digits[:len(first_weights)]
    first = _check_digit(body, first_weights)
    second = _check_digit(body + str(first), second_weights)
    return digits[-2:] == f"{first}{second}"


def validate_person_id(raw) -> bool:
    """True when `raw` is a well-formed CPF."""
    return _is_valid(raw, CPF_LENGTH, CPF_FIRST_WEIGHTS, CPF_SECOND_WEIGHTS)


def validate_company_id(raw) -> bool:
    """True when `raw` is a well-formed CNPJ."""
    return _is_valid(raw, CNPJ_LENGTH, CNPJ_FIRST_WEIGHTS, CNPJ_SECOND_WEIGHTS)


def format_cpf(cpf: str) -> str:
    """Format CPF as XXX.XXX.XXX-XX (returns input when not 11 digits)."""
    digits = only_digits(cpf)
    if len(digits) != CPF_LENGTH:
        return cpf or ""
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_cnpj(cnpj: str) -> str:
    """Format CNPJ as XX.XXX.XXX/XXXX-XX (returns input when not 14 digits)."""
    digits = only_digits(cnpj)
    if len(digits) != CNPJ_LENGTH:
        return cnpj or ""
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


@dataclass(frozen=True)
class Cpf:
    """
    Immutable CPF value object, normalized to digits.

    Usage:
        cpf = Cpf("111.444.777-35")
        print(cpf.value)      # "11144477735"
        print(cpf.formatted)  # "111.444.777-35"
    """

    value: str
    field: str = "cpf"

    def __post_init__(self):
        if not validate_person_id(self.value):
            raise InvalidDocumentError(self.field, self.value)
        object.__setattr__(self, 'value', only_digits(self.value))

    @property
    def formatted(self) -> str:
        return format_cpf(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Cnpj:
    """Immutable CNPJ value object, normalized to digits."""

    value: str
    field: str = "cnpj"

    def __post_init__(self):
        if not validate_company_id(self.value):
            raise InvalidDocumentError(self.field, self.value)
        object.__setattr__(self, 'value', only_digits(self.value))

    @property
    def formatted(self) -> str:
        return format_cnpj(self.value)

    @property
    def root(self) -> str:
        """First 8 digits, shared by the head office and its branches."""
        return self.value[:8]

    def __str__(self) -> str:
        return self.value
