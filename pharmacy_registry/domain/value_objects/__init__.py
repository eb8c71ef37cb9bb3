# Value Objects - Immutable domain primitives
from .document import (
    Cpf,
    Cnpj,
    only_digits,
    format_cpf,
    format_cnpj,
    validate_person_id,
    validate_company_id,
)

__all__ = [
    'Cpf',
    'Cnpj',
    'only_digits',
    'format_cpf',
    'format_cnpj',
    'validate_person_id',
    'validate_company_id',
]
