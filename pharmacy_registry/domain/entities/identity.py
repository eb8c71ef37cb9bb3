"""
Reference registry records - read-only views of externally owned data.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class IdentityKind(str, Enum):
    PERSON = "PERSON"
    LEGAL_ENTITY = "LEGAL_ENTITY"


class IdentityStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


# Federal revenue CNPJ situation codes (TP_SITUACAO_CNPJ)
CNPJ_STATUS_ACTIVE = 2
CNPJ_STATUS_SUSPENDED = 3


@dataclass(frozen=True)
class IdentityRecord:
    """Person or legal entity master data as seen in the registry."""
    document: str
    kind: IdentityKind
    name: str
    status: IdentityStatus
    city_code: Optional[str] = None
    state_acronym: Optional[str] = None
    trade_name: Optional[str] = None
    opening_date: Optional[date] = None
    status_description: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == IdentityStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            'document': self.document,
            'kind': self.kind.value,
            'name': self.name,
            'status': self.status.value,
            'city_code': self.city_code,
            'state_acronym': self.state_acronym,
            'trade_name': self.trade_name,
            'opening_date': self.opening_date.isoformat() if self.opening_date else None,
            'status_description': self.status_description,
        }


@dataclass(frozen=True)
class CityRecord:
    ibge_code: str
    name: str
    state_acronym: str

    def to_dict(self) -> dict:
        return {'ibge_code': self.ibge_code, 'name': self.name, 'state_acronym': self.state_acronym}


@dataclass(frozen=True)
class StateRecord:
    ibge_code: str
    acronym: str
    name: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            'ibge_code': self.ibge_code,
            'acronym': self.acronym,
            'name': self.name,
            'is_active': self.is_active,
        }
