"""Input shapes accepted by the pharmacy mutation pipeline."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pharmacy_registry.domain.value_objects.document import only_digits

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class _PharmacyFields(BaseModel):
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)

    # CPF/CNPJ fields are left unconstrained here: the document validator
    # owns their format so that failures are reported as invalid documents.
    parent_cnpj: Optional[str] = None
    license_number: Optional[str] = Field(None, max_length=20)
    trade_name: Optional[str] = Field(None, max_length=120)

    street_type: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=100)
    street_number: Optional[str] = Field(None, max_length=7)
    address_complement: Optional[str] = Field(None, max_length=160)
    district: Optional[str] = Field(None, max_length=120)
    city_ibge_code: Optional[str] = Field(None, min_length=6, max_length=6)
    zip_code: Optional[str] = Field(None, min_length=8, max_length=8)

    area_code: Optional[str] = Field(None, max_length=4)
    phone_number: Optional[str] = Field(None, max_length=10)
    email: Optional[str] = Field(None, max_length=60, pattern=EMAIL_PATTERN)
    contact_name: Optional[str] = Field(None, max_length=70)

    legal_responsible_name: Optional[str] = Field(None, max_length=70)
    legal_responsible_cpf: Optional[str] = None
    technical_responsible_name: Optional[str] = Field(None, max_length=70)
    technical_responsible_cpf: Optional[str] = None
    crf_number: Optional[str] = Field(None, max_length=7)
    crf_state: Optional[str] = Field(None, min_length=2, max_length=2)

    @field_validator('zip_code', 'area_code', 'phone_number', 'city_ibge_code', mode='before')
    @classmethod
    def _digits_only(cls, value):
        # null or blank clears the field; anything else must carry digits
        if value is None or not str(value).strip():
            return None
        digits = only_digits(value)
        if not digits:
            raise ValueError('deve conter apenas dígitos')
        return digits

    @field_validator('crf_state', mode='after')
    @classmethod
    def _upper(cls, value):
        return value.upper() if value else value


class PharmacyCreate(_PharmacyFields):
    cnpj: str
    company_name: str = Field(..., min_length=1, max_length=100)


class PharmacyPatch(_PharmacyFields):
    """Partial update; the CNPJ key and the status are not patchable."""
    company_name: Optional[str] = Field(None, min_length=1, max_length=100)
