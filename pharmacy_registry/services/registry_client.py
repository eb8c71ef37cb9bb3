"""
Client for the external civil/commercial registry.

Read-only point lookups by primary key. A fresh session is opened per call
so nothing is cached between requests. "Not found" is returned as None;
"found but not active" is returned as a record whose status says so; a store
that cannot be reached raises TransportFailureError.
"""

import logging
from typing import Optional

from pharmacy_registry.database import REFERENCE_STORE, store_errors
from pharmacy_registry.domain.entities.identity import (
    CNPJ_STATUS_ACTIVE,
    CNPJ_STATUS_SUSPENDED,
    CityRecord,
    IdentityKind,
    IdentityRecord,
    IdentityStatus,
    StateRecord,
)
from pharmacy_registry.domain.value_objects.document import CNPJ_LENGTH, CPF_LENGTH, only_digits
from pharmacy_registry.models_reference import RefCity, RefLegalEntity, RefPerson, RefState

logger = logging.getLogger(__name__)


def _person_status(person: RefPerson) -> IdentityStatus:
    return IdentityStatus.ACTIVE if (person.is_active or "").upper() == "S" else IdentityStatus.INACTIVE


def _legal_entity_status(person: RefPerson, details: Optional[RefLegalEntity]) -> IdentityStatus:
    if _person_status(person) != IdentityStatus.ACTIVE:
        return IdentityStatus.INACTIVE
    if details is None or details.cnpj_status_type is None:
        # No revenue situation on file: the master record flag decides.
        return IdentityStatus.ACTIVE
    if details.cnpj_status_type == CNPJ_STATUS_ACTIVE:
        return IdentityStatus.ACTIVE
    if details.cnpj_status_type == CNPJ_STATUS_SUSPENDED:
        return IdentityStatus.SUSPENDED
    return IdentityStatus.INACTIVE


class RegistryClient:
    """Lookups against the reference store."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def lookup_person(self, cpf: str) -> Optional[IdentityRecord]:
        document = only_digits(cpf)
        if len(document) != CPF_LENGTH:
            return None

        with store_errors(REFERENCE_STORE), self._session_factory() as session:
            person = session.get(RefPerson, document)
            if person is None:
                logger.info("🔍 Pessoa física não encontrada no cadastro de referência")
                return None
            return IdentityRecord(
                document=person.document,
                kind=IdentityKind.PERSON,
                name=person.name,
                status=_person_status(person),
                city_code=person.city_ibge_code,
                state_acronym=person.state_acronym,
            )

    def lookup_legal_entity(self, cnpj: str) -> Optional[IdentityRecord]:
        document = only_digits(cnpj)
        if len(document) != CNPJ_LENGTH:
            return None

        with store_errors(REFERENCE_STORE), self._session_factory() as session:
            person = session.get(RefPerson, document)
            if person is None:
                logger.info("🔍 Pessoa jurídica não encontrada no cadastro de referência")
                return None
            details = session.get(RefLegalEntity, document)
            return IdentityRecord(
                document=person.document,
                kind=IdentityKind.LEGAL_ENTITY,
                name=person.name,
                status=_legal_entity_status(person, details),
                city_code=person.city_ibge_code,
                state_acronym=person.state_acronym,
                trade_name=details.trade_name if details else None,
                opening_date=details.opening_date if details else None,
                status_description=details.cnpj_status_description if details else None,
            )

    def lookup_city(self, code: str) -> Optional[CityRecord]:
        if not code:
            return None
        with store_errors(REFERENCE_STORE), self._session_factory() as session:
            city = session.get(RefCity, code.strip())
            if city is None:
                return None
            return CityRecord(ibge_code=city.ibge_code, name=city.name, state_acronym=city.state_acronym)

    def lookup_state(self, code: str) -> Optional[StateRecord]:
        """Look a state up by IBGE code or by its two-letter acronym."""
        if not code:
            return None
        code = code.strip().upper()
        with store_errors(REFERENCE_STORE), self._session_factory() as session:
            state = session.get(RefState, code)
            if state is None:
                state = session.query(RefState).filter(RefState.acronym == code).first()
            if state is None:
                return None
            return StateRecord(
                ibge_code=state.ibge_code,
                acronym=state.acronym,
                name=state.name,
                is_active=(state.is_active or "S").upper() == "S",
            )
