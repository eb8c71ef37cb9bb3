"""
Mutation pipeline for pharmacy establishments.

Every operation follows the same order: authorize, validate documents,
confirm identities in the reference registry, load current state, then
write the new state and exactly one audit record in a single transaction.
"""
import structlog
from pydantic import ValidationError as PydanticValidationError

from pharmacy_registry.application.schemas import PharmacyCreate, PharmacyPatch
from pharmacy_registry.database import OPERATIONAL_STORE, store_errors
from pharmacy_registry.domain.entities.actor import ActorContext, ResolvedActor
from pharmacy_registry.domain.entities.establishment import (
    INITIAL_STATUS,
    AuditAction,
    advance_timestamp,
    target_status,
    utcnow,
)
from pharmacy_registry.domain.exceptions import (
    DuplicateEstablishmentError,
    EstablishmentNotFoundError,
    InactiveIdentityError,
    InvalidInputError,
    UnknownIdentityError,
)
from pharmacy_registry.domain.value_objects.document import Cnpj, Cpf
from pharmacy_registry.models_db import Pharmacy, isoformat_utc
from pharmacy_registry.services.access_guard import AccessGuard, Capability
from pharmacy_registry.services.audit_recorder import AuditRecorder

logger = structlog.get_logger()

DOCUMENT_FIELDS = {
    'parent_cnpj': Cnpj,
    'legal_responsible_cpf': Cpf,
    'technical_responsible_cpf': Cpf,
}

# Responsible persons that must exist and be active in the registry.
PERSON_FIELDS = ('legal_responsible_cpf', 'technical_responsible_cpf')

LEGAL_ENTITY = "Pessoa jurídica"
PERSON = "Pessoa física"
CITY = "Município"


def _parse(schema, data):
    try:
        return schema.model_validate(data or {})
    except PydanticValidationError as e:
        errors = [
            {'field': '.'.join(str(p) for p in err['loc']), 'message': err['msg']}
            for err in e.errors()
        ]
        raise InvalidInputError("Dados do estabelecimento inválidos", errors) from e


class PharmacyService:
    """Create, update, deactivate and reactivate pharmacy establishments."""

    def __init__(self, uow, registry, guard=None, audit_recorder=None):
        self._uow = uow
        self._registry = registry
        self._guard = guard or AccessGuard(uow)
        self._audit = audit_recorder or AuditRecorder(uow)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, data: dict, actor_ctx: ActorContext) -> dict:
        actor = self._guard.require(actor_ctx, Capability.WRITE)

        payload = _parse(PharmacyCreate, data)
        cnpj = Cnpj(payload.cnpj).value
        fields = self._normalize_documents(payload.model_dump(exclude={'cnpj'}, exclude_none=True))

        self._confirm_identities(cnpj, fields)

        with store_errors(OPERATIONAL_STORE):
            if self._uow.pharmacies.exists(cnpj):
                raise DuplicateEstablishmentError(cnpj)

        now = utcnow()
        pharmacy = Pharmacy(
            cnpj=cnpj,
            operational_status=INITIAL_STATUS.value,
            created_by=str(actor.actor_id),
            updated_by=str(actor.actor_id),
            created_at=now,
            updated_at=now,
            **fields,
        )
        after = pharmacy.to_snapshot()

        with self._uow.atomic():
            self._uow.pharmacies.add(pharmacy)
            self._audit.record(AuditAction.CREATE, cnpj, actor.actor_id, actor.origin, None, after, now)

        logger.info("Estabelecimento cadastrado", cnpj=cnpj, actor_id=str(actor.actor_id))
        return after

    def update(self, cnpj: str, patch: dict, actor_ctx: ActorContext) -> dict:
        actor = self._guard.require(actor_ctx, Capability.WRITE)

        cnpj = Cnpj(cnpj).value
        payload = _parse(PharmacyPatch, patch)
        fields = payload.model_dump(exclude_unset=True)
        if 'company_name' in fields and not fields['company_name']:
            raise InvalidInputError("Razão social não pode ser vazia",
                                    [{'field': 'company_name', 'message': 'required'}])
        fields = self._normalize_documents(fields)

        self._confirm_identities(cnpj, fields)

        pharmacy = self._load(cnpj)
        return self._commit_change(pharmacy, AuditAction.UPDATE, actor, fields)

    def deactivate(self, cnpj: str, actor_ctx: ActorContext) -> dict:
        return self._transition(cnpj, AuditAction.DEACTIVATE, actor_ctx)

    def reactivate(self, cnpj: str, actor_ctx: ActorContext) -> dict:
        return self._transition(cnpj, AuditAction.REACTIVATE, actor_ctx)

    def get(self, cnpj: str, actor_ctx: ActorContext) -> dict:
        self._guard.require(actor_ctx, Capability.VIEW)
        cnpj = Cnpj(cnpj).value
        return self._load(cnpj).to_snapshot()

    def get_history(self, cnpj: str, actor_ctx: ActorContext) -> list:
        """Audit trail of one establishment, oldest first."""
        self._guard.require(actor_ctx, Capability.VIEW)
        cnpj = Cnpj(cnpj).value
        with store_errors(OPERATIONAL_STORE):
            records = self._uow.audits.get_for_target(cnpj)
        return [
            {
                'id': str(r.id),
                'action': r.action,
                'actor_id': r.actor_id,
                'origin': r.origin,
                'before': r.before,
                'after': r.after,
                'created_at': isoformat_utc(r.created_at),
            }
            for r in records
        ]

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _transition(self, cnpj: str, action: AuditAction, actor_ctx: ActorContext) -> dict:
        actor = self._guard.require(actor_ctx, Capability.ADMIN)
        cnpj = Cnpj(cnpj).value
        self._confirm_identities(cnpj, {})

        pharmacy = self._load(cnpj)
        status = target_status(action)
        return self._commit_change(pharmacy, action, actor, {'operational_status': status.value})

    def _normalize_documents(self, fields: dict) -> dict:
        for field, value_object in DOCUMENT_FIELDS.items():
            if field not in fields:
                continue
            value = fields[field]
            fields[field] = value_object(value, field=field).value if value else None
        return fields

    def _confirm_identities(self, cnpj: str, fields: dict) -> None:
        company = self._registry.lookup_legal_entity(cnpj)
        self._ensure_active(LEGAL_ENTITY, cnpj, company)

        for field in PERSON_FIELDS:
            cpf = fields.get(field)
            if cpf:
                self._ensure_active(PERSON, cpf, self._registry.lookup_person(cpf))

        city_code = fields.get('city_ibge_code')
        if city_code and self._registry.lookup_city(city_code) is None:
            raise UnknownIdentityError(CITY, city_code)

    @staticmethod
    def _ensure_active(kind: str, identifier: str, record) -> None:
        if record is None:
            raise UnknownIdentityError(kind, identifier)
        if not record.is_active:
            raise InactiveIdentityError(kind, identifier, record.status.value)

    def _load(self, cnpj: str) -> Pharmacy:
        with store_errors(OPERATIONAL_STORE):
            pharmacy = self._uow.pharmacies.get_by_cnpj(cnpj)
        if pharmacy is None:
            raise EstablishmentNotFoundError(cnpj)
        return pharmacy

    def _commit_change(
        self,
        pharmacy: Pharmacy,
        action: AuditAction,
        actor: ResolvedActor,
        changes: dict,
    ) -> dict:
        """
        Apply `changes` and write the audit record in one transaction.

        The audit is written even when nothing actually changed.
        """
        before = pharmacy.to_snapshot()

        with self._uow.atomic():
            for name, value in changes.items():
                setattr(pharmacy, name, value)
            pharmacy.updated_by = str(actor.actor_id)
            pharmacy.updated_at = advance_timestamp(pharmacy.updated_at)
            after = pharmacy.to_snapshot()
            self._audit.record(
                action, pharmacy.cnpj, actor.actor_id, actor.origin, before, after, pharmacy.updated_at,
            )

        logger.info(
            "Estabelecimento alterado",
            cnpj=before['cnpj'],
            action=action.value,
            actor_id=str(actor.actor_id),
            changed=_changed_fields(before, after),
        )
        return after


def _changed_fields(before: dict, after: dict) -> list:
    ignored = ('updated_at', 'updated_by')
    return sorted(k for k in after if k not in ignored and before.get(k) != after.get(k))
