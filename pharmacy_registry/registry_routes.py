"""Read-only lookups in the reference registry, for form autofill."""
import logging

from flask import Blueprint, jsonify

from pharmacy_registry.auth import current_actor_context
from pharmacy_registry.container import get_access_guard, get_registry_client
from pharmacy_registry.domain.exceptions import DomainError, NotFoundError
from pharmacy_registry.domain.value_objects.document import Cnpj, Cpf
from pharmacy_registry.error_codes import error_response
from pharmacy_registry.infrastructure.security.rate_limiter import lookup_limit
from pharmacy_registry.services.access_guard import Capability

logger = logging.getLogger("pharmacy-registry.routes")

registry_bp = Blueprint('registry', __name__, url_prefix='/api/registry')


@registry_bp.errorhandler(DomainError)
def handle_domain_error(e):
    logger.info(f"🚫 {e.tag}: {e.message}")
    return error_response(e)


lookup_limit()(registry_bp)


@registry_bp.before_request
def require_view():
    get_access_guard().require(current_actor_context(), Capability.VIEW)


def _found(record, entity_type, identifier):
    if record is None:
        raise NotFoundError(entity_type, identifier)
    return jsonify(record.to_dict())


@registry_bp.route('/persons/<cpf>')
def get_person(cpf):
    cpf = Cpf(cpf).value
    return _found(get_registry_client().lookup_person(cpf), "Pessoa física", cpf)


@registry_bp.route('/legal-entities/<cnpj>')
def get_legal_entity(cnpj):
    cnpj = Cnpj(cnpj).value
    return _found(get_registry_client().lookup_legal_entity(cnpj), "Pessoa jurídica", cnpj)


@registry_bp.route('/cities/<code>')
def get_city(code):
    return _found(get_registry_client().lookup_city(code), "Município", code)


@registry_bp.route('/states/<code>')
def get_state(code):
    return _found(get_registry_client().lookup_state(code), "UF", code)
