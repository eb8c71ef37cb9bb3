import logging

from flask import Blueprint, request, jsonify

from pharmacy_registry.auth import current_actor_context
from pharmacy_registry.container import get_pharmacy_service
from pharmacy_registry.domain.exceptions import DomainError, InvalidInputError
from pharmacy_registry.error_codes import error_response
from pharmacy_registry.infrastructure.security.rate_limiter import mutation_limit

logger = logging.getLogger("pharmacy-registry.routes")

pharmacy_bp = Blueprint('pharmacies', __name__, url_prefix='/api/pharmacies')


@pharmacy_bp.errorhandler(DomainError)
def handle_domain_error(e):
    if e.retryable:
        logger.warning(f"⚠️ {e.tag}: {e.message}")
    else:
        logger.info(f"🚫 {e.tag}: {e.message}")
    return error_response(e)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInputError("Corpo da requisição deve ser um objeto JSON")
    return data


@pharmacy_bp.route('', methods=['POST'])
@mutation_limit()
def create_pharmacy():
    result = get_pharmacy_service().create(_json_body(), current_actor_context())
    return jsonify(result), 201


@pharmacy_bp.route('/<cnpj>', methods=['GET'])
def get_pharmacy(cnpj):
    return jsonify(get_pharmacy_service().get(cnpj, current_actor_context()))


@pharmacy_bp.route('/<cnpj>', methods=['PATCH'])
@mutation_limit()
def update_pharmacy(cnpj):
    result = get_pharmacy_service().update(cnpj, _json_body(), current_actor_context())
    return jsonify(result)


@pharmacy_bp.route('/<cnpj>/deactivate', methods=['POST'])
@mutation_limit()
def deactivate_pharmacy(cnpj):
    return jsonify(get_pharmacy_service().deactivate(cnpj, current_actor_context()))


@pharmacy_bp.route('/<cnpj>/reactivate', methods=['POST'])
@mutation_limit()
def reactivate_pharmacy(cnpj):
    return jsonify(get_pharmacy_service().reactivate(cnpj, current_actor_context()))


@pharmacy_bp.route('/<cnpj>/history', methods=['GET'])
def pharmacy_history(cnpj):
    return jsonify({'cnpj': cnpj, 'history': get_pharmacy_service().get_history(cnpj, current_actor_context())})
