"""
Session layer: resolves the bearer token of an API request to a user and
the organization selected in that session.

Credentials are verified elsewhere; here the token is only looked up in
user_sessions and rejected once expired.
"""
import logging

from flask import request
from flask_login import LoginManager, current_user

from pharmacy_registry.container import get_uow
from pharmacy_registry.database import OPERATIONAL_STORE, store_errors
from pharmacy_registry.domain.entities.actor import ActorContext

auth_logger = logging.getLogger("pharmacy-registry.auth")

login_manager = LoginManager()


def _bearer_token():
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


@login_manager.request_loader
def load_user_from_request(req):
    token = _bearer_token()
    if not token:
        return None

    uow = get_uow()
    with store_errors(OPERATIONAL_STORE):
        user_session = uow.sessions.get_active_by_token(token)
        if not user_session:
            auth_logger.debug("⚠️ [request_loader] Token desconhecido ou expirado")
            return None
        user = uow.users.get_by_id(user_session.user_id)

    if user is None:
        auth_logger.warning(f"⚠️ [request_loader] Sessão aponta para usuário inexistente: {user_session.user_id}")
        return None

    user.active_organization_id = user_session.active_organization_id
    auth_logger.debug(f"✅ [request_loader] Usuário autenticado: {user.id}")
    return user


def current_actor_context() -> ActorContext:
    """
    Explicit context for the mutation pipeline. Anonymous requests get an
    empty context; the Access Guard turns that into Unauthenticated.
    """
    origin = request.remote_addr
    if not current_user or not current_user.is_authenticated:
        return ActorContext(origin=origin)
    return ActorContext(
        actor_id=current_user.id,
        active_organization_id=current_user.active_organization_id,
        origin=origin,
    )
