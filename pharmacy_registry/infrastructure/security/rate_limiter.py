"""
Rate limiting configuration for the application.

Provides centralized rate limiting that can be imported across blueprints
without circular import issues. Disabled when RATELIMIT_ENABLED is false.
"""

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address


# Create limiter instance - will be initialized with app later.
# ProxyFix already rewrote remote_addr from X-Forwarded-For.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri="memory://",
    strategy="fixed-window"
)


def init_limiter(app):
    """Initialize the limiter with the Flask app."""
    limiter.init_app(app)


def mutation_limit():
    """Rate limit for establishment writes: 30 per minute per IP."""
    return limiter.limit("30 per minute", error_message="Limite de alterações excedido. Aguarde um minuto.")


def lookup_limit():
    """Rate limit for registry lookups: 120 per minute per IP."""
    return limiter.limit("120 per minute", error_message="Limite de consultas excedido.")
