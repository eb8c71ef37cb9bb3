# Security module - rate limiting utilities
from .rate_limiter import limiter, init_limiter, mutation_limit, lookup_limit

__all__ = [
    'limiter',
    'init_limiter',
    'mutation_limit',
    'lookup_limit',
]
