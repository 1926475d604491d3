"""ORM model registry. Import all models so Alembic autogenerate discovers them."""

from place_resolver.models.api_audit_log import ApiAuditLog
from place_resolver.models.location_cache import LocationCache

__all__ = [
    "ApiAuditLog",
    "LocationCache",
]
