"""ApiAuditLog model for upstream API usage tracking."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from place_resolver.models.base import Base, UUIDMixin


class ApiAuditLog(Base, UUIDMixin):
    """Immutable record of one upstream API call or cache-served lookup."""

    __tablename__ = "api_audit_logs"

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    api_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    endpoint_url: Mapped[str | None] = mapped_column(String(255), nullable=True)
    request_query: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cache_hit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    correlation_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
