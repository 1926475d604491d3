"""LocationCache model: resolved place names keyed by normalized address."""

from sqlalchemy import Double, String
from sqlalchemy.orm import Mapped, mapped_column

from place_resolver.models.base import Base, TimestampMixin


class LocationCache(Base, TimestampMixin):
    """Cached resolution for one normalized address.

    Rows are only written when a location name was found; coordinates are
    nullable for entries resolved without coordinate tracking.
    """

    __tablename__ = "location_cache"

    address: Mapped[str] = mapped_column(String, primary_key=True)
    location_name: Mapped[str | None] = mapped_column(String, nullable=True)
    formatted_address: Mapped[str | None] = mapped_column(String, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Double, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Double, nullable=True)
