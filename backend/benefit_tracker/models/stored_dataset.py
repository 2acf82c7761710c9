from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from benefit_tracker.database import Base


class StoredDataset(Base):
    """The whole card record set, stored as one JSON document per key."""

    __tablename__ = "stored_datasets"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[list] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
