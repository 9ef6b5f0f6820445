from datetime import datetime, timezone
from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from radiotrack.database import Base


class RecordCollection(Base):
    """One row per named collection; the whole record list lives in `payload`.

    `revision` changes on every save and is the compare-and-swap token.
    """

    __tablename__ = "record_collections"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    revision: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
