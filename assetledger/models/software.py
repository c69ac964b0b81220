from datetime import datetime, timezone, date
from sqlalchemy import Integer, String, DateTime, Date, JSON
from sqlalchemy.orm import Mapped, mapped_column
from assetledger.database import Base


class Software(Base):
    __tablename__ = "software"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[str | None] = mapped_column(String(64), nullable=True)
    license_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_licenses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Employee ids, kept sorted and unique
    assigned_to: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    audit_log: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
