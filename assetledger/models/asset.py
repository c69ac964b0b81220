import enum
from datetime import datetime, timezone
from sqlalchemy import Integer, ForeignKey, String, DateTime, JSON, CheckConstraint, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column
from assetledger.database import Base


class AssetStatus(str, enum.Enum):
    available = "Available"
    assigned = "Assigned"
    donated = "Donated"
    e_waste = "E-Waste"


RETIRED_STATUSES = (AssetStatus.donated, AssetStatus.e_waste)


class Ownership(str, enum.Enum):
    own = "Own"
    rented = "Rented"


class Asset(Base):
    """status and assigned_to are written together by services.assignment_service.apply_state only."""

    __tablename__ = "assets"

    __table_args__ = (
        CheckConstraint(
            "(assigned_to IS NULL AND status != 'Assigned') OR (assigned_to IS NOT NULL AND status = 'Assigned')",
            name="ck_assets_assignment_consistent",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    asset_tag: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    serial_number: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    make: Mapped[str | None] = mapped_column(String(128), nullable=True)
    model: Mapped[str | None] = mapped_column(String(128), nullable=True)
    asset_type: Mapped[str | None] = mapped_column(String(128), nullable=True)
    ownership: Mapped[Ownership] = mapped_column(
        SAEnum(Ownership, values_callable=lambda e: [x.value for x in e]),
        default=Ownership.own,
        nullable=False,
    )
    purchase_from: Mapped[str | None] = mapped_column(String(255), nullable=True)
    processor: Mapped[str | None] = mapped_column(String(128), nullable=True)
    ram: Mapped[str | None] = mapped_column(String(64), nullable=True)
    storage: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[AssetStatus] = mapped_column(
        SAEnum(AssetStatus, values_callable=lambda e: [x.value for x in e]),
        default=AssetStatus.available,
        nullable=False,
    )
    assigned_to: Mapped[int | None] = mapped_column(ForeignKey("employees.id"), nullable=True, index=True)
    comments: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    audit_log: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __mapper_args__ = {"version_id_col": version}
