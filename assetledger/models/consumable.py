import enum
from datetime import datetime, timezone, date
from decimal import Decimal
from sqlalchemy import Integer, String, DateTime, Date, Numeric, JSON, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from assetledger.database import Base


class IssueStatus(str, enum.Enum):
    active = "Active"
    reversed = "Reversed"


class Consumable(Base):
    __tablename__ = "consumables"

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_consumables_quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)
    unit_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    cost_per_item: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    remarks: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # Total stock ever received (creation + restocks)
    initial_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    issue_log: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
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
