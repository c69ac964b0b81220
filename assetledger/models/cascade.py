from datetime import datetime, timezone
from sqlalchemy import Integer, String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from assetledger.database import Base


class CascadeRun(Base):
    """Persisted saga: ordered steps plus a cursor so an interrupted cascade can be resumed."""

    __tablename__ = "cascade_runs"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    kind: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subject_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # [{"op", "target_id", "best_effort", "payload"}]
    steps: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    # One entry per step index, None until executed
    results: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    cursor: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="running", nullable=False, index=True)  # running/completed/partial/aborted
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
