from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import DateTime, String, ForeignKey, Index
from core.database import Base

class OutOfOfficeEntry(Base):
    __tablename__ = "out_of_office_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    uuid: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)

    start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end:   Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # owner who is away
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # delegate receiving redirected bookings
    to_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # relationships
    user = relationship("User", foreign_keys=[user_id], back_populates="out_of_office_entries")
    to_user = relationship("User", foreign_keys=[to_user_id])

    __table_args__ = (
        Index("ix_ooo_user_start", "user_id", "start"),
    )
