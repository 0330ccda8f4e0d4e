from datetime import date, datetime
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Enum, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from donor_registry.database.database import Base
from donor_registry.services.eligibility import BLOOD_GROUPS


class Donor(Base):
    __tablename__ = "donors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    contact: Mapped[str] = mapped_column(String(32), nullable=False)
    blood_group: Mapped[str] = mapped_column(
        Enum(*BLOOD_GROUPS, name="blood_group", native_enum=False, length=3),
        nullable=False,
        index=True,
    )
    last_donation_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )

    __table_args__ = (
        UniqueConstraint("contact", name="uq_donors_contact"),
        Index("ix_donors_blood_group_available", "blood_group", "available"),
    )

    def __repr__(self) -> str:
        return f"<Donor id={self.id} blood_group={self.blood_group} available={self.available}>"
