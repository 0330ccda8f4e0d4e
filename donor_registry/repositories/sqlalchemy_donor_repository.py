"""Donor repository backed by SQLAlchemy (PostgreSQL, MySQL or SQLite)."""
import logging
from typing import List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from donor_registry.models.donor import Donor
from donor_registry.repositories.donor_repository import (
    DonorRecord,
    DonorRepository,
    DuplicateContactError,
    GroupCounts,
)
from donor_registry.services.donor_intake import ValidatedDonor

logger = logging.getLogger(__name__)

CONTACT_CONSTRAINT = "uq_donors_contact"


def is_contact_conflict(exc: IntegrityError) -> bool:
    """
    PostgreSQL and MySQL name the violated constraint; SQLite names the column
    ("UNIQUE constraint failed: donors.contact").
    """
    message = str(exc.orig)
    return CONTACT_CONSTRAINT in message or "donors.contact" in message


def _to_record(row: Donor) -> DonorRecord:
    return DonorRecord(
        id=row.id,
        name=row.name,
        contact=row.contact,
        blood_group=row.blood_group,
        last_donation_date=row.last_donation_date,
        available=bool(row.available),
        created_at=row.created_at,
    )


class SqlAlchemyDonorRepository(DonorRepository):

    def __init__(self, db: Session):
        self.db = db

    def _contact_taken(self, contact: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(Donor.id).where(Donor.contact == contact)
        if exclude_id is not None:
            stmt = stmt.where(Donor.id != exclude_id)
        return self.db.execute(stmt).first() is not None

    def _commit(self, contact: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_contact_conflict(e):
                logger.error(f"Integrity error while saving donor: {e.orig}")
                raise
            logger.warning(f"Contact {contact} taken by a concurrent write")
            raise DuplicateContactError(contact) from e

    def create(self, donor: ValidatedDonor) -> DonorRecord:
        if self._contact_taken(donor.contact):
            raise DuplicateContactError(donor.contact)

        row = Donor(
            name=donor.name,
            contact=donor.contact,
            blood_group=donor.blood_group,
            last_donation_date=donor.last_donation_date,
            available=donor.available,
        )
        self.db.add(row)
        self._commit(donor.contact)
        self.db.refresh(row)
        return _to_record(row)

    def get(self, donor_id: int) -> Optional[DonorRecord]:
        row = self.db.get(Donor, donor_id)
        return _to_record(row) if row else None

    def update(self, donor_id: int, donor: ValidatedDonor) -> Optional[DonorRecord]:
        row = self.db.get(Donor, donor_id)
        if not row:
            return None
        if self._contact_taken(donor.contact, exclude_id=donor_id):
            raise DuplicateContactError(donor.contact)

        row.name = donor.name
        row.contact = donor.contact
        row.blood_group = donor.blood_group
        row.last_donation_date = donor.last_donation_date
        row.available = donor.available
        self._commit(donor.contact)
        self.db.refresh(row)
        return _to_record(row)

    def list(
        self,
        blood_group: Optional[str] = None,
        available: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[DonorRecord]:
        stmt = select(Donor)
        if blood_group:
            stmt = stmt.where(Donor.blood_group == blood_group)
        if available is not None:
            stmt = stmt.where(Donor.available == available)
        stmt = stmt.order_by(Donor.created_at.desc(), Donor.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return [_to_record(row) for row in self.db.scalars(stmt).all()]

    def aggregate(self, blood_groups: Sequence[str]) -> GroupCounts:
        counts = GroupCounts.empty(blood_groups)
        stmt = (
            select(Donor.blood_group, Donor.available, func.count(Donor.id))
            .group_by(Donor.blood_group, Donor.available)
        )
        for blood_group, available, count in self.db.execute(stmt).all():
            if blood_group not in counts.total:
                continue
            counts.total[blood_group] += int(count)
            if available:
                counts.available[blood_group] += int(count)
        return counts
