"""In-memory donor repository."""
import itertools
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from donor_registry.repositories.donor_repository import (
    DonorRecord,
    DonorRepository,
    DuplicateContactError,
    GroupCounts,
)
from donor_registry.services.donor_intake import ValidatedDonor


class InMemoryDonorRepository(DonorRepository):

    def __init__(self, clock=None) -> None:
        self._donors: Dict[int, DonorRecord] = {}
        self._ids = itertools.count(1)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _contact_taken(self, contact: str, exclude_id: Optional[int] = None) -> bool:
        return any(
            d.contact == contact and d.id != exclude_id
            for d in self._donors.values()
        )

    def create(self, donor: ValidatedDonor) -> DonorRecord:
        if self._contact_taken(donor.contact):
            raise DuplicateContactError(donor.contact)
        record = DonorRecord(
            id=next(self._ids),
            name=donor.name,
            contact=donor.contact,
            blood_group=donor.blood_group,
            last_donation_date=donor.last_donation_date,
            available=donor.available,
            created_at=self._clock(),
        )
        self._donors[record.id] = record
        return record

    def get(self, donor_id: int) -> Optional[DonorRecord]:
        return self._donors.get(donor_id)

    def update(self, donor_id: int, donor: ValidatedDonor) -> Optional[DonorRecord]:
        existing = self._donors.get(donor_id)
        if existing is None:
            return None
        if self._contact_taken(donor.contact, exclude_id=donor_id):
            raise DuplicateContactError(donor.contact)
        # created_at is kept
        record = replace(
            existing,
            name=donor.name,
            contact=donor.contact,
            blood_group=donor.blood_group,
            last_donation_date=donor.last_donation_date,
            available=donor.available,
        )
        self._donors[donor_id] = record
        return record

    def list(
        self,
        blood_group: Optional[str] = None,
        available: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[DonorRecord]:
        rows = [
            d for d in self._donors.values()
            if (not blood_group or d.blood_group == blood_group)
            and (available is None or d.available == available)
        ]
        rows.sort(key=lambda d: (d.created_at, d.id), reverse=True)
        return rows[:limit] if limit is not None else rows

    def aggregate(self, blood_groups: Sequence[str]) -> GroupCounts:
        counts = GroupCounts.empty(blood_groups)
        for d in self._donors.values():
            counts.add(d.blood_group, d.available)
        return counts
