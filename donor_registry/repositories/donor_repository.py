"""Donor storage capability interface."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from donor_registry.services.donor_intake import ValidatedDonor


class DuplicateContactError(Exception):
    """Another donor already uses this contact number."""

    def __init__(self, contact: str):
        self.contact = contact
        super().__init__("Contact number already exists.")


@dataclass(frozen=True)
class DonorRecord:
    id: int
    name: str
    contact: str
    blood_group: str
    last_donation_date: Optional[date]
    available: bool
    created_at: datetime


@dataclass
class GroupCounts:
    total: Dict[str, int]
    available: Dict[str, int]

    @classmethod
    def empty(cls, blood_groups: Sequence[str]) -> "GroupCounts":
        return cls(
            total={g: 0 for g in blood_groups},
            available={g: 0 for g in blood_groups},
        )

    def add(self, blood_group: str, available: bool) -> None:
        if blood_group not in self.total:
            return
        self.total[blood_group] += 1
        if available:
            self.available[blood_group] += 1

    @property
    def total_count(self) -> int:
        return sum(self.total.values())

    @property
    def available_count(self) -> int:
        return sum(self.available.values())

    def unavailable(self, blood_group: str) -> int:
        return self.total[blood_group] - self.available[blood_group]


class DonorRepository(ABC):
    """Storage adapters implement this; the eligibility policy never sees them."""

    @abstractmethod
    def create(self, donor: ValidatedDonor) -> DonorRecord:
        """Insert a validated donor. Raises DuplicateContactError."""

    @abstractmethod
    def get(self, donor_id: int) -> Optional[DonorRecord]:
        """Look a donor up by id."""

    @abstractmethod
    def update(self, donor_id: int, donor: ValidatedDonor) -> Optional[DonorRecord]:
        """Replace every field of an existing donor. Returns None if it does not exist."""

    @abstractmethod
    def list(
        self,
        blood_group: Optional[str] = None,
        available: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[DonorRecord]:
        """Newest first."""

    @abstractmethod
    def aggregate(self, blood_groups: Sequence[str]) -> GroupCounts:
        """Total and available counts per blood group."""
