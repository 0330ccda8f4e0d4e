"""
Intake/update validation for donor records.
Every check runs independently so a caller sees all failing fields at once.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional

from donor_registry.services.eligibility import (
    AvailabilityFlag,
    EligibilityPolicy,
    parse_calendar_date,
    parse_manual_availability_flag,
    to_date,
    validate_contact,
)

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 2


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "code": self.code, "message": self.message}


class DonorValidationError(Exception):
    """One or more donor fields failed validation."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__(self.errors[0].message if self.errors else "Invalid donor record.")

    @property
    def message(self) -> str:
        return str(self)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self.errors]


@dataclass(frozen=True)
class ValidatedDonor:
    name: str
    contact: str
    blood_group: str
    last_donation_date: date
    available: bool


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


class DonorIntake:
    """
    Validates raw donor fields against an EligibilityPolicy.

    With require_manual_flag=True (the HTTP behaviour) a missing availability
    flag is an error; with False it is derived from the last donation date.
    """

    def __init__(self, policy: EligibilityPolicy, require_manual_flag: bool = True):
        self.policy = policy
        self.require_manual_flag = require_manual_flag

    def validate(self, payload: Mapping[str, Any], today: Optional[date] = None) -> ValidatedDonor:
        errors: List[FieldError] = []

        name = payload.get("name")
        name = name.strip() if isinstance(name, str) else ""
        if len(name) < NAME_MIN_LENGTH:
            errors.append(FieldError("name", "name_too_short", "Name is required (min 2 chars)."))

        contact = payload.get("contact")
        contact = str(contact).strip() if contact is not None else ""
        if not contact or not validate_contact(contact):
            errors.append(FieldError("contact", "invalid_contact", "Valid contact number is required."))

        blood_group = payload.get("blood_group")
        if not self.policy.validate_blood_group(blood_group):
            errors.append(FieldError("blood_group", "invalid_blood_group", "Blood group is required."))

        last_donation = self._check_last_donation(payload.get("last_donation_date"), today, errors)

        flag = parse_manual_availability_flag(_first_present(payload, "available", "eligible"))
        if flag is AvailabilityFlag.UNSET and self.require_manual_flag:
            errors.append(
                FieldError("available", "missing_availability", "Eligible to donate (Yes/No) is required.")
            )

        if errors:
            logger.info(f"Donor validation failed: {', '.join(e.code for e in errors)}")
            raise DonorValidationError(errors)

        return ValidatedDonor(
            name=name,
            contact=contact,
            blood_group=blood_group,
            last_donation_date=last_donation,
            available=self.policy.resolve_availability(flag, last_donation, today),
        )

    def _check_last_donation(self, raw: Any, today: Optional[date], errors: List[FieldError]) -> Optional[date]:
        if raw is None or raw == "":
            errors.append(FieldError("last_donation_date", "missing_date", "Last donation date is required."))
            return None
        iso = parse_calendar_date(raw)
        if iso is None:
            errors.append(FieldError("last_donation_date", "invalid_date_format", "Last donation must be YYYY-MM-DD."))
            return None
        parsed = to_date(iso)
        if parsed is None:
            errors.append(
                FieldError(
                    "last_donation_date",
                    "invalid_calendar_date",
                    "Last donation must be a real calendar date.",
                )
            )
            return None
        if not self.policy.is_within_allowed_window(iso, today):
            window = self.policy.allowed_donation_window(today)
            errors.append(
                FieldError(
                    "last_donation_date",
                    "outside_window",
                    f"Last donation must be between {window.min_date} and {window.max_date}.",
                )
            )
            return None
        return parsed
