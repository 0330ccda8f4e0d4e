"""
Eligibility policy: donor field checks, availability and donation windows.
Pure functions plus an EligibilityPolicy built from an explicit PolicyConfig.
Nothing here touches the database or reads settings.
"""
import enum
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, NamedTuple, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

BLOOD_GROUPS: Tuple[str, ...] = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")
DEFAULT_COOLDOWN_DAYS = 90
WINDOW_YEARS = 2
CONTACT_MIN_DIGITS = 7
CONTACT_MAX_DIGITS = 15

DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
NON_DIGITS = re.compile(r"[^0-9]")

AVAILABLE_TOKENS = frozenset({"1", "true", "yes", "y", "available"})
UNAVAILABLE_TOKENS = frozenset({"0", "false", "no", "n", "unavailable"})
FILTER_AVAILABLE_TOKENS = frozenset({"1", "true", "available"})
FILTER_UNAVAILABLE_TOKENS = frozenset({"0", "false", "unavailable"})

DateLike = Union[date, datetime, str, None]


class AvailabilityFlag(str, enum.Enum):
    TRUE = "true"
    FALSE = "false"
    UNSET = "unset"


class InvalidCalendarDate(ValueError):
    """Raised when a YYYY-MM-DD shaped value is not a real calendar date."""


class DonationWindow(NamedTuple):
    min_date: str
    max_date: str


def normalize_contact(raw: Any) -> str:
    if raw is None:
        return ""
    return NON_DIGITS.sub("", str(raw))


def validate_contact(raw: Any) -> bool:
    """Valid iff the value holds 7-15 digits once every non-digit is stripped."""
    digits = normalize_contact(raw)
    return CONTACT_MIN_DIGITS <= len(digits) <= CONTACT_MAX_DIGITS


def validate_blood_group(raw: Any, blood_groups: Tuple[str, ...] = BLOOD_GROUPS) -> bool:
    # Case-sensitive: "ab+" is not a blood group
    return isinstance(raw, str) and raw in blood_groups


def parse_calendar_date(raw: Any) -> Optional[str]:
    """
    Shape check only: returns the string when it looks like YYYY-MM-DD.
    "2024-13-45" passes; use to_date() to find out whether it is a real date.
    """
    if raw is None or raw == "":
        return None
    s = str(raw)
    return s if DATE_SHAPE.fullmatch(s) else None


def to_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Strings must be canonical YYYY-MM-DD; no ISO datetimes or basic "20240115"
    s = parse_calendar_date(value)
    if s is None:
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


def to_canonical_form(value: DateLike) -> Optional[str]:
    d = to_date(value)
    return d.isoformat() if d else None


def parse_manual_availability_flag(raw: Any) -> AvailabilityFlag:
    if raw is None or raw == "":
        return AvailabilityFlag.UNSET
    if isinstance(raw, bool):
        return AvailabilityFlag.TRUE if raw else AvailabilityFlag.FALSE
    token = str(raw).strip().lower()
    if token in AVAILABLE_TOKENS:
        return AvailabilityFlag.TRUE
    if token in UNAVAILABLE_TOKENS:
        return AvailabilityFlag.FALSE
    return AvailabilityFlag.UNSET


def parse_availability_filter(raw: Any) -> Optional[bool]:
    """
    Query-string availability filter. Returns None for "no filter" and
    raises ValueError for a token outside the accepted set.
    """
    if raw is None or raw == "":
        return None
    token = str(raw).strip().lower()
    if token in FILTER_AVAILABLE_TOKENS:
        return True
    if token in FILTER_UNAVAILABLE_TOKENS:
        return False
    raise ValueError(f"Invalid availability filter: {raw!r}")


@dataclass(frozen=True)
class PolicyConfig:
    cooldown_days: int = DEFAULT_COOLDOWN_DAYS
    blood_groups: Tuple[str, ...] = field(default=BLOOD_GROUPS)
    window_years: int = WINDOW_YEARS


class EligibilityPolicy:
    """Stateless once built; safe to share between request threads."""

    def __init__(self, config: Optional[PolicyConfig] = None):
        config = config or PolicyConfig()
        if config.cooldown_days < 0:
            raise ValueError(f"cooldown_days must be non-negative, got {config.cooldown_days}")
        self.config = config

    @property
    def cooldown_days(self) -> int:
        return self.config.cooldown_days

    @property
    def blood_groups(self) -> Tuple[str, ...]:
        return self.config.blood_groups

    @staticmethod
    def _today(today: Optional[date]) -> date:
        if today is None:
            return date.today()
        return today.date() if isinstance(today, datetime) else today

    def validate_blood_group(self, raw: Any) -> bool:
        return validate_blood_group(raw, self.blood_groups)

    def days_since(self, value: DateLike, today: Optional[date] = None) -> Union[int, float]:
        """
        Whole days between value and today, both taken at midnight.
        An absent date counts as infinitely long ago.
        """
        if value is None or value == "":
            return math.inf
        d = to_date(value)
        if d is None:
            raise InvalidCalendarDate(f"Not a calendar date: {value!r}")
        return (self._today(today) - d).days

    def compute_availability(self, last_donation_date: DateLike, today: Optional[date] = None) -> bool:
        return self.days_since(last_donation_date, today) >= self.cooldown_days

    def next_eligible_date(self, last_donation_date: DateLike) -> Optional[str]:
        d = to_date(last_donation_date)
        if d is None:
            return None
        return (d + timedelta(days=self.cooldown_days)).isoformat()

    def allowed_donation_window(self, today: Optional[date] = None) -> DonationWindow:
        max_d = self._today(today)
        # Calendar years, not 730 days: Feb 29 falls back to Feb 28
        min_d = max_d - relativedelta(years=self.config.window_years)
        return DonationWindow(min_d.isoformat(), max_d.isoformat())

    def is_within_allowed_window(self, value: DateLike, today: Optional[date] = None) -> bool:
        iso = to_canonical_form(value)
        if iso is None:
            return False
        window = self.allowed_donation_window(today)
        return window.min_date <= iso <= window.max_date

    def resolve_availability(
        self,
        flag: AvailabilityFlag,
        last_donation_date: DateLike,
        today: Optional[date] = None,
    ) -> bool:
        """Manual override wins; UNSET falls back to the date-derived value."""
        if flag is AvailabilityFlag.TRUE:
            return True
        if flag is AvailabilityFlag.FALSE:
            return False
        return self.compute_availability(last_donation_date, today)
