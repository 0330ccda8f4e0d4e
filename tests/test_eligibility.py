"""Unit tests for the eligibility policy: shapes, cooldown, next date, allowed window, flags."""
import math
from datetime import date, datetime, timedelta

import pytest

from donor_registry.services.eligibility import (
    BLOOD_GROUPS,
    AvailabilityFlag,
    EligibilityPolicy,
    InvalidCalendarDate,
    PolicyConfig,
    normalize_contact,
    parse_availability_filter,
    parse_calendar_date,
    parse_manual_availability_flag,
    to_canonical_form,
    to_date,
    validate_blood_group,
    validate_contact,
)


def days_ago(today, n):
    return (today - timedelta(days=n)).isoformat()


# -- contact -------------------------------------------------------------

def test_contact_with_punctuation_is_valid():
    assert normalize_contact("+1 (555) 123-4567") == "15551234567"
    assert validate_contact("+1 (555) 123-4567")


def test_contact_digit_count_bounds():
    assert not validate_contact("12345")
    assert not validate_contact("123456")
    assert validate_contact("1234567")
    assert validate_contact("1" * 15)
    assert not validate_contact("1" * 16)


def test_contact_missing_or_empty():
    assert not validate_contact(None)
    assert not validate_contact("")
    assert not validate_contact("call me")


# -- blood group ---------------------------------------------------------

def test_blood_group_enumeration_order():
    assert BLOOD_GROUPS == ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")


def test_blood_group_is_case_sensitive():
    assert validate_blood_group("AB+")
    assert not validate_blood_group("ab+")
    assert not validate_blood_group(" AB+")
    assert not validate_blood_group("C+")
    assert not validate_blood_group(None)


# -- dates ---------------------------------------------------------------

@pytest.mark.parametrize("raw", ["2024-01-31", "2024-13-45", "0000-00-00"])
def test_parse_calendar_date_accepts_shape(raw):
    assert parse_calendar_date(raw) == raw


@pytest.mark.parametrize(
    "raw",
    [None, "", "2024-1-31", "24-01-31", "2024/01/31", "2024-01-31T00:00", " 2024-01-31", "20240131"],
)
def test_parse_calendar_date_rejects_other_shapes(raw):
    assert parse_calendar_date(raw) is None


def test_canonical_form_round_trip():
    for s in ("2024-02-29", "2023-12-31", "2025-01-01"):
        assert to_canonical_form(parse_calendar_date(s)) == s


def test_canonical_form_of_date_and_datetime():
    assert to_canonical_form(date(2024, 3, 7)) == "2024-03-07"
    assert to_canonical_form(datetime(2024, 3, 7, 23, 59)) == "2024-03-07"
    assert to_canonical_form(None) is None
    assert to_canonical_form("not a date") is None


def test_impossible_date_is_not_a_calendar_date():
    assert to_date("2024-13-45") is None
    assert to_date("2023-02-29") is None
    assert to_date("2024-02-29") == date(2024, 2, 29)


@pytest.mark.parametrize("raw", ["20240115", "2024-01-15T23:00", "2024-01-15 08:00:00", " 2024-01-15"])
def test_non_canonical_strings_are_not_dates(raw):
    assert to_date(raw) is None
    assert to_canonical_form(raw) is None


# -- days since / availability -------------------------------------------

def test_days_since_absent_is_infinite(policy, today):
    assert policy.days_since(None, today) == math.inf
    assert policy.days_since("", today) == math.inf


def test_days_since_counts_whole_days(policy, today):
    assert policy.days_since(today, today) == 0
    assert policy.days_since(days_ago(today, 1), today) == 1
    assert policy.days_since(date(2024, 6, 15), today) == 365


def test_days_since_rejects_impossible_date(policy, today):
    with pytest.raises(InvalidCalendarDate):
        policy.days_since("2024-13-45", today)


@pytest.mark.parametrize("days, expected", [(91, True), (90, True), (89, False), (0, False)])
def test_cooldown_boundary_is_inclusive(policy, today, days, expected):
    assert policy.compute_availability(days_ago(today, days), today) is expected


def test_absent_date_is_always_available(policy, today):
    results = {policy.compute_availability(None, today) for _ in range(3)}
    assert results == {True}
    assert {policy.next_eligible_date(None) for _ in range(3)} == {None}


def test_zero_cooldown_makes_everyone_available(today):
    policy = EligibilityPolicy(PolicyConfig(cooldown_days=0))
    assert policy.compute_availability(today, today)


def test_negative_cooldown_rejected():
    with pytest.raises(ValueError):
        EligibilityPolicy(PolicyConfig(cooldown_days=-1))


# -- next eligible date --------------------------------------------------

def test_next_eligible_date_adds_cooldown(policy):
    assert policy.next_eligible_date("2025-01-01") == "2025-04-01"
    assert policy.next_eligible_date(date(2024, 12, 1)) == "2025-03-01"


def test_next_eligible_date_matches_cooldown_for_other_values():
    policy = EligibilityPolicy(PolicyConfig(cooldown_days=56))
    assert policy.next_eligible_date("2024-02-10") == (date(2024, 2, 10) + timedelta(days=56)).isoformat()


def test_next_eligible_date_unparsable(policy):
    assert policy.next_eligible_date("2024-13-45") is None
    assert policy.next_eligible_date("garbage") is None
    assert policy.next_eligible_date("20240115") is None
    assert policy.next_eligible_date("2024-01-15T23:00") is None


# -- allowed window ------------------------------------------------------

def test_allowed_window_uses_calendar_years(policy, today):
    window = policy.allowed_donation_window(today)
    assert window.max_date == "2025-06-15"
    assert window.min_date == "2023-06-15"


def test_allowed_window_from_leap_day(policy):
    window = policy.allowed_donation_window(date(2024, 2, 29))
    assert window.min_date == "2022-02-28"


def test_window_boundaries(policy, today):
    assert policy.is_within_allowed_window("2025-06-15", today)
    assert policy.is_within_allowed_window("2023-06-15", today)
    assert not policy.is_within_allowed_window("2023-06-14", today)
    assert not policy.is_within_allowed_window("2025-06-16", today)


def test_window_rejects_missing_and_impossible(policy, today):
    assert not policy.is_within_allowed_window(None, today)
    assert not policy.is_within_allowed_window("2024-13-45", today)
    assert not policy.is_within_allowed_window("2025-01-15T10:00", today)


def test_days_since_rejects_non_canonical_string(policy, today):
    with pytest.raises(InvalidCalendarDate):
        policy.days_since("20250115", today)


# -- manual flag ---------------------------------------------------------

@pytest.mark.parametrize("raw", ["1", "true", "Yes", "y", "AVAILABLE", True, 1])
def test_manual_flag_true(raw):
    assert parse_manual_availability_flag(raw) is AvailabilityFlag.TRUE


@pytest.mark.parametrize("raw", ["0", "False", "no", "N", "unavailable", False, 0])
def test_manual_flag_false(raw):
    assert parse_manual_availability_flag(raw) is AvailabilityFlag.FALSE


@pytest.mark.parametrize("raw", [None, "", "maybe", "2"])
def test_manual_flag_unset(raw):
    assert parse_manual_availability_flag(raw) is AvailabilityFlag.UNSET


def test_manual_override_beats_computed(policy, today):
    recent = days_ago(today, 10)
    assert policy.resolve_availability(AvailabilityFlag.TRUE, recent, today) is True
    assert policy.resolve_availability(AvailabilityFlag.FALSE, None, today) is False
    assert policy.resolve_availability(AvailabilityFlag.UNSET, recent, today) is False
    assert policy.resolve_availability(AvailabilityFlag.UNSET, days_ago(today, 120), today) is True


# -- list filter ---------------------------------------------------------

def test_availability_filter_tokens():
    assert parse_availability_filter(None) is None
    assert parse_availability_filter("") is None
    assert parse_availability_filter("Available") is True
    assert parse_availability_filter("0") is False
    with pytest.raises(ValueError):
        parse_availability_filter("yes")
