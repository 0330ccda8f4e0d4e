from fastapi import APIRouter, Depends, HTTPException, status
from typing import Optional
import logging
from donor_registry.api.dependencies import get_intake, get_policy, get_repository
from donor_registry.core.config import settings
from donor_registry.repositories import DonorRecord, DonorRepository
from donor_registry.schemas.donor import (
    DonorCreatedResponse,
    DonorListResponse,
    DonorPayload,
    DonorResponse,
    OkResponse,
)
from donor_registry.services.donor_intake import DonorIntake
from donor_registry.services.eligibility import (
    EligibilityPolicy,
    parse_availability_filter,
    to_canonical_form,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def to_response(record: DonorRecord, policy: EligibilityPolicy) -> DonorResponse:
    last_iso = to_canonical_form(record.last_donation_date)
    return DonorResponse(
        id=record.id,
        name=record.name,
        contact=record.contact,
        blood_group=record.blood_group,
        last_donation_date=last_iso,
        available=record.available,
        next_eligible_date=policy.next_eligible_date(last_iso),
        created_at=record.created_at,
    )


def clamp_limit(raw: Optional[str]) -> int:
    """Non-numeric or zero falls back to the default; the rest is clamped to [1, max]."""
    try:
        value = int(str(raw).strip()) if raw not in (None, "") else 0
    except (ValueError, OverflowError):
        value = 0
    if not value:
        value = settings.LIST_DEFAULT_LIMIT
    return max(1, min(settings.LIST_MAX_LIMIT, value))


def parse_list_filters(
    blood_group: Optional[str],
    availability: Optional[str],
    policy: EligibilityPolicy,
):
    if blood_group and not policy.validate_blood_group(blood_group):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid blood group")
    try:
        available = parse_availability_filter(availability)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid availability filter")
    return blood_group or None, available


@router.get("", response_model=DonorListResponse)
def list_donors(
    bloodGroup: Optional[str] = None,
    availability: Optional[str] = None,
    limit: Optional[str] = None,
    repo: DonorRepository = Depends(get_repository),
    policy: EligibilityPolicy = Depends(get_policy),
):
    """List donors, newest first, optionally filtered by blood group and availability."""
    blood_group, available = parse_list_filters(bloodGroup, availability, policy)
    records = repo.list(blood_group=blood_group, available=available, limit=clamp_limit(limit))
    return DonorListResponse(data=[to_response(r, policy) for r in records])


@router.get("/{donor_id}", response_model=DonorResponse)
def get_donor(
    donor_id: int,
    repo: DonorRepository = Depends(get_repository),
    policy: EligibilityPolicy = Depends(get_policy),
):
    """Get a specific donor by ID."""
    record = repo.get(donor_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Donor not found")
    return to_response(record, policy)


@router.post("", response_model=DonorCreatedResponse)
def create_donor(
    payload: DonorPayload,
    repo: DonorRepository = Depends(get_repository),
    intake: DonorIntake = Depends(get_intake),
):
    """Register a new donor. Every field is required."""
    donor = intake.validate(payload.to_intake())
    record = repo.create(donor)

    logger.info(f"Donor created: id={record.id} blood_group={record.blood_group} available={record.available}")
    return DonorCreatedResponse(id=record.id)


@router.put("/{donor_id}", response_model=OkResponse)
def update_donor(
    donor_id: int,
    payload: DonorPayload,
    repo: DonorRepository = Depends(get_repository),
    intake: DonorIntake = Depends(get_intake),
):
    """Replace every field of a donor; partial updates are not supported."""
    if donor_id <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid id")
    if not repo.get(donor_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Donor not found")

    donor = intake.validate(payload.to_intake())
    repo.update(donor_id, donor)

    logger.info(f"Donor updated: id={donor_id}")
    return OkResponse()
