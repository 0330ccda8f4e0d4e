from fastapi import APIRouter, Depends
from donor_registry.api.dependencies import get_policy, get_repository
from donor_registry.core.config import settings
from donor_registry.repositories import DonorRepository
from donor_registry.schemas.donor import DashboardResponse
from donor_registry.services.eligibility import EligibilityPolicy

router = APIRouter()

@router.get("", response_model=DashboardResponse)
def get_dashboard(
    repo: DonorRepository = Depends(get_repository),
    policy: EligibilityPolicy = Depends(get_policy),
):
    """Donor totals overall and per blood group."""
    counts = repo.aggregate(policy.blood_groups)
    return DashboardResponse(
        totalUsers=counts.total_count,
        availableUsers=counts.available_count,
        unavailableUsers=counts.total_count - counts.available_count,
        byGroup=counts.total,
        availableByGroup=counts.available,
        groups=list(policy.blood_groups),
        cooldownDays=policy.cooldown_days,
        appName=settings.APP_NAME,
    )
