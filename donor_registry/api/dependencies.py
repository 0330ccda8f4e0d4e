"""FastAPI dependency providers for the policy and donor storage."""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from donor_registry.core.config import settings
from donor_registry.database.database import get_db
from donor_registry.repositories import DonorRepository, SqlAlchemyDonorRepository
from donor_registry.services.donor_intake import DonorIntake
from donor_registry.services.eligibility import EligibilityPolicy, PolicyConfig


@lru_cache
def get_policy() -> EligibilityPolicy:
    return EligibilityPolicy(PolicyConfig(cooldown_days=settings.DONATION_COOLDOWN_DAYS))


def get_intake(policy: EligibilityPolicy = Depends(get_policy)) -> DonorIntake:
    # Availability must be declared explicitly on every save
    return DonorIntake(policy, require_manual_flag=True)


def get_repository(db: Session = Depends(get_db)) -> DonorRepository:
    return SqlAlchemyDonorRepository(db)
