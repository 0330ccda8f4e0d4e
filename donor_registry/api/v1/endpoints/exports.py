from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import Optional
import logging
from donor_registry.api.dependencies import get_policy, get_repository
from donor_registry.api.v1.endpoints.donors import parse_list_filters
from donor_registry.core.config import settings
from donor_registry.repositories import DonorRepository
from donor_registry.services.eligibility import EligibilityPolicy
from donor_registry.services.reporting import build_export

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/donors")
def export_donors(
    bloodGroup: Optional[str] = None,
    availability: Optional[str] = None,
    fmt: str = Query("xlsx", alias="format"),
    repo: DonorRepository = Depends(get_repository),
    policy: EligibilityPolicy = Depends(get_policy),
):
    """Download every matching donor plus a per-blood-group summary as XLSX or CSV."""
    fmt = fmt.lower()
    if fmt not in ("xlsx", "csv"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid export format")

    blood_group, available = parse_list_filters(bloodGroup, availability, policy)
    records = repo.list(blood_group=blood_group, available=available)

    try:
        export = build_export(records, policy, fmt=fmt, app_name=settings.APP_NAME)
    except Exception as e:
        logger.error(f"Export failed: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Export failed")

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
