from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Union
from datetime import datetime

RawValue = Union[str, bool, int, float, None]

class DonorPayload(BaseModel):
    """Raw donor fields as posted by the form; validation happens in DonorIntake."""
    model_config = ConfigDict(populate_by_name=True)

    name: RawValue = None
    contact: Optional[Union[str, int]] = Field(None, alias="contactNumber")
    blood_group: RawValue = Field(None, alias="bloodGroup")
    last_donation_date: RawValue = Field(None, alias="lastDonationDate")
    available: RawValue = None
    eligible: RawValue = None

    def to_intake(self) -> dict:
        return self.model_dump(by_alias=False)

class DonorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    contact: str
    blood_group: str
    last_donation_date: Optional[str] = None
    available: bool
    next_eligible_date: Optional[str] = None
    created_at: Optional[datetime] = None

class DonorListResponse(BaseModel):
    ok: bool = True
    data: List[DonorResponse]

class DonorCreatedResponse(BaseModel):
    ok: bool = True
    id: int

class OkResponse(BaseModel):
    ok: bool = True

class FieldErrorResponse(BaseModel):
    field: str
    code: str
    message: str

class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    errors: Optional[List[FieldErrorResponse]] = None

class DashboardResponse(BaseModel):
    ok: bool = True
    totalUsers: int
    availableUsers: int
    unavailableUsers: int
    byGroup: Dict[str, int]
    availableByGroup: Dict[str, int]
    groups: List[str]
    cooldownDays: int
    appName: str
