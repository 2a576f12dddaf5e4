from pydantic import BaseModel, validator
from typing import Optional, List, Dict
from datetime import date, datetime
from hrms.models.shared.enums import LeaveType, LeaveStatus
from hrms.schemas.auth.user import UserSummary

class LeaveApply(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    number_of_days: Optional[float] = None
    reason: str
    contact_no: Optional[str] = None
    # Presence is checked by the service so the caller gets the ledger's own message
    person_in_charge: Optional[str] = None
    reporting_to_id: Optional[int] = None

    @validator("reason")
    def validate_reason(cls, v):
        if not v or not v.strip():
            raise ValueError("Reason is required")
        return v.strip()

    @validator("number_of_days")
    def validate_days(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Number of days must be positive")
        return v

class LeaveReview(BaseModel):
    remarks: Optional[str] = None

class LeaveBalanceSnapshot(BaseModel):
    casual_leave: float
    on_duty_leave: float
    leave_without_pay: float

class LeaveResponse(BaseModel):
    id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    number_of_days: float
    reason: str
    contact_no: Optional[str] = None
    person_in_charge: str
    reporting_to_id: int
    status: LeaveStatus
    applied_on: Optional[datetime] = None
    reviewed_by_id: Optional[int] = None
    reviewed_on: Optional[datetime] = None
    review_remarks: Optional[str] = None
    leave_balance_before: Optional[Dict[str, float]] = None
    leave_balance_after: Optional[Dict[str, float]] = None

    class Config:
        from_attributes = True

class LeaveWithUser(LeaveResponse):
    user: UserSummary

class LeaveBalance(BaseModel):
    year: int
    entitlement: float
    approved_days: float
    half_day_days: float
    availed: float
    remaining: float
    on_duty_leave: float
    leave_without_pay: float

class LeaveEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    leave: LeaveResponse

class LeaveDetailResponse(BaseModel):
    success: bool = True
    leave: LeaveWithUser

class LeaveListResponse(BaseModel):
    success: bool = True
    count: int
    leaves: List[LeaveWithUser]

class MyLeavesResponse(BaseModel):
    success: bool = True
    count: int
    leaves: List[LeaveResponse]
    leave_balance: LeaveBalance

class LeaveBalanceResponse(BaseModel):
    success: bool = True
    leave_balance: LeaveBalance
