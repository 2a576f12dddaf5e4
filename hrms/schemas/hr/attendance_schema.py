from pydantic import BaseModel, validator
from typing import Optional, List
from datetime import date, datetime
from hrms.models.shared.enums import AttendanceStatus
from hrms.schemas.auth.user import UserSummary

MARKABLE_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.HALF_DAY)

class MarkStatusRequest(BaseModel):
    user_id: int
    status: AttendanceStatus
    attendance_date: Optional[date] = None
    remarks: Optional[str] = None

    @validator("status")
    def validate_status(cls, v):
        if v not in MARKABLE_STATUSES:
            raise ValueError("Status must be one of: present, absent, half-day")
        return v

class AutoCheckoutRequest(BaseModel):
    sweep_date: Optional[date] = None

class AttendanceResponse(BaseModel):
    id: int
    user_id: int
    attendance_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_in_ip: Optional[str] = None
    check_out_time: Optional[datetime] = None
    check_out_ip: Optional[str] = None
    working_hours: Optional[float] = None
    is_late: bool = False
    remarks: Optional[str] = None

    class Config:
        from_attributes = True

class AttendanceWithUser(AttendanceResponse):
    user: UserSummary

class AttendanceEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    attendance: Optional[AttendanceResponse] = None

class AttendanceStats(BaseModel):
    present: int = 0
    late: int = 0
    absent: int = 0
    half_day: int = 0
    on_leave: int = 0
    total_working_hours: float = 0

class AttendanceListResponse(BaseModel):
    success: bool = True
    month: int
    year: int
    attendance: List[AttendanceResponse]
    stats: AttendanceStats

class DailyAttendanceStats(BaseModel):
    total: int
    present: int
    absent: int
    late: int
    on_leave: int

class DailyAttendanceResponse(BaseModel):
    success: bool = True
    attendance_date: date
    attendance: List[AttendanceWithUser]
    absent_users: List[UserSummary]
    stats: DailyAttendanceStats

class AutoCheckoutResponse(BaseModel):
    success: bool = True
    message: str
    count: int
