from pydantic import BaseModel
from typing import List, Optional
from datetime import date

class EmployeeAttendanceSummary(BaseModel):
    employee_id: int
    employee_code: str
    name: str
    designation: Optional[str] = None
    joining_date: Optional[date] = None
    gross_remuneration: float = 0
    days_worked: int = 0
    casual_leave: float = 0
    days_absent: int = 0
    weekly_offs: int = 0
    holidays: int = 0
    lwp_days: int = 0
    total_days: int = 0
    payable_days: int = 0

class AttendanceSummaryResponse(BaseModel):
    success: bool = True
    month: int
    year: int
    is_current_month: bool = False
    message: Optional[str] = None
    days_in_month: Optional[int] = None
    employees: List[EmployeeAttendanceSummary]
