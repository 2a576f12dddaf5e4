from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class DashboardStats(BaseModel):
    total_employees: int
    present_today: int
    on_leave: int
    pending_leaves: int

class EmployeeAttendanceRow(BaseModel):
    user_id: int
    name: str
    role: str
    status: str
    check_in: Optional[datetime] = None

class Activity(BaseModel):
    text: str
    type: str
    occurred_at: Optional[datetime] = None
    time_ago: str = "recently"

class DashboardResponse(BaseModel):
    success: bool = True
    stats: DashboardStats
    employee_attendance: List[EmployeeAttendanceRow] = []
    activities: List[Activity] = []
