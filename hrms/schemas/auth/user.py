from pydantic import BaseModel, EmailStr, validator
from typing import Optional, Dict, Any, List
from datetime import date, datetime
from hrms.models.shared.enums import Role, Gender, EmploymentType

class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None

class EmergencyContact(BaseModel):
    name: Optional[str] = None
    relation: Optional[str] = None
    phone: Optional[str] = None

class BankDetails(BaseModel):
    account_number: Optional[str] = None
    bank_name: Optional[str] = None
    ifsc_code: Optional[str] = None
    branch: Optional[str] = None

class SalaryBreakdown(BaseModel):
    basic: float = 0
    hra: float = 0
    allowances: float = 0
    deductions: float = 0

class LeaveEntitlements(BaseModel):
    casual_leave: Optional[float] = None
    on_duty_leave: Optional[float] = None
    leave_without_pay: Optional[float] = None

    @validator("casual_leave", "on_duty_leave", "leave_without_pay")
    def validate_non_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError("Leave entitlement cannot be negative")
        return v

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[Address] = None
    emergency_contact: Optional[EmergencyContact] = None

class EmploymentUpdate(BaseModel):
    designation: Optional[str] = None
    department: Optional[str] = None
    joining_date: Optional[date] = None
    employment_type: Optional[EmploymentType] = None
    reporting_to_id: Optional[int] = None
    base_salary: Optional[float] = None
    gross_remuneration: Optional[float] = None
    salary: Optional[SalaryBreakdown] = None

class UserCreate(BaseModel):
    employee_id: str
    username: str
    email: EmailStr
    password: str
    role: Role = Role.EMPLOYEE
    profile: ProfileUpdate = ProfileUpdate()
    employment: EmploymentUpdate = EmploymentUpdate()
    leave_balance: Optional[LeaveEntitlements] = None

    @validator("username", "employee_id")
    def validate_identifier(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @validator("password")
    def validate_password(cls, v):
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    profile: Optional[ProfileUpdate] = None
    employment: Optional[EmploymentUpdate] = None
    leave_balance: Optional[LeaveEntitlements] = None
    bank_details: Optional[BankDetails] = None

class SelfProfileUpdate(BaseModel):
    profile: Optional[ProfileUpdate] = None
    bank_details: Optional[BankDetails] = None

class UserSummary(BaseModel):
    id: int
    employee_id: str
    username: str
    first_name: str
    last_name: Optional[str] = None
    designation: Optional[str] = None
    role: Role

    class Config:
        from_attributes = True

class UserResponse(BaseModel):
    id: int
    employee_id: str
    username: str
    email: str
    role: Role
    is_active: bool
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    address: Optional[Dict[str, Any]] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    profile_photo: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    joining_date: Optional[date] = None
    employment_type: Optional[EmploymentType] = None
    reporting_to_id: Optional[int] = None
    base_salary: Optional[float] = None
    gross_remuneration: Optional[float] = None
    salary: Optional[Dict[str, Any]] = None
    bank_details: Optional[Dict[str, Any]] = None
    documents: Optional[List[Dict[str, Any]]] = None
    casual_leave: float
    on_duty_leave: float
    leave_without_pay: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserResponse

class UserSummaryListResponse(BaseModel):
    success: bool = True
    count: int
    users: List[UserSummary]

class UserStatsResponse(BaseModel):
    success: bool = True
    total_employees: int
    role_wise: Dict[str, int]
