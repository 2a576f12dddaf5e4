from enum import Enum

class Role(str, Enum):
    ADMIN = "ADMIN"
    CEO = "CEO"
    INCUBATION_MANAGER = "INCUBATION_MANAGER"
    ACCOUNTANT = "ACCOUNTANT"
    OFFICER_IN_CHARGE = "OFFICER_IN_CHARGE"
    FACULTY_IN_CHARGE = "FACULTY_IN_CHARGE"
    EMPLOYEE = "EMPLOYEE"

class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

class EmploymentType(str, Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERN = "Intern"

class AttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half-day"
    ABSENT = "absent"
    ON_LEAVE = "on-leave"

class LeaveType(str, Enum):
    CASUAL_LEAVE = "Casual Leave"
    ON_DUTY_LEAVE = "On Duty Leave"
    LEAVE_WITHOUT_PAY = "Leave Without Pay"

class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class HolidayType(str, Enum):
    CUSTOM = "custom"
    COMPANY_SPECIFIC = "company_specific"
