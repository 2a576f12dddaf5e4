from sqlalchemy import Column, Integer, String, Boolean, Date, Float, ForeignKey, JSON, Enum as SQLEnum
from hrms.db.base import BaseModel
from hrms.models.shared.enums import Role, Gender, EmploymentType

class User(BaseModel):
    __tablename__ = "users"

    # Identity
    employee_id = Column(String(50), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(Role), nullable=False, default=Role.EMPLOYEE)
    is_active = Column(Boolean, default=True, nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(SQLEnum(Gender), nullable=True)
    address = Column(JSON, nullable=True)
    emergency_contact = Column(JSON, nullable=True)
    profile_photo = Column(String(500), nullable=True)

    # Employment
    designation = Column(String(100), nullable=True)
    department = Column(String(100), nullable=True)
    joining_date = Column(Date, nullable=True)
    employment_type = Column(SQLEnum(EmploymentType), default=EmploymentType.FULL_TIME)
    reporting_to_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    base_salary = Column(Float, nullable=True)
    gross_remuneration = Column(Float, nullable=True)
    salary = Column(JSON, nullable=True)

    documents = Column(JSON, nullable=True)
    bank_details = Column(JSON, nullable=True)

    # Annual leave entitlements; remaining balance is derived from the ledgers
    casual_leave = Column(Float, nullable=False, default=12)
    on_duty_leave = Column(Float, nullable=False, default=10)
    leave_without_pay = Column(Float, nullable=False, default=0)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()

    def __repr__(self):
        return f"<User {self.username}>"
