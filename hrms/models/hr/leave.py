from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey, Date, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from hrms.utils.date_utils import local_now
from hrms.db.base import BaseModel
from hrms.models.shared.enums import LeaveType, LeaveStatus

class Leave(BaseModel):
    __tablename__ = 'leaves'

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    leave_type = Column(SQLEnum(LeaveType), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    number_of_days = Column(Float, nullable=False)
    reason = Column(Text, nullable=False)
    contact_no = Column(String(20))
    person_in_charge = Column(String(255), nullable=False)
    reporting_to_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    status = Column(SQLEnum(LeaveStatus), nullable=False, default=LeaveStatus.PENDING, index=True)
    applied_on = Column(DateTime, default=local_now)
    reviewed_by_id = Column(Integer, ForeignKey('users.id'), nullable=True)
    reviewed_on = Column(DateTime)
    review_remarks = Column(Text)
    leave_balance_before = Column(JSON)
    leave_balance_after = Column(JSON)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    reporting_to = relationship("User", foreign_keys=[reporting_to_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
