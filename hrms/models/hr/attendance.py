from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, Float, ForeignKey, Date, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel
from hrms.models.shared.enums import AttendanceStatus

class Attendance(BaseModel):
    __tablename__ = 'attendances'
    __table_args__ = (
        UniqueConstraint('user_id', 'attendance_date', name='uq_attendance_user_date'),
    )

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    attendance_date = Column(Date, nullable=False, index=True)
    status = Column(SQLEnum(AttendanceStatus), nullable=False, default=AttendanceStatus.ABSENT)
    # Local wall-clock time in settings.TIMEZONE
    check_in_time = Column(DateTime)
    check_in_ip = Column(String(64))
    check_out_time = Column(DateTime)
    check_out_ip = Column(String(64))
    working_hours = Column(Float, default=0)
    is_late = Column(Boolean, default=False)
    remarks = Column(Text)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
