from sqlalchemy import Column, Integer, String, Text, ForeignKey, Date, Enum as SQLEnum
from hrms.db.base import BaseModel
from hrms.models.shared.enums import HolidayType

class Holiday(BaseModel):
    __tablename__ = 'holidays'

    date = Column(Date, nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    type = Column(SQLEnum(HolidayType), nullable=False, default=HolidayType.CUSTOM)
    year = Column(Integer, nullable=False, index=True)
    added_by_id = Column(Integer, ForeignKey('users.id'), nullable=True)
