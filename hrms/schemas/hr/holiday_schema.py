import datetime as dt
from pydantic import BaseModel, validator
from typing import Optional, List
from hrms.models.shared.enums import HolidayType

class HolidayCreate(BaseModel):
    date: Optional[dt.date] = None
    name: Optional[str] = None
    description: Optional[str] = None
    type: HolidayType = HolidayType.CUSTOM

    @validator("name")
    def validate_name(cls, v):
        return v.strip() if v else v

class HolidayUpdate(BaseModel):
    date: Optional[dt.date] = None
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[HolidayType] = None

    @validator("name")
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Holiday name cannot be empty")
        return v.strip() if v else v

class HolidayResponse(BaseModel):
    id: int
    date: dt.date
    name: str
    description: Optional[str] = None
    type: HolidayType
    year: int
    added_by_id: Optional[int] = None

    class Config:
        from_attributes = True

class HolidayEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    holiday: HolidayResponse

class HolidayListResponse(BaseModel):
    success: bool = True
    year: int
    holidays: List[HolidayResponse]
