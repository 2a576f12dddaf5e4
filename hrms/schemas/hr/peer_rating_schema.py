from pydantic import BaseModel, validator
from typing import List, Optional
from hrms.utils.date_utils import MONTH_NAMES

class RatingItem(BaseModel):
    employee_id: int
    # Range is enforced by the service so the whole batch fails with one message
    responsiveness: float = 0
    team_spirit: float = 0

class PeerRatingSubmit(BaseModel):
    ratings: List[RatingItem] = []
    month: str
    year: int

    @validator("month")
    def validate_month(cls, v):
        month = v.strip().capitalize()
        if month not in MONTH_NAMES:
            raise ValueError("Month must be a full month name, e.g. January")
        return month

class PeerRatingResponse(BaseModel):
    id: int
    rater_id: int
    rated_employee_id: int
    month: str
    year: int
    responsiveness: float
    team_spirit: float

    class Config:
        from_attributes = True

class PeerRatingListResponse(BaseModel):
    success: bool = True
    ratings: List[PeerRatingResponse]

class PeerRatingSummaryItem(BaseModel):
    employee_id: int
    name: str
    designation: Optional[str] = None
    rating_count: int
    avg_responsiveness: float
    avg_team_spirit: float

class PeerRatingSummaryResponse(BaseModel):
    success: bool = True
    month: str
    year: int
    summary: List[PeerRatingSummaryItem]
