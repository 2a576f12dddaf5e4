from sqlalchemy import Column, Integer, String, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from hrms.db.base import BaseModel

class PeerRating(BaseModel):
    __tablename__ = 'peer_ratings'
    __table_args__ = (
        UniqueConstraint('rater_id', 'rated_employee_id', 'month', 'year', name='uq_peer_rating_period'),
    )

    rater_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    rated_employee_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    month = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    responsiveness = Column(Float, nullable=False, default=0)
    team_spirit = Column(Float, nullable=False, default=0)

    # Relationships
    rated_employee = relationship("User", foreign_keys=[rated_employee_id])
