import logging
from typing import Any, Dict, List
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select

from hrms.core.exceptions import ValidationError
from hrms.models.auth.user import User
from hrms.models.hr.peer_rating import PeerRating
from hrms.schemas.hr.peer_rating_schema import RatingItem

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10

class PeerRatingService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save_ratings(self, rater: User, ratings: List[RatingItem], month: str, year: int) -> int:
        """Upsert one row per (rater, employee, month, year)"""
        if not ratings:
            raise ValidationError("No ratings provided")
        for item in ratings:
            if not (MIN_SCORE <= item.responsiveness <= MAX_SCORE and MIN_SCORE <= item.team_spirit <= MAX_SCORE):
                raise ValidationError("Ratings must be between 0 and 10")
            if item.employee_id == rater.id:
                raise ValidationError("You cannot rate yourself")

        rater_id = rater.id
        try:
            employee_ids = {item.employee_id for item in ratings}
            known = await self.session.execute(
                select(User.id).where(User.id.in_(employee_ids), User.is_active == True)
            )
            missing = employee_ids - set(known.scalars().all())
            if missing:
                raise ValidationError(f"Unknown employees: {', '.join(str(i) for i in sorted(missing))}")

            existing_result = await self.session.execute(
                select(PeerRating).where(
                    PeerRating.rater_id == rater_id,
                    PeerRating.rated_employee_id.in_(employee_ids),
                    PeerRating.month == month,
                    PeerRating.year == year
                )
            )
            existing = {r.rated_employee_id: r for r in existing_result.scalars().all()}

            for item in ratings:
                rating = existing.get(item.employee_id)
                if rating is None:
                    rating = PeerRating(
                        rater_id=rater_id,
                        rated_employee_id=item.employee_id,
                        month=month,
                        year=year,
                        created_by=rater_id,
                    )
                    self.session.add(rating)
                    existing[item.employee_id] = rating
                rating.responsiveness = float(item.responsiveness)
                rating.team_spirit = float(item.team_spirit)

            await self.session.commit()
            logger.info(f"Peer ratings saved: rater {rater_id}, {len(ratings)} ratings for {month} {year}")
            return len(ratings)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error saving peer ratings: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save ratings")

    async def get_my_ratings(self, rater: User, month: str, year: int) -> List[PeerRating]:
        result = await self.session.execute(
            select(PeerRating).where(
                PeerRating.rater_id == rater.id,
                PeerRating.month == month,
                PeerRating.year == year
            ).order_by(PeerRating.rated_employee_id)
        )
        return list(result.scalars().all())

    async def get_rating_summary(self, month: str, year: int) -> List[Dict[str, Any]]:
        """Average scores per rated employee for the month"""
        result = await self.session.execute(
            select(
                User,
                func.count(PeerRating.id),
                func.avg(PeerRating.responsiveness),
                func.avg(PeerRating.team_spirit),
            )
            .join(PeerRating, PeerRating.rated_employee_id == User.id)
            .where(PeerRating.month == month, PeerRating.year == year)
            .group_by(User.id)
            .order_by(User.first_name)
        )
        return [
            {
                "employee_id": user.id,
                "name": user.full_name,
                "designation": user.designation,
                "rating_count": count,
                "avg_responsiveness": round(float(avg_resp or 0), 2),
                "avg_team_spirit": round(float(avg_team or 0), 2),
            }
            for user, count, avg_resp, avg_team in result.all()
        ]
