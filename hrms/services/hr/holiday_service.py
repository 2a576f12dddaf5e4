import logging
from typing import Dict, List, Optional
from datetime import date
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from hrms.core.exceptions import NotFoundError, ValidationError
from hrms.core.logging_config import log_user_action
from hrms.models.hr.holiday import Holiday
from hrms.schemas.hr.holiday_schema import HolidayCreate, HolidayUpdate

logger = logging.getLogger(__name__)

# Gazetted national holidays, used by the payroll summary
NATIONAL_HOLIDAYS: Dict[int, Dict[date, str]] = {
    2025: {
        date(2025, 1, 26): "Republic Day",
        date(2025, 3, 14): "Holi",
        date(2025, 3, 31): "Eid al-Fitr",
        date(2025, 4, 14): "Ambedkar Jayanti",
        date(2025, 4, 18): "Good Friday",
        date(2025, 5, 12): "Buddha Purnima",
        date(2025, 6, 7): "Eid al-Adha",
        date(2025, 7, 6): "Muharram",
        date(2025, 8, 15): "Independence Day",
        date(2025, 8, 16): "Janmashtami",
        date(2025, 9, 5): "Milad-un-Nabi",
        date(2025, 10, 2): "Gandhi Jayanti",
        date(2025, 10, 20): "Diwali",
        date(2025, 11, 5): "Guru Nanak Jayanti",
        date(2025, 12, 25): "Christmas",
    },
}

def national_holidays_for_month(month: int, year: int) -> List[date]:
    return sorted(d for d in NATIONAL_HOLIDAYS.get(year, {}) if d.month == month)

class HolidayService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        result = await self.db.execute(select(Holiday).where(Holiday.date == holiday_date))
        return result.scalar_one_or_none()

    async def get_holiday(self, holiday_id: int) -> Holiday:
        holiday = await self.db.get(Holiday, holiday_id)
        if not holiday:
            raise NotFoundError("Holiday not found")
        return holiday

    async def get_holidays(self, year: int) -> List[Holiday]:
        """Holidays of one year in date order"""
        result = await self.db.execute(
            select(Holiday).where(Holiday.year == year).order_by(Holiday.date)
        )
        return list(result.scalars().all())

    async def create_holiday(self, data: HolidayCreate, current_user_id: int) -> Holiday:
        try:
            if not data.date or not data.name:
                raise ValidationError("Please provide date and name")

            if await self._get_by_date(data.date):
                raise ValidationError("A holiday already exists on this date")

            holiday = Holiday(
                date=data.date,
                name=data.name,
                description=data.description,
                type=data.type,
                year=data.date.year,
                added_by_id=current_user_id,
                created_by=current_user_id,
            )
            self.db.add(holiday)
            await self.db.commit()
            await self.db.refresh(holiday)

            logger.info(f"Holiday created: {holiday.name} on {holiday.date}")
            log_user_action(current_user_id, "create", "holiday", holiday.id)
            return holiday

        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating holiday: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating holiday")

    async def update_holiday(self, holiday_id: int, data: HolidayUpdate, current_user_id: int) -> Holiday:
        try:
            holiday = await self.get_holiday(holiday_id)

            if data.date and data.date != holiday.date:
                if await self._get_by_date(data.date):
                    raise ValidationError("A holiday already exists on this date")
                holiday.date = data.date
                holiday.year = data.date.year

            for field in ("name", "description", "type"):
                value = getattr(data, field)
                if value is not None:
                    setattr(holiday, field, value)
            holiday.updated_by = current_user_id

            await self.db.commit()
            await self.db.refresh(holiday)

            logger.info(f"Holiday updated: {holiday.id}")
            log_user_action(current_user_id, "update", "holiday", holiday.id)
            return holiday

        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error updating holiday: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating holiday")

    async def _delete(self, holiday: Holiday, current_user_id: int) -> None:
        try:
            holiday_id = holiday.id
            await self.db.delete(holiday)
            await self.db.commit()
            logger.info(f"Holiday deleted: {holiday_id}")
            log_user_action(current_user_id, "delete", "holiday", holiday_id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error deleting holiday: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting holiday")

    async def delete_holiday(self, holiday_id: int, current_user_id: int) -> None:
        holiday = await self.get_holiday(holiday_id)
        await self._delete(holiday, current_user_id)

    async def delete_holiday_by_date(self, holiday_date: date, current_user_id: int) -> None:
        holiday = await self._get_by_date(holiday_date)
        if not holiday:
            raise NotFoundError("Holiday not found for this date")
        await self._delete(holiday, current_user_id)
