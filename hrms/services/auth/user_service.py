import logging
from typing import Optional, List, Dict, Any
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select, or_
from hrms.core.config import settings
from hrms.core.exceptions import NotFoundError, ValidationError, ForbiddenError
from hrms.core.logging_config import log_user_action
from hrms.core.security import get_password_hash, verify_password
from hrms.auth.permissions import is_top_management
from hrms.models.auth.user import User
from hrms.models.shared.enums import Role
from hrms.schemas.auth.user import UserCreate, UserUpdate, SelfProfileUpdate

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        result = await self.session.execute(
            select(User).where(
                User.id == user_id,
                User.is_deleted == False
            )
        )
        return result.scalar_one_or_none()

    async def get_user_or_404(self, user_id: int) -> User:
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_user_by_login(self, identifier: str) -> Optional[User]:
        """Get user by username or email"""
        result = await self.session.execute(
            select(User).where(
                or_(User.username == identifier, User.email == identifier.lower()),
                User.is_deleted == False
            )
        )
        return result.scalars().first()

    async def _ensure_unique(self, email: str, username: str, employee_id: str):
        result = await self.session.execute(
            select(User.id).where(
                or_(
                    User.email == email,
                    User.username == username,
                    User.employee_id == employee_id,
                )
            )
        )
        if result.first():
            raise ValidationError("User already exists with this email, username or employee ID")

    async def _ensure_reporting_to(self, reporting_to_id: Optional[int], user_id: Optional[int] = None):
        if reporting_to_id is None:
            return
        if user_id is not None and reporting_to_id == user_id:
            raise ValidationError("A user cannot report to themselves")
        if not await self.get_user(reporting_to_id):
            raise ValidationError("Reporting manager not found")

    @staticmethod
    def _apply_sections(user: User, data) -> None:
        """Copy profile/employment/leave/bank sections onto the flat user row"""
        if getattr(data, "profile", None) is not None:
            for field, value in data.profile.model_dump(exclude_unset=True).items():
                setattr(user, field, value)
        if getattr(data, "employment", None) is not None:
            for field, value in data.employment.model_dump(exclude_unset=True).items():
                setattr(user, field, value)
        if getattr(data, "leave_balance", None) is not None:
            for field, value in data.leave_balance.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(user, field, value)
        if getattr(data, "bank_details", None) is not None:
            merged = dict(user.bank_details or {})
            merged.update(data.bank_details.model_dump(exclude_unset=True))
            user.bank_details = merged

    async def create_user(self, user_create: UserCreate, created_by: Optional[int] = None) -> User:
        """Create new employee"""
        try:
            email = user_create.email.lower()
            await self._ensure_unique(email, user_create.username, user_create.employee_id)
            await self._ensure_reporting_to(user_create.employment.reporting_to_id)

            if not user_create.profile.first_name:
                raise ValidationError("First name is required")

            db_user = User(
                employee_id=user_create.employee_id,
                username=user_create.username,
                email=email,
                hashed_password=get_password_hash(user_create.password),
                role=user_create.role,
                is_active=True,
                casual_leave=settings.DEFAULT_CASUAL_LEAVE,
                on_duty_leave=settings.DEFAULT_ON_DUTY_LEAVE,
                leave_without_pay=settings.DEFAULT_LEAVE_WITHOUT_PAY,
                created_by=created_by,
            )
            self._apply_sections(db_user, user_create)

            self.session.add(db_user)
            await self.session.commit()
            await self.session.refresh(db_user)

            logger.info(f"User created: {db_user.username} ({db_user.role.value})")
            log_user_action(created_by, "create", "user", db_user.id)
            return db_user

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating user: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating user"
            )

    async def update_user(self, user_id: int, user_update: UserUpdate, updated_by: Optional[int] = None) -> User:
        """Update profile, employment, role, status or leave entitlements"""
        try:
            user = await self.get_user_or_404(user_id)

            if user_update.email is not None and user_update.email.lower() != user.email:
                taken = await self.session.execute(
                    select(User.id).where(User.email == user_update.email.lower(), User.id != user_id)
                )
                if taken.first():
                    raise ValidationError("Email already registered")
                user.email = user_update.email.lower()

            if user_update.employment is not None and "reporting_to_id" in user_update.employment.model_fields_set:
                await self._ensure_reporting_to(user_update.employment.reporting_to_id, user_id)

            if user_update.role is not None:
                user.role = user_update.role
            if user_update.is_active is not None:
                user.is_active = user_update.is_active

            self._apply_sections(user, user_update)
            user.updated_by = updated_by

            await self.session.commit()
            await self.session.refresh(user)

            logger.info(f"User updated: {user.username}")
            log_user_action(updated_by, "update", "user", user.id)
            return user

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating user: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error updating user"
            )

    async def update_own_profile(self, user: User, data: SelfProfileUpdate) -> User:
        """Employees may edit their own profile and bank details only"""
        try:
            self._apply_sections(user, data)
            user.updated_by = user.id
            await self.session.commit()
            await self.session.refresh(user)
            logger.info(f"Profile updated: {user.username}")
            return user
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating profile: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error updating profile"
            )

    async def deactivate_user(self, user_id: int, deactivated_by: int) -> User:
        """Deactivate the account; ledger history stays in place"""
        try:
            user = await self.get_user_or_404(user_id)
            if user.id == deactivated_by:
                raise ValidationError("You cannot deactivate your own account")

            user.is_active = False
            user.updated_by = deactivated_by
            await self.session.commit()
            await self.session.refresh(user)

            logger.info(f"User deactivated: {user.username}")
            log_user_action(deactivated_by, "deactivate", "user", user.id)
            return user

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error deactivating user: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error deactivating user"
            )

    async def get_users(
        self,
        page_index: int = 1,
        page_size: int = 100,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get paginated list of users"""
        conditions = [User.is_deleted == False]

        if role:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)
        if search:
            search_term = f"%{search}%"
            conditions.append(
                or_(
                    User.username.ilike(search_term),
                    User.email.ilike(search_term),
                    User.first_name.ilike(search_term),
                    User.last_name.ilike(search_term),
                    User.employee_id.ilike(search_term),
                )
            )

        total_count = await self.session.scalar(
            select(func.count(User.id)).where(*conditions)
        )

        skip = (page_index - 1) * page_size
        users = await self.session.scalars(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(page_size)
        )

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": users.all(),
        }

    async def get_active_users(self, exclude_roles: Optional[List[Role]] = None) -> List[User]:
        conditions = [User.is_active == True, User.is_deleted == False]
        if exclude_roles:
            conditions.append(User.role.notin_(exclude_roles))
        result = await self.session.execute(
            select(User).where(*conditions).order_by(User.first_name, User.id)
        )
        return list(result.scalars().all())

    async def get_peer_rating_candidates(self, rater: User) -> List[User]:
        """Active employees other than the rater"""
        users = await self.get_active_users(exclude_roles=[Role.ADMIN])
        return [u for u in users if u.id != rater.id]

    async def get_stats_overview(self) -> Dict[str, Any]:
        result = await self.session.execute(
            select(User.role, func.count(User.id))
            .where(User.is_active == True, User.is_deleted == False)
            .group_by(User.role)
        )
        role_wise = {role.value: count for role, count in result.all()}
        return {
            "total_employees": sum(role_wise.values()),
            "role_wise": role_wise,
        }

    async def change_password(self, user: User, current_password: str, new_password: str) -> bool:
        """Change user password"""
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect")

        try:
            user.hashed_password = get_password_hash(new_password)
            await self.session.commit()
            logger.info(f"Password changed for user: {user.username}")
            return True
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error changing password: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error changing password"
            )

    async def set_profile_photo(self, actor: User, user_id: int, photo_path: str) -> User:
        user = await self.get_user_or_404(user_id)
        user.profile_photo = photo_path
        user.updated_by = actor.id
        await self.session.commit()
        await self.session.refresh(user)
        logger.info(f"Profile photo updated for user {user.id}")
        return user

    @staticmethod
    def ensure_can_edit_photo(actor: User, user_id: int) -> None:
        if actor.id != user_id and not is_top_management(actor.role):
            raise ForbiddenError("You can only update your own profile photo")
