import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from hrms.auth.jwt_handler import issue_access_token
from hrms.core.exceptions import UnauthorizedError
from hrms.core.security import verify_password
from hrms.models.auth.user import User
from hrms.services.auth.user_service import UserService

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_service = UserService(session)

    async def authenticate_user(self, identifier: str, password: str, ip_address: Optional[str] = None) -> User:
        """Resolve a username or email plus password to an active user"""
        user = await self.user_service.get_user_by_login(identifier)

        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login for '{identifier}' from {ip_address}")
            raise UnauthorizedError("Invalid credentials")

        if not user.is_active:
            logger.warning(f"Login attempt on deactivated account {user.username} from {ip_address}")
            raise UnauthorizedError("Account is deactivated")

        logger.info(f"User {user.username} logged in from {ip_address}")
        return user

    async def login(self, identifier: str, password: str, ip_address: Optional[str] = None) -> dict:
        user = await self.authenticate_user(identifier, password, ip_address)
        return {
            "access_token": issue_access_token(user),
            "token_type": "bearer",
            "user": user,
        }
