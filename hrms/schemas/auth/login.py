from pydantic import BaseModel, validator
from typing import Any, Dict
from hrms.schemas.auth.user import UserResponse

class LoginRequest(BaseModel):
    # Username or email
    username: str
    password: str

    @validator("username")
    def strip_username(cls, v):
        if not v or not v.strip():
            raise ValueError("Username or email is required")
        return v.strip()

class LoginResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str

    @validator("new_password")
    def validate_new_password(cls, v):
        if len(v) < 6:
            raise ValueError("New password must be at least 6 characters")
        return v

class MeResponse(BaseModel):
    success: bool = True
    user: UserResponse
    capabilities: Dict[str, Any]
