from typing import Optional
from datetime import datetime, timezone
from hrms.core.security import create_access_token, verify_token

def issue_access_token(user) -> str:
    """Access token carrying the user id and role"""
    return create_access_token({"sub": str(user.id), "role": user.role.value})

def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate access token"""
    payload = verify_token(token)
    if payload is None:
        return None

    # Check token type
    if payload.get("type") != "access":
        return None

    # Check expiration
    exp = payload.get("exp")
    if exp is None or datetime.now(timezone.utc).timestamp() > exp:
        return None

    return payload
