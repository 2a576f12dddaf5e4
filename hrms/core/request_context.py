from typing import Optional, Dict
from fastapi import Request

HDR_REQUEST_ID = "X-Request-Id"
HDR_FORWARDED_FOR = "X-Forwarded-For"

def get_client_ip(request: Request) -> Optional[str]:
    """Client IP, honouring the first hop of X-Forwarded-For when behind a proxy"""
    forwarded = request.headers.get(HDR_FORWARDED_FOR)
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None

def get_request_context(request: Request) -> Dict[str, Optional[str]]:
    """
    Extracts endpoint, client IP, user-agent and request_id from the FastAPI Request.
    """
    return {
        "ip_address": get_client_ip(request),
        "user_agent": request.headers.get("user-agent"),
        "endpoint": f"{request.method} {request.url.path}",
        "request_id": request.headers.get(HDR_REQUEST_ID),
    }
