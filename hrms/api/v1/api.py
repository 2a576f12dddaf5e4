from fastapi import APIRouter
from hrms.api.v1.endpoints.admin import roles
from hrms.api.v1.endpoints.auth import login, users
from hrms.api.v1.endpoints.dashboard import dashboard
from hrms.api.v1.endpoints.hr import attendance, holidays, leave, peer_rating, remuneration

api_router = APIRouter()

# Authentication routes
api_router.include_router(login.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])

# HR routes
api_router.include_router(attendance.router, prefix="/attendance", tags=["Attendance"])
api_router.include_router(leave.router, prefix="/leave", tags=["Leave"])
api_router.include_router(holidays.router, prefix="/holidays", tags=["Holidays"])
api_router.include_router(peer_rating.router, prefix="/peer-rating", tags=["Peer Rating"])
api_router.include_router(remuneration.router, prefix="/remuneration", tags=["Remuneration"])

# Dashboard and administration
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(roles.router, prefix="/admin", tags=["Admin"])
