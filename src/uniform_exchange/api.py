from fastapi import APIRouter

from uniform_exchange.modules.geography.router import router as geography_router
from uniform_exchange.modules.school_approval_requests import (
    router as school_approval_requests_router,
)
from uniform_exchange.modules.school_submissions import router as school_submissions_router

api_router = APIRouter()

api_router.include_router(geography_router, prefix="/counties", tags=["Reference Data"])

api_router.include_router(
    school_submissions_router, prefix="/school-submissions", tags=["School Submissions"]
)

api_router.include_router(
    school_approval_requests_router,
    prefix="/school-approval-requests",
    tags=["School Approval Requests"],
)
