"""
School Approval Requests Module

Users ask to be associated with more schools; admins approve a subset or
deny the request.
"""

from uniform_exchange.modules.school_approval_requests.models import (
    ApprovalRequestStatus,
    SchoolApprovalRequest,
)
from uniform_exchange.modules.school_approval_requests.router import router

__all__ = [
    "router",
    "ApprovalRequestStatus",
    "SchoolApprovalRequest",
]
