"""
School Submissions Module

Users propose schools missing from the selector; admins approve, reject or
mark them as duplicates.
"""

from uniform_exchange.modules.school_submissions.models import SchoolSubmission, SubmissionStatus
from uniform_exchange.modules.school_submissions.router import router

__all__ = [
    "router",
    "SchoolSubmission",
    "SubmissionStatus",
]
