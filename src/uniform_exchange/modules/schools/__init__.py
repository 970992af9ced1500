"""
Schools module - canonical school records.
"""

from uniform_exchange.modules.schools.models import School, SchoolLevel
from uniform_exchange.modules.schools.repository import SchoolRepository

__all__ = ["School", "SchoolLevel", "SchoolRepository"]
