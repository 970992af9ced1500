"""
Users module - user identities and marketplace profiles.
"""

from uniform_exchange.modules.users.models import User, UserProfile, UserRole
from uniform_exchange.modules.users.repository import UserRepository

__all__ = ["User", "UserProfile", "UserRole", "UserRepository"]
