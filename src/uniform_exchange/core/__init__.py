"""
Core module - Configuration, database, security, and utilities.
"""

from uniform_exchange.core.config import get_settings, settings
from uniform_exchange.core.database import Base, close_db, get_db, init_db
from uniform_exchange.core.redis import close_redis, get_redis, init_redis
from uniform_exchange.core.security import create_access_token, decode_token

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Security
    "create_access_token",
    "decode_token",
]
