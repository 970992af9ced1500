"""
Geography module - counties and localities.
"""

from uniform_exchange.modules.geography.models import County, Locality
from uniform_exchange.modules.geography.repository import GeographyRepository

__all__ = ["County", "Locality", "GeographyRepository"]
