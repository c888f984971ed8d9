"""
Property types - column types with explicit load/dump conversions.
"""

from .base import PropertyType
from .paranoid_boolean import (
    ParanoidBoolean,
    is_boolean_attribute,
    is_paranoid_attribute,
    paranoid_column,
)
from .regexp import Regexp

__all__ = [
    "PropertyType",
    "ParanoidBoolean",
    "Regexp",
    "paranoid_column",
    "is_paranoid_attribute",
    "is_boolean_attribute",
]
