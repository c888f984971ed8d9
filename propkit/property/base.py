"""
Base class for property types.

A property type converts between the value kept in storage and the value
exposed on a record. Both directions are total: ``None`` always maps to
``None``.
"""

from typing import Any, Optional

from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator


class PropertyType(TypeDecorator):  # type: ignore[type-arg]
    """
    SQLAlchemy column type exposing ``load``/``dump`` conversions.

    Subclasses set ``impl`` and implement both conversions. SQLAlchemy calls
    ``dump`` when binding parameters and ``load`` when reading result rows.

    Usage:
        class Upper(PropertyType):
            impl = String
            cache_ok = True

            def load(self, value):
                return None if value is None else value.upper()

            def dump(self, value):
                return None if value is None else value.lower()
    """

    cache_ok = True

    def load(self, value: Optional[Any]) -> Optional[Any]:
        """Convert a stored value to its native form."""
        raise NotImplementedError

    def dump(self, value: Optional[Any]) -> Optional[Any]:
        """Convert a native value to its stored form."""
        raise NotImplementedError

    def process_bind_param(
        self, value: Optional[Any], dialect: Dialect
    ) -> Optional[Any]:
        return self.dump(value)

    def process_result_value(
        self, value: Optional[Any], dialect: Dialect
    ) -> Optional[Any]:
        return self.load(value)
