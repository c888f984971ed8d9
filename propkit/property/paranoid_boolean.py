"""
Boolean property type marking records as soft-deleted.

A column of this type is picked up by ``ParanoidMixin`` when the class body
is evaluated and registered as a paranoid property of the model.
"""

from typing import Any, Optional

from sqlalchemy import Boolean, Column, TypeDecorator
from sqlalchemy.orm import (
    ColumnProperty,
    MappedColumn,
    QueryableAttribute,
    mapped_column,
)
from sqlalchemy.types import TypeEngine

from .base import PropertyType


class ParanoidBoolean(PropertyType):
    """Boolean flag; ``True`` means the record is soft-deleted."""

    impl = Boolean
    cache_ok = True

    @property
    def python_type(self) -> Any:
        return bool

    def load(self, value: Optional[Any]) -> Optional[bool]:
        if value is None:
            return None
        return bool(value)

    def dump(self, value: Optional[Any]) -> Optional[bool]:
        if value is None:
            return None
        return bool(value)


def paranoid_column(**kwargs: Any) -> MappedColumn[Any]:
    """
    Declare a paranoid boolean column.

    Defaults to ``False`` and ``NOT NULL`` unless overridden.

    Usage:
        class Article(ParanoidMixin, Base):
            __tablename__ = "articles"
            id: Mapped[int] = mapped_column(primary_key=True)
            deleted: Mapped[bool] = paranoid_column()
    """
    kwargs.setdefault("default", False)
    kwargs.setdefault("nullable", False)
    return mapped_column(ParanoidBoolean(), **kwargs)


def _column_type(value: Any) -> Optional[TypeEngine[Any]]:
    if isinstance(value, MappedColumn):
        return value.column.type
    if isinstance(value, Column):
        return value.type
    if isinstance(value, QueryableAttribute) and isinstance(
        value.property, ColumnProperty
    ):
        return value.property.columns[0].type
    return None


def is_paranoid_attribute(value: Any) -> bool:
    """Check whether a class-body attribute is a ParanoidBoolean column."""
    return isinstance(_column_type(value), ParanoidBoolean)


def is_boolean_attribute(value: Any) -> bool:
    """Check whether an attribute is a column storing booleans."""
    column_type = _column_type(value)
    if isinstance(column_type, TypeDecorator):
        column_type = column_type.impl
    return isinstance(column_type, Boolean)
