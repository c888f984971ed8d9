"""
Paranoid Module - soft delete for SQLAlchemy models.

Provides the mixin, the default query scope, and the exceptions for models
whose records are flagged as deleted instead of being removed.
"""

from .exceptions import (
    DetachedRecordError,
    ParanoidError,
    PersistenceError,
    SessionMismatchError,
    UnknownPropertyError,
)
from .mixins import ParanoidMixin, declare_paranoid
from .scope import (
    INCLUDE_DELETED_OPTION,
    including_deleted,
    register_default_scope,
    remove_default_scope,
)

__all__ = [
    # Mixins
    "ParanoidMixin",
    "declare_paranoid",
    # Scope
    "including_deleted",
    "register_default_scope",
    "remove_default_scope",
    "INCLUDE_DELETED_OPTION",
    # Exceptions
    "ParanoidError",
    "PersistenceError",
    "DetachedRecordError",
    "SessionMismatchError",
    "UnknownPropertyError",
]
