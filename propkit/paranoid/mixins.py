"""
SQLAlchemy mixin for paranoid (soft delete) models.

A model mixing in ``ParanoidMixin`` and declaring one or more
``ParanoidBoolean`` columns gets two removal operations:

- ``destroy()`` runs the ``before_destroy`` hook and flags the record as
  deleted with an UPDATE. The row stays in the datastore.
- ``delete()`` removes the row without running the hook.

Default queries exclude soft-deleted records; ``with_deleted`` lifts that
for a model.
"""

import logging
from typing import Any, Callable, ClassVar, FrozenSet, Optional, Set, TypeVar, Union

from sqlalchemy import event, false, inspect, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, object_session
from sqlalchemy.orm.exc import StaleDataError

from ..config import get_config
from ..property import is_boolean_attribute, is_paranoid_attribute
from .exceptions import (
    DetachedRecordError,
    PersistenceError,
    SessionMismatchError,
    UnknownPropertyError,
)
from .scope import INCLUDE_DELETED_OPTION, including_deleted, register_model

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ParanoidMixin:
    """
    Mixin adding soft delete semantics to SQLAlchemy models.

    Provides:
    - A per-model registry of paranoid properties, copied to subclasses
    - ``destroy()`` (soft delete) and ``delete()`` (hard delete)
    - ``with_deleted()`` / ``only_deleted()`` to query past the default scope

    Usage:
        class Article(ParanoidMixin, Base):
            __tablename__ = 'articles'
            id = Column(Integer, primary_key=True)
            deleted = Column(ParanoidBoolean, default=False, nullable=False)

            def before_destroy(self):
                ...
    """

    _paranoid_properties: ClassVar[Set[str]] = set()

    # Optional hook run by destroy() on persisted records
    before_destroy: ClassVar[Optional[Callable[..., Any]]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        # Own copy, so later declarations stay local to each class
        cls._paranoid_properties = set(cls._paranoid_properties)
        for name, value in list(vars(cls).items()):
            if is_paranoid_attribute(value):
                cls._paranoid_properties.add(name)
        register_model(cls)
        super().__init_subclass__(**kwargs)

    @classmethod
    def paranoid_properties(cls) -> FrozenSet[str]:
        """Return the names of this model's paranoid properties."""
        return frozenset(cls._paranoid_properties)

    @property
    def is_soft_deleted(self) -> bool:
        """Whether any paranoid property flags this record as deleted."""
        return any(getattr(self, name) for name in self._paranoid_properties)

    def destroy(self, session: Optional[Session] = None) -> bool:
        """
        Soft delete this record.

        Records never persisted are left untouched and the hook is not run.

        Args:
            session: Session to use, defaults to the record's own session

        Returns:
            True if the record was flagged (or needed no change), False if
            the UPDATE matched no row

        Raises:
            DetachedRecordError: Persisted record without a session
            SessionMismatchError: Record belongs to another session
            PersistenceError: The datastore rejected the UPDATE
        """
        if not inspect(self).has_identity:
            logger.debug("Skipping destroy of unsaved %s", type(self).__name__)
            return True

        session = self._resolve_session(session)
        entity_id = self._entity_id()

        hook = self.before_destroy
        if hook is not None:
            hook()

        for name in self._paranoid_properties:
            setattr(self, name, True)

        try:
            self._finish(session)
        except StaleDataError:
            session.rollback()
            logger.warning(
                "Soft delete of %s %s matched no row",
                type(self).__name__,
                entity_id,
            )
            return False
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(
                "Soft delete of %s %s failed: %s",
                type(self).__name__,
                entity_id,
                exc,
            )
            raise PersistenceError("soft delete", entity_id) from exc

        logger.debug("Soft deleted %s %s", type(self).__name__, entity_id)
        return True

    def delete(self, session: Optional[Session] = None) -> bool:
        """
        Remove this record from the datastore.

        The ``before_destroy`` hook is not run and paranoid properties keep
        their in-memory values.

        Args:
            session: Session to use, defaults to the record's own session

        Returns:
            True once the row is removed, or for records never persisted

        Raises:
            DetachedRecordError: Persisted record without a session
            SessionMismatchError: Record belongs to another session
            PersistenceError: The datastore rejected the DELETE
        """
        if not inspect(self).has_identity:
            logger.debug("Skipping delete of unsaved %s", type(self).__name__)
            return True

        session = self._resolve_session(session)
        entity_id = self._entity_id()

        try:
            session.delete(self)
            self._finish(session)
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(
                "Delete of %s %s failed: %s", type(self).__name__, entity_id, exc
            )
            raise PersistenceError("delete", entity_id) from exc

        logger.debug("Deleted %s %s", type(self).__name__, entity_id)
        return True

    @classmethod
    def with_deleted(
        cls,
        session: Optional[Session] = None,
        callback: Optional[Callable[[], T]] = None,
    ) -> Union[T, "Query[Any]"]:
        """
        Query this model including soft-deleted records.

        Args:
            session: Session to build the query from (collection form)
            callback: Callable run with the default scope lifted (block form)

        Returns:
            The callback's result, or a query that includes soft-deleted
            records every time it executes

        Raises:
            ValueError: Neither session nor callback given
        """
        if callback is not None:
            with including_deleted(cls):
                return callback()

        if session is None:
            raise ValueError("with_deleted requires a session or a callback")

        return session.query(cls).execution_options(
            **{INCLUDE_DELETED_OPTION: (cls,)}
        )

    @classmethod
    def only_deleted(cls, session: Session) -> "Query[Any]":
        """
        Query soft-deleted records only.

        Args:
            session: SQLAlchemy session

        Returns:
            Query filtered to records with a paranoid property set
        """
        flags = [
            getattr(cls, name).is_(True) for name in sorted(cls._paranoid_properties)
        ]
        query = session.query(cls).execution_options(
            **{INCLUDE_DELETED_OPTION: (cls,)}
        )
        if not flags:
            return query.filter(false())
        return query.filter(or_(*flags))

    def _resolve_session(self, session: Optional[Session]) -> Session:
        owner = object_session(self)
        if session is None:
            if owner is None:
                raise DetachedRecordError(self._entity_id())
            return owner
        if owner is None:
            # Reattach so the change is part of the given session's flush
            session.add(self)
        elif owner is not session:
            raise SessionMismatchError(self._entity_id())
        return session

    def _entity_id(self) -> str:
        identity = inspect(self).identity
        if not identity:
            return "unknown"
        return ",".join(str(part) for part in identity)

    @staticmethod
    def _finish(session: Session) -> None:
        if get_config().commit_on_remove:
            session.commit()
        else:
            session.flush()


@event.listens_for(ParanoidMixin, "init", propagate=True)
def _set_paranoid_defaults(target: Any, args: Any, kwargs: Any) -> None:
    """New records start out not deleted."""
    # Runs ahead of the mapper's own first-init configuration
    mapper = inspect(type(target))
    if not mapper.configured:
        mapper.registry.configure(cascade=True)
    for name in target._paranoid_properties:
        if name not in kwargs:
            setattr(target, name, False)


def declare_paranoid(model: type, name: str) -> None:
    """
    Register ``name`` as a paranoid property of ``model``.

    Only ``model`` and classes derived from it afterwards see the new
    property.

    Args:
        model: Class mixing in ParanoidMixin
        name: Attribute holding the soft delete flag

    Raises:
        TypeError: Model does not mix in ParanoidMixin, or ``name`` is not
            a boolean column
        UnknownPropertyError: Model has no attribute ``name``
    """
    if not (isinstance(model, type) and issubclass(model, ParanoidMixin)):
        raise TypeError(f"{model!r} does not mix in ParanoidMixin")

    if not hasattr(model, name):
        raise UnknownPropertyError(model.__name__, name)

    if not is_boolean_attribute(getattr(model, name)):
        raise TypeError(f"{model.__name__}.{name} is not a boolean column")

    model._paranoid_properties.add(name)
    logger.debug("Declared %s.%s as paranoid", model.__name__, name)
