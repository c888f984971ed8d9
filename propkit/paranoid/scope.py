"""
Default query scope for paranoid models.

Every ORM SELECT issued through a ``Session`` excludes records whose paranoid
properties hold ``True``. The exclusion is suspended for a model while it is
relaxed, either ambiently through ``including_deleted`` or per statement
through the ``INCLUDE_DELETED_OPTION`` execution option.
"""

import logging
import weakref
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, FrozenSet, Iterable, Iterator, List, Type

from sqlalchemy import and_, event, inspect
from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria
from sqlalchemy.sql.elements import ColumnElement

from ..config import get_config

logger = logging.getLogger(__name__)

INCLUDE_DELETED_OPTION = "propkit_include_deleted"

_relaxed_models: ContextVar[FrozenSet[type]] = ContextVar(
    "relaxed_models", default=frozenset()
)

_paranoid_models: "weakref.WeakSet[type]" = weakref.WeakSet()


def register_model(model: type) -> None:
    """Track a class so the default scope can cover it once mapped."""
    _paranoid_models.add(model)


def relaxed_models() -> FrozenSet[type]:
    """Return the models currently relaxed in this context."""
    return _relaxed_models.get()


@contextmanager
def including_deleted(*models: type) -> Iterator[None]:
    """
    Suspend the default scope for the given models.

    The previous scope is restored on exit, including when the wrapped
    block raises.

    Usage:
        with including_deleted(Article):
            articles = session.query(Article).all()
    """
    token = _relaxed_models.set(_relaxed_models.get() | frozenset(models))
    try:
        yield
    finally:
        _relaxed_models.reset(token)


def scope_criteria(model: Any) -> ColumnElement[bool]:
    """Build the criteria matching records of ``model`` that are not deleted."""
    return and_(
        *(
            getattr(model, name).is_not(True)
            for name in sorted(model.paranoid_properties())
        )
    )


def _is_relaxed(model: type, relaxed: Iterable[type]) -> bool:
    # Single-table subtypes share rows with their ancestors
    return any(issubclass(model, r) or issubclass(r, model) for r in relaxed)


def scoped_models(relaxed: Iterable[type] = ()) -> List[Type[Any]]:
    """
    Return mapped paranoid models the default scope applies to.

    Args:
        relaxed: Models whose inheritance line is excluded

    Returns:
        Models needing scope criteria
    """
    relaxed = tuple(relaxed)
    models = []
    for model in list(_paranoid_models):
        if not model.paranoid_properties():  # type: ignore[attr-defined]
            continue
        if inspect(model, raiseerr=False) is None:
            continue
        if _is_relaxed(model, relaxed):
            continue
        models.append(model)
    return models


def _apply_default_scope(execute_state: ORMExecuteState) -> None:
    """Add scope criteria to ORM SELECT statements and relationship loads."""
    if not get_config().default_scope_enabled:
        return
    # Column refreshes reload a record already in hand, deleted or not
    if not execute_state.is_select or execute_state.is_column_load:
        return

    relaxed = _relaxed_models.get() | frozenset(
        execute_state.execution_options.get(INCLUDE_DELETED_OPTION, ())
    )
    options = [
        with_loader_criteria(model, scope_criteria(model), include_aliases=True)
        for model in scoped_models(relaxed)
    ]
    if options:
        execute_state.statement = execute_state.statement.options(*options)


def register_default_scope() -> None:
    """Install the default scope listener on all sessions."""
    if not event.contains(Session, "do_orm_execute", _apply_default_scope):
        event.listen(Session, "do_orm_execute", _apply_default_scope)
        logger.debug("Default paranoid scope installed")


def remove_default_scope() -> None:
    """Remove the default scope listener."""
    if event.contains(Session, "do_orm_execute", _apply_default_scope):
        event.remove(Session, "do_orm_execute", _apply_default_scope)
        logger.debug("Default paranoid scope removed")


register_default_scope()
