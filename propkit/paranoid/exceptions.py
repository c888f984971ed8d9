"""Exceptions for paranoid model operations."""

from typing import Optional


class ParanoidError(Exception):
    """Base exception for paranoid model operations."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        self.entity_id = entity_id
        super().__init__(message)


class PersistenceError(ParanoidError):
    """Raised when the datastore rejects a soft or hard removal."""

    def __init__(self, operation: str, entity_id: str):
        self.operation = operation
        super().__init__(
            f"Failed to {operation} entity {entity_id}",
            entity_id=entity_id,
        )


class DetachedRecordError(ParanoidError):
    """Raised when a persisted record has no session to act through."""

    def __init__(self, entity_id: str):
        super().__init__(
            f"Entity {entity_id} is not attached to a session",
            entity_id=entity_id,
        )


class UnknownPropertyError(ParanoidError):
    """Raised when declaring a paranoid property the model does not define."""

    def __init__(self, model_name: str, property_name: str):
        self.property_name = property_name
        super().__init__(f"{model_name} has no property {property_name!r}")


class SessionMismatchError(ParanoidError):
    """Raised when a record belongs to a session other than the one given."""

    def __init__(self, entity_id: str):
        super().__init__(
            f"Entity {entity_id} is attached to a different session",
            entity_id=entity_id,
        )
