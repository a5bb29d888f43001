"""Error types for the record store.

Repositories translate driver errors into these so executors can tell a
missing schema field apart from any other failure.
"""

from pymongo.errors import OperationFailure, PyMongoError

# MongoDB error code for a write rejected by a collection's $jsonSchema validator
DOCUMENT_VALIDATION_FAILURE = 121


class StoreError(Exception):
    """Raised when a store operation fails."""

    pass


class SchemaGapError(StoreError):
    """Raised when a write fails because an expected field is not in the schema."""

    def __init__(self, field: str, message: str) -> None:
        """Initialize schema gap error.

        Args:
            field: The field the collection schema does not allow.
            message: Underlying driver message.
        """
        super().__init__(message)
        self.field = field


def translate_error(error: PyMongoError, fields: tuple[str, ...] = ()) -> StoreError:
    """Map a driver error to a store error.

    A document validation failure, or any operation failure whose message
    names one of ``fields``, becomes a SchemaGapError for that field.

    Args:
        error: The error raised by pymongo.
        fields: Fields written by the failed operation.

    Returns:
        The store error to raise in its place.
    """
    message = str(error)
    if isinstance(error, OperationFailure):
        for name in fields:
            if name in message:
                return SchemaGapError(name, message)
        if error.code == DOCUMENT_VALIDATION_FAILURE and fields:
            return SchemaGapError(fields[0], message)
    return StoreError(message)


__all__ = [
    "DOCUMENT_VALIDATION_FAILURE",
    "SchemaGapError",
    "StoreError",
    "translate_error",
]
