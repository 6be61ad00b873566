"""Exception types raised by the storage layer."""

from __future__ import annotations

from typing import Any, Optional

from heapstore.ids import TransactionId

__all__ = [
    "CrustyError",
    "StorageIOError",
    "SerializationError",
    "GeneralError",
    "ValidationError",
    "ExecutionError",
    "TransactionNotActiveError",
    "InvalidMutationError",
    "TransactionRollbackError",
    "StorageError",
    "ContainerDoesNotExistError",
    "InvalidOperationError",
    "ConversionError",
    "c_err",
]


class CrustyError(Exception):
    """Base class of every error raised by the database."""

    _template = "{}"

    def __init__(self, message: Any = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self._template.format(self.message)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class StorageIOError(CrustyError):
    """An input/output failure."""


class SerializationError(CrustyError):
    """Data could not be serialized or deserialized."""


class GeneralError(CrustyError):
    """A general database error carrying a message."""

    _template = "Crusty Error: {}"


class ValidationError(CrustyError):
    """Input failed validation."""

    _template = "Validation Error: {}"


class ExecutionError(CrustyError):
    """A failure while executing an operation."""

    _template = "Execution Error: {}"


class TransactionNotActiveError(CrustyError):
    """The transaction was already aborted or committed."""

    _template = "Transaction Not Active Error"

    def __init__(self) -> None:
        super().__init__()


class InvalidMutationError(CrustyError):
    """An insert or update was not valid."""

    _template = "InvalidMutationError {}"


class TransactionRollbackError(CrustyError):
    """A transaction was rolled back."""

    _template = "Transaction Rolledback {!r}"

    def __init__(self, transaction_id: TransactionId) -> None:
        super().__init__(transaction_id)
        self.transaction_id = transaction_id


class StorageError(CrustyError):
    """The storage manager failed."""

    _template = "Storage Error"

    def __init__(self) -> None:
        super().__init__()


class ContainerDoesNotExistError(CrustyError):
    """The requested container is missing or invalid."""

    _template = "Container Does Not Exist"

    def __init__(self) -> None:
        super().__init__()


class InvalidOperationError(CrustyError):
    """The operation is not allowed."""

    _template = "Invalid Operation"

    def __init__(self) -> None:
        super().__init__()


class ConversionError(Exception):
    """A record could not be ingested or converted."""

    FIELD_CONSTRAINT = "FieldConstraintError"
    PRIMARY_KEY_VIOLATION = "PrimaryKeyViolation"
    UNIQUE_VIOLATION = "UniqueViolation"
    TRANSACTION_VIOLATION = "TransactionViolation"
    PARSE_ERROR = "ParseError"
    UNSUPPORTED_TYPE = "UnsupportedType"
    NULL_FIELD_NOT_ALLOWED = "NullFieldNotAllowed"
    WRONG_TYPE = "WrongType"

    _KINDS = frozenset(
        {
            FIELD_CONSTRAINT,
            PRIMARY_KEY_VIOLATION,
            UNIQUE_VIOLATION,
            TRANSACTION_VIOLATION,
            PARSE_ERROR,
            UNSUPPORTED_TYPE,
            NULL_FIELD_NOT_ALLOWED,
            WRONG_TYPE,
        }
    )

    def __init__(
        self,
        kind: str,
        *,
        column: Optional[int] = None,
        message: Optional[str] = None,
        transaction_id: Optional[TransactionId] = None,
    ) -> None:
        if kind not in self._KINDS:
            raise ValueError(f"unknown conversion error kind: {kind!r}")
        if kind == self.FIELD_CONSTRAINT and (column is None or message is None):
            raise ValueError("a field constraint error needs a column and a message")
        if kind == self.NULL_FIELD_NOT_ALLOWED and column is None:
            raise ValueError("a null field error needs a column")
        if kind == self.TRANSACTION_VIOLATION and (
            transaction_id is None or message is None
        ):
            raise ValueError("a transaction violation needs a transaction id and a message")
        super().__init__(kind, column, message, transaction_id)
        self.kind = kind
        self.column = column
        self.message = message
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        details = [
            repr(value)
            for value in (self.transaction_id, self.column, self.message)
            if value is not None
        ]
        return f"{self.kind}({', '.join(details)})" if details else self.kind

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConversionError):
            return NotImplemented
        return self.args == other.args

    def __hash__(self) -> int:
        return hash(self.args)


def c_err(message: str) -> GeneralError:
    """Build a general error from a message."""
    return GeneralError(message)