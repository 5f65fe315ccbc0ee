from typing import Any

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from ..validation.error_collector import ErrorCollector


class DocwrapError(Exception):
    """ Base class for all errors raised by docwrap. """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class SetupError(DocwrapError):
    """Exception raised for configuration errors."""


class PreconditionViolation(DocwrapError):
    """ Raised when an operation is called on a document in a state that doesn't allow it.
    These are programmer errors (e.g. removing a document twice) and are never reported through an OperationResult. """

    def __init__(self, message: str, *, operation: str, identity: Any = None) -> None:
        self.operation = operation
        self.identity = identity
        super().__init__(f"{operation}: {message} (identity: {identity})")


class ConstraintViolation(DocwrapError):
    """ Raised when the store rejects a write because of a constraint it enforces, like a unique index.
    The original driver error is kept on .cause (and chained as __cause__ when raised). """

    def __init__(self, *, operation: str, identity: Any, cause: Exception) -> None:
        self.operation = operation
        self.identity = identity
        self.cause = cause
        self.details: dict[str, Any] | None = getattr(cause, "details", None)
        super().__init__(f"{operation}: the store rejected the write (identity: {identity}). {cause}")


class ValidationError(DocwrapError):
    """Exception raised when document validation fails.
    NOTE: Persistence operations never raise this. It is only raised when explicitly requested, e.g. by OperationResult.raise_for_status(). """

    def __init__(self, errors: 'ErrorCollector') -> None:
        self.errors = errors
        super().__init__("; ".join(errors.full_messages()))
