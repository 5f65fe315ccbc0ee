from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any, Generic, TypeVar

from ..utilities.errors import ConstraintViolation, ValidationError
from ..validation.error_collector import ErrorCollector

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ..document.document import Document


T = TypeVar('T', bound='Document')

class OperationStatus(StrEnum):
	SUCCESS = auto()
	VALIDATION_FAILED = auto()
	CONSTRAINT_VIOLATION = auto()

@dataclass
class OperationResult(Generic[T]):
	""" Returns the result of a persistence operation. Truthy only on success.

	Precondition violations (e.g. removing a document twice) are raised, never returned. """
	status: OperationStatus
	operation: str
	document: T
	identity: Any = None
	errors: ErrorCollector = field(default_factory=ErrorCollector)
	""" The document's errors after validation. Populated when status is VALIDATION_FAILED. """
	cause: Exception | None = None
	""" The store error behind a CONSTRAINT_VIOLATION. """

	def __post_init__(self) -> None:
		if self.status is OperationStatus.CONSTRAINT_VIOLATION and self.cause is None:
			raise ValueError("A CONSTRAINT_VIOLATION result needs the store error that caused it.")

	def __bool__(self) -> bool:
		return self.status is OperationStatus.SUCCESS

	@property
	def succeeded(self) -> bool:
		return self.status is OperationStatus.SUCCESS

	def raise_for_status(self) -> 'OperationResult[T]':
		""" Raises ValidationError or ConstraintViolation if the operation failed. Returns self otherwise. """
		if self.status is OperationStatus.VALIDATION_FAILED:
			raise ValidationError(self.errors)
		if self.status is OperationStatus.CONSTRAINT_VIOLATION:
			raise ConstraintViolation(operation=self.operation, identity=self.identity, cause=self.cause) from self.cause
		return self

	def raise_for_constraint_violation(self) -> 'OperationResult[T]':
		""" Raises ConstraintViolation if the store rejected the write. Validation failures are still returned. """
		if self.status is OperationStatus.CONSTRAINT_VIOLATION:
			return self.raise_for_status()
		return self
