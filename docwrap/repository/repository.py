import time
from typing import Any, Generic, TypeVar

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, OperationFailure

from ..document.document import Document, ID_FIELD
from ..document.document_state import UpdateMethod
from ..registration.document_registry import DocumentRegistry
from ..typing.field_path import FieldPath
from ..typing.field_value import ValueKind, kind_of, validate_field_value
from ..utilities.errors import PreconditionViolation
from ..utilities.logger import get_logger
from .cursor import Cursor
from .operation_result import OperationResult, OperationStatus


T = TypeVar('T', bound=Document)

CONSTRAINT_ERROR_CODES = frozenset({
	11000, 11001, 12582, # Duplicate key
	121, # Document failed validation on the server
})

def is_constraint_violation(error: Exception) -> bool:
	""" Whether a driver error means the store refused the write because of a rule it enforces (e.g. a unique index). """
	if isinstance(error, DuplicateKeyError):
		return True
	# findAndModify reports server-side validation failures as a plain OperationFailure, not a WriteError
	return isinstance(error, OperationFailure) and error.code in CONSTRAINT_ERROR_CODES

def apply_operator(document: Document, operator: str, path: str, value: Any) -> None:
	""" Apply one of the atomic modifier operators to a document in memory, the way the store would.
	Values the store would reject (e.g. $inc on a string) are left unchanged here; the store reports those. """
	current = document[path]
	if operator == "$set":
		document[path] = value
	elif operator == "$unset":
		del document[path]
	elif operator == "$inc":
		if current is None:
			document[path] = value
		elif kind_of(current) is ValueKind.NUMBER and isinstance(current, (int, float)):
			document[path] = current + value
	elif operator in ("$push", "$addToSet", "$pull"):
		if current is not None and not isinstance(current, list):
			return
		items = list(current or [])
		if operator == "$push":
			items.append(value)
		elif operator == "$addToSet":
			if value not in items:
				items.append(value)
		else:
			items = [item for item in items if item != value]
		document[path] = items
	else:
		raise ValueError(f"Unsupported update operator '{operator}'.")

class Repository(Generic[T]):
	""" Binds a Document class to its collection and performs persistence operations for it.

	Every write runs in this order:
		1. precondition checks (raise PreconditionViolation)
		2. validation, unless skip_validation=True (a failure returns a falsy OperationResult)
		3. document.__before_saving__() (inserts and updates) / document.__before_deleting__() (removes)
		4. before_* observer hooks
		5. the store operation
		6. the lifecycle state change
		7. after_* observer hooks

	insert() and update() return a falsy OperationResult when the store rejects the write because of a constraint (like a
	unique index). insert_or_raise() and update_or_raise() raise ConstraintViolation instead. Both forms validate identically.
	Any other store error propagates unchanged.
	"""

	def __init__(self, document_cls: type[T], registry: DocumentRegistry | None = None, collection: Collection | None = None) -> None:
		self.document_cls = document_cls
		self.registry = registry if registry is not None else DocumentRegistry()
		self.collection_name = self.registry.bind(document_cls)
		self._collection = collection

	@property
	def collection(self) -> Collection:
		""" The bound collection. Defaults to the Document class's collection in the default database, resolved on first use. """
		if self._collection is None:
			self._collection = self.document_cls.get_collection()
		return self._collection

	# region: Insert
	def insert(self, document: T, *, skip_validation: bool = False) -> OperationResult[T]:
		""" Insert a new document. On success the document is PERSISTED and carries its identity. """
		operation = "insert"
		start_time = time.time()
		self._check_document_type(document, operation)
		if not document.is_new():
			raise PreconditionViolation(f"Only new documents can be inserted, but this {type(document).__name__} is {document.state}.", operation=operation, identity=document.identity)

		if not skip_validation and not document.is_valid():
			return self._validation_failed(document, operation)

		document.__before_saving__(UpdateMethod.INSERT)
		observers = self.registry.observers_for(self.document_cls)
		observers.before_insert(document)

		record = document.to_record()
		if self.document_cls.__id_factory__ is not None:
			record = {ID_FIELD: self.document_cls.__id_factory__(), **record}

		try:
			result = self.collection.insert_one(record)
		except OperationFailure as e:
			if not is_constraint_violation(e):
				raise
			return self._constraint_violated(document, operation, record.get(ID_FIELD), e)

		document._mark_persisted(result.inserted_id, operation)
		get_logger().debug(f"Inserted {type(document).__name__} with _id {document.identity} into '{self.collection_name}' in {(time.time() - start_time):.3f} seconds")

		observers.after_insert(document)
		observers.after_insert_or_update(document)
		return OperationResult(OperationStatus.SUCCESS, operation, document, identity=document.identity, errors=document.errors)

	def insert_or_raise(self, document: T, *, skip_validation: bool = False) -> OperationResult[T]:
		""" Like insert(), but raises ConstraintViolation when the store rejects the write. Validation failures are still returned. """
		return self.insert(document, skip_validation=skip_validation).raise_for_constraint_violation()
	# endregion

	# region: Update
	def update(self, document: T, changes: dict[str, Any] | None = None, *, skip_validation: bool = False) -> OperationResult[T]:
		""" Write a persisted document back to the store.

		Without changes, the stored record is replaced with the document's fields. With changes (an update expression such as
		{"$set": {...}}), the expression is passed through to the store and the document's fields are refreshed from the
		updated record.

		Validation runs against the document as it is in memory, before the change: an opaque update expression is not
		validated. Use the atomic modifiers (set_field, push, ...) to validate the document as it will be after the change. """
		operation = "update"
		start_time = time.time()
		self._check_document_type(document, operation)
		self._check_persisted(document, operation)

		if not skip_validation and not document.is_valid():
			return self._validation_failed(document, operation)

		document.__before_saving__(UpdateMethod.UPDATE)
		observers = self.registry.observers_for(self.document_cls)
		observers.before_update(document)

		try:
			if changes is None:
				record = document.to_record()
				del record[ID_FIELD]
				result = self.collection.replace_one({ID_FIELD: document.identity}, record)
				matched = result.matched_count == 1
			else:
				updated_record = self.collection.find_one_and_update(
					{ID_FIELD: document.identity},
					changes,
					return_document=ReturnDocument.AFTER
				)
				matched = updated_record is not None
				if updated_record is not None:
					document._replace_fields(updated_record)
		except OperationFailure as e:
			if not is_constraint_violation(e):
				raise
			return self._constraint_violated(document, operation, document.identity, e)

		if not matched:
			raise PreconditionViolation(f"No stored record found for this {type(document).__name__}. Was it removed elsewhere?", operation=operation, identity=document.identity)

		get_logger().debug(f"Updated {type(document).__name__} with _id {document.identity} in '{self.collection_name}' in {(time.time() - start_time):.3f} seconds")

		observers.after_update(document)
		observers.after_insert_or_update(document)
		return OperationResult(OperationStatus.SUCCESS, operation, document, identity=document.identity, errors=document.errors)

	def update_or_raise(self, document: T, changes: dict[str, Any] | None = None, *, skip_validation: bool = False) -> OperationResult[T]:
		""" Like update(), but raises ConstraintViolation when the store rejects the write. Validation failures are still returned. """
		return self.update(document, changes, skip_validation=skip_validation).raise_for_constraint_violation()
	# endregion

	# region: Atomic modifiers
	# Each of these sends a single update operator to the store and refreshes the document from the result.
	# Unlike update(document, changes), they validate the document as it will be after the change: the operator is
	# applied to a copy first, and the store is only called if that copy is valid.
	def set_field(self, document: T, path: str, value: Any, *, skip_validation: bool = False) -> OperationResult[T]:
		validate_field_value(value, FieldPath(path))
		return self._modify(document, "$set", path, value, skip_validation=skip_validation)

	def unset_field(self, document: T, path: str, *, skip_validation: bool = False) -> OperationResult[T]:
		return self._modify(document, "$unset", path, "", skip_validation=skip_validation)

	def increment(self, document: T, path: str, amount: int | float = 1, *, skip_validation: bool = False) -> OperationResult[T]:
		return self._modify(document, "$inc", path, amount, skip_validation=skip_validation)

	def push(self, document: T, path: str, value: Any, *, skip_validation: bool = False) -> OperationResult[T]:
		validate_field_value(value, FieldPath(path))
		return self._modify(document, "$push", path, value, skip_validation=skip_validation)

	def pull(self, document: T, path: str, value: Any, *, skip_validation: bool = False) -> OperationResult[T]:
		validate_field_value(value, FieldPath(path))
		return self._modify(document, "$pull", path, value, skip_validation=skip_validation)

	def add_to_set(self, document: T, path: str, value: Any, *, skip_validation: bool = False) -> OperationResult[T]:
		validate_field_value(value, FieldPath(path))
		return self._modify(document, "$addToSet", path, value, skip_validation=skip_validation)

	def _modify(self, document: T, operator: str, path: str, value: Any, *, skip_validation: bool) -> OperationResult[T]:
		operation = "update"
		self._check_document_type(document, operation)
		self._check_persisted(document, operation)

		if not skip_validation:
			preview = type(document).from_record(document.to_record())
			apply_operator(preview, operator, path, value)
			valid = preview.is_valid()
			document.errors = preview.errors
			if not valid:
				return self._validation_failed(document, operation)

		return self.update(document, {operator: {path: value}}, skip_validation=True)
	# endregion

	# region: Remove
	def remove(self, document: T) -> OperationResult[T]:
		""" Delete a persisted document from the store. The document is REMOVED afterwards and keeps its identity. """
		operation = "remove"
		start_time = time.time()
		self._check_document_type(document, operation)
		if document.is_removed():
			raise PreconditionViolation(f"This {type(document).__name__} has already been removed.", operation=operation, identity=document.identity)
		self._check_persisted(document, operation)

		if not document.__before_deleting__():
			raise PreconditionViolation(f"This {type(document).__name__} refused to be removed.", operation=operation, identity=document.identity)

		observers = self.registry.observers_for(self.document_cls)
		observers.before_remove(document)

		result = self.collection.delete_one({ID_FIELD: document.identity})
		if result.deleted_count != 1:
			get_logger().warning(f"Removing {type(document).__name__} with _id {document.identity} from '{self.collection_name}' deleted {result.deleted_count} records.")

		document._mark_removed(operation)
		get_logger().debug(f"Removed {type(document).__name__} with _id {document.identity} from '{self.collection_name}' in {(time.time() - start_time):.3f} seconds")

		observers.after_remove(document)
		return OperationResult(OperationStatus.SUCCESS, operation, document, identity=document.identity, errors=document.errors)
	# endregion

	# region: Retrieval
	def find_one(self, filter_or_identity: Any = None) -> T | None:
		""" Return the first matching document, or None if there are no matching documents.
		Pass a filter mapping, or a bare identity as shorthand for {"_id": identity}. """
		start_time = time.time()
		filter = self._to_filter(filter_or_identity)
		record = self.collection.find_one(filter)
		get_logger().debug(f"Retrieved {'a' if record else 'no'} document of type '{self.document_cls.__name__}' for filter {filter} in {(time.time() - start_time):.3f} seconds")

		if record is None:
			return None
		return self.document_cls.from_record(record)

	def find(self, filter: dict[str, Any] | None = None, **find_options: Any) -> Cursor[T]:
		""" Returns a lazy Cursor over the matching documents. find_options (sort, limit, skip, projection...) are passed to the store. """
		return Cursor(self.document_cls, self.collection, filter, **find_options)

	def count(self, filter: dict[str, Any] | None = None) -> int:
		return self.collection.count_documents(filter or {})

	def is_empty(self) -> bool:
		return self.count() == 0

	def reload(self, document: T) -> T:
		""" Re-read a persisted document's fields from the store. """
		operation = "reload"
		self._check_document_type(document, operation)
		self._check_persisted(document, operation)
		record = self.collection.find_one({ID_FIELD: document.identity})
		if record is None:
			raise PreconditionViolation(f"No stored record found for this {type(document).__name__}. Was it removed elsewhere?", operation=operation, identity=document.identity)
		document._replace_fields(record)
		return document
	# endregion

	def drop(self) -> None:
		""" Drop the bound collection, deleting every record in it. """
		get_logger().warning(f"Dropping collection '{self.collection_name}'")
		self.collection.drop()

	# region: Helpers
	def _check_document_type(self, document: Any, operation: str) -> None:
		if not isinstance(document, self.document_cls):
			raise TypeError(f"{operation}: expected a {self.document_cls.__name__}, but got {type(document).__name__}.")

	def _check_persisted(self, document: T, operation: str) -> None:
		if document.identity is None:
			raise PreconditionViolation(f"This {type(document).__name__} has no identity. Insert it first.", operation=operation)
		if not document.is_persisted():
			raise PreconditionViolation(f"This {type(document).__name__} is {document.state}.", operation=operation, identity=document.identity)

	def _to_filter(self, filter_or_identity: Any) -> dict[str, Any]:
		if filter_or_identity is None:
			return {}
		if isinstance(filter_or_identity, dict):
			return filter_or_identity
		return {ID_FIELD: filter_or_identity}

	def _validation_failed(self, document: T, operation: str) -> OperationResult[T]:
		get_logger().info(f"{operation}: {type(document).__name__} (identity {document.identity}) failed validation: {document.errors.full_messages()}")
		return OperationResult(OperationStatus.VALIDATION_FAILED, operation, document, identity=document.identity, errors=document.errors)

	def _constraint_violated(self, document: T, operation: str, identity: Any, error: OperationFailure) -> OperationResult[T]:
		get_logger().info(f"{operation}: the store rejected {type(document).__name__} (identity {identity}): {error}")
		return OperationResult(OperationStatus.CONSTRAINT_VIOLATION, operation, document, identity=identity, errors=document.errors, cause=error)
	# endregion
