from typing import Any, Callable, ClassVar, Self

from pymongo.collection import Collection
from pymongo.database import Database

from .document_state import DocumentState, UpdateMethod
from ..typing.field_path import FieldPath
from ..typing.field_value import copy_field_value, validate_field_value
from ..utilities.errors import PreconditionViolation, SetupError, ValidationError
from ..utilities.special_values import ABSTRACT
from ..utilities.undefined import UNDEFINED
from ..validation.error_collector import ErrorCollector
from ..validation.expectations import Expectations


ID_FIELD = "_id"

"""
Validation Behavior:

is_valid() creates a fresh ErrorCollector, runs validate(), and reports whether the collector is still empty.
Repositories call is_valid() before inserting and updating unless validation is explicitly skipped. A failed validation
never raises: the operation returns a falsy OperationResult and the errors stay on document.errors for the caller to inspect.

If you need to prepare a document right before it is written (e.g. mirroring a new field into a legacy field), extend
__before_saving__(). It runs after validation and before any observers.
"""

class Document:
	""" One record of a collection, held in memory as a nested mapping of fields.

	Subclasses bind to a collection with __collection_name__ and validate themselves by overriding validate().
	Fields are read and written by dot-notation path: doc["address.city"] = "Oslo". Unset paths read as None.

	A new Document has no identity. It gets one when a Repository inserts it, either from __id_factory__ (if the class sets
	one) or from the store. The identity never changes afterwards.
	"""
	# Class fields
	__collection_name__: ClassVar[str] = ABSTRACT
	__id_factory__: ClassVar[Callable[[], Any] | None] = None
	""" Set this (e.g. to DocumentId) to assign identities client-side at insert time instead of letting the store assign an ObjectId. """

	def __init__(self, fields: dict[str, Any] | None = None, **kwargs: Any) -> None:
		self._fields: dict[str, Any] = {}
		self._identity: Any = None
		self._state: DocumentState = DocumentState.NEW
		self.errors: ErrorCollector = ErrorCollector()

		for key, value in {**(fields or {}), **kwargs}.items():
			self[key] = value

	# region: Collection binding
	@classmethod
	def get_collection_name(cls) -> str:
		if not cls.__collection_name__ or cls.__collection_name__ == ABSTRACT:
			raise SetupError(f"Collection name not defined for {cls.__name__}. __collection_name__ must be specified for documents that are stored.")
		return cls.__collection_name__

	@classmethod
	def get_db(cls) -> Database:
		""" Returns the default database. Override this to store a Document class in a different database. """
		from .mongo_db import create_mongo_db
		return create_mongo_db()

	@classmethod
	def get_collection(cls) -> Collection:
		""" Returns the corresponding Pymongo Collection. """
		return cls.get_db()[cls.get_collection_name()]
	# endregion

	# region: Lifecycle
	@property
	def identity(self) -> Any:
		return self._identity

	@property
	def state(self) -> DocumentState:
		return self._state

	def is_new(self) -> bool:
		return self._state is DocumentState.NEW

	def is_persisted(self) -> bool:
		return self._state is DocumentState.PERSISTED

	def is_removed(self) -> bool:
		return self._state is DocumentState.REMOVED

	def _mark_persisted(self, identity: Any, operation: str) -> None:
		""" NEW -> PERSISTED. The identity is set here and nowhere else. """
		if not self.is_new():
			raise PreconditionViolation(f"Only new documents can be persisted, but this {type(self).__name__} is {self._state}.", operation=operation, identity=self._identity)
		if identity is None:
			raise PreconditionViolation("The store did not return an identity.", operation=operation)
		self._identity = identity
		self._state = DocumentState.PERSISTED

	def _mark_removed(self, operation: str) -> None:
		""" PERSISTED -> REMOVED. """
		if not self.is_persisted():
			raise PreconditionViolation(f"Only persisted documents can be removed, but this {type(self).__name__} is {self._state}.", operation=operation, identity=self._identity)
		self._state = DocumentState.REMOVED

	def _replace_fields(self, record: dict[str, Any]) -> None:
		""" Replace the in-memory fields with a record read back from the store. """
		record = dict(record)
		record_identity = record.pop(ID_FIELD, self._identity)
		if record_identity != self._identity:
			raise ValueError(f"Record with _id {record_identity!r} can't be loaded into document with identity {self._identity!r}.")
		validate_field_value(record)
		self._fields = copy_field_value(record)
	# endregion

	# region: Field access
	def __getitem__(self, path: str) -> Any:
		return self.get(path)

	def get(self, path: str, default: Any = None) -> Any:
		""" Returns the value stored at the dot-notation path, or default if nothing is stored there. """
		if path == ID_FIELD:
			return self._identity if self._identity is not None else default
		value = FieldPath(path).read_from(self._fields)
		if value is UNDEFINED:
			return default
		return value

	def __setitem__(self, path: str, value: Any) -> None:
		field_path = FieldPath(path)
		if field_path.get_parts()[0] == ID_FIELD:
			raise KeyError(f"'{ID_FIELD}' can't be set through field access. Identities are assigned when the document is inserted.")
		validate_field_value(value, field_path)
		field_path.write_into(self._fields, copy_field_value(value))

	def __delitem__(self, path: str) -> None:
		""" Removes the key at the path. Deleting a path that isn't set does nothing. """
		FieldPath(path).delete_from(self._fields)

	def __contains__(self, path: object) -> bool:
		if not isinstance(path, str):
			return False
		if path == ID_FIELD:
			return self._identity is not None
		return FieldPath(path).read_from(self._fields) is not UNDEFINED

	def update_fields(self, fields: dict[str, Any]) -> Self:
		""" Set several paths at once. Returns self. """
		for path, value in fields.items():
			self[path] = value
		return self

	@property
	def fields(self) -> dict[str, Any]:
		""" A copy of the fields, without the identity. """
		return copy_field_value(self._fields)

	def keys(self) -> list[str]:
		return list(self._fields.keys())
	# endregion

	# region: Document <> record
	def to_record(self) -> dict[str, Any]:
		""" The raw record written to the store: a copy of the fields, plus _id once an identity exists. """
		record: dict[str, Any] = {}
		if self._identity is not None:
			record[ID_FIELD] = self._identity
		record.update(copy_field_value(self._fields))
		return record

	@classmethod
	def from_record(cls, record: dict[str, Any]) -> Self:
		""" Build a persisted document from a raw record read from the store. """
		if not isinstance(record, dict):
			raise TypeError(f"Expected a record of type dict. Instead received {type(record).__name__}.")
		if record.get(ID_FIELD) is None:
			raise ValueError(f"Record for {cls.__name__} has no {ID_FIELD}. Only stored records can be decoded into documents.")

		# Skip subclass __init__ overrides; the record is the complete state.
		document = cls.__new__(cls)
		Document.__init__(document)
		document._identity = record[ID_FIELD]
		document._state = DocumentState.PERSISTED
		document._replace_fields(record)
		return document
	# endregion

	# region: Validation
	@property
	def expect(self) -> Expectations:
		""" Expectations bound to the current error collector. Use within validate(). """
		return Expectations(self.errors)

	def validate(self) -> None:
		""" Override this to validate the document. Add failures with self.errors.add() or the self.expect checks. """
		return

	def is_valid(self) -> bool:
		self.errors = ErrorCollector()
		self.validate()
		return self.errors.is_empty()

	def raise_if_invalid(self) -> None:
		""" Runs validation and raises ValidationError if it fails. """
		if not self.is_valid():
			raise ValidationError(self.errors)
	# endregion

	# region: Document hooks
	def __before_saving__(self, update_method: UpdateMethod) -> None:
		""" Extend this if you want to perform operations right before the document is written. Runs after validation and before observers. """
		return

	def __before_deleting__(self) -> bool:
		""" Override this if you want to add checks (like referential integrity) before removing. Return False to refuse the removal. """
		return True
	# endregion

	def __repr__(self) -> str:
		return f"{type(self).__name__}(identity={self._identity!r}, state={self._state}, fields={self._fields!r})"
