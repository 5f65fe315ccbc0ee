from datetime import datetime
from enum import StrEnum, auto
from typing import Any, Union
from uuid import UUID

from bson import Decimal128, Int64, ObjectId

from ..document.document_id import DocumentId
from .field_path import FieldPath


"""
The closed set of values a Document field may hold.

Every value stored in a document is one of the kinds below. kind_of() is the single place where Python values are
classified, so code that branches on a value (expectations, serialization) can switch on ValueKind exhaustively
instead of sprinkling isinstance checks.
"""

FieldValue = Union[str, int, float, Decimal128, bool, None, list, dict, ObjectId, DocumentId, UUID, datetime, bytes]

class ValueKind(StrEnum):
	""" Tags for the values that can be stored in a document field. """
	STRING = auto()
	NUMBER = auto()
	BOOLEAN = auto()
	NULL = auto()
	SEQUENCE = auto()
	MAPPING = auto()
	IDENTIFIER = auto()
	DATETIME = auto()
	BINARY = auto()

IDENTIFIER_TYPES: tuple[type, ...] = (ObjectId, DocumentId, UUID)
NUMBER_TYPES: tuple[type, ...] = (int, float, Int64, Decimal128)

def kind_of(value: Any) -> ValueKind:
	""" Classify a value. Raises TypeError for values that can't be stored in a document. """
	# Order matters: bool is a subclass of int, and DocumentId is a subclass of str.
	if value is None:
		return ValueKind.NULL
	elif isinstance(value, bool):
		return ValueKind.BOOLEAN
	elif isinstance(value, IDENTIFIER_TYPES):
		return ValueKind.IDENTIFIER
	elif isinstance(value, NUMBER_TYPES):
		return ValueKind.NUMBER
	elif isinstance(value, str):
		return ValueKind.STRING
	elif isinstance(value, datetime):
		return ValueKind.DATETIME
	elif isinstance(value, bytes):
		# Includes bson.Binary
		return ValueKind.BINARY
	elif isinstance(value, dict):
		return ValueKind.MAPPING
	elif isinstance(value, (list, tuple)):
		return ValueKind.SEQUENCE
	else:
		raise TypeError(f"Values of type {type(value).__name__} can't be stored in a document field.")

def validate_field_value(value: Any, field_path: FieldPath | None = None) -> None:
	""" Validate that a value, and everything nested inside of it, is a storable field value. """
	try:
		kind = kind_of(value)
	except TypeError as e:
		raise TypeError(f"{e} Field: '{field_path}'.") from None

	if kind is ValueKind.MAPPING:
		for key, sub_value in value.items():
			if not isinstance(key, str):
				raise TypeError(f"Mapping keys must be strings. Got key {key!r} of type {type(key).__name__} in field '{field_path}'.")
			validate_field_value(sub_value, field_path.subfield(key) if field_path else FieldPath(key))
	elif kind is ValueKind.SEQUENCE:
		for idx, element in enumerate(value):
			validate_field_value(element, field_path.subidx(idx) if field_path else FieldPath(f"[{idx}]"))

def copy_field_value(value: Any) -> Any:
	""" Returns a deep copy of a field value. Tuples are stored as lists, since that is what the store will hand back. """
	kind = kind_of(value)
	if kind is ValueKind.MAPPING:
		return {key: copy_field_value(sub_value) for key, sub_value in value.items()}
	elif kind is ValueKind.SEQUENCE:
		return [copy_field_value(element) for element in value]
	else:
		# Everything else is immutable
		return value
