"""
Field value module

This module defines what can be stored inside a Document: the closed set of value kinds,
dot-notation field paths for reading and writing nested values, and the TypedList helper.
"""

from .field_path import FieldPath
from .field_value import FieldValue, ValueKind, kind_of, validate_field_value, copy_field_value
from .typed_list import TypedList
