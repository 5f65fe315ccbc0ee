import re
from collections.abc import Sized
from typing import Any

from ..typing.field_value import ValueKind, kind_of
from .error_collector import ErrorCollector


Error = str | tuple[str, str]
""" Either a (field, message) pair or a bare message for errors about the whole document. """

class Expectations:
	""" Declarative checks used inside Document.validate().

	Each check appends at most one entry to the collector and never raises on failure, so every failing check in a
	validation pass is recorded. The not_ variants invert the check.

	Example:
		def validate(self) -> None:
			self.expect.expect_present(self["name"], ("name", "can't be empty"))
			self.expect.expect_pattern_match(self["email"], ("email", "is invalid"), with_=r".+@.+", allow_nil=True)
	"""

	def __init__(self, errors: ErrorCollector) -> None:
		self.errors = errors

	# region: Presence
	def expect_present(self, value: Any, error: Error) -> bool:
		""" Fails when the value is None, an empty or blank string, or an empty container. """
		return self._record(_is_present(value), error)

	def not_expect_present(self, value: Any, error: Error) -> bool:
		return self._record(not _is_present(value), error)
	# endregion

	# region: Booleans
	def expect_boolean_true(self, value: Any, error: Error) -> bool:
		""" Fails unless the value is exactly True. """
		return self._record(value is True, error)

	def not_expect_boolean_true(self, value: Any, error: Error) -> bool:
		""" Fails unless the value is exactly False. """
		return self._record(value is False, error)
	# endregion

	# region: Numbers
	def expect_numeric(self, value: Any, error: Error, *, allow_nil: bool = False) -> bool:
		""" Fails unless the value is a number or a string that parses as one. """
		if value is None and allow_nil:
			return True
		return self._record(_is_numeric(value), error)

	def not_expect_numeric(self, value: Any, error: Error, *, allow_nil: bool = False) -> bool:
		if value is None and allow_nil:
			return True
		return self._record(not _is_numeric(value), error)
	# endregion

	# region: Patterns
	def expect_pattern_match(self, value: Any, error: Error, *, with_: str | re.Pattern[str], allow_nil: bool = False) -> bool:
		""" Fails unless the value matches the pattern (re.search semantics). None never matches. """
		if value is None and allow_nil:
			return True
		return self._record(_matches(value, with_), error)

	def not_expect_pattern_match(self, value: Any, error: Error, *, with_: str | re.Pattern[str], allow_nil: bool = False) -> bool:
		if value is None and allow_nil:
			return True
		return self._record(not _matches(value, with_), error)
	# endregion

	# region: Length
	def expect_length(
			self,
			value: Any,
			error: Error,
			*,
			minimum: int | None = None,
			maximum: int | None = None,
			range: range | tuple[int, int] | None = None
		) -> bool:
		""" Fails when the value's length is outside the bound(s). Values without a length (including None) always fail.
		A range may be a Python range or an inclusive (low, high) pair. """
		if value is None or not isinstance(value, Sized):
			return self._record(False, error)

		length = len(value)
		passed = True
		if minimum is not None and length < minimum:
			passed = False
		if maximum is not None and length > maximum:
			passed = False
		if range is not None:
			if isinstance(range, tuple):
				low, high = range
				passed = passed and low <= length <= high
			else:
				passed = passed and length in range
		return self._record(passed, error)
	# endregion

	def _record(self, passed: bool, error: Error) -> bool:
		if not passed:
			if isinstance(error, tuple):
				field, message = error
				self.errors.add(field, message)
			else:
				self.errors.add(None, error)
		return passed

def _is_present(value: Any) -> bool:
	if value is None:
		return False
	if isinstance(value, str):
		return bool(value.strip())
	if isinstance(value, Sized):
		return len(value) > 0
	return True

def _is_numeric(value: Any) -> bool:
	try:
		kind = kind_of(value)
	except TypeError:
		return False

	if kind is ValueKind.NUMBER:
		return True
	if kind is ValueKind.STRING:
		try:
			float(value.strip())
		except ValueError:
			return False
		return True
	return False

def _matches(value: Any, pattern: str | re.Pattern[str]) -> bool:
	if value is None:
		return False
	return re.search(pattern, str(value)) is not None
