from typing import Any, Generic, Iterator, Self, TypeVar

from pymongo import ASCENDING
from pymongo.collection import Collection

from ..utilities.errors import PreconditionViolation
from ..utilities.logger import get_logger

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ..document.document import Document


T = TypeVar('T', bound='Document')

class Cursor(Generic[T]):
	""" Lazily iterates over the results of a query, decoding one record into a Document per advance.

	The query isn't sent to the store until the first advance, so sort(), limit() and skip() can still be chained before then.
	Once exhausted (or closed) a cursor stays exhausted; call find() again to re-run the query.
	"""

	def __init__(self, document_cls: type[T], collection: Collection, filter: dict[str, Any] | None = None, **find_options: Any) -> None:
		self.document_cls = document_cls
		self.collection = collection
		self.filter: dict[str, Any] = dict(filter or {})
		self.find_options: dict[str, Any] = find_options

		self._raw_cursor: Any = None
		self._exhausted = False
		self._retrieved = 0

	# region: Query options
	def sort(self, key_or_list: str | list[tuple[str, int]], direction: int = ASCENDING) -> Self:
		if isinstance(key_or_list, str):
			key_or_list = [(key_or_list, direction)]
		return self._set_option("sort", key_or_list)

	def limit(self, limit: int) -> Self:
		return self._set_option("limit", limit)

	def skip(self, skip: int) -> Self:
		return self._set_option("skip", skip)

	def _set_option(self, name: str, value: Any) -> Self:
		if self.started:
			raise PreconditionViolation(f"Can't set '{name}' on a cursor that has already been advanced.", operation="find")
		self.find_options[name] = value
		return self
	# endregion

	@property
	def started(self) -> bool:
		return self._raw_cursor is not None or self._exhausted

	@property
	def exhausted(self) -> bool:
		return self._exhausted

	@property
	def retrieved(self) -> int:
		""" Number of documents decoded so far. """
		return self._retrieved

	def next(self) -> T | None:
		""" Returns the next document, or None once the results are exhausted. """
		if self._exhausted:
			return None

		if self._raw_cursor is None:
			get_logger().debug(f"Querying '{self.collection.name}' for {self.document_cls.__name__} with filter {self.filter} and options {self.find_options}")
			self._raw_cursor = self.collection.find(self.filter, **self.find_options)

		record = next(self._raw_cursor, None)
		if record is None:
			self.close()
			return None

		self._retrieved += 1
		return self.document_cls.from_record(record)

	def close(self) -> None:
		""" Release the underlying store cursor. The cursor is exhausted afterwards. """
		if self._raw_cursor is not None and hasattr(self._raw_cursor, "close"):
			self._raw_cursor.close()
		self._raw_cursor = None
		self._exhausted = True

	def to_list(self) -> list[T]:
		""" Decode every remaining result. """
		return list(self)

	def __iter__(self) -> Iterator[T]:
		return self

	def __next__(self) -> T:
		document = self.next()
		if document is None:
			raise StopIteration
		return document

	def __enter__(self) -> Self:
		return self

	def __exit__(self, *exc_info: Any) -> None:
		self.close()

	def __repr__(self) -> str:
		return f"Cursor({self.document_cls.__name__}, filter={self.filter}, retrieved={self._retrieved}, exhausted={self._exhausted})"
