from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class ErrorEntry:
	field: str | None
	""" Dot-notation path of the field the error is about. None for errors about the document as a whole. """
	message: str

	def full_message(self, *, capitalize: bool = False) -> str:
		text = self.message if self.field is None else f"{self.field} {self.message}"
		if capitalize:
			return text[:1].upper() + text[1:]
		return text

class ErrorCollector:
	""" The ordered set of validation failures from one validation pass. Empty means the document is valid. """

	def __init__(self) -> None:
		self._entries: list[ErrorEntry] = []

	@property
	def entries(self) -> tuple[ErrorEntry, ...]:
		return tuple(self._entries)

	def add(self, field: str | None, message: str) -> None:
		self._entries.append(ErrorEntry(field, message))

	def on(self, field: str) -> list[str]:
		""" Returns the messages recorded for a single field, in the order they were added. """
		return [entry.message for entry in self._entries if entry.field == field]

	def full_messages(self, *, capitalize: bool = False) -> list[str]:
		""" Human-readable messages, e.g. "name can't be empty" (or "Name can't be empty" with capitalize=True). """
		return [entry.full_message(capitalize=capitalize) for entry in self._entries]

	def is_empty(self) -> bool:
		return not self._entries

	def __len__(self) -> int:
		return len(self._entries)

	def __bool__(self) -> bool:
		return bool(self._entries)

	def __iter__(self) -> Iterator[ErrorEntry]:
		return iter(self._entries)

	def __repr__(self) -> str:
		return f"ErrorCollector({self.full_messages()!r})"
