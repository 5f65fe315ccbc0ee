from typing import Any

from ..utilities.undefined import UNDEFINED, Undefined


class FieldPath(str):
	""" String representation of a path within a document, in MongoDB dot notation (e.g. "address.city" or "items.0.sku").
	Numeric parts index into lists. Paths built with subidx() render list indexes as [idx], which is only used for messages. """

	def __new__(cls, path: str) -> 'FieldPath':
		if not isinstance(path, str) or not path:
			raise ValueError(f"Field path must be a non-empty string. Got {path!r}.")
		return super().__new__(cls, path)

	def subfield(self, field_name: str) -> 'FieldPath':
		""" Returns a new FieldPath which points to the specified subfield of the current path. """
		return FieldPath(str(self) + "." + field_name)

	def subidx(self, idx: int) -> 'FieldPath':
		""" Returns a new FieldPath which points to the specified index of an element of the current path. """
		return FieldPath(str(self) + f"[{idx}]")

	def get_parts(self) -> tuple[str, ...]:
		parts = tuple(self.split("."))
		if any(not part for part in parts):
			raise ValueError(f"Invalid field path '{self}'. Empty path segments are not allowed.")
		return parts

	def field_name(self) -> str:
		""" Return the final field name of the path. """
		return self.get_parts()[-1]

	def read_from(self, fields: dict[str, Any]) -> Any | Undefined:
		""" Navigate into the nested fields and return the value at this path, or UNDEFINED if nothing is stored there. """
		current: Any = fields
		for part in self.get_parts():
			if isinstance(current, dict):
				if part not in current:
					return UNDEFINED
				current = current[part]
			elif isinstance(current, list) and part.isdigit():
				idx = int(part)
				if idx >= len(current):
					return UNDEFINED
				current = current[idx]
			else:
				return UNDEFINED
		return current

	def write_into(self, fields: dict[str, Any], value: Any) -> None:
		""" Store the value at this path, creating intermediate mappings as needed. """
		parts = self.get_parts()
		container: Any = fields
		for part in parts[:-1]:
			if isinstance(container, list) and part.isdigit():
				container = container[self._list_index(container, part)]
				continue
			if not isinstance(container, dict):
				raise TypeError(f"Cannot set '{self}': '{part}' is inside a {type(container).__name__}, not a mapping.")
			next_container = container.get(part)
			if not isinstance(next_container, (dict, list)):
				next_container = {}
				container[part] = next_container
			container = next_container

		last = parts[-1]
		if isinstance(container, list) and last.isdigit():
			container[self._list_index(container, last)] = value
		elif isinstance(container, dict):
			container[last] = value
		else:
			raise TypeError(f"Cannot set '{self}': the parent value is a {type(container).__name__}, not a mapping.")

	def _list_index(self, container: list, part: str) -> int:
		""" Lists are never grown by writes: the index must already exist. """
		idx = int(part)
		if idx >= len(container):
			raise ValueError(f"Cannot set '{self}': index {idx} is past the end of a list of length {len(container)}.")
		return idx

	def delete_from(self, fields: dict[str, Any]) -> bool:
		""" Remove the key at this path. Returns False if there was nothing to remove. """
		parts = self.get_parts()
		parent = FieldPath(".".join(parts[:-1])).read_from(fields) if len(parts) > 1 else fields
		if isinstance(parent, dict) and parts[-1] in parent:
			del parent[parts[-1]]
			return True
		return False
