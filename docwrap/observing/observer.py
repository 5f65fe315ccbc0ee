from typing import Any

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ..document.document import Document


class Observer:
	""" Receives lifecycle callbacks around persistence operations for the Document classes it is registered on.
	Override only the hooks you need; the rest do nothing.

	A hook that raises aborts the remaining observers and the persistence operation itself. The error is propagated to the caller.
	NOTE: Hooks that persist other documents (or the same one) can recurse without bound. Nothing guards against this.
	"""

	def before_insert(self, document: 'Document') -> Any:
		pass

	def after_insert(self, document: 'Document') -> Any:
		pass

	def before_update(self, document: 'Document') -> Any:
		pass

	def after_update(self, document: 'Document') -> Any:
		pass

	def after_insert_or_update(self, document: 'Document') -> Any:
		""" Runs after after_insert or after_update. """
		pass

	def before_remove(self, document: 'Document') -> Any:
		pass

	def after_remove(self, document: 'Document') -> Any:
		pass
