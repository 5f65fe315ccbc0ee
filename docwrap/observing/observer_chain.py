from .observer import Observer
from ..typing.typed_list import TypedList
from ..utilities.logger import get_logger

from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from ..document.document import Document


class ObserverChain(TypedList[Observer], Observer):
	""" The observers registered on one Document class, in registration order.
	Calling a hook on the chain calls it on every observer in order. """
	__allowed_types__ = (Observer, )

	def before_insert(self, document: 'Document') -> None:
		for observer in self:
			observer.before_insert(document)

	def after_insert(self, document: 'Document') -> None:
		for observer in self:
			observer.after_insert(document)

	def before_update(self, document: 'Document') -> None:
		for observer in self:
			observer.before_update(document)

	def after_update(self, document: 'Document') -> None:
		for observer in self:
			observer.after_update(document)

	def after_insert_or_update(self, document: 'Document') -> None:
		for observer in self:
			observer.after_insert_or_update(document)

	def before_remove(self, document: 'Document') -> None:
		for observer in self:
			observer.before_remove(document)

	def after_remove(self, document: 'Document') -> None:
		for observer in self:
			observer.after_remove(document)

	def append(self, element: Observer):
		if element is self:
			raise ValueError("An observer chain can't observe itself.")
		get_logger().debug(f"Registered observer {type(element).__name__} (position {len(self) + 1})")
		super().append(element)
