from dataclasses import dataclass, field
from typing import Callable, TypeVar

from bidict import bidict

from ..document.document import Document
from ..observing.observer import Observer
from ..observing.observer_chain import ObserverChain
from ..utilities.errors import SetupError
from ..utilities.logger import get_logger
from ..utilities.special_values import ABSTRACT


O = TypeVar('O', bound=type[Observer])

def iter_subclasses(cls: type[Document]) -> set[type[Document]]:
	""" Direct and indirect subclasses of cls. """
	subclasses = set()
	for subclass in cls.__subclasses__():
		subclasses.add(subclass)
		subclasses.update(iter_subclasses(subclass))
	return subclasses


@dataclass
class DocumentRegistry:
	""" Holds, for each Document class, the collection it is bound to and the observers registered on it.

	Populate the registry while setting up your models, then call seal(). Repositories only read from it afterwards.
	The registry is not synchronized: don't register anything while persistence operations are running.
	"""
	collections: bidict[str, type[Document]] = field(default_factory=bidict)
	""" Collection name <-> Document class. Both sides are unique. """

	observers: dict[type[Document], ObserverChain] = field(default_factory=dict)

	sealed: bool = False

	# region: Collections
	def bind(self, document_cls: type[Document]) -> str:
		""" Bind a Document class to its collection. Binding the same class twice is a no-op. Returns the collection name. """
		collection_name = document_cls.get_collection_name()

		if self.collections.get(collection_name) is document_cls:
			return collection_name

		self._ensure_not_sealed(f"bind {document_cls.__name__}")
		if collection_name in self.collections:
			raise SetupError(f"Collection name '{collection_name}' defined in Document class {document_cls.__name__} is already bound to {self.collections[collection_name].__name__}.")
		if document_cls in self.collections.inverse:
			raise SetupError(f"Document class {document_cls.__name__} is already bound to collection '{self.collections.inverse[document_cls]}'.")

		self.collections[collection_name] = document_cls
		get_logger().debug(f"Bound Document class '{document_cls.__name__}' to collection '{collection_name}'")
		return collection_name

	def register_all(self, base: type[Document] = Document) -> list[type[Document]]:
		"""
		Uses introspection to find all subclasses of base and binds each non-abstract one to its collection.

		In the process, we validate:
		- All Document classes have unique class names
		- All Document classes define a collection name in their own body (use ABSTRACT for base classes)
		- All collection names are unique across Document classes
		"""
		unique_class_names: set[str] = set()
		registered: list[type[Document]] = []

		# Sort so that errors (and registration order) don't depend on set iteration order
		for document_cls in sorted(iter_subclasses(base), key=lambda cls: (cls.__module__, cls.__qualname__)):
			if document_cls.__name__ in unique_class_names:
				raise SetupError(f"Document class name {document_cls.__name__} already exists.")
			unique_class_names.add(document_cls.__name__)

			# Check the class's own __dict__, not inherited attributes
			if "__collection_name__" not in document_cls.__dict__:
				raise SetupError(f"Document class {document_cls.__name__} does not define a __collection_name__. For abstract documents, use ABSTRACT.")

			if document_cls.__dict__["__collection_name__"] == ABSTRACT:
				continue

			self.bind(document_cls)
			registered.append(document_cls)

		return registered

	def document_cls_for(self, collection_name: str) -> type[Document]:
		if collection_name not in self.collections:
			raise SetupError(f"No Document class is bound to collection '{collection_name}'.")
		return self.collections[collection_name]
	# endregion

	# region: Observers
	def register_observer(self, document_cls: type[Document], observer: Observer) -> None:
		""" Observers are called in the order they were registered. """
		self._ensure_not_sealed(f"register observer {type(observer).__name__}")
		if not isinstance(observer, Observer):
			raise SetupError(f"Observers must inherit from Observer. Got {type(observer).__name__}.")
		self.observers.setdefault(document_cls, ObserverChain()).append(observer)

	def observer(self, *document_classes: type[Document]) -> Callable[[O], O]:
		""" Class decorator which instantiates the observer class and registers the instance on each of the Document classes.

		Example:
			@registry.observer(User)
			class AuditTrail(Observer):
				def after_insert(self, document): ...
		"""
		def decorator(observer_cls: O) -> O:
			instance = observer_cls()
			for document_cls in document_classes:
				self.register_observer(document_cls, instance)
			return observer_cls
		return decorator

	def observers_for(self, document_cls: type[Document]) -> ObserverChain:
		""" The observers registered on exactly this class. Observers aren't inherited by subclasses. """
		return self.observers.get(document_cls, ObserverChain())
	# endregion

	def seal(self) -> None:
		""" Marks the end of setup. Any further binding or registration raises SetupError. """
		self.sealed = True

	def _ensure_not_sealed(self, action: str) -> None:
		if self.sealed:
			raise SetupError(f"Cannot {action}: the registry has been sealed.")
