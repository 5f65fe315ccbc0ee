from collections.abc import Sequence
from typing import Self, TypeVar, Generic, List, Iterable, overload


# Define a type variable T that can be any type
T = TypeVar('T')

class TypedList(Generic[T], Sequence[T]):
    """ A list that only accepts elements of the types listed in __allowed_types__.
    Insertion order is preserved. Elements can be appended but not removed, since the lists built on this (observer chains) only grow during setup. """

    __allowed_types__: tuple[type, ...]
    """ Element type must be specified by inheriting classes. """

    def __init__(self, initial_elements: Iterable[T] | None = None):
        """
        Initialize a typed list.

        :param initial_elements: An optional iterable of initial elements to populate the list.
        """
        self._elements: List[T] = []

        if initial_elements:
            self.extend(initial_elements)

    def __check_type__(self, element: T):
        """
        Check whether the element is of the correct type.

        :param element: The element to check.
        :raises TypeError: If the element is not of the expected type.
        """
        if not isinstance(element, self.__allowed_types__):
            allowed = ", ".join(type_.__name__ for type_ in self.__allowed_types__)
            raise TypeError(f"Got invalid type {type(element).__name__}. Expected one of: {allowed}.")

    def append(self, element: T):
        self.__check_type__(element)
        self._elements.append(element)

    def extend(self, elements: Iterable[T]):
        elements = list(elements)
        for element in elements:
            self.__check_type__(element)
        self._elements.extend(elements)

    @overload
    def __getitem__(self, idxs: int) -> T: ...

    @overload
    def __getitem__(self, idxs: slice) -> Self: ...

    def __getitem__(self, idxs: int | slice) -> T | Self:
        if isinstance(idxs, slice):
            # Handle slice: return a new TypedList instance with the sliced elements
            return self.__class__(self._elements[idxs])
        else:
            return self._elements[idxs]

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self):
        return iter(list(self._elements))

    def __str__(self) -> str:
        return str(self._elements)

    def __contains__(self, item) -> bool:
        return item in self._elements
