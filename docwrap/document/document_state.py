from enum import StrEnum, auto


class DocumentState(StrEnum):
    """ Lifecycle state of a Document.

    NEW -> PERSISTED (insert), PERSISTED -> PERSISTED (update), PERSISTED -> REMOVED (remove).
    REMOVED is terminal. """
    NEW = auto()
    PERSISTED = auto()
    REMOVED = auto()


class UpdateMethod(StrEnum):
    """ Passed to Document.__before_saving__ so the hook knows which write is about to happen. """
    INSERT = auto()
    UPDATE = auto()
