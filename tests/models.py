"""Document models and observers shared by the tests."""

from __future__ import annotations

from docwrap import Document, Observer
from docwrap.utilities.special_values import ABSTRACT


class ModelBase(Document):
    """Abstract base for the test models, so registry scans can stay within them."""

    __collection_name__ = ABSTRACT


class User(ModelBase):
    __collection_name__ = "users"

    def validate(self) -> None:
        self.expect.expect_present(self["name"], ("name", "can't be empty"))
        self.expect.expect_present(self["email"], ("email", "can't be empty"))


class Note(ModelBase):
    __collection_name__ = "notes"


class RecordingObserver(Observer):
    """Appends "<label>.<hook>" to a shared event log for every hook it receives."""

    def __init__(self, label: str, events: list[str]) -> None:
        self.label = label
        self.events = events

    def _record(self, hook: str) -> None:
        self.events.append(f"{self.label}.{hook}")

    def before_insert(self, document):
        self._record("before_insert")

    def after_insert(self, document):
        self._record("after_insert")

    def before_update(self, document):
        self._record("before_update")

    def after_update(self, document):
        self._record("after_update")

    def after_insert_or_update(self, document):
        self._record("after_insert_or_update")

    def before_remove(self, document):
        self._record("before_remove")

    def after_remove(self, document):
        self._record("after_remove")
