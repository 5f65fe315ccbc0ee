"""Tests for docwrap.observing and docwrap.registration."""

from __future__ import annotations

import pytest

from docwrap import Document, DocumentRegistry, Observer, ObserverChain, Repository, SetupError
from docwrap.utilities.special_values import ABSTRACT

from .fake_collection import FakeCollection
from .models import ModelBase, Note, RecordingObserver, User


def _valid_user(**fields) -> User:
    return User({"name": "Ada", "email": "ada@example.com", **fields})


class TestObserverChain:
    def test_default_hooks_do_nothing(self):
        observer = Observer()
        assert observer.before_insert(User()) is None
        assert observer.after_remove(User()) is None

    def test_calls_members_in_registration_order(self):
        events: list[str] = []
        chain = ObserverChain([RecordingObserver("o1", events), RecordingObserver("o2", events)])
        chain.before_update(User())
        assert events == ["o1.before_update", "o2.before_update"]

    def test_only_observers_are_accepted(self):
        with pytest.raises(TypeError):
            ObserverChain().append(object())

    def test_a_chain_cannot_contain_itself(self):
        chain = ObserverChain()
        with pytest.raises(ValueError):
            chain.append(chain)


class TestDispatchOrdering:
    def test_insert_ordering_around_store_call(self, registry, users_collection):
        events: list[str] = []

        class StoreSpy(FakeCollection):
            def insert_one(self, document):
                events.append("store.insert_one")
                return super().insert_one(document)

        registry.register_observer(User, RecordingObserver("o1", events))
        registry.register_observer(User, RecordingObserver("o2", events))
        users = Repository(User, registry, collection=StoreSpy("users"))

        assert users.insert(_valid_user())
        assert events == [
            "o1.before_insert",
            "o2.before_insert",
            "store.insert_one",
            "o1.after_insert",
            "o2.after_insert",
            "o1.after_insert_or_update",
            "o2.after_insert_or_update",
        ]

    def test_update_and_remove_hooks(self, registry, users):
        events: list[str] = []
        registry.register_observer(User, RecordingObserver("o1", events))
        user = _valid_user()
        users.insert(user)
        events.clear()

        user["name"] = "Grace"
        users.update(user)
        assert events == ["o1.before_update", "o1.after_update", "o1.after_insert_or_update"]

        events.clear()
        users.remove(user)
        assert events == ["o1.before_remove", "o1.after_remove"]

    def test_validation_failure_skips_hooks(self, registry, users):
        events: list[str] = []
        registry.register_observer(User, RecordingObserver("o1", events))
        assert not users.insert(User())
        assert events == []

    def test_hooks_receive_the_document(self, registry, users):
        seen: list[Document] = []

        class Capture(Observer):
            def after_insert(self, document):
                seen.append(document)

        registry.register_observer(User, Capture())
        user = _valid_user()
        users.insert(user)
        assert seen == [user]
        assert seen[0].is_persisted()

    def test_observers_are_per_class(self, registry, users, notes):
        events: list[str] = []
        registry.register_observer(Note, RecordingObserver("notes", events))
        users.insert(_valid_user())
        assert events == []


class TestObserverFailure:
    def test_raising_before_hook_aborts_chain_and_store_call(self, registry, users, users_collection):
        events: list[str] = []

        class Veto(Observer):
            def before_insert(self, document):
                raise RuntimeError("vetoed")

        registry.register_observer(User, RecordingObserver("o1", events))
        registry.register_observer(User, Veto())
        registry.register_observer(User, RecordingObserver("o3", events))

        user = _valid_user()
        with pytest.raises(RuntimeError, match="vetoed"):
            users.insert(user)

        assert events == ["o1.before_insert"]
        assert "insert_one" not in users_collection.calls
        assert user.is_new()

    def test_raising_after_hook_propagates_after_the_write(self, registry, users, users_collection):
        class Broken(Observer):
            def after_insert(self, document):
                raise RuntimeError("after hook failed")

        registry.register_observer(User, Broken())
        user = _valid_user()
        with pytest.raises(RuntimeError, match="after hook failed"):
            users.insert(user)
        assert user.is_persisted()
        assert users_collection.count_documents({}) == 1


class TestDocumentRegistry:
    def test_observer_decorator_registers_an_instance(self, registry, users):
        events: list[str] = []

        @registry.observer(User)
        class Audit(Observer):
            def after_insert(self, document):
                events.append(document["name"])

        assert isinstance(registry.observers_for(User)[0], Audit)
        users.insert(_valid_user())
        assert events == ["Ada"]

    def test_register_observer_requires_an_observer(self, registry):
        with pytest.raises(SetupError):
            registry.register_observer(User, object())

    def test_bind_is_idempotent(self, registry):
        assert registry.bind(User) == "users"
        assert registry.bind(User) == "users"
        assert registry.document_cls_for("users") is User

    def test_duplicate_collection_names_are_rejected(self, registry):
        class OtherUser(ModelBase):
            __collection_name__ = "users"

        registry.bind(User)
        with pytest.raises(SetupError, match="already bound"):
            registry.bind(OtherUser)

    def test_unknown_collection(self, registry):
        with pytest.raises(SetupError):
            registry.document_cls_for("nope")

    def test_sealed_registry_rejects_changes(self, registry):
        registry.bind(User)
        registry.seal()
        assert registry.bind(User) == "users"
        with pytest.raises(SetupError, match="sealed"):
            registry.bind(Note)
        with pytest.raises(SetupError, match="sealed"):
            registry.register_observer(User, Observer())

    def test_register_all_binds_concrete_subclasses(self, registry):
        class Base(Document):
            __collection_name__ = ABSTRACT

        class Invoice(Base):
            __collection_name__ = "invoices"

        class Receipt(Base):
            __collection_name__ = "receipts"

        registered = registry.register_all(Base)
        assert set(registered) == {Invoice, Receipt}
        assert registry.collections.inverse[Invoice] == "invoices"

    def test_register_all_requires_explicit_collection_names(self, registry):
        class Base(Document):
            __collection_name__ = ABSTRACT

        class Invoice(Base):
            __collection_name__ = "invoices"

        class Inherits(Invoice):
            pass

        with pytest.raises(SetupError, match="does not define a __collection_name__"):
            registry.register_all(Base)

    def test_repository_binds_its_class(self):
        registry = DocumentRegistry()
        Repository(User, registry, collection=FakeCollection("users"))
        assert registry.collections["users"] is User
