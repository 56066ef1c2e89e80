"""Tests for template persistence and the single-default rule"""
import pytest

from npdi.domain.errors import (
    AlreadyExistsError, DefaultTemplateConflictError, InvalidStateError, TemplateNotFoundError
)
from npdi.repositories.template_repo import TemplateRepository

from ...factories import build_template
from ...fakes import FakeCollection


def defaults(collection):
    return [d["template_id"] for d in collection.docs if d.get("is_default")]


class TestCreate:
    def test_create_and_get(self, template_repo):
        template_repo.create_template(build_template("TPL-A", ["productName"]))
        
        stored = template_repo.get_template("TPL-A")
        
        assert stored.name == "Template TPL-A"
        assert stored.submission_requirements == ["productName"]
        assert stored.created_at is not None
    
    def test_duplicate_name_rejected(self, template_repo):
        template_repo.create_template(build_template("TPL-A", name="Standard"))
        
        with pytest.raises(AlreadyExistsError):
            template_repo.create_template(build_template("TPL-B", name="Standard"))
    
    def test_create_as_default_goes_through_transaction(self, template_repo, template_collection):
        created = template_repo.create_template(build_template("TPL-A", is_default=True))
        
        assert created.is_default is True
        assert defaults(template_collection) == ["TPL-A"]
        assert template_collection.database.client.sessions[0].transactions == 1
    
    def test_get_unknown(self, template_repo):
        assert template_repo.get_template("TPL-missing") is None
        with pytest.raises(TemplateNotFoundError):
            template_repo.get_template_or_raise("TPL-missing")


class TestDefaultTemplate:
    def test_setting_new_default_clears_previous(self, template_repo, template_collection):
        template_repo.create_template(build_template("TPL-A", is_default=True))
        template_repo.create_template(build_template("TPL-B"))
        
        template_repo.set_default_template("TPL-B", actor="admin@example.com")
        
        assert defaults(template_collection) == ["TPL-B"]
        assert template_repo.get_template("TPL-A").is_default is False
        assert template_repo.get_default_template().template_id == "TPL-B"
    
    def test_create_second_default_replaces_first(self, template_repo, template_collection):
        template_repo.create_template(build_template("TPL-A", is_default=True))
        template_repo.create_template(build_template("TPL-B", is_default=True))
        
        assert defaults(template_collection) == ["TPL-B"]
    
    def test_update_to_default(self, template_repo, template_collection):
        template_repo.create_template(build_template("TPL-A", is_default=True))
        template_repo.create_template(build_template("TPL-B"))
        
        updated = template_repo.update_template("TPL-B", {"is_default": True, "description": "New"})
        
        assert updated.is_default is True
        assert updated.description == "New"
        assert defaults(template_collection) == ["TPL-B"]
    
    def test_unset_default(self, template_repo, template_collection):
        template_repo.create_template(build_template("TPL-A", is_default=True))
        
        template_repo.update_template("TPL-A", {"is_default": False})
        
        assert defaults(template_collection) == []
        assert template_repo.get_default_template() is None
    
    def test_inactive_template_cannot_be_default(self, template_repo):
        template_repo.create_template(build_template("TPL-A"))
        template_repo.deactivate_template("TPL-A")
        
        with pytest.raises(InvalidStateError):
            template_repo.set_default_template("TPL-A")
    
    def test_unknown_template_cannot_be_default(self, template_repo):
        with pytest.raises(TemplateNotFoundError):
            template_repo.set_default_template("TPL-missing")
    
    def test_deactivating_default_clears_flag(self, template_repo, template_collection):
        template_repo.create_template(build_template("TPL-A", is_default=True))
        
        deactivated = template_repo.deactivate_template("TPL-A")
        
        assert deactivated.is_active is False
        assert deactivated.is_default is False
        assert template_repo.get_default_template() is None
    
    def test_index_violation_maps_to_conflict(self):
        collection = FakeCollection(unique=["template_id"], unique_when=[("is_default", True)])
        repo = TemplateRepository(collection=collection)
        repo.create_template(build_template("TPL-A"))
        repo.create_template(build_template("TPL-B"))
        # Simulate a racing writer whose default survived the clear step
        collection.docs[0]["is_default"] = True
        original_update_many = collection.update_many
        collection.update_many = lambda query, update, session=None: original_update_many(
            {"template_id": "nobody"}, update, session=session
        )
        
        with pytest.raises(DefaultTemplateConflictError) as exc:
            repo.set_default_template("TPL-B")
        
        assert exc.value.http_status == 409


def test_list_templates_default_first(template_repo):
    template_repo.create_template(build_template("TPL-C", name="Charlie"))
    template_repo.create_template(build_template("TPL-A", name="Alpha"))
    template_repo.create_template(build_template("TPL-Z", name="Zulu", is_default=True))
    template_repo.create_template(build_template("TPL-B", name="Bravo"))
    template_repo.deactivate_template("TPL-B")
    
    names = [t.name for t in template_repo.list_templates()]
    
    assert names == ["Zulu", "Alpha", "Charlie"]
    assert len(template_repo.list_templates(active_only=False)) == 4


def standalone_repo():
    collection = FakeCollection(
        unique=["template_id", "name"], unique_when=[("is_default", True)], transactions=False
    )
    return TemplateRepository(collection=collection), collection


class TestDefaultWrites:
    def test_default_insert_happens_inside_transaction(self, template_repo, template_collection):
        template_repo.create_template(build_template("TPL-A", is_default=True))
        
        session = template_collection.database.client.sessions[0]
        assert template_collection.write_sessions == [session]
    
    def test_plain_create_needs_no_session(self, template_repo, template_collection):
        template_repo.create_template(build_template("TPL-A"))
        
        assert template_collection.write_sessions == [None]
        assert template_collection.database.client.sessions == []
    
    def test_duplicate_name_on_default_create_is_not_a_default_conflict(self, template_repo):
        template_repo.create_template(build_template("TPL-A", name="Standard"))
        
        with pytest.raises(AlreadyExistsError):
            template_repo.create_template(build_template("TPL-B", name="Standard", is_default=True))
    
    def test_standalone_server_still_keeps_one_default(self):
        repo, collection = standalone_repo()
        
        repo.create_template(build_template("TPL-A", is_default=True))
        repo.create_template(build_template("TPL-B", is_default=True))
        repo.create_template(build_template("TPL-C"))
        repo.set_default_template("TPL-C")
        
        assert defaults(collection) == ["TPL-C"]
        assert collection.database.client.sessions[0].transactions == 0
    
    def test_standalone_failed_flip_removes_new_template(self):
        repo, collection = standalone_repo()
        repo.create_template(build_template("TPL-A", is_default=True))
        # A racing writer's default survives the clear step
        original_update_many = collection.update_many
        collection.update_many = lambda query, update, session=None: original_update_many(
            {"template_id": "nobody"}, update, session=session
        )
        
        with pytest.raises(DefaultTemplateConflictError):
            repo.create_template(build_template("TPL-B", is_default=True))
        
        assert repo.get_template("TPL-B") is None
        assert defaults(collection) == ["TPL-A"]
