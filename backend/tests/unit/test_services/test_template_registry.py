"""Tests for the cached template registry"""
import pytest

from npdi.domain.enums import AuditIssueType
from npdi.domain.errors import TemplateNotFoundError
from npdi.domain.models import UserIdentity, UserProfile
from npdi.services.template_registry import TEMPLATE_NS

from ...factories import build_form_configuration, build_template


@pytest.fixture
def seeded(registry, form_config_repo):
    form_config_repo.create_form_configuration(build_form_configuration())
    registry.create_template(build_template("TPL-A", ["productName"], is_default=True))
    registry.create_template(build_template("TPL-B", ["casNumber"]))
    return registry


class TestCaching:
    def test_template_reads_are_cached(self, seeded, template_collection):
        first = seeded.get_template("TPL-A")
        template_collection.docs.clear()
        
        assert seeded.get_template("TPL-A") == first
        assert seeded.cache.stats()["hits"] >= 1
    
    def test_missing_template_cached_as_none(self, seeded, template_collection):
        assert seeded.get_template("TPL-404") is None
        template_collection.insert_one({"template_id": "TPL-404", "name": "Late", "form_configuration_id": "FC-main"})
        
        assert seeded.get_template("TPL-404") is None
    
    def test_store_failure_is_not_cached(self, seeded, template_collection):
        template_collection.fail_reads = True
        with pytest.raises(ConnectionError):
            seeded.get_template("TPL-A")
        
        template_collection.fail_reads = False
        assert seeded.get_template("TPL-A").template_id == "TPL-A"
    
    def test_form_configuration_cached_and_invalidated(self, seeded):
        assert seeded.get_form_configuration("FC-main").is_active is True
        
        seeded.deactivate_form_configuration("FC-main")
        
        assert seeded.get_form_configuration("FC-main").is_active is False


class TestWritesInvalidate:
    def test_default_change_visible_immediately(self, seeded):
        assert seeded.get_default_template().template_id == "TPL-A"
        assert seeded.get_template("TPL-A").is_default is True
        
        seeded.set_default_template("TPL-B", actor="admin")
        
        assert seeded.get_default_template().template_id == "TPL-B"
        assert seeded.get_template("TPL-A").is_default is False
    
    def test_update_requirements_visible_immediately(self, seeded):
        seeded.get_template("TPL-B")
        
        seeded.update_template("TPL-B", {"submission_requirements": ["productName"]})
        
        assert seeded.get_template("TPL-B").submission_requirements == ["productName"]
    
    def test_deactivate_default(self, seeded):
        seeded.get_default_template()
        
        seeded.deactivate_template("TPL-A")
        
        assert seeded.get_default_template() is None
        assert seeded.cache.get(TEMPLATE_NS, "TPL-A") is None


class TestUserTemplates:
    def test_assigned_template(self, seeded, user_repo):
        user_repo.upsert_user(UserProfile(employee_id="E100", email="alice@example.com"))
        seeded.assign_template_to_user(UserIdentity(email="alice@example.com"), "TPL-B")
        
        template = seeded.get_user_template(UserIdentity(employee_id="E100"))
        
        assert template.template_id == "TPL-B"
    
    def test_unassigned_user(self, seeded, user_repo):
        user_repo.upsert_user(UserProfile(employee_id="E100", email="alice@example.com"))
        assert seeded.get_user_template(UserIdentity(employee_id="E100")) is None
    
    def test_assign_unknown_template(self, seeded, user_repo):
        user_repo.upsert_user(UserProfile(employee_id="E100", email="alice@example.com"))
        with pytest.raises(TemplateNotFoundError):
            seeded.assign_template_to_user(UserIdentity(employee_id="E100"), "TPL-404")


def test_audit_flags_prefix_guess(seeded):
    issues = seeded.audit(seeded.get_template("TPL-B"))
    
    assert [i.issue_type for i in issues] == [AuditIssueType.REQUIREMENT_USES_PREFIX_FALLBACK]


def test_list_templates(seeded):
    assert [t.template_id for t in seeded.list_templates()] == ["TPL-A", "TPL-B"]
