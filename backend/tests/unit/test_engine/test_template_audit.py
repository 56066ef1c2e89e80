"""Tests for template auditing"""
from npdi.domain.enums import AuditIssueType
from npdi.engine.template_audit import audit_template

from ...factories import LEGACY_PREFIXES, build_form_configuration, build_template


def issue_types(issues):
    return [(i.issue_type, i.field_key) for i in issues]


def test_clean_template_has_no_issues(form_configuration):
    template = build_template(requirements=["productName", "chemicalProperties.casNumber"])
    assert audit_template(template, form_configuration, LEGACY_PREFIXES) == []


def test_missing_form_configuration():
    issues = audit_template(build_template(), None, LEGACY_PREFIXES)
    assert issue_types(issues) == [(AuditIssueType.FORM_CONFIGURATION_MISSING, None)]


def test_inactive_form_configuration():
    issues = audit_template(build_template(), build_form_configuration(is_active=False))
    assert issue_types(issues) == [(AuditIssueType.FORM_CONFIGURATION_INACTIVE, None)]


def test_requirement_not_in_form(form_configuration):
    template = build_template(requirements=["regulatoryInfo.ghsClass"])
    issues = audit_template(template, form_configuration, LEGACY_PREFIXES)
    
    assert issue_types(issues) == [(AuditIssueType.REQUIREMENT_NOT_IN_FORM, "regulatoryInfo.ghsClass")]


def test_bare_key_flagged_but_found_via_prefix(form_configuration):
    template = build_template(requirements=["casNumber"])
    issues = audit_template(template, form_configuration, LEGACY_PREFIXES)
    
    assert issue_types(issues) == [(AuditIssueType.REQUIREMENT_USES_PREFIX_FALLBACK, "casNumber")]


def test_bare_key_without_prefixes_is_plain_lookup(form_configuration):
    template = build_template(requirements=["productName"])
    assert audit_template(template, form_configuration, []) == []


def test_requirement_on_hidden_field(form_configuration):
    template = build_template(requirements=["legacy.code"])
    issues = audit_template(template, form_configuration)
    
    assert issue_types(issues) == [(AuditIssueType.REQUIREMENT_ON_HIDDEN_FIELD, "legacy.code")]


def test_dependent_field_not_in_form():
    form = build_form_configuration(sections=[{
        "sectionKey": "basic",
        "name": "Basic",
        "fields": [
            {"fieldKey": "vendorName", "label": "Vendor",
             "visibleWhen": {"fieldKey": "productionType", "value": "Procured"}},
        ],
    }])
    
    issues = audit_template(build_template(), form)
    
    assert issue_types(issues) == [(AuditIssueType.DEPENDENT_FIELD_NOT_IN_FORM, "vendorName")]
