"""Tests for submission requirement validation"""
import pytest

from npdi.domain.enums import ResolutionSource
from npdi.domain.models import Ticket, UserIdentity
from npdi.engine.form_renderer import FormRenderer
from npdi.engine.submission_validator import SubmissionValidator, fail_open_outcome

from ...factories import LEGACY_PREFIXES, build_template


USER = UserIdentity(employee_id="E100", email="alice@example.com")


def use_default(fake_registry, requirements):
    return fake_registry.add_template(build_template("TPL-default", requirements, is_default=True))


def missing_keys(outcome):
    return [f.field_key for f in outcome.missing_fields]


class TestWithoutTemplate:
    def test_no_template_allows_submission(self, validator):
        outcome = validator.validate(Ticket(data={}), USER)
        
        assert outcome.is_valid is True
        assert outcome.missing_fields == []
        assert outcome.template is None
        assert outcome.required_field_keys == []
    
    def test_template_without_requirements(self, validator, fake_registry):
        use_default(fake_registry, [])
        outcome = validator.validate(Ticket(data={}), USER)
        
        assert outcome.is_valid is True
        assert outcome.template.template_id == "TPL-default"
        assert outcome.resolved_from == ResolutionSource.DEFAULT


class TestMissingFields:
    def test_blank_value_reported_with_form_label(self, validator, fake_registry):
        use_default(fake_registry, ["productName", "chemicalProperties.casNumber"])
        ticket = Ticket(data={"productName": "Acetone", "chemicalProperties": {"casNumber": ""}})
        
        outcome = validator.validate(ticket, USER)
        
        assert outcome.is_valid is False
        assert len(outcome.missing_fields) == 1
        assert outcome.missing_fields[0].field_key == "chemicalProperties.casNumber"
        assert outcome.missing_fields[0].field_label == "CAS Number"
        assert outcome.required_field_keys == ["productName", "chemicalProperties.casNumber"]
    
    def test_unknown_key_uses_key_as_label(self, validator, fake_registry):
        use_default(fake_registry, ["regulatoryInfo.ghsClass"])
        outcome = validator.validate(Ticket(data={}), USER)
        
        assert outcome.missing_fields[0].field_label == "regulatoryInfo.ghsClass"
    
    def test_missing_fields_keep_requirement_order(self, validator, fake_registry):
        use_default(fake_registry, ["packaging.type", "productName", "chemicalProperties.casNumber"])
        outcome = validator.validate(Ticket(data={}), USER)
        
        assert missing_keys(outcome) == ["packaging.type", "productName", "chemicalProperties.casNumber"]
    
    @pytest.mark.parametrize("value", [0, False])
    def test_zero_and_false_are_answers(self, validator, fake_registry, value):
        use_default(fake_registry, ["chemicalProperties.isHazardous"])
        outcome = validator.validate(Ticket(data={"chemicalProperties": {"isHazardous": value}}), USER)
        
        assert outcome.is_valid is True
    
    @pytest.mark.parametrize("value", [None, "   ", [], {}])
    def test_empty_values_are_missing(self, validator, fake_registry, value):
        use_default(fake_registry, ["productName"])
        outcome = validator.validate(Ticket(data={"productName": value}), USER)
        
        assert missing_keys(outcome) == ["productName"]
    
    def test_all_filled_is_valid(self, validator, fake_registry):
        use_default(fake_registry, ["productName", "chemicalProperties.casNumber"])
        ticket = Ticket(data={"productName": "Acetone", "chemicalProperties": {"casNumber": "67-64-1"}})
        
        assert validator.validate(ticket, USER).is_valid is True


class TestLegacyPrefixes:
    def test_bare_key_found_under_prefix(self, validator, fake_registry):
        use_default(fake_registry, ["casNumber"])
        ticket = Ticket(data={"chemicalProperties": {"casNumber": "67-64-1"}})
        
        assert validator.validate(ticket, USER).is_valid is True
    
    def test_bare_key_missing_everywhere(self, validator, fake_registry):
        use_default(fake_registry, ["baseUnitPrice"])
        outcome = validator.validate(Ticket(data={"pricingData": {}}), USER)
        
        assert missing_keys(outcome) == ["baseUnitPrice"]
    
    def test_fallback_disabled(self, resolver, fake_registry):
        use_default(fake_registry, ["casNumber"])
        strict = SubmissionValidator(resolver, fallback_prefixes=[], enforce_hidden_requirements=False)
        ticket = Ticket(data={"chemicalProperties": {"casNumber": "67-64-1"}})
        
        assert strict.validate(ticket, USER).is_valid is False


class TestHiddenRequirements:
    def test_conditionally_hidden_field_not_enforced(self, validator, fake_registry):
        use_default(fake_registry, ["hazardClassification.signalWord"])
        ticket = Ticket(data={"chemicalProperties": {"isHazardous": False}})
        
        assert validator.validate(ticket, USER).is_valid is True
    
    def test_conditionally_visible_field_enforced(self, validator, fake_registry):
        use_default(fake_registry, ["hazardClassification.signalWord"])
        ticket = Ticket(data={"chemicalProperties": {"isHazardous": "true"}})
        
        outcome = validator.validate(ticket, USER)
        
        assert outcome.missing_fields[0].field_label == "Signal Word"
    
    def test_authoring_hidden_and_hidden_section_not_enforced(self, validator, fake_registry):
        use_default(fake_registry, ["internalNotes", "legacy.code"])
        assert validator.validate(Ticket(data={}), USER).is_valid is True
    
    def test_enforce_hidden_requirements(self, resolver, fake_registry):
        use_default(fake_registry, ["internalNotes", "hazardClassification.signalWord"])
        strict = SubmissionValidator(resolver, fallback_prefixes=LEGACY_PREFIXES, enforce_hidden_requirements=True)
        
        outcome = strict.validate(Ticket(data={}), USER)
        
        assert missing_keys(outcome) == ["internalNotes", "hazardClassification.signalWord"]
    
    def test_bare_key_follows_visibility_of_prefixed_field(self, validator, fake_registry, form_configuration):
        use_default(fake_registry, ["vendorName"])
        produced = {"productionType": "Produced"}

        visible = FormRenderer(fallback_prefixes=LEGACY_PREFIXES).build(form_configuration, data=produced)

        assert "vendorInformation.vendorName" not in visible.visible_field_keys()
        assert validator.validate(Ticket(data=produced), USER).is_valid is True

    def test_bare_key_reported_with_prefixed_field_label(self, validator, fake_registry):
        use_default(fake_registry, ["vendorName"])

        outcome = validator.validate(Ticket(data={"productionType": "Procured"}), USER)

        assert [(f.field_key, f.field_label) for f in outcome.missing_fields] == [("vendorName", "Vendor Name")]

    def test_visibility_rule_on_values_list(self, validator, fake_registry):
        use_default(fake_registry, ["packaging.containerMaterial"])
        
        assert validator.validate(Ticket(data={"packaging": {"type": "SPEC"}}), USER).is_valid is True
        assert validator.validate(Ticket(data={"packaging": {"type": "BULK"}}), USER).is_valid is False


class TestFailOpen:
    def test_resolver_faults_do_not_block(self, validator, fake_registry):
        use_default(fake_registry, ["productName"])
        fake_registry.failing.add("get_default_template")
        
        evaluation = validator.evaluate(Ticket(data={}), USER)
        
        assert evaluation.is_fault is False
        assert evaluation.outcome.is_valid is True
        assert evaluation.resolution_faults[0].strategy == "default_template"
    
    def test_unexpected_error_fails_open(self, fake_registry):
        class ExplodingResolver:
            def resolve_with_trace(self, ticket, identity):
                raise RuntimeError("boom")
        
        validator = SubmissionValidator(ExplodingResolver(), fallback_prefixes=[], enforce_hidden_requirements=False)
        
        evaluation = validator.evaluate(Ticket(data={}), USER)
        outcome = validator.validate(Ticket(data={}), USER)
        
        assert evaluation.is_fault
        assert evaluation.fault.error_type == "RuntimeError"
        assert outcome == fail_open_outcome()


def test_validation_is_idempotent(validator, fake_registry):
    use_default(fake_registry, ["productName", "chemicalProperties.casNumber"])
    ticket = Ticket(data={"productName": "Acetone"})
    
    first = validator.validate(ticket, USER)
    second = validator.validate(ticket, USER)
    
    assert first == second
    assert ticket.data == {"productName": "Acetone"}
