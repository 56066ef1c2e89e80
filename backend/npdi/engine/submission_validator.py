"""Submission Validator - Decide whether a draft ticket may be submitted"""
from typing import List, Optional, Sequence

from ..config.settings import settings
from ..domain.models import (
    Ticket, UserIdentity, FormConfiguration, FormSection, FormField, MissingField, ValidationOutcome,
    SubmissionEvaluation, ResolutionFault
)
from ..domain.enums import VisibilityMode
from .field_paths import (
    ValueLookup, is_field_empty, make_value_lookup, qualified_candidates, resolve_field_value
)
from .template_resolver import TemplateResolver
from .visibility import FieldVisibilityEvaluator, visibility_evaluator
from ..utils.logger import get_logger

logger = get_logger(__name__)


def fail_open_outcome() -> ValidationOutcome:
    """Permissive result used whenever validation cannot be carried out"""
    return ValidationOutcome(is_valid=True, missing_fields=[], template=None, required_field_keys=[])


class SubmissionValidator:
    """
    Check a ticket against its template's submission requirements
    
    Steps:
    1. Resolve the template (ticket -> user -> default)
    2. Read each required key from ticket data (legacy prefixes for bare keys)
    3. Report empty ones with their form labels
    
    validate() never raises: any internal fault yields a valid, template-less
    outcome so a broken template cannot lock users out of submitting.
    """
    
    def __init__(
        self,
        resolver: TemplateResolver,
        evaluator: Optional[FieldVisibilityEvaluator] = None,
        fallback_prefixes: Optional[Sequence[str]] = None,
        enforce_hidden_requirements: Optional[bool] = None
    ):
        self.resolver = resolver
        self.evaluator = evaluator or visibility_evaluator
        if fallback_prefixes is None:
            fallback_prefixes = (
                settings.legacy_field_prefixes_list if settings.legacy_prefix_fallback_enabled else []
            )
        self.fallback_prefixes = list(fallback_prefixes)
        self.enforce_hidden_requirements = (
            settings.enforce_hidden_requirements
            if enforce_hidden_requirements is None
            else enforce_hidden_requirements
        )
    
    def validate(self, ticket: Ticket, identity: UserIdentity) -> ValidationOutcome:
        """Validate submission requirements, failing open on any internal error"""
        evaluation = self.evaluate(ticket, identity)
        
        if evaluation.is_fault:
            logger.error(
                f"Error validating submission requirements: {evaluation.fault.message}",
                extra={"ticket_id": ticket.ticket_id, "user_email": identity.email}
            )
            return fail_open_outcome()
        
        return evaluation.outcome
    
    def evaluate(self, ticket: Ticket, identity: UserIdentity) -> SubmissionEvaluation:
        """Validate and return the tagged result, keeping diagnostics"""
        resolution_faults: List[ResolutionFault] = []
        try:
            trace = self.resolver.resolve_with_trace(ticket, identity)
            resolution_faults = trace.faults
            resolved = trace.resolved
            
            if resolved is None:
                return SubmissionEvaluation(outcome=fail_open_outcome(), resolution_faults=resolution_faults)
            
            template = resolved.template
            required_field_keys = list(template.submission_requirements or [])
            
            if not required_field_keys:
                return SubmissionEvaluation(
                    outcome=ValidationOutcome(
                        is_valid=True,
                        template=template,
                        required_field_keys=[],
                        resolved_from=resolved.source
                    ),
                    resolution_faults=resolution_faults
                )
            
            missing_fields = self._find_missing_fields(
                ticket, required_field_keys, resolved.form_configuration
            )
            
            return SubmissionEvaluation(
                outcome=ValidationOutcome(
                    is_valid=not missing_fields,
                    missing_fields=missing_fields,
                    template=template,
                    required_field_keys=required_field_keys,
                    resolved_from=resolved.source
                ),
                resolution_faults=resolution_faults
            )
        
        except Exception as e:
            return SubmissionEvaluation(
                fault=ResolutionFault(
                    strategy="submission_validator",
                    error_type=type(e).__name__,
                    message=str(e)
                ),
                resolution_faults=resolution_faults
            )
    
    def _find_missing_fields(
        self,
        ticket: Ticket,
        required_field_keys: List[str],
        form_configuration: FormConfiguration
    ) -> List[MissingField]:
        data = ticket.data or {}
        lookup = make_value_lookup(data, self.fallback_prefixes)
        declared = {
            field.field_key: (section, field) for section, field in form_configuration.iter_fields()
        }
        missing_fields = []
        
        for field_key in required_field_keys:
            # A bare key is governed by the first form field it may be read from
            match = next(
                (declared[candidate]
                 for candidate in qualified_candidates(field_key, self.fallback_prefixes)
                 if candidate in declared),
                None
            )
            
            if match and not self.enforce_hidden_requirements and self._is_hidden(*match, lookup):
                logger.debug(
                    f"Skipping requirement on hidden field {field_key}",
                    extra={"ticket_id": ticket.ticket_id, "field_key": field_key}
                )
                continue
            
            value = resolve_field_value(data, field_key, self.fallback_prefixes)
            if is_field_empty(value):
                missing_fields.append(MissingField(
                    field_key=field_key,
                    field_label=match[1].label if match else field_key
                ))
        
        return missing_fields
    
    def _is_hidden(self, section: FormSection, field: FormField, lookup: ValueLookup) -> bool:
        """Keys the form does not declare never reach here and are always enforced"""
        return not section.visible or not self.evaluator.is_visible(field, lookup, VisibilityMode.EDIT)
