"""Template Audit - Check a template's requirements against its form configuration"""
from typing import List, Optional, Sequence

from ..domain.models import FormConfiguration, TicketTemplate, TemplateAuditIssue
from ..domain.enums import AuditIssueType
from .field_paths import qualified_candidates


def audit_template(
    template: TicketTemplate,
    form_configuration: Optional[FormConfiguration],
    fallback_prefixes: Sequence[str] = ()
) -> List[TemplateAuditIssue]:
    """
    List problems that weaken submission validation for a template
    
    None of these block validation (it fails open); they tell authors where a
    requirement will be silently ignored or guessed.
    """
    if form_configuration is None:
        return [TemplateAuditIssue(
            issue_type=AuditIssueType.FORM_CONFIGURATION_MISSING,
            message=f"Form configuration {template.form_configuration_id} not found; "
                    f"template is skipped during resolution"
        )]
    
    issues: List[TemplateAuditIssue] = []
    if not form_configuration.is_active:
        issues.append(TemplateAuditIssue(
            issue_type=AuditIssueType.FORM_CONFIGURATION_INACTIVE,
            message=f"Form configuration {form_configuration.form_config_id} is inactive"
        ))
    
    known_keys = {field.field_key for _, field in form_configuration.iter_fields()}
    hidden_keys = {
        field.field_key
        for section, field in form_configuration.iter_fields()
        if not section.visible or not field.visible
    }
    
    for field_key in template.submission_requirements:
        if field_key in hidden_keys:
            issues.append(TemplateAuditIssue(
                issue_type=AuditIssueType.REQUIREMENT_ON_HIDDEN_FIELD,
                field_key=field_key,
                message=f"Required field {field_key} is hidden in the form"
            ))
        
        if field_key in known_keys:
            continue

        prefixed = qualified_candidates(field_key, fallback_prefixes)[1:]
        if any(candidate in known_keys for candidate in prefixed):
            issues.append(TemplateAuditIssue(
                issue_type=AuditIssueType.REQUIREMENT_USES_PREFIX_FALLBACK,
                field_key=field_key,
                message=f"Bare key {field_key} is resolved by guessing a prefix; "
                        f"store the fully-qualified path instead"
            ))
        else:
            issues.append(TemplateAuditIssue(
                issue_type=AuditIssueType.REQUIREMENT_NOT_IN_FORM,
                field_key=field_key,
                message=f"Required field {field_key} is not defined in the form; "
                        f"its raw key is shown to users"
            ))
    
    for _, field in form_configuration.iter_fields():
        condition = field.visible_when
        if condition is not None and condition.has_predicate and condition.dependent_field_key not in known_keys:
            issues.append(TemplateAuditIssue(
                issue_type=AuditIssueType.DEPENDENT_FIELD_NOT_IN_FORM,
                field_key=field.field_key,
                message=f"Field {field.field_key} depends on {condition.dependent_field_key}, "
                        f"which is not in the form"
            ))
    
    return issues
