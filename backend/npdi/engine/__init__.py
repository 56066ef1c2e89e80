"""Template engine - resolution, visibility and submission validation"""
from .field_paths import get_nested_value, is_field_empty, resolve_field_value, make_value_lookup
from .visibility import FieldVisibilityEvaluator, visibility_evaluator
from .template_resolver import (
    TemplateResolver, ResolutionStrategy, StoredTemplateStrategy,
    UserTemplateStrategy, DefaultTemplateStrategy
)
from .submission_validator import SubmissionValidator, fail_open_outcome
from .form_renderer import FormRenderer
from .template_audit import audit_template

__all__ = [
    "get_nested_value",
    "is_field_empty",
    "resolve_field_value",
    "make_value_lookup",
    "FieldVisibilityEvaluator",
    "visibility_evaluator",
    "TemplateResolver",
    "ResolutionStrategy",
    "StoredTemplateStrategy",
    "UserTemplateStrategy",
    "DefaultTemplateStrategy",
    "SubmissionValidator",
    "fail_open_outcome",
    "FormRenderer",
    "audit_template",
]
