"""Service modules - Business logic layer"""
from .template_registry import TemplateRegistry
from .submission_service import SubmissionService
from .form_service import FormService

__all__ = [
    "TemplateRegistry",
    "SubmissionService",
    "FormService",
]
