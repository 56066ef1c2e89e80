"""Request/response schemas for the submission and template routes"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ...domain.models import (
    CAMEL_CONFIG, Ticket, TicketTemplate, ValidationOutcome, TemplateAuditIssue
)
from ...domain.enums import ResolutionSource


class ValidateDraftRequest(BaseModel):
    """Unsaved form data to check against submission requirements"""
    model_config = CAMEL_CONFIG
    
    data: Dict[str, Any] = Field(default_factory=dict)
    template_id: Optional[str] = Field(None, description="Template already pinned on the draft, if any")


class SubmitTicketResponse(BaseModel):
    model_config = CAMEL_CONFIG
    
    ticket: Ticket
    validation: ValidationOutcome


class ResolvedTemplateResponse(BaseModel):
    model_config = CAMEL_CONFIG
    
    template: TicketTemplate
    resolved_from: ResolutionSource


class AssignTemplateRequest(BaseModel):
    """User to assign a template to; either key is enough"""
    model_config = CAMEL_CONFIG
    
    employee_id: Optional[str] = None
    email: Optional[str] = None


class TemplateAuditResponse(BaseModel):
    model_config = CAMEL_CONFIG
    
    template_id: str
    issues: List[TemplateAuditIssue] = Field(default_factory=list)
