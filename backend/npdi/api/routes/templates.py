"""
Template Routes

Read access to the template registry plus the few registry writes that must
keep the cache and the single-default invariant consistent.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_correlation_id_dep, get_user_identity_dep, get_template_registry, get_form_service
from ...domain.models import Ticket, TicketTemplate, UserIdentity, UserProfile, RenderPlan
from ...domain.errors import DomainError, TemplateNotFoundError
from ...engine.template_resolver import TemplateResolver
from ...services.form_service import FormService
from ...services.template_registry import TemplateRegistry
from ...utils.logger import get_logger
from .schemas import ResolvedTemplateResponse, AssignTemplateRequest, TemplateAuditResponse

logger = get_logger(__name__)
router = APIRouter()


@router.get("", response_model=List[TicketTemplate])
async def list_templates(
    active_only: bool = Query(True),
    registry: TemplateRegistry = Depends(get_template_registry)
):
    """Templates, default first then by name"""
    return registry.list_templates(active_only=active_only)


# Must be registered before /{template_id}
@router.get("/me", response_model=ResolvedTemplateResponse)
async def get_my_template(
    identity: UserIdentity = Depends(get_user_identity_dep),
    registry: TemplateRegistry = Depends(get_template_registry),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Template a new ticket by this user would be created under"""
    resolved = TemplateResolver(registry).resolve(Ticket(), identity)
    if resolved is None:
        error = TemplateNotFoundError(f"No template found for user {identity.describe()}")
        raise HTTPException(status_code=error.http_status, detail=error.to_dict())
    return ResolvedTemplateResponse(template=resolved.template, resolved_from=resolved.source)


@router.get("/{template_id}", response_model=TicketTemplate)
async def get_template(
    template_id: str,
    registry: TemplateRegistry = Depends(get_template_registry)
):
    template = registry.get_template(template_id)
    if template is None:
        error = TemplateNotFoundError(f"Template {template_id} not found")
        raise HTTPException(status_code=error.http_status, detail=error.to_dict())
    return template


@router.get("/{template_id}/preview", response_model=RenderPlan)
async def preview_template(
    template_id: str,
    show_all: bool = Query(False, description="Ignore visibleWhen and show every authoring-visible field"),
    service: FormService = Depends(get_form_service)
):
    """Read-only preview of a template using authored default values"""
    try:
        return service.preview_template(template_id, show_all=show_all)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.get("/{template_id}/audit", response_model=TemplateAuditResponse)
async def audit_template(
    template_id: str,
    registry: TemplateRegistry = Depends(get_template_registry)
):
    """Requirement problems that would make validation skip or guess fields"""
    template = registry.get_template(template_id)
    if template is None:
        error = TemplateNotFoundError(f"Template {template_id} not found")
        raise HTTPException(status_code=error.http_status, detail=error.to_dict())
    return TemplateAuditResponse(template_id=template_id, issues=registry.audit(template))


@router.post("/{template_id}/default", response_model=TicketTemplate)
async def set_default_template(
    template_id: str,
    identity: UserIdentity = Depends(get_user_identity_dep),
    registry: TemplateRegistry = Depends(get_template_registry),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Make this the default template; every other template loses the flag"""
    try:
        return registry.set_default_template(template_id, actor=identity.describe())
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/{template_id}/deactivate", response_model=TicketTemplate)
async def deactivate_template(
    template_id: str,
    identity: UserIdentity = Depends(get_user_identity_dep),
    registry: TemplateRegistry = Depends(get_template_registry),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Soft-delete; tickets pinned to it fall through to user/default templates"""
    try:
        return registry.deactivate_template(template_id, actor=identity.describe())
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/{template_id}/assign", response_model=UserProfile)
async def assign_template(
    template_id: str,
    request: AssignTemplateRequest,
    registry: TemplateRegistry = Depends(get_template_registry),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Assign this template to a user"""
    try:
        target = UserIdentity(employee_id=request.employee_id, email=request.email)
        return registry.assign_template_to_user(target, template_id)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
