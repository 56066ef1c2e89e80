"""
Ticket Submission Routes

- Validate unsaved draft data
- Check a stored ticket's submission requirements
- Submit a draft (blocked while required fields are missing)
- Render plan for a ticket's form
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_correlation_id_dep, get_user_identity_dep, get_submission_service, get_form_service
from ...domain.models import UserIdentity, ValidationOutcome, RenderPlan
from ...domain.enums import VisibilityMode
from ...domain.errors import DomainError
from ...services.form_service import FormService
from ...services.submission_service import SubmissionService
from ...utils.logger import get_logger
from .schemas import ValidateDraftRequest, SubmitTicketResponse

logger = get_logger(__name__)
router = APIRouter()


@router.post("/validate-submission", response_model=ValidationOutcome)
async def validate_draft(
    request: ValidateDraftRequest,
    identity: UserIdentity = Depends(get_user_identity_dep),
    service: SubmissionService = Depends(get_submission_service),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Check unsaved form data against the submission requirements of the
    template that would govern it. Never fails because of template problems.
    """
    return service.validate_draft(request.data, identity, template_id=request.template_id)


@router.get("/{ticket_id}/submission-requirements", response_model=ValidationOutcome)
async def get_submission_requirements(
    ticket_id: str,
    identity: UserIdentity = Depends(get_user_identity_dep),
    service: SubmissionService = Depends(get_submission_service),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Missing required fields for a stored ticket"""
    try:
        return service.validate_ticket(ticket_id, identity)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.post("/{ticket_id}/submit", response_model=SubmitTicketResponse)
async def submit_ticket(
    ticket_id: str,
    identity: UserIdentity = Depends(get_user_identity_dep),
    service: SubmissionService = Depends(get_submission_service),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Submit a draft ticket.
    
    Returns 422 with the missing fields when the template's requirements are not met.
    On success the validating template is pinned to the ticket.
    """
    try:
        result = service.submit_ticket(ticket_id, identity)
        return SubmitTicketResponse(**result)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.get("/{ticket_id}/form", response_model=RenderPlan)
async def get_ticket_form(
    ticket_id: str,
    mode: VisibilityMode = Query(VisibilityMode.EDIT),
    identity: UserIdentity = Depends(get_user_identity_dep),
    service: FormService = Depends(get_form_service),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Sections and fields visible for the ticket's current data"""
    try:
        return service.render_ticket(ticket_id, identity, mode=mode)
    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
