"""Submission Service - Validate and submit draft tickets"""
from typing import Any, Dict, Optional

from ..domain.models import Ticket, UserIdentity, ValidationOutcome
from ..domain.enums import TicketStatus
from ..domain.errors import InvalidStateError, SubmissionBlockedError
from ..engine.submission_validator import SubmissionValidator
from ..engine.template_resolver import TemplateResolver
from ..repositories.ticket_repo import TicketRepository
from .template_registry import TemplateRegistry
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SubmissionService:
    """Service for the draft -> submitted transition"""
    
    def __init__(
        self,
        ticket_repo: Optional[TicketRepository] = None,
        registry: Optional[TemplateRegistry] = None,
        validator: Optional[SubmissionValidator] = None
    ):
        self.ticket_repo = ticket_repo or TicketRepository()
        self.registry = registry or TemplateRegistry()
        self.validator = validator or SubmissionValidator(TemplateResolver(self.registry))
    
    def validate_ticket(self, ticket_id: str, identity: UserIdentity) -> ValidationOutcome:
        """Validate a stored ticket without changing it"""
        ticket = self.ticket_repo.get_ticket_or_raise(ticket_id)
        return self.validator.validate(ticket, identity)
    
    def validate_draft(
        self,
        data: Dict[str, Any],
        identity: UserIdentity,
        template_id: Optional[str] = None
    ) -> ValidationOutcome:
        """Validate unsaved form data (e.g. before the first save)"""
        draft = Ticket(status=TicketStatus.DRAFT, template_id=template_id, data=data)
        return self.validator.validate(draft, identity)
    
    def submit_ticket(self, ticket_id: str, identity: UserIdentity) -> Dict[str, Any]:
        """
        Submit a draft ticket
        
        Raises:
            TicketNotFoundError: ticket does not exist
            InvalidStateError: ticket is not a draft
            SubmissionBlockedError: required fields are missing
        """
        ticket = self.ticket_repo.get_ticket_or_raise(ticket_id)
        if ticket.status != TicketStatus.DRAFT:
            raise InvalidStateError(
                f"Ticket {ticket_id} is {ticket.status.value}, only DRAFT tickets can be submitted",
                details={"status": ticket.status.value}
            )
        
        outcome = self.validator.validate(ticket, identity)
        if not outcome.is_valid:
            logger.info(
                f"Submission blocked for ticket {ticket_id}: {len(outcome.missing_fields)} missing field(s)",
                extra={"ticket_id": ticket_id, "user_email": identity.email}
            )
            raise SubmissionBlockedError(
                "Please fill in all required fields before submitting",
                details={
                    "missing_fields": [f.model_dump(by_alias=True) for f in outcome.missing_fields],
                    "required_field_keys": outcome.required_field_keys,
                }
            )
        
        template_id = outcome.template.template_id if outcome.template else None
        submitted = self.ticket_repo.mark_submitted(ticket_id, template_id)
        return {
            "ticket": submitted,
            "validation": outcome,
        }
