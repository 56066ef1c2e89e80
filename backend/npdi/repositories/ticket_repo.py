"""Ticket Repository - Data access for product tickets"""
from typing import Any, Dict, Optional
from pymongo.collection import Collection
from pymongo import ReturnDocument

from .mongo_client import get_collection, TICKETS
from ..domain.models import Ticket
from ..domain.enums import TicketStatus
from ..domain.errors import InvalidStateError, TicketNotFoundError
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class TicketRepository:
    """Repository for ticket operations needed by submission"""
    
    def __init__(self, collection: Optional[Collection] = None):
        self._tickets: Collection = collection if collection is not None else get_collection(TICKETS)
    
    def create_ticket(self, ticket: Ticket) -> Ticket:
        """Create a new ticket"""
        now = utc_now()
        ticket.created_at = ticket.created_at or now
        ticket.updated_at = now
        # Don't use mode="json" - it converts datetime to strings, breaking MongoDB sorting
        doc = ticket.model_dump()
        doc["_id"] = ticket.ticket_id
        
        self._tickets.insert_one(doc)
        logger.info(f"Created ticket: {ticket.ticket_id}", extra={"ticket_id": ticket.ticket_id})
        return ticket
    
    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID"""
        doc = self._tickets.find_one({"ticket_id": ticket_id})
        if doc:
            doc.pop("_id", None)
            return Ticket.model_validate(doc)
        return None
    
    def get_ticket_or_raise(self, ticket_id: str) -> Ticket:
        """Get ticket by ID or raise error"""
        ticket = self.get_ticket(ticket_id)
        if not ticket:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        return ticket
    
    def update_ticket_data(self, ticket_id: str, data: Dict[str, Any]) -> Ticket:
        """Replace business data on a draft ticket"""
        result = self._tickets.find_one_and_update(
            {"ticket_id": ticket_id, "status": TicketStatus.DRAFT.value},
            {"$set": {"data": data, "updated_at": utc_now()}},
            return_document=ReturnDocument.AFTER
        )
        if result is None:
            self._raise_missing_or_state(ticket_id)
        result.pop("_id", None)
        return Ticket.model_validate(result)
    
    def mark_submitted(self, ticket_id: str, template_id: Optional[str]) -> Ticket:
        """
        Move a draft to SUBMITTED and pin the validating template
        
        The status filter makes concurrent submits safe: only one matches DRAFT.
        An existing template pin is kept.
        """
        ticket = self.get_ticket_or_raise(ticket_id)
        now = utc_now()
        updates: Dict[str, Any] = {
            "status": TicketStatus.SUBMITTED.value,
            "submitted_at": now,
            "updated_at": now,
        }
        if ticket.template_id is None and template_id is not None:
            updates["template_id"] = template_id
        
        result = self._tickets.find_one_and_update(
            {"ticket_id": ticket_id, "status": TicketStatus.DRAFT.value},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )
        if result is None:
            self._raise_missing_or_state(ticket_id)
        
        result.pop("_id", None)
        logger.info(
            f"Submitted ticket: {ticket_id}",
            extra={"ticket_id": ticket_id, "template_id": result.get("template_id"), "status": "SUBMITTED"}
        )
        return Ticket.model_validate(result)
    
    def _raise_missing_or_state(self, ticket_id: str) -> None:
        existing = self._tickets.find_one({"ticket_id": ticket_id})
        if existing is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        raise InvalidStateError(
            f"Ticket {ticket_id} is {existing.get('status')}, only DRAFT tickets can change",
            details={"status": existing.get("status")}
        )
