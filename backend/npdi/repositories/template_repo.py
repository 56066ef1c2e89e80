"""Template Repository - Data access for ticket templates"""
from typing import Any, Callable, Dict, List, Optional
from pymongo.collection import Collection
from pymongo.client_session import ClientSession
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure

from .mongo_client import get_collection, TICKET_TEMPLATES, SINGLE_DEFAULT_INDEX
from ..domain.models import TicketTemplate
from ..domain.errors import (
    AlreadyExistsError, DefaultTemplateConflictError, InvalidStateError, TemplateNotFoundError
)
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)

# Server error code for "Transaction numbers are only allowed on a replica set member or mongos"
TRANSACTIONS_UNSUPPORTED = 20


def is_default_conflict(error: DuplicateKeyError) -> bool:
    """True when the duplicate key is the single-default index, not template_id/name"""
    key_pattern = (error.details or {}).get("keyPattern") or {}
    return "is_default" in key_pattern or SINGLE_DEFAULT_INDEX in str(error)


class TemplateRepository:
    """
    Repository for ticket template operations
    
    The "at most one default" rule is enforced twice: default changes clear and
    set inside one transaction, and the partial unique index on {is_default: true}
    rejects a second default if two writers still race. On a standalone server
    (no transactions) the writes run unwrapped and the index alone guards the rule.
    """
    
    def __init__(self, collection: Optional[Collection] = None):
        self._templates: Collection = collection if collection is not None else get_collection(TICKET_TEMPLATES)
    
    # =========================================================================
    # Reads
    # =========================================================================
    
    def get_template(self, template_id: str) -> Optional[TicketTemplate]:
        """Get template by ID (active or not)"""
        doc = self._templates.find_one({"template_id": template_id})
        return self._to_model(doc)
    
    def get_template_or_raise(self, template_id: str) -> TicketTemplate:
        template = self.get_template(template_id)
        if not template:
            raise TemplateNotFoundError(f"Template {template_id} not found")
        return template
    
    def get_default_template(self) -> Optional[TicketTemplate]:
        """Get the active default template"""
        doc = self._templates.find_one({"is_default": True, "is_active": True})
        return self._to_model(doc)
    
    def list_templates(self, active_only: bool = True) -> List[TicketTemplate]:
        """List templates, default first then by name"""
        query: Dict[str, Any] = {"is_active": True} if active_only else {}
        cursor = self._templates.find(query).sort([("is_default", DESCENDING), ("name", ASCENDING)])
        return [self._to_model(doc) for doc in cursor]
    
    # =========================================================================
    # Writes
    # =========================================================================
    
    def create_template(self, template: TicketTemplate) -> TicketTemplate:
        """Create a template; a default template is inserted and flipped in one transaction"""
        make_default = template.is_default
        now = utc_now()
        template.created_at = template.created_at or now
        template.updated_at = now
        doc = template.model_dump()
        doc["_id"] = template.template_id
        doc["is_default"] = False
        
        def write(session: Optional[ClientSession]) -> Dict[str, Any]:
            self._templates.insert_one(doc, session=session)
            if not make_default:
                return doc
            try:
                return self._flip_default(template.template_id, template.created_by, session)
            except Exception:
                if session is None:
                    # No transaction to roll back the insert
                    self._templates.delete_one({"template_id": template.template_id})
                raise
        
        try:
            saved = self._run_atomic(write) if make_default else write(None)
        except DuplicateKeyError as e:
            if is_default_conflict(e):
                raise DefaultTemplateConflictError(
                    "Another default template was set concurrently. Please refresh and try again.",
                    details={"template_id": template.template_id}
                )
            raise AlreadyExistsError(
                f"Template '{template.name}' already exists",
                details={"template_id": template.template_id, "name": template.name}
            )
        
        logger.info(
            f"Created template: {template.template_id}",
            extra={"template_id": template.template_id}
        )
        return self._to_model(saved)
    
    def update_template(self, template_id: str, updates: Dict[str, Any], actor: str = "system") -> TicketTemplate:
        """Update template fields; turning is_default on goes through set_default_template"""
        updates = dict(updates)
        make_default = updates.pop("is_default", None)
        updates.pop("template_id", None)
        
        if updates or make_default is False:
            if make_default is False:
                updates["is_default"] = False
            updates["updated_at"] = utc_now()
            updates["updated_by"] = actor
            try:
                result = self._templates.find_one_and_update(
                    {"template_id": template_id},
                    {"$set": updates},
                    return_document=ReturnDocument.AFTER
                )
            except DuplicateKeyError:
                raise AlreadyExistsError(f"Template name '{updates.get('name')}' already exists")
            if result is None:
                raise TemplateNotFoundError(f"Template {template_id} not found")
            logger.info(f"Updated template: {template_id}", extra={"template_id": template_id})
        
        if make_default:
            return self.set_default_template(template_id, actor=actor)
        return self.get_template_or_raise(template_id)
    
    def set_default_template(self, template_id: str, actor: str = "system") -> TicketTemplate:
        """Make one template the default and clear the flag on all others, atomically"""
        try:
            doc = self._run_atomic(lambda s: self._flip_default(template_id, actor, s))
        except DuplicateKeyError:
            raise DefaultTemplateConflictError(
                "Another default template was set concurrently. Please refresh and try again.",
                details={"template_id": template_id}
            )
        
        logger.info(f"Set default template: {template_id}", extra={"template_id": template_id})
        return self._to_model(doc)
    
    def _run_atomic(self, callback: Callable[[Optional[ClientSession]], Any]) -> Any:
        """Run callback in a transaction, or unwrapped when the server has no transactions"""
        client = self._templates.database.client
        with client.start_session() as session:
            try:
                return session.with_transaction(callback)
            except OperationFailure as e:
                if e.code != TRANSACTIONS_UNSUPPORTED:
                    raise
                logger.warning(
                    "MongoDB transactions unavailable (standalone server); "
                    "default changes rely on the single_default_template index"
                )
        return callback(None)
    
    def _flip_default(self, template_id: str, actor: str, session: Optional[ClientSession]) -> Dict[str, Any]:
        target = self._templates.find_one({"template_id": template_id}, session=session)
        if target is None:
            raise TemplateNotFoundError(f"Template {template_id} not found")
        if not target.get("is_active", True):
            raise InvalidStateError(f"Inactive template {template_id} cannot be the default")
        
        now = utc_now()
        self._templates.update_many(
            {"is_default": True, "template_id": {"$ne": template_id}},
            {"$set": {"is_default": False, "updated_at": now, "updated_by": actor}},
            session=session
        )
        return self._templates.find_one_and_update(
            {"template_id": template_id},
            {"$set": {"is_default": True, "updated_at": now, "updated_by": actor}},
            return_document=ReturnDocument.AFTER,
            session=session
        )
    
    def deactivate_template(self, template_id: str, actor: str = "system") -> TicketTemplate:
        """Soft-delete a template; a deactivated template is never the default"""
        result = self._templates.find_one_and_update(
            {"template_id": template_id},
            {"$set": {
                "is_active": False,
                "is_default": False,
                "updated_at": utc_now(),
                "updated_by": actor,
            }},
            return_document=ReturnDocument.AFTER
        )
        if result is None:
            raise TemplateNotFoundError(f"Template {template_id} not found")
        logger.info(f"Deactivated template: {template_id}", extra={"template_id": template_id})
        return self._to_model(result)
    
    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[TicketTemplate]:
        if not doc:
            return None
        doc = dict(doc)
        doc.pop("_id", None)
        return TicketTemplate.model_validate(doc)
