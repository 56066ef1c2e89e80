"""User Repository - Identity lookups and template assignment"""
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import ReturnDocument

from .mongo_client import get_collection, USERS
from ..domain.models import UserIdentity, UserProfile
from ..domain.errors import UserNotFoundError
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


def identity_query(identity: UserIdentity) -> Optional[Dict[str, Any]]:
    """
    Build an $or query matching either identity key
    
    Emails are stored lowercased, so the email branch is case-insensitive.
    """
    conditions: List[Dict[str, Any]] = []
    if identity.employee_id:
        conditions.append({"employee_id": identity.employee_id})
    if identity.email:
        conditions.append({"email": identity.email.strip().lower()})
    if not conditions:
        return None
    return {"$or": conditions}


class UserRepository:
    """Repository for user template assignments"""
    
    def __init__(self, collection: Optional[Collection] = None):
        self._users: Collection = collection if collection is not None else get_collection(USERS)
    
    def upsert_user(self, user: UserProfile) -> UserProfile:
        """Create or update a user keyed by email"""
        user.email = user.email.strip().lower()
        doc = user.model_dump()
        doc["updated_at"] = utc_now()
        self._users.update_one({"email": user.email}, {"$set": doc}, upsert=True)
        logger.info(f"Upserted user: {user.email}", extra={"user_email": user.email})
        return user
    
    def find_by_identity(self, identity: UserIdentity) -> Optional[UserProfile]:
        """Find an active user by employee id OR email"""
        query = identity_query(identity)
        if query is None:
            return None
        query["is_active"] = True
        doc = self._users.find_one(query)
        if not doc:
            return None
        doc.pop("_id", None)
        return UserProfile.model_validate(doc)
    
    def assign_template(self, identity: UserIdentity, template_id: Optional[str]) -> UserProfile:
        """Assign (or clear, with None) a user's ticket template"""
        query = identity_query(identity)
        if query is None:
            raise UserNotFoundError("A user identity requires an employee id or an email")
        
        result = self._users.find_one_and_update(
            query,
            {"$set": {"ticket_template_id": template_id, "updated_at": utc_now()}},
            return_document=ReturnDocument.AFTER
        )
        if result is None:
            raise UserNotFoundError(f"User {identity.describe()} not found")
        
        result.pop("_id", None)
        logger.info(
            f"Assigned template {template_id} to user {identity.describe()}",
            extra={"template_id": template_id, "employee_id": identity.employee_id, "user_email": identity.email}
        )
        return UserProfile.model_validate(result)
