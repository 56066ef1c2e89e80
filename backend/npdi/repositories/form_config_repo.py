"""Form Configuration Repository - Data access for form configurations"""
from typing import List, Optional
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError
from pydantic import ValidationError

from .mongo_client import get_collection, FORM_CONFIGURATIONS
from ..domain.models import FormConfiguration
from ..domain.errors import AlreadyExistsError, FormConfigurationNotFoundError
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class FormConfigurationRepository:
    """Repository for form configuration operations"""
    
    def __init__(self, collection: Optional[Collection] = None):
        self._configs: Collection = collection if collection is not None else get_collection(FORM_CONFIGURATIONS)
    
    def create_form_configuration(self, form_configuration: FormConfiguration) -> FormConfiguration:
        """Create a new form configuration"""
        now = utc_now()
        form_configuration.created_at = form_configuration.created_at or now
        form_configuration.updated_at = now
        doc = form_configuration.model_dump()
        doc["_id"] = form_configuration.form_config_id
        
        try:
            self._configs.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExistsError(f"Form configuration {form_configuration.form_config_id} already exists")
        
        logger.info(
            f"Created form configuration: {form_configuration.form_config_id}",
            extra={"form_config_id": form_configuration.form_config_id}
        )
        return form_configuration
    
    def get_form_configuration(self, form_config_id: str) -> Optional[FormConfiguration]:
        """Get form configuration by ID (active or not)"""
        doc = self._configs.find_one({"form_config_id": form_config_id})
        if not doc:
            return None
        doc.pop("_id", None)
        try:
            return FormConfiguration.model_validate(doc)
        except ValidationError as e:
            logger.error(
                f"Corrupted form configuration {form_config_id}: {str(e)[:500]}",
                extra={"form_config_id": form_config_id}
            )
            raise
    
    def list_form_configurations(self, active_only: bool = True) -> List[FormConfiguration]:
        """List form configurations, skipping corrupted documents"""
        query = {"is_active": True} if active_only else {}
        configs = []
        for doc in self._configs.find(query):
            doc.pop("_id", None)
            try:
                configs.append(FormConfiguration.model_validate(doc))
            except ValidationError as e:
                logger.warning(
                    f"Skipping corrupted form configuration {doc.get('form_config_id', 'unknown')}. "
                    f"Errors: {len(e.errors())}"
                )
        return configs
    
    def deactivate_form_configuration(self, form_config_id: str, actor: str = "system") -> None:
        """Soft-delete a form configuration"""
        result = self._configs.update_one(
            {"form_config_id": form_config_id},
            {"$set": {"is_active": False, "updated_by": actor, "updated_at": utc_now()}}
        )
        if result.matched_count == 0:
            raise FormConfigurationNotFoundError(f"Form configuration {form_config_id} not found")
        logger.info(
            f"Deactivated form configuration: {form_config_id}",
            extra={"form_config_id": form_config_id}
        )
