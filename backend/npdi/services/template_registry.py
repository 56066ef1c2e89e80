"""Template Registry - Cached access to templates, form configurations and assignments"""
from typing import Dict, List, Optional

from ..config.settings import settings
from ..domain.models import (
    FormConfiguration, TicketTemplate, UserIdentity, UserProfile, TemplateAuditIssue
)
from ..engine.template_audit import audit_template
from ..repositories.form_config_repo import FormConfigurationRepository
from ..repositories.template_repo import TemplateRepository
from ..repositories.user_repo import UserRepository
from ..utils.cache import TTLCache
from ..utils.logger import get_logger

logger = get_logger(__name__)

TEMPLATE_NS = "template"
DEFAULT_NS = "default_template"
FORM_CONFIG_NS = "form_config"


class TemplateRegistry:
    """
    Read-mostly registry used by the template resolver
    
    Template and form configuration reads go through a TTL cache. Every write
    made through the registry invalidates the entries it touches; a default
    change invalidates all templates because it flips is_default on two of them.
    """
    
    def __init__(
        self,
        template_repo: Optional[TemplateRepository] = None,
        form_config_repo: Optional[FormConfigurationRepository] = None,
        user_repo: Optional[UserRepository] = None,
        cache: Optional[TTLCache] = None
    ):
        self.template_repo = template_repo or TemplateRepository()
        self.form_config_repo = form_config_repo or FormConfigurationRepository()
        self.user_repo = user_repo or UserRepository()
        self.cache = cache or TTLCache(
            ttl_seconds=settings.template_cache_ttl_seconds,
            max_entries=settings.template_cache_max_entries
        )
    
    # =========================================================================
    # Reads (resolver interface)
    # =========================================================================
    
    def get_template(self, template_id: str) -> Optional[TicketTemplate]:
        return self.cache.get_or_load(
            TEMPLATE_NS, template_id, lambda: self.template_repo.get_template(template_id)
        )
    
    def get_default_template(self) -> Optional[TicketTemplate]:
        return self.cache.get_or_load(DEFAULT_NS, "current", self.template_repo.get_default_template)
    
    def get_user_template(self, identity: UserIdentity) -> Optional[TicketTemplate]:
        """Template assigned to the user matched by employee id OR email"""
        user = self.user_repo.find_by_identity(identity)
        if user is None or not user.ticket_template_id:
            return None
        return self.get_template(user.ticket_template_id)
    
    def get_form_configuration(self, form_config_id: str) -> Optional[FormConfiguration]:
        return self.cache.get_or_load(
            FORM_CONFIG_NS, form_config_id, lambda: self.form_config_repo.get_form_configuration(form_config_id)
        )
    
    def list_templates(self, active_only: bool = True) -> List[TicketTemplate]:
        return self.template_repo.list_templates(active_only=active_only)
    
    # =========================================================================
    # Writes
    # =========================================================================
    
    def create_template(self, template: TicketTemplate) -> TicketTemplate:
        created = self.template_repo.create_template(template)
        self._invalidate_templates()
        return created
    
    def update_template(self, template_id: str, updates: Dict, actor: str = "system") -> TicketTemplate:
        updated = self.template_repo.update_template(template_id, updates, actor=actor)
        self._invalidate_templates()
        return updated
    
    def set_default_template(self, template_id: str, actor: str = "system") -> TicketTemplate:
        template = self.template_repo.set_default_template(template_id, actor=actor)
        self._invalidate_templates()
        return template
    
    def deactivate_template(self, template_id: str, actor: str = "system") -> TicketTemplate:
        template = self.template_repo.deactivate_template(template_id, actor=actor)
        self._invalidate_templates()
        return template
    
    def deactivate_form_configuration(self, form_config_id: str, actor: str = "system") -> None:
        self.form_config_repo.deactivate_form_configuration(form_config_id, actor=actor)
        self.cache.invalidate(FORM_CONFIG_NS, form_config_id)
    
    def assign_template_to_user(self, identity: UserIdentity, template_id: Optional[str]) -> UserProfile:
        if template_id is not None:
            self.template_repo.get_template_or_raise(template_id)
        return self.user_repo.assign_template(identity, template_id)
    
    def _invalidate_templates(self) -> None:
        self.cache.invalidate_namespace(TEMPLATE_NS)
        self.cache.invalidate_namespace(DEFAULT_NS)
    
    # =========================================================================
    # Audit
    # =========================================================================
    
    def audit(self, template: TicketTemplate) -> List[TemplateAuditIssue]:
        """Check a template's requirements against its form configuration"""
        form_configuration = self.form_config_repo.get_form_configuration(template.form_configuration_id)
        prefixes = settings.legacy_field_prefixes_list if settings.legacy_prefix_fallback_enabled else []
        issues = audit_template(template, form_configuration, prefixes)
        if issues:
            logger.info(
                f"Template {template.template_id} has {len(issues)} audit issue(s)",
                extra={"template_id": template.template_id}
            )
        return issues
