"""Form Service - Render plans for tickets and template previews"""
from typing import Optional

from ..config.settings import settings
from ..domain.models import RenderPlan, UserIdentity
from ..domain.enums import VisibilityMode
from ..domain.errors import FormConfigurationNotFoundError, TemplateNotFoundError
from ..engine.form_renderer import FormRenderer
from ..engine.template_resolver import TemplateResolver
from ..repositories.ticket_repo import TicketRepository
from .template_registry import TemplateRegistry


class FormService:
    """Service backing the form surfaces"""
    
    def __init__(
        self,
        registry: Optional[TemplateRegistry] = None,
        ticket_repo: Optional[TicketRepository] = None,
        renderer: Optional[FormRenderer] = None
    ):
        self.registry = registry or TemplateRegistry()
        self.ticket_repo = ticket_repo or TicketRepository()
        self.resolver = TemplateResolver(self.registry)
        prefixes = settings.legacy_field_prefixes_list if settings.legacy_prefix_fallback_enabled else []
        self.renderer = renderer or FormRenderer(fallback_prefixes=prefixes)
    
    def render_ticket(
        self,
        ticket_id: str,
        identity: UserIdentity,
        mode: VisibilityMode = VisibilityMode.EDIT
    ) -> RenderPlan:
        """Render plan for a ticket under the template that governs it"""
        ticket = self.ticket_repo.get_ticket_or_raise(ticket_id)
        resolved = self.resolver.resolve(ticket, identity)
        if resolved is None:
            raise TemplateNotFoundError(f"No template found for ticket {ticket_id}")
        return self.renderer.build(
            resolved.form_configuration,
            data=ticket.data,
            mode=mode,
            template=resolved.template
        )
    
    def preview_template(self, template_id: str, show_all: bool = False) -> RenderPlan:
        """Read-only preview of a template with authored defaults as values"""
        template = self.registry.get_template(template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template {template_id} not found")
        form_configuration = self.registry.get_form_configuration(template.form_configuration_id)
        if form_configuration is None:
            raise FormConfigurationNotFoundError(
                f"Form configuration {template.form_configuration_id} not found",
                details={"template_id": template_id}
            )
        return self.renderer.preview_template(form_configuration, template=template, show_all=show_all)
