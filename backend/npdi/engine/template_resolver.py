"""Template Resolver - Pick the template that governs a ticket"""
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, TYPE_CHECKING

from ..domain.models import (
    Ticket, TicketTemplate, UserIdentity, ResolvedTemplate, ResolutionFault, ResolutionTrace
)
from ..domain.enums import ResolutionSource
from ..domain.errors import ConfigurationError, ResolutionError
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..services.template_registry import TemplateRegistry

logger = get_logger(__name__)


class ResolutionStrategy(ABC):
    """One link of the resolution chain"""
    
    name: str = "strategy"
    source: ResolutionSource
    
    def __init__(self, registry: "TemplateRegistry"):
        self.registry = registry
    
    @abstractmethod
    def try_resolve(self, ticket: Ticket, identity: UserIdentity) -> Optional[ResolvedTemplate]:
        """Return a resolved template or None to pass to the next strategy"""
    
    def _lookup(self, what: str, loader: Callable[..., Any], *args: Any) -> Any:
        """Run a registry read, turning any store failure into ResolutionError"""
        try:
            return loader(*args)
        except Exception as e:
            raise ResolutionError(
                f"{what} lookup failed: {e}",
                details={"strategy": self.name, "args": [str(a) for a in args]}
            ) from e
    
    def _bind(self, template: TicketTemplate) -> ResolvedTemplate:
        """Attach the template's form configuration"""
        form_configuration = self._lookup(
            "Form configuration",
            self.registry.get_form_configuration,
            template.form_configuration_id
        )
        if form_configuration is None:
            raise ConfigurationError(
                f"Template {template.template_id} references missing form configuration "
                f"{template.form_configuration_id}",
                details={"template_id": template.template_id}
            )
        return ResolvedTemplate(
            template=template,
            form_configuration=form_configuration,
            source=self.source
        )


class StoredTemplateStrategy(ResolutionStrategy):
    """The template pinned on the ticket, while it stays active"""
    
    name = "stored_template"
    source = ResolutionSource.TICKET
    
    def try_resolve(self, ticket: Ticket, identity: UserIdentity) -> Optional[ResolvedTemplate]:
        if ticket.template_id is None:
            return None
        if not isinstance(ticket.template_id, str) or not ticket.template_id.strip():
            raise ResolutionError(
                f"Malformed template reference on ticket: {ticket.template_id!r}",
                details={"strategy": self.name}
            )
        
        template = self._lookup("Template", self.registry.get_template, ticket.template_id)
        if template is None:
            return None
        if not template.is_active:
            logger.warning(
                f"Ticket's stored template {template.template_id} is inactive, falling through",
                extra={"ticket_id": ticket.ticket_id, "template_id": template.template_id}
            )
            return None
        return self._bind(template)


class UserTemplateStrategy(ResolutionStrategy):
    """The template assigned to the acting user"""
    
    name = "user_template"
    source = ResolutionSource.USER
    
    def try_resolve(self, ticket: Ticket, identity: UserIdentity) -> Optional[ResolvedTemplate]:
        if identity.is_anonymous:
            return None
        template = self._lookup("User template", self.registry.get_user_template, identity)
        if template is None or not template.is_active:
            return None
        return self._bind(template)


class DefaultTemplateStrategy(ResolutionStrategy):
    """The single active default template"""
    
    name = "default_template"
    source = ResolutionSource.DEFAULT
    
    def try_resolve(self, ticket: Ticket, identity: UserIdentity) -> Optional[ResolvedTemplate]:
        template = self._lookup("Default template", self.registry.get_default_template)
        if template is None or not (template.is_default and template.is_active):
            return None
        return self._bind(template)


class TemplateResolver:
    """
    Resolve the governing template via a chain of strategies
    
    Default chain:
    1. Template stored on the ticket (skipped if inactive)
    2. Template assigned to the user (employee id OR email)
    3. Active default template
    4. None
    
    A strategy that fails (lookup error, missing form configuration) is treated as
    "not found" and the chain moves on. resolve() never raises.
    """
    
    def __init__(
        self,
        registry: "TemplateRegistry",
        strategies: Optional[List[ResolutionStrategy]] = None
    ):
        self.registry = registry
        self.strategies = strategies if strategies is not None else [
            StoredTemplateStrategy(registry),
            UserTemplateStrategy(registry),
            DefaultTemplateStrategy(registry),
        ]
    
    def resolve(self, ticket: Ticket, identity: UserIdentity) -> Optional[ResolvedTemplate]:
        return self.resolve_with_trace(ticket, identity).resolved
    
    def resolve_with_trace(self, ticket: Ticket, identity: UserIdentity) -> ResolutionTrace:
        """Resolve and keep every swallowed fault for diagnostics"""
        trace = ResolutionTrace()
        
        for strategy in self.strategies:
            try:
                resolved = strategy.try_resolve(ticket, identity)
            except Exception as e:
                trace.faults.append(ResolutionFault(
                    strategy=strategy.name,
                    error_type=type(e).__name__,
                    message=str(e)
                ))
                logger.warning(
                    f"Template resolution step {strategy.name} failed: {e}",
                    extra={"ticket_id": ticket.ticket_id, "strategy": strategy.name}
                )
                continue
            
            if resolved is not None:
                trace.resolved = resolved
                logger.debug(
                    f"Resolved template {resolved.template.template_id} from {resolved.source.value}",
                    extra={
                        "ticket_id": ticket.ticket_id,
                        "template_id": resolved.template.template_id,
                        "resolved_from": resolved.source.value,
                    }
                )
                return trace
        
        logger.warning(
            f"No template found for user: {identity.describe()}",
            extra={"ticket_id": ticket.ticket_id, "employee_id": identity.employee_id, "user_email": identity.email}
        )
        return trace
