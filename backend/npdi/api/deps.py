"""API Dependencies - Common dependencies for routes"""
from functools import lru_cache
from typing import Optional
from fastapi import Depends, Header

from ..domain.models import UserIdentity
from ..services.form_service import FormService
from ..services.submission_service import SubmissionService
from ..services.template_registry import TemplateRegistry
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing
    
    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


async def get_user_identity_dep(
    x_employee_id: Optional[str] = Header(None, alias="X-Employee-Id"),
    x_user_email: Optional[str] = Header(None, alias="X-User-Email")
) -> UserIdentity:
    """
    Identity of the acting user, as forwarded by the authentication layer
    
    Either header identifies the user. Missing both yields an anonymous identity,
    which still resolves ticket-pinned and default templates.
    """
    return UserIdentity(
        employee_id=x_employee_id.strip() if x_employee_id else None,
        email=x_user_email.strip() if x_user_email else None
    )


@lru_cache()
def get_template_registry() -> TemplateRegistry:
    """Process-wide registry so its cache is shared across requests"""
    return TemplateRegistry()


def get_submission_service(
    registry: TemplateRegistry = Depends(get_template_registry)
) -> SubmissionService:
    return SubmissionService(registry=registry)


def get_form_service(
    registry: TemplateRegistry = Depends(get_template_registry)
) -> FormService:
    return FormService(registry=registry)
