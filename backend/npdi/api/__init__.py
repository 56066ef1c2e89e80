"""API module - Routes and dependencies"""
from .deps import get_correlation_id_dep, get_user_identity_dep

__all__ = ["get_correlation_id_dep", "get_user_identity_dep"]
