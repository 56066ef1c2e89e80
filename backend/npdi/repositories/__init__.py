"""Repository modules - Data access layer"""
from .mongo_client import (
    get_database, get_collection, create_indexes, close_connection, health_check, supports_transactions
)
from .form_config_repo import FormConfigurationRepository
from .template_repo import TemplateRepository
from .user_repo import UserRepository
from .ticket_repo import TicketRepository

__all__ = [
    "get_database",
    "get_collection",
    "create_indexes",
    "close_connection",
    "health_check",
    "supports_transactions",
    "FormConfigurationRepository",
    "TemplateRepository",
    "UserRepository",
    "TicketRepository",
]
