"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""
    
    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400
    
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class SubmissionBlockedError(ValidationError):
    """Ticket is missing fields its template requires for submission"""
    error_code = "SUBMISSION_REQUIREMENTS_NOT_MET"
    http_status = 422


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class TicketNotFoundError(NotFoundError):
    """Ticket not found"""
    error_code = "TICKET_NOT_FOUND"


class TemplateNotFoundError(NotFoundError):
    """Ticket template not found"""
    error_code = "TEMPLATE_NOT_FOUND"


class FormConfigurationNotFoundError(NotFoundError):
    """Form configuration not found"""
    error_code = "FORM_CONFIGURATION_NOT_FOUND"


class UserNotFoundError(NotFoundError):
    """User not found"""
    error_code = "USER_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict (e.g., concurrent modification)"""
    error_code = "CONFLICT"
    http_status = 409


class InvalidStateError(ConflictError):
    """Action not valid for current state"""
    error_code = "INVALID_STATE"


class AlreadyExistsError(ConflictError):
    """Resource already exists"""
    error_code = "ALREADY_EXISTS"


class DefaultTemplateConflictError(ConflictError):
    """Another writer changed the default template concurrently"""
    error_code = "DEFAULT_TEMPLATE_CONFLICT"


# Engine Errors - raised inside the resolver, never surfaced by the validator
class EngineError(DomainError):
    """Template engine error"""
    error_code = "ENGINE_ERROR"
    http_status = 500


class ResolutionError(EngineError):
    """Template/user lookup failed (store unavailable, malformed reference)"""
    error_code = "RESOLUTION_ERROR"


class ConfigurationError(EngineError):
    """Template references a form configuration that cannot be loaded"""
    error_code = "CONFIGURATION_ERROR"
