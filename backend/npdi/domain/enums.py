"""Domain Enumerations - Status and type definitions"""
from enum import Enum


class TicketStatus(str, Enum):
    """Product ticket status"""
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    IN_PROCESS = "IN_PROCESS"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"


class FormFieldType(str, Enum):
    """Form field types supported by the form configuration"""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"
    EMAIL = "email"
    URL = "url"


class VisibilityMode(str, Enum):
    """How field visibility is evaluated"""
    EDIT = "edit"  # Live editing - visibleWhen evaluated against current values
    READONLY = "readonly"  # Viewing a ticket - same rules as edit
    PREVIEW_ALL = "previewAll"  # Template catalog - visibleWhen ignored


class ResolutionSource(str, Enum):
    """Which step of the precedence chain produced the template"""
    TICKET = "ticket"
    USER = "user"
    DEFAULT = "default"


class AuditIssueType(str, Enum):
    """Template audit findings"""
    FORM_CONFIGURATION_MISSING = "FORM_CONFIGURATION_MISSING"
    FORM_CONFIGURATION_INACTIVE = "FORM_CONFIGURATION_INACTIVE"
    REQUIREMENT_NOT_IN_FORM = "REQUIREMENT_NOT_IN_FORM"
    REQUIREMENT_USES_PREFIX_FALLBACK = "REQUIREMENT_USES_PREFIX_FALLBACK"
    REQUIREMENT_ON_HIDDEN_FIELD = "REQUIREMENT_ON_HIDDEN_FIELD"
    DEPENDENT_FIELD_NOT_IN_FORM = "DEPENDENT_FIELD_NOT_IN_FORM"
