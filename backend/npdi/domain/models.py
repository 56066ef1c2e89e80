"""Domain Models - Pydantic schemas for all entities

Models are stored snake_case; every model also accepts (and serializes to) the
camelCase names used by the form authoring UI and the submission API.
"""
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import (
    TicketStatus, FormFieldType, VisibilityMode, ResolutionSource, AuditIssueType
)


CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ============================================================================
# Form Configuration
# ============================================================================

class FieldOption(BaseModel):
    """Option for select/radio fields"""
    model_config = CAMEL_CONFIG
    
    value: str
    label: str


class FieldValidationRules(BaseModel):
    """Client-side validation metadata (not enforced by the submission engine)"""
    model_config = CAMEL_CONFIG
    
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    step: Optional[float] = None


class VisibleWhen(BaseModel):
    """
    Conditional visibility rule
    
    Either a scalar `value` (equality) or a `values` list (membership, OR).
    A rule with no dependent field, no scalar and no non-empty list is no rule at all.
    """
    model_config = CAMEL_CONFIG
    
    dependent_field_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("dependent_field_key", "dependentFieldKey", "fieldKey", "field_key"),
        serialization_alias="dependentFieldKey",
        description="Field whose current value drives visibility"
    )
    value: Optional[Any] = Field(None, description="Scalar value to match")
    values: Optional[List[Any]] = Field(None, description="Any-of values to match")
    
    @property
    def has_scalar(self) -> bool:
        return self.value is not None and self.value != ""
    
    @property
    def has_values(self) -> bool:
        return bool(self.values)
    
    @property
    def has_predicate(self) -> bool:
        return bool(self.dependent_field_key) and (self.has_values or self.has_scalar)


class FormField(BaseModel):
    """Form field definition"""
    model_config = CAMEL_CONFIG
    
    field_key: str = Field(..., description="Dot-delimited storage path, unique within the configuration")
    label: str = Field(..., description="Display label")
    type: FormFieldType = Field(default=FormFieldType.TEXT)
    required: bool = Field(default=False, description="Client-side required marker")
    visible: bool = Field(default=True, description="Authoring-time visibility")
    editable: bool = Field(default=True)
    default_value: Optional[Any] = None
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    options: List[FieldOption] = Field(default_factory=list)
    validation: Optional[FieldValidationRules] = None
    visible_when: Optional[VisibleWhen] = None
    grid_column: str = Field(default="full", description="full, half, third, quarter")
    order: int = Field(default=0)
    is_custom: bool = Field(default=False)


class FormSection(BaseModel):
    """Form section grouping fields"""
    model_config = CAMEL_CONFIG
    
    section_key: str
    name: str
    description: Optional[str] = None
    visible: bool = True
    collapsible: bool = True
    default_expanded: bool = False
    order: int = 0
    fields: List[FormField] = Field(default_factory=list)
    is_custom: bool = False


class FormConfiguration(BaseModel):
    """Catalog of sections and fields a ticket can carry"""
    model_config = CAMEL_CONFIG
    
    form_config_id: str = Field(
        ...,
        validation_alias=AliasChoices("form_config_id", "formConfigId", "id"),
        serialization_alias="formConfigId"
    )
    name: str = Field(default="Product Ticket Form")
    description: Optional[str] = None
    version: str = Field(default="1.0.0")
    is_active: bool = Field(default=True)
    sections: List[FormSection] = Field(default_factory=list)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    def iter_fields(self) -> Iterator[Tuple[FormSection, FormField]]:
        """Yield (section, field) pairs in section order"""
        for section in sorted(self.sections, key=lambda s: s.order):
            for field in section.fields:
                yield section, field
    
    def find_field(self, field_key: str) -> Optional[FormField]:
        """Find the first field with the given key"""
        for _, field in self.iter_fields():
            if field.field_key == field_key:
                return field
        return None
    
    def get_field_label(self, field_key: str) -> Optional[str]:
        field = self.find_field(field_key)
        return field.label if field else None


# ============================================================================
# Templates & Users
# ============================================================================

class TicketTemplate(BaseModel):
    """Named binding of a form configuration and its submission requirements"""
    model_config = CAMEL_CONFIG
    
    template_id: str = Field(
        ...,
        validation_alias=AliasChoices("template_id", "templateId", "id"),
        serialization_alias="templateId"
    )
    name: str = Field(..., description="Unique template name")
    description: str = Field(default="")
    form_configuration_id: str = Field(
        ...,
        validation_alias=AliasChoices("form_configuration_id", "formConfigurationId", "formConfiguration"),
        serialization_alias="formConfigurationId"
    )
    is_default: bool = Field(default=False)
    is_active: bool = Field(default=True)
    submission_requirements: List[str] = Field(
        default_factory=list,
        description="Field keys that must be filled before submission"
    )
    created_by: str = Field(default="system")
    updated_by: str = Field(default="system")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserIdentity(BaseModel):
    """Identity of the acting user - either key identifies the user"""
    model_config = CAMEL_CONFIG
    
    employee_id: Optional[str] = None
    email: Optional[str] = None
    
    @property
    def is_anonymous(self) -> bool:
        return not (self.employee_id or self.email)
    
    def describe(self) -> str:
        return self.employee_id or self.email or "anonymous"


class UserProfile(BaseModel):
    """User record as far as template assignment is concerned"""
    model_config = CAMEL_CONFIG
    
    employee_id: Optional[str] = None
    email: str
    display_name: Optional[str] = None
    ticket_template_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("ticket_template_id", "ticketTemplateId", "ticketTemplate"),
        serialization_alias="ticketTemplateId"
    )
    is_active: bool = True


# ============================================================================
# Tickets
# ============================================================================

class Ticket(BaseModel):
    """Product introduction ticket"""
    model_config = CAMEL_CONFIG
    
    ticket_id: Optional[str] = None
    status: TicketStatus = Field(default=TicketStatus.DRAFT)
    template_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("template_id", "templateId", "template"),
        serialization_alias="templateId"
    )
    data: Dict[str, Any] = Field(default_factory=dict, description="Nested business data addressed by field keys")
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None


# ============================================================================
# Resolution & Validation Results
# ============================================================================

class ResolvedTemplate(BaseModel):
    """Template picked by the resolver together with its form configuration"""
    template: TicketTemplate
    form_configuration: FormConfiguration
    source: ResolutionSource


class ResolutionFault(BaseModel):
    """A lookup failure swallowed by one step of the resolution chain"""
    strategy: str
    error_type: str
    message: str


class ResolutionTrace(BaseModel):
    """Tagged resolver result: the template (if any) plus every swallowed fault"""
    resolved: Optional[ResolvedTemplate] = None
    faults: List[ResolutionFault] = Field(default_factory=list)


class MissingField(BaseModel):
    """Required field left empty"""
    model_config = CAMEL_CONFIG
    
    field_key: str
    field_label: str


class ValidationOutcome(BaseModel):
    """Submission validation result returned to the submission endpoint"""
    model_config = CAMEL_CONFIG
    
    is_valid: bool
    missing_fields: List[MissingField] = Field(default_factory=list)
    template: Optional[TicketTemplate] = None
    required_field_keys: List[str] = Field(default_factory=list)
    resolved_from: Optional[ResolutionSource] = None


class TemplateAuditIssue(BaseModel):
    """Problem found while auditing a template against its form configuration"""
    model_config = CAMEL_CONFIG
    
    issue_type: AuditIssueType
    message: str
    field_key: Optional[str] = None


# ============================================================================
# Render Plans
# ============================================================================

class RenderedField(BaseModel):
    """Field as the form renderer should draw it"""
    model_config = CAMEL_CONFIG
    
    field_key: str
    label: str
    type: FormFieldType
    value: Optional[Any] = None
    required_for_submission: bool = False
    editable: bool = True
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    options: List[FieldOption] = Field(default_factory=list)
    grid_column: str = "full"


class RenderedSection(BaseModel):
    """Section with its currently visible fields"""
    model_config = CAMEL_CONFIG
    
    section_key: str
    name: str
    description: Optional[str] = None
    collapsible: bool = True
    default_expanded: bool = False
    fields: List[RenderedField] = Field(default_factory=list)


class RenderPlan(BaseModel):
    """Everything a form surface needs to render a template"""
    model_config = CAMEL_CONFIG
    
    form_config_id: str
    template_id: Optional[str] = None
    mode: VisibilityMode
    use_default_values: bool = False
    sections: List[RenderedSection] = Field(default_factory=list)
    
    def visible_field_keys(self) -> List[str]:
        return [f.field_key for s in self.sections for f in s.fields]


class SubmissionEvaluation(BaseModel):
    """Tagged validator result: an outcome, or the fault that prevented one"""
    outcome: Optional[ValidationOutcome] = None
    fault: Optional[ResolutionFault] = None
    resolution_faults: List[ResolutionFault] = Field(default_factory=list)
    
    @property
    def is_fault(self) -> bool:
        return self.fault is not None
