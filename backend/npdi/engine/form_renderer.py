"""Form Renderer - Render plans built on the shared visibility predicate"""
from typing import Any, Dict, Optional, Sequence

from ..domain.models import (
    FormConfiguration, FormField, TicketTemplate, RenderPlan, RenderedSection, RenderedField
)
from ..domain.enums import VisibilityMode
from .field_paths import ValueLookup, make_value_lookup
from .visibility import FieldVisibilityEvaluator, visibility_evaluator


class FormRenderer:
    """
    Build the sections/fields a form surface should draw
    
    Uses the same FieldVisibilityEvaluator as the SubmissionValidator so the
    editing surface and the server agree on what is visible.
    
    With use_default_values the authored default of every field replaces the
    live value, both for display and for evaluating other fields' visibleWhen.
    That is the read-only template preview administrators use without a ticket.
    """
    
    def __init__(
        self,
        evaluator: Optional[FieldVisibilityEvaluator] = None,
        fallback_prefixes: Optional[Sequence[str]] = None
    ):
        self.evaluator = evaluator or visibility_evaluator
        self.fallback_prefixes = list(fallback_prefixes or [])
    
    def build(
        self,
        form_configuration: FormConfiguration,
        data: Optional[Dict[str, Any]] = None,
        mode: VisibilityMode = VisibilityMode.EDIT,
        template: Optional[TicketTemplate] = None,
        use_default_values: bool = False
    ) -> RenderPlan:
        if use_default_values:
            lookup = self._default_value_lookup(form_configuration)
        else:
            lookup = make_value_lookup(data or {}, self.fallback_prefixes)
        
        required_keys = set(template.submission_requirements) if template else set()
        
        sections = []
        for section in sorted(form_configuration.sections, key=lambda s: s.order):
            if not section.visible:
                continue
            fields = [
                self._render_field(field, lookup, field.field_key in required_keys)
                for field in sorted(section.fields, key=lambda f: f.order)
                if self.evaluator.is_visible(field, lookup, mode)
            ]
            if not fields:
                continue
            sections.append(RenderedSection(
                section_key=section.section_key,
                name=section.name,
                description=section.description,
                collapsible=section.collapsible,
                default_expanded=section.default_expanded,
                fields=fields
            ))
        
        return RenderPlan(
            form_config_id=form_configuration.form_config_id,
            template_id=template.template_id if template else None,
            mode=mode,
            use_default_values=use_default_values,
            sections=sections
        )
    
    def preview_template(
        self,
        form_configuration: FormConfiguration,
        template: Optional[TicketTemplate] = None,
        show_all: bool = False
    ) -> RenderPlan:
        """Preview without a ticket: defaults stand in for values"""
        mode = VisibilityMode.PREVIEW_ALL if show_all else VisibilityMode.READONLY
        return self.build(form_configuration, mode=mode, template=template, use_default_values=True)
    
    def _render_field(self, field: FormField, lookup: ValueLookup, required: bool) -> RenderedField:
        return RenderedField(
            field_key=field.field_key,
            label=field.label,
            type=field.type,
            value=lookup(field.field_key),
            required_for_submission=required,
            editable=field.editable,
            placeholder=field.placeholder,
            help_text=field.help_text,
            options=field.options,
            grid_column=field.grid_column
        )
    
    def _default_value_lookup(self, form_configuration: FormConfiguration) -> ValueLookup:
        defaults = {
            field.field_key: field.default_value
            for _, field in form_configuration.iter_fields()
        }
        
        def lookup(field_key: str) -> Any:
            return defaults.get(field_key)
        
        return lookup
