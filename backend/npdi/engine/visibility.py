"""Field Visibility Evaluator - Shared visibility predicate for validation and rendering"""
from typing import Any, List

from ..domain.models import FormConfiguration, FormField, VisibleWhen
from ..domain.enums import VisibilityMode
from .field_paths import ValueLookup
from ..utils.logger import get_logger

logger = get_logger(__name__)

BOOLEAN_LITERALS = ("true", "false")


def _is_boolean_literal(value: Any) -> bool:
    return isinstance(value, str) and value in BOOLEAN_LITERALS


def _coerce_bool(value: Any) -> bool:
    """Coerce a live value the way a checkbox serializes: "true" / True are true"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    if value is None:
        return False
    return bool(value)


class FieldVisibilityEvaluator:
    """
    Decide whether a field is visible (and therefore fillable/required)
    
    Rules, in order:
    1. visible=False on the field hides it in every mode
    2. PREVIEW_ALL shows every authoring-visible field, ignoring visibleWhen
    3. visibleWhen without a predicate is no condition
    4. "true"/"false" literals compare as booleans on both sides
    5. values -> membership (OR), value -> equality
    
    Pure: the lookup is only read, never written.
    """
    
    def is_visible(
        self,
        field: FormField,
        value_lookup: ValueLookup,
        mode: VisibilityMode = VisibilityMode.EDIT
    ) -> bool:
        if not field.visible:
            return False
        
        if mode == VisibilityMode.PREVIEW_ALL:
            return True
        
        condition = field.visible_when
        if condition is None or not condition.has_predicate:
            return True
        
        current_value = value_lookup(condition.dependent_field_key)
        return self.matches(condition, current_value)
    
    def matches(self, condition: VisibleWhen, current_value: Any) -> bool:
        """Evaluate a visibleWhen rule against the dependent field's value"""
        if condition.has_values:
            return any(self._equals(expected, current_value) for expected in condition.values)
        return self._equals(condition.value, current_value)
    
    def _equals(self, expected: Any, current_value: Any) -> bool:
        if _is_boolean_literal(expected):
            return _coerce_bool(expected) == _coerce_bool(current_value)
        return expected == current_value
    
    def visible_fields(
        self,
        form_configuration: FormConfiguration,
        value_lookup: ValueLookup,
        mode: VisibilityMode = VisibilityMode.EDIT
    ) -> List[FormField]:
        """All fields in visible sections that are visible for the lookup state"""
        return [
            field
            for section, field in form_configuration.iter_fields()
            if section.visible and self.is_visible(field, value_lookup, mode)
        ]


# Shared instance - the evaluator holds no state
visibility_evaluator = FieldVisibilityEvaluator()
