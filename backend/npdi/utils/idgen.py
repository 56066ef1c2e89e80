"""ID Generation Utilities"""
import uuid
from typing import Optional


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Generate a unique ID with optional prefix
    
    Args:
        prefix: Optional prefix for the ID (e.g., 'TKT', 'TPL', 'FC')
        
    Returns:
        Unique ID string
        
    Examples:
        >>> generate_id('TKT')
        'TKT-a1b2c3d4e5f6'
        >>> generate_id()
        'a1b2c3d4e5f6'
    """
    unique_part = uuid.uuid4().hex[:12]
    
    if prefix:
        return f"{prefix}-{unique_part}"
    return unique_part


def generate_ticket_id() -> str:
    """Generate ticket ID"""
    return generate_id("TKT")


def generate_template_id() -> str:
    """Generate ticket template ID"""
    return generate_id("TPL")


def generate_form_config_id() -> str:
    """Generate form configuration ID"""
    return generate_id("FC")


def generate_correlation_id() -> str:
    """Generate correlation ID for request tracing"""
    return uuid.uuid4().hex
