"""
Maintenance scripts

Run from the backend directory:
    python -m scripts.seed_data
    python -m scripts.audit_templates
"""
