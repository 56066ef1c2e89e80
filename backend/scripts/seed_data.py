"""
Seed Data Script - Creates the default form configuration and template
Run: python -m scripts.seed_data
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from npdi.repositories.mongo_client import create_indexes
from npdi.repositories.form_config_repo import FormConfigurationRepository
from npdi.repositories.template_repo import TemplateRepository
from npdi.domain.models import FormConfiguration, TicketTemplate
from npdi.utils.idgen import generate_form_config_id, generate_template_id


DEFAULT_SECTIONS = [
    {
        "section_key": "productionType",
        "name": "Production Type",
        "order": 1,
        "default_expanded": True,
        "fields": [
            {
                "field_key": "productionType",
                "label": "Production Type",
                "type": "radio",
                "default_value": "Produced",
                "options": [
                    {"value": "Produced", "label": "Produced"},
                    {"value": "Procured", "label": "Procured"},
                ],
            },
        ],
    },
    {
        "section_key": "basic",
        "name": "Basic Information",
        "order": 2,
        "default_expanded": True,
        "fields": [
            {"field_key": "productName", "label": "Product Name", "type": "text", "order": 1},
            {"field_key": "productLine", "label": "Product Line", "type": "text",
             "default_value": "Chemical Products", "order": 2},
            {"field_key": "sbu", "label": "SBU", "type": "select", "default_value": "P90", "order": 3,
             "options": [{"value": v, "label": v} for v in ["775", "P90", "440", "P87", "P89", "P85"]]},
            {"field_key": "priority", "label": "Priority", "type": "select", "default_value": "MEDIUM", "order": 4,
             "options": [{"value": v, "label": v.title()} for v in ["LOW", "MEDIUM", "HIGH", "URGENT"]]},
        ],
    },
    {
        "section_key": "vendor",
        "name": "Vendor Information",
        "order": 3,
        "fields": [
            {"field_key": "vendorInformation.vendorName", "label": "Vendor Name", "type": "text",
             "grid_column": "half", "order": 1,
             "visible_when": {"dependent_field_key": "productionType", "value": "Procured"}},
            {"field_key": "vendorInformation.vendorSAPNumber", "label": "Vendor SAP Number", "type": "text",
             "grid_column": "half", "order": 2,
             "visible_when": {"dependent_field_key": "productionType", "value": "Procured"}},
        ],
    },
    {
        "section_key": "chemical",
        "name": "Chemical Properties",
        "order": 4,
        "fields": [
            {"field_key": "chemicalProperties.casNumber", "label": "CAS Number", "type": "text",
             "placeholder": "e.g., 64-17-5", "order": 1},
            {"field_key": "chemicalProperties.molecularFormula", "label": "Molecular Formula", "type": "text",
             "order": 2},
            {"field_key": "chemicalProperties.physicalState", "label": "Physical State", "type": "select",
             "default_value": "Solid", "order": 3,
             "options": [{"value": v, "label": v} for v in ["Solid", "Liquid", "Gas", "Powder", "Crystal"]]},
            {"field_key": "chemicalProperties.isHazardous", "label": "Hazardous Material", "type": "checkbox",
             "default_value": False, "order": 4},
            {"field_key": "hazardClassification.signalWord", "label": "Signal Word", "type": "select",
             "order": 5,
             "options": [{"value": "WARNING", "label": "Warning"}, {"value": "DANGER", "label": "Danger"}],
             "visible_when": {"dependent_field_key": "chemicalProperties.isHazardous", "value": "true"}},
        ],
    },
    {
        "section_key": "packaging",
        "name": "Packaging",
        "order": 5,
        "fields": [
            {"field_key": "packagingType", "label": "Packaging Type", "type": "select", "order": 1,
             "options": [{"value": v, "label": v} for v in ["BULK", "CONF", "SPEC", "VAR", "PREPACK"]]},
            {"field_key": "packaging.containerMaterial", "label": "Container Material", "type": "text",
             "order": 2, "visible_when": {"dependent_field_key": "packagingType", "values": ["BULK", "CONF"]}},
        ],
    },
    {
        "section_key": "pricing",
        "name": "Pricing Calculation",
        "order": 6,
        "fields": [
            {"field_key": "pricingData.baseUnit", "label": "Base Unit", "type": "select",
             "default_value": "g", "order": 1,
             "options": [{"value": v, "label": v} for v in ["mg", "g", "kg", "mL", "L", "units"]]},
            {"field_key": "pricingData.targetMargin", "label": "Target Margin (%)", "type": "number",
             "default_value": 50, "order": 2},
        ],
    },
]

DEFAULT_REQUIREMENTS = [
    "productName",
    "sbu",
    "chemicalProperties.casNumber",
    "vendorInformation.vendorName",
    "hazardClassification.signalWord",
]


def seed_default_template():
    """Create the default form configuration and default template if missing"""
    create_indexes()
    form_repo = FormConfigurationRepository()
    template_repo = TemplateRepository()
    
    existing = template_repo.get_default_template()
    if existing:
        print(f"Default template already exists: {existing.name} ({existing.template_id})")
        return
    
    form_configuration = form_repo.create_form_configuration(FormConfiguration(
        form_config_id=generate_form_config_id(),
        name="Product Ticket Form",
        sections=DEFAULT_SECTIONS,
    ))
    print(f"Created form configuration {form_configuration.form_config_id}")
    
    template = template_repo.create_template(TicketTemplate(
        template_id=generate_template_id(),
        name="Default",
        description="Default template for product introduction tickets",
        form_configuration_id=form_configuration.form_config_id,
        is_default=True,
        submission_requirements=list(DEFAULT_REQUIREMENTS),
    ))
    print(f"Created default template {template.template_id}")


if __name__ == "__main__":
    seed_default_template()
