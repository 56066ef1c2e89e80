"""Builders for form configurations and templates used across tests"""
from npdi.domain.models import FormConfiguration, TicketTemplate


LEGACY_PREFIXES = ["pricingData", "chemicalProperties", "vendorInformation"]


def build_form_configuration(form_config_id: str = "FC-main", **overrides) -> FormConfiguration:
    """Small product form with each kind of visibility rule, in authoring-UI (camelCase) shape"""
    doc = {
        "formConfigId": form_config_id,
        "name": "Product Ticket Form",
        "sections": [
            {
                "sectionKey": "basic",
                "name": "Basic Information",
                "order": 1,
                "fields": [
                    {"fieldKey": "productName", "label": "Product Name", "order": 1},
                    {"fieldKey": "productionType", "label": "Production Type", "type": "radio",
                     "defaultValue": "Produced", "order": 2},
                    {"fieldKey": "internalNotes", "label": "Internal Notes", "visible": False, "order": 3},
                ],
            },
            {
                "sectionKey": "chemical",
                "name": "Chemical Properties",
                "order": 2,
                "fields": [
                    {"fieldKey": "chemicalProperties.casNumber", "label": "CAS Number", "order": 1},
                    {"fieldKey": "chemicalProperties.isHazardous", "label": "Hazardous", "type": "checkbox",
                     "defaultValue": False, "order": 2},
                    {"fieldKey": "hazardClassification.signalWord", "label": "Signal Word", "order": 3,
                     "visibleWhen": {"fieldKey": "chemicalProperties.isHazardous", "value": "true"}},
                ],
            },
            {
                "sectionKey": "vendor",
                "name": "Vendor Information",
                "order": 3,
                "fields": [
                    {"fieldKey": "vendorInformation.vendorName", "label": "Vendor Name", "order": 1,
                     "visibleWhen": {"dependentFieldKey": "productionType", "value": "Procured"}},
                ],
            },
            {
                "sectionKey": "packaging",
                "name": "Packaging",
                "order": 4,
                "fields": [
                    {"fieldKey": "packaging.type", "label": "Packaging Type", "type": "select", "order": 1},
                    {"fieldKey": "packaging.containerMaterial", "label": "Container Material", "order": 2,
                     "visibleWhen": {"dependentFieldKey": "packaging.type", "values": ["BULK", "CONF"]}},
                ],
            },
            {
                "sectionKey": "legacy",
                "name": "Legacy",
                "order": 5,
                "visible": False,
                "fields": [
                    {"fieldKey": "legacy.code", "label": "Legacy Code"},
                ],
            },
        ],
    }
    doc.update(overrides)
    return FormConfiguration.model_validate(doc)


def build_template(
    template_id: str = "TPL-main",
    requirements=None,
    form_config_id: str = "FC-main",
    **overrides
) -> TicketTemplate:
    fields = {
        "template_id": template_id,
        "name": f"Template {template_id}",
        "form_configuration_id": form_config_id,
        "submission_requirements": list(requirements or []),
    }
    fields.update(overrides)
    return TicketTemplate(**fields)
