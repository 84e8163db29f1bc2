"""
Integration Framework - data model, errors and registry loading

Components:
    - base.py: IntegrationDescriptor, workflow records, export template variants, RenderedArtifact
    - errors.py: IntegrationEngineError hierarchy
    - loader.py: RegistryLoader - YAML-driven construction of the built-in catalogs

Usage:
    from core.integrations.framework import RegistryLoader

    registry = RegistryLoader().load()
"""

from .base import (
    EPQS_TOOL_KEY,
    IntegrationStatus,
    IntegrationMethod,
    ExportFormat,
    ColumnType,
    IntegrationDescriptor,
    WorkflowStep,
    WorkflowDefinition,
    derive_workflow_key,
    CsvColumn,
    ExportTemplate,
    CsvExportTemplate,
    PythonScriptExportTemplate,
    CfgExportTemplate,
    GenericExportTemplate,
    ExportTemplateDefinition,
    TEMPLATE_VARIANTS,
    RenderedArtifact,
    Tutorial,
    ToolGuide,
    WorkflowGuide,
    WorkflowGuideStep,
)

from .errors import (
    IntegrationEngineError,
    CatalogConfigurationError,
    WorkflowKeyCollisionError,
    TemplateNotFoundError,
    SettingsPersistenceError,
)

from .loader import BuiltinRegistry, RegistryLoader


__all__ = [
    # Enums and constants
    "EPQS_TOOL_KEY",
    "IntegrationStatus",
    "IntegrationMethod",
    "ExportFormat",
    "ColumnType",

    # Records
    "IntegrationDescriptor",
    "WorkflowStep",
    "WorkflowDefinition",
    "derive_workflow_key",
    "CsvColumn",
    "ExportTemplate",
    "CsvExportTemplate",
    "PythonScriptExportTemplate",
    "CfgExportTemplate",
    "GenericExportTemplate",
    "ExportTemplateDefinition",
    "TEMPLATE_VARIANTS",
    "RenderedArtifact",
    "Tutorial",
    "ToolGuide",
    "WorkflowGuide",
    "WorkflowGuideStep",

    # Errors
    "IntegrationEngineError",
    "CatalogConfigurationError",
    "WorkflowKeyCollisionError",
    "TemplateNotFoundError",
    "SettingsPersistenceError",

    # Loader
    "BuiltinRegistry",
    "RegistryLoader",
]
