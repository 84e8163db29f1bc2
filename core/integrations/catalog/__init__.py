"""
Catalogs - in-memory registries built once at engine startup

- IntegrationCatalog: external tools (overridable from persisted settings)
- WorkflowCatalog: multi-tool workflows keyed by derived name
- ExportTemplateCatalog: export templates, with tool-key discovery
- TutorialCatalog: built-in tutorials
"""

from .integrations import IntegrationCatalog
from .workflows import WorkflowCatalog, resolve_tool_name
from .templates import ExportTemplateCatalog
from .tutorials import TutorialCatalog

__all__ = [
    "IntegrationCatalog",
    "WorkflowCatalog",
    "resolve_tool_name",
    "ExportTemplateCatalog",
    "TutorialCatalog",
]
