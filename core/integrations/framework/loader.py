"""
Registry Loader - YAML-driven construction of the built-in catalogs

Reads config/integrations_registry.yaml (the single source of truth for
built-in integrations, workflows, export templates and tutorials) and turns
each section into validated records.

Unlike settings persistence, a broken registry is fatal: the engine has no
meaningful defaults without it, so every problem is raised as
CatalogConfigurationError at build time instead of surfacing at lookup time.

@.architecture
Incoming: config/integrations_registry.yaml, app.py, config/settings.py --- {Path registry_path, Dict YAML config}
Processing: load(), parse_integrations(), parse_workflows(), parse_export_template(), parse_tutorials() --- {4 jobs: yaml_parsing, record_validation, variant_selection, key_collision_detection}
Outgoing: core/integrations/catalog/*.py, core/integrations/engine.py --- {BuiltinRegistry with ordered integrations, workflows, templates, tutorials}
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .base import (
    CfgExportTemplate,
    CsvColumn,
    CsvExportTemplate,
    ExportFormat,
    ExportTemplateDefinition,
    GenericExportTemplate,
    IntegrationDescriptor,
    IntegrationMethod,
    IntegrationStatus,
    PythonScriptExportTemplate,
    Tutorial,
    WorkflowDefinition,
    WorkflowStep,
)
from .errors import CatalogConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PATH = Path(__file__).resolve().parents[3] / "config" / "integrations_registry.yaml"


@dataclass
class BuiltinRegistry:
    """Parsed content of the registry file, in declaration order"""
    integrations: Dict[str, IntegrationDescriptor] = field(default_factory=dict)
    workflows: List[WorkflowDefinition] = field(default_factory=list)
    export_templates: Dict[str, ExportTemplateDefinition] = field(default_factory=dict)
    tutorials: List[Tutorial] = field(default_factory=list)
    method_labels: Dict[str, str] = field(default_factory=dict)
    version: str = "1.0.0"


# ============================================================================
# SECTION PARSERS
# ============================================================================


def _string_tuple(value: Any, where: str) -> tuple:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise CatalogConfigurationError(f"{where}: expected a list, got {type(value).__name__}")
    return tuple(str(item) for item in value)


def _optional_string_tuple(value: Any, where: str) -> Optional[tuple]:
    if value is None:
        return None
    return _string_tuple(value, where)


_KNOWN_STATUSES = frozenset(status.value for status in IntegrationStatus)
_KNOWN_METHODS = frozenset(method.value for method in IntegrationMethod)


def _check_builtin_integration(key: str, descriptor: IntegrationDescriptor) -> None:
    """Built-ins must use a known status and known integration method tags"""
    if descriptor.status is not None and descriptor.status not in _KNOWN_STATUSES:
        raise CatalogConfigurationError(
            f"Integration {key!r} has unknown status {descriptor.status!r}"
        )

    unknown = [m for m in descriptor.integration_methods or [] if m not in _KNOWN_METHODS]
    if unknown:
        raise CatalogConfigurationError(
            f"Integration {key!r} has unknown integration methods: {', '.join(unknown)}"
        )


def parse_integrations(section: Any) -> Dict[str, IntegrationDescriptor]:
    """Parse the ``integrations`` mapping (key -> descriptor record)"""
    if not isinstance(section, dict):
        raise CatalogConfigurationError("'integrations' must be a mapping of key -> record")

    integrations: Dict[str, IntegrationDescriptor] = {}
    for key, record in section.items():
        if not isinstance(record, dict):
            raise CatalogConfigurationError(f"Integration {key!r} must be a mapping")
        descriptor = IntegrationDescriptor.from_record(record)
        _check_builtin_integration(str(key), descriptor)
        integrations[str(key)] = descriptor
    return integrations


def parse_workflow(record: Any) -> WorkflowDefinition:
    """Parse one workflow record; steps must be non-empty"""
    if not isinstance(record, dict) or "name" not in record:
        raise CatalogConfigurationError(f"Workflow record must be a mapping with a name: {record!r}")

    name = str(record["name"])
    raw_steps = record.get("steps") or []
    if not isinstance(raw_steps, list) or not raw_steps:
        raise CatalogConfigurationError(f"Workflow {name!r} must declare at least one step")

    steps = []
    for index, raw in enumerate(raw_steps, start=1):
        where = f"Workflow {name!r} step {index}"
        if not isinstance(raw, dict) or not raw.get("tool") or not raw.get("action"):
            raise CatalogConfigurationError(f"{where}: 'tool' and 'action' are required")
        steps.append(
            WorkflowStep(
                tool=str(raw["tool"]),
                action=str(raw["action"]),
                description=str(raw.get("description", "")),
                inputs=_string_tuple(raw.get("inputs"), f"{where} inputs"),
                outputs=_string_tuple(raw.get("outputs"), f"{where} outputs"),
            )
        )

    return WorkflowDefinition(
        name=name,
        description=str(record.get("description", "")),
        steps=tuple(steps),
        benefits=_string_tuple(record.get("benefits"), f"Workflow {name!r} benefits"),
    )


def parse_workflows(section: Any) -> List[WorkflowDefinition]:
    if section is None:
        return []
    if not isinstance(section, list):
        raise CatalogConfigurationError("'workflows' must be a list")
    return [parse_workflow(record) for record in section]


def _parse_columns(key: str, raw_columns: Any) -> Optional[tuple]:
    if raw_columns is None:
        return None
    if not isinstance(raw_columns, list):
        raise CatalogConfigurationError(f"Template {key!r}: 'columns' must be a list")

    columns = []
    for raw in raw_columns:
        if not isinstance(raw, dict) or not raw.get("name"):
            raise CatalogConfigurationError(f"Template {key!r}: every column needs a name")
        columns.append(
            CsvColumn(
                name=str(raw["name"]),
                type=str(raw.get("type", "")),
                description=str(raw.get("description", "")),
            )
        )
    return tuple(columns)


def parse_export_template(key: str, record: Any) -> ExportTemplateDefinition:
    """
    Build the variant matching the record's ``format``.

    Formats without a dedicated renderer become GenericExportTemplate with the
    remaining fields kept verbatim as payload.
    """
    if not isinstance(record, dict):
        raise CatalogConfigurationError(f"Template {key!r} must be a mapping")

    data = dict(record)
    name = str(data.pop("name", key))
    description = str(data.pop("description", ""))
    format_tag = str(data.pop("format", ""))

    if format_tag == ExportFormat.CSV.value:
        columns = _parse_columns(key, data.pop("columns", None))
        return CsvExportTemplate(
            key=key, name=name, description=description, extras=data, columns=columns
        )

    if format_tag == ExportFormat.PYTHON_SCRIPT.value:
        components = _optional_string_tuple(data.pop("components", None), f"Template {key!r} components")
        return PythonScriptExportTemplate(
            key=key, name=name, description=description, extras=data, components=components
        )

    if format_tag == ExportFormat.CFG.value:
        entities = _optional_string_tuple(data.pop("entities", None), f"Template {key!r} entities")
        parameters = _optional_string_tuple(data.pop("parameters", None), f"Template {key!r} parameters")
        return CfgExportTemplate(
            key=key,
            name=name,
            description=description,
            extras=data,
            entities=entities,
            parameters=parameters,
        )

    logger.debug(f"Template {key!r} has format {format_tag!r}; using structured dump")
    return GenericExportTemplate(
        key=key, name=name, description=description, format_tag=format_tag, payload=data
    )


def parse_export_templates(section: Any) -> Dict[str, ExportTemplateDefinition]:
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise CatalogConfigurationError("'export_templates' must be a mapping of key -> record")
    return {str(key): parse_export_template(str(key), record) for key, record in section.items()}


def parse_tutorials(section: Any) -> List[Tutorial]:
    if section is None:
        return []
    if not isinstance(section, list):
        raise CatalogConfigurationError("'tutorials' must be a list")

    tutorials = []
    for raw in section:
        if not isinstance(raw, dict) or not raw.get("action"):
            raise CatalogConfigurationError(f"Tutorial record needs an action: {raw!r}")
        tutorials.append(
            Tutorial(
                title=str(raw.get("title", "")),
                description=str(raw.get("description", "")),
                level=str(raw.get("level", "")),
                duration=str(raw.get("duration", "")),
                action=str(raw["action"]),
            )
        )
    return tutorials


# ============================================================================
# LOADER
# ============================================================================


class RegistryLoader:
    """YAML-driven loader for the built-in catalog registry"""

    def __init__(self, registry_path: Optional[Path] = None):
        """
        Initialize registry loader

        Args:
            registry_path: Registry YAML file (defaults to config/integrations_registry.yaml)
        """
        self.registry_path = Path(registry_path) if registry_path else DEFAULT_REGISTRY_PATH

    def _read_registry(self) -> Dict[str, Any]:
        if not self.registry_path.exists():
            raise CatalogConfigurationError(f"Registry not found: {self.registry_path}")

        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                registry = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CatalogConfigurationError(f"Failed to read registry {self.registry_path}: {e}") from e

        if not isinstance(registry, dict):
            raise CatalogConfigurationError(f"Registry {self.registry_path} must be a mapping")

        logger.info(f"Loaded integration registry: {self.registry_path}")
        return registry

    def load(self) -> BuiltinRegistry:
        """
        Parse every registry section.

        Returns:
            BuiltinRegistry with records in declaration order

        Raises:
            CatalogConfigurationError: If the file or any record is invalid
        """
        registry = self._read_registry()
        return self.parse(registry)

    @staticmethod
    def parse(registry: Dict[str, Any]) -> BuiltinRegistry:
        """Parse an already-loaded registry mapping"""
        method_labels = registry.get("integration_methods") or {}
        if not isinstance(method_labels, dict):
            raise CatalogConfigurationError("'integration_methods' must be a mapping of tag -> label")

        return BuiltinRegistry(
            integrations=parse_integrations(registry.get("integrations") or {}),
            workflows=parse_workflows(registry.get("workflows")),
            export_templates=parse_export_templates(registry.get("export_templates")),
            tutorials=parse_tutorials(registry.get("tutorials")),
            method_labels={str(k): str(v) for k, v in method_labels.items()},
            version=str(registry.get("version", "1.0.0")),
        )
