"""
Base Integration Types - Data model for the EPQS integration engine

Provides the records held by the catalogs and produced by the renderer:
- IntegrationDescriptor: external tool metadata (overridable from settings)
- WorkflowStep / WorkflowDefinition: multi-tool workflow descriptions
- Export template variants: one dataclass per output format
- RenderedArtifact: content + filename + media type handed to the caller
- Tutorial, ToolGuide, WorkflowGuide: structured display records

@.architecture
Incoming: core/integrations/framework/loader.py, data/storage/settings_store.py, core/integrations/catalog/*.py --- {Dict registry records, Dict persisted override records}
Processing: IntegrationDescriptor.from_record(), to_record(), derive_workflow_key(), ExportTemplate.to_dict() --- {3 jobs: record_validation, key_derivation, serialization}
Outgoing: core/integrations/catalog/*.py, core/integrations/export/renderer.py, core/integrations/engine.py --- {IntegrationDescriptor, WorkflowDefinition, ExportTemplateDefinition variants, RenderedArtifact}
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Sentinel tool key meaning "the host application itself"
EPQS_TOOL_KEY = "epqs"

_WHITESPACE_RUN = re.compile(r"\s+")


# ============================================================================
# ENUMS
# ============================================================================


class IntegrationStatus(str, Enum):
    """Availability of an external tool"""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class IntegrationMethod(str, Enum):
    """How EPQS exchanges data with a tool"""
    EXPORT = "export"
    IMPORT = "import"
    API = "api"
    PYTHON_API = "python_api"
    MACRO = "macro"
    BATCH_PROCESSING = "batch_processing"
    CONFIG_FILES = "config_files"


class ExportFormat(str, Enum):
    """Export template formats with a dedicated renderer"""
    CSV = "csv"
    PYTHON_SCRIPT = "python_script"
    CFG = "cfg"


class ColumnType(str, Enum):
    """Declared type of a csv template column"""
    INTEGER = "integer"
    NUMERIC = "numeric"
    DATETIME = "datetime"
    DATE = "date"
    FACTOR = "factor"


# ============================================================================
# INTEGRATIONS
# ============================================================================


class IntegrationDescriptor(BaseModel):
    """
    Metadata for one external tool.

    Every field is optional: a persisted override replaces the whole record,
    so an override of ``{"name": "X"}`` yields a descriptor carrying only a
    name. Field aliases match the persisted blob (``downloadUrl``,
    ``dataFormats``, ``integrationMethods``); unknown fields are preserved.

    Validation is lenient so that any mapping is accepted as a record:
    scalar fields are coerced to text, list fields to lists of text, and
    ``status`` is kept as a free string. Built-in records are checked
    against IntegrationStatus and IntegrationMethod by the registry loader.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    website: Optional[str] = None
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")
    status: Optional[str] = None
    data_formats: Optional[List[str]] = Field(default=None, alias="dataFormats")
    capabilities: Optional[List[str]] = None
    integration_methods: Optional[List[str]] = Field(default=None, alias="integrationMethods")

    @field_validator("name", "description", "version", "website", "download_url", "status", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("data_formats", "capabilities", "integration_methods", mode="before")
    @classmethod
    def coerce_text_list(cls, v: Any) -> Optional[List[str]]:
        if v is None:
            return None
        if isinstance(v, (list, tuple)):
            return [item if isinstance(item, str) else str(item) for item in v]
        return [v if isinstance(v, str) else str(v)]

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "IntegrationDescriptor":
        """Build a descriptor from a registry or persisted record"""
        return cls.model_validate(record)

    def to_record(self) -> Dict[str, Any]:
        """Serialize exactly the fields this record was built with"""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @property
    def is_available(self) -> bool:
        return self.status == IntegrationStatus.AVAILABLE.value


# ============================================================================
# WORKFLOWS
# ============================================================================


def derive_workflow_key(name: str) -> str:
    """Lower-case the name and replace each whitespace run with an underscore"""
    return _WHITESPACE_RUN.sub("_", name.lower())


@dataclass(frozen=True)
class WorkflowStep:
    """One stage of a workflow; descriptive metadata only"""
    tool: str
    action: str
    description: str = ""
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tool": self.tool,
            "action": self.action,
            "description": self.description,
            "inputs": list(self.inputs),
            "outputs": list(self.outputs),
        }


@dataclass(frozen=True)
class WorkflowDefinition:
    """Ordered multi-tool workflow. Steps keep their reading order."""
    name: str
    description: str
    steps: Tuple[WorkflowStep, ...]
    benefits: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.steps:
            raise ValueError(f"Workflow {self.name!r} must have at least one step")

    @property
    def key(self) -> str:
        return derive_workflow_key(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "steps": [step.to_dict() for step in self.steps],
            "benefits": list(self.benefits),
        }


# ============================================================================
# EXPORT TEMPLATES
# ============================================================================


@dataclass(frozen=True)
class CsvColumn:
    """csv template column; ``type`` outside ColumnType is allowed"""
    name: str
    type: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "description": self.description}


@dataclass(frozen=True)
class ExportTemplate:
    """
    Fields shared by every export template variant.

    ``extras`` holds descriptive payload that no renderer consumes
    (e.g. ``jamoviAnalysis``); it is kept for the structured dump.
    """
    key: str
    name: str
    description: str
    extras: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    FORMAT: ClassVar[Optional[ExportFormat]] = None

    @property
    def format(self) -> str:
        return self.FORMAT.value if self.FORMAT else ""

    def _payload(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Template definition in registry shape (without the catalog key)"""
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "format": self.format,
        }
        data.update(self._payload())
        data.update(self.extras)
        return data


@dataclass(frozen=True)
class CsvExportTemplate(ExportTemplate):
    columns: Optional[Tuple[CsvColumn, ...]] = None

    FORMAT: ClassVar[Optional[ExportFormat]] = ExportFormat.CSV

    def _payload(self) -> Dict[str, Any]:
        if self.columns is None:
            return {}
        return {"columns": [column.to_dict() for column in self.columns]}


@dataclass(frozen=True)
class PythonScriptExportTemplate(ExportTemplate):
    components: Optional[Tuple[str, ...]] = None

    FORMAT: ClassVar[Optional[ExportFormat]] = ExportFormat.PYTHON_SCRIPT

    def _payload(self) -> Dict[str, Any]:
        if self.components is None:
            return {}
        return {"components": list(self.components)}


@dataclass(frozen=True)
class CfgExportTemplate(ExportTemplate):
    entities: Optional[Tuple[str, ...]] = None
    parameters: Optional[Tuple[str, ...]] = None

    FORMAT: ClassVar[Optional[ExportFormat]] = ExportFormat.CFG

    def _payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.entities is not None:
            payload["entities"] = list(self.entities)
        if self.parameters is not None:
            payload["parameters"] = list(self.parameters)
        return payload


@dataclass(frozen=True)
class GenericExportTemplate(ExportTemplate):
    """Template whose format has no dedicated renderer; payload kept verbatim"""
    format_tag: str = ""
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def format(self) -> str:
        return self.format_tag

    def _payload(self) -> Dict[str, Any]:
        return dict(self.payload)


ExportTemplateDefinition = Union[
    CsvExportTemplate,
    PythonScriptExportTemplate,
    CfgExportTemplate,
    GenericExportTemplate,
]

TEMPLATE_VARIANTS: Tuple[type, ...] = (
    CsvExportTemplate,
    PythonScriptExportTemplate,
    CfgExportTemplate,
    GenericExportTemplate,
)


@dataclass(frozen=True)
class RenderedArtifact:
    """Rendered export file, produced fresh on every render call"""
    content: str
    filename: str
    media_type: str

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "filename": self.filename,
            "media_type": self.media_type,
        }


# ============================================================================
# DISPLAY RECORDS
# ============================================================================


@dataclass(frozen=True)
class Tutorial:
    """Built-in tutorial entry"""
    title: str
    description: str
    level: str
    duration: str
    action: str


@dataclass
class ToolGuide:
    """Structured integration guide for one tool"""
    key: str
    name: str
    description: str
    version: str
    website: str
    download_url: Optional[str]
    status: str
    status_label: str
    highlights: List[str] = field(default_factory=list)
    capabilities: List[str] = field(default_factory=list)
    data_formats: List[str] = field(default_factory=list)
    integration_methods: List[str] = field(default_factory=list)


@dataclass
class WorkflowGuideStep:
    number: int
    tool: str
    tool_name: str
    action: str
    description: str
    inputs: List[str] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)


@dataclass
class WorkflowGuide:
    """Structured, display-ready view of a workflow"""
    key: str
    name: str
    description: str
    steps: List[WorkflowGuideStep] = field(default_factory=list)
    benefits: List[str] = field(default_factory=list)

    @property
    def step_count(self) -> int:
        return len(self.steps)
