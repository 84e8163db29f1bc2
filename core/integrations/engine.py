"""
Integration Engine - facade over catalogs, renderer and settings persistence

Owns the integration, workflow, export template and tutorial catalogs plus
the SettingsStore, and exposes read-only lookups and rendering to the
presentation layer. All results are structured records or rendered text;
the engine never builds markup.

Startup sequence (fixed order, runs once in the constructor):
    1. IntegrationCatalog from built-ins
    2. WorkflowCatalog (step tools checked against built-in integration keys)
    3. ExportTemplateCatalog
    4. SettingsStore.load()
    5. IntegrationCatalog.apply_overrides(loaded)

Usage:
    from app import create_engine

    engine = create_engine()
    artifact = engine.render("jamovi_cep")
    if artifact is not None:
        deliver(artifact.filename, artifact.content, artifact.media_type)

@.architecture
Incoming: app.py, main.py, presentation layer --- {BuiltinRegistry, SettingsStore, str tool/workflow/template keys}
Processing: get_integration(), list_workflows(), export_candidates_for(), render(), tool_guide(), workflow_guide(), save_settings() --- {5 jobs: startup_orchestration, lookup, template_discovery, rendering, settings_persistence}
Outgoing: presentation layer, main.py --- {IntegrationDescriptor, WorkflowDefinition, ExportTemplateDefinition, RenderedArtifact, ToolGuide, WorkflowGuide, Tutorial, None for not-found}
"""

import logging
from typing import Dict, List, Optional, Tuple

from data.storage.keyvalue import MemoryKeyValueStore
from data.storage.settings_store import SettingsStore
from monitoring.logging import operation_context

from .catalog import (
    ExportTemplateCatalog,
    IntegrationCatalog,
    TutorialCatalog,
    WorkflowCatalog,
    resolve_tool_name,
)
from .export import TemplateRenderer
from .framework.base import (
    ExportTemplateDefinition,
    IntegrationDescriptor,
    IntegrationStatus,
    RenderedArtifact,
    ToolGuide,
    Tutorial,
    WorkflowDefinition,
    WorkflowGuide,
    WorkflowGuideStep,
)
from .framework.errors import TemplateNotFoundError
from .framework.loader import BuiltinRegistry

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    IntegrationStatus.AVAILABLE.value: "Disponível",
    IntegrationStatus.UNAVAILABLE.value: "Indisponível",
}

# Capabilities shown on a tool card
HIGHLIGHT_COUNT = 3


class IntegrationEngine:
    """Facade consumed by the presentation layer"""

    def __init__(
        self,
        registry: BuiltinRegistry,
        settings_store: Optional[SettingsStore] = None,
        renderer: Optional[TemplateRenderer] = None,
    ):
        """
        Build every catalog and apply persisted overrides.

        Args:
            registry: Parsed built-in registry
            settings_store: Override persistence (defaults to an in-memory slot)
            renderer: Template renderer (defaults to TemplateRenderer())

        Raises:
            CatalogConfigurationError: If the built-in workflows are inconsistent
        """
        with operation_context("startup"):
            self._integrations = IntegrationCatalog(registry.integrations)
            self._workflows = WorkflowCatalog(
                registry.workflows, known_tools=self._integrations.keys()
            )
            self._templates = ExportTemplateCatalog(registry.export_templates)
            self._tutorials = TutorialCatalog(registry.tutorials)
            self._method_labels: Dict[str, str] = dict(registry.method_labels)
            self._renderer = renderer or TemplateRenderer()
            self.settings_store = settings_store or SettingsStore(MemoryKeyValueStore())

            overrides = self.settings_store.load()
            self._integrations.apply_overrides(overrides)

            logger.info(
                f"Integration engine ready: {len(self._integrations)} integrations, "
                f"{len(self._workflows)} workflows, {len(self._templates)} export templates"
            )

    # ========================================================================
    # INTEGRATIONS
    # ========================================================================

    def get_integration(self, key: str) -> Optional[IntegrationDescriptor]:
        return self._integrations.get(key)

    def list_integrations(self) -> List[Tuple[str, IntegrationDescriptor]]:
        return self._integrations.list()

    def download_url_for(self, tool_key: str) -> Optional[str]:
        """Download URL of a tool, None when unknown or not set"""
        descriptor = self._integrations.get(tool_key)
        if descriptor is None:
            return None
        return descriptor.download_url

    def method_label(self, method: str) -> str:
        """Human label for an integration method tag; unknown tags display as-is"""
        return self._method_labels.get(method, method)

    def status_label(self, status: Optional[str]) -> str:
        return STATUS_LABELS.get(status or "", STATUS_LABELS[IntegrationStatus.UNAVAILABLE.value])

    def tool_guide(self, tool_key: str) -> Optional[ToolGuide]:
        """
        Structured integration guide for a tool.

        Fields missing from an overridden record come back empty.
        """
        descriptor = self._integrations.get(tool_key)
        if descriptor is None:
            return None

        status = descriptor.status or ""
        capabilities = list(descriptor.capabilities or [])
        return ToolGuide(
            key=tool_key,
            name=descriptor.name or tool_key,
            description=descriptor.description or "",
            version=descriptor.version or "",
            website=descriptor.website or "",
            download_url=descriptor.download_url,
            status=status,
            status_label=self.status_label(status),
            highlights=capabilities[:HIGHLIGHT_COUNT],
            capabilities=capabilities,
            data_formats=[f".{fmt}" for fmt in descriptor.data_formats or []],
            integration_methods=[self.method_label(m) for m in descriptor.integration_methods or []],
        )

    def save_settings(self) -> bool:
        """Persist the full current integration catalog (best-effort)"""
        return self.settings_store.save(self._integrations.snapshot())

    # ========================================================================
    # WORKFLOWS
    # ========================================================================

    def get_workflow(self, key: str) -> Optional[WorkflowDefinition]:
        return self._workflows.get(key)

    def list_workflows(self) -> List[Tuple[str, WorkflowDefinition]]:
        return self._workflows.list()

    def workflow_guide(self, key: str) -> Optional[WorkflowGuide]:
        """Workflow with numbered steps and resolved tool names"""
        workflow = self._workflows.get(key)
        if workflow is None:
            return None

        steps = [
            WorkflowGuideStep(
                number=index,
                tool=step.tool,
                tool_name=resolve_tool_name(step, self._integrations),
                action=step.action,
                description=step.description,
                inputs=list(step.inputs),
                outputs=list(step.outputs),
            )
            for index, step in enumerate(workflow.steps, start=1)
        ]
        return WorkflowGuide(
            key=key,
            name=workflow.name,
            description=workflow.description,
            steps=steps,
            benefits=list(workflow.benefits),
        )

    # ========================================================================
    # EXPORT TEMPLATES
    # ========================================================================

    def get_export_template(self, key: str) -> Optional[ExportTemplateDefinition]:
        return self._templates.get(key)

    def list_export_templates(self) -> List[Tuple[str, ExportTemplateDefinition]]:
        return self._templates.list()

    def export_candidates_for(self, tool_key: str) -> List[Tuple[str, ExportTemplateDefinition]]:
        return self._templates.find_by_tool_key(tool_key)

    def render(self, template_key: str) -> Optional[RenderedArtifact]:
        """
        Render an export template.

        Returns:
            RenderedArtifact, or None if no template has this key
        """
        with operation_context("render", template_key):
            template = self._templates.get(template_key)
            if template is None:
                logger.info(f"Export template not found: {template_key!r}")
                return None

            artifact = self._renderer.render(template)
            logger.info(f"Rendered export template {template_key!r} -> {artifact.filename}")
            return artifact

    def render_or_raise(self, template_key: str) -> RenderedArtifact:
        """
        Strict variant of render().

        Raises:
            TemplateNotFoundError: If no template has this key
        """
        artifact = self.render(template_key)
        if artifact is None:
            raise TemplateNotFoundError(template_key)
        return artifact

    # ========================================================================
    # TUTORIALS
    # ========================================================================

    def list_tutorials(self) -> List[Tutorial]:
        return self._tutorials.list()

    def get_tutorial(self, action: str) -> Optional[Tutorial]:
        return self._tutorials.get(action)
