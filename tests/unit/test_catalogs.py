"""
Unit Tests: Catalogs

Tests for the integration, workflow, export template and tutorial catalogs.
"""

import pytest

from core.integrations.catalog import (
    ExportTemplateCatalog,
    IntegrationCatalog,
    TutorialCatalog,
    WorkflowCatalog,
    resolve_tool_name,
)
from core.integrations.framework import (
    CatalogConfigurationError,
    IntegrationDescriptor,
    WorkflowDefinition,
    WorkflowKeyCollisionError,
    WorkflowStep,
    derive_workflow_key,
)


def make_workflow(name: str, *tools: str) -> WorkflowDefinition:
    steps = tuple(WorkflowStep(tool=tool, action=f"step_{i}") for i, tool in enumerate(tools or ("epqs",)))
    return WorkflowDefinition(name=name, description="", steps=steps)


# =============================================================================
# Integration Catalog
# =============================================================================

@pytest.mark.unit
class TestIntegrationCatalog:
    """Test integration lookups and overrides."""

    @pytest.fixture
    def catalog(self, registry):
        return IntegrationCatalog(registry.integrations)

    def test_builtins_in_order(self, catalog):
        assert catalog.keys() == ["jamovi", "freecad", "jaamsim"]
        assert len(catalog) == 3
        assert "jamovi" in catalog

    def test_get(self, catalog):
        jamovi = catalog.get("jamovi")

        assert jamovi.name == "Jamovi"
        assert jamovi.download_url == "https://jamovi.org/download.html"
        assert jamovi.data_formats == ["csv", "xlsx", "sav", "ods"]
        assert jamovi.is_available

    def test_get_missing(self, catalog):
        assert catalog.get("minitab") is None

    def test_override_replaces_whole_record(self, catalog):
        applied = catalog.apply_overrides({"jamovi": {"name": "X"}})

        jamovi = catalog.get("jamovi")
        assert applied == ["jamovi"]
        assert jamovi.name == "X"
        assert jamovi.download_url is None
        assert jamovi.capabilities is None
        assert jamovi.to_record() == {"name": "X"}
        assert catalog.get("freecad").name == "FreeCAD"

    def test_override_inserts_new_key_last(self, catalog):
        catalog.apply_overrides({"minitab": {"name": "Minitab", "status": "unavailable"}})

        assert catalog.keys()[-1] == "minitab"
        assert catalog.get("minitab").is_available is False

    def test_override_keeps_position_of_existing_key(self, catalog):
        catalog.apply_overrides({"jaamsim": {"name": "J"}, "jamovi": {"name": "K"}})

        assert catalog.keys() == ["jamovi", "freecad", "jaamsim"]

    def test_non_mapping_records_skipped(self, catalog):
        applied = catalog.apply_overrides({
            "jamovi": "not a record",
            "freecad": {"status": "broken"},
            "jaamsim": {"name": "JaamSim 2"},
        })

        assert applied == ["freecad", "jaamsim"]
        assert catalog.get("jamovi").name == "Jamovi"
        assert catalog.get("freecad").status == "broken"
        assert catalog.get("freecad").name is None

    def test_loosely_typed_records_applied(self, catalog):
        applied = catalog.apply_overrides({
            "jamovi": {"name": "J", "version": 3},
            "freecad": {"status": "beta", "dataFormats": "step"},
        })

        assert applied == ["jamovi", "freecad"]
        assert catalog.get("jamovi").version == "3"
        assert catalog.get("jamovi").to_record() == {"name": "J", "version": "3"}
        assert catalog.get("freecad").status == "beta"
        assert catalog.get("freecad").is_available is False
        assert catalog.get("freecad").data_formats == ["step"]

    def test_unknown_fields_preserved(self, catalog):
        catalog.apply_overrides({"jamovi": {"name": "X", "installPath": "/opt/jamovi"}})

        assert catalog.snapshot()["jamovi"] == {"name": "X", "installPath": "/opt/jamovi"}

    def test_snapshot_uses_persisted_field_names(self, catalog):
        record = catalog.snapshot()["freecad"]

        assert record["downloadUrl"] == "https://freecad.org/downloads.php"
        assert record["integrationMethods"] == ["export", "python_api", "macro"]
        assert record["status"] == "available"
        assert "download_url" not in record


# =============================================================================
# Workflow Catalog
# =============================================================================

@pytest.mark.unit
class TestWorkflowCatalog:
    """Test workflow key derivation and build-time validation."""

    @pytest.mark.parametrize("name,expected", [
        ("Fluxo Digital Twin", "fluxo_digital_twin"),
        ("Fluxo de Análise de Qualidade", "fluxo_de_análise_de_qualidade"),
        ("  Fluxo\tde   Design ", "_fluxo_de_design_"),
    ])
    def test_derive_workflow_key(self, name, expected):
        assert derive_workflow_key(name) == expected

    def test_builtins(self, registry):
        catalog = WorkflowCatalog(registry.workflows, known_tools=["jamovi", "freecad", "jaamsim"])

        assert catalog.keys() == [
            "fluxo_digital_twin",
            "fluxo_de_análise_de_qualidade",
            "fluxo_de_design_de_processo",
        ]
        digital_twin = catalog.get("fluxo_digital_twin")
        assert [step.tool for step in digital_twin.steps] == ["freecad", "jaamsim", "jamovi"]

    def test_get_missing(self, registry):
        assert WorkflowCatalog(registry.workflows).get("fluxo_inexistente") is None

    def test_key_collision_raises(self):
        with pytest.raises(WorkflowKeyCollisionError) as exc_info:
            WorkflowCatalog([make_workflow("Fluxo A"), make_workflow("fluxo  a")])

        assert exc_info.value.key == "fluxo_a"
        assert exc_info.value.first_name == "Fluxo A"

    def test_unknown_tool_raises(self):
        with pytest.raises(CatalogConfigurationError):
            WorkflowCatalog([make_workflow("Fluxo", "minitab")], known_tools=["jamovi"])

    def test_epqs_always_allowed(self):
        catalog = WorkflowCatalog([make_workflow("Fluxo", "epqs", "jamovi")], known_tools=["jamovi"])

        assert len(catalog) == 1

    def test_empty_steps_rejected(self):
        with pytest.raises(ValueError):
            WorkflowDefinition(name="Vazio", description="", steps=())

    def test_resolve_tool_name(self, registry):
        integrations = IntegrationCatalog(registry.integrations)

        assert resolve_tool_name(WorkflowStep("freecad", "x"), integrations) == "FreeCAD"
        assert resolve_tool_name(WorkflowStep("epqs", "x"), integrations) == "EPQS"
        assert resolve_tool_name(WorkflowStep("minitab", "x"), integrations) == "MINITAB"

    def test_resolve_tool_name_after_nameless_override(self, registry):
        integrations = IntegrationCatalog(registry.integrations)
        integrations.apply_overrides({"jamovi": IntegrationDescriptor(status="available")})

        assert resolve_tool_name(WorkflowStep("jamovi", "x"), integrations) == "JAMOVI"


# =============================================================================
# Export Template Catalog
# =============================================================================

@pytest.mark.unit
class TestExportTemplateCatalog:
    """Test template lookup and tool association."""

    @pytest.fixture
    def catalog(self, registry):
        return ExportTemplateCatalog(registry.export_templates)

    def test_builtins(self, catalog):
        assert catalog.keys() == ["jamovi_cep", "jamovi_quality", "freecad_layout", "jaamsim_process"]
        assert catalog.get("jamovi_cep").format == "csv"
        assert catalog.get("freecad_layout").format == "python_script"
        assert catalog.get("jaamsim_process").format == "cfg"

    def test_get_missing(self, catalog):
        assert catalog.get("minitab_export") is None

    def test_find_by_tool_key(self, catalog):
        assert [key for key, _ in catalog.find_by_tool_key("jamovi")] == ["jamovi_cep", "jamovi_quality"]
        assert [key for key, _ in catalog.find_by_tool_key("freecad")] == ["freecad_layout"]
        assert catalog.find_by_tool_key("minitab") == []

    def test_find_by_tool_key_is_substring_match(self, catalog):
        assert [key for key, _ in catalog.find_by_tool_key("cep")] == ["jamovi_cep"]
        assert len(catalog.find_by_tool_key("")) == 4

    def test_extras_kept(self, catalog):
        data = catalog.get("jamovi_cep").to_dict()

        assert data["jamoviAnalysis"][0] == "Descriptives → Descriptive Statistics"
        assert "freecadWorkbenches" in catalog.get("freecad_layout").to_dict()


# =============================================================================
# Tutorial Catalog
# =============================================================================

@pytest.mark.unit
class TestTutorialCatalog:

    def test_builtins(self, registry):
        catalog = TutorialCatalog(registry.tutorials)

        assert len(catalog) == 4
        assert [t.action for t in catalog.list()] == [
            "showJamoviTutorial",
            "showFreeCADTutorial",
            "showJaamSimTutorial",
            "showDigitalTwinTutorial",
        ]
        assert catalog.get("showJaamSimTutorial").duration == "45 min"
        assert catalog.get("showMinitabTutorial") is None
