"""
Export Template Renderer

Turns an export template into a downloadable seed file:
- csv: header row + one sample row + two comment lines
- python_script: FreeCAD layout script skeleton
- cfg: JaamSim model configuration block
- any other format: indented JSON dump of the whole definition

Rendering is pure and deterministic: the same template always yields a
byte-identical artifact, and templates are never mutated.

@.architecture
Incoming: core/integrations/engine.py, main.py --- {ExportTemplateDefinition variants}
Processing: render(), generate_csv(), generate_python_script(), generate_cfg(), generate_structured_dump() --- {3 jobs: variant_dispatch, text_generation, artifact_naming}
Outgoing: core/integrations/engine.py, data/storage/local.py --- {RenderedArtifact content/filename/media_type}
"""

import json
import logging
from typing import Any, Callable, Dict, Tuple

from ..framework.base import (
    TEMPLATE_VARIANTS,
    CfgExportTemplate,
    ColumnType,
    CsvExportTemplate,
    ExportTemplate,
    ExportTemplateDefinition,
    GenericExportTemplate,
    PythonScriptExportTemplate,
    RenderedArtifact,
)

logger = logging.getLogger(__name__)


SAMPLE_VALUES: Dict[str, str] = {
    ColumnType.INTEGER.value: "1",
    ColumnType.NUMERIC.value: "1.0",
    ColumnType.DATETIME.value: "2024-01-01 12:00:00",
    ColumnType.DATE.value: "2024-01-01",
    ColumnType.FACTOR.value: "Sample",
}
DEFAULT_SAMPLE_VALUE = "Sample"

# Object types every JaamSim configuration declares
CFG_OBJECT_TYPES: Tuple[str, ...] = ("EntityGenerator", "Queue  ", "Server", "EntitySink")
CFG_ENTITY_SEPARATOR = " →"


def sample_value(column_type: str) -> str:
    """Sample cell for a csv column type; unknown types get the factor value"""
    return SAMPLE_VALUES.get(column_type, DEFAULT_SAMPLE_VALUE)


# ============================================================================
# FORMAT GENERATORS
# ============================================================================


def generate_csv(template: CsvExportTemplate) -> str:
    """
    Header row, one sample row, then ``# name`` and ``# description``.

    A template declaring no column list renders as empty text; an empty list
    still yields the (blank) header and sample rows and both comments.
    """
    if template.columns is None:
        return ""

    header = ",".join(column.name for column in template.columns)
    sample = ",".join(sample_value(column.type) for column in template.columns)
    return f"{header}\n{sample}\n# {template.name}\n# {template.description}"


def generate_python_script(template: PythonScriptExportTemplate) -> str:
    """FreeCAD script with one commented placeholder per component"""
    components_block = ""
    if template.components:
        components_block = "\n    ".join(
            f"\n    # {component}\n    # Adicionar código específico aqui"
            for component in template.components
        )

    return (
        "#!/usr/bin/env python3\n"
        '"""\n'
        f"{template.name}\n"
        f"{template.description}\n"
        "\n"
        "Gerado automaticamente pelo EPQS\n"
        '"""\n'
        "\n"
        "import FreeCAD as App\n"
        "import FreeCADGui as Gui\n"
        "import Part\n"
        "import Draft\n"
        "\n"
        "def create_layout():\n"
        '    """Criar layout de fábrica"""\n'
        '    doc = App.newDocument("Factory_Layout")\n'
        "    \n"
        "    # Adicionar componentes do layout\n"
        f"    {components_block}\n"
        "    \n"
        "    doc.recompute()\n"
        "    return doc\n"
        "\n"
        'if __name__ == "__main__":\n'
        "    layout_doc = create_layout()\n"
        '    print("Layout criado com sucesso!")\n'
    )


def entity_label(entity: str) -> str:
    """Object name of a ``"Label → Description"`` entity entry"""
    return entity.split(CFG_ENTITY_SEPARATOR)[0]


def generate_cfg(template: CfgExportTemplate) -> str:
    """JaamSim configuration: object types, entity defines, parameter stubs"""
    entities_block = ""
    if template.entities:
        entities_block = "\n".join(
            f"\n# {entity}\nDefine {entity_label(entity)} {{ Example{entity_label(entity)} }}"
            for entity in template.entities
        )

    parameters_block = ""
    if template.parameters:
        parameters_block = "\n".join(
            f"\n# {parameter}: [valor]" for parameter in template.parameters
        )

    object_types = "\n".join(f"    {object_type}" for object_type in CFG_OBJECT_TYPES)

    return (
        f"# {template.name}\n"
        f"# {template.description}\n"
        "# Gerado automaticamente pelo EPQS\n"
        "\n"
        "Define ObjectType {\n"
        f"{object_types}\n"
        "}\n"
        "\n"
        "# Configurações do modelo\n"
        f"{entities_block}\n"
        "\n"
        "# Parâmetros do processo\n"
        f"{parameters_block}\n"
        "\n"
        "# Executar simulação\n"
        "Define SimEntity { DefaultEntity }\n"
        "Define View { View1 }\n"
    )


def generate_structured_dump(template: ExportTemplate) -> str:
    """Indented JSON of the full definition; never raises"""
    try:
        return json.dumps(template.to_dict(), indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as e:
        # Self-referencing payloads (YAML aliases) cannot be encoded as JSON
        logger.warning(f"Template {template.key!r} payload not JSON-encodable, dumping repr: {e}")
        fallback = {
            "name": template.name,
            "description": template.description,
            "format": template.format,
            "payload": repr(template.to_dict()),
        }
        return json.dumps(fallback, indent=2, ensure_ascii=False)


# ============================================================================
# RENDERER
# ============================================================================


_Renderer = Callable[[Any], Tuple[str, str, str]]


class TemplateRenderer:
    """
    Exhaustive renderer over the export template variants.

    Each variant maps to exactly one generator; construction fails if a
    variant has no generator registered.
    """

    def __init__(self):
        self._renderers: Dict[type, _Renderer] = {
            CsvExportTemplate: lambda t: (generate_csv(t), "csv", "text/csv"),
            PythonScriptExportTemplate: lambda t: (generate_python_script(t), "py", "text/x-python"),
            CfgExportTemplate: lambda t: (generate_cfg(t), "cfg", "text/plain"),
            GenericExportTemplate: lambda t: (generate_structured_dump(t), "json", "application/json"),
        }

        missing = [variant.__name__ for variant in TEMPLATE_VARIANTS if variant not in self._renderers]
        if missing:
            raise RuntimeError(f"No renderer registered for template variants: {', '.join(missing)}")

    def _resolve(self, template: ExportTemplate) -> _Renderer:
        for cls in type(template).__mro__:
            if cls in self._renderers:
                return self._renderers[cls]
        raise TypeError(f"Not an export template variant: {type(template).__name__}")

    def render(self, template: ExportTemplateDefinition) -> RenderedArtifact:
        """
        Render a template into a fresh artifact.

        Args:
            template: Export template (any variant)

        Returns:
            RenderedArtifact named ``<templateKey>_template.<ext>``
        """
        content, extension, media_type = self._resolve(template)(template)
        filename = f"{template.key}_template.{extension}"
        logger.debug(f"Rendered {filename} ({media_type}, {len(content)} chars)")
        return RenderedArtifact(content=content, filename=filename, media_type=media_type)


def render_template(template: ExportTemplateDefinition) -> RenderedArtifact:
    """Convenience function for one-off rendering"""
    return TemplateRenderer().render(template)
