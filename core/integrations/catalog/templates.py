"""
Export Template Catalog - template key -> ExportTemplateDefinition
"""

from typing import Dict, List, Mapping, Optional, Tuple

from ..framework.base import ExportTemplateDefinition


class ExportTemplateCatalog:
    """Ordered, immutable catalog of built-in export templates"""

    def __init__(self, templates: Mapping[str, ExportTemplateDefinition]):
        self._templates: Dict[str, ExportTemplateDefinition] = dict(templates)

    def get(self, key: str) -> Optional[ExportTemplateDefinition]:
        return self._templates.get(key)

    def list(self) -> List[Tuple[str, ExportTemplateDefinition]]:
        return [(key, template) for key, template in self._templates.items()]

    def keys(self) -> List[str]:
        return [key for key in self._templates]

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def find_by_tool_key(self, tool_key: str) -> List[Tuple[str, ExportTemplateDefinition]]:
        """
        Templates associated with a tool.

        A template matches when its key contains ``tool_key`` as a substring,
        so an empty ``tool_key`` matches every template.
        """
        return [(key, template) for key, template in self._templates.items() if tool_key in key]
