"""
Workflow Catalog - derived key -> WorkflowDefinition

Keys are derived from workflow names (see derive_workflow_key). Two names
deriving the same key, or a step naming an unknown tool, abort construction.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..framework.base import EPQS_TOOL_KEY, WorkflowDefinition, WorkflowStep
from ..framework.errors import CatalogConfigurationError, WorkflowKeyCollisionError
from .integrations import IntegrationCatalog

logger = logging.getLogger(__name__)


class WorkflowCatalog:
    """Ordered, immutable catalog of built-in workflows"""

    def __init__(
        self,
        workflows: Iterable[WorkflowDefinition],
        known_tools: Optional[Iterable[str]] = None,
    ):
        """
        Build the catalog.

        Args:
            workflows: Workflow definitions in display order
            known_tools: Integration keys steps may reference; ``epqs`` is always allowed.
                When omitted, step tools are not checked.

        Raises:
            WorkflowKeyCollisionError: If two workflow names derive the same key
            CatalogConfigurationError: If a step references an unknown tool
        """
        allowed = None
        if known_tools is not None:
            allowed = set(known_tools)
            allowed.add(EPQS_TOOL_KEY)

        self._workflows: Dict[str, WorkflowDefinition] = {}
        for workflow in workflows:
            key = workflow.key
            if key in self._workflows:
                raise WorkflowKeyCollisionError(key, self._workflows[key].name, workflow.name)

            if allowed is not None:
                for step in workflow.steps:
                    if step.tool not in allowed:
                        raise CatalogConfigurationError(
                            f"Workflow {workflow.name!r} step {step.action!r} "
                            f"references unknown tool {step.tool!r}"
                        )

            self._workflows[key] = workflow

        logger.debug(f"Workflow catalog built with {len(self._workflows)} workflows")

    def get(self, key: str) -> Optional[WorkflowDefinition]:
        return self._workflows.get(key)

    def list(self) -> List[Tuple[str, WorkflowDefinition]]:
        return [(key, workflow) for key, workflow in self._workflows.items()]

    def keys(self) -> List[str]:
        return [key for key in self._workflows]

    def __contains__(self, key: object) -> bool:
        return key in self._workflows

    def __len__(self) -> int:
        return len(self._workflows)


def resolve_tool_name(step: WorkflowStep, integrations: IntegrationCatalog) -> str:
    """Display name for a step's tool: the integration name, else the upper-cased key"""
    descriptor = integrations.get(step.tool)
    if descriptor is not None and descriptor.name:
        return descriptor.name
    return step.tool.upper()
