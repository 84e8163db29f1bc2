"""
Integration engine error types.

Lookups never raise: a missing integration, workflow or template is an
explicit ``None``. Exceptions are reserved for broken built-in configuration
and for persistence backends (which SettingsStore contains).
"""


class IntegrationEngineError(Exception):
    """Base class for all integration engine errors"""


class CatalogConfigurationError(IntegrationEngineError):
    """Built-in registry is missing, unreadable or inconsistent"""


class WorkflowKeyCollisionError(CatalogConfigurationError):
    """Two workflow names derive the same catalog key"""

    def __init__(self, key: str, first_name: str, second_name: str):
        self.key = key
        self.first_name = first_name
        self.second_name = second_name
        super().__init__(
            f"Workflows {first_name!r} and {second_name!r} both derive key {key!r}"
        )


class TemplateNotFoundError(IntegrationEngineError, LookupError):
    """Export template key is not registered"""

    def __init__(self, template_key: str):
        self.template_key = template_key
        super().__init__(f"Export template not found: {template_key!r}")


class SettingsPersistenceError(IntegrationEngineError):
    """Key-value backend could not read or write the settings slot"""
