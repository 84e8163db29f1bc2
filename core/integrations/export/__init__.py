"""
Export Layer - renders export templates into downloadable seed files
"""

from .renderer import (
    TemplateRenderer,
    render_template,
    sample_value,
    generate_csv,
    generate_python_script,
    generate_cfg,
    generate_structured_dump,
    SAMPLE_VALUES,
    DEFAULT_SAMPLE_VALUE,
)

__all__ = [
    "TemplateRenderer",
    "render_template",
    "sample_value",
    "generate_csv",
    "generate_python_script",
    "generate_cfg",
    "generate_structured_dump",
    "SAMPLE_VALUES",
    "DEFAULT_SAMPLE_VALUE",
]
