"""
Main entry point for the EPQS integration engine

Command-line front end over IntegrationEngine: browse integrations,
workflows, export templates and tutorials, and render export templates to
stdout or to the export directory.

Usage:
    epqs-integrations tools
    epqs-integrations tool jamovi
    epqs-integrations workflow fluxo_digital_twin
    epqs-integrations templates --tool jamovi
    epqs-integrations render jamovi_cep --output-dir ./exports

@.architecture
Incoming: Command line (argv), app.py, config/settings.py --- {argparse Namespace, IntegrationEngine, Settings}
Processing: main(), build_parser(), cmd_*() --- {3 jobs: argument_parsing, command_dispatch, output_formatting}
Outgoing: sys.stdout, data/storage/local.py --- {formatted listings, rendered artifact content, saved artifact paths, exit status}
"""

import argparse
import sys
from typing import Callable, Dict, List, Optional, TextIO

from app import create_engine
from config.settings import get_settings
from core.integrations.engine import IntegrationEngine
from core.integrations.framework.errors import TemplateNotFoundError
from data.storage import LocalArtifactStorage

EXIT_OK = 0
EXIT_NOT_FOUND = 1


# =============================================================================
# Commands
# =============================================================================

def cmd_tools(engine: IntegrationEngine, args: argparse.Namespace, out: TextIO) -> int:
    for key, descriptor in engine.list_integrations():
        status = engine.status_label(descriptor.status)
        out.write(f"{key:<12} {descriptor.name or key} ({status})\n")
    return EXIT_OK


def cmd_tool(engine: IntegrationEngine, args: argparse.Namespace, out: TextIO) -> int:
    guide = engine.tool_guide(args.key)
    if guide is None:
        sys.stderr.write(f"Integration not found: {args.key}\n")
        return EXIT_NOT_FOUND

    out.write(f"{guide.name} {guide.version}".rstrip() + "\n")
    out.write(f"Status: {guide.status_label}\n")
    if guide.description:
        out.write(f"{guide.description}\n")
    if guide.website:
        out.write(f"Website: {guide.website}\n")
    if guide.download_url:
        out.write(f"Download: {guide.download_url}\n")
    _write_list(out, "Capabilities", guide.capabilities)
    _write_list(out, "Data formats", guide.data_formats)
    _write_list(out, "Integration methods", guide.integration_methods)
    return EXIT_OK


def cmd_workflows(engine: IntegrationEngine, args: argparse.Namespace, out: TextIO) -> int:
    for key, workflow in engine.list_workflows():
        out.write(f"{key:<32} {workflow.name} ({len(workflow.steps)} steps)\n")
    return EXIT_OK


def cmd_workflow(engine: IntegrationEngine, args: argparse.Namespace, out: TextIO) -> int:
    guide = engine.workflow_guide(args.key)
    if guide is None:
        sys.stderr.write(f"Workflow not found: {args.key}\n")
        return EXIT_NOT_FOUND

    out.write(f"{guide.name}\n")
    if guide.description:
        out.write(f"{guide.description}\n")
    for step in guide.steps:
        out.write(f"\n{step.number}. [{step.tool_name}] {step.description or step.action}\n")
        if step.inputs:
            out.write(f"   inputs: {', '.join(step.inputs)}\n")
        if step.outputs:
            out.write(f"   outputs: {', '.join(step.outputs)}\n")
    if guide.benefits:
        out.write("\n")
        _write_list(out, "Benefits", guide.benefits)
    return EXIT_OK


def cmd_templates(engine: IntegrationEngine, args: argparse.Namespace, out: TextIO) -> int:
    if args.tool is None:
        templates = engine.list_export_templates()
    else:
        templates = engine.export_candidates_for(args.tool)

    for key, template in templates:
        out.write(f"{key:<20} [{template.format}] {template.name}\n")
    return EXIT_OK


def cmd_render(engine: IntegrationEngine, args: argparse.Namespace, out: TextIO) -> int:
    try:
        artifact = engine.render_or_raise(args.key)
    except TemplateNotFoundError as e:
        sys.stderr.write(f"{e}\n")
        return EXIT_NOT_FOUND

    if args.stdout:
        out.write(artifact.content)
        return EXIT_OK

    output_dir = args.output_dir or get_settings().export.output_dir
    storage = LocalArtifactStorage(str(output_dir))
    path = storage.save_artifact(artifact)
    out.write(f"{path}\n")
    return EXIT_OK


def cmd_tutorials(engine: IntegrationEngine, args: argparse.Namespace, out: TextIO) -> int:
    for tutorial in engine.list_tutorials():
        out.write(f"{tutorial.title} [{tutorial.level}, {tutorial.duration}]\n")
        out.write(f"    {tutorial.description}\n")
    return EXIT_OK


def _write_list(out: TextIO, title: str, items: List[str]) -> None:
    if not items:
        return
    out.write(f"{title}:\n")
    for item in items:
        out.write(f"  - {item}\n")


COMMANDS: Dict[str, Callable[[IntegrationEngine, argparse.Namespace, TextIO], int]] = {
    "tools": cmd_tools,
    "tool": cmd_tool,
    "workflows": cmd_workflows,
    "workflow": cmd_workflow,
    "templates": cmd_templates,
    "render": cmd_render,
    "tutorials": cmd_tutorials,
}


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="epqs-integrations",
        description="Browse EPQS external integrations and render export templates",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("tools", help="List integrations")
    tool = subparsers.add_parser("tool", help="Show the integration guide for a tool")
    tool.add_argument("key", help="Integration key (e.g. jamovi)")

    subparsers.add_parser("workflows", help="List workflows")
    workflow = subparsers.add_parser("workflow", help="Show a workflow guide")
    workflow.add_argument("key", help="Workflow key (e.g. fluxo_digital_twin)")

    templates = subparsers.add_parser("templates", help="List export templates")
    templates.add_argument("--tool", default=None, help="Only templates associated with this tool")

    render = subparsers.add_parser("render", help="Render an export template")
    render.add_argument("key", help="Export template key (e.g. jamovi_cep)")
    render.add_argument("--output-dir", default=None, help="Directory for the rendered file")
    render.add_argument("--stdout", action="store_true", help="Print the artifact instead of saving it")

    subparsers.add_parser("tutorials", help="List tutorials")
    return parser


def main(
    argv: Optional[List[str]] = None,
    engine: Optional[IntegrationEngine] = None,
    out: Optional[TextIO] = None,
) -> int:
    """
    Run the CLI.

    Returns:
        Exit status (0 on success, 1 when the requested item does not exist)
    """
    args = build_parser().parse_args(argv)
    engine = engine or create_engine(configure_logs=True)
    return COMMANDS[args.command](engine, args, out or sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
