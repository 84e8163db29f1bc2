"""
Integration Tests: Command Line

Tests the epqs-integrations commands against an in-memory engine.
"""

import io

import pytest

from main import EXIT_NOT_FOUND, EXIT_OK, build_parser, main


def run(engine, *argv):
    out = io.StringIO()
    status = main(list(argv), engine=engine, out=out)
    return status, out.getvalue()


@pytest.mark.integration
class TestCli:
    """Test CLI commands and exit status."""

    def test_tools(self, engine):
        status, output = run(engine, "tools")

        assert status == EXIT_OK
        assert "Jamovi (Disponível)" in output
        assert len(output.splitlines()) == 3

    def test_tool_guide(self, engine):
        status, output = run(engine, "tool", "freecad")

        assert status == EXIT_OK
        assert output.startswith("FreeCAD 0.20+\n")
        assert "Download: https://freecad.org/downloads.php" in output
        assert "  - API Python" in output

    def test_tool_not_found(self, engine):
        assert run(engine, "tool", "minitab") == (EXIT_NOT_FOUND, "")

    def test_workflows(self, engine):
        status, output = run(engine, "workflows")

        assert status == EXIT_OK
        assert "fluxo_digital_twin" in output

    def test_workflow_guide(self, engine):
        status, output = run(engine, "workflow", "fluxo_digital_twin")

        assert status == EXIT_OK
        assert "1. [FreeCAD] Criar modelo 3D do equipamento/layout" in output
        assert "3. [Jamovi]" in output

    def test_workflow_not_found(self, engine):
        status, _ = run(engine, "workflow", "fluxo_inexistente")

        assert status == EXIT_NOT_FOUND

    def test_templates_for_tool(self, engine):
        status, output = run(engine, "templates", "--tool", "jamovi")

        assert status == EXIT_OK
        assert [line.split()[0] for line in output.splitlines()] == ["jamovi_cep", "jamovi_quality"]

    def test_render_to_stdout(self, engine):
        status, output = run(engine, "render", "jamovi_cep", "--stdout")

        assert status == EXIT_OK
        assert output == engine.render("jamovi_cep").content

    def test_render_to_directory(self, engine, tmp_path):
        status, output = run(engine, "render", "freecad_layout", "--output-dir", str(tmp_path))

        saved = tmp_path / "scripts" / "freecad_layout_template.py"
        assert status == EXIT_OK
        assert output.strip() == str(saved.resolve())
        assert saved.read_text(encoding="utf-8") == engine.render("freecad_layout").content

    def test_render_not_found(self, engine):
        status, output = run(engine, "render", "minitab_export", "--stdout")

        assert status == EXIT_NOT_FOUND
        assert output == ""

    def test_tutorials(self, engine):
        status, output = run(engine, "tutorials")

        assert status == EXIT_OK
        assert "Primeiros Passos com Jamovi [iniciante, 30 min]" in output

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
