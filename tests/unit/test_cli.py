"""Unit tests for the texrender CLI."""

import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from texrender.cli import app

runner = CliRunner()

SIMPLE_DOCUMENT = "\\documentclass{article}\n\\begin{document}\nHello\n\\end{document}\n"


@pytest.fixture(autouse=True)
def restore_loguru():
    """The CLI replaces loguru sinks; put the default one back afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.mark.unit
def test_no_command_shows_help():
    """Test that running without a command prints help."""
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "render" in result.output


@pytest.mark.unit
def test_render_writes_pdf_next_to_document(fake_engine, tmp_path):
    """Test rendering a file to the default output path."""
    tex = tmp_path / "paper.tex"
    tex.write_text(SIMPLE_DOCUMENT + "%rerun-until 2\n")

    result = runner.invoke(app, ["render", str(tex), "--command", fake_engine])

    assert result.exit_code == 0, result.output
    assert "Render succeeded" in result.output
    assert "Passes: 2" in result.output
    assert (tmp_path / "paper.pdf").read_bytes().startswith(b"%PDF-fake\n")


@pytest.mark.unit
def test_render_from_stdin(fake_engine, tmp_path):
    """Test rendering a document read from stdin."""
    output = tmp_path / "out" / "stdin.pdf"

    result = runner.invoke(
        app,
        ["render", "-", "--command", fake_engine, "--output", str(output), "--passes", "2"],
        input=SIMPLE_DOCUMENT,
    )

    assert result.exit_code == 0, result.output
    assert "Passes: 2" in result.output
    assert output.read_bytes() == b"%PDF-fake\n" + SIMPLE_DOCUMENT.encode("utf-8")


@pytest.mark.unit
def test_render_failure_reports_log_errors(fake_engine, tmp_path):
    """Test that a failed render exits 1 and shows the log's error lines."""
    tex = tmp_path / "broken.tex"
    tex.write_text(SIMPLE_DOCUMENT + "%log ! Undefined control sequence.\n%exit 1\n")

    result = runner.invoke(app, ["render", str(tex), "--command", fake_engine])

    assert result.exit_code == 1
    assert "Render failed" in result.output
    assert "! Undefined control sequence." in result.output
    assert not (tmp_path / "broken.pdf").exists()


@pytest.mark.unit
def test_render_with_config_file(fake_engine, tmp_path):
    """Test that options can come from a YAML file."""
    config = tmp_path / "render.yaml"
    config.write_text(f"command: {fake_engine}\nruns: 3\n")
    tex = tmp_path / "paper.tex"
    tex.write_text(SIMPLE_DOCUMENT)

    result = runner.invoke(app, ["render", str(tex), "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert "Passes: 3" in result.output


@pytest.mark.unit
def test_render_session_log(fake_engine, tmp_path):
    """Test that --log-dir writes a render.log session log."""
    tex = tmp_path / "paper.tex"
    tex.write_text(SIMPLE_DOCUMENT)
    log_dir = tmp_path / "logs"

    result = runner.invoke(
        app, ["render", str(tex), "--command", fake_engine, "--log-dir", str(log_dir), "--verbose"]
    )

    assert result.exit_code == 0, result.output
    session_log = (log_dir / "render.log").read_text()
    assert "[render]" in session_log
    assert "This is FakeTeX" in session_log


@pytest.mark.unit
def test_render_missing_document(tmp_path):
    """Test that a missing input file is a usage error."""
    result = runner.invoke(app, ["render", str(tmp_path / "nope.tex")])

    assert result.exit_code == 2
    assert "Document not found" in result.output


@pytest.mark.unit
def test_check_finds_executable(fake_engine):
    """Test that check reports a resolvable executable."""
    result = runner.invoke(app, ["check", "--command", fake_engine])

    assert result.exit_code == 0
    assert fake_engine in result.output


@pytest.mark.unit
def test_check_missing_executable(tmp_path):
    """Test that check fails for an executable that does not exist."""
    result = runner.invoke(app, ["check", "--command", str(tmp_path / "no-such-tex")])

    assert result.exit_code == 1
    assert "not found" in result.output
