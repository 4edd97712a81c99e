#!/usr/bin/env python3
"""
TeX Rendering CLI

Renders TeX documents to PDF with the rendering context.

Commands:
    render - Render a document to PDF
    check  - Check that the typesetting executable can be found

Examples:\n

    texrender render paper.tex                           # Writes paper.pdf

    texrender render paper.tex -o out/paper.pdf -p 2     # Exactly two passes

    cat paper.tex | texrender render - -o paper.pdf      # Document from stdin

    texrender render paper.tex --texinputs figs:styles   # Extra asset directories
"""

import os
import shutil
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from texrender.contexts.rendering import (
    InvalidOptionsError,
    RenderError,
    RenderOptions,
    load_options,
    render_document,
)
from texrender.contexts.rendering.logger import _log_debug, setup_rendering_logger
from texrender.utils.pdf_processing import page_count
from texrender.utils.timestamp import now

load_dotenv()
LOGS_PATH = os.getenv("TEXRENDER_LOGS_PATH")


app = typer.Typer(
    help="Render TeX documents to PDF, rerunning until cross-references settle",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    document: Annotated[
        str,
        typer.Argument(help="TeX file to render, or '-' to read from stdin"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Where to write the PDF (default: document name with .pdf, or texrender.pdf for stdin)",
        ),
    ] = None,
    passes: Annotated[
        Optional[int],
        typer.Option(
            "--passes",
            "-p",
            help="Number of passes (0 = rerun automatically until the log stops asking, up to 5)",
            min=0,
        ),
    ] = None,
    texinputs: Annotated[
        Optional[str],
        typer.Option(
            "--texinputs",
            "-t",
            help=f"Asset directories added to TEXINPUTS, separated by '{os.pathsep}'",
        ),
    ] = None,
    command: Annotated[
        Optional[str],
        typer.Option("--command", "-c", help="Typesetting executable (default: pdflatex)"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="YAML file with render options", exists=True, dir_okay=False),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Seconds to wait for each pass before terminating it"),
    ] = None,
    keep_on_failure: Annotated[
        bool,
        typer.Option(
            "--keep-on-failure",
            "-k",
            help="Keep the working directory of a failed render for inspection",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output and the executable's stdout"),
    ] = False,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Directory for a render.log session log"),
    ] = None,
):
    """
    Render a TeX document to PDF.

    Examples:\n

        $ texrender render paper.tex                      # Automatic pass count

        $ texrender render paper.tex --passes 3           # Three passes

        $ texrender render paper.tex --verbose            # Show executable output
    """
    if log_dir is None and LOGS_PATH:
        log_dir = Path(LOGS_PATH) / f"render_{now()}"

    overrides = {
        "command": command,
        "runs": passes,
        "texinputs": texinputs,
        "timeout": timeout,
        "keep_on_failure": keep_on_failure or None,
    }
    if verbose:
        overrides["logger"] = lambda line: _log_debug(f"  | {line}")

    try:
        if config is not None:
            options = load_options(config, **overrides)
        else:
            options = RenderOptions(
                **{k: v for k, v in overrides.items() if v is not None}
            ).validate()
    except InvalidOptionsError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    session_log = setup_rendering_logger(log_dir, command=options.command, verbose=verbose)

    if document == "-":
        source = typer.get_binary_stream("stdin").read()
        default_output = Path("texrender.pdf")
    else:
        document_path = Path(document)
        if not document_path.is_file():
            typer.secho(f"Error: Document not found: {document_path}\n", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=2)
        source = document_path.read_bytes()
        default_output = document_path.with_suffix(".pdf")

    output = (output or default_output).resolve()
    output.parent.mkdir(parents=True, exist_ok=True)

    typer.secho(f"\nRendering: {document}", fg=typer.colors.BLUE, bold=True, err=True)
    typer.echo(f"Passes: {options.runs if options.runs else 'automatic'}", err=True)
    typer.echo("", err=True)

    try:
        result = render_document(source, options, destination=output)
    except RenderError as e:
        typer.echo("", err=True)
        typer.secho("✗ Render failed", fg=typer.colors.RED, bold=True, err=True)
        for line in str(e).splitlines():
            typer.secho(f"  {line}", fg=typer.colors.RED, err=True)
        if session_log:
            typer.echo(f"  Log: {session_log}", err=True)
        typer.echo("", err=True)
        raise typer.Exit(code=1)

    typer.echo("", err=True)
    typer.secho("✓ Render succeeded", fg=typer.colors.GREEN, bold=True, err=True)
    typer.echo(f"  Passes: {result.passes}", err=True)
    typer.echo(f"  Warnings: {len(result.warnings)}", err=True)
    if verbose and result.warnings:
        for warning in result.warnings[:10]:  # Limit to first 10
            typer.echo(f"  - {warning}", err=True)
        if len(result.warnings) > 10:
            typer.echo(f"  ... and {len(result.warnings) - 10} more", err=True)

    pages = page_count(result.pdf_path)
    if pages is not None:
        typer.echo(f"  Pages: {pages}", err=True)
    typer.echo(f"  PDF: {result.pdf_path}", err=True)
    if session_log:
        typer.echo(f"  Log: {session_log}", err=True)
    typer.echo("", err=True)

    raise typer.Exit(code=0)


@app.command("check")
def check_command(
    command: Annotated[
        Optional[str],
        typer.Option("--command", "-c", help="Typesetting executable (default: pdflatex)"),
    ] = None,
):
    """
    Check that the typesetting executable resolves on PATH.

    Examples:\n

        $ texrender check

        $ texrender check --command lualatex
    """
    executable = command or RenderOptions().command
    resolved = shutil.which(executable)
    if resolved is None:
        typer.secho(f"✗ {executable} not found on PATH", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ {executable}: {resolved}", fg=typer.colors.GREEN, bold=True)
    raise typer.Exit(code=0)


if __name__ == "__main__":
    app()
