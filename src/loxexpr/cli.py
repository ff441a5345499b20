"""
loxexpr CLI.

    loxexpr               interactive line mode, one run per line
    loxexpr SCRIPT        run a whole file once
    loxexpr A B ...       usage error, exit status 64

Results go to stdout, diagnostics to stderr.
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.text import Text

from loxexpr._version import get_version
from loxexpr.core.errors import ConfigError
from loxexpr.core.pipeline import RunResult, run_source
from loxexpr.core.settings import LoxConfig, resolve_config

logger = logging.getLogger(__name__)

EXIT_USAGE = 64
EXIT_NOINPUT = 66
EXIT_CONFIG = 78

USAGE = "Usage: loxexpr [script]"

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

app = typer.Typer(
    help="Evaluate Lox expressions from a file or interactively.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"loxexpr version {get_version()}")
        typer.echo(f"  Python:   {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform: {platform.system()} {platform.release()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
    )


def report(result: RunResult, config: LoxConfig) -> None:
    """Print a run's output to stdout and its diagnostics to stderr."""
    if result.output is not None:
        console.print(Text(result.output))
    source = result.source if config.output.source_snippets else None
    for diagnostic in result.diagnostics:
        err_console.print(Text(diagnostic.render(source), style="red"))


def run_file(path: Path, config: LoxConfig) -> int:
    """Run a whole file as one unit of work and return its exit status."""
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        err_console.print(Text(f"Could not read {path}: {e.strerror or e}", style="red"))
        return EXIT_NOINPUT

    logger.debug("Running file %s", path)
    result = run_source(source, config)
    report(result, config)
    return result.exit_code


def run_prompt(config: LoxConfig) -> None:
    """Read-eval-print loop; errors are reported and the loop continues."""
    prompt = Text(config.repl.prompt)
    while True:
        try:
            line = console.input(prompt)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if not line.strip():
            continue
        report(run_source(line, config), config)


@app.command()
def main_command(
    scripts: list[Path] | None = typer.Argument(  # noqa: B008
        None,
        help="Script to run. Omit to start the interactive prompt.",
        show_default=False,
    ),
    ast: bool = typer.Option(
        False, "--ast", help="Print the parsed expression tree instead of its value"
    ),
    show_type: bool = typer.Option(
        False, "--type", help="Print the statically inferred type instead of the value"
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="Path to loxexpr.toml (default: ./loxexpr.toml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """Evaluate Lox expressions from SCRIPT, or interactively when no script is given."""
    _configure_logging(verbose)

    if scripts and len(scripts) > 1:
        err_console.print(Text(USAGE))
        raise typer.Exit(code=EXIT_USAGE)

    try:
        config = resolve_config(config_path)
    except ConfigError as e:
        err_console.print(Text(f"Configuration error: {e.message}", style="red"))
        raise typer.Exit(code=EXIT_CONFIG) from e

    if ast:
        config.output.show_ast = True
    if show_type:
        config.output.show_type = True

    if scripts:
        code = run_file(scripts[0], config)
        if code:
            raise typer.Exit(code=code)
        return

    run_prompt(config)


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main(sys.argv[1:])
