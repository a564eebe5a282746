"""Interactive wizard that builds a RunConfig from terminal prompts."""

from __future__ import annotations

from pathlib import Path

import click

from .config import DEFAULT_OUTPUT_NAME, Enrichment, RunConfig, Scope, resolve_output_path

BANNER = "PKG2CSV"
SUBTITLE = "Package.json Dependencies to CSV Converter"

_SCOPE_CHOICES = [scope.value for scope in Scope]


def _show_settings(config: RunConfig) -> None:
    output = str(config.output_path) if config.output_path else "(console table)"
    click.secho("Ready to process with these settings:", fg="yellow")
    click.echo(f"  Input:   {click.style(str(config.input_path), fg='green')}")
    click.echo(f"  Output:  {click.style(output, fg='green')}")
    options = ", ".join(config.describe()) or "none"
    click.echo(f"  Options: {click.style(options, fg='green')}")


def _ask(current: RunConfig, cwd: Path | None) -> RunConfig:
    input_path = click.prompt(
        "Input path (package.json or directory)",
        default=str(current.input_path),
    )

    wants_file = click.confirm("Write a CSV file?", default=True)
    output_path = None
    if wants_file:
        default_output = current.output_path.name if current.output_path else DEFAULT_OUTPUT_NAME
        output = click.prompt("Output file path", default=default_output)
        output_path = resolve_output_path(output, cwd)

    enrichment = Enrichment(
        latest=click.confirm("Include latest version info?", default=current.enrichment.latest),
        license=click.confirm("Include license info?", default=current.enrichment.license),
        description=click.confirm(
            "Include description?", default=current.enrichment.description
        ),
        npm_link=click.confirm("Include npm link?", default=current.enrichment.npm_link),
    )

    scope = click.prompt(
        "Dependencies to include",
        type=click.Choice(_SCOPE_CHOICES),
        default=current.scope.value,
    )
    recursive = click.confirm("Search subdirectories recursively?", default=current.recursive)

    return RunConfig(
        input_path=Path(input_path),
        output_path=output_path,
        enrichment=enrichment,
        scope=Scope(scope),
        recursive=recursive,
    )


def prompt_config(initial: RunConfig | None = None, cwd: Path | None = None) -> RunConfig:
    """Walk the user through every option and return the confirmed config.

    Declining the final confirmation restarts the questions with the previous
    answers as defaults. Ctrl-C raises ``click.Abort``.
    """
    click.secho(BANNER, fg="cyan", bold=True)
    click.secho(SUBTITLE, fg="bright_black")

    config = initial or RunConfig()
    while True:
        config = _ask(config, cwd)
        _show_settings(config)
        if click.confirm("Proceed?", default=True):
            return config
