import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from .cli_config import (
    ComprehensiveConfig,
    apply_config_data,
    create_sample_config,
    get_config,
    load_config_file,
    validate_config_values,
)
from .error_handling import DepGrouperError, setup_error_handling
from .group_engine import DependencyGroupEngine
from .parsers import JobDefinition, parse_job_file
from .reporting import GroupReporter, build_json_report
from .structured_logging import configure_logging, get_grouping_logger

__version__ = "1.0.0"

console = Console()


def load_job(file_path: str) -> JobDefinition:
    """Parse a job file, turning parsing failures into CLI errors."""
    try:
        return parse_job_file(file_path)
    except DepGrouperError as e:
        raise click.ClickException(f"Failed to parse job file: {str(e)}")


def assign_job_dependencies(job: JobDefinition) -> DependencyGroupEngine:
    """Build the group engine for a job and assign its dependencies."""
    try:
        engine = DependencyGroupEngine.from_job_config(job.dependency_groups)
        engine.assign_to_groups(job.dependencies)
    except DepGrouperError as e:
        raise click.ClickException(str(e))
    return engine


def output_json_results(
    engine: DependencyGroupEngine, file_path: str, output_file: Optional[str] = None
) -> None:
    """Export results as JSON."""
    json_output = json.dumps(
        build_json_report(engine, file_path), indent=2, ensure_ascii=False
    )

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(json_output)
        console.print(f"✅ Results saved to {output_file}", style="green")
    else:
        click.echo(json_output)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.pass_context
def cli(ctx, version):
    """
    📦 Dep-Grouper: Dependency Group Assignment

    Assigns the dependencies of an update job to the groups defined in
    its configuration, so related updates can be batched together.
    """
    if version:
        console.print(f"Dep-Grouper version {__version__}", style="bold blue")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        return

    current_config = get_config()
    setup_error_handling(
        log_level=getattr(logging, current_config.logging.log_level.upper())
    )
    configure_logging(
        current_config.logging.log_level, current_config.logging.enable_json_logging
    )


@cli.command()
@click.argument(
    "file_path", type=click.Path(exists=True, readable=True, dir_okay=False)
)
@click.option(
    "--output-format",
    "--format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Output format (defaults to the configured format)",
)
@click.option(
    "--output-file",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Write JSON results to this file",
)
@click.option(
    "--hide-empty-groups", is_flag=True, help="Do not list groups that matched nothing"
)
@click.option("--quiet", "-q", is_flag=True, help="Only print a one-line summary")
def assign(
    file_path: str,
    output_format: Optional[str],
    output_file: Optional[str],
    hide_empty_groups: bool,
    quiet: bool,
):
    """Assign the dependencies of a job file to its dependency groups."""
    current_config = get_config()
    output_format = (output_format or current_config.output.output_format).lower()
    output_file = output_file or current_config.output.output_file
    quiet = quiet or current_config.output.quiet

    grouping_logger = get_grouping_logger()
    grouping_logger.set_job_context(file_path=Path(file_path).name)
    try:
        job = load_job(file_path)
        engine = assign_job_dependencies(job)
    finally:
        grouping_logger.clear_job_context()

    if output_format == "json":
        output_json_results(engine, file_path, output_file)
    elif quiet:
        grouped = sum(len(group.dependencies) for group in engine.dependency_groups)
        console.print(
            f"{len(engine.dependency_groups)} groups, {grouped} grouped, "
            f"{len(engine.ungrouped_dependencies())} individual updates"
        )
    else:
        reporter = GroupReporter(
            console,
            show_empty_groups=current_config.output.show_empty_groups
            and not hide_empty_groups,
        )
        reporter.print_assignment_results(engine, file_path)


@cli.command()
def info():
    """Show information about job files and usage examples."""
    info_text = """
[bold blue]📋 Job Files:[/bold blue]

• [green].json[/green], [green].yaml[/green], [green].toml[/green] with
  [cyan]dependency-groups[/cyan] and [cyan]dependencies[/cyan] sections

[bold blue]🧩 Group Rules:[/bold blue]

• [yellow]patterns[/yellow] - Wildcard names a dependency must match
• [yellow]exclude-patterns[/yellow] - Wildcard names that are never grouped
• [yellow]dependency-type[/yellow] - production or development
• [yellow]update-types[/yellow] - major, minor and/or patch

[bold blue]🌍 Environment Variables:[/bold blue]

• [cyan]DEP_GROUPER_LOG_LEVEL[/cyan] - Set the log level
• [cyan]DEP_GROUPER_JSON_LOGGING[/cyan] - Emit structured grouping events
• [cyan]DEP_GROUPER_OUTPUT_FORMAT[/cyan] - console or json
• [cyan]DEP_GROUPER_OUTPUT_FILE[/cyan] - Write JSON results to a file

[bold blue]📄 Configuration Files:[/bold blue]

• [green].dep-grouper.json[/green] - Project-level config
• [green]~/.config/dep-grouper/config.json[/green] - User-level config

[bold blue]💡 Usage Examples:[/bold blue]

  # Show group assignments
  dep-grouper assign job.yaml

  # JSON output for automation
  dep-grouper assign job.yaml --output-format json

  # Generate sample config
  dep-grouper config init
"""
    console.print(
        Panel(
            info_text,
            title="[bold]Dep-Grouper Information[/bold]",
            border_style="blue",
        )
    )


@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command("init")
@click.option(
    "--path",
    type=click.Path(),
    default=".dep-grouper.json",
    help="Path where to create the config file",
    show_default=True,
)
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def config_init(path: str, force: bool):
    """Create a sample configuration file."""
    config_path = Path(path)

    if config_path.exists() and not force:
        console.print(f"⚠️  Config file already exists at {config_path}", style="yellow")
        console.print("Use --force to overwrite", style="dim")
        return

    try:
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_sample_config())
    except OSError as e:
        raise click.ClickException(f"Failed to create config file: {e}")

    console.print(f"✅ Created configuration file at {config_path}", style="green")
    console.print("Edit this file to customize your settings", style="dim")


@config.command("show")
def config_show():
    """Show current configuration settings."""
    current_config = get_config()

    console.print(Panel("[bold blue]🔧 Configuration[/bold blue]", border_style="blue"))

    console.print("\n[bold cyan]📊 Output Settings:[/bold cyan]")
    console.print(f"  Output Format: {current_config.output.output_format}")
    console.print(f"  Output File: {current_config.output.output_file or '-'}")
    console.print(f"  Show Empty Groups: {current_config.output.show_empty_groups}")
    console.print(f"  Quiet: {current_config.output.quiet}")

    console.print("\n[bold cyan]📝 Logging Settings:[/bold cyan]")
    console.print(f"  Log Level: {current_config.logging.log_level}")
    console.print(f"  JSON Logging: {current_config.logging.enable_json_logging}")

    console.print("\n[bold cyan]📄 Job File Settings:[/bold cyan]")
    console.print(f"  Max File Size: {current_config.job.max_file_size_mb} MB")
    console.print(
        f"  Allowed Extensions: {', '.join(current_config.job.allowed_file_extensions)}"
    )


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def config_validate(config_file: str):
    """Validate a configuration file."""
    config_data = load_config_file(Path(config_file))

    if not isinstance(config_data, dict):
        raise click.ClickException(f"Could not load config from {config_file}")

    candidate = ComprehensiveConfig()
    apply_config_data(candidate, config_data)
    errors = validate_config_values(candidate)
    if errors:
        for error in errors:
            console.print(f"  • {error}", style="red")
        raise click.ClickException("Configuration validation failed")

    console.print(f"✅ Configuration file {config_file} is valid", style="green")


if __name__ == "__main__":
    cli()
