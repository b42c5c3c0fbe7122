"""Command line interface for scan report generation."""

from typing import Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .core.config import ConfigManager
from .core.logger import LoggerManager
from .core.exceptions import ScanReportError
from .reporting.models import RiskLevel, ConfidenceLevel
from .reporting.session import load_session
from .reporting.settings import ReportSettings
from .reporting.templates import TemplateRegistry
from .reporting.generator import ReportRequest, create_generator


console = Console()


def _parse_levels(values: Sequence[str], parser) -> Optional[frozenset]:
    """Level options as ordinals; unknown names stay as -1 and fail validation."""
    if not values:
        return None
    return frozenset(parser(value) for value in values)


@click.group()
@click.option('--config', '-c', 'config_path', type=click.Path(dir_okay=False),
              help='Configuration file; report settings are saved back to it')
@click.option('--log-level',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                                case_sensitive=False),
              help='Log level for this run; not saved to the configuration')
@click.pass_context
def cli(ctx, config_path, log_level):
    """Scan report generation commands."""
    ctx.ensure_object(dict)

    try:
        config = ConfigManager(config_path)
        config.ensure_valid()
    except ScanReportError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)

    logging_config = config.to_dict()
    if log_level:
        logging_config['logging']['level'] = log_level.upper()

    logger_manager = LoggerManager(logging_config)
    ctx.call_on_close(logger_manager.shutdown)

    ctx.obj['config'] = config


@cli.command()
@click.option('--session', '-s', 'session_path', required=True,
              type=click.Path(exists=True, dir_okay=False),
              help='Session export (YAML or JSON) to report on')
@click.option('--template', '-t', help='Template config name or display name')
@click.option('--template-dir', type=click.Path(file_okay=False),
              help='Directory holding the report templates')
@click.option('--output-dir', '-o', type=click.Path(file_okay=False),
              help='Directory the report is written to')
@click.option('--name', '-n', 'report_name', help='Report file name, overrides the pattern')
@click.option('--pattern', help='Report name pattern, e.g. "{date}-Scan-Report-{site}"')
@click.option('--title', help='Report title')
@click.option('--description', help='Report description')
@click.option('--site', 'sites', multiple=True, help='Site to include (repeatable)')
@click.option('--context', 'contexts', multiple=True, help='Context to include (repeatable)')
@click.option('--focus', 'focused_site', help='Site used for the {site} name placeholder')
@click.option('--risk', 'risks', multiple=True,
              help='Risk level to include, name or ordinal (repeatable)')
@click.option('--confidence', 'confidences', multiple=True,
              help='Confidence level to include, name or ordinal (repeatable)')
@click.option('--allow-empty', is_flag=True, help='Generate even when no alert matches')
@click.option('--open/--no-open', 'display_report', default=None,
              help='Open the generated report')
@click.pass_context
def generate(ctx, session_path, template, template_dir, output_dir, report_name, pattern,
             title, description, sites, contexts, focused_site, risks, confidences,
             allow_empty, display_report):
    """Generate a report for a session export."""
    config = ctx.obj['config']

    try:
        session = load_session(session_path)
    except ScanReportError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)

    settings = ReportSettings.from_config(config).with_overrides(
        title=title,
        description=description,
        template=template,
        report_directory=output_dir,
        template_directory=template_dir,
        report_name_pattern=pattern,
        display_report=display_report,
        included_risks=_parse_levels(risks, RiskLevel.parse),
        included_confidences=_parse_levels(confidences, ConfidenceLevel.parse)
    )

    generator = create_generator(session, config, template_dir=settings.template_directory)
    request = ReportRequest(
        settings=settings,
        contexts=contexts,
        sites=sites,
        focused_site=focused_site,
        report_name=report_name,
        allow_empty=allow_empty
    )

    result = generator.generate(request)

    if not result.success:
        console.print(f"[red]{escape(result.message)}[/red]")
        if result.error is not None and result.error.suggestion:
            console.print(f"[yellow]{escape(result.error.suggestion)}[/yellow]")
        ctx.exit(1)

    stats = result.report_data.get_summary_statistics()
    console.print(f"[green]{escape(result.message)}[/green]")
    console.print(f"Alerts included: {stats['total_alerts']}")

    if settings.display_report:
        click.launch(str(result.target_path))


@cli.command()
@click.option('--template-dir', type=click.Path(file_okay=False),
              help='Directory holding the report templates')
@click.pass_context
def templates(ctx, template_dir):
    """List available report templates."""
    settings = ReportSettings.from_config(ctx.obj['config'])
    registry = TemplateRegistry.from_directory(template_dir or settings.template_directory)

    if not len(registry):
        console.print("[yellow]No report templates found[/yellow]")
        return

    table = Table(title="Report Templates")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Display Name", style="green")
    table.add_column("Format", style="magenta")
    table.add_column("Description", style="white")

    for template in registry.templates():
        marker = " *" if template.config_name == settings.template else ""
        table.add_row(
            template.config_name + marker,
            template.display_name,
            template.extension,
            template.description
        )

    console.print(table)


@cli.command()
@click.option('--session', '-s', 'session_path', required=True,
              type=click.Path(exists=True, dir_okay=False),
              help='Session export (YAML or JSON)')
@click.pass_context
def sites(ctx, session_path):
    """List the sites and contexts of a session."""
    try:
        session = load_session(session_path)
    except ScanReportError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)

    site_table = Table(title="Sites")
    site_table.add_column("Site", style="cyan")
    site_table.add_column("Alerts", style="yellow", justify="right")

    alert_counts = {}
    for alert in session.get_alert_tree().iter_leaves():
        alert_counts[alert.site] = alert_counts.get(alert.site, 0) + 1

    for site in session.get_site_tree().children:
        site_table.add_row(site.name, str(alert_counts.get(site.name, 0)))

    console.print(site_table)

    contexts = session.get_contexts()
    if not contexts:
        console.print("[yellow]No contexts defined[/yellow]")
        return

    context_table = Table(title="Contexts")
    context_table.add_column("Context", style="green")
    context_table.add_column("Include", style="white")
    for context in contexts:
        context_table.add_row(context.name, ", ".join(context.include_patterns))

    console.print(context_table)


if __name__ == '__main__':
    cli()
