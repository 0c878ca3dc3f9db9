"""Apply CLI command."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from transitlink.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option(
    "--provider",
    "-p",
    "provider_ref",
    help="Provider as 'module:attribute' (default: dry run)",
)
@click.option(
    "--workers",
    "-w",
    type=int,
    default=None,
    help="Concurrent create calls per dependency generation",
)
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON",
)
@pass_context
def apply(ctx: Context, provider_ref: str | None, workers: int | None, output_json: bool) -> None:
    """
    Apply the build plan in dependency order.

    Without --provider the plan is applied to an in-memory recorder,
    which shows the exact sequence of create calls.

    Examples:

        # Dry run
        transitlink apply

        # Apply with a deployment harness provider, four calls at a time
        transitlink apply --provider harness.aws:Provider --workers 4
    """
    from transitlink.apply.executor import Applier, ApplyStatus
    from transitlink.apply.provider import RecordingProvider, load_provider

    try:
        plan = ctx.plan
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if provider_ref:
        try:
            provider = load_provider(provider_ref)
        except (ImportError, AttributeError, TypeError, ValueError) as e:
            console.print(f"[red]Cannot load provider:[/red] {e}")
            raise SystemExit(1)
    else:
        provider = RecordingProvider()

    max_workers = workers or (ctx.settings.max_workers if ctx.settings else 1)
    report = Applier(provider, max_workers=max_workers).apply(plan.build)

    if output_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        raise SystemExit(0 if report.ok else 1)

    table = Table(title="Apply Results" if provider_ref else "Apply Results (dry run)")
    table.add_column("Resource", style="cyan")
    table.add_column("Kind")
    table.add_column("Status")
    table.add_column("Id")
    table.add_column("Message")

    styles = {
        ApplyStatus.CREATED: "green",
        ApplyStatus.FAILED: "red",
        ApplyStatus.DEPENDENCY_FAILED: "yellow",
        ApplyStatus.CANCELLED: "dim",
    }

    for result in report.results.values():
        style = styles[result.status]
        table.add_row(
            result.key,
            result.kind,
            f"[{style}]{result.status.value}[/{style}]",
            result.resource_id or "-",
            str(result.error) if result.error else "",
        )

    console.print(table)

    created = len(report.by_status(ApplyStatus.CREATED))
    console.print(f"\n[bold]Summary:[/bold] {created}/{len(report)} created")

    if not report.ok:
        raise SystemExit(1)
