"""Plan CLI command."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from transitlink.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output nodes and edges as JSON",
)
@click.option(
    "--kind",
    "-k",
    type=click.Choice(
        ["network", "subnet_tier", "security_context", "transit_hub", "attachment", "route", "instance"]
    ),
    help="Only show resources of one kind",
)
@pass_context
def plan(ctx: Context, output_json: bool, kind: str | None) -> None:
    """
    Show the build plan in creation order.

    Examples:

        # Show the ordered plan
        transitlink plan

        # Only the routes and what they wait for
        transitlink plan --kind route

        # Machine-readable nodes and edges
        transitlink plan --json
    """
    try:
        topology_plan = ctx.plan
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    build = topology_plan.build

    if output_json:
        click.echo(json.dumps(topology_plan.to_dict(), indent=2))
        return

    table = Table(title="Build Plan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Resource", style="cyan")
    table.add_column("Kind")
    table.add_column("Depends On")

    for i, key in enumerate(build.order(), 1):
        if kind and build.kind(key).value != kind:
            continue
        explicit = set(build.explicit_dependencies(key))
        deps = [f"[bold]{d}[/bold]" if d in explicit else d for d in build.dependencies(key)]
        table.add_row(str(i), key, build.kind(key).value, ", ".join(deps) or "-")

    console.print(table)

    summary = topology_plan.summary()
    console.print(
        f"\n[bold]Summary:[/bold] {len(build)} resources, {summary['edges']} dependencies, "
        f"{summary['rules']} ingress rules"
    )
