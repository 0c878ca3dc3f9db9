"""Validation CLI command."""

from __future__ import annotations

import click
from rich.console import Console

from transitlink.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on warnings",
)
@pass_context
def validate(ctx: Context, strict: bool) -> None:
    """
    Validate the topology declaration and plan it.

    Checks schema compliance, network overlaps, connection references,
    tier allocation and plan ordering.

    Examples:

        # Basic validation
        transitlink validate

        # Treat warnings (overlaps, unconnected networks) as errors
        transitlink validate --strict
    """
    from transitlink.core.allocator import check_disjoint
    from transitlink.core.planner import TopologyPlanner
    from transitlink.errors import AllocationError, TransitlinkError

    errors: list[str] = []
    warnings: list[str] = []

    console.print("[bold]Validating topology...[/bold]")
    try:
        topology = ctx.topology
        console.print(f"  [green]✓[/green] Topology loaded: {len(topology)} networks")
    except click.ClickException as e:
        console.print(f"  [red]✗[/red] {e.message}")
        console.print("\n[red bold]Validation failed[/red bold]")
        raise SystemExit(1)

    console.print("[bold]Checking address blocks...[/bold]")
    try:
        check_disjoint(topology)
        console.print("  [green]✓[/green] Network address blocks are disjoint")
    except AllocationError as e:
        warnings.append(e.message)
        console.print(f"  [yellow]![/yellow] {e.message}")

    connected = topology.connections.networks()
    for network in topology:
        if network.name not in connected:
            warnings.append(f"Network {network.name} has no declared peers")
            console.print(f"  [yellow]![/yellow] Network {network.name} has no declared peers")

    console.print("[bold]Planning...[/bold]")
    check_overlaps = ctx.settings.check_overlaps if ctx.settings else False
    try:
        plan = TopologyPlanner(topology, check_overlaps=check_overlaps).plan()
        console.print(
            f"  [green]✓[/green] Plan built: {len(plan.build)} resources, "
            f"{len(plan.routes)} routes"
        )
    except TransitlinkError as e:
        errors.append(str(e))
        console.print(f"  [red]✗[/red] {e}")

    # Summary
    console.print("\n[bold]Validation Summary[/bold]")
    console.print(f"  Errors: {len(errors)}")
    console.print(f"  Warnings: {len(warnings)}")

    if errors:
        console.print("\n[red bold]Validation failed[/red bold]")
        for err in errors:
            console.print(f"  [red]•[/red] {err}")
        raise SystemExit(1)

    if warnings and strict:
        console.print("\n[yellow bold]Validation failed (strict mode)[/yellow bold]")
        for warn in warnings:
            console.print(f"  [yellow]•[/yellow] {warn}")
        raise SystemExit(1)

    if warnings:
        console.print("\n[yellow]Warnings:[/yellow]")
        for warn in warnings:
            console.print(f"  [yellow]•[/yellow] {warn}")

    console.print("\n[green bold]Validation passed[/green bold]")
