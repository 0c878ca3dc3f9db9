"""Main CLI entry point for transitlink."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from transitlink import __version__
from transitlink.config import TransitlinkSettings, get_settings
from transitlink.errors import TransitlinkError
from transitlink.logging import set_global_log_level

console = Console()


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.topology_path: Path | None = None
        self.verbose: bool = False
        self.settings: TransitlinkSettings | None = None
        self._topology: Any = None
        self._plan: Any = None

    @property
    def topology(self) -> Any:
        """Lazy-load topology."""
        if self._topology is None:
            from transitlink.core.network import Topology

            if not self.topology_path or not self.topology_path.exists():
                raise click.ClickException(f"Topology not found: {self.topology_path}")
            try:
                self._topology = Topology.load(self.topology_path)
            except TransitlinkError as e:
                raise click.ClickException(str(e)) from e
        return self._topology

    @property
    def plan(self) -> Any:
        """Lazy-build the plan."""
        if self._plan is None:
            from transitlink.core.planner import TopologyPlanner

            check_overlaps = self.settings.check_overlaps if self.settings else False
            try:
                self._plan = TopologyPlanner(self.topology, check_overlaps=check_overlaps).plan()
            except TransitlinkError as e:
                raise click.ClickException(f"Planning failed: {e}") from e
        return self._plan


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.version_option(version=__version__, prog_name="transitlink")
@click.option(
    "-t",
    "--topology",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to topology YAML file (default: TRANSITLINK_TOPOLOGY_FILE)",
)
@click.option(
    "--check-overlaps/--no-check-overlaps",
    default=None,
    help="Reject overlapping network address blocks",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@pass_context
def cli(ctx: Context, topology: Path | None, check_overlaps: bool | None, verbose: bool) -> None:
    """
    Transitlink - Hub-and-spoke transit topology planning.

    Plan networks, hub attachments, ingress rules and return routes,
    then apply them in dependency order.
    """
    settings = get_settings()
    if check_overlaps is not None:
        settings.check_overlaps = check_overlaps

    ctx.settings = settings
    ctx.topology_path = topology or settings.topology_file
    ctx.verbose = verbose
    set_global_log_level(logging.DEBUG if verbose else settings.log_level)


# Import and register subcommands
from transitlink.cli.apply import apply
from transitlink.cli.diagram import diagram
from transitlink.cli.docs import docs
from transitlink.cli.plan import plan
from transitlink.cli.validate import validate

cli.add_command(apply)
cli.add_command(diagram)
cli.add_command(docs)
cli.add_command(plan)
cli.add_command(validate)


@cli.command()
@pass_context
def info(ctx: Context) -> None:
    """Show topology and plan summary."""
    from rich.table import Table

    try:
        topology = ctx.topology
        plan = ctx.plan
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print(f"\n[bold]Transitlink v{__version__}[/bold]\n")

    console.print("[bold cyan]Topology Summary[/bold cyan]")
    console.print(f"  Path: {ctx.topology_path}")
    console.print(f"  Networks: {len(topology)}")
    console.print(f"  Connections: {len(topology.connections)}")
    console.print(f"  Hub: {topology.hub.name} (ASN {topology.hub.amazon_side_asn})")

    table = Table(title="Planned Resources")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right")

    for kind, count in plan.summary().items():
        if count > 0:
            table.add_row(kind, str(count))

    console.print(table)


@cli.command()
@pass_context
def networks(ctx: Context) -> None:
    """List declared networks and their allocated tiers."""
    from rich.table import Table

    try:
        plan = ctx.plan
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    table = Table(title="Networks")
    table.add_column("Network", style="cyan")
    table.add_column("CIDR")
    table.add_column("Tier")
    table.add_column("Type")
    table.add_column("Subnets")
    table.add_column("Peers")

    for layout in plan.layouts:
        peers = ", ".join(sorted({r.peer for r in plan.contexts[layout.name].rules})) or "-"
        for i, tier in enumerate(layout.tiers):
            table.add_row(
                layout.name if i == 0 else "",
                str(layout.cidr) if i == 0 else "",
                tier.name,
                tier.subnet_type.value,
                ", ".join(str(s.cidr) for s in tier.subnets),
                peers if i == 0 else "",
            )

    console.print(table)


if __name__ == "__main__":
    cli()
