"""Diagram generation CLI command."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from transitlink.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["mermaid", "dot", "all"]),
    default="mermaid",
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("docs/diagrams"),
    help="Output directory",
)
@click.option(
    "--stdout",
    is_flag=True,
    help="Print to stdout instead of file",
)
@pass_context
def diagram(
    ctx: Context,
    output_format: str,
    output: Path,
    stdout: bool,
) -> None:
    """
    Generate build plan diagrams.

    Examples:

        # Generate Mermaid diagram
        transitlink diagram

        # Generate DOT diagram to stdout
        transitlink diagram --format dot --stdout
    """
    from transitlink.generators.dot import generate_dot
    from transitlink.generators.mermaid import generate_mermaid

    try:
        plan = ctx.plan
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    generators = {
        "mermaid": (generate_mermaid, "topology.md"),
        "dot": (generate_dot, "topology.dot"),
    }

    formats_to_generate = list(generators.keys()) if output_format == "all" else [output_format]

    for fmt in formats_to_generate:
        generator, filename = generators[fmt]
        content = generator(plan)

        if stdout:
            click.echo(content)
        else:
            output.mkdir(parents=True, exist_ok=True)
            output_file = output / filename
            output_file.write_text(content)
            console.print(f"[green]Generated:[/green] {output_file}")

    if not stdout:
        console.print(f"\n[bold]Diagrams written to:[/bold] {output}")
