"""Documentation generation CLI command."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from transitlink.cli.main import Context, pass_context

console = Console()


@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("docs/networks"),
    help="Output directory for documentation",
)
@click.option(
    "--network",
    "-n",
    "network_filter",
    help="Generate docs for specific network only",
)
@click.option(
    "--index-only",
    is_flag=True,
    help="Generate only the index file",
)
@pass_context
def docs(
    ctx: Context,
    output: Path,
    network_filter: str | None,
    index_only: bool,
) -> None:
    """
    Generate topology documentation.

    Creates Markdown documentation for the plan and each network.

    Examples:

        # Generate all documentation
        transitlink docs

        # Generate docs for one network
        transitlink docs --network vpc-a
    """
    from transitlink.generators.markdown import generate_index, generate_network_doc

    try:
        plan = ctx.plan
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    output.mkdir(parents=True, exist_ok=True)
    generated_count = 0

    index_file = output / "index.md"
    index_file.write_text(generate_index(plan))
    generated_count += 1
    console.print(f"[green]Generated:[/green] {index_file}")

    if index_only:
        console.print(f"\n[bold]Generated {generated_count} file(s)[/bold]")
        return

    layouts = plan.layouts
    if network_filter:
        layout = plan.layout(network_filter)
        if not layout:
            console.print(f"[red]Network not found:[/red] {network_filter}")
            raise SystemExit(1)
        layouts = [layout]

    for layout in layouts:
        doc_file = output / f"{layout.name}.md"
        doc_file.write_text(generate_network_doc(layout, plan))
        generated_count += 1

        if ctx.verbose:
            console.print(f"[dim]Generated:[/dim] {doc_file}")

    console.print(f"\n[bold]Generated {generated_count} file(s) in {output}[/bold]")
