"""Graphviz DOT diagram generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from transitlink.core.schema import ResourceKind

if TYPE_CHECKING:
    from transitlink.core.planner import TopologyPlan

FILL_COLORS = {
    ResourceKind.NETWORK: "lightblue",
    ResourceKind.SUBNET_TIER: "lightcyan",
    ResourceKind.SECURITY_CONTEXT: "lightyellow",
    ResourceKind.TRANSIT_HUB: "orange",
    ResourceKind.ATTACHMENT: "moccasin",
    ResourceKind.ROUTE: "palegreen",
    ResourceKind.INSTANCE: "lightgray",
}


def generate_dot(plan: TopologyPlan) -> str:
    """
    Generate Graphviz DOT diagram of the build plan.

    Can be rendered with: dot -Tpng topology.dot -o topology.png
    """
    build = plan.build
    lines = [
        "digraph Topology {",
        "    rankdir=LR;",
        "    node [shape=box, style=filled, fillcolor=lightblue];",
        "    edge [fontsize=10];",
        "",
    ]

    placed: set[str] = set()

    for i, layout in enumerate(plan.layouts):
        lines.append(f"    subgraph cluster_{i} {{")
        lines.append(f'        label="{layout.name} ({layout.cidr})";')
        lines.append("        style=dashed;")
        lines.append("        color=gray;")
        lines.append("")

        for key in build.order():
            resource = build.resource(key)
            owner = getattr(resource, "network", None) or getattr(resource, "owner", None)
            if key == layout.network.key or owner == layout.name:
                lines.append(f"        {_node(plan, key)}")
                placed.add(key)

        lines.append("    }")
        lines.append("")

    for key in build.order():
        if key not in placed:
            lines.append(f"    {_node(plan, key)}")

    lines.append("")
    lines.append("    // Dependencies")

    for dependency, dependent in build.edges():
        if dependency in build.explicit_dependencies(dependent):
            style = "color=red, penwidth=2"
        else:
            style = "color=black"
        lines.append(f'    "{dependency}" -> "{dependent}" [{style}];')

    lines.append("}")

    return "\n".join(lines)


def _node(plan: TopologyPlan, key: str) -> str:
    build = plan.build
    kind = build.kind(key)
    resource = build.resource(key)
    label = resource.label
    if kind == ResourceKind.ROUTE:
        label = f"{resource.destination} via hub"
    elif kind == ResourceKind.SUBNET_TIER:
        label = f"{resource.name}\\n" + "\\n".join(str(s.cidr) for s in resource.subnets)
    elif kind == ResourceKind.NETWORK:
        label = f"{resource.name}\\n{resource.cidr}"
    shape = ", shape=ellipse" if kind == ResourceKind.TRANSIT_HUB else ""
    return f'"{key}" [label="{label}", fillcolor={FILL_COLORS[kind]}{shape}];'
