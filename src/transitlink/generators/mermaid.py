"""Mermaid diagram generation."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from transitlink.core.schema import ResourceKind

if TYPE_CHECKING:
    from transitlink.core.planner import TopologyPlan


def _node_id(key: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", key)


def generate_mermaid(plan: TopologyPlan) -> str:
    """
    Generate Mermaid flowchart of the build plan.

    Returns Markdown with embedded Mermaid diagram.
    """
    build = plan.build
    lines = ["# Transit Topology", "", "```mermaid", "flowchart LR"]

    # One subgraph per network
    for layout in plan.layouts:
        lines.append(f"    subgraph {_node_id(layout.network.key)}_group[\"{layout.name} {layout.cidr}\"]")
        owned = [layout.network.key, plan.contexts[layout.name].key]
        owned += [t.key for t in layout.tiers]
        if layout.name in plan.attachments:
            owned.append(plan.attachments[layout.name].key)
        owned += [i.key for i in plan.instances if i.network == layout.name]
        owned += [r.key for r in plan.routes_for(layout.name)]
        for key in owned:
            lines.append(f"        {_node_id(key)}[\"{_label(plan, key)}\"]")
        lines.append("    end")

    lines.append(f"    {_node_id(plan.hub.key)}((\"{plan.hub.label}\"))")

    # Dependencies
    lines.append("")
    lines.append("    %% Dependencies")

    for dependency, dependent in build.edges():
        arrow = "==>" if dependency in build.explicit_dependencies(dependent) else "-->"
        lines.append(f"    {_node_id(dependency)} {arrow} {_node_id(dependent)}")

    lines.append("```")
    lines.append("")
    lines.append("## Legend")
    lines.append("")
    lines.append("- `==>` Explicit dependency (attachment before route)")
    lines.append("- `-->` Reference dependency")

    return "\n".join(lines)


def _label(plan: TopologyPlan, key: str) -> str:
    build = plan.build
    resource = build.resource(key)
    kind = build.kind(key)
    if kind == ResourceKind.SUBNET_TIER:
        blocks = ", ".join(str(s.cidr) for s in resource.subnets)
        return f"{resource.name} {blocks}"
    if kind == ResourceKind.ROUTE:
        return f"route {resource.destination} via hub"
    if kind == ResourceKind.SECURITY_CONTEXT:
        return f"security context ({len(resource.rules)} rules)"
    return resource.label
