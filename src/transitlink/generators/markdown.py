"""Markdown documentation generation."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from transitlink.core.planner import TopologyPlan
    from transitlink.core.resources import NetworkLayout


def generate_network_doc(layout: NetworkLayout, plan: TopologyPlan) -> str:
    """Generate Markdown documentation for a single network."""
    network = layout.network
    lines = [
        f"# {network.name}",
        "",
        f"**CIDR:** `{network.cidr}`  ",
        f"**Zones:** {network.zones}  ",
        f"**DNS hostnames:** {'enabled' if network.enable_dns_hostnames else 'disabled'}  ",
        f"**DNS support:** {'enabled' if network.enable_dns_support else 'disabled'}  ",
        "",
        "## Subnet Tiers",
        "",
        "| Tier | Type | Mask | Subnets |",
        "|------|------|------|---------|",
    ]

    for tier in layout.tiers:
        subnets = ", ".join(f"`{s.cidr}`" for s in tier.subnets)
        lines.append(f"| {tier.name} | {tier.subnet_type.value} | /{tier.cidr_mask} | {subnets} |")

    lines.append("")

    # Ingress rules
    lines.extend([
        "## Ingress Rules",
        "",
    ])

    context = plan.contexts[network.name]
    if context.rules:
        lines.append("| Peer | Source | Scope |")
        lines.append("|------|--------|-------|")
        for rule in context.rules:
            lines.append(f"| {rule.peer} | `{rule.source}` | {rule.scope.describe()} |")
    else:
        lines.append("*No ingress rules*")

    lines.append("")

    # Attachment
    attachment = plan.attachments.get(network.name)
    if attachment:
        subnets = ", ".join(f"`{s.cidr}`" for s in attachment.subnets)
        lines.extend([
            "## Hub Attachment",
            "",
            f"Tier **{attachment.tier}** ({subnets}) attached to **{plan.hub.name}**.",
            "",
        ])

    # Routes
    routes = plan.routes_for(network.name)
    if routes:
        lines.extend([
            "## Routes",
            "",
            "| Subnet | Destination | Target | Depends On |",
            "|--------|-------------|--------|------------|",
        ])
        for route in routes:
            lines.append(
                f"| {route.tier} {route.subnet.index} (`{route.subnet.cidr}`) | "
                f"`{route.destination}` | {plan.hub.name} | `{route.depends_on}` |"
            )
        lines.append("")

    instances = [i for i in plan.instances if i.network == network.name]
    for instance in instances:
        lines.extend([
            "## Instance",
            "",
            f"- Type: `{instance.spec.instance_type}`",
            f"- Image: `{instance.spec.machine_image}`",
            f"- Subnet: `{instance.subnet.cidr}` ({instance.tier})",
            f"- Root volume: {instance.spec.volume_size_gb} GiB {instance.spec.volume_type}",
            "",
        ])

    lines.extend([
        "---",
        f"*Generated: {datetime.now().isoformat()}*",
    ])

    return "\n".join(lines)


def generate_index(plan: TopologyPlan) -> str:
    """Generate index page listing networks and the build order."""
    summary = plan.summary()
    hub = plan.hub
    lines = [
        "# Transit Topology Index",
        "",
        f"Networks: {summary['network']}  ",
        f"Routes: {summary['route']}  ",
        f"Resources: {len(plan.build)} ({summary['edges']} dependencies)  ",
        "",
        "## Transit Hub",
        "",
        f"- Name: {hub.name}",
        f"- ASN: {hub.amazon_side_asn}",
        f"- Auto-accept shared attachments: {'yes' if hub.auto_accept_shared_attachments else 'no'}",
        f"- Default route table propagation: {'yes' if hub.default_route_table_propagation else 'no'}",
        "",
        "## Networks",
        "",
        "| Network | CIDR | Tiers | Peers |",
        "|---------|------|-------|-------|",
    ]

    for layout in plan.layouts:
        peers = sorted({r.peer for r in plan.contexts[layout.name].rules})
        lines.append(
            f"| [{layout.name}]({layout.name}.md) | `{layout.cidr}` | "
            f"{len(layout.tiers)} | {', '.join(peers) or '-'} |"
        )

    lines.extend([
        "",
        "## Build Order",
        "",
    ])

    for i, key in enumerate(plan.build.order(), 1):
        deps = plan.build.dependencies(key)
        after = f" (after {', '.join(f'`{d}`' for d in deps)})" if deps else ""
        lines.append(f"{i}. `{key}`{after}")

    lines.extend([
        "",
        "---",
        f"*Generated: {datetime.now().isoformat()}*",
    ])

    return "\n".join(lines)
