"""Topology planning: declared topology in, build plan out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from transitlink.core.allocator import allocate_network, check_disjoint
from transitlink.core.attachments import AttachmentPlanner
from transitlink.core.graph import BuildPlan, assemble
from transitlink.core.network import Topology
from transitlink.core.resources import (
    Attachment,
    Instance,
    NetworkLayout,
    Route,
    SecurityContext,
    TransitHub,
)
from transitlink.core.routes import inject_routes
from transitlink.core.rules import generate_rules, security_contexts_for
from transitlink.errors import MissingTierError
from transitlink.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TopologyPlan:
    """Everything the planner produced, plus the assembled build plan."""

    layouts: list[NetworkLayout]
    contexts: dict[str, SecurityContext]
    hub: TransitHub
    attachments: dict[str, Attachment]
    routes: list[Route]
    instances: list[Instance]
    build: BuildPlan

    def layout(self, network: str) -> NetworkLayout | None:
        for layout in self.layouts:
            if layout.name == network:
                return layout
        return None

    def routes_for(self, network: str) -> list[Route]:
        """Routes owned by a network."""
        return [r for r in self.routes if r.owner == network]

    def summary(self) -> dict[str, Any]:
        """Resource counts by kind, plus edge count."""
        summary: dict[str, Any] = dict(self.build.counts())
        summary["rules"] = sum(len(c.rules) for c in self.contexts.values())
        summary["edges"] = len(self.build.edges())
        return summary

    def to_dict(self) -> dict[str, Any]:
        data = self.build.to_dict()
        data["summary"] = self.summary()
        return data


class TopologyPlanner:
    """
    Derives the full resource graph from a declared topology.

    Stages run in dependency order: tier allocation, security contexts and
    rules, hub attachments, route injection, instances, assembly. Any error
    aborts the whole plan; nothing is returned partially.
    """

    def __init__(self, topology: Topology, *, check_overlaps: bool = False) -> None:
        self._topology = topology
        self._check_overlaps = check_overlaps

    @property
    def topology(self) -> Topology:
        return self._topology

    def plan(self) -> TopologyPlan:
        topology = self._topology
        networks = topology.networks

        if self._check_overlaps:
            check_disjoint(topology)

        layouts = [allocate_network(n) for n in topology]

        contexts = security_contexts_for(topology)
        generate_rules(contexts, networks, topology.connections)

        hub = TransitHub.from_schema(topology.hub)
        attachments = AttachmentPlanner(hub).plan_all(layouts)

        routes = inject_routes(layouts, topology.connections, attachments, hub)
        instances = self._plan_instances(layouts)

        build = assemble(
            layouts,
            contexts,
            hub,
            attachments,
            routes,
            instances,
            tags=topology.tags,
        )

        logger.info(
            "Planned %d network(s), %d attachment(s), %d route(s), %d resource(s) total",
            len(layouts),
            len(attachments),
            len(routes),
            len(build),
        )
        return TopologyPlan(
            layouts=layouts,
            contexts=contexts,
            hub=hub,
            attachments=attachments,
            routes=routes,
            instances=instances,
            build=build,
        )

    def _plan_instances(self, layouts: list[NetworkLayout]) -> list[Instance]:
        """Place declared instances in each network's first public subnet."""
        instances = []
        for layout in layouts:
            spec = layout.network.instance
            if spec is None:
                continue
            public = layout.public_tiers
            if not public or not public[0].subnets:
                raise MissingTierError(layout.name, "public")
            tier = public[0]
            instances.append(
                Instance(network=layout.name, tier=tier.name, subnet=tier.subnets[0], spec=spec)
            )
        return instances


def plan_topology(topology: Topology, *, check_overlaps: bool = False) -> TopologyPlan:
    """Plan a topology in one call."""
    return TopologyPlanner(topology, check_overlaps=check_overlaps).plan()
