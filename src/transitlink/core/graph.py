"""Build plan: resources as a dependency DAG.

Edges point from a dependency to its dependent ("must exist before"). Nodes
carry the planned resource, its kind, its tags and its insertion index,
which breaks ties so the linearization follows declaration order.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Sequence

import networkx as nx

from transitlink.core.resources import (
    Attachment,
    Instance,
    NetworkLayout,
    Route,
    SecurityContext,
    TransitHub,
)
from transitlink.core.schema import ResourceKind
from transitlink.errors import CycleError, PlanningError
from transitlink.logging import get_logger

logger = get_logger(__name__)


class BuildPlan:
    """Directed acyclic graph of resource-creation operations."""

    def __init__(self) -> None:
        self._graph = nx.DiGraph()

    def add(self, resource: Any, tags: Mapping[str, str] | None = None) -> str:
        """Add a resource node. Keys must be unique."""
        key = resource.key
        if key in self._graph:
            raise PlanningError(f"Resource declared twice: {key}", {"resource": key})
        self._graph.add_node(
            key,
            resource=resource,
            kind=ResourceKind(resource.kind),
            tags=dict(tags or {}),
            index=len(self._graph),
        )
        return key

    def require(self, dependent: str, dependency: str, *, explicit: bool = False) -> None:
        """
        Declare that dependency must exist before dependent.

        Explicit edges are ordering constraints that no property reference
        implies (attachment before route); they are forwarded to the
        provider as dependencies.
        """
        for key in (dependent, dependency):
            if key not in self._graph:
                raise PlanningError(f"Unknown resource in dependency: {key}", {"resource": key})
        self._graph.add_edge(dependency, dependent, explicit=explicit)

    def order(self) -> list[str]:
        """Topological linearization, declaration order breaking ties."""
        try:
            return list(
                nx.lexicographical_topological_sort(self._graph, key=self._index)
            )
        except nx.NetworkXUnfeasible as e:
            raise CycleError(list(nx.find_cycle(self._graph))) from e

    def generations(self) -> list[list[str]]:
        """Batches of resources with no dependency path between them."""
        self.order()
        return [sorted(gen, key=self._index) for gen in nx.topological_generations(self._graph)]

    def resource(self, key: str) -> Any:
        return self._graph.nodes[key]["resource"]

    def kind(self, key: str) -> ResourceKind:
        return self._graph.nodes[key]["kind"]

    def tags(self, key: str) -> dict[str, str]:
        return dict(self._graph.nodes[key]["tags"])

    def dependencies(self, key: str) -> list[str]:
        """Direct dependencies of a resource."""
        return sorted(self._graph.predecessors(key), key=self._index)

    def explicit_dependencies(self, key: str) -> list[str]:
        return [d for d in self.dependencies(key) if self._graph.edges[d, key]["explicit"]]

    def dependents(self, key: str) -> list[str]:
        """Direct dependents of a resource."""
        return sorted(self._graph.successors(key), key=self._index)

    def downstream(self, key: str) -> set[str]:
        """Everything that transitively depends on a resource."""
        return nx.descendants(self._graph, key)

    def has_edge(self, dependency: str, dependent: str) -> bool:
        return self._graph.has_edge(dependency, dependent)

    def by_kind(self, kind: ResourceKind) -> list[Any]:
        """Resources of one kind in declaration order."""
        keys = [k for k, data in self._graph.nodes(data=True) if data["kind"] == kind]
        return [self.resource(k) for k in sorted(keys, key=self._index)]

    def edges(self) -> list[tuple[str, str]]:
        """(dependency, dependent) pairs in declaration order."""
        return sorted(self._graph.edges(), key=lambda e: (self._index(e[0]), self._index(e[1])))

    def counts(self) -> dict[str, int]:
        """Number of resources per kind."""
        counts = {kind.value: 0 for kind in ResourceKind}
        for _, data in self._graph.nodes(data=True):
            counts[data["kind"].value] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Nodes in linearized order plus the edge list."""
        return {
            "nodes": [
                {
                    "key": key,
                    "kind": self.kind(key).value,
                    "label": self.resource(key).label,
                    "tags": self.tags(key),
                }
                for key in self.order()
            ],
            "edges": [
                {"from": a, "to": b, "explicit": self._graph.edges[a, b]["explicit"]}
                for a, b in self.edges()
            ],
        }

    @property
    def graph(self) -> nx.DiGraph:
        """Read-only view of the underlying graph."""
        return self._graph.copy(as_view=True)

    def _index(self, key: str) -> int:
        return self._graph.nodes[key]["index"]

    def __len__(self) -> int:
        return len(self._graph)

    def __iter__(self) -> Iterator[str]:
        return iter(self.order())

    def __contains__(self, key: str) -> bool:
        return key in self._graph


def assemble(
    layouts: Sequence[NetworkLayout],
    contexts: Mapping[str, SecurityContext],
    hub: TransitHub,
    attachments: Mapping[str, Attachment],
    routes: Iterable[Route],
    instances: Iterable[Instance] = (),
    tags: Mapping[str, str] | None = None,
) -> BuildPlan:
    """
    Collect planned resources into one build plan.

    Every resource is tagged with its Name plus the topology-wide tags.
    The plan is checked for cycles before it is returned.
    """
    tags = dict(tags or {})
    plan = BuildPlan()

    def add(resource: Any) -> str:
        return plan.add(resource, {"Name": resource.label, **tags})

    for layout in layouts:
        net = add(layout.network)
        for tier in layout.tiers:
            plan.require(add(tier), net)
        context = contexts[layout.name]
        plan.require(add(context), net)

    add(hub)

    for attachment in attachments.values():
        key = add(attachment)
        plan.require(key, hub.key)
        plan.require(key, attachment.network_key)
        plan.require(key, attachment.tier_key)

    for instance in instances:
        key = add(instance)
        plan.require(key, instance.network_key)
        plan.require(key, instance.tier_key)
        plan.require(key, instance.context_key)

    for route in routes:
        key = add(route)
        plan.require(key, route.tier_key)
        plan.require(key, route.target)
        plan.require(key, route.depends_on, explicit=True)

    plan.order()
    logger.debug("Assembled plan: %d resources, %d edges", len(plan), len(plan.edges()))
    return plan
