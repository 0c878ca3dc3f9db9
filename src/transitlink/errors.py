"""Exception hierarchy for transitlink.

All exceptions inherit from TransitlinkError. Planning errors are raised
before any provider call is issued; apply errors are recorded per entity.
"""

from __future__ import annotations

from typing import Any


class TransitlinkError(Exception):
    """Base exception for all transitlink errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# Topology declaration errors
class TopologyError(TransitlinkError):
    """Base exception for declared-topology errors."""


class TopologyLoadError(TopologyError):
    """Failed to read a topology file."""


class TopologyValidationError(TopologyError):
    """Topology data failed validation."""


# Planning errors
class PlanningError(TransitlinkError):
    """Base exception for errors detected while building a plan."""


class AllocationError(PlanningError):
    """Address space exhausted, mask too wide, or networks overlap."""


class UnknownNetworkError(PlanningError):
    """Reference to a network that is not declared."""

    def __init__(self, network: str, context: str | None = None) -> None:
        message = f"Unknown network: {network}"
        if context:
            message = f"{message} (referenced by {context})"
        super().__init__(message, {"network": network})
        self.network = network


class MissingTierError(PlanningError):
    """A network lacks the subnet tier a resource needs."""

    def __init__(self, network: str, tier: str) -> None:
        super().__init__(
            f"Network {network} has no {tier} tier",
            {"network": network, "tier": tier},
        )
        self.network = network
        self.tier = tier


class DuplicateAttachmentError(PlanningError):
    """A second attachment was planned for the same network."""

    def __init__(self, network: str) -> None:
        super().__init__(f"Attachment already planned for network {network}", {"network": network})
        self.network = network


class CycleError(PlanningError):
    """Dependency edges form a cycle."""

    def __init__(self, cycle: list[tuple[str, str]]) -> None:
        path = " -> ".join([edge[0] for edge in cycle] + [cycle[0][0]]) if cycle else "?"
        super().__init__(f"Dependency cycle detected: {path}", {"cycle": cycle})
        self.cycle = cycle


# Apply errors
class ApplyError(TransitlinkError):
    """Base exception for errors raised while applying a plan."""


class ApplyAborted(ApplyError):
    """The provisioning layer asked to stop submitting resources."""


class DependencyFailure(ApplyError):
    """An upstream resource did not apply, so this one was not submitted."""

    def __init__(self, key: str, dependency: str, root: str | None = None) -> None:
        root = root or dependency
        super().__init__(
            f"Skipped {key}: dependency {dependency} did not apply",
            {"resource": key, "dependency": dependency, "root": root},
        )
        self.key = key
        self.dependency = dependency
        self.root = root
