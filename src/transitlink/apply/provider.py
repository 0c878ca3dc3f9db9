"""Provisioning capability interface.

A provider is whatever turns planned resources into live ones. The
applier only talks to it through this protocol, handing over the planned
resource as the spec plus the ids of the resources it references.
"""

from __future__ import annotations

import importlib
import itertools
import threading
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from transitlink.core.network import Network
from transitlink.core.resources import (
    Attachment,
    Instance,
    Route,
    SecurityContext,
    SubnetTier,
    TransitHub,
)


@runtime_checkable
class Provider(Protocol):
    """Create/tag primitives of the external provisioning API."""

    def create_network(self, spec: Network) -> str: ...

    def create_subnet_tier(self, network_id: str, spec: SubnetTier) -> str: ...

    def create_security_context(self, network_id: str, spec: SecurityContext) -> str: ...

    def create_transit_hub(self, spec: TransitHub) -> str: ...

    def create_attachment(
        self, network_id: str, tier_id: str, hub_id: str, spec: Attachment
    ) -> str: ...

    def create_route(self, tier_id: str, spec: Route, target_id: str, depends_on: str) -> str: ...

    def create_instance(
        self, network_id: str, tier_id: str, context_id: str, spec: Instance
    ) -> str: ...

    def tag(self, resource_id: str, tags: dict[str, str]) -> None: ...

    def add_dependency(self, dependent_id: str, dependency_id: str) -> None: ...


@dataclass
class ProviderCall:
    """One recorded provider call."""

    method: str
    args: tuple[Any, ...]
    result: str | None = None


@dataclass
class RecordingProvider:
    """
    In-memory provider that hands out opaque ids and records every call.

    Used for dry runs and tests; safe to call from several threads.
    """

    calls: list[ProviderCall] = field(default_factory=list)
    tags: dict[str, dict[str, str]] = field(default_factory=dict)
    dependencies: list[tuple[str, str]] = field(default_factory=list)
    specs: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def _create(self, method: str, prefix: str, spec: Any, *refs: str) -> str:
        with self._lock:
            resource_id = f"{prefix}-{next(self._counter):08x}"
            self.calls.append(ProviderCall(method, (*refs, spec.key), resource_id))
            self.specs[resource_id] = spec
        return resource_id

    def create_network(self, spec: Network) -> str:
        return self._create("create_network", "vpc", spec)

    def create_subnet_tier(self, network_id: str, spec: SubnetTier) -> str:
        return self._create("create_subnet_tier", "subnet", spec, network_id)

    def create_security_context(self, network_id: str, spec: SecurityContext) -> str:
        return self._create("create_security_context", "sg", spec, network_id)

    def create_transit_hub(self, spec: TransitHub) -> str:
        return self._create("create_transit_hub", "tgw", spec)

    def create_attachment(
        self, network_id: str, tier_id: str, hub_id: str, spec: Attachment
    ) -> str:
        return self._create("create_attachment", "tgw-attach", spec, network_id, tier_id, hub_id)

    def create_route(self, tier_id: str, spec: Route, target_id: str, depends_on: str) -> str:
        return self._create("create_route", "route", spec, tier_id, target_id, depends_on)

    def create_instance(
        self, network_id: str, tier_id: str, context_id: str, spec: Instance
    ) -> str:
        return self._create("create_instance", "i", spec, network_id, tier_id, context_id)

    def tag(self, resource_id: str, tags: dict[str, str]) -> None:
        with self._lock:
            self.tags.setdefault(resource_id, {}).update(tags)
            self.calls.append(ProviderCall("tag", (resource_id,)))

    def add_dependency(self, dependent_id: str, dependency_id: str) -> None:
        with self._lock:
            self.dependencies.append((dependent_id, dependency_id))
            self.calls.append(ProviderCall("add_dependency", (dependent_id, dependency_id)))

    def created(self, method: str | None = None) -> list[ProviderCall]:
        """Create calls, optionally filtered by method name."""
        return [
            c for c in self.calls
            if c.method.startswith("create_") and (method is None or c.method == method)
        ]

    def id_for(self, key: str) -> str | None:
        """Id handed out for a planned resource key."""
        for resource_id, spec in self.specs.items():
            if spec.key == key:
                return resource_id
        return None


def load_provider(reference: str) -> Provider:
    """
    Load a provider from a 'module:attribute' reference.

    The attribute may be a provider instance, a class or a zero-argument
    factory.
    """
    module_name, _, attr = reference.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Provider reference must look like 'module:attribute': {reference}")

    module = importlib.import_module(module_name)
    target = getattr(module, attr)
    if isinstance(target, type) or (callable(target) and not isinstance(target, Provider)):
        provider = target()
    else:
        provider = target

    if not isinstance(provider, Provider):
        raise TypeError(f"{reference} does not implement the Provider protocol")
    return provider
