"""Declared networks and the topology that groups them."""

from __future__ import annotations

from ipaddress import IPv4Network
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import ValidationError

from transitlink.core.connections import ConnectionSet
from transitlink.core.schema import (
    HubSchema,
    InstanceSchema,
    NetworkSchema,
    ResourceKind,
    SubnetType,
    TierSchema,
    TopologySchema,
)
from transitlink.errors import TopologyLoadError, TopologyValidationError


def network_key(name: str) -> str:
    return f"network:{name}"


class Network:
    """
    Represents a declared network (VPC).

    The name is the primary identifier; the address block and tier
    declarations are immutable once the topology is loaded.
    """

    def __init__(self, schema: NetworkSchema) -> None:
        self._schema = schema

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Network:
        return cls(NetworkSchema(**data))

    @property
    def key(self) -> str:
        return network_key(self.name)

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.NETWORK

    @property
    def label(self) -> str:
        return self.name

    @property
    def name(self) -> str:
        return self._schema.name

    @property
    def cidr(self) -> IPv4Network:
        return self._schema.cidr

    @property
    def enable_dns_hostnames(self) -> bool:
        return self._schema.enable_dns_hostnames

    @property
    def enable_dns_support(self) -> bool:
        return self._schema.enable_dns_support

    @property
    def zones(self) -> int:
        """Number of zones; each tier gets one subnet per zone."""
        return self._schema.max_azs

    @property
    def tiers(self) -> list[TierSchema]:
        return self._schema.tiers

    @property
    def declared_transit_tier(self) -> str | None:
        return self._schema.transit_tier

    @property
    def transit_tier_name(self) -> str | None:
        """Name of the tier to attach to the hub (explicit or first isolated)."""
        if self._schema.transit_tier is not None:
            if any(t.name == self._schema.transit_tier for t in self.tiers):
                return self._schema.transit_tier
            return None
        for tier in self.tiers:
            if tier.subnet_type == SubnetType.ISOLATED:
                return tier.name
        return None

    @property
    def instance(self) -> InstanceSchema | None:
        return self._schema.instance

    def has_tier(self, name: str) -> bool:
        return any(t.name == name for t in self.tiers)

    def to_dict(self) -> dict[str, Any]:
        return self._schema.model_dump(mode="json")

    def __repr__(self) -> str:
        return f"Network({self.name}, cidr={self.cidr}, tiers={len(self.tiers)})"


class Topology:
    """
    Declared topology: networks, the shared hub and communication pairs.

    Loads from a YAML file or a dictionary and validates with
    TopologySchema. Networks are indexed by name in declaration order.
    """

    def __init__(
        self,
        networks: list[Network],
        connections: ConnectionSet,
        hub: HubSchema | None = None,
        tags: dict[str, str] | None = None,
    ) -> None:
        self._networks: dict[str, Network] = {n.name: n for n in networks}
        self._connections = connections
        self._hub = hub or HubSchema()
        self._tags = tags or {}

    @classmethod
    def load(cls, path: str | Path) -> Topology:
        """Load topology from YAML file."""
        path = Path(path)
        if not path.exists():
            raise TopologyLoadError(f"Topology file not found: {path}", {"path": str(path)})

        try:
            with path.open() as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TopologyLoadError(
                f"Invalid YAML in topology file: {e}",
                {"path": str(path)},
            ) from e
        except OSError as e:
            raise TopologyLoadError(
                f"Cannot read topology file: {e}",
                {"path": str(path)},
            ) from e

        if not isinstance(data, dict):
            raise TopologyLoadError(
                "Topology file must contain a YAML mapping",
                {"path": str(path)},
            )

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Topology:
        """Create topology from dictionary."""
        try:
            schema = TopologySchema.model_validate(data)
        except ValidationError as e:
            raise TopologyValidationError(
                f"Topology validation failed: {e.error_count()} errors",
                {"errors": e.errors(include_url=False)},
            ) from e

        networks = [Network(n) for n in schema.networks]
        connections = ConnectionSet.from_schemas(schema.connections)
        return cls(networks, connections, schema.hub, schema.tags)

    @property
    def hub(self) -> HubSchema:
        return self._hub

    @property
    def connections(self) -> ConnectionSet:
        return self._connections

    @property
    def tags(self) -> dict[str, str]:
        return dict(self._tags)

    @property
    def networks(self) -> dict[str, Network]:
        """Networks by name, in declaration order."""
        return dict(self._networks)

    def get(self, name: str) -> Network | None:
        """Get network by name."""
        return self._networks.get(name)

    def peers_of(self, name: str) -> list[Network]:
        """Declared networks that communicate with the named network."""
        return [self._networks[p] for p in self._connections.peers_of(name) if p in self._networks]

    def __len__(self) -> int:
        return len(self._networks)

    def __iter__(self) -> Iterator[Network]:
        return iter(self._networks.values())

    def __contains__(self, name: str) -> bool:
        return name in self._networks
