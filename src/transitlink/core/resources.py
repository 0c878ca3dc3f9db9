"""Planned resources produced by the planners.

Every resource exposes a stable ``key`` (its node in the build plan), a
``kind`` and a ``label`` used for the Name tag. Keys are derived from
declared names only, so two planning runs yield identical keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import IPv4Network

from transitlink.core.network import Network, network_key
from transitlink.core.schema import HubSchema, InstanceSchema, ResourceKind, SubnetType, TrafficScope
from transitlink.errors import MissingTierError

HUB_KEY = "transit-hub"


def tier_key(network: str, tier: str) -> str:
    return f"tier:{network}:{tier}"


def context_key(network: str) -> str:
    return f"security-context:{network}"


def attachment_key(network: str) -> str:
    return f"attachment:{network}"


@dataclass(frozen=True)
class Subnet:
    """One allocated subnet of a tier."""

    network: str
    tier: str
    index: int
    cidr: IPv4Network
    zone: int = 0


@dataclass(frozen=True)
class SubnetTier:
    """A named partition of a network's address block."""

    network: str
    name: str
    subnet_type: SubnetType
    cidr_mask: int
    subnets: tuple[Subnet, ...]

    @property
    def key(self) -> str:
        return tier_key(self.network, self.name)

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.SUBNET_TIER

    @property
    def label(self) -> str:
        return f"{self.network}/{self.name}"

    @property
    def network_key(self) -> str:
        return network_key(self.network)

    @property
    def is_public(self) -> bool:
        return self.subnet_type == SubnetType.PUBLIC


@dataclass(frozen=True)
class NetworkLayout:
    """A declared network together with its allocated tiers."""

    network: Network
    tiers: tuple[SubnetTier, ...]

    @property
    def name(self) -> str:
        return self.network.name

    @property
    def cidr(self) -> IPv4Network:
        return self.network.cidr

    @property
    def public_tiers(self) -> list[SubnetTier]:
        return [t for t in self.tiers if t.is_public]

    @property
    def public_subnets(self) -> list[Subnet]:
        return [s for t in self.public_tiers for s in t.subnets]

    def tier(self, name: str) -> SubnetTier | None:
        for t in self.tiers:
            if t.name == name:
                return t
        return None

    def transit_tier(self) -> SubnetTier:
        """The tier attached to the hub; raises MissingTierError when absent."""
        name = self.network.transit_tier_name
        tier = self.tier(name) if name else None
        if tier is None:
            raise MissingTierError(self.name, self.network.declared_transit_tier or "transit")
        return tier


@dataclass(frozen=True)
class IngressRule:
    """Allow traffic from a peer network's address block."""

    peer: str
    source: IPv4Network
    scope: TrafficScope = field(default_factory=TrafficScope)

    @property
    def description(self) -> str:
        return f"Allow {self.scope.describe()} from {self.peer} ({self.source})"


@dataclass
class SecurityContext:
    """
    Ingress rules protecting a network's compute placements.

    Rules are only added while planning; outbound traffic is unrestricted.
    """

    network: str
    rules: list[IngressRule] = field(default_factory=list)
    allow_all_outbound: bool = True

    @property
    def key(self) -> str:
        return context_key(self.network)

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.SECURITY_CONTEXT

    @property
    def label(self) -> str:
        return f"{self.network} security context"

    @property
    def network_key(self) -> str:
        return network_key(self.network)

    def add_ingress_rule(self, rule: IngressRule) -> bool:
        """Add a rule unless an identical one exists. Returns True if added."""
        if rule in self.rules:
            return False
        self.rules.append(rule)
        return True

    def rules_from(self, source: IPv4Network) -> list[IngressRule]:
        return [r for r in self.rules if r.source == source]


@dataclass(frozen=True)
class TransitHub:
    """The shared routing hub all networks attach to."""

    name: str
    amazon_side_asn: int = 65000
    auto_accept_shared_attachments: bool = True
    default_route_table_association: bool = True
    default_route_table_propagation: bool = True
    dns_support: bool = True
    multicast_support: bool = False

    @classmethod
    def from_schema(cls, schema: HubSchema) -> TransitHub:
        return cls(**schema.model_dump())

    @property
    def key(self) -> str:
        return HUB_KEY

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.TRANSIT_HUB

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class Attachment:
    """Binding of one network's transit-tier subnets to the hub."""

    network: str
    tier: str
    subnets: tuple[Subnet, ...]
    hub: str = HUB_KEY

    @property
    def key(self) -> str:
        return attachment_key(self.network)

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.ATTACHMENT

    @property
    def label(self) -> str:
        return f"Transit Gateway attachment for {self.network}"

    @property
    def network_key(self) -> str:
        return network_key(self.network)

    @property
    def tier_key(self) -> str:
        return tier_key(self.network, self.tier)


@dataclass(frozen=True)
class Route:
    """Route in a public subnet's table: peer block via the hub."""

    owner: str
    peer: str
    tier: str
    subnet: Subnet
    destination: IPv4Network
    target: str = HUB_KEY

    @property
    def key(self) -> str:
        return f"route:{self.owner}:{self.tier}:{self.subnet.index}:{self.peer}"

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.ROUTE

    @property
    def label(self) -> str:
        return f"Route to {self.peer} from {self.owner} {self.tier} subnet {self.subnet.index}"

    @property
    def depends_on(self) -> str:
        """Key of the owner's attachment, which must exist first."""
        return attachment_key(self.owner)

    @property
    def tier_key(self) -> str:
        return tier_key(self.owner, self.tier)


@dataclass(frozen=True)
class Instance:
    """Compute instance in a network's first public subnet."""

    network: str
    tier: str
    subnet: Subnet
    spec: InstanceSchema

    @property
    def key(self) -> str:
        return f"instance:{self.network}"

    @property
    def kind(self) -> ResourceKind:
        return ResourceKind.INSTANCE

    @property
    def label(self) -> str:
        return f"Instance on {self.network}"

    @property
    def network_key(self) -> str:
        return network_key(self.network)

    @property
    def tier_key(self) -> str:
        return tier_key(self.network, self.tier)

    @property
    def context_key(self) -> str:
        return context_key(self.network)
