"""Pydantic schemas for declared topology validation."""

from __future__ import annotations

from enum import Enum
from ipaddress import IPv4Network
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

# Names become part of resource keys, which are ":"-separated
NAME_PATTERN = r"^[^:]+$"


class SubnetType(str, Enum):
    """Role of a subnet tier."""

    PUBLIC = "public"  # Route table reaches the internet and peers via the hub
    ISOLATED = "isolated"  # No default route; used for hub attachments


class ResourceKind(str, Enum):
    """Kinds of planned resources."""

    NETWORK = "network"
    SUBNET_TIER = "subnet_tier"
    SECURITY_CONTEXT = "security_context"
    TRANSIT_HUB = "transit_hub"
    ATTACHMENT = "attachment"
    ROUTE = "route"
    INSTANCE = "instance"


class TierSchema(BaseModel):
    """A subnet tier declaration (one subnet per zone)."""

    name: str = Field(..., min_length=1, pattern=NAME_PATTERN)
    subnet_type: SubnetType = SubnetType.PUBLIC
    cidr_mask: int = Field(..., ge=16, le=28)


class InstanceSchema(BaseModel):
    """Compute instance placed in a network's first public subnet."""

    instance_type: str = "t3.micro"
    machine_image: str = "amazon-linux-2"
    device_name: str = "/dev/xvda"
    volume_size_gb: int = Field(default=8, ge=1)
    volume_type: str = "gp3"
    propagate_tags_to_volume: bool = True


class NetworkSchema(BaseModel):
    """
    Schema for a declared network.

    Tiers are allocated in declaration order. transit_tier names the tier
    used for the hub attachment; when omitted the first isolated tier is used.
    """

    name: str = Field(..., min_length=1, pattern=NAME_PATTERN)
    cidr: IPv4Network
    enable_dns_hostnames: bool = True
    enable_dns_support: bool = True
    max_azs: int = Field(default=1, ge=1, le=6)
    tiers: list[TierSchema] = Field(default_factory=list)
    transit_tier: str | None = None
    instance: InstanceSchema | None = None

    @field_validator("tiers")
    @classmethod
    def validate_unique_tiers(cls, v: list[TierSchema]) -> list[TierSchema]:
        seen: set[str] = set()
        for tier in v:
            if tier.name in seen:
                raise ValueError(f"Duplicate tier name: {tier.name}")
            seen.add(tier.name)
        return v


class TrafficScope(BaseModel):
    """Protocol and port range an ingress rule admits."""

    model_config = {"frozen": True}

    protocol: Literal["all", "tcp", "udp", "icmp"] = "all"
    from_port: int | None = Field(default=None, ge=0, le=65535)
    to_port: int | None = Field(default=None, ge=0, le=65535)

    @model_validator(mode="after")
    def validate_ports(self) -> TrafficScope:
        if self.protocol in ("all", "icmp"):
            if self.from_port is not None or self.to_port is not None:
                raise ValueError(f"Ports are not allowed for protocol '{self.protocol}'")
            return self
        if self.from_port is None:
            raise ValueError(f"from_port is required for protocol '{self.protocol}'")
        if self.to_port is not None and self.to_port < self.from_port:
            raise ValueError("to_port must not be lower than from_port")
        return self

    @property
    def is_all_traffic(self) -> bool:
        return self.protocol == "all"

    def describe(self) -> str:
        """Human-readable scope, e.g. 'all traffic' or 'tcp 443'."""
        if self.is_all_traffic:
            return "all traffic"
        if self.protocol == "icmp":
            return "icmp"
        if self.to_port is None or self.to_port == self.from_port:
            return f"{self.protocol} {self.from_port}"
        return f"{self.protocol} {self.from_port}-{self.to_port}"


class ConnectionSchema(BaseModel):
    """A declared communication pair between two networks."""

    networks: list[str] = Field(..., min_length=2, max_length=2)
    scope: TrafficScope = Field(default_factory=TrafficScope)
    description: str | None = None

    @field_validator("networks")
    @classmethod
    def validate_distinct(cls, v: list[str]) -> list[str]:
        if v[0] == v[1]:
            raise ValueError(f"Network cannot be connected to itself: {v[0]}")
        return v


class HubSchema(BaseModel):
    """Transit hub options."""

    name: str = "Transit Gateway"
    amazon_side_asn: int = Field(default=65000, ge=1, le=4294967294)
    auto_accept_shared_attachments: bool = True
    default_route_table_association: bool = True
    default_route_table_propagation: bool = True
    dns_support: bool = True
    multicast_support: bool = False


class TopologySchema(BaseModel):
    """
    Schema for a complete topology file.

    Connection references are not checked here; unknown networks are a
    planning error so they surface from the rule generator.
    """

    hub: HubSchema = Field(default_factory=HubSchema)
    networks: list[NetworkSchema] = Field(..., min_length=1)
    connections: list[ConnectionSchema] = Field(default_factory=list)
    tags: dict[str, str] = Field(default_factory=dict)

    @field_validator("networks")
    @classmethod
    def validate_unique_networks(cls, v: list[NetworkSchema]) -> list[NetworkSchema]:
        seen: set[str] = set()
        for network in v:
            if network.name in seen:
                raise ValueError(f"Duplicate network name: {network.name}")
            seen.add(network.name)
        return v
