"""Subnet tier allocation.

Partitions a network's address block into its declared tiers. Blocks are
handed out sequentially, each aligned to its own size, one subnet per zone
per tier in declaration order:

    10.0.1.0/24, Public:/28, Transit:/28
    -> Public  10.0.1.0/28
    -> Transit 10.0.1.16/28
"""

from __future__ import annotations

from ipaddress import IPv4Network
from typing import Iterable, Sequence

from transitlink.core.network import Network
from transitlink.core.resources import NetworkLayout, Subnet, SubnetTier
from transitlink.core.schema import TierSchema
from transitlink.errors import AllocationError
from transitlink.logging import get_logger

logger = get_logger(__name__)


class AddressPool:
    """Sequential allocator over one parent block."""

    def __init__(self, parent: IPv4Network) -> None:
        self._parent = parent
        self._cursor = int(parent.network_address)
        self._end = int(parent.broadcast_address) + 1

    @property
    def parent(self) -> IPv4Network:
        return self._parent

    @property
    def remaining(self) -> int:
        """Addresses left after the cursor (ignores alignment)."""
        return self._end - self._cursor

    def allocate(self, mask: int) -> IPv4Network:
        """Return the next free block of the given prefix length."""
        if mask < self._parent.prefixlen or mask > self._parent.max_prefixlen:
            raise AllocationError(
                f"Cannot carve /{mask} out of {self._parent}",
                {"parent": str(self._parent), "mask": mask},
            )

        size = 1 << (self._parent.max_prefixlen - mask)
        start = -(-self._cursor // size) * size
        if start + size > self._end:
            raise AllocationError(
                f"Address space of {self._parent} exhausted for /{mask}",
                {"parent": str(self._parent), "mask": mask},
            )

        self._cursor = start + size
        return IPv4Network((start, mask))


def allocate_tiers(
    network: str,
    cidr: IPv4Network,
    tiers: Sequence[TierSchema],
    zones: int = 1,
) -> tuple[SubnetTier, ...]:
    """
    Allocate every tier of a network.

    Raises AllocationError naming the first tier that does not fit.
    """
    pool = AddressPool(cidr)
    allocated = []

    for tier in tiers:
        subnets = []
        for zone in range(zones):
            try:
                block = pool.allocate(tier.cidr_mask)
            except AllocationError as e:
                raise AllocationError(
                    f"Tier '{tier.name}' of network {network} does not fit in {cidr}",
                    {"network": network, "tier": tier.name, "mask": tier.cidr_mask, "zone": zone},
                ) from e
            subnets.append(Subnet(network=network, tier=tier.name, index=zone, cidr=block, zone=zone))

        allocated.append(
            SubnetTier(
                network=network,
                name=tier.name,
                subnet_type=tier.subnet_type,
                cidr_mask=tier.cidr_mask,
                subnets=tuple(subnets),
            )
        )
        logger.debug("Allocated %s/%s: %s", network, tier.name, ", ".join(str(s.cidr) for s in subnets))

    return tuple(allocated)


def allocate_network(network: Network) -> NetworkLayout:
    """Allocate a declared network's tiers."""
    tiers = allocate_tiers(network.name, network.cidr, network.tiers, network.zones)
    return NetworkLayout(network=network, tiers=tiers)


def check_disjoint(networks: Iterable[Network]) -> None:
    """Raise AllocationError if any two networks' address blocks overlap."""
    seen: list[Network] = []
    for network in networks:
        for other in seen:
            if network.cidr.overlaps(other.cidr):
                raise AllocationError(
                    f"Network {network.name} ({network.cidr}) overlaps {other.name} ({other.cidr})",
                    {"networks": [other.name, network.name]},
                )
        seen.append(network)
