"""Tests for allocator module."""

from ipaddress import IPv4Network

import pytest

from transitlink.core.allocator import AddressPool, allocate_network, allocate_tiers, check_disjoint
from transitlink.core.network import Topology
from transitlink.core.schema import SubnetType, TierSchema
from transitlink.errors import AllocationError


@pytest.fixture
def tiers():
    """Public, application and transit tiers of mixed sizes."""
    return [
        TierSchema(name="Public", subnet_type=SubnetType.PUBLIC, cidr_mask=28),
        TierSchema(name="App", subnet_type=SubnetType.ISOLATED, cidr_mask=26),
        TierSchema(name="Transit", subnet_type=SubnetType.ISOLATED, cidr_mask=28),
    ]


class TestAddressPool:
    """Tests for AddressPool class."""

    def test_sequential_blocks(self):
        """Test blocks are handed out from the start of the parent."""
        pool = AddressPool(IPv4Network("10.0.1.0/24"))

        assert pool.allocate(28) == IPv4Network("10.0.1.0/28")
        assert pool.allocate(28) == IPv4Network("10.0.1.16/28")

    def test_alignment(self):
        """Test a larger block is aligned to its own size."""
        pool = AddressPool(IPv4Network("10.0.1.0/24"))
        pool.allocate(28)

        assert pool.allocate(26) == IPv4Network("10.0.1.64/26")

    def test_whole_parent(self):
        """Test the parent block itself can be allocated once."""
        pool = AddressPool(IPv4Network("10.0.1.0/24"))

        assert pool.allocate(24) == IPv4Network("10.0.1.0/24")
        assert pool.remaining == 0
        with pytest.raises(AllocationError):
            pool.allocate(28)

    def test_mask_wider_than_parent(self):
        pool = AddressPool(IPv4Network("10.0.1.0/24"))

        with pytest.raises(AllocationError) as exc_info:
            pool.allocate(20)
        assert exc_info.value.details["mask"] == 20

    def test_exhausted(self):
        pool = AddressPool(IPv4Network("10.0.1.0/24"))
        pool.allocate(25)
        pool.allocate(25)

        with pytest.raises(AllocationError):
            pool.allocate(26)


class TestAllocateTiers:
    """Tests for allocate_tiers function."""

    def test_first_two_tiers(self):
        """Test the reference layout of a /24 with two /28 tiers."""
        allocated = allocate_tiers(
            "vpc-a",
            IPv4Network("10.0.1.0/24"),
            [
                TierSchema(name="Public", subnet_type=SubnetType.PUBLIC, cidr_mask=28),
                TierSchema(name="Transit", subnet_type=SubnetType.ISOLATED, cidr_mask=28),
            ],
        )

        assert [t.name for t in allocated] == ["Public", "Transit"]
        assert allocated[0].subnets[0].cidr == IPv4Network("10.0.1.0/28")
        assert allocated[1].subnets[0].cidr == IPv4Network("10.0.1.16/28")
        assert allocated[0].is_public
        assert not allocated[1].is_public

    def test_contained_and_disjoint(self, tiers):
        """Test every subnet lies inside the parent and none overlap."""
        cidr = IPv4Network("10.0.1.0/24")
        allocated = allocate_tiers("vpc-a", cidr, tiers, zones=2)
        subnets = [s.cidr for t in allocated for s in t.subnets]

        assert len(subnets) == 6
        for subnet in subnets:
            assert subnet.subnet_of(cidr)
        for i, a in enumerate(subnets):
            for b in subnets[i + 1:]:
                assert not a.overlaps(b)

    def test_one_subnet_per_zone(self, tiers):
        """Test zone indices on each tier's subnets."""
        allocated = allocate_tiers("vpc-a", IPv4Network("10.0.0.0/22"), tiers, zones=3)

        for tier in allocated:
            assert [s.index for s in tier.subnets] == [0, 1, 2]
            assert all(s.cidr.prefixlen == tier.cidr_mask for s in tier.subnets)

    def test_deterministic(self, tiers):
        cidr = IPv4Network("10.0.1.0/24")
        assert allocate_tiers("vpc-a", cidr, tiers) == allocate_tiers("vpc-a", cidr, tiers)

    def test_error_names_tier(self):
        """Test exhaustion is reported against the tier that failed."""
        with pytest.raises(AllocationError) as exc_info:
            allocate_tiers(
                "vpc-a",
                IPv4Network("10.0.1.0/24"),
                [
                    TierSchema(name="Big", cidr_mask=25),
                    TierSchema(name="Bigger", cidr_mask=25),
                    TierSchema(name="Transit", cidr_mask=28),
                ],
            )

        assert "Transit" in str(exc_info.value)
        assert exc_info.value.details["tier"] == "Transit"
        assert exc_info.value.details["network"] == "vpc-a"

    def test_mask_wider_than_network(self):
        with pytest.raises(AllocationError) as exc_info:
            allocate_tiers("vpc-a", IPv4Network("10.0.1.0/24"), [TierSchema(name="Huge", cidr_mask=20)])
        assert exc_info.value.details["tier"] == "Huge"


class TestAllocateNetwork:
    """Tests for allocate_network and check_disjoint."""

    def test_layout(self, topology):
        layout = allocate_network(topology.get("vpc-b"))

        assert layout.name == "vpc-b"
        assert layout.tier("Transit").subnets[0].cidr == IPv4Network("10.0.2.16/28")
        assert [s.cidr for s in layout.public_subnets] == [IPv4Network("10.0.2.0/28")]
        assert layout.transit_tier().name == "Transit"

    def test_zones_from_network(self, hub_spoke):
        layout = allocate_network(hub_spoke.get("shared"))
        assert len(layout.public_subnets) == 2

    def test_disjoint_networks(self, topology):
        check_disjoint(topology)

    def test_overlapping_networks(self, topology_data):
        topology_data["networks"][1]["cidr"] = "10.0.0.0/16"
        topology = Topology.from_dict(topology_data)

        with pytest.raises(AllocationError) as exc_info:
            check_disjoint(topology)
        assert exc_info.value.details["networks"] == ["vpc-a", "vpc-b"]
