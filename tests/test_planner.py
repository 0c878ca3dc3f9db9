"""Tests for planner module."""

from ipaddress import IPv4Network

import pytest

from transitlink.core.network import Topology
from transitlink.core.planner import TopologyPlanner, plan_topology
from transitlink.core.schema import ResourceKind
from transitlink.errors import AllocationError, MissingTierError, UnknownNetworkError


class TestTwoNetworkPlan:
    """Tests for the plan of two connected networks."""

    @pytest.fixture
    def plan(self, topology):
        return plan_topology(topology)

    def test_summary(self, plan):
        summary = plan.summary()

        assert summary["network"] == 2
        assert summary["subnet_tier"] == 4
        assert summary["security_context"] == 2
        assert summary["transit_hub"] == 1
        assert summary["attachment"] == 2
        assert summary["route"] == 2
        assert summary["rules"] == 2

    def test_layouts(self, plan):
        layout = plan.layout("vpc-a")

        assert layout.tier("Public").subnets[0].cidr == IPv4Network("10.0.1.0/28")
        assert layout.tier("Transit").subnets[0].cidr == IPv4Network("10.0.1.16/28")
        assert plan.layout("vpc-x") is None

    def test_rules(self, plan):
        assert [r.source for r in plan.contexts["vpc-a"].rules] == [IPv4Network("10.0.2.0/24")]
        assert [r.source for r in plan.contexts["vpc-b"].rules] == [IPv4Network("10.0.1.0/24")]

    def test_routes(self, plan):
        (route,) = plan.routes_for("vpc-b")

        assert route.destination == IPv4Network("10.0.1.0/24")
        assert route.depends_on == "attachment:vpc-b"

    def test_hub_defaults(self, plan):
        assert plan.hub.amazon_side_asn == 65000
        assert plan.hub.auto_accept_shared_attachments
        assert plan.hub.default_route_table_propagation
        assert not plan.hub.multicast_support

    def test_deterministic(self, topology):
        """Test planning twice yields identical output."""
        assert plan_topology(topology).to_dict() == plan_topology(topology).to_dict()

    def test_to_dict(self, plan):
        data = plan.to_dict()

        assert len(data["nodes"]) == 13
        assert data["summary"]["edges"] == len(data["edges"])


class TestHubSpokePlan:
    """Tests for a hub network with two unconnected spokes."""

    @pytest.fixture
    def plan(self, hub_spoke):
        return plan_topology(hub_spoke)

    def test_routes_per_subnet_and_peer(self, plan):
        assert len(plan.routes_for("shared")) == 4
        assert len(plan.routes_for("prod")) == 1
        assert len(plan.routes_for("dev")) == 1

    def test_every_network_attached(self, plan):
        assert list(plan.attachments) == ["shared", "prod", "dev"]

    def test_every_route_after_its_attachment(self, plan):
        order = plan.build.order()

        for route in plan.routes:
            assert order.index(route.depends_on) < order.index(route.key)
            assert plan.build.has_edge(route.depends_on, route.key)

    def test_topology_tags(self, plan):
        for key in plan.build:
            tags = plan.build.tags(key)
            assert tags["project"] == "transit"
            assert tags["Name"] == plan.build.resource(key).label


class TestPlanningFailures:
    """Tests for plans that must fail before anything is produced."""

    def test_unknown_network(self, topology_data):
        topology_data["connections"].append({"networks": ["vpc-a", "vpc-x"]})

        with pytest.raises(UnknownNetworkError) as exc_info:
            plan_topology(Topology.from_dict(topology_data))
        assert exc_info.value.network == "vpc-x"

    def test_tier_does_not_fit(self, topology_data):
        topology_data["networks"][0]["cidr"] = "10.0.1.0/28"

        with pytest.raises(AllocationError) as exc_info:
            plan_topology(Topology.from_dict(topology_data))
        assert exc_info.value.details["tier"] == "Transit"

    def test_overlap_only_when_checked(self, topology_data):
        topology_data["networks"][1]["cidr"] = "10.0.0.0/16"
        topology = Topology.from_dict(topology_data)

        assert len(plan_topology(topology).routes) == 2
        with pytest.raises(AllocationError):
            TopologyPlanner(topology, check_overlaps=True).plan()

    def test_missing_transit_tier(self, topology_data):
        topology_data["networks"][1]["tiers"] = [
            {"name": "Public", "subnet_type": "public", "cidr_mask": 28},
        ]

        with pytest.raises(MissingTierError):
            plan_topology(Topology.from_dict(topology_data))


class TestInstances:
    """Tests for instance placement."""

    def test_instance_in_first_public_subnet(self, topology_data):
        topology_data["networks"][0]["instance"] = {"instance_type": "t3.small"}
        plan = plan_topology(Topology.from_dict(topology_data))

        (instance,) = plan.instances
        assert instance.network == "vpc-a"
        assert instance.tier == "Public"
        assert instance.subnet.cidr == IPv4Network("10.0.1.0/28")
        assert instance.spec.instance_type == "t3.small"
        assert instance.spec.volume_size_gb == 8
        assert plan.build.dependencies(instance.key) == [
            "network:vpc-a",
            "tier:vpc-a:Public",
            "security-context:vpc-a",
        ]
        assert plan.build.counts()[ResourceKind.INSTANCE.value] == 1

    def test_instance_without_public_tier(self, topology_data):
        topology_data["networks"][0]["tiers"] = [
            {"name": "Transit", "subnet_type": "isolated", "cidr_mask": 28},
        ]
        topology_data["networks"][0]["instance"] = {}

        with pytest.raises(MissingTierError) as exc_info:
            plan_topology(Topology.from_dict(topology_data))
        assert exc_info.value.tier == "public"
