"""Core planning: declared topology, planners and the build plan."""

from transitlink.core.allocator import AddressPool, allocate_network, allocate_tiers, check_disjoint
from transitlink.core.attachments import AttachmentPlanner
from transitlink.core.connections import Connection, ConnectionSet
from transitlink.core.graph import BuildPlan, assemble
from transitlink.core.network import Network, Topology
from transitlink.core.planner import TopologyPlan, TopologyPlanner, plan_topology
from transitlink.core.routes import inject_routes
from transitlink.core.rules import generate_rules, security_contexts_for
from transitlink.core.schema import ResourceKind, SubnetType, TopologySchema, TrafficScope

__all__ = [
    "AddressPool",
    "allocate_network",
    "allocate_tiers",
    "check_disjoint",
    "AttachmentPlanner",
    "Connection",
    "ConnectionSet",
    "BuildPlan",
    "assemble",
    "Network",
    "Topology",
    "TopologyPlan",
    "TopologyPlanner",
    "plan_topology",
    "inject_routes",
    "generate_rules",
    "security_contexts_for",
    "ResourceKind",
    "SubnetType",
    "TopologySchema",
    "TrafficScope",
]
