"""
Transitlink - Hub-and-spoke transit topology planning.

This package provides tools for:
- Declaring networks, subnet tiers and communication pairs in YAML
- Allocating subnet tiers inside each network's address block
- Generating symmetric cross-network ingress rules
- Planning one transit hub attachment per network
- Injecting return routes into every public subnet
- Assembling a dependency-ordered build plan and applying it through a provider
- Generating plan diagrams (Mermaid, Graphviz) and documentation
"""

__version__ = "0.1.0"

from transitlink.core.network import Topology
from transitlink.core.graph import BuildPlan
from transitlink.core.planner import TopologyPlanner, plan_topology
from transitlink.apply.executor import Applier

__all__ = [
    "__version__",
    "Topology",
    "BuildPlan",
    "TopologyPlanner",
    "plan_topology",
    "Applier",
]
