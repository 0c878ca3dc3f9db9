"""Tests for generators."""

import pytest

from transitlink.core.network import Topology
from transitlink.core.planner import plan_topology
from transitlink.generators import generate_dot, generate_index, generate_mermaid, generate_network_doc


@pytest.fixture
def plan(topology_data):
    topology_data["networks"][0]["instance"] = {"instance_type": "t3.micro"}
    return plan_topology(Topology.from_dict(topology_data))


class TestMermaid:
    """Tests for Mermaid generation."""

    def test_structure(self, plan):
        content = generate_mermaid(plan)

        assert "```mermaid" in content
        assert "flowchart LR" in content
        assert 'network_vpc_a_group["vpc-a 10.0.1.0/24"]' in content
        assert 'transit_hub(("Transit Gateway"))' in content

    def test_explicit_edges(self, plan):
        content = generate_mermaid(plan)

        assert "attachment_vpc_a ==> route_vpc_a_Public_0_vpc_b" in content
        assert content.count("==>") == len(plan.routes) + 1  # plus the legend entry

    def test_route_labels(self, plan):
        assert "route 10.0.2.0/24 via hub" in generate_mermaid(plan)


class TestDot:
    """Tests for DOT generation."""

    def test_structure(self, plan):
        content = generate_dot(plan)

        assert content.startswith("digraph Topology {")
        assert content.rstrip().endswith("}")
        assert "subgraph cluster_0" in content
        assert "subgraph cluster_1" in content
        assert '"transit-hub" [label="Transit Gateway", fillcolor=orange, shape=ellipse];' in content

    def test_explicit_edges_highlighted(self, plan):
        content = generate_dot(plan)

        assert '"attachment:vpc-b" -> "route:vpc-b:Public:0:vpc-a" [color=red, penwidth=2];' in content
        assert content.count("color=red") == len(plan.routes)

    def test_every_edge_rendered(self, plan):
        content = generate_dot(plan)
        assert content.count(" -> ") == len(plan.build.edges())


class TestMarkdown:
    """Tests for Markdown generation."""

    def test_network_doc(self, plan):
        content = generate_network_doc(plan.layout("vpc-a"), plan)

        assert content.startswith("# vpc-a")
        assert "| Public | public | /28 | `10.0.1.0/28` |" in content
        assert "| vpc-b | `10.0.2.0/24` | all traffic |" in content
        assert "## Hub Attachment" in content
        assert "`attachment:vpc-a`" in content
        assert "- Type: `t3.micro`" in content

    def test_network_doc_without_instance(self, plan):
        content = generate_network_doc(plan.layout("vpc-b"), plan)
        assert "## Instance" not in content

    def test_index(self, plan):
        content = generate_index(plan)

        assert "# Transit Topology Index" in content
        assert "- ASN: 65000" in content
        assert "| [vpc-a](vpc-a.md) | `10.0.1.0/24` | 2 | vpc-b |" in content
        assert "1. `network:vpc-a`" in content
        assert "## Build Order" in content
