"""Shared fixtures for topology tests."""

import pytest

from transitlink.core.network import Topology


@pytest.fixture
def tier_data():
    """Public and transit tier declarations used by most networks."""
    return [
        {"name": "Public", "subnet_type": "public", "cidr_mask": 28},
        {"name": "Transit", "subnet_type": "isolated", "cidr_mask": 28},
    ]


@pytest.fixture
def topology_data(tier_data):
    """Two networks with one communication pair."""
    return {
        "networks": [
            {"name": "vpc-a", "cidr": "10.0.1.0/24", "tiers": tier_data},
            {"name": "vpc-b", "cidr": "10.0.2.0/24", "tiers": tier_data},
        ],
        "connections": [
            {"networks": ["vpc-a", "vpc-b"]},
        ],
    }


@pytest.fixture
def topology(topology_data):
    return Topology.from_dict(topology_data)


@pytest.fixture
def hub_spoke_data(tier_data):
    """A hub network peered with two spokes that do not talk to each other."""
    return {
        "networks": [
            {"name": "shared", "cidr": "10.10.0.0/24", "tiers": tier_data, "max_azs": 2},
            {"name": "prod", "cidr": "10.20.0.0/24", "tiers": tier_data},
            {"name": "dev", "cidr": "10.30.0.0/24", "tiers": tier_data},
        ],
        "connections": [
            {"networks": ["shared", "prod"]},
            {"networks": ["shared", "dev"]},
        ],
        "tags": {"project": "transit"},
    }


@pytest.fixture
def hub_spoke(hub_spoke_data):
    return Topology.from_dict(hub_spoke_data)
