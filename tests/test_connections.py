"""Tests for connections module."""

import pytest
from pydantic import ValidationError

from transitlink.core.connections import Connection, ConnectionSet
from transitlink.core.schema import TrafficScope


@pytest.fixture
def connections():
    """Sample connection set for testing."""
    return ConnectionSet.from_dict({
        "connections": [
            {"networks": ["shared", "prod"]},
            {"networks": ["dev", "shared"], "scope": {"protocol": "tcp", "from_port": 443}},
            {"networks": ["prod", "shared"], "description": "declared twice"},
        ]
    })


class TestConnection:
    """Tests for Connection class."""

    def test_connection_properties(self):
        """Test basic connection properties."""
        conn = Connection.between("vpc-a", "vpc-b")

        assert conn.a == "vpc-a"
        assert conn.b == "vpc-b"
        assert conn.networks == ("vpc-a", "vpc-b")
        assert conn.scope.is_all_traffic
        assert conn.label == "vpc-a<->vpc-b"

    def test_peer_of(self):
        """Test peer lookup from either side."""
        conn = Connection.between("vpc-a", "vpc-b")

        assert conn.peer_of("vpc-a") == "vpc-b"
        assert conn.peer_of("vpc-b") == "vpc-a"
        assert conn.peer_of("vpc-c") is None
        assert conn.involves("vpc-a")
        assert not conn.involves("vpc-c")


class TestConnectionSet:
    """Tests for ConnectionSet class."""

    def test_from_dict(self, connections):
        """Test connection set creation from dictionary."""
        assert len(connections) == 3

    def test_peers_in_declaration_order(self, connections):
        """Test peers keep declaration order."""
        assert connections.peers_of("shared") == ["prod", "dev"]
        assert connections.peers_of("dev") == ["shared"]

    def test_duplicate_pair_single_peer(self, connections):
        """Test a pair declared twice yields one peer."""
        assert connections.peers_of("prod") == ["shared"]

    def test_unconnected_network(self, connections):
        """Test a network without connections has no peers."""
        assert connections.peers_of("sandbox") == []

    def test_contains(self, connections):
        """Test __contains__ in both directions."""
        assert ("shared", "prod") in connections
        assert ("prod", "shared") in connections
        assert ("prod", "dev") not in connections

    def test_involving(self, connections):
        """Test connections involving a network."""
        assert len(connections.involving("shared")) == 3
        assert len(connections.involving("dev")) == 1

    def test_networks(self, connections):
        """Test referenced network names."""
        assert connections.networks() == {"shared", "prod", "dev"}

    def test_from_pairs(self):
        """Test building from plain tuples."""
        connections = ConnectionSet.from_pairs([("a", "b"), ("b", "c")])
        assert connections.peers_of("b") == ["a", "c"]


class TestTrafficScope:
    """Tests for TrafficScope schema."""

    def test_default_all_traffic(self):
        scope = TrafficScope()
        assert scope.is_all_traffic
        assert scope.describe() == "all traffic"

    def test_single_port(self):
        scope = TrafficScope(protocol="tcp", from_port=443)
        assert scope.describe() == "tcp 443"

    def test_port_range(self):
        scope = TrafficScope(protocol="udp", from_port=1000, to_port=2000)
        assert scope.describe() == "udp 1000-2000"

    def test_ports_not_allowed_for_all(self):
        with pytest.raises(ValidationError):
            TrafficScope(protocol="all", from_port=22)

    def test_port_required_for_tcp(self):
        with pytest.raises(ValidationError):
            TrafficScope(protocol="tcp")

    def test_inverted_range(self):
        with pytest.raises(ValidationError):
            TrafficScope(protocol="tcp", from_port=2000, to_port=1000)

    def test_hashable(self):
        """Test scopes compare and hash by value."""
        assert TrafficScope(protocol="tcp", from_port=22) == TrafficScope(protocol="tcp", from_port=22)
        assert len({TrafficScope(), TrafficScope()}) == 1
