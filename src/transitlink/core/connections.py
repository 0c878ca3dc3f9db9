"""Communication pairs between declared networks."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from transitlink.core.schema import ConnectionSchema, TrafficScope


class Connection:
    """A symmetric communication pair between two networks."""

    def __init__(self, schema: ConnectionSchema) -> None:
        self._schema = schema

    @classmethod
    def between(cls, a: str, b: str, scope: TrafficScope | None = None) -> Connection:
        """Build a connection without going through a dictionary."""
        return cls(ConnectionSchema(networks=[a, b], scope=scope or TrafficScope()))

    @property
    def a(self) -> str:
        return self._schema.networks[0]

    @property
    def b(self) -> str:
        return self._schema.networks[1]

    @property
    def networks(self) -> tuple[str, str]:
        return (self.a, self.b)

    @property
    def scope(self) -> TrafficScope:
        return self._schema.scope

    @property
    def description(self) -> str | None:
        return self._schema.description

    @property
    def label(self) -> str:
        return f"{self.a}<->{self.b}"

    def involves(self, network: str) -> bool:
        return network in self.networks

    def peer_of(self, network: str) -> str | None:
        """The other side of the pair, or None if network is not part of it."""
        if network == self.a:
            return self.b
        if network == self.b:
            return self.a
        return None

    def to_dict(self) -> dict[str, Any]:
        return self._schema.model_dump(mode="json")

    def __repr__(self) -> str:
        return f"Connection({self.label}, scope={self.scope.describe()})"


class ConnectionSet:
    """
    Collection of communication pairs.

    Keeps declaration order and indexes peers per network. Declaring the
    same pair twice (in either direction) does not add a second peer.
    """

    def __init__(self, connections: list[Connection]) -> None:
        self._connections = connections
        self._peer_index: dict[str, list[str]] = {}
        for conn in connections:
            for network in conn.networks:
                peer = conn.peer_of(network)
                peers = self._peer_index.setdefault(network, [])
                if peer not in peers:
                    peers.append(peer)

    @classmethod
    def from_schemas(cls, schemas: Iterable[ConnectionSchema]) -> ConnectionSet:
        return cls([Connection(s) for s in schemas])

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConnectionSet:
        """Create connection set from dictionary."""
        return cls([Connection(ConnectionSchema(**c)) for c in data.get("connections", [])])

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[tuple[str, str]], scope: TrafficScope | None = None
    ) -> ConnectionSet:
        return cls([Connection.between(a, b, scope) for a, b in pairs])

    def peers_of(self, network: str) -> list[str]:
        """Peers of a network in declaration order."""
        return list(self._peer_index.get(network, []))

    def involving(self, network: str) -> list[Connection]:
        return [c for c in self._connections if c.involves(network)]

    def networks(self) -> set[str]:
        """Every network name referenced by a connection."""
        return set(self._peer_index)

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[Connection]:
        return iter(self._connections)

    def __contains__(self, pair: tuple[str, str]) -> bool:
        a, b = pair
        return b in self._peer_index.get(a, [])
