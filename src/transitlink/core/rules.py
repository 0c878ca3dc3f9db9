"""Cross-network ingress rule generation."""

from __future__ import annotations

from typing import Iterable, Mapping

from transitlink.core.connections import Connection
from transitlink.core.network import Network
from transitlink.core.resources import IngressRule, SecurityContext
from transitlink.errors import UnknownNetworkError
from transitlink.logging import get_logger

logger = get_logger(__name__)


def security_contexts_for(networks: Iterable[Network]) -> dict[str, SecurityContext]:
    """One empty security context per network, keyed by network name."""
    return {n.name: SecurityContext(network=n.name) for n in networks}


def generate_rules(
    contexts: Mapping[str, SecurityContext],
    networks: Mapping[str, Network],
    connections: Iterable[Connection],
) -> list[IngressRule]:
    """
    Add symmetric ingress rules for every communication pair.

    For a pair (A, B), A's context admits B's block and B's context admits
    A's block. Both sides are checked before either rule is written; rules
    added for earlier pairs are kept if a later pair fails.

    Returns the rules that were added.
    """
    added: list[IngressRule] = []

    for conn in connections:
        for name in conn.networks:
            if name not in networks or name not in contexts:
                raise UnknownNetworkError(name, f"connection {conn.label}")

        a = networks[conn.a]
        b = networks[conn.b]

        for owner, peer in ((a, b), (b, a)):
            rule = IngressRule(peer=peer.name, source=peer.cidr, scope=conn.scope)
            if contexts[owner.name].add_ingress_rule(rule):
                added.append(rule)
                logger.debug("%s: %s", owner.name, rule.description)

    return added
