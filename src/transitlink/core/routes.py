"""Route injection for public subnets."""

from __future__ import annotations

from typing import Mapping, Sequence

from transitlink.core.connections import ConnectionSet
from transitlink.core.resources import Attachment, NetworkLayout, Route, TransitHub
from transitlink.errors import PlanningError, UnknownNetworkError
from transitlink.logging import get_logger

logger = get_logger(__name__)


def inject_routes(
    layouts: Sequence[NetworkLayout],
    connections: ConnectionSet,
    attachments: Mapping[str, Attachment],
    hub: TransitHub,
) -> list[Route]:
    """
    Emit one route per (owner public subnet, peer).

    Each route sends the peer's block to the hub and depends on the owner's
    attachment, never the peer's. A network without public subnets gets no
    routes. Output order is owner, then subnet (tier order, zone index),
    then peer in connection order.
    """
    by_name = {layout.name: layout for layout in layouts}
    routes: list[Route] = []

    for owner in layouts:
        peers = connections.peers_of(owner.name)
        if not peers:
            continue

        attachment = attachments.get(owner.name)
        if attachment is None:
            raise PlanningError(
                f"No attachment planned for network {owner.name}",
                {"network": owner.name},
            )

        for peer_name in peers:
            if peer_name not in by_name:
                raise UnknownNetworkError(peer_name, f"peer of {owner.name}")

        for subnet in owner.public_subnets:
            for peer_name in peers:
                route = Route(
                    owner=owner.name,
                    peer=peer_name,
                    tier=subnet.tier,
                    subnet=subnet,
                    destination=by_name[peer_name].cidr,
                    target=hub.key,
                )
                routes.append(route)

        logger.debug(
            "%s: %d route(s) to %d peer(s)",
            owner.name,
            len(owner.public_subnets) * len(peers),
            len(peers),
        )

    return routes
