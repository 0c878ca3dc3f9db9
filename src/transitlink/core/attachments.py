"""Transit hub attachment planning."""

from __future__ import annotations

from typing import Iterable, Iterator

from transitlink.core.resources import Attachment, NetworkLayout, TransitHub
from transitlink.errors import DuplicateAttachmentError
from transitlink.logging import get_logger

logger = get_logger(__name__)


class AttachmentPlanner:
    """
    Declares one hub attachment per network.

    Each attachment references the network's transit-tier subnets and the
    hub. Planning the same network twice is a programming error.
    """

    def __init__(self, hub: TransitHub) -> None:
        self._hub = hub
        self._attachments: dict[str, Attachment] = {}

    @property
    def hub(self) -> TransitHub:
        return self._hub

    @property
    def attachments(self) -> dict[str, Attachment]:
        """Planned attachments keyed by network name."""
        return dict(self._attachments)

    def plan(self, layout: NetworkLayout) -> Attachment:
        """Plan the attachment for one network."""
        if layout.name in self._attachments:
            raise DuplicateAttachmentError(layout.name)

        tier = layout.transit_tier()
        attachment = Attachment(
            network=layout.name,
            tier=tier.name,
            subnets=tier.subnets,
            hub=self._hub.key,
        )
        self._attachments[layout.name] = attachment
        logger.debug(
            "Attachment for %s uses %s (%d subnet(s))", layout.name, tier.name, len(tier.subnets)
        )
        return attachment

    def plan_all(self, layouts: Iterable[NetworkLayout]) -> dict[str, Attachment]:
        """Plan attachments for every network."""
        for layout in layouts:
            self.plan(layout)
        return self.attachments

    def get(self, network: str) -> Attachment | None:
        return self._attachments.get(network)

    def __len__(self) -> int:
        return len(self._attachments)

    def __iter__(self) -> Iterator[Attachment]:
        return iter(self._attachments.values())
