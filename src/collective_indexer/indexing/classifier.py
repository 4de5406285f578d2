"""Event classification and price decomposition for fan events."""

from __future__ import annotations

from collective_indexer.models.events import (
    EventKind,
    Price,
    UserEvent,
    VotesBought,
    VotesRedeemed,
    VotesSold,
    VotesTransferred,
)
from collective_indexer.models.records import PriceBreakdown


def classify(event: UserEvent) -> EventKind:
    """Semantic kind of a fan event. Anything unrecognized is UNKNOWN."""
    if isinstance(event, VotesBought):
        return EventKind.BUY
    if isinstance(event, VotesSold):
        return EventKind.SELL
    if isinstance(event, VotesRedeemed):
        return EventKind.REDEEM
    if isinstance(event, VotesTransferred):
        return EventKind.TRANSFER
    return EventKind.UNKNOWN


def _from_price(price: Price) -> PriceBreakdown:
    return PriceBreakdown(
        price_base=price.base,
        price_pool_fee=price.pool_fee,
        price_protocol_fee=price.protocol_fee,
        price_collective_fee=price.collective_fee,
        price_total_fee=price.total_fee,
        price_total=price.total,
        price_per_vote=price.per_vote,
    )


def extract_prices(event: UserEvent) -> PriceBreakdown:
    """Price fields for the Event row.

    Buys and sells copy the emitted price struct. A redemption reports the
    redeemed value as both base and total. Transfers and unknown events
    carry no pricing.
    """
    if isinstance(event, (VotesBought, VotesSold)):
        return _from_price(event.price)
    if isinstance(event, VotesRedeemed):
        return PriceBreakdown(price_base=event.value, price_total=event.value)
    return PriceBreakdown()


def trade_price(event: UserEvent) -> int | None:
    """Base price of a buy or sell, None for events without a price struct."""
    if isinstance(event, (VotesBought, VotesSold)):
        return event.price.base
    return None


def collective_price(event: UserEvent) -> int:
    """Unit price recorded on the Collective for this event."""
    if isinstance(event, (VotesBought, VotesSold)):
        return event.price.base
    if isinstance(event, VotesRedeemed):
        return event.value
    return 0
