"""Turn ABI-decoded log arguments into typed event variants."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from collective_indexer.models.events import (
    AdminLog,
    CollectiveWinningsDistributed,
    FanbaseSet,
    IndexedEvent,
    LogContext,
    PositionVerified,
    Price,
    UnknownFanEvent,
    UserEvent,
    VotesBought,
    VotesRedeemed,
    VotesSold,
    VotesTransferred,
)

log = logging.getLogger(__name__)

FAN_EVENTS = ("VotesBought", "VotesSold", "VotesRedeemed", "VotesTransferred")
COLLECTIVE_ADMIN_EVENTS = (
    "DistributeCollectiveWinnings",
    "OraclewinPositionVerified",
    "SetCollectiveFanbase",
)

_PRICE_KEYS = ("base", "poolFee", "protocolFee", "collectiveFee", "totalFee", "total", "perVote")


def normalize_address(value: Any) -> str:
    return str(value).lower()


def _parse_price(raw: Any) -> Price:
    """Accepts the struct as a mapping (named components) or a positional tuple."""
    if isinstance(raw, Mapping):
        values = [raw[key] for key in _PRICE_KEYS]
    elif isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        if len(raw) != len(_PRICE_KEYS):
            raise ValueError(f"price struct has {len(raw)} fields")
        values = list(raw)
    else:
        raise TypeError(f"unsupported price struct {type(raw).__name__}")
    return Price(*(int(v) for v in values))


def _optional_int(args: Mapping[str, Any], key: str) -> int | None:
    value = args.get(key)
    return int(value) if value is not None else None


def _fan_fields(args: Mapping[str, Any], ctx: LogContext) -> dict:
    return dict(
        log=ctx,
        fan=normalize_address(args["fan"]),
        collective=normalize_address(args["collective"]),
        vote_amount=int(args.get("voteAmount", 0)),
        fan_votes=int(args.get("fanVotes", 0)),
        supply=int(args.get("supply", 0)),
    )


def parse_fan_event(name: str, args: Mapping[str, Any], ctx: LogContext) -> UserEvent | None:
    """Build the fan event variant for `name`.

    A known action with missing or malformed arguments degrades to
    UnknownFanEvent. Returns None only when the payload has no fan or
    collective to attribute it to.
    """
    try:
        common = _fan_fields(args, ctx)
    except (KeyError, TypeError, ValueError) as exc:
        log.warning("Dropping %s log %s without fan/collective: %s", name, ctx.log_id, exc)
        return None

    try:
        if name == "VotesBought":
            return VotesBought(**common, price=_parse_price(args["price"]))
        if name == "VotesSold":
            return VotesSold(**common, price=_parse_price(args["price"]))
        if name == "VotesRedeemed":
            return VotesRedeemed(**common, value=int(args["value"]))
        if name == "VotesTransferred":
            return VotesTransferred(**common, recipient=normalize_address(args["to"]))
    except (KeyError, TypeError, ValueError) as exc:
        log.warning("Malformed %s log %s, recording as unknown: %s", name, ctx.log_id, exc)

    return UnknownFanEvent(**common, name=name)


def parse_admin_event(name: str, args: Mapping[str, Any], ctx: LogContext) -> IndexedEvent:
    """Build a collective admin variant, or an audit-only AdminLog."""
    try:
        if name == "DistributeCollectiveWinnings":
            return CollectiveWinningsDistributed(
                log=ctx,
                collective=normalize_address(args["collective"]),
                exit_round=_optional_int(args, "exitRound"),
                round=_optional_int(args, "round"),
            )
        if name == "OraclewinPositionVerified":
            return PositionVerified(
                log=ctx,
                collective=normalize_address(args["collective"]),
                round=int(args["round"]),
            )
        if name == "SetCollectiveFanbase":
            return FanbaseSet(
                log=ctx,
                collective=normalize_address(args["collective"]),
                fanbase=int(args["fanbase"]),
            )
    except (KeyError, TypeError, ValueError) as exc:
        log.warning("Malformed %s log %s, auditing only: %s", name, ctx.log_id, exc)

    return AdminLog(log=ctx, name=name)


def parse_event(name: str, args: Mapping[str, Any], ctx: LogContext) -> IndexedEvent | None:
    """Dispatch a decoded log to its variant.

    Logs that carry a fan and collective but an unrecognized name are still
    fan events (kind `unknown`). Everything else is treated as admin-level.
    """
    if name in FAN_EVENTS or ("fan" in args and "collective" in args):
        return parse_fan_event(name, args, ctx)
    return parse_admin_event(name, args, ctx)
