"""Typed views over the amino-JSON messages of a Terra transaction.

Only the two market swap messages are modelled. Everything else becomes an
UnknownMsg and is ignored by the extractor.

Raw example message

    {"type": "market/MsgSwap",
     "value": {"trader": "terra1...",
               "offer_coin": {"denom": "uusd", "amount": "100"},
               "ask_denom": "ukrw"}}
"""
from dataclasses import dataclass, field
from typing import Union

from terra_swaps.errors import MalformedMessage

MSG_SWAP = "market/MsgSwap"
MSG_SWAP_SEND = "market/MsgSwapSend"


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: str


@dataclass(frozen=True)
class MsgSwap:
    trader: str
    offer_coin: Coin
    ask_denom: str


@dataclass(frozen=True)
class MsgSwapSend:
    from_address: str
    to_address: str
    offer_coin: Coin
    ask_denom: str


@dataclass(frozen=True)
class UnknownMsg:
    type: str
    value: dict = field(default_factory=dict, compare=False)


Msg = Union[MsgSwap, MsgSwapSend, UnknownMsg]


def _coin(data: dict) -> Coin:
    return Coin(denom=data["denom"], amount=data["amount"])


def decode_MsgSwap(value: dict) -> MsgSwap:
    return MsgSwap(
        trader=value["trader"],
        offer_coin=_coin(value["offer_coin"]),
        ask_denom=value["ask_denom"],
    )


def decode_MsgSwapSend(value: dict) -> MsgSwapSend:
    return MsgSwapSend(
        from_address=value["from_address"],
        to_address=value["to_address"],
        offer_coin=_coin(value["offer_coin"]),
        ask_denom=value["ask_denom"],
    )


DECODERS = {
    MSG_SWAP: decode_MsgSwap,
    MSG_SWAP_SEND: decode_MsgSwapSend,
}


def parse_msg(data: dict) -> Msg:
    """Resolve a raw {"type", "value"} message to its variant."""
    msg_type = data.get("type", "")
    value = data.get("value") or {}

    decoder = DECODERS.get(msg_type)
    if decoder is None:
        return UnknownMsg(type=msg_type, value=value)

    try:
        return decoder(value)
    except (KeyError, TypeError) as e:
        raise MalformedMessage(f"Could not decode {msg_type}: missing {e}") from e
