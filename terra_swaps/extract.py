import re
from dataclasses import dataclass

from terra_swaps.errors import MissingEventLog
from terra_swaps.lcd import TxInfo
from terra_swaps.messages import MsgSwap, MsgSwapSend, parse_msg

#: List of output columns to the swaps csv
SWAP_FIELD_NAMES = [
    "height",
    "tx_hash",
    "sender",
    "receiver",
    "offer_amount",
    "offer_denom",
    "ask_amount",
    "ask_denom",
]

# Only spaces and lowercase letters are dropped; "100000 ukrw" -> "100000"
SWAP_COIN_STRIP = re.compile(r"[ a-z]")


@dataclass(frozen=True)
class SwapData:
    height: int
    tx_hash: str
    sender: str
    receiver: str
    offer_amount: str
    offer_denom: str
    ask_amount: str
    ask_denom: str


def normalize_swap_coin(raw: str) -> str:
    return SWAP_COIN_STRIP.sub("", raw)


def swap_coin_at(tx_info: TxInfo, idx: int) -> str:
    """Return the raw `swap_coin` emitted by message `idx`.

    Messages and logs share positions: logs[idx] belongs to msg[idx].
    """
    if tx_info.logs is None or not 0 <= idx < len(tx_info.logs):
        raise MissingEventLog(tx_info.txhash, idx, "no log at this index")

    swap_event = tx_info.logs[idx].events_by_type.get("swap")
    if swap_event is None:
        raise MissingEventLog(tx_info.txhash, idx, "no swap event")

    values = swap_event.get("swap_coin")
    if not values:
        raise MissingEventLog(tx_info.txhash, idx, "swap event without swap_coin")
    return values[0]


def parse_tx(tx_info: TxInfo) -> list[SwapData]:
    """Extract one SwapData per MsgSwap / MsgSwapSend, in message order."""
    swap_datas: list[SwapData] = []

    # Skip when tx is failed
    if tx_info.failed:
        return swap_datas

    if tx_info.logs is None:
        return swap_datas

    for idx, raw_msg in enumerate(tx_info.msgs):
        msg = parse_msg(raw_msg)
        if isinstance(msg, MsgSwap):
            sender, receiver = msg.trader, msg.trader
        elif isinstance(msg, MsgSwapSend):
            sender, receiver = msg.from_address, msg.to_address
        else:
            continue

        swap_datas.append(
            SwapData(
                height=tx_info.height,
                tx_hash=tx_info.txhash,
                sender=sender,
                receiver=receiver,
                offer_amount=msg.offer_coin.amount,
                offer_denom=msg.offer_coin.denom,
                ask_amount=normalize_swap_coin(swap_coin_at(tx_info, idx)),
                ask_denom=msg.ask_denom,
            )
        )

    return swap_datas
