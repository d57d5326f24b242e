from terra_swaps.lcd import TxInfo, TxLog, TxSearchResult


def swap_msg(trader="terra1abc", offer_denom="uusd", offer_amount="100", ask_denom="ukrw"):
    return {
        "type": "market/MsgSwap",
        "value": {
            "trader": trader,
            "offer_coin": {"denom": offer_denom, "amount": offer_amount},
            "ask_denom": ask_denom,
        },
    }


def swap_send_msg(from_address="terra1a", to_address="terra1b", offer_denom="uusd", offer_amount="100", ask_denom="ukrw"):
    return {
        "type": "market/MsgSwapSend",
        "value": {
            "from_address": from_address,
            "to_address": to_address,
            "offer_coin": {"denom": offer_denom, "amount": offer_amount},
            "ask_denom": ask_denom,
        },
    }


def send_msg():
    return {
        "type": "bank/MsgSend",
        "value": {
            "from_address": "terra1a",
            "to_address": "terra1b",
            "amount": [{"denom": "uluna", "amount": "5"}],
        },
    }


def swap_log(msg_index=0, swap_coin="100000 ukrw"):
    return TxLog(
        msg_index=msg_index,
        events_by_type={
            "message": {"action": ["swap"]},
            "swap": {"offer": ["100uusd"], "swap_coin": [swap_coin], "swap_fee": ["1ukrw"]},
        },
    )


def plain_log(msg_index=0):
    return TxLog(msg_index=msg_index, events_by_type={"message": {"action": ["send"]}})


def make_tx(msgs, logs, code=None, height=101, txhash="TXHASH"):
    return TxInfo(height=height, txhash=txhash, msgs=msgs, logs=logs, code=code)


def swap_tx(height=101, txhash="TXHASH", swap_coin="100000 ukrw"):
    return make_tx([swap_msg()], [swap_log(0, swap_coin)], height=height, txhash=txhash)


class FakeLCD:
    """Serves canned search pages per height and records every call."""

    def __init__(self, pages=None, network="columbus-4", errors=None):
        self.pages = pages or {}
        self.network = network
        self.errors = errors or {}
        self.calls = []

    def search_txs(self, height, page, limit):
        self.calls.append((height, page, limit))
        if height in self.errors:
            raise self.errors[height]
        results = self.pages.get(height)
        if not results:
            return TxSearchResult(page_total=0, txs=[])
        return results[page - 1]

    def node_network(self):
        return self.network


def single_page(*txs):
    return [TxSearchResult(page_total=1, txs=list(txs))]
