class SwapScanError(Exception):
    """Base class for everything the scanner raises on purpose."""


class ConfigError(SwapScanError):
    pass


class LCDError(SwapScanError):
    """The LCD endpoint could not be reached or answered with an HTTP error."""


class MalformedResponse(SwapScanError):
    """A search response or transaction is missing a field we rely on."""


class MalformedMessage(SwapScanError):
    """A swap message payload is missing a field we rely on."""


class MissingEventLog(SwapScanError):
    """No usable swap_coin in the log at the message's index."""

    def __init__(self, tx_hash: str, msg_index: int, reason: str):
        super().__init__(f"tx {tx_hash} msg {msg_index}: {reason}")
        self.tx_hash = tx_hash
        self.msg_index = msg_index


class ChainIdMismatch(SwapScanError):
    pass
