"""Step 1: walk a height range and append every market swap to a csv.

Configured through the environment (or a .env file), see terra_swaps.config.
Rows are written after each height, so an aborted run keeps what it found;
restart it from the height after the last one written, or set
STATE_FILE_NAME to have that done for you.

Re-running over the same range appends the same rows again. Use
terra_swaps.dedupe on the result if that happened.
"""
import csv
import logging
import os
import time
from dataclasses import asdict
from typing import Iterable, Optional

from tqdm import tqdm

from terra_swaps.config import ScanConfig, load_config
from terra_swaps.errors import ChainIdMismatch, MalformedMessage, MissingEventLog
from terra_swaps.extract import SWAP_FIELD_NAMES, SwapData, parse_tx
from terra_swaps.lcd import LCDClient

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 100


class SwapCsvSink:
    """Append-only swaps csv. The header goes in once, when the file is new or empty."""

    def __init__(self, path: str):
        self.path = path
        self.file = None
        self.writer = None

    def __enter__(self):
        new_file = not os.path.exists(self.path) or os.path.getsize(self.path) == 0
        self.file = open(self.path, "a", newline="")
        self.writer = csv.DictWriter(self.file, fieldnames=SWAP_FIELD_NAMES)
        if new_file:
            self.writer.writerow({name: name.upper() for name in SWAP_FIELD_NAMES})
            self.file.flush()
        return self

    def __exit__(self, *exc):
        self.file.close()
        return False

    def write_records(self, swap_datas: Iterable[SwapData]):
        for swap_data in swap_datas:
            self.writer.writerow(asdict(swap_data))
        self.file.flush()


def save_state(state_fname, next_height):
    """Saves the next height we have to read."""
    with open(state_fname, "wt") as f:
        print(f"{next_height}", file=f)


def restore_state(state_fname, default_height: int) -> int:
    """Restore the next height to process."""
    if state_fname and os.path.exists(state_fname):
        with open(state_fname, "rt") as f:
            next_height_text = f.read()
            return int(next_height_text)

    return default_height


def load(client, height: int, limit: int, skip_malformed: bool = False) -> list[SwapData]:
    """Read every page of txs at `height` and return their swaps in order.

    `client` is anything with `search_txs(height, page, limit)`, normally an LCDClient.
    """
    swap_datas: list[SwapData] = []

    page = 1
    total_page = 1
    while True:
        tx_result = client.search_txs(height, page, limit)

        for tx_info in tx_result.txs:
            try:
                swap_datas.extend(parse_tx(tx_info))
            except (MalformedMessage, MissingEventLog) as e:
                if not skip_malformed:
                    raise
                logger.warning("Skipping tx %s at height %d: %s", tx_info.txhash, height, e)

        total_page = tx_result.page_total

        # Loop for as long as the page we just read is below the total
        if page >= total_page:
            break
        page += 1

    return swap_datas


def scan_heights(
    client,
    sink: SwapCsvSink,
    start_height: int,
    end_height: int,
    limit: int,
    delay: float = 0.01,
    state_fname: Optional[str] = None,
    skip_malformed: bool = False,
    show_progress: bool = True,
) -> int:
    """Scan `start_height..end_height` inclusive, one height at a time.

    :return: number of swap rows written
    """
    # A stale state file never takes us below the requested range
    start_height = max(restore_state(state_fname, start_height), start_height)
    if start_height > end_height:
        logger.info("Up to date. next height=%d, end height=%d", start_height, end_height)
        logger.info("FINISHED")
        return 0

    total_swaps = 0
    with tqdm(total=end_height - start_height + 1, disable=not show_progress) as progress_bar:
        for height in range(start_height, end_height + 1):
            swap_datas = load(client, height, limit, skip_malformed=skip_malformed)
            if len(swap_datas) > 0:
                sink.write_records(swap_datas)
                total_swaps += len(swap_datas)

            if state_fname:
                save_state(state_fname, height + 1)

            if height % PROGRESS_EVERY == 0:
                logger.info("HEIGHT: %d", height)

            progress_bar.set_description(f"Height: {height:,}, swaps: {total_swaps:,}")
            progress_bar.update(1)

            time.sleep(delay)

    logger.info("FINISHED")
    return total_swaps


def check_chain_id(client, chain_id: str):
    network = client.node_network()
    if network != chain_id:
        raise ChainIdMismatch(f"LCD serves {network}, expected {chain_id}")


def run(config: ScanConfig, client=None) -> int:
    if client is None:
        client = LCDClient(config.terra_url, config.terra_chain_id, timeout=config.timeout)
        try:
            return run(config, client)
        finally:
            client.close()

    if config.check_chain_id:
        check_chain_id(client, config.terra_chain_id)

    logger.info(
        "Starting to read heights %d - %d from %s (%s)",
        config.start_height,
        config.end_height,
        config.terra_url,
        config.terra_chain_id,
    )

    with SwapCsvSink(config.result_file_name) as sink:
        return scan_heights(
            client,
            sink,
            config.start_height,
            config.end_height,
            config.load_unit,
            delay=config.delay,
            state_fname=config.state_file_name,
            skip_malformed=config.skip_malformed,
            show_progress=config.show_progress,
        )


def main():
    logging.basicConfig(level="INFO", handlers=[logging.StreamHandler()])

    # Mute noise
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)

    config = load_config()
    total_swaps = run(config)
    print(f"Wrote {total_swaps:,} swaps to {config.result_file_name}")


if __name__ == "__main__":
    main()
