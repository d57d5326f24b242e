"""Minimal Terra LCD client: paged transaction search and node info.

Talks to the legacy REST endpoints (`/txs`, `/node_info`) over a pooled
requests session.
"""
from dataclasses import dataclass, field
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from terra_swaps.errors import LCDError, MalformedResponse

EventsByType = dict[str, dict[str, list[str]]]


@dataclass(frozen=True)
class TxLog:
    """Events emitted by one message of a transaction."""

    msg_index: int
    events_by_type: EventsByType = field(default_factory=dict)


@dataclass(frozen=True)
class TxInfo:
    height: int
    txhash: str
    #: Raw amino-JSON messages, resolved by the extractor
    msgs: list[dict]
    #: None when the transaction produced no logs, e.g. when it failed
    logs: Optional[list[TxLog]] = None
    code: Optional[int] = None

    @property
    def failed(self) -> bool:
        # Any code at all, 0 included, marks the tx as failed
        return self.code is not None


@dataclass(frozen=True)
class TxSearchResult:
    page_total: int
    txs: list[TxInfo]


def group_events(events: list[dict]) -> EventsByType:
    """Fold `[{"type", "attributes": [{"key", "value"}]}]` into type -> key -> values."""
    grouped: EventsByType = {}
    for event in events or []:
        attributes = grouped.setdefault(event["type"], {})
        for attribute in event.get("attributes") or []:
            attributes.setdefault(attribute["key"], []).append(attribute.get("value", ""))
    return grouped


def decode_log(data: dict, default_index: int) -> TxLog:
    return TxLog(
        msg_index=int(data.get("msg_index", default_index)),
        events_by_type=group_events(data.get("events")),
    )


def decode_tx(data: dict) -> TxInfo:
    """Convert one entry of the search response's `txs` list."""
    try:
        raw_msgs = data["tx"]["value"]["msg"]
        raw_logs = data.get("logs")
        return TxInfo(
            height=int(data["height"]),
            txhash=data["txhash"],
            msgs=list(raw_msgs),
            logs=None if raw_logs is None else [decode_log(log, idx) for idx, log in enumerate(raw_logs)],
            code=None if data.get("code") is None else int(data["code"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Could not decode tx {data.get('txhash', '?')}: {e!r}") from e


def decode_search_result(data: dict) -> TxSearchResult:
    # `txs` is null rather than [] on some nodes when the block is empty
    if "page_total" not in data or "txs" not in data:
        raise MalformedResponse(f"Search response without txs/page_total: {sorted(data)}")
    try:
        page_total = int(data["page_total"])
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"Bad page_total {data['page_total']!r}") from e
    return TxSearchResult(
        page_total=page_total,
        txs=[decode_tx(tx) for tx in data["txs"] or []],
    )


class LCDClient:
    """Read-only access to a Terra LCD endpoint."""

    def __init__(self, url: str, chain_id: str, timeout: Optional[float] = None, pool_size: int = 4):
        self.url = url.rstrip("/")
        self.chain_id = chain_id
        self.timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{self.url}{path}"
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
            r.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise LCDError(f"GET {url} failed: {e}") from e
        try:
            return r.json()
        except ValueError as e:
            raise MalformedResponse(f"GET {url} did not return JSON") from e

    def search_txs(self, height: int, page: int, limit: int) -> TxSearchResult:
        """Fetch one page of the transactions included at `height`."""
        data = self._get("/txs", params={"tx.height": height, "page": page, "limit": limit})
        return decode_search_result(data)

    def node_network(self) -> str:
        """Chain id the node reports serving."""
        data = self._get("/node_info")
        try:
            return data["node_info"]["network"]
        except (KeyError, TypeError) as e:
            raise MalformedResponse(f"node_info without network: {e!r}") from e

    def close(self):
        self.session.close()
