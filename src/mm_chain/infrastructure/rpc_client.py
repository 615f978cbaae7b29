"""JSON-RPC ledger client over httpx.

Transport failures (connection errors, timeouts, 5xx) surface as
NetworkTransportError, which the confirmation poll treats as transient.
A JSON-RPC error object surfaces as RpcError carrying the node's raw
message (for reverts: "execution reverted: <reason>").
"""

import itertools
import logging
from typing import Any

import httpx
from eth_utils import decode_hex, to_hex

from src.mm_chain.domain.models import TxReceipt
from src.mm_chain.infrastructure.schemas import RpcReceipt
from src.mm_common.errors import NetworkTransportError, RpcError
from src.mm_network.registry import NetworkRegistry

logger = logging.getLogger(__name__)

_TX_QUANTITY_FIELDS = ("value", "gas", "gasPrice", "nonce")


def to_rpc_tx(tx: dict[str, Any]) -> dict[str, Any]:
    """Hex-encode int quantities and bytes calldata for the wire."""
    out: dict[str, Any] = {}
    for key, value in tx.items():
        if value is None:
            continue
        if key in _TX_QUANTITY_FIELDS and isinstance(value, int):
            out[key] = hex(value)
        elif isinstance(value, (bytes, bytearray)):
            out[key] = to_hex(value)
        else:
            out[key] = value
    return out


class JsonRpcClient:
    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        return self._url

    async def request(self, method: str, params: list[Any] | None = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        try:
            resp = await self._client.post(self._url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkTransportError(
                f"{method}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkTransportError(f"{method}: {exc!r}") from exc

        try:
            body = resp.json()
        except ValueError as exc:
            raise NetworkTransportError(f"{method}: malformed JSON-RPC response") from exc
        if not isinstance(body, dict):
            raise NetworkTransportError(f"{method}: malformed JSON-RPC response")
        error = body.get("error")
        if error is not None:
            raise RpcError(
                int(error.get("code", -32000)),
                str(error.get("message", "")),
                error.get("data"),
            )
        return body.get("result")

    async def chain_id(self) -> int:
        return int(await self.request("eth_chainId"), 16)

    async def block_number(self) -> int:
        return int(await self.request("eth_blockNumber"), 16)

    async def get_balance(self, address: str) -> int:
        return int(await self.request("eth_getBalance", [address, "latest"]), 16)

    async def gas_price(self) -> int:
        return int(await self.request("eth_gasPrice"), 16)

    async def get_transaction_count(self, address: str) -> int:
        return int(await self.request("eth_getTransactionCount", [address, "pending"]), 16)

    async def estimate_gas(self, tx: dict[str, Any]) -> int:
        return int(await self.request("eth_estimateGas", [to_rpc_tx(tx)]), 16)

    async def call(self, tx: dict[str, Any]) -> bytes:
        result = await self.request("eth_call", [to_rpc_tx(tx), "latest"])
        return decode_hex(result or "0x")

    async def send_raw_transaction(self, raw: bytes) -> str:
        return await self.request("eth_sendRawTransaction", [to_hex(raw)])

    async def get_transaction_receipt(self, tx_hash: str) -> TxReceipt | None:
        result = await self.request("eth_getTransactionReceipt", [tx_hash])
        if result is None:
            return None
        return RpcReceipt.model_validate(result).to_domain()

    async def aclose(self) -> None:
        await self._client.aclose()


class LedgerPool:
    """One JSON-RPC client per network, created lazily from the registry."""

    def __init__(self, registry: NetworkRegistry, timeout: float = 30.0) -> None:
        self._registry = registry
        self._timeout = timeout
        self._clients: dict[int, JsonRpcClient] = {}

    def for_network(self, chain_id: int) -> JsonRpcClient:
        if chain_id not in self._clients:
            network = self._registry.resolve(chain_id)
            logger.debug("Opening RPC client for %s at %s", network.name, network.rpc_url)
            self._clients[chain_id] = JsonRpcClient(network.rpc_url, timeout=self._timeout)
        return self._clients[chain_id]

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.aclose()
        self._clients.clear()
