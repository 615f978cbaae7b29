"""Local private-key signer over JSON-RPC (eth-account).

Implements SignerProtocol for scripts and automation: transactions are
signed in-process and broadcast with eth_sendRawTransaction. Networks the
signer has not been told about are reported as 4902 on switch, exactly like
a browser wallet, so the session's add-then-retry path is exercised.
"""

import logging
from collections.abc import Callable
from typing import Any

from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data
from eth_utils import to_checksum_address, to_hex

from src.mm_chain.domain.repository import LedgerResolverProtocol
from src.mm_common.errors import SignerError
from src.mm_session.domain.signer import CHAIN_CHANGED, SignaturePayload

logger = logging.getLogger(__name__)

_DOMAIN_FIELD_TYPES = {
    "name": "string",
    "version": "string",
    "chainId": "uint256",
    "verifyingContract": "address",
    "salt": "bytes32",
}


def _with_domain_type(typed_data: dict[str, Any]) -> dict[str, Any]:
    """Fill in EIP712Domain from the domain keys when the caller left it out."""
    types = typed_data["types"]
    if "EIP712Domain" in types:
        return typed_data
    domain = typed_data.get("domain", {})
    domain_type = [
        {"name": name, "type": kind} for name, kind in _DOMAIN_FIELD_TYPES.items() if name in domain
    ]
    return {**typed_data, "types": {"EIP712Domain": domain_type, **types}}


class LocalAccountSigner:
    def __init__(
        self,
        private_key: str,
        ledgers: LedgerResolverProtocol,
        chain_id: int,
        known_chains: set[int] | None = None,
    ) -> None:
        self._account = Account.from_key(private_key)
        self._ledgers = ledgers
        self._chain_id = chain_id
        self._known = {chain_id} | set(known_chains or ())
        self._listeners: dict[str, list[Callable[[Any], None]]] = {}

    @property
    def address(self) -> str:
        return self._account.address

    async def request_accounts(self) -> list[str]:
        return [self._account.address]

    async def request_chain_id(self) -> int:
        return self._chain_id

    async def request_balance(self, address: str) -> int:
        return await self._ledgers.for_network(self._chain_id).get_balance(address)

    async def request_signature(self, payload: SignaturePayload) -> str:
        if payload.account.lower() != self._account.address.lower():
            raise SignerError(4100, f"Account {payload.account} is not held by this signer")
        if payload.kind == "personal":
            message = encode_defunct(text=payload.message)
        else:
            message = encode_typed_data(full_message=_with_domain_type(payload.typed_data))
        signed = self._account.sign_message(message)
        return to_hex(signed.signature)

    async def request_network_switch(self, chain_id: int) -> None:
        if chain_id not in self._known:
            raise SignerError(
                SignerError.UNRECOGNIZED_CHAIN,
                f"Unrecognized chain ID {hex(chain_id)}. Try adding the chain first.",
            )
        if chain_id != self._chain_id:
            self._chain_id = chain_id
            self._emit(CHAIN_CHANGED, hex(chain_id))

    async def request_add_network(self, params: dict[str, Any]) -> None:
        chain_id = int(params["chainId"], 16)
        logger.info("Adding network %s (%d)", params.get("chainName"), chain_id)
        self._known.add(chain_id)

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        ledger = self._ledgers.for_network(self._chain_id)
        unsigned = {
            "to": to_checksum_address(tx["to"]),
            "value": tx.get("value", 0),
            "data": tx.get("data", b""),
            "gas": tx["gas"],
            "gasPrice": tx.get("gasPrice") or await ledger.gas_price(),
            "nonce": await ledger.get_transaction_count(self._account.address),
            "chainId": self._chain_id,
        }
        signed = self._account.sign_transaction(unsigned)
        return await ledger.send_raw_transaction(signed.raw_transaction)

    def subscribe(self, event_name: str, callback: Callable[[Any], None]) -> None:
        self._listeners.setdefault(event_name, []).append(callback)

    def _emit(self, event_name: str, data: Any) -> None:
        for callback in list(self._listeners.get(event_name, [])):
            callback(data)
