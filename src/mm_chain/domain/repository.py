# src/mm_chain/domain/repository.py
"""Ledger client Protocols: dependency inversion for testability.

Unit tests inject a fake that conforms to these Protocols.
The infrastructure layer provides the JSON-RPC implementation.
"""

from typing import Any, Protocol

from src.mm_chain.domain.models import TxReceipt


class LedgerClientProtocol(Protocol):
    async def chain_id(self) -> int: ...

    async def block_number(self) -> int: ...

    async def get_balance(self, address: str) -> int: ...

    async def gas_price(self) -> int: ...

    async def get_transaction_count(self, address: str) -> int: ...

    async def estimate_gas(self, tx: dict[str, Any]) -> int: ...

    async def call(self, tx: dict[str, Any]) -> bytes: ...

    async def send_raw_transaction(self, raw: bytes) -> str: ...

    async def get_transaction_receipt(self, tx_hash: str) -> TxReceipt | None: ...


class LedgerResolverProtocol(Protocol):
    def for_network(self, chain_id: int) -> LedgerClientProtocol: ...
