# src/mm_session/domain/signer.py
"""Signer Protocol: the minimal capability surface the session depends on.

Any signer implementing this surface (browser bridge, hardware device,
local key) is interchangeable. Failures are reported as SignerError with an
EIP-1193 style code: 4001 = user rejected, 4902 = unrecognized chain.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

ACCOUNTS_CHANGED = "accountsChanged"
CHAIN_CHANGED = "chainChanged"


@dataclass(frozen=True)
class SignaturePayload:
    kind: Literal["personal", "typed"]
    account: str
    message: str = ""
    typed_data: dict[str, Any] = field(default_factory=dict)


class SignerProtocol(Protocol):
    async def request_accounts(self) -> list[str]: ...

    async def request_chain_id(self) -> int: ...

    async def request_balance(self, address: str) -> int: ...

    async def request_signature(self, payload: SignaturePayload) -> str: ...

    async def request_network_switch(self, chain_id: int) -> None: ...

    async def request_add_network(self, params: dict[str, Any]) -> None: ...

    async def send_transaction(self, tx: dict[str, Any]) -> str: ...

    def subscribe(self, event_name: str, callback: Callable[[Any], None]) -> None: ...
