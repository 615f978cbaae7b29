"""AccountSession: one connected signer, its account and its network.

State machine: DISCONNECTED -> CONNECTING -> CONNECTED -> DISCONNECTED.

Signer events (accountsChanged / chainChanged) are applied synchronously
and published as SessionEvent messages onto per-subscriber queues.
Subscribers only ever receive copies, so no listener can mutate session
state while an event is being delivered. In-flight orchestrator calls hold
a SessionSnapshot taken at submission and are never retargeted.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from src.mm_common.enums import SessionEventType, SessionState
from src.mm_common.errors import (
    NoSignerAvailableError,
    NotConnectedError,
    SignerError,
    UnsupportedNetworkError,
    UserRejectedError,
)
from src.mm_network.domain.models import NetworkConfig
from src.mm_network.registry import NetworkRegistry
from src.mm_session.domain.models import SessionEvent, SessionSnapshot, WalletConnection
from src.mm_session.domain.signer import (
    ACCOUNTS_CHANGED,
    CHAIN_CHANGED,
    SignaturePayload,
    SignerProtocol,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _parse_chain_id(value: int | str) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return value


class AccountSession:
    def __init__(
        self,
        signer: SignerProtocol | None,
        registry: NetworkRegistry,
        event_queue_size: int = 256,
    ) -> None:
        self._signer = signer
        self._registry = registry
        self._event_queue_size = event_queue_size
        self._state = SessionState.DISCONNECTED
        self._account_id: str | None = None
        self._network_id: int | None = None
        self._balance: int | None = None
        self._subscribers: list[asyncio.Queue[SessionEvent]] = []
        self._attached = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == SessionState.CONNECTED

    @property
    def account_id(self) -> str | None:
        return self._account_id

    @property
    def network_id(self) -> int | None:
        return self._network_id

    @property
    def balance(self) -> int | None:
        return self._balance

    @property
    def registry(self) -> NetworkRegistry:
        return self._registry

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(self._state, self._account_id, self._network_id)

    def require_connected(self) -> SessionSnapshot:
        snap = self.snapshot()
        if not snap.connected:
            raise NotConnectedError()
        return snap

    def current_network(self) -> NetworkConfig | None:
        if self._network_id is None or not self._registry.is_supported(self._network_id):
            return None
        return self._registry.resolve(self._network_id)

    def is_network_supported(self) -> bool:
        return self.is_connected and self._registry.is_supported(self._network_id)

    def supported_networks(self) -> list[int]:
        return self._registry.supported_ids

    def network_name(self, chain_id: int | None = None) -> str:
        return self._registry.name_for(chain_id if chain_id is not None else self._network_id)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> WalletConnection:
        signer = self._require_signer()
        previous = self.snapshot()
        self._state = SessionState.CONNECTING
        try:
            accounts = await self._signer_call(signer.request_accounts())
            if not accounts:
                raise NoSignerAvailableError("No accounts returned from signer")
            chain_id = _parse_chain_id(await self._signer_call(signer.request_chain_id()))
            if not self._registry.is_supported(chain_id):
                raise UnsupportedNetworkError(chain_id)
            balance = await self._signer_call(signer.request_balance(accounts[0]))
        except BaseException:
            self._reset("connect failed", previous)
            raise

        self._attach(signer)
        self._account_id = accounts[0]
        self._network_id = chain_id
        self._balance = balance
        self._state = SessionState.CONNECTED
        logger.info("Wallet connected: %s on %s", self._account_id, self.network_name())
        self._publish(SessionEvent(SessionEventType.CONNECTED, self.snapshot()))
        return WalletConnection(account=accounts[0], chain_id=chain_id, balance=balance)

    async def disconnect(self) -> None:
        self._reset("explicit disconnect")

    def _reset(self, reason: str, previous: SessionSnapshot | None = None) -> None:
        """Clear all session fields; publish DISCONNECTED only if it was connected."""
        previous = previous or self.snapshot()
        self._state = SessionState.DISCONNECTED
        self._account_id = None
        self._network_id = None
        self._balance = None
        if not previous.connected:
            return
        logger.info("Wallet disconnected: %s", reason)
        self._publish(
            SessionEvent(SessionEventType.DISCONNECTED, self.snapshot(), previous, reason)
        )

    # ------------------------------------------------------------------
    # Network switching
    # ------------------------------------------------------------------

    async def switch_network(self, chain_id: int) -> None:
        """Ask the signer to switch; add the network and retry once if unknown."""
        signer = self._require_signer()
        self._registry.resolve(chain_id)
        try:
            await self._signer_call(signer.request_network_switch(chain_id))
        except SignerError as exc:
            if exc.signer_code != SignerError.UNRECOGNIZED_CHAIN:
                raise
            logger.info("Signer does not know chain %d, adding it", chain_id)
            await self.add_network(chain_id)
            await self._signer_call(signer.request_network_switch(chain_id))

    async def add_network(self, chain_id: int) -> None:
        signer = self._require_signer()
        network = self._registry.resolve(chain_id)
        await self._signer_call(signer.request_add_network(network.to_add_chain_params()))

    # ------------------------------------------------------------------
    # Signing / balance / submission
    # ------------------------------------------------------------------

    async def sign_message(self, message: str) -> str:
        snap = self.require_connected()
        signer = self._require_signer()
        payload = SignaturePayload(kind="personal", account=snap.account_id, message=message)
        return await self._signer_call(signer.request_signature(payload))

    async def sign_typed_data(
        self, domain: dict[str, Any], types: dict[str, Any], value: dict[str, Any]
    ) -> str:
        """EIP-712 signature; the primary type is the first non-domain key of ``types``."""
        snap = self.require_connected()
        signer = self._require_signer()
        typed_data = {
            "domain": domain,
            "types": types,
            "primaryType": next(name for name in types if name != "EIP712Domain"),
            "message": value,
        }
        payload = SignaturePayload(kind="typed", account=snap.account_id, typed_data=typed_data)
        return await self._signer_call(signer.request_signature(payload))

    async def get_balance(self, address: str | None = None) -> int:
        signer = self._require_signer()
        account = address or self._account_id
        if account is None:
            raise NotConnectedError()
        return await self._signer_call(signer.request_balance(account))

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        """Hand a fully-built call to the signer; returns the tx hash."""
        self.require_connected()
        signer = self._require_signer()
        return await self._signer_call(signer.send_transaction(tx))

    # ------------------------------------------------------------------
    # Event channel
    # ------------------------------------------------------------------

    def subscribe(self) -> "asyncio.Queue[SessionEvent]":
        """New bounded event channel; call ``unsubscribe`` when done with it.

        A subscriber that falls behind loses its oldest events, never the newest.
        """
        queue: asyncio.Queue[SessionEvent] = asyncio.Queue(maxsize=self._event_queue_size)
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: "asyncio.Queue[SessionEvent]") -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def _publish(self, event: SessionEvent) -> None:
        for queue in list(self._subscribers):
            if queue.full():
                dropped = queue.get_nowait()
                logger.warning("Session subscriber lagging, dropped %s event", dropped.type.value)
            queue.put_nowait(event)

    def _attach(self, signer: SignerProtocol) -> None:
        if self._attached:
            return
        signer.subscribe(ACCOUNTS_CHANGED, self.handle_accounts_changed)
        signer.subscribe(CHAIN_CHANGED, self.handle_chain_changed)
        self._attached = True

    def handle_accounts_changed(self, accounts: list[str]) -> None:
        if not accounts:
            self._reset("signer reported no accounts")
            return
        if not self.is_connected or accounts[0] == self._account_id:
            return
        previous = self.snapshot()
        self._account_id = accounts[0]
        logger.info("Account changed: %s -> %s", previous.account_id, self._account_id)
        self._publish(SessionEvent(SessionEventType.ACCOUNT_CHANGED, self.snapshot(), previous))

    def handle_chain_changed(self, chain_id: int | str) -> None:
        if not self.is_connected:
            return
        new_id = _parse_chain_id(chain_id)
        if new_id == self._network_id:
            return
        if not self._registry.is_supported(new_id):
            self._reset(f"signer switched to unsupported network {new_id}")
            return
        previous = self.snapshot()
        self._network_id = new_id
        logger.info("Network changed: %s -> %s", previous.network_id, new_id)
        self._publish(SessionEvent(SessionEventType.NETWORK_CHANGED, self.snapshot(), previous))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_signer(self) -> SignerProtocol:
        if self._signer is None:
            raise NoSignerAvailableError()
        return self._signer

    @staticmethod
    async def _signer_call(call: Awaitable[T]) -> T:
        try:
            return await call
        except SignerError as exc:
            if exc.signer_code == SignerError.USER_REJECTED:
                raise UserRejectedError(exc.raw) from exc
            raise
