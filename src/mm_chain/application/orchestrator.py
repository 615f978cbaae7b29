"""LedgerCallOrchestrator: submit a mutating call and wait for it to settle.

Steps for one call:
  1. Snapshot the session (account + network): never re-read mid-flight
  2. Estimate gas; a failed estimate is terminal (the call would revert)
  3. Apply the safety buffer, rounding up
  4. Submit through the session's signer
  5. Poll for a receipt on a fixed tick until it is deep enough, the wait
     times out, or the caller cancels. Cancelling stops the waiting only;
     the transaction itself stays on the network.
  6. Optionally decode the expected typed events from the receipt

Transport errors during polling are logged and retried on the next tick.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from config.settings import Settings
from src.mm_chain.domain.abi import ContractFunction
from src.mm_chain.domain.events import LedgerEvent
from src.mm_chain.domain.models import (
    ExecutionResult,
    FinalReceipt,
    MutatingCallRequest,
    SubmittedTransaction,
)
from src.mm_chain.domain.repository import LedgerClientProtocol, LedgerResolverProtocol
from src.mm_common.errors import (
    ConfirmationCancelledError,
    ConfirmationTimeoutError,
    EstimationFailedError,
    ExpectedEventMissingError,
    NetworkTransportError,
    RpcError,
    TransactionRevertedError,
)
from src.mm_session.application.service import AccountSession

logger = logging.getLogger(__name__)
tx_logger = logging.getLogger("mm.tx")

# Marker for "use OrchestratorConfig.confirmation_timeout".
CONFIGURED_TIMEOUT: Any = object()


@dataclass(frozen=True)
class OrchestratorConfig:
    poll_interval: float = 1.0
    gas_buffer_bps: int = 2000  # +20%
    min_confirmations: int = 1
    confirmation_timeout: float | None = 300.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrchestratorConfig":
        return cls(
            poll_interval=settings.TX_POLL_INTERVAL_SECONDS,
            gas_buffer_bps=settings.TX_GAS_BUFFER_BPS,
            min_confirmations=settings.TX_MIN_CONFIRMATIONS,
            confirmation_timeout=settings.TX_CONFIRMATION_TIMEOUT_SECONDS,
        )


def apply_gas_buffer(estimate: int, buffer_bps: int) -> int:
    """Ceiling of estimate * (1 + buffer_bps / 10000)."""
    return -(-estimate * (10_000 + buffer_bps) // 10_000)


class LedgerCallOrchestrator:
    def __init__(
        self,
        session: AccountSession,
        ledgers: LedgerResolverProtocol,
        config: OrchestratorConfig | None = None,
    ) -> None:
        self._session = session
        self._ledgers = ledgers
        self._config = config or OrchestratorConfig()

    @property
    def config(self) -> OrchestratorConfig:
        return self._config

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self, request: MutatingCallRequest) -> SubmittedTransaction:
        snap = self._session.require_connected()
        ledger = self._ledgers.for_network(snap.network_id)
        tx: dict[str, Any] = {
            "from": snap.account_id,
            "to": request.target,
            "data": request.data,
            "value": request.value,
        }

        try:
            estimate = await ledger.estimate_gas(tx)
        except RpcError as exc:
            logger.info("Estimation failed for %s: %s", request.label or request.target, exc.raw)
            raise EstimationFailedError(exc.raw) from exc

        gas_limit = apply_gas_buffer(estimate, self._config.gas_buffer_bps)
        tx_hash = await self._session.send_transaction({**tx, "gas": gas_limit})

        tx_logger.info(
            "[submit] %s %s to=%s value=%d gas=%d",
            request.label or "call", tx_hash, request.target, request.value, gas_limit,
        )
        return SubmittedTransaction(
            tx_hash=tx_hash,
            submitted_by=snap.account_id,
            chain_id=snap.network_id,
            target=request.target,
            value=request.value,
            gas_limit=gas_limit,
            label=request.label,
        )

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    async def await_confirmation(
        self,
        tx: SubmittedTransaction,
        min_confirmations: int | None = None,
        timeout: float | None = CONFIGURED_TIMEOUT,
        cancel: asyncio.Event | None = None,
    ) -> FinalReceipt:
        """Poll until ``block_height - receipt.block >= min_confirmations``.

        ``timeout`` defaults to the configured timeout; ``None`` waits forever.
        """
        depth = self._config.min_confirmations if min_confirmations is None else min_confirmations
        limit = self._config.confirmation_timeout if timeout is CONFIGURED_TIMEOUT else timeout
        ledger = self._ledgers.for_network(tx.chain_id)
        loop = asyncio.get_running_loop()
        deadline = None if limit is None else loop.time() + limit

        while True:
            receipt = await self._poll_once(ledger, tx, depth)
            if receipt is not None:
                return receipt

            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                tx_logger.warning("[timeout] %s after %ss", tx.tx_hash, limit)
                raise ConfirmationTimeoutError(tx.tx_hash, limit)
            wait_for = self._config.poll_interval
            if remaining is not None:
                wait_for = min(wait_for, remaining)
            if await self._wait_tick(wait_for, cancel):
                tx_logger.info("[cancelled] %s", tx.tx_hash)
                raise ConfirmationCancelledError(tx.tx_hash)

    async def _poll_once(
        self, ledger: LedgerClientProtocol, tx: SubmittedTransaction, depth: int
    ) -> FinalReceipt | None:
        try:
            receipt = await ledger.get_transaction_receipt(tx.tx_hash)
            if receipt is None:
                return None
            height = await ledger.block_number()
        except NetworkTransportError as exc:
            logger.warning("Polling %s failed, retrying: %s", tx.tx_hash, exc.raw)
            return None

        if not receipt.succeeded:
            tx.mark_failed()
            tx_logger.info("[reverted] %s in block %d", tx.tx_hash, receipt.block_number)
            raise TransactionRevertedError(tx.tx_hash, f"status=0 in block {receipt.block_number}")

        confirmations = height - receipt.block_number
        if confirmations < depth:
            tx.observe(max(confirmations, 0))
            return None

        tx.mark_confirmed(confirmations)
        tx_logger.info(
            "[confirmed] %s block=%d confirmations=%d gas_used=%d",
            tx.tx_hash, receipt.block_number, confirmations, receipt.gas_used,
        )
        return FinalReceipt.from_receipt(receipt, confirmations)

    @staticmethod
    async def _wait_tick(interval: float, cancel: asyncio.Event | None) -> bool:
        """Sleep one tick; return True if ``cancel`` fired first."""
        if cancel is None:
            await asyncio.sleep(interval)
            return False
        if cancel.is_set():
            return True
        try:
            await asyncio.wait_for(cancel.wait(), timeout=interval)
        except asyncio.TimeoutError:
            return False
        return True

    # ------------------------------------------------------------------
    # Event extraction
    # ------------------------------------------------------------------

    @staticmethod
    def extract(
        receipt: FinalReceipt,
        event_type: type[LedgerEvent],
        emitter: str | None = None,
        batch: bool = False,
    ) -> tuple[LedgerEvent, ...]:
        """Typed events of ``event_type`` in emission order (first only unless batch)."""
        found = event_type.extract(receipt.logs, emitter)
        if not found:
            raise ExpectedEventMissingError(event_type.EVENT.name, receipt.tx_hash)
        return tuple(found) if batch else (found[0],)

    async def execute(
        self,
        request: MutatingCallRequest,
        expect: type[LedgerEvent] | None = None,
        batch: bool = False,
        min_confirmations: int | None = None,
        timeout: float | None = CONFIGURED_TIMEOUT,
        cancel: asyncio.Event | None = None,
    ) -> ExecutionResult:
        """submit + await_confirmation + optional typed event extraction."""
        tx = await self.submit(request)
        receipt = await self.await_confirmation(tx, min_confirmations, timeout, cancel)
        events: tuple[LedgerEvent, ...] = ()
        if expect is not None:
            events = self.extract(receipt, expect, emitter=request.target, batch=batch)
        return ExecutionResult(receipt=receipt, events=events)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    async def call(self, target: str, function: ContractFunction, *args: Any) -> tuple:
        """eth_call against the session's current network; decoded outputs."""
        snap = self._session.require_connected()
        ledger = self._ledgers.for_network(snap.network_id)
        data = await ledger.call(
            {"from": snap.account_id, "to": target, "data": function.encode_call(*args)}
        )
        return function.decode_output(data)

    async def get_gas_price(self) -> int:
        snap = self._session.require_connected()
        return await self._ledgers.for_network(snap.network_id).gas_price()
