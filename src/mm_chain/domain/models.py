"""Domain models for mm_chain: pure dataclasses, no transport dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.mm_common.datetime_utils import utc_now
from src.mm_common.enums import TxStatus


@dataclass(frozen=True)
class MutatingCallRequest:
    """One prepared ledger-mutating call. Immutable once built."""

    target: str            # contract address
    data: bytes            # 4-byte selector + ABI-encoded args
    value: int = 0         # wei attached to the call
    label: str = ""        # human tag for logs, e.g. "createListing"


@dataclass
class SubmittedTransaction:
    """Mutated only by the orchestrator's polling loop; frozen once terminal."""

    tx_hash: str
    submitted_by: str
    chain_id: int
    target: str
    value: int
    gas_limit: int
    label: str = ""
    status: TxStatus = TxStatus.PENDING
    confirmations_observed: int = 0
    submitted_at: datetime = field(default_factory=utc_now)

    @property
    def is_terminal(self) -> bool:
        return self.status != TxStatus.PENDING

    def observe(self, confirmations: int) -> None:
        self._require_pending()
        self.confirmations_observed = confirmations

    def mark_confirmed(self, confirmations: int) -> None:
        self._require_pending()
        self.confirmations_observed = confirmations
        self.status = TxStatus.CONFIRMED

    def mark_failed(self) -> None:
        self._require_pending()
        self.status = TxStatus.FAILED

    def _require_pending(self) -> None:
        if self.is_terminal:
            raise RuntimeError(f"Transaction {self.tx_hash} is already {self.status.value}")


@dataclass(frozen=True)
class LogEntry:
    address: str
    topics: tuple[bytes, ...]
    data: bytes
    log_index: int = 0
    block_number: int = 0
    tx_hash: str = ""


@dataclass(frozen=True)
class TxReceipt:
    """Receipt as returned by the node, before confirmation depth is known."""

    tx_hash: str
    block_number: int
    status: int            # 1 = success, 0 = reverted
    gas_used: int
    logs: tuple[LogEntry, ...] = ()
    contract_address: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class FinalReceipt:
    tx_hash: str
    block_number: int
    status: int
    gas_used: int
    logs: tuple[LogEntry, ...]
    confirmations: int

    @classmethod
    def from_receipt(cls, receipt: TxReceipt, confirmations: int) -> "FinalReceipt":
        return cls(
            tx_hash=receipt.tx_hash,
            block_number=receipt.block_number,
            status=receipt.status,
            gas_used=receipt.gas_used,
            logs=receipt.logs,
            confirmations=confirmations,
        )

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class ExecutionResult:
    """Confirmed receipt plus the typed events extracted from it."""

    receipt: FinalReceipt
    events: tuple = ()

    @property
    def tx_hash(self) -> str:
        return self.receipt.tx_hash

    @property
    def first(self):
        return self.events[0] if self.events else None
