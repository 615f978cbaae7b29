"""Typed ledger events.

Each concrete event is a frozen dataclass bound to one ABI event via the
``EVENT`` class attribute. Receipts are decoded into these variants at the
orchestrator boundary, so callers never touch raw log blobs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from src.mm_chain.domain.abi import ContractEvent
from src.mm_chain.domain.models import LogEntry


@dataclass(frozen=True)
class LedgerEvent(ABC):
    EVENT: ClassVar[ContractEvent]

    @classmethod
    @abstractmethod
    def from_args(cls, args: dict[str, Any]) -> "LedgerEvent":
        """Build the typed event from decoded ABI arguments."""

    @classmethod
    def extract(cls, logs: tuple[LogEntry, ...], emitter: str | None = None) -> list["LedgerEvent"]:
        """Decode every matching log, in emission order."""
        ordered = sorted(logs, key=lambda log: log.log_index)
        return [
            cls.from_args(cls.EVENT.decode(log))
            for log in ordered
            if cls.EVENT.matches(log, emitter)
        ]
