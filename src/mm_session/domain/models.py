"""Domain models for mm_session: pure dataclasses."""

from dataclasses import dataclass

from src.mm_common.enums import SessionEventType, SessionState


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time copy of the session; in-flight calls hold one of these."""

    state: SessionState
    account_id: str | None
    network_id: int | None

    @property
    def connected(self) -> bool:
        return self.state == SessionState.CONNECTED


@dataclass(frozen=True)
class WalletConnection:
    account: str
    chain_id: int
    balance: int  # wei at connect time


@dataclass(frozen=True)
class SessionEvent:
    type: SessionEventType
    snapshot: SessionSnapshot
    previous: SessionSnapshot | None = None
    reason: str = ""
