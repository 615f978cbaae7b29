"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Amount / unit conversion
  2xxx: Session / signer / network registry
  3xxx: Ledger call orchestration
  4xxx: Marketplace
  5xxx: Asset registry
  6xxx: Content pinning
  9xxx: Transport / system

Every error keeps the raw collaborator or ledger message in ``raw`` so that
revert reasons reach the caller untouched.
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        raw: str | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.raw = raw
        super().__init__(message if raw is None else f"{message} ({raw})")


# --- 1xxx: Amount ---

class InvalidAmountError(AppError):
    def __init__(self, value: object, reason: str) -> None:
        super().__init__(1001, f"Invalid amount {value!r}: {reason}")


class InvalidBasisPointsError(AppError):
    def __init__(self, bps: int) -> None:
        super().__init__(1002, f"Basis points out of range [0, 10000]: {bps}")


# --- 2xxx: Session / network ---

class UnsupportedNetworkError(AppError):
    def __init__(self, chain_id: int) -> None:
        super().__init__(2001, f"Unsupported network: {chain_id}")


class NoSignerAvailableError(AppError):
    def __init__(self, raw: str | None = None) -> None:
        super().__init__(2002, "No signer available", raw)


class UserRejectedError(AppError):
    def __init__(self, raw: str | None = None) -> None:
        super().__init__(2003, "Request rejected by user", raw)


class NotConnectedError(AppError):
    def __init__(self) -> None:
        super().__init__(2004, "Wallet not connected")


class SignerError(AppError):
    """Raw error reported by a signer, with its EIP-1193 style code."""

    USER_REJECTED = 4001
    UNRECOGNIZED_CHAIN = 4902

    def __init__(self, signer_code: int, raw: str) -> None:
        self.signer_code = signer_code
        super().__init__(2005, f"Signer error {signer_code}", raw)


# --- 3xxx: Ledger call orchestration ---

class EstimationFailedError(AppError):
    def __init__(self, raw: str | None = None) -> None:
        super().__init__(3001, "Gas estimation failed, call would likely revert", raw)


class ExpectedEventMissingError(AppError):
    def __init__(self, event_name: str, tx_hash: str) -> None:
        super().__init__(3002, f"Expected event {event_name} missing from receipt of {tx_hash}")


class TransactionRevertedError(AppError):
    def __init__(self, tx_hash: str, raw: str | None = None) -> None:
        self.tx_hash = tx_hash
        super().__init__(3003, f"Transaction reverted: {tx_hash}", raw)


class ConfirmationCancelledError(AppError):
    def __init__(self, tx_hash: str) -> None:
        self.tx_hash = tx_hash
        super().__init__(3004, f"Stopped waiting for {tx_hash}: cancelled")


class ConfirmationTimeoutError(AppError):
    def __init__(self, tx_hash: str, timeout: float) -> None:
        self.tx_hash = tx_hash
        super().__init__(3005, f"Stopped waiting for {tx_hash}: timed out after {timeout}s")


# --- 4xxx: Marketplace ---

class NothingToWithdrawError(AppError):
    def __init__(self, account: str) -> None:
        super().__init__(4001, f"No pending withdrawals for {account}")


class InvalidDurationError(AppError):
    def __init__(self, duration: int) -> None:
        super().__init__(4002, f"Auction duration must be > 0 seconds, got {duration}")


class OfferExpiredError(AppError):
    def __init__(self, offer_id: int, offer_index: int, expiration: int) -> None:
        super().__init__(
            4003, f"Offer {offer_id}[{offer_index}] expired at {expiration}"
        )


# --- 5xxx: Asset registry ---

class NotOwnerError(AppError):
    def __init__(self, token_id: int, owner: str, account: str) -> None:
        super().__init__(
            5001, f"Account {account} does not own token {token_id} (owner: {owner})"
        )


# --- 6xxx: Pinning ---

class InvalidMetadataError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(6001, f"Invalid metadata: {detail}")


class PinningError(AppError):
    def __init__(self, raw: str | None = None) -> None:
        super().__init__(6002, "Pinning upload failed", raw)


# --- 9xxx: Transport / system ---

class NetworkTransportError(AppError):
    def __init__(self, raw: str | None = None) -> None:
        super().__init__(9001, "Network transport error", raw)


class RpcError(AppError):
    """JSON-RPC error object returned by a ledger node."""

    def __init__(self, rpc_code: int, rpc_message: str, data: Any = None) -> None:
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message
        self.data = data
        super().__init__(9002, f"RPC error {rpc_code}", rpc_message)
