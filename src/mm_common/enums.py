"""Global enums shared across modules."""

from enum import Enum


class SessionState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


class SessionEventType(str, Enum):
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"
    ACCOUNT_CHANGED = "ACCOUNT_CHANGED"
    NETWORK_CHANGED = "NETWORK_CHANGED"


class TxStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class ListingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    # Sold and cancelled listings are indistinguishable on-ledger: active=false
    TERMINAL = "TERMINAL"


class AuctionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    # Past end_time but endAuction not yet called
    AWAITING_END = "AWAITING_END"
    ENDED = "ENDED"


class OfferStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
