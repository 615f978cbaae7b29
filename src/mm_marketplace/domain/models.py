"""Domain models for mm_marketplace: re-fetchable projections of ledger state.

Nothing here is a system of record; every instance is a snapshot read from
the marketplace contract. Amounts are wei.
"""

from dataclasses import dataclass

from eth_utils import to_checksum_address

from src.mm_common.enums import AuctionStatus, ListingStatus, OfferStatus

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class Listing:
    listing_id: int
    token_id: int
    asset_contract: str
    seller: str
    price: int
    created_at: int   # unix seconds
    active: bool

    @classmethod
    def from_tuple(cls, listing_id: int, raw: tuple) -> "Listing":
        token_id, asset_contract, seller, price, created_at, active = raw
        return cls(
            listing_id=listing_id,
            token_id=token_id,
            asset_contract=to_checksum_address(asset_contract),
            seller=to_checksum_address(seller),
            price=price,
            created_at=created_at,
            active=active,
        )

    @property
    def status(self) -> ListingStatus:
        return ListingStatus.ACTIVE if self.active else ListingStatus.TERMINAL


@dataclass(frozen=True)
class Auction:
    auction_id: int
    token_id: int
    asset_contract: str
    seller: str
    starting_price: int
    current_bid: int
    current_bidder: str
    start_time: int
    end_time: int
    active: bool
    ended: bool

    @classmethod
    def from_tuple(cls, auction_id: int, raw: tuple) -> "Auction":
        (token_id, asset_contract, seller, starting_price, current_bid,
         current_bidder, start_time, end_time, active, ended) = raw
        return cls(
            auction_id=auction_id,
            token_id=token_id,
            asset_contract=to_checksum_address(asset_contract),
            seller=to_checksum_address(seller),
            starting_price=starting_price,
            current_bid=current_bid,
            current_bidder=to_checksum_address(current_bidder),
            start_time=start_time,
            end_time=end_time,
            active=active,
            ended=ended,
        )

    @property
    def has_bid(self) -> bool:
        return self.current_bidder != ZERO_ADDRESS

    @property
    def minimum_next_bid(self) -> int:
        """Smallest bid the contract can accept (strictly above the current one)."""
        return self.current_bid + 1 if self.has_bid else self.starting_price

    def status(self, now: int) -> AuctionStatus:
        if self.ended or not self.active:
            return AuctionStatus.ENDED
        if now >= self.end_time:
            return AuctionStatus.AWAITING_END
        return AuctionStatus.ACTIVE

    def can_end(self, now: int) -> bool:
        return self.status(now) == AuctionStatus.AWAITING_END


@dataclass(frozen=True)
class Offer:
    offer_id: int
    offer_index: int
    token_id: int
    asset_contract: str
    offerer: str
    amount: int
    expiration: int
    active: bool

    @classmethod
    def from_tuple(cls, offer_id: int, offer_index: int, raw: tuple) -> "Offer":
        token_id, asset_contract, offerer, amount, expiration, active = raw
        return cls(
            offer_id=offer_id,
            offer_index=offer_index,
            token_id=token_id,
            asset_contract=to_checksum_address(asset_contract),
            offerer=to_checksum_address(offerer),
            amount=amount,
            expiration=expiration,
            active=active,
        )

    def is_expired(self, now: int) -> bool:
        return now > self.expiration

    def status(self, now: int) -> OfferStatus:
        # The ledger never flips `active` on expiry; expiry is terminal anyway
        if not self.active:
            return OfferStatus.ACCEPTED
        if self.is_expired(now):
            return OfferStatus.EXPIRED
        return OfferStatus.ACTIVE


@dataclass(frozen=True)
class PendingWithdrawal:
    account: str
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Pending withdrawal cannot be negative: {self.amount}")

    @property
    def is_empty(self) -> bool:
        return self.amount == 0
