"""Typed marketplace events decoded from receipts."""

from dataclasses import dataclass
from typing import Any

from eth_utils import to_checksum_address

from src.mm_chain.domain.events import LedgerEvent
from src.mm_marketplace.domain.contract import AUCTION_CREATED, ITEM_LISTED, OFFER_MADE


@dataclass(frozen=True)
class ListingCreated(LedgerEvent):
    EVENT = ITEM_LISTED

    listing_id: int
    token_id: int
    asset_contract: str
    seller: str
    price: int

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> "ListingCreated":
        return cls(
            listing_id=args["listingId"],
            token_id=args["tokenId"],
            asset_contract=to_checksum_address(args["nftContract"]),
            seller=to_checksum_address(args["seller"]),
            price=args["price"],
        )


@dataclass(frozen=True)
class AuctionCreated(LedgerEvent):
    EVENT = AUCTION_CREATED

    auction_id: int
    token_id: int
    asset_contract: str
    seller: str
    starting_price: int
    end_time: int

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> "AuctionCreated":
        return cls(
            auction_id=args["auctionId"],
            token_id=args["tokenId"],
            asset_contract=to_checksum_address(args["nftContract"]),
            seller=to_checksum_address(args["seller"]),
            starting_price=args["startingPrice"],
            end_time=args["endTime"],
        )


@dataclass(frozen=True)
class OfferMade(LedgerEvent):
    EVENT = OFFER_MADE

    offer_id: int
    token_id: int
    offerer: str
    asset_contract: str
    amount: int
    expiration: int

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> "OfferMade":
        return cls(
            offer_id=args["offerId"],
            token_id=args["tokenId"],
            offerer=to_checksum_address(args["offerer"]),
            asset_contract=to_checksum_address(args["nftContract"]),
            amount=args["amount"],
            expiration=args["expiration"],
        )
