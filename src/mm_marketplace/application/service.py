"""MarketplaceService: listing / auction / offer lifecycle on the ledger.

Every mutating operation validates local preconditions first (connected
session, parseable amounts, positive durations), then builds one
MutatingCallRequest and hands it to the orchestrator. Ledger-side rules
(listing still active, bid strictly above current, auction past end time)
are enforced by the contract; their revert reasons propagate untouched.

Entity transitions:
  Listing: ACTIVE --buy_item / cancel_listing--> TERMINAL
  Auction: ACTIVE --place_bid--> ACTIVE; ACTIVE --end_auction (after end)--> ENDED
  Offer:   ACTIVE --accept_offer--> ACCEPTED; ACTIVE --time--> EXPIRED (advisory)
"""

import logging

from eth_utils import to_checksum_address

from src.mm_chain.application.orchestrator import LedgerCallOrchestrator
from src.mm_chain.domain.abi import ContractFunction
from src.mm_chain.domain.models import MutatingCallRequest
from src.mm_common.datetime_utils import unix_now
from src.mm_common.errors import InvalidDurationError, NothingToWithdrawError, OfferExpiredError
from src.mm_common.units import (
    apply_basis_points,
    bps_to_percent,
    from_smallest_unit,
    to_smallest_unit,
    validate_bps,
)
from src.mm_marketplace.domain import contract
from src.mm_marketplace.domain.events import AuctionCreated, ListingCreated, OfferMade
from src.mm_marketplace.domain.models import Auction, Listing, Offer, PendingWithdrawal
from src.mm_session.application.service import AccountSession

logger = logging.getLogger(__name__)


class MarketplaceService:
    def __init__(self, orchestrator: LedgerCallOrchestrator, session: AccountSession) -> None:
        self._orchestrator = orchestrator
        self._session = session

    def _marketplace_address(self) -> str:
        snap = self._session.require_connected()
        return self._session.registry.resolve(snap.network_id).marketplace_contract

    def _request(self, fn: ContractFunction, *args, value: int = 0) -> MutatingCallRequest:
        return MutatingCallRequest(
            target=self._marketplace_address(),
            data=fn.encode_call(*args),
            value=value,
            label=fn.name,
        )

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def create_listing(self, token_id: int, asset_contract: str, price: str) -> int:
        self._session.require_connected()
        price_wei = to_smallest_unit(price)
        request = self._request(
            contract.CREATE_LISTING, token_id, to_checksum_address(asset_contract), price_wei
        )
        result = await self._orchestrator.execute(request, expect=ListingCreated)
        listing_id = result.first.listing_id
        logger.info("Listing created. id=%d tx=%s", listing_id, result.tx_hash)
        return listing_id

    async def buy_item(self, listing_id: int, price: str) -> str:
        self._session.require_connected()
        request = self._request(contract.BUY_ITEM, listing_id, value=to_smallest_unit(price))
        result = await self._orchestrator.execute(request)
        logger.info("Item purchased. listing=%d tx=%s", listing_id, result.tx_hash)
        return result.tx_hash

    async def cancel_listing(self, listing_id: int) -> str:
        request = self._request(contract.CANCEL_LISTING, listing_id)
        result = await self._orchestrator.execute(request)
        logger.info("Listing cancelled. id=%d tx=%s", listing_id, result.tx_hash)
        return result.tx_hash

    # ------------------------------------------------------------------
    # Auctions
    # ------------------------------------------------------------------

    async def create_auction(
        self, token_id: int, asset_contract: str, starting_price: str, duration_seconds: int
    ) -> int:
        self._session.require_connected()
        if duration_seconds <= 0:
            raise InvalidDurationError(duration_seconds)
        request = self._request(
            contract.CREATE_AUCTION,
            token_id,
            to_checksum_address(asset_contract),
            to_smallest_unit(starting_price),
            duration_seconds,
        )
        result = await self._orchestrator.execute(request, expect=AuctionCreated)
        auction_id = result.first.auction_id
        logger.info("Auction created. id=%d tx=%s", auction_id, result.tx_hash)
        return auction_id

    async def place_bid(self, auction_id: int, bid_amount: str) -> str:
        # No local check against the current bid: a stale read would race the ledger
        self._session.require_connected()
        request = self._request(contract.PLACE_BID, auction_id, value=to_smallest_unit(bid_amount))
        result = await self._orchestrator.execute(request)
        logger.info("Bid placed. auction=%d amount=%s tx=%s", auction_id, bid_amount, result.tx_hash)
        return result.tx_hash

    async def end_auction(self, auction_id: int) -> str:
        request = self._request(contract.END_AUCTION, auction_id)
        result = await self._orchestrator.execute(request)
        logger.info("Auction ended. id=%d tx=%s", auction_id, result.tx_hash)
        return result.tx_hash

    # ------------------------------------------------------------------
    # Offers
    # ------------------------------------------------------------------

    async def make_offer(
        self, token_id: int, asset_contract: str, offer_amount: str, expiration: int
    ) -> int:
        self._session.require_connected()
        request = self._request(
            contract.MAKE_OFFER,
            token_id,
            to_checksum_address(asset_contract),
            expiration,
            value=to_smallest_unit(offer_amount),
        )
        result = await self._orchestrator.execute(request, expect=OfferMade)
        offer_id = result.first.offer_id
        logger.info("Offer made. id=%d amount=%s tx=%s", offer_id, offer_amount, result.tx_hash)
        return offer_id

    async def accept_offer(
        self, offer_id: int, offer_index: int, fetched: Offer | None = None
    ) -> str:
        """Accept ``get_offers(offer_id)[offer_index]``.

        The index can drift if offers change between read and accept; fetch
        the list right before calling. Passing that fetched offer lets an
        already-expired offer fail locally instead of on the ledger.
        """
        self._session.require_connected()
        if fetched is not None and fetched.is_expired(unix_now()):
            raise OfferExpiredError(offer_id, offer_index, fetched.expiration)
        request = self._request(contract.ACCEPT_OFFER, offer_id, offer_index)
        result = await self._orchestrator.execute(request)
        logger.info("Offer accepted. id=%d index=%d tx=%s", offer_id, offer_index, result.tx_hash)
        return result.tx_hash

    # ------------------------------------------------------------------
    # Withdrawals
    # ------------------------------------------------------------------

    async def withdraw(self, cached_pending: int | None = None) -> str:
        """Withdraw pending proceeds; a zero balance fails before any call is built."""
        snap = self._session.require_connected()
        if cached_pending is None:
            pending = (await self.get_pending_withdrawal(snap.account_id)).amount
        else:
            pending = cached_pending
        if pending == 0:
            raise NothingToWithdrawError(snap.account_id)

        result = await self._orchestrator.execute(self._request(contract.WITHDRAW))
        logger.info(
            "Withdrawal successful. amount=%s tx=%s", from_smallest_unit(pending), result.tx_hash
        )
        return result.tx_hash

    async def get_pending_withdrawal(self, account: str | None = None) -> PendingWithdrawal:
        snap = self._session.require_connected()
        owner = account or snap.account_id
        (amount,) = await self._orchestrator.call(
            self._marketplace_address(), contract.PENDING_WITHDRAWALS, owner
        )
        return PendingWithdrawal(account=owner, amount=amount)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_listing(self, listing_id: int) -> Listing:
        (raw,) = await self._orchestrator.call(
            self._marketplace_address(), contract.GET_LISTING, listing_id
        )
        return Listing.from_tuple(listing_id, raw)

    async def get_auction(self, auction_id: int) -> Auction:
        (raw,) = await self._orchestrator.call(
            self._marketplace_address(), contract.GET_AUCTION, auction_id
        )
        return Auction.from_tuple(auction_id, raw)

    async def get_offers(self, offer_id: int) -> list[Offer]:
        (raws,) = await self._orchestrator.call(
            self._marketplace_address(), contract.GET_OFFERS, offer_id
        )
        return [Offer.from_tuple(offer_id, i, raw) for i, raw in enumerate(raws)]

    # ------------------------------------------------------------------
    # Fees
    # ------------------------------------------------------------------

    async def get_platform_fee_bps(self) -> int:
        (bps,) = await self._orchestrator.call(
            self._marketplace_address(), contract.PLATFORM_FEE_PERCENT
        )
        return bps

    async def get_platform_fee_percent(self) -> float:
        return bps_to_percent(await self.get_platform_fee_bps())

    async def calculate_platform_fee(self, price: str) -> str:
        """Fee for ``price`` at the ledger's current rate: '0.1' @ 250bps -> '0.0025'."""
        price_wei = to_smallest_unit(price)
        bps = await self.get_platform_fee_bps()
        return from_smallest_unit(apply_basis_points(price_wei, bps))

    @staticmethod
    def calculate_royalty(price: str, royalty_bps: int) -> str:
        validate_bps(royalty_bps)
        return from_smallest_unit(apply_basis_points(to_smallest_unit(price), royalty_bps))
