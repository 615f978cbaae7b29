"""EpicMint marketplace contract ABI (only what the client calls)."""

from src.mm_chain.domain.abi import ContractEvent, ContractFunction, EventParam

_LISTING_T = "(uint256,address,address,uint256,uint256,bool)"
_AUCTION_T = "(uint256,address,address,uint256,uint256,address,uint256,uint256,bool,bool)"
_OFFER_T = "(uint256,address,address,uint256,uint256,bool)"

# --- Mutating ---
CREATE_LISTING = ContractFunction("createListing", ("uint256", "address", "uint256"))
BUY_ITEM = ContractFunction("buyItem", ("uint256",), payable=True)
CANCEL_LISTING = ContractFunction("cancelListing", ("uint256",))
CREATE_AUCTION = ContractFunction("createAuction", ("uint256", "address", "uint256", "uint256"))
PLACE_BID = ContractFunction("placeBid", ("uint256",), payable=True)
END_AUCTION = ContractFunction("endAuction", ("uint256",))
MAKE_OFFER = ContractFunction("makeOffer", ("uint256", "address", "uint256"), payable=True)
ACCEPT_OFFER = ContractFunction("acceptOffer", ("uint256", "uint256"))
WITHDRAW = ContractFunction("withdraw")

# --- Views ---
GET_LISTING = ContractFunction("getListing", ("uint256",), (_LISTING_T,))
GET_AUCTION = ContractFunction("getAuction", ("uint256",), (_AUCTION_T,))
GET_OFFERS = ContractFunction("getOffers", ("uint256",), (f"{_OFFER_T}[]",))
PENDING_WITHDRAWALS = ContractFunction("pendingWithdrawals", ("address",), ("uint256",))
PLATFORM_FEE_PERCENT = ContractFunction("platformFeePercent", (), ("uint256",))

# --- Events ---
ITEM_LISTED = ContractEvent(
    "ItemListed",
    (
        EventParam("listingId", "uint256", indexed=True),
        EventParam("tokenId", "uint256", indexed=True),
        EventParam("nftContract", "address", indexed=True),
        EventParam("seller", "address"),
        EventParam("price", "uint256"),
    ),
)
AUCTION_CREATED = ContractEvent(
    "AuctionCreated",
    (
        EventParam("auctionId", "uint256", indexed=True),
        EventParam("tokenId", "uint256", indexed=True),
        EventParam("nftContract", "address", indexed=True),
        EventParam("seller", "address"),
        EventParam("startingPrice", "uint256"),
        EventParam("endTime", "uint256"),
    ),
)
OFFER_MADE = ContractEvent(
    "OfferMade",
    (
        EventParam("offerId", "uint256", indexed=True),
        EventParam("tokenId", "uint256", indexed=True),
        EventParam("offerer", "address", indexed=True),
        EventParam("nftContract", "address"),
        EventParam("amount", "uint256"),
        EventParam("expiration", "uint256"),
    ),
)
