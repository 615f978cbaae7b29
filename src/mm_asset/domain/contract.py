"""EpicMint asset (ERC-721 + ERC-2981) contract ABI."""

from src.mm_chain.domain.abi import ContractEvent, ContractFunction, EventParam

# --- Mutating ---
MINT_NFT = ContractFunction("mintNFT", ("address", "string", "address", "uint96"))
BATCH_MINT_NFT = ContractFunction(
    "batchMintNFT", ("address[]", "string[]", "address[]", "uint96[]")
)
SAFE_TRANSFER_FROM = ContractFunction("safeTransferFrom", ("address", "address", "uint256"))
BURN = ContractFunction("burn", ("uint256",))
APPROVE = ContractFunction("approve", ("address", "uint256"))
SET_APPROVAL_FOR_ALL = ContractFunction("setApprovalForAll", ("address", "bool"))

# --- Views ---
OWNER_OF = ContractFunction("ownerOf", ("uint256",), ("address",))
TOKEN_URI = ContractFunction("tokenURI", ("uint256",), ("string",))
ROYALTY_INFO = ContractFunction("royaltyInfo", ("uint256", "uint256"), ("address", "uint256"))
IS_APPROVED_FOR_ALL = ContractFunction("isApprovedForAll", ("address", "address"), ("bool",))
GET_TOKENS_BY_OWNER = ContractFunction("getTokensByOwner", ("address",), ("uint256[]",))
GET_CURRENT_TOKEN_ID = ContractFunction("getCurrentTokenId", (), ("uint256",))

# --- Events ---
NFT_MINTED = ContractEvent(
    "NFTMinted",
    (
        EventParam("tokenId", "uint256", indexed=True),
        EventParam("to", "address", indexed=True),
        EventParam("royaltyRecipient", "address", indexed=True),
        EventParam("tokenURI", "string"),
        EventParam("royaltyPercentage", "uint96"),
    ),
)
