"""Typed asset registry events decoded from receipts."""

from dataclasses import dataclass
from typing import Any

from eth_utils import to_checksum_address

from src.mm_asset.domain.contract import NFT_MINTED
from src.mm_chain.domain.events import LedgerEvent


@dataclass(frozen=True)
class AssetMinted(LedgerEvent):
    EVENT = NFT_MINTED

    token_id: int
    to: str
    royalty_recipient: str
    metadata_reference: str
    royalty_bps: int

    @classmethod
    def from_args(cls, args: dict[str, Any]) -> "AssetMinted":
        return cls(
            token_id=args["tokenId"],
            to=to_checksum_address(args["to"]),
            royalty_recipient=to_checksum_address(args["royaltyRecipient"]),
            metadata_reference=args["tokenURI"],
            royalty_bps=args["royaltyPercentage"],
        )
